"""Defines ServiceData, the resolved location and metadata of a service."""

import dataclasses
from typing import Dict, Optional

from unicast_dnssd.service.service_name import ServiceName


@dataclasses.dataclass
class ServiceData:
    """Host, port and TXT properties of a service instance.

    `properties` maps keys to string values. A value of None marks a
    key-only (boolean) attribute.
    """

    name: ServiceName
    host: str = ""
    port: int = 0
    properties: Dict[str, Optional[str]] = dataclasses.field(
        default_factory=dict
    )

    def __str__(self) -> str:
        return f"{self.name}: {self.host}:{self.port} {self.properties}"
