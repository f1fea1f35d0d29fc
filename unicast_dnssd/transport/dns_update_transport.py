"""DnsUpdateTransport ABC and the UpdateEndpoint it sends to."""

import dataclasses
from abc import ABC, abstractmethod
from typing import Callable, Optional

import dns.rcode

from unicast_dnssd.transport.dns_update import DnsUpdate
from unicast_dnssd.transport.tsig_key import TsigKey

DNS_PORT = 53


@dataclasses.dataclass(frozen=True)
class UpdateEndpoint:
    """Address and port of the server accepting dynamic updates."""

    address: str
    port: int = DNS_PORT

    def __str__(self) -> str:
        return f"{self.address}:{self.port}"


# pylint: disable=R0903 # Interface definition
class DnsUpdateTransport(ABC):
    """Sends dynamic update transactions and reports the response code."""

    @abstractmethod
    def send_update(
        self, update: DnsUpdate, tsig_key: Optional[TsigKey] = None
    ) -> dns.rcode.Rcode:
        """Sends `update`, signed with `tsig_key` when one is given.

        Returns:
            The response code of the server. A failed prerequisite is a
            response code (YXDOMAIN or NXDOMAIN), not an exception.

        Raises:
            TransportError: If no response could be obtained.
        """
        raise NotImplementedError(
            "DnsUpdateTransport.send_update must be implemented by subclasses."
        )


# Receives the endpoint found through `_dns-update._udp` SRV discovery, or
# None when the default endpoint should be used.
UpdateTransportFactory = Callable[[Optional[UpdateEndpoint]], DnsUpdateTransport]
