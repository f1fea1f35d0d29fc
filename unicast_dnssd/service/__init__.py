"""Service data model: types, names, resolved data and TXT properties."""

from unicast_dnssd.service.service_data import ServiceData
from unicast_dnssd.service.service_name import ServiceName
from unicast_dnssd.service.service_type import ServiceType, Transport

__all__ = ["ServiceData", "ServiceName", "ServiceType", "Transport"]
