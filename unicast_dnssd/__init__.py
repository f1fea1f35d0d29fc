"""DNS-based Service Discovery (RFC 6763) over unicast DNS."""

from unicast_dnssd.config.dnssd_config import DnsSDConfig
from unicast_dnssd.discovery.browser import DnsSDBrowser, UnicastDnsSDBrowser
from unicast_dnssd.discovery.domain_enumerator import (
    DnsSDDomainEnumerator,
    UnicastDnsSDDomainEnumerator,
)
from unicast_dnssd.errors import (
    DnsSDError,
    InvalidArgumentError,
    InvalidFormatError,
    InvalidNameError,
    InvalidTransportError,
    NameTooLongError,
    NoRegistrationDomainError,
    ProtocolError,
    RegistrationError,
    TransportError,
    UnregistrationError,
)
from unicast_dnssd.factory import DnsSDFactory
from unicast_dnssd.registration.automatic_unregister import AutomaticUnregister
from unicast_dnssd.registration.registrator import (
    DnsSDRegistrator,
    UnicastDnsSDRegistrator,
)
from unicast_dnssd.service.service_data import ServiceData
from unicast_dnssd.service.service_name import ServiceName
from unicast_dnssd.service.service_type import ServiceType, Transport
from unicast_dnssd.transport.tsig_key import TsigKey

__all__ = [
    "AutomaticUnregister",
    "DnsSDBrowser",
    "DnsSDConfig",
    "DnsSDDomainEnumerator",
    "DnsSDError",
    "DnsSDFactory",
    "DnsSDRegistrator",
    "InvalidArgumentError",
    "InvalidFormatError",
    "InvalidNameError",
    "InvalidTransportError",
    "NameTooLongError",
    "NoRegistrationDomainError",
    "ProtocolError",
    "RegistrationError",
    "ServiceData",
    "ServiceName",
    "ServiceType",
    "Transport",
    "TransportError",
    "TsigKey",
    "UnicastDnsSDBrowser",
    "UnicastDnsSDDomainEnumerator",
    "UnicastDnsSDRegistrator",
    "UnregistrationError",
]
