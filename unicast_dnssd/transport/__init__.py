"""Query and dynamic update transports."""

from unicast_dnssd.transport.dns_query_transport import DnsQueryTransport
from unicast_dnssd.transport.dns_update import (
    Deletion,
    DnsUpdate,
    Prerequisite,
    ResourceRecord,
)
from unicast_dnssd.transport.dns_update_transport import (
    DnsUpdateTransport,
    UpdateEndpoint,
    UpdateTransportFactory,
)
from unicast_dnssd.transport.dnspython_update_transport import (
    DnsPythonUpdateTransport,
    default_update_endpoint,
)
from unicast_dnssd.transport.resolver_query_transport import (
    ResolverQueryTransport,
)
from unicast_dnssd.transport.tsig_key import TsigKey

__all__ = [
    "Deletion",
    "DnsPythonUpdateTransport",
    "DnsQueryTransport",
    "DnsUpdate",
    "DnsUpdateTransport",
    "Prerequisite",
    "ResolverQueryTransport",
    "ResourceRecord",
    "TsigKey",
    "UpdateEndpoint",
    "UpdateTransportFactory",
    "default_update_endpoint",
]
