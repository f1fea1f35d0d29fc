"""Domain enumeration and service browsing."""

from unicast_dnssd.discovery.browser import DnsSDBrowser, UnicastDnsSDBrowser
from unicast_dnssd.discovery.domain_enumerator import (
    DnsSDDomainEnumerator,
    UnicastDnsSDDomainEnumerator,
)

__all__ = [
    "DnsSDBrowser",
    "DnsSDDomainEnumerator",
    "UnicastDnsSDBrowser",
    "UnicastDnsSDDomainEnumerator",
]
