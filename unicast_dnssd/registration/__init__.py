"""Service registration through dynamic DNS updates."""

from unicast_dnssd.registration.automatic_unregister import AutomaticUnregister
from unicast_dnssd.registration.registration_result import (
    CleanupOutcome,
    UnregisterOutcome,
    UnregistrationResult,
)
from unicast_dnssd.registration.registrator import (
    DnsSDRegistrator,
    UnicastDnsSDRegistrator,
)

__all__ = [
    "AutomaticUnregister",
    "CleanupOutcome",
    "DnsSDRegistrator",
    "UnicastDnsSDRegistrator",
    "UnregisterOutcome",
    "UnregistrationResult",
]
