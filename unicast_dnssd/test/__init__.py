# unicast_dnssd - Test Utilities
# Allows "from unicast_dnssd.test import ..." for fakes shared across tests.

from unicast_dnssd.test.fake_dns_zone import FakeDnsZone, make_rdata

__all__ = [
    "FakeDnsZone",
    "make_rdata",
]
