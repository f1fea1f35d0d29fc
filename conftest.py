import pytest

from unicast_dnssd.test.fake_dns_zone import FakeDnsZone


@pytest.fixture
def fake_zone() -> FakeDnsZone:
    """An empty in-memory zone serving as both query and update transport."""
    return FakeDnsZone()
