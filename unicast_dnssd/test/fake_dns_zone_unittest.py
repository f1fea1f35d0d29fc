import dns.name
import dns.rcode
import dns.rdatatype
import pytest

from unicast_dnssd.errors import TransportError
from unicast_dnssd.test.fake_dns_zone import FakeDnsZone, make_rdata
from unicast_dnssd.transport.dns_update import (
    Deletion,
    DnsUpdate,
    Prerequisite,
    ResourceRecord,
)

ZONE = dns.name.from_text("example.com.")
NAME = dns.name.from_text("x.example.com.")


class TestFakeDnsZone:
    def test_query(self):
        zone = FakeDnsZone()
        zone.add(NAME, "TXT", '"a=1"')
        assert zone.query(NAME, dns.rdatatype.TXT) == [make_rdata("TXT", '"a=1"')]
        assert zone.query(NAME, dns.rdatatype.SRV) == []
        assert zone.queries == [
            (NAME, dns.rdatatype.TXT),
            (NAME, dns.rdatatype.SRV),
        ]

    def test_identical_records_stored_once(self):
        zone = FakeDnsZone()
        zone.add_ptr("p.example.com.", "t.example.com.")
        zone.add_ptr("p.example.com.", "t.example.com.")
        assert len(zone.records("p.example.com.", "PTR")) == 1

    def test_name_absent_prerequisite(self):
        zone = FakeDnsZone()
        zone.add(NAME, "A", "192.0.2.1")
        update = DnsUpdate(ZONE, prerequisites=[Prerequisite.name_absent(NAME)])
        assert zone.send_update(update) == dns.rcode.YXDOMAIN

    def test_name_present_prerequisite(self):
        zone = FakeDnsZone()
        update = DnsUpdate(ZONE, prerequisites=[Prerequisite.name_present(NAME)])
        assert zone.send_update(update) == dns.rcode.NXDOMAIN

    def test_failed_prerequisite_applies_nothing(self):
        zone = FakeDnsZone()
        zone.add(NAME, "A", "192.0.2.1")
        update = DnsUpdate(
            ZONE,
            prerequisites=[Prerequisite.name_absent(NAME)],
            additions=[ResourceRecord(NAME, 60, make_rdata("A", "192.0.2.2"))],
        )
        zone.send_update(update)
        assert zone.records(NAME, "A") == [make_rdata("A", "192.0.2.1")]

    def test_deletions(self):
        zone = FakeDnsZone()
        zone.add(NAME, "A", "192.0.2.1")
        zone.add(NAME, "A", "192.0.2.2")
        zone.add(NAME, "TXT", '"k"')
        zone.send_update(
            DnsUpdate(ZONE, deletions=[Deletion(NAME, make_rdata("A", "192.0.2.1"))])
        )
        assert zone.records(NAME, "A") == [make_rdata("A", "192.0.2.2")]

        zone.send_update(DnsUpdate(ZONE, deletions=[Deletion(NAME)]))
        assert not zone.name_exists(NAME)

    def test_queued_results(self):
        zone = FakeDnsZone()
        zone.queue_update_results(dns.rcode.REFUSED, TransportError("down"))
        update = DnsUpdate(ZONE, additions=[ResourceRecord(NAME, 60, make_rdata("A", "192.0.2.1"))])

        assert zone.send_update(update) == dns.rcode.REFUSED
        with pytest.raises(TransportError):
            zone.send_update(update)
        assert not zone.name_exists(NAME)
        assert zone.send_update(update) == dns.rcode.NOERROR
        assert zone.name_exists(NAME)
        assert len(zone.updates) == 3

    def test_query_failures(self):
        zone = FakeDnsZone()
        other = dns.name.from_text("y.example.com.")
        zone.fail_queries([NAME])
        with pytest.raises(TransportError):
            zone.query(NAME, dns.rdatatype.A)
        assert zone.query(other, dns.rdatatype.A) == []

        zone.fail_queries()
        with pytest.raises(TransportError):
            zone.query(other, dns.rdatatype.A)

        zone.clear_query_failures()
        assert zone.query(NAME, dns.rdatatype.A) == []
