import dns.name
import dns.rdatatype
import pytest

from unicast_dnssd.errors import InvalidNameError, TransportError
from unicast_dnssd.discovery.domain_enumerator import (
    UnicastDnsSDDomainEnumerator,
    enumeration_name,
)
from unicast_dnssd.threading.domain_fan_out import DomainFanOut


def make_enumerator(zone, domains=("a.example.", "b.example.")):
    return UnicastDnsSDDomainEnumerator(
        domains, zone, fan_out=DomainFanOut(max_workers=2)
    )


class TestEnumerationName:
    def test_name(self):
        assert enumeration_name(
            "db", dns.name.from_text("example.com.")
        ) == dns.name.from_text("db._dns-sd._udp.example.com.")


class TestUnicastDnsSDDomainEnumerator:
    def test_browsing_domains_union_in_order(self, fake_zone):
        fake_zone.add_ptr("b._dns-sd._udp.a.example.", "one.example.")
        fake_zone.add_ptr("b._dns-sd._udp.a.example.", "shared.example.")
        fake_zone.add_ptr("b._dns-sd._udp.b.example.", "shared.example.")
        fake_zone.add_ptr("b._dns-sd._udp.b.example.", "two.example.")

        assert make_enumerator(fake_zone).get_browsing_domains() == [
            "one.example.",
            "shared.example.",
            "two.example.",
        ]

    def test_registering_and_legacy_domains(self, fake_zone):
        fake_zone.add_ptr("r._dns-sd._udp.b.example.", "reg.example.")
        fake_zone.add_ptr("lb._dns-sd._udp.a.example.", "legacy.example.")
        enumerator = make_enumerator(fake_zone)

        assert enumerator.get_registering_domains() == ["reg.example."]
        assert enumerator.get_legacy_browsing_domains() == ["legacy.example."]

    def test_missing_records_contribute_nothing(self, fake_zone):
        enumerator = make_enumerator(fake_zone)
        assert enumerator.get_browsing_domains() == []
        assert enumerator.get_default_browsing_domain() is None
        assert enumerator.get_default_registering_domain() is None

    def test_default_domain_follows_candidate_order(self, fake_zone):
        fake_zone.add_ptr("db._dns-sd._udp.a.example.", "first.example.")
        fake_zone.add_ptr("db._dns-sd._udp.b.example.", "second.example.")

        enumerator = make_enumerator(fake_zone)
        assert enumerator.get_default_browsing_domain() == "first.example."
        enumerator = make_enumerator(fake_zone, ("b.example.", "a.example."))
        assert enumerator.get_default_browsing_domain() == "second.example."

    def test_default_lookup_stops_at_first_answer(self, fake_zone):
        fake_zone.add_ptr("dr._dns-sd._udp.a.example.", "reg.example.")

        enumerator = make_enumerator(fake_zone)
        assert enumerator.get_default_registering_domain() == "reg.example."
        assert fake_zone.queries == [
            (
                dns.name.from_text("dr._dns-sd._udp.a.example."),
                dns.rdatatype.PTR,
            )
        ]

    def test_default_lookup_falls_through_empty_candidates(self, fake_zone):
        fake_zone.add_ptr("dr._dns-sd._udp.b.example.", "reg.example.")
        enumerator = make_enumerator(fake_zone)
        assert enumerator.get_default_registering_domain() == "reg.example."

    def test_transport_error_propagates(self, fake_zone):
        fake_zone.fail_queries(["b._dns-sd._udp.b.example."])
        with pytest.raises(TransportError):
            make_enumerator(fake_zone).get_browsing_domains()

    def test_invalid_computer_domain(self, fake_zone):
        with pytest.raises(InvalidNameError):
            UnicastDnsSDDomainEnumerator(["bad..domain"], fake_zone)

    def test_computer_domains_normalized(self, fake_zone):
        enumerator = UnicastDnsSDDomainEnumerator(
            ["example.com", dns.name.from_text("example.org.")], fake_zone
        )
        assert enumerator.computer_domains == ["example.com.", "example.org."]

    def test_requires_query_transport(self):
        with pytest.raises(ValueError):
            UnicastDnsSDDomainEnumerator(["example.com."], None)
