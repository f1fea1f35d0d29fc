"""End-to-end flows through DnsSDFactory against an in-memory zone."""

import pytest

from unicast_dnssd.config.dnssd_config import DnsSDConfig
from unicast_dnssd.errors import NameTooLongError
from unicast_dnssd.factory import DnsSDFactory
from unicast_dnssd.registration.automatic_unregister import AutomaticUnregister
from unicast_dnssd.service.service_data import ServiceData
from unicast_dnssd.service.service_name import ServiceName
from unicast_dnssd.service.service_type import ServiceType, Transport
from unicast_dnssd.test.fake_dns_zone import FakeDnsZone, make_rdata
from unicast_dnssd.transport.tsig_key import TsigKey

HTTP = ServiceType("_http", Transport.TCP)
PRINTER = ServiceType("_ipp", Transport.TCP)


@pytest.fixture
def zone() -> FakeDnsZone:
    zone = FakeDnsZone()
    # d1 has no default browsing domain, d2 has one.
    zone.add_ptr("db._dns-sd._udp.d2.example.", "example.com.")
    zone.add_ptr("b._dns-sd._udp.d1.example.", "example.com.")
    zone.add_ptr("dr._dns-sd._udp.d2.example.", "example.com.")
    return zone


@pytest.fixture
def factory(zone: FakeDnsZone) -> DnsSDFactory:
    return DnsSDFactory(
        DnsSDConfig(computer_domain="unused.example.", default_ttl=30),
        query_transport=zone,
        update_transport_factory=zone.update_transport_factory,
    )


def test_default_browsing_domain_from_later_candidate(factory):
    enumerator = factory.create_domain_enumerator(["d1.example.", "d2.example."])
    assert enumerator.get_default_browsing_domain() == "example.com."
    assert enumerator.get_browsing_domains() == ["example.com."]


def test_register_browse_resolve_unregister(factory, zone):
    enumerator = factory.create_domain_enumerator(["d1.example.", "d2.example."])
    registrator = factory.create_registrator_from_enumerator(enumerator)
    browser = factory.create_browser_from_enumerator(enumerator)

    name = registrator.make_service_name("Living Room.TV", HTTP)
    data = ServiceData(name, "tv.example.com.", 8080, {"path": "/", "hd": None})
    assert registrator.register_service(data)

    assert browser.get_service_types() == {HTTP}
    assert browser.get_service_instances(HTTP) == [name]
    resolved = browser.get_service_data(name)
    assert resolved == data
    assert str(name) == "Living Room\\.TV._http._tcp.example.com."
    assert ServiceName.parse(str(name)) == name

    assert len(zone.records(name.to_dns_name(), "SRV")) == 1
    assert len(zone.records(name.to_dns_name(), "TXT")) == 1
    registration, _ = zone.updates[0]
    assert {record.ttl for record in registration.additions} == {30}

    assert registrator.unregister_service(name)
    assert browser.get_service_types() == set()
    assert browser.get_service_instances(HTTP) == []
    assert browser.get_service_data(name) is None


def test_conflicting_registration_keeps_original(factory, zone):
    registrator = factory.create_registrator("example.com.")
    name = registrator.make_service_name("web", HTTP)

    assert registrator.register_service(ServiceData(name, "a.example.com.", 80))
    assert not registrator.register_service(
        ServiceData(name, "b.example.com.", 81)
    )
    assert zone.records(name.to_dns_name(), "SRV") == [
        make_rdata("SRV", "0 0 80 a.example.com.")
    ]


def test_unregister_with_sibling_keeps_type(factory, zone):
    registrator = factory.create_registrator("example.com.")
    browser = factory.create_browser("example.com.")
    one = registrator.make_service_name("one", HTTP)
    two = registrator.make_service_name("two", HTTP)
    printer = registrator.make_service_name("printer", PRINTER)
    for name in (one, two, printer):
        assert registrator.register_service(
            ServiceData(name, "host.example.com.", 80)
        )

    assert registrator.unregister_service(one)
    assert browser.get_service_types() == {HTTP, PRINTER}
    assert browser.get_service_instances(HTTP) == [two]

    assert registrator.unregister_service(two)
    assert browser.get_service_types() == {PRINTER}
    assert not registrator.unregister_service(two)


def test_subtype_browsing_is_union(factory, zone):
    for subtype, instance in [("_a", "one"), ("_b", "two"), ("_b", "one")]:
        zone.add_ptr(
            f"{subtype}._sub._http._tcp.example.com.",
            f"{instance}._http._tcp.example.com.",
        )
    zone.add_ptr("_c._sub._http._tcp.example.com.", "three._http._tcp.example.com.")
    browser = factory.create_browser("example.com.")

    instances = browser.get_service_instances(HTTP.with_subtypes("_a", "_b"))
    assert sorted(i.name for i in instances) == ["one", "two"]


def test_signed_updates_carry_key(factory, zone):
    registrator = factory.create_registrator("example.com.")
    registrator.set_tsig_key("update-key.", "HMAC-SHA256", "c2VjcmV0")
    name = registrator.make_service_name("web", HTTP)
    registrator.register_service(ServiceData(name, "h.example.com.", 1))
    registrator.set_tsig_key("", "", "")
    registrator.unregister_service(name)

    keys = [key for _, key in zone.updates]
    assert keys == [TsigKey("update-key.", "hmac-sha256", "c2VjcmV0"), None, None]


def test_overlong_name_is_rejected(factory, zone):
    registrator = factory.create_registrator("example.com.")
    name = registrator.make_service_name("é" * 32, HTTP)
    with pytest.raises(NameTooLongError):
        registrator.register_service(ServiceData(name, "h.example.com.", 1))
    assert zone.updates == []


def test_automatic_unregister_cleans_up(factory, zone):
    registrator = factory.create_registrator("example.com.")
    hooks = []
    auto = AutomaticUnregister(
        registrator,
        register_exit_hook=hooks.append,
        unregister_exit_hook=hooks.remove,
    )
    auto.start()
    name = registrator.make_service_name("web", HTTP)
    registrator.register_service(ServiceData(name, "h.example.com.", 1))
    auto.add_service(name)
    assert len(hooks) == 1

    hooks[0]()

    assert not zone.name_exists(name.to_dns_name())
    assert hooks == []
