import dns.exception
import dns.name
import dns.rcode
import dns.rdatatype
import pytest

from unicast_dnssd.errors import (
    InvalidArgumentError,
    InvalidNameError,
    NameTooLongError,
    RegistrationError,
    TransportError,
    UnregistrationError,
)
from unicast_dnssd.registration.registration_result import (
    CleanupOutcome,
    UnregisterOutcome,
)
from unicast_dnssd.registration.registrator import (
    UnicastDnsSDRegistrator,
    default_update_transport_factory,
)
from unicast_dnssd.service.service_data import ServiceData
from unicast_dnssd.service.service_name import ServiceName
from unicast_dnssd.service.service_type import ServiceType, Transport
from unicast_dnssd.test.fake_dns_zone import make_rdata
from unicast_dnssd.transport.dns_update_transport import UpdateEndpoint
from unicast_dnssd.transport.dnspython_update_transport import (
    DnsPythonUpdateTransport,
)
from unicast_dnssd.transport.tsig_key import TsigKey

DOMAIN = "example.com."
HTTP = ServiceType("_http", Transport.TCP)
SECRET = "c2VjcmV0"


def make_registrator(zone, **kwargs):
    return UnicastDnsSDRegistrator(
        DOMAIN,
        zone,
        update_transport_factory=zone.update_transport_factory,
        **kwargs,
    )


def make_data(name="web", port=8080, properties=None):
    return ServiceData(
        ServiceName(name, HTTP, DOMAIN),
        "host.example.com.",
        port,
        dict(properties or {}),
    )


class TestUpdateEndpointDiscovery:
    def test_no_srv_uses_default(self, fake_zone):
        make_registrator(fake_zone)
        assert fake_zone.endpoints == [None]

    def test_srv_target_resolved(self, fake_zone):
        fake_zone.add(
            "_dns-update._udp.example.com.", "SRV", "0 0 5353 ns.example.com."
        )
        fake_zone.add("ns.example.com.", "A", "192.0.2.53")

        make_registrator(fake_zone)
        assert fake_zone.endpoints == [UpdateEndpoint("192.0.2.53", 5353)]

    def test_srv_target_ipv6_only(self, fake_zone):
        fake_zone.add(
            "_dns-update._udp.example.com.", "SRV", "0 0 53 ns.example.com."
        )
        fake_zone.add("ns.example.com.", "AAAA", "2001:db8::53")

        make_registrator(fake_zone)
        assert fake_zone.endpoints == [UpdateEndpoint("2001:db8::53", 53)]

    def test_srv_target_without_address(self, fake_zone):
        fake_zone.add(
            "_dns-update._udp.example.com.", "SRV", "0 0 53 ns.example.com."
        )
        with pytest.raises(TransportError):
            make_registrator(fake_zone)

    def test_srv_lookup_failure_falls_back(self, fake_zone, caplog):
        fake_zone.fail_queries(["_dns-update._udp.example.com."])
        make_registrator(fake_zone)
        assert fake_zone.endpoints == [None]
        assert "using default" in caplog.text

    def test_default_factory(self, mocker):
        mock_endpoint = mocker.patch(
            "unicast_dnssd.registration.registrator.default_update_endpoint",
            return_value=UpdateEndpoint("192.0.2.1"),
        )
        transport = default_update_transport_factory(None, timeout=4.0)
        assert isinstance(transport, DnsPythonUpdateTransport)
        assert transport.endpoint == UpdateEndpoint("192.0.2.1")
        mock_endpoint.assert_called_once_with()

        endpoint = UpdateEndpoint("192.0.2.2", 5300)
        assert default_update_transport_factory(endpoint).endpoint == endpoint


class TestRegisterService:
    def test_register_adds_records(self, fake_zone):
        registrator = make_registrator(fake_zone, ttl=120)
        assert registrator.register_service(
            make_data(properties={"path": "/", "flag": None})
        )

        instance = "web._http._tcp.example.com."
        assert fake_zone.records(
            "_services._dns-sd._udp.example.com.", "PTR"
        ) == [make_rdata("PTR", "_http._tcp.example.com.")]
        assert fake_zone.records("_http._tcp.example.com.", "PTR") == [
            make_rdata("PTR", instance)
        ]
        assert fake_zone.records(instance, "SRV") == [
            make_rdata("SRV", "0 0 8080 host.example.com.")
        ]
        assert fake_zone.records(instance, "TXT") == [
            make_rdata("TXT", '"path=/" "flag"')
        ]

        update, key = fake_zone.updates[0]
        assert update.zone == dns.name.from_text(DOMAIN)
        assert [p.exists for p in update.prerequisites] == [False]
        assert {r.ttl for r in update.additions} == {120}
        assert key is None

    def test_empty_properties_register_empty_txt(self, fake_zone):
        make_registrator(fake_zone).register_service(make_data())
        assert fake_zone.records("web._http._tcp.example.com.", "TXT") == [
            make_rdata("TXT", '""')
        ]

    def test_register_conflict(self, fake_zone):
        registrator = make_registrator(fake_zone)
        assert registrator.register_service(make_data(port=1))
        assert not registrator.register_service(make_data(port=2))
        assert fake_zone.records("web._http._tcp.example.com.", "SRV") == [
            make_rdata("SRV", "0 0 1 host.example.com.")
        ]

    def test_register_unexpected_rcode(self, fake_zone):
        fake_zone.queue_update_results(dns.rcode.REFUSED)
        with pytest.raises(RegistrationError) as exc_info:
            make_registrator(fake_zone).register_service(make_data())
        assert exc_info.value.rcode == dns.rcode.REFUSED
        assert "REFUSED" in str(exc_info.value)

    def test_register_transport_error(self, fake_zone):
        fake_zone.queue_update_results(TransportError("down"))
        with pytest.raises(TransportError):
            make_registrator(fake_zone).register_service(make_data())

    def test_register_signed(self, fake_zone):
        key = TsigKey("key.", "hmac-md5", SECRET)
        registrator = make_registrator(fake_zone, tsig_key=key)
        registrator.register_service(make_data())
        assert fake_zone.updates[0][1] == key

    def test_register_outside_domain(self, fake_zone):
        data = make_data()
        data.name = ServiceName("web", HTTP, "other.com.")
        with pytest.raises(InvalidNameError):
            make_registrator(fake_zone).register_service(data)
        assert fake_zone.updates == []

    @pytest.mark.parametrize("port", [-1, 65536, True])
    def test_register_invalid_port(self, fake_zone, port):
        with pytest.raises(InvalidArgumentError):
            make_registrator(fake_zone).register_service(make_data(port=port))

    @pytest.mark.parametrize("host", ["", "bad..host"])
    def test_register_invalid_host(self, fake_zone, host):
        data = make_data()
        data.host = host
        with pytest.raises(InvalidNameError):
            make_registrator(fake_zone).register_service(data)

    def test_register_name_too_long(self, fake_zone):
        with pytest.raises(NameTooLongError):
            make_registrator(fake_zone).register_service(make_data("x" * 64))


class TestUnregisterService:
    def test_unregister_last_instance_removes_type(self, fake_zone):
        registrator = make_registrator(fake_zone)
        registrator.register_service(make_data())

        result = registrator._unregister(ServiceName("web", HTTP, DOMAIN))
        assert result.outcome is UnregisterOutcome.REMOVED
        assert result.cleanup is CleanupOutcome.DONE
        assert result.removed
        assert not fake_zone.name_exists("web._http._tcp.example.com.")
        assert not fake_zone.name_exists("_http._tcp.example.com.")
        assert not fake_zone.name_exists("_services._dns-sd._udp.example.com.")

    def test_unregister_keeps_type_with_siblings(self, fake_zone):
        registrator = make_registrator(fake_zone)
        registrator.register_service(make_data("one"))
        registrator.register_service(make_data("two"))

        result = registrator._unregister(ServiceName("one", HTTP, DOMAIN))
        assert result.cleanup is CleanupOutcome.SKIPPED
        assert fake_zone.records("_http._tcp.example.com.", "PTR") == [
            make_rdata("PTR", "two._http._tcp.example.com.")
        ]
        assert fake_zone.records(
            "_services._dns-sd._udp.example.com.", "PTR"
        ) == [make_rdata("PTR", "_http._tcp.example.com.")]

    def test_unregister_absent(self, fake_zone):
        registrator = make_registrator(fake_zone)
        result = registrator._unregister(ServiceName("web", HTTP, DOMAIN))
        assert result.outcome is UnregisterOutcome.NOT_FOUND
        assert result.cleanup is None
        assert not registrator.unregister_service(
            ServiceName("web", HTTP, DOMAIN)
        )
        # No cleanup update after a missing instance.
        assert len(fake_zone.updates) == 2

    def test_unregister_returns_true(self, fake_zone):
        registrator = make_registrator(fake_zone)
        registrator.register_service(make_data())
        assert registrator.unregister_service(ServiceName("web", HTTP, DOMAIN))

    def test_unregister_unexpected_rcode(self, fake_zone):
        fake_zone.queue_update_results(dns.rcode.SERVFAIL)
        with pytest.raises(UnregistrationError) as exc_info:
            make_registrator(fake_zone).unregister_service(
                ServiceName("web", HTTP, DOMAIN)
            )
        assert exc_info.value.rcode == dns.rcode.SERVFAIL

    def test_cleanup_warning_keeps_result(self, fake_zone, caplog):
        registrator = make_registrator(fake_zone)
        registrator.register_service(make_data())
        fake_zone.queue_update_results(dns.rcode.NOERROR, dns.rcode.REFUSED)

        result = registrator._unregister(ServiceName("web", HTTP, DOMAIN))
        assert result.removed
        assert result.cleanup is CleanupOutcome.WARNED
        assert "REFUSED" in caplog.text

    def test_cleanup_failure_keeps_result(self, fake_zone, caplog):
        registrator = make_registrator(fake_zone)
        registrator.register_service(make_data())
        fake_zone.queue_update_results(
            dns.rcode.NOERROR, TransportError("cleanup down")
        )

        result = registrator._unregister(ServiceName("web", HTTP, DOMAIN))
        assert result.removed
        assert result.cleanup is CleanupOutcome.FAILED
        assert "cleanup down" in caplog.text

    @pytest.mark.parametrize(
        "error",
        [OSError("socket closed"), dns.exception.Timeout()],
    )
    def test_cleanup_raw_error_keeps_result(self, fake_zone, error):
        registrator = make_registrator(fake_zone)
        registrator.register_service(make_data())
        fake_zone.queue_update_results(dns.rcode.NOERROR, error)

        result = registrator._unregister(ServiceName("web", HTTP, DOMAIN))
        assert result.removed
        assert result.cleanup is CleanupOutcome.FAILED

    def test_unregister_outside_domain(self, fake_zone):
        with pytest.raises(InvalidNameError):
            make_registrator(fake_zone).unregister_service(
                ServiceName("web", HTTP, "other.com.")
            )


class TestRegistratorSettings:
    def test_ttl(self, fake_zone):
        registrator = make_registrator(fake_zone)
        assert registrator.ttl == 60
        registrator.ttl = 300
        assert registrator.ttl == 300

    @pytest.mark.parametrize("ttl", [-1, 2**31, "60", 1.5])
    def test_invalid_ttl(self, fake_zone, ttl):
        registrator = make_registrator(fake_zone)
        with pytest.raises(InvalidArgumentError):
            registrator.ttl = ttl
        with pytest.raises(InvalidArgumentError):
            make_registrator(fake_zone, ttl=ttl)

    def test_set_tsig_key(self, fake_zone):
        registrator = make_registrator(fake_zone)
        registrator.set_tsig_key("key.", "hmac-sha256", SECRET)
        assert registrator.tsig_key == TsigKey("key.", "hmac-sha256", SECRET)
        registrator.set_tsig_key("key.", None, SECRET)
        assert registrator.tsig_key is None

    def test_make_service_name(self, fake_zone):
        name = make_registrator(fake_zone).make_service_name("web", HTTP)
        assert name == ServiceName("web", HTTP, DOMAIN)

    def test_local_host_name_override(self, fake_zone):
        registrator = make_registrator(fake_zone, local_host_name="me.lan")
        assert registrator.get_local_host_name() == "me.lan."

    def test_local_host_name_from_system(self, fake_zone, mocker):
        mocker.patch("socket.getfqdn", return_value="box.example.com")
        assert (
            make_registrator(fake_zone).get_local_host_name()
            == "box.example.com."
        )

    def test_invalid_domain(self, fake_zone):
        with pytest.raises(InvalidNameError):
            UnicastDnsSDRegistrator("bad..domain", fake_zone)

    def test_registration_domain(self, fake_zone):
        registrator = UnicastDnsSDRegistrator(
            "Example.COM",
            fake_zone,
            update_transport_factory=fake_zone.update_transport_factory,
        )
        assert registrator.registration_domain == "Example.COM."
        assert fake_zone.queries[0] == (
            dns.name.from_text("_dns-update._udp.example.com."),
            dns.rdatatype.SRV,
        )
