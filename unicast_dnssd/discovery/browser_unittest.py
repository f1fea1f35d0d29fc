import dns.name
import dns.rdataclass
import dns.rdatatype
import pytest
from dns.rdtypes.ANY.PTR import PTR

from unicast_dnssd.discovery.browser import (
    UnicastDnsSDBrowser,
    select_srv,
    services_name,
)
from unicast_dnssd.errors import NameTooLongError, TransportError
from unicast_dnssd.service.service_name import ServiceName
from unicast_dnssd.service.service_type import ServiceType, Transport
from unicast_dnssd.test.fake_dns_zone import make_rdata

HTTP = ServiceType("_http", Transport.TCP)
IPP = ServiceType("_ipp", Transport.TCP)


def make_browser(zone, domains=("example.com.",)):
    return UnicastDnsSDBrowser(domains, zone)


class TestSelectSrv:
    def test_lowest_priority_then_highest_weight(self):
        records = [
            make_rdata("SRV", "10 100 80 a.example."),
            make_rdata("SRV", "0 5 81 b.example."),
            make_rdata("SRV", "0 50 82 c.example."),
            make_rdata("SRV", "0 50 83 d.example."),
        ]
        assert select_srv(records).port == 82

    def test_none(self):
        assert select_srv([]) is None


class TestUnicastDnsSDBrowser:
    def test_services_name(self):
        assert services_name(
            dns.name.from_text("example.com.")
        ) == dns.name.from_text("_services._dns-sd._udp.example.com.")

    def test_service_types_union_over_domains(self, fake_zone):
        fake_zone.add_ptr(
            "_services._dns-sd._udp.a.example.", "_http._tcp.a.example."
        )
        fake_zone.add_ptr(
            "_services._dns-sd._udp.b.example.", "_http._tcp.b.example."
        )
        fake_zone.add_ptr(
            "_services._dns-sd._udp.b.example.", "_ipp._tcp.b.example."
        )

        browser = make_browser(fake_zone, ("a.example.", "b.example."))
        assert browser.get_service_types() == {HTTP, IPP}

    def test_undecodable_service_type_skipped(self, fake_zone, caplog):
        fake_zone.add_ptr(
            "_services._dns-sd._udp.example.com.", "_http._bogus.example.com."
        )
        fake_zone.add_ptr(
            "_services._dns-sd._udp.example.com.", "_ipp._tcp.example.com."
        )

        assert make_browser(fake_zone).get_service_types() == {IPP}
        assert "_http._bogus.example.com." in caplog.text

    def test_service_instances(self, fake_zone):
        fake_zone.add_ptr("_http._tcp.example.com.", "one._http._tcp.example.com.")
        fake_zone.add_ptr("_http._tcp.example.com.", "two._http._tcp.example.com.")

        assert make_browser(fake_zone).get_service_instances(HTTP) == [
            ServiceName("one", HTTP, "example.com."),
            ServiceName("two", HTTP, "example.com."),
        ]

    def test_instance_label_decoded_raw(self, fake_zone):
        raw = dns.name.Name(
            ("My.Printer".encode("utf-8"),)
            + dns.name.from_text("_ipp._tcp.example.com.").labels
        )
        fake_zone.add_rdata(
            "_ipp._tcp.example.com.",
            PTR(dns.rdataclass.IN, dns.rdatatype.PTR, raw),
        )

        instances = make_browser(fake_zone).get_service_instances(IPP)
        assert [i.name for i in instances] == ["My.Printer"]

    def test_subtype_instances_are_union_without_duplicates(self, fake_zone):
        fake_zone.add_ptr(
            "_a._sub._http._tcp.example.com.", "one._http._tcp.example.com."
        )
        fake_zone.add_ptr(
            "_b._sub._http._tcp.example.com.", "one._http._tcp.example.com."
        )
        fake_zone.add_ptr(
            "_b._sub._http._tcp.example.com.", "two._http._tcp.example.com."
        )
        fake_zone.add_ptr("_http._tcp.example.com.", "three._http._tcp.example.com.")

        instances = make_browser(fake_zone).get_service_instances(
            HTTP.with_subtypes("_a", "_b")
        )
        assert [i.name for i in instances] == ["one", "two"]

    def test_undecodable_instance_skipped(self, fake_zone):
        fake_zone.add_ptr("_http._tcp.example.com.", "short.")
        fake_zone.add_ptr("_http._tcp.example.com.", "ok._http._tcp.example.com.")

        instances = make_browser(fake_zone).get_service_instances(HTTP)
        assert [i.name for i in instances] == ["ok"]

    def test_instance_with_invalid_utf8_skipped(self, fake_zone):
        bad = dns.name.Name(
            (b"\xffbad",) + dns.name.from_text("_http._tcp.example.com.").labels
        )
        fake_zone.add_rdata(
            "_http._tcp.example.com.",
            PTR(dns.rdataclass.IN, dns.rdatatype.PTR, bad),
        )
        fake_zone.add_rdata(bad, make_rdata("SRV", "0 0 80 host.example.com."))
        fake_zone.add_ptr("_http._tcp.example.com.", "ok._http._tcp.example.com.")
        fake_zone.add("ok._http._tcp.example.com.", "SRV", "0 0 81 h.example.com.")

        browser = make_browser(fake_zone)
        instances = browser.get_service_instances(HTTP)
        assert [i.name for i in instances] == ["ok"]
        assert browser.get_service_data(instances[0]).port == 81

    def test_service_data(self, fake_zone):
        name = ServiceName("web", HTTP, "example.com.")
        fake_zone.add(
            "web._http._tcp.example.com.", "SRV", "0 0 8080 host.example.com."
        )
        fake_zone.add(
            "web._http._tcp.example.com.", "TXT", '"Path=/a" "flag" "=x" ""'
        )
        fake_zone.add("web._http._tcp.example.com.", "TXT", '"path=/b" "v=2"')

        data = make_browser(fake_zone).get_service_data(name)
        assert data.name == name
        assert data.host == "host.example.com."
        assert data.port == 8080
        assert data.properties == {"path": "/a", "flag": None, "v": "2"}

    def test_service_data_with_several_srv_records(self, fake_zone):
        fake_zone.add("web._http._tcp.example.com.", "SRV", "20 0 1 a.example.")
        fake_zone.add("web._http._tcp.example.com.", "SRV", "10 0 2 b.example.")

        data = make_browser(fake_zone).get_service_data(
            ServiceName("web", HTTP, "example.com.")
        )
        assert (data.host, data.port) == ("b.example.", 2)

    def test_service_data_txt_only(self, fake_zone):
        fake_zone.add("web._http._tcp.example.com.", "TXT", '"k=v"')

        data = make_browser(fake_zone).get_service_data(
            ServiceName("web", HTTP, "example.com.")
        )
        assert (data.host, data.port) == ("", 0)
        assert data.properties == {"k": "v"}

    def test_service_data_absent(self, fake_zone):
        browser = make_browser(fake_zone)
        assert (
            browser.get_service_data(ServiceName("web", HTTP, "example.com."))
            is None
        )

    def test_service_data_name_too_long(self, fake_zone):
        with pytest.raises(NameTooLongError):
            make_browser(fake_zone).get_service_data(
                ServiceName("x" * 64, HTTP, "example.com.")
            )

    def test_transport_error_propagates(self, fake_zone):
        fake_zone.fail_queries()
        with pytest.raises(TransportError):
            make_browser(fake_zone).get_service_types()
