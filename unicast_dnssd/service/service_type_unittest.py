import dns.name
import pytest

from unicast_dnssd.errors import (
    InvalidFormatError,
    InvalidNameError,
    InvalidTransportError,
)
from unicast_dnssd.service.service_type import ServiceType, Transport


class TestTransport:
    def test_from_label_is_case_insensitive(self):
        assert Transport.from_label("_TCP") is Transport.TCP
        assert Transport.from_label("_udp") is Transport.UDP

    def test_from_label_unknown(self):
        with pytest.raises(InvalidTransportError):
            Transport.from_label("_sctp")

    def test_str_is_label(self):
        assert str(Transport.TCP) == "_tcp"
        assert Transport.UDP.label == "_udp"


class TestServiceType:
    def test_transport_string_is_converted(self):
        service_type = ServiceType("_http", "_tcp")
        assert service_type.transport is Transport.TCP

    def test_empty_type_rejected(self):
        with pytest.raises(InvalidFormatError):
            ServiceType("", Transport.TCP)

    def test_empty_subtype_rejected(self):
        with pytest.raises(InvalidFormatError):
            ServiceType("_http", Transport.TCP, ("",))

    def test_equality_ignores_subtypes(self):
        plain = ServiceType("_http", Transport.TCP)
        with_sub = ServiceType("_http", Transport.TCP, ("_printer",))
        assert plain == with_sub
        assert hash(plain) == hash(with_sub)
        assert len({plain, with_sub}) == 1

    def test_transport_is_part_of_identity(self):
        assert ServiceType("_http", Transport.TCP) != ServiceType(
            "_http", Transport.UDP
        )

    def test_str_and_dns_string(self):
        service_type = ServiceType("_http", Transport.TCP, ("_a", "_b"))
        assert service_type.to_dns_string() == "_http._tcp"
        assert str(service_type) == "_http._tcp,_a,_b"

    def test_parse(self):
        service_type = ServiceType.parse("_http._tcp,_printer")
        assert service_type.type == "_http"
        assert service_type.transport is Transport.TCP
        assert service_type.subtypes == ("_printer",)

    def test_parse_round_trip(self):
        text = "_ipp._tcp,_color,_duplex"
        assert str(ServiceType.parse(text)) == text

    @pytest.mark.parametrize("text", ["_http", "._tcp", "_http._tcp,"])
    def test_parse_malformed(self, text):
        with pytest.raises(InvalidFormatError):
            ServiceType.parse(text)

    def test_parse_unknown_transport(self):
        with pytest.raises(InvalidTransportError):
            ServiceType.parse("_http._xyz")

    def test_with_subtypes_and_base_type(self):
        service_type = ServiceType("_http", Transport.TCP).with_subtype("_a")
        service_type = service_type.with_subtypes("_b", "_c")
        assert service_type.subtypes == ("_a", "_b", "_c")
        assert service_type.base_type().subtypes == ()

    def test_to_dns_name(self):
        domain = dns.name.from_text("example.com.")
        name = ServiceType("_http", Transport.TCP).to_dns_name(domain)
        assert name == dns.name.from_text("_http._tcp.example.com.")

    def test_browse_dns_names_without_subtypes(self):
        domain = dns.name.from_text("example.com.")
        names = ServiceType("_http", Transport.TCP).browse_dns_names(domain)
        assert names == [dns.name.from_text("_http._tcp.example.com.")]

    def test_browse_dns_names_with_subtypes(self):
        domain = dns.name.from_text("example.com.")
        service_type = ServiceType("_http", Transport.TCP, ("_a", "_b"))
        assert service_type.browse_dns_names(domain) == [
            dns.name.from_text("_a._sub._http._tcp.example.com."),
            dns.name.from_text("_b._sub._http._tcp.example.com."),
        ]

    def test_to_dns_name_label_too_long(self):
        domain = dns.name.from_text("example.com.")
        with pytest.raises(InvalidNameError):
            ServiceType("_" + "x" * 70, Transport.TCP).to_dns_name(domain)

    def test_from_dns_name(self):
        name = dns.name.from_text("_ipp._udp.example.com.")
        assert ServiceType.from_dns_name(name) == ServiceType(
            "_ipp", Transport.UDP
        )

    def test_from_dns_name_bad_transport(self):
        with pytest.raises(InvalidTransportError):
            ServiceType.from_dns_name(dns.name.from_text("_ipp.foo.com."))

    def test_from_dns_name_too_short(self):
        with pytest.raises(InvalidNameError):
            ServiceType.from_dns_name(dns.name.root)

    def test_from_dns_name_invalid_utf8(self):
        name = dns.name.Name((b"\xff_ipp", b"_tcp", b"example", b"com", b""))
        with pytest.raises(InvalidNameError):
            ServiceType.from_dns_name(name)
