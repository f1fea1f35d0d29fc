import dns.name
import pytest

from unicast_dnssd.errors import (
    InvalidFormatError,
    InvalidNameError,
    InvalidTransportError,
    NameTooLongError,
)
from unicast_dnssd.service.service_name import (
    ServiceName,
    escape_instance_name,
    parse_domain,
)
from unicast_dnssd.service.service_type import ServiceType, Transport

HTTP = ServiceType("_http", Transport.TCP)


class TestEscaping:
    def test_escape(self):
        assert escape_instance_name("a.b\\c") == "a\\.b\\\\c"

    @pytest.mark.parametrize(
        "name", ["plain", "dots.in.name", "back\\slash", "mixed.\\.", ""]
    )
    def test_escape_then_parse_is_identity(self, name):
        text = f"{escape_instance_name(name)}._http._tcp.example.com."
        assert ServiceName.parse(text).name == name


class TestServiceName:
    def test_domain_gets_trailing_dot(self):
        assert ServiceName("x", HTTP, "example.com").domain == "example.com."

    def test_type_must_be_service_type(self):
        with pytest.raises(TypeError):
            ServiceName("x", "_http._tcp", "example.com.")  # type: ignore[arg-type]

    def test_str(self):
        name = ServiceName(
            "My.Printer", HTTP.with_subtype("_printer"), "example.com."
        )
        assert str(name) == "My\\.Printer._http._tcp.example.com.,_printer"

    def test_parse(self):
        name = ServiceName.parse("My\\.Printer._ipp._tcp.example.com.,_color")
        assert name.name == "My.Printer"
        assert name.type == ServiceType("_ipp", Transport.TCP)
        assert name.type.subtypes == ("_color",)
        assert name.domain == "example.com."

    def test_parse_text_round_trip(self):
        text = "Web Server\\\\1._http._tcp.dns-sd.org.,_a,_b"
        assert str(ServiceName.parse(text)) == text

    @pytest.mark.parametrize(
        "text",
        [
            "trailing\\",
            "no-dot-at-all",
            "name._http",
            "name._http._tcp",
            "name._http._tcp.",
            "name._http._tcp.example.com.,",
        ],
    )
    def test_parse_malformed(self, text):
        with pytest.raises(InvalidFormatError):
            ServiceName.parse(text)

    def test_parse_unknown_transport(self):
        with pytest.raises(InvalidTransportError):
            ServiceName.parse("name._http._foo.example.com.")

    def test_equality_ignores_subtypes(self):
        a = ServiceName("x", HTTP, "example.com.")
        b = ServiceName("x", HTTP.with_subtype("_s"), "example.com.")
        assert a == b
        assert hash(a) == hash(b)

    def test_to_dns_name_keeps_raw_label(self):
        name = ServiceName("My.Printer å", HTTP, "example.com.")
        dns_name = name.to_dns_name()
        assert dns_name.labels[0] == "My.Printer å".encode("utf-8")
        assert dns_name.labels[1:] == dns.name.from_text(
            "_http._tcp.example.com."
        ).labels

    def test_wire_round_trip(self):
        name = ServiceName("Dot.And\\Slash ü", HTTP, "example.com.")
        assert ServiceName.from_dns_name(name.to_dns_name()) == name

    def test_label_of_63_bytes_is_accepted(self):
        name = ServiceName("x" * 63, HTTP, "example.com.")
        assert len(name.to_dns_name().labels[0]) == 63

    def test_label_overflow(self):
        # 32 two-byte characters are 64 bytes once encoded.
        name = ServiceName("å" * 32, HTTP, "example.com.")
        with pytest.raises(NameTooLongError):
            name.to_dns_name()

    def test_empty_name_cannot_be_encoded(self):
        with pytest.raises(InvalidNameError):
            ServiceName("", HTTP, "example.com.").to_dns_name()

    def test_from_dns_name_too_few_labels(self):
        with pytest.raises(InvalidNameError):
            ServiceName.from_dns_name(dns.name.from_text("_http._tcp."))

    def test_from_dns_name_bad_transport(self):
        with pytest.raises(InvalidTransportError):
            ServiceName.from_dns_name(
                dns.name.from_text("x._http._bad.example.com.")
            )

    def test_from_dns_name_in_root_domain(self):
        name = ServiceName.from_dns_name(dns.name.from_text("x._http._tcp."))
        assert name.domain == "."

    def test_from_dns_name_invalid_utf8(self):
        wire = dns.name.Name(
            (b"\xffbad",) + dns.name.from_text("_http._tcp.example.com.").labels
        )
        with pytest.raises(InvalidNameError):
            ServiceName.from_dns_name(wire)

    def test_comma_in_domain_is_escaped(self):
        wire = dns.name.from_text("x._http._tcp.a,b.com.")
        name = ServiceName.from_dns_name(wire)
        assert name.domain == "a,b.com."
        assert str(name) == "x._http._tcp.a\\,b.com."

        parsed = ServiceName.parse(str(name))
        assert parsed == name
        assert parsed.type.subtypes == ()
        assert parsed.to_dns_name() == wire

    def test_comma_in_domain_with_subtypes(self):
        text = "x._http._tcp.a\\,b.com.,_s"
        name = ServiceName.parse(text)
        assert name.domain == "a,b.com."
        assert name.type.subtypes == ("_s",)
        assert str(name) == text


class TestParseDomain:
    def test_string(self):
        assert parse_domain("example.com") == dns.name.from_text("example.com.")

    def test_name_passes_through(self):
        name = dns.name.from_text("example.com.")
        assert parse_domain(name) is name

    def test_invalid(self):
        with pytest.raises(InvalidNameError):
            parse_domain("a..b")
