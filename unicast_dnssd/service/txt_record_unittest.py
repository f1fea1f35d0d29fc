import pytest

from unicast_dnssd.errors import InvalidFormatError
from unicast_dnssd.service.service_data import ServiceData
from unicast_dnssd.service.service_name import ServiceName
from unicast_dnssd.service.service_type import ServiceType, Transport
from unicast_dnssd.service.txt_record import (
    encode_txt_strings,
    parse_txt_strings,
)


class TestEncodeTxtStrings:
    def test_key_value_and_flag(self):
        assert encode_txt_strings({"path": "/index.html", "secure": None}) == [
            b"path=/index.html",
            b"secure",
        ]

    def test_empty_mapping_is_one_empty_string(self):
        assert encode_txt_strings({}) == [b""]

    def test_empty_value_keeps_equals_sign(self):
        assert encode_txt_strings({"k": ""}) == [b"k="]

    @pytest.mark.parametrize("key", ["", "a=b"])
    def test_invalid_key(self, key):
        with pytest.raises(InvalidFormatError):
            encode_txt_strings({key: "v"})

    def test_string_too_long(self):
        with pytest.raises(InvalidFormatError):
            encode_txt_strings({"k": "v" * 254})

    def test_string_of_255_bytes(self):
        assert len(encode_txt_strings({"k": "v" * 253})[0]) == 255


class TestParseTxtStrings:
    def test_first_key_wins_and_invalid_entries_skipped(self):
        strings = [b"foo=bar", b"foo=baz", b"flag", b"=bad", b""]
        assert parse_txt_strings(strings) == {"foo": "bar", "flag": None}

    def test_keys_lower_cased(self):
        assert parse_txt_strings([b"Path=/X"]) == {"path": "/X"}
        assert parse_txt_strings([b"PATH=/a", b"path=/b"]) == {"path": "/a"}

    def test_value_may_contain_equals(self):
        assert parse_txt_strings([b"q=a=b"]) == {"q": "a=b"}

    def test_empty_value(self):
        assert parse_txt_strings([b"k="]) == {"k": ""}

    def test_existing_properties_take_precedence(self):
        properties = {"foo": "first"}
        result = parse_txt_strings([b"foo=second", b"bar=1"], properties)
        assert result is properties
        assert properties == {"foo": "first", "bar": "1"}

    def test_accepts_str(self):
        assert parse_txt_strings(["a=1"]) == {"a": "1"}

    def test_invalid_utf8_is_replaced(self):
        assert parse_txt_strings([b"k=\xff"]) == {"k": "�"}


class TestServiceData:
    def test_defaults_and_str(self):
        name = ServiceName(
            "printer", ServiceType("_ipp", Transport.TCP), "example.com."
        )
        data = ServiceData(name)
        assert data.host == ""
        assert data.port == 0
        assert data.properties == {}
        data.host = "host.example.com."
        data.port = 631
        data.properties["rp"] = "queue"
        assert (
            str(data)
            == "printer._ipp._tcp.example.com.: host.example.com.:631 "
            "{'rp': 'queue'}"
        )

    def test_properties_not_shared(self):
        name = ServiceName("a", ServiceType("_x", Transport.UDP), "d.")
        first = ServiceData(name)
        first.properties["k"] = None
        assert ServiceData(name).properties == {}
