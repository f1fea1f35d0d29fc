import dns.exception
import dns.message
import dns.name
import dns.rcode
import dns.rdataclass
import dns.rdatatype
import dns.resolver
import pytest

from unicast_dnssd.errors import InvalidArgumentError, TransportError
from unicast_dnssd.test.fake_dns_zone import make_rdata
from unicast_dnssd.transport.dns_update import (
    Deletion,
    DnsUpdate,
    Prerequisite,
    ResourceRecord,
)
from unicast_dnssd.transport.dns_update_transport import UpdateEndpoint
from unicast_dnssd.transport.dnspython_update_transport import (
    DnsPythonUpdateTransport,
    build_update_message,
    default_update_endpoint,
)
from unicast_dnssd.transport.tsig_key import TsigKey

ZONE = dns.name.from_text("example.com.")
INSTANCE = dns.name.from_text("x._http._tcp.example.com.")
TYPE_NAME = dns.name.from_text("_http._tcp.example.com.")


def make_update():
    return DnsUpdate(
        zone=ZONE,
        prerequisites=[Prerequisite.name_absent(INSTANCE)],
        additions=[
            ResourceRecord(
                TYPE_NAME, 60, make_rdata("PTR", INSTANCE.to_text())
            )
        ],
    )


class TestBuildUpdateMessage:
    def test_prerequisites_and_additions(self):
        message = build_update_message(make_update())

        assert message.zone[0].name == ZONE
        assert len(message.prerequisite) == 1
        prerequisite = message.prerequisite[0]
        assert prerequisite.name == INSTANCE
        assert prerequisite.rdclass == dns.rdataclass.NONE
        assert prerequisite.rdtype == dns.rdatatype.ANY

        assert len(message.update) == 1
        added = message.update[0]
        assert added.name == TYPE_NAME
        assert added.rdclass == dns.rdataclass.IN
        assert added.ttl == 60

    def test_name_present_and_deletions(self):
        update = DnsUpdate(
            zone=ZONE,
            prerequisites=[Prerequisite.name_present(INSTANCE)],
            deletions=[
                Deletion(TYPE_NAME, make_rdata("PTR", INSTANCE.to_text())),
                Deletion(INSTANCE),
            ],
        )
        message = build_update_message(update)

        assert message.prerequisite[0].rdclass == dns.rdataclass.ANY
        assert len(message.update) == 2
        single, everything = message.update
        assert single.name == TYPE_NAME
        assert single.rdclass == dns.rdataclass.IN
        assert single.deleting == dns.rdataclass.NONE
        assert single.rdtype == dns.rdatatype.PTR
        assert everything.name == INSTANCE
        assert everything.rdclass == dns.rdataclass.ANY
        assert everything.rdtype == dns.rdatatype.ANY

    def test_signed_with_tsig_key(self):
        key = TsigKey("update-key.", "hmac-sha256", "c2VjcmV0")
        message = build_update_message(make_update(), key)
        assert message.keyname == dns.name.from_text("update-key.")

    def test_unsigned_without_key(self):
        assert build_update_message(make_update()).keyname is None


class TestDnsPythonUpdateTransport:
    @pytest.fixture
    def mock_udp(self, mocker):
        return mocker.patch("dns.query.udp_with_fallback")

    def test_send_update_returns_rcode(self, mock_udp, mocker):
        response = mocker.MagicMock(spec=dns.message.Message)
        response.rcode.return_value = dns.rcode.YXDOMAIN
        mock_udp.return_value = (response, False)
        endpoint = UpdateEndpoint("192.0.2.53", 5353)

        transport = DnsPythonUpdateTransport(endpoint, timeout=3.0)
        assert transport.send_update(make_update()) == dns.rcode.YXDOMAIN

        args, kwargs = mock_udp.call_args
        assert args[1] == "192.0.2.53"
        assert kwargs == {"timeout": 3.0, "port": 5353}

    @pytest.mark.parametrize(
        "error", [dns.exception.Timeout(), OSError("unreachable")]
    )
    def test_network_failure(self, mock_udp, error):
        mock_udp.side_effect = error
        transport = DnsPythonUpdateTransport(UpdateEndpoint("192.0.2.53"))

        with pytest.raises(TransportError) as exc_info:
            transport.send_update(make_update())
        assert exc_info.value.__cause__ is error

    def test_invalid_timeout(self):
        with pytest.raises(InvalidArgumentError):
            DnsPythonUpdateTransport(UpdateEndpoint("192.0.2.53"), timeout=0)


class TestDefaultUpdateEndpoint:
    def test_first_string_nameserver(self, mocker):
        resolver = mocker.MagicMock()
        resolver.nameservers = ["192.0.2.1", "192.0.2.2"]
        resolver.port = 53
        assert default_update_endpoint(resolver) == UpdateEndpoint(
            "192.0.2.1", 53
        )

    def test_nameserver_object(self, mocker):
        nameserver = mocker.MagicMock()
        nameserver.address = "2001:db8::1"
        nameserver.port = 5300
        resolver = mocker.MagicMock()
        resolver.nameservers = [nameserver]
        assert default_update_endpoint(resolver) == UpdateEndpoint(
            "2001:db8::1", 5300
        )

    def test_no_nameserver(self, mocker):
        resolver = mocker.MagicMock()
        resolver.nameservers = []
        with pytest.raises(TransportError):
            default_update_endpoint(resolver)

    def test_no_system_configuration(self, mocker):
        mocker.patch(
            "dns.resolver.Resolver",
            side_effect=dns.resolver.NoResolverConfiguration(),
        )
        with pytest.raises(TransportError):
            default_update_endpoint()
