import dns.exception
import dns.name
import dns.rdatatype
import dns.resolver
import pytest

from unicast_dnssd.errors import TransportError
from unicast_dnssd.test.fake_dns_zone import make_rdata
from unicast_dnssd.transport.resolver_query_transport import (
    ResolverQueryTransport,
)

NAME = dns.name.from_text("b._dns-sd._udp.example.com.")


class TestResolverQueryTransport:
    @pytest.fixture
    def resolver(self, mocker):
        return mocker.MagicMock(spec=dns.resolver.Resolver)

    def test_returns_answer_records(self, resolver, mocker):
        records = [
            make_rdata("PTR", "one.example.com."),
            make_rdata("PTR", "two.example.com."),
        ]
        answer = mocker.MagicMock()
        answer.rrset = records
        resolver.resolve.return_value = answer

        transport = ResolverQueryTransport(resolver)
        assert transport.query(NAME, dns.rdatatype.PTR) == records
        resolver.resolve.assert_called_once_with(
            NAME, dns.rdatatype.PTR, search=False, raise_on_no_answer=False
        )

    def test_no_answer_is_empty(self, resolver, mocker):
        answer = mocker.MagicMock()
        answer.rrset = None
        resolver.resolve.return_value = answer

        transport = ResolverQueryTransport(resolver)
        assert transport.query(NAME, dns.rdatatype.PTR) == []

    def test_nxdomain_is_empty(self, resolver):
        resolver.resolve.side_effect = dns.resolver.NXDOMAIN()

        transport = ResolverQueryTransport(resolver)
        assert transport.query(NAME, dns.rdatatype.PTR) == []

    @pytest.mark.parametrize(
        "error",
        [
            dns.exception.Timeout(),
            dns.resolver.NoNameservers(),
        ],
    )
    def test_failures_raise_transport_error(self, resolver, error):
        resolver.resolve.side_effect = error

        transport = ResolverQueryTransport(resolver)
        with pytest.raises(TransportError) as exc_info:
            transport.query(NAME, dns.rdatatype.PTR)
        assert exc_info.value.__cause__ is error

    def test_nameservers_and_timeout_applied(self, resolver):
        ResolverQueryTransport(
            resolver, nameservers=["192.0.2.1"], timeout=2.5
        )
        assert resolver.nameservers == ["192.0.2.1"]
        assert resolver.lifetime == 2.5

    def test_missing_system_configuration(self, mocker):
        mocker.patch(
            "dns.resolver.Resolver",
            side_effect=dns.resolver.NoResolverConfiguration(),
        )
        with pytest.raises(TransportError):
            ResolverQueryTransport()

    def test_explicit_nameservers_skip_system_configuration(self, mocker):
        mock_resolver_cls = mocker.patch("dns.resolver.Resolver")

        ResolverQueryTransport(nameservers=["192.0.2.1"])

        mock_resolver_cls.assert_called_once_with(configure=False)
        assert mock_resolver_cls.return_value.nameservers == ["192.0.2.1"]
