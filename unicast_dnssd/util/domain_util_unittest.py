import ipaddress

import dns.rdatatype
import dns.reversename
import pytest

from unicast_dnssd.config.dnssd_config import DnsSDConfig
from unicast_dnssd.errors import TransportError
from unicast_dnssd.util import domain_util


@pytest.fixture
def networks(mocker):
    return mocker.patch(
        "unicast_dnssd.util.ip.get_interface_networks",
        return_value=[
            ipaddress.ip_interface("192.168.1.100/24"),
            ipaddress.ip_interface("2001:db8::10/64"),
        ],
    )


@pytest.fixture
def zone(fake_zone):
    fake_zone.add_ptr(
        dns.reversename.from_address("192.168.1.100"),
        "box.office.example.com.",
    )
    return fake_zone


def patch_networks(mocker, *addresses):
    mocker.patch(
        "unicast_dnssd.util.ip.get_interface_networks",
        return_value=[ipaddress.ip_interface(a) for a in addresses],
    )


IPV4_ZONE = "0.1.168.192.in-addr.arpa."
IPV6_ZONE = (
    "0.0.0.0.0.0.0.0.0.0.0.0.0.0.0.0.0.0.0.0.0.0.0.0.8.b.d.0.1.0.0.2.ip6.arpa."
)


class TestGetComputerDomains:
    def test_override(self, networks, zone):
        config = DnsSDConfig(computer_domain="example.org")
        assert domain_util.get_computer_domains(config, zone) == [
            "example.org."
        ]
        networks.assert_not_called()
        assert zone.queries == []

    def test_from_interfaces(self, networks, zone):
        assert domain_util.get_computer_domains(None, zone) == [
            "office.example.com.",
            IPV4_ZONE,
            IPV6_ZONE,
        ]
        assert zone.queries == [
            (dns.reversename.from_address("192.168.1.100"), dns.rdatatype.PTR),
            (dns.reversename.from_address("2001:db8::10"), dns.rdatatype.PTR),
        ]

    def test_duplicates_removed(self, mocker, fake_zone):
        patch_networks(mocker, "10.0.0.1/8", "10.0.0.2/8")
        fake_zone.add_ptr(dns.reversename.from_address("10.0.0.1"), "h1.lan.")
        fake_zone.add_ptr(dns.reversename.from_address("10.0.0.2"), "h2.lan.")

        assert domain_util.get_computer_domains(None, fake_zone) == [
            "lan.",
            "0.0.0.10.in-addr.arpa.",
        ]

    def test_single_label_host_name_ignored(self, mocker, fake_zone):
        patch_networks(mocker, "10.0.0.1/8")
        fake_zone.add_ptr(
            dns.reversename.from_address("10.0.0.1"), "localhost."
        )

        assert domain_util.get_computer_domains(None, fake_zone) == [
            "0.0.0.10.in-addr.arpa."
        ]

    def test_lookup_failure_skipped(self, networks, zone):
        zone.fail_queries()
        assert domain_util.get_computer_domains(None, zone) == [
            IPV4_ZONE,
            IPV6_ZONE,
        ]

    def test_default_transport_honours_config(self, networks, mocker):
        mock_transport = mocker.patch(
            "unicast_dnssd.util.domain_util.ResolverQueryTransport"
        )
        mock_transport.return_value.query.return_value = []
        config = DnsSDConfig(nameservers=("192.0.2.1",), query_timeout=2.0)

        assert domain_util.get_computer_domains(config) == [
            IPV4_ZONE,
            IPV6_ZONE,
        ]
        mock_transport.assert_called_once_with(
            nameservers=("192.0.2.1",), timeout=2.0
        )

    def test_default_transport_without_config(self, networks, mocker):
        mock_transport = mocker.patch(
            "unicast_dnssd.util.domain_util.ResolverQueryTransport"
        )
        mock_transport.return_value.query.return_value = []

        domain_util.get_computer_domains()
        mock_transport.assert_called_once_with()

    def test_no_resolver_configuration(self, networks, mocker):
        mocker.patch(
            "unicast_dnssd.util.domain_util.ResolverQueryTransport",
            side_effect=TransportError("No system resolver configuration"),
        )
        assert domain_util.get_computer_domains() == [IPV4_ZONE, IPV6_ZONE]


class TestGetComputerHostNames:
    def test_override(self, networks, zone):
        config = DnsSDConfig(host_name="me.example.com")
        assert domain_util.get_computer_host_names(config, zone) == [
            "me.example.com."
        ]

    def test_from_interfaces(self, networks, zone):
        assert domain_util.get_computer_host_names(None, zone) == [
            "box.office.example.com."
        ]


class TestGetLocalHostName:
    def test_from_fqdn(self, mocker):
        mocker.patch("socket.getfqdn", return_value="box.example.com")
        assert domain_util.get_local_host_name() == "box.example.com."

    def test_override(self, mocker):
        mock_getfqdn = mocker.patch("socket.getfqdn")
        config = DnsSDConfig(host_name="me.example.com.")
        assert domain_util.get_local_host_name(config) == "me.example.com."
        mock_getfqdn.assert_not_called()
