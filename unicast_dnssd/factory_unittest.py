import pytest

from unicast_dnssd.config.dnssd_config import DnsSDConfig
from unicast_dnssd.discovery.browser import UnicastDnsSDBrowser
from unicast_dnssd.discovery.domain_enumerator import (
    DnsSDDomainEnumerator,
    UnicastDnsSDDomainEnumerator,
)
from unicast_dnssd.errors import InvalidNameError, NoRegistrationDomainError
from unicast_dnssd.factory import DnsSDFactory
from unicast_dnssd.registration.registrator import UnicastDnsSDRegistrator


@pytest.fixture
def factory(fake_zone):
    return DnsSDFactory(
        DnsSDConfig(default_ttl=90, host_name="me.example.com"),
        query_transport=fake_zone,
        update_transport_factory=fake_zone.update_transport_factory,
    )


@pytest.fixture
def enumerator(mocker):
    mock_enumerator = mocker.create_autospec(
        DnsSDDomainEnumerator, instance=True
    )
    mock_enumerator.get_browsing_domains.return_value = []
    mock_enumerator.get_default_browsing_domain.return_value = None
    mock_enumerator.get_legacy_browsing_domains.return_value = []
    mock_enumerator.get_registering_domains.return_value = []
    mock_enumerator.get_default_registering_domain.return_value = None
    return mock_enumerator


class TestDnsSDFactory:
    def test_domain_enumerator_from_string(self, factory):
        enumerator = factory.create_domain_enumerator("example.com")
        assert isinstance(enumerator, UnicastDnsSDDomainEnumerator)
        assert enumerator.computer_domains == ["example.com."]

    def test_domain_enumerator_from_computer_domains(
        self, factory, fake_zone, mocker
    ):
        mock_domains = mocker.patch(
            "unicast_dnssd.util.domain_util.get_computer_domains",
            return_value=["a.example.", "b.example."],
        )
        enumerator = factory.create_domain_enumerator()
        assert enumerator.computer_domains == ["a.example.", "b.example."]
        mock_domains.assert_called_once_with(factory.config, fake_zone)

    def test_browser_from_domains(self, factory):
        browser = factory.create_browser(["a.example", "b.example"])
        assert isinstance(browser, UnicastDnsSDBrowser)
        assert browser.browsing_domains == ["a.example.", "b.example."]

    def test_browser_invalid_domain(self, factory):
        with pytest.raises(InvalidNameError):
            factory.create_browser("bad..domain")

    def test_browser_prefers_browsing_domains(self, factory, enumerator):
        enumerator.get_browsing_domains.return_value = ["b.example."]
        enumerator.get_default_browsing_domain.return_value = "db.example."

        browser = factory.create_browser_from_enumerator(enumerator)
        assert browser.browsing_domains == ["b.example."]
        enumerator.get_default_browsing_domain.assert_not_called()

    def test_browser_falls_back_to_default(self, factory, enumerator):
        enumerator.get_default_browsing_domain.return_value = "db.example."
        enumerator.get_legacy_browsing_domains.return_value = ["lb.example."]

        browser = factory.create_browser_from_enumerator(enumerator)
        assert browser.browsing_domains == ["db.example."]
        enumerator.get_legacy_browsing_domains.assert_not_called()

    def test_browser_falls_back_to_legacy(self, factory, enumerator):
        enumerator.get_legacy_browsing_domains.return_value = ["lb.example."]

        browser = factory.create_browser_from_enumerator(enumerator)
        assert browser.browsing_domains == ["lb.example."]

    def test_browser_enumerates_when_no_domain_given(self, factory, fake_zone, mocker):
        mocker.patch(
            "unicast_dnssd.util.domain_util.get_computer_domains",
            return_value=["example.com."],
        )
        fake_zone.add_ptr("b._dns-sd._udp.example.com.", "browse.example.")

        assert factory.create_browser().browsing_domains == ["browse.example."]

    def test_registrator(self, factory, fake_zone):
        registrator = factory.create_registrator("example.com")
        assert isinstance(registrator, UnicastDnsSDRegistrator)
        assert registrator.registration_domain == "example.com."
        assert registrator.ttl == 90
        assert registrator.get_local_host_name() == "me.example.com."
        assert fake_zone.endpoints == [None]

    def test_registrator_prefers_default_domain(self, factory, enumerator):
        enumerator.get_default_registering_domain.return_value = "dr.example."
        enumerator.get_registering_domains.return_value = ["r.example."]

        registrator = factory.create_registrator_from_enumerator(enumerator)
        assert registrator.registration_domain == "dr.example."
        enumerator.get_registering_domains.assert_not_called()

    def test_registrator_falls_back_to_first_domain(self, factory, enumerator):
        enumerator.get_registering_domains.return_value = [
            "r1.example.",
            "r2.example.",
        ]

        registrator = factory.create_registrator_from_enumerator(enumerator)
        assert registrator.registration_domain == "r1.example."

    def test_registrator_without_domain(self, factory, enumerator):
        with pytest.raises(NoRegistrationDomainError):
            factory.create_registrator_from_enumerator(enumerator)

    def test_registrator_enumerates_when_no_domain_given(
        self, factory, fake_zone, mocker
    ):
        mocker.patch(
            "unicast_dnssd.util.domain_util.get_computer_domains",
            return_value=["example.com."],
        )
        fake_zone.add_ptr("dr._dns-sd._udp.example.com.", "reg.example.com.")

        registrator = factory.create_registrator()
        assert registrator.registration_domain == "reg.example.com."

    def test_default_transports(self, mocker):
        mock_transport = mocker.patch(
            "unicast_dnssd.factory.ResolverQueryTransport"
        )
        config = DnsSDConfig(nameservers=("192.0.2.1",), query_timeout=2.0)

        DnsSDFactory(config)

        mock_transport.assert_called_once_with(
            nameservers=("192.0.2.1",), timeout=2.0
        )

    def test_default_transports_use_system_resolver(self, mocker):
        mock_transport = mocker.patch(
            "unicast_dnssd.factory.ResolverQueryTransport"
        )
        DnsSDFactory()
        mock_transport.assert_called_once_with(nameservers=None, timeout=5.0)
