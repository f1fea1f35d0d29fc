"""DnsSDFactory builds enumerators, browsers and registrators."""

import functools
import logging
from typing import Iterable, List, Optional, Union

import dns.name

from unicast_dnssd.config.dnssd_config import DnsSDConfig
from unicast_dnssd.discovery.browser import DnsSDBrowser, UnicastDnsSDBrowser
from unicast_dnssd.discovery.domain_enumerator import (
    DnsSDDomainEnumerator,
    UnicastDnsSDDomainEnumerator,
)
from unicast_dnssd.errors import NoRegistrationDomainError
from unicast_dnssd.registration.registrator import (
    DnsSDRegistrator,
    UnicastDnsSDRegistrator,
    default_update_transport_factory,
)
from unicast_dnssd.threading.domain_fan_out import DomainFanOut
from unicast_dnssd.transport.dns_query_transport import DnsQueryTransport
from unicast_dnssd.transport.dns_update_transport import UpdateTransportFactory
from unicast_dnssd.transport.resolver_query_transport import (
    ResolverQueryTransport,
)
from unicast_dnssd.util import domain_util

_logger = logging.getLogger(__name__)

DomainsLike = Union[str, dns.name.Name, Iterable[Union[str, dns.name.Name]]]


def _as_domain_list(
    domains: DomainsLike,
) -> List[Union[str, dns.name.Name]]:
    if isinstance(domains, (str, dns.name.Name)):
        return [domains]
    return list(domains)


class DnsSDFactory:
    """
    Creates the DNS-SD components, sharing one configuration and one pair
    of transports between them.

    Any domain left unspecified is found through domain enumeration,
    starting from the computer domains of this host.
    """

    def __init__(
        self,
        config: Optional[DnsSDConfig] = None,
        *,
        query_transport: Optional[DnsQueryTransport] = None,
        update_transport_factory: Optional[UpdateTransportFactory] = None,
    ) -> None:
        """Initializes the DnsSDFactory.

        Args:
            config: Settings for the created objects. Defaults apply if None.
            query_transport: Transport for every query. A
                `ResolverQueryTransport` honouring `config` is created if
                None.
            update_transport_factory: Creates the update transport of each
                registrator. Defaults to dnspython updates with
                `config.update_timeout`.

        Raises:
            TransportError: If a default query transport is needed but the
                system has no resolver configuration.
        """
        if config is None:
            config = DnsSDConfig()
        if query_transport is None:
            query_transport = ResolverQueryTransport(
                nameservers=config.nameservers or None,
                timeout=config.query_timeout,
            )
        if update_transport_factory is None:
            update_transport_factory = functools.partial(
                default_update_transport_factory,
                timeout=config.update_timeout,
            )
        self.__config = config
        self.__query_transport = query_transport
        self.__update_transport_factory = update_transport_factory

    @property
    def config(self) -> DnsSDConfig:
        return self.__config

    def create_domain_enumerator(
        self, computer_domains: Optional[DomainsLike] = None
    ) -> DnsSDDomainEnumerator:
        """Creates an enumerator for `computer_domains`, or for the guessed
        computer domains of this host if None."""
        if computer_domains is None:
            computer_domains = domain_util.get_computer_domains(
                self.__config, self.__query_transport
            )
        return UnicastDnsSDDomainEnumerator(
            _as_domain_list(computer_domains),
            self.__query_transport,
            fan_out=self.__new_fan_out(),
        )

    def create_browser(
        self, browsing_domains: Optional[DomainsLike] = None
    ) -> DnsSDBrowser:
        """Creates a browser for `browsing_domains`, or for the enumerated
        browsing domains if None."""
        if browsing_domains is None:
            return self.create_browser_from_enumerator(
                self.create_domain_enumerator()
            )
        return UnicastDnsSDBrowser(
            _as_domain_list(browsing_domains),
            self.__query_transport,
            fan_out=self.__new_fan_out(),
        )

    def create_browser_from_enumerator(
        self, enumerator: DnsSDDomainEnumerator
    ) -> DnsSDBrowser:
        """Creates a browser for the domains `enumerator` recommends.

        The recommended browsing domains are used if there are any, else the
        default browsing domain, else the legacy browsing domains.
        """
        domains: List[str] = enumerator.get_browsing_domains()
        if not domains:
            default = enumerator.get_default_browsing_domain()
            if default is not None:
                domains = [default]
            else:
                domains = enumerator.get_legacy_browsing_domains()
        _logger.debug("Browsing domains from enumeration: %s", domains)
        return self.create_browser(domains)

    def create_registrator(
        self, registering_domain: Optional[Union[str, dns.name.Name]] = None
    ) -> DnsSDRegistrator:
        """Creates a registrator for `registering_domain`, or for the
        enumerated registration domain if None.

        Raises:
            NoRegistrationDomainError: If enumeration finds no domain.
            TransportError: If the advertised update server has no address.
        """
        if registering_domain is None:
            return self.create_registrator_from_enumerator(
                self.create_domain_enumerator()
            )
        return UnicastDnsSDRegistrator(
            registering_domain,
            self.__query_transport,
            update_transport_factory=self.__update_transport_factory,
            ttl=self.__config.default_ttl,
            local_host_name=self.__config.host_name,
        )

    def create_registrator_from_enumerator(
        self, enumerator: DnsSDDomainEnumerator
    ) -> DnsSDRegistrator:
        """Creates a registrator for the default registration domain, or
        else the first recommended one.

        Raises:
            NoRegistrationDomainError: If `enumerator` has neither.
        """
        domain = enumerator.get_default_registering_domain()
        if domain is None:
            domains = enumerator.get_registering_domains()
            if not domains:
                raise NoRegistrationDomainError(
                    "Failed to find any registering domain."
                )
            domain = domains[0]
        return self.create_registrator(domain)

    def __new_fan_out(self) -> DomainFanOut:
        return DomainFanOut(self.__config.max_workers)
