"""Domain enumeration through the `_dns-sd._udp` PTR records of RFC 6763."""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Union

import dns.name
import dns.rdatatype

from unicast_dnssd.service.service_name import parse_domain
from unicast_dnssd.threading.domain_fan_out import DomainFanOut
from unicast_dnssd.transport.dns_query_transport import DnsQueryTransport

_logger = logging.getLogger(__name__)

_DNS_SD_UDP = (b"_dns-sd", b"_udp")

BROWSING_PREFIX = "b"
DEFAULT_BROWSING_PREFIX = "db"
REGISTERING_PREFIX = "r"
DEFAULT_REGISTERING_PREFIX = "dr"
LEGACY_BROWSING_PREFIX = "lb"


def enumeration_name(prefix: str, domain: dns.name.Name) -> dns.name.Name:
    """Returns `<prefix>._dns-sd._udp.<domain>`."""
    return dns.name.Name(
        (prefix.encode("ascii"),) + _DNS_SD_UDP + domain.labels
    )


class DnsSDDomainEnumerator(ABC):
    """Finds the domains to browse and register services in."""

    @abstractmethod
    def get_browsing_domains(self) -> List[str]:
        """Returns the recommended browsing domains (`b._dns-sd._udp`)."""

    @abstractmethod
    def get_default_browsing_domain(self) -> Optional[str]:
        """Returns the default browsing domain (`db._dns-sd._udp`)."""

    @abstractmethod
    def get_registering_domains(self) -> List[str]:
        """Returns the recommended registration domains (`r._dns-sd._udp`)."""

    @abstractmethod
    def get_default_registering_domain(self) -> Optional[str]:
        """Returns the default registration domain (`dr._dns-sd._udp`)."""

    @abstractmethod
    def get_legacy_browsing_domains(self) -> List[str]:
        """Returns the legacy browsing domains (`lb._dns-sd._udp`)."""


class UnicastDnsSDDomainEnumerator(DnsSDDomainEnumerator):
    """Enumerates domains by querying each computer domain in turn.

    The computer domains form an ordered priority list. List results are the
    ordered union of the PTR targets found under every computer domain, with
    duplicates removed. Default domains are looked up one computer domain at
    a time and the first answer wins.

    Domains are returned as absolute names in text form ("example.com.").
    A transport failure on any lookup is raised as `TransportError`.
    """

    def __init__(
        self,
        computer_domains: Iterable[Union[str, dns.name.Name]],
        query_transport: DnsQueryTransport,
        *,
        fan_out: Optional[DomainFanOut] = None,
    ) -> None:
        """Initializes the UnicastDnsSDDomainEnumerator.

        Args:
            computer_domains: Candidate domains in priority order.
            query_transport: Transport used for every PTR query.
            fan_out: Runs the per-domain queries of list lookups. A default
                `DomainFanOut` is used if None.

        Raises:
            InvalidNameError: If a computer domain is not a valid name.
            ValueError: If `query_transport` is None.
        """
        if query_transport is None:
            raise ValueError("query_transport cannot be None.")
        self.__computer_domains = [parse_domain(d) for d in computer_domains]
        self.__query_transport = query_transport
        self.__fan_out = fan_out if fan_out is not None else DomainFanOut()
        _logger.info(
            "Created domain enumerator for computer domains %s.",
            [d.to_text() for d in self.__computer_domains],
        )

    @property
    def computer_domains(self) -> List[str]:
        return [d.to_text() for d in self.__computer_domains]

    def get_browsing_domains(self) -> List[str]:
        return self.__get_domains(BROWSING_PREFIX)

    def get_default_browsing_domain(self) -> Optional[str]:
        return self.__get_default_domain(DEFAULT_BROWSING_PREFIX)

    def get_registering_domains(self) -> List[str]:
        return self.__get_domains(REGISTERING_PREFIX)

    def get_default_registering_domain(self) -> Optional[str]:
        return self.__get_default_domain(DEFAULT_REGISTERING_PREFIX)

    def get_legacy_browsing_domains(self) -> List[str]:
        return self.__get_domains(LEGACY_BROWSING_PREFIX)

    def __get_domains(self, prefix: str) -> List[str]:
        per_domain = self.__fan_out.map(
            lambda domain: self.__lookup(prefix, domain),
            self.__computer_domains,
        )
        results: List[str] = []
        for domains in per_domain:
            for domain in domains:
                if domain not in results:
                    results.append(domain)
        _logger.debug("Domains for '%s': %s", prefix, results)
        return results

    def __get_default_domain(self, prefix: str) -> Optional[str]:
        for computer_domain in self.__computer_domains:
            domains = self.__lookup(prefix, computer_domain)
            if domains:
                _logger.debug(
                    "Default domain for '%s' from %s: %s",
                    prefix,
                    computer_domain,
                    domains[0],
                )
                return domains[0]
        _logger.debug("No default domain for '%s'.", prefix)
        return None

    def __lookup(self, prefix: str, domain: dns.name.Name) -> List[str]:
        name = enumeration_name(prefix, domain)
        records = self.__query_transport.query(name, dns.rdatatype.PTR)
        _logger.debug("PTR %s: %d record(s).", name, len(records))
        return [record.target.to_text() for record in records]
