"""Browsing service types, instances and instance data over unicast DNS."""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set, Union

import dns.name
import dns.rdatatype
from dns.rdtypes.IN.SRV import SRV

from unicast_dnssd.errors import InvalidArgumentError
from unicast_dnssd.service.service_data import ServiceData
from unicast_dnssd.service.service_name import ServiceName, parse_domain
from unicast_dnssd.service.service_type import ServiceType
from unicast_dnssd.service.txt_record import parse_txt_strings
from unicast_dnssd.threading.domain_fan_out import DomainFanOut
from unicast_dnssd.transport.dns_query_transport import DnsQueryTransport

_logger = logging.getLogger(__name__)

_SERVICES_DNS_SD_UDP = (b"_services", b"_dns-sd", b"_udp")


def services_name(domain: dns.name.Name) -> dns.name.Name:
    """Returns the service type enumeration name `_services._dns-sd._udp.<domain>`."""
    return dns.name.Name(_SERVICES_DNS_SD_UDP + domain.labels)


def select_srv(records: Iterable[SRV]) -> Optional[SRV]:
    """Picks the SRV record to use: lowest priority, then highest weight.

    Ties keep the record that came first in the answer.
    """
    selected: Optional[SRV] = None
    for record in records:
        if selected is None or (record.priority, -record.weight) < (
            selected.priority,
            -selected.weight,
        ):
            selected = record
    return selected


class DnsSDBrowser(ABC):
    """Looks up service types, instances and the data of an instance."""

    @abstractmethod
    def get_service_types(self) -> Set[ServiceType]:
        """Returns every service type advertised in the browsing domains."""

    # pylint: disable=W0622 # Mirrors the attribute name of ServiceName.
    @abstractmethod
    def get_service_instances(self, type: ServiceType) -> List[ServiceName]:
        """Returns the instances of `type`, filtered by its subtypes if any."""

    @abstractmethod
    def get_service_data(self, service: ServiceName) -> Optional[ServiceData]:
        """Returns host, port and properties of `service`, or None."""


class UnicastDnsSDBrowser(DnsSDBrowser):
    """DnsSDBrowser that queries a fixed list of browsing domains."""

    def __init__(
        self,
        browsing_domains: Iterable[Union[str, dns.name.Name]],
        query_transport: DnsQueryTransport,
        *,
        fan_out: Optional[DomainFanOut] = None,
    ) -> None:
        """Initializes the UnicastDnsSDBrowser.

        Args:
            browsing_domains: Domains to look for service types and
                instances in.
            query_transport: Transport used for every query.
            fan_out: Runs the per-domain queries. A default `DomainFanOut`
                is used if None.

        Raises:
            InvalidNameError: If a browsing domain is not a valid name.
            ValueError: If `query_transport` is None.
        """
        if query_transport is None:
            raise ValueError("query_transport cannot be None.")
        self.__browsing_domains = [parse_domain(d) for d in browsing_domains]
        self.__query_transport = query_transport
        self.__fan_out = fan_out if fan_out is not None else DomainFanOut()
        _logger.info(
            "Created browser for domains %s.",
            [d.to_text() for d in self.__browsing_domains],
        )

    @property
    def browsing_domains(self) -> List[str]:
        return [d.to_text() for d in self.__browsing_domains]

    def get_service_types(self) -> Set[ServiceType]:
        per_domain = self.__fan_out.map(
            self.__get_service_types, self.__browsing_domains
        )
        results: Set[ServiceType] = set()
        for types in per_domain:
            results.update(types)
        return results

    # pylint: disable=W0622 # Mirrors the attribute name of ServiceName.
    def get_service_instances(self, type: ServiceType) -> List[ServiceName]:
        names: List[dns.name.Name] = []
        for domain in self.__browsing_domains:
            names.extend(type.browse_dns_names(domain))

        per_name = self.__fan_out.map(self.__get_service_instances, names)
        results: List[ServiceName] = []
        for instances in per_name:
            for instance in instances:
                if instance not in results:
                    results.append(instance)
        return results

    def get_service_data(self, service: ServiceName) -> Optional[ServiceData]:
        name = service.to_dns_name()
        srv_records = self.__query_transport.query(name, dns.rdatatype.SRV)
        txt_records = self.__query_transport.query(name, dns.rdatatype.TXT)
        if not srv_records and not txt_records:
            _logger.debug("No SRV or TXT records for %s.", name)
            return None

        data = ServiceData(service)
        srv = select_srv(srv_records)
        if srv is not None:
            data.host = srv.target.to_text()
            data.port = srv.port
        for txt in txt_records:
            parse_txt_strings(txt.strings, data.properties)
        return data

    def __get_service_types(self, domain: dns.name.Name) -> List[ServiceType]:
        name = services_name(domain)
        results: List[ServiceType] = []
        for record in self.__query_transport.query(name, dns.rdatatype.PTR):
            try:
                results.append(ServiceType.from_dns_name(record.target))
            except InvalidArgumentError as e:
                _logger.warning(
                    "Skipping undecodable service type %s at %s: %s",
                    record.target,
                    name,
                    e,
                )
        return results

    def __get_service_instances(
        self, name: dns.name.Name
    ) -> List[ServiceName]:
        results: List[ServiceName] = []
        for record in self.__query_transport.query(name, dns.rdatatype.PTR):
            try:
                results.append(ServiceName.from_dns_name(record.target))
            except InvalidArgumentError as e:
                _logger.warning(
                    "Skipping undecodable service instance %s at %s: %s",
                    record.target,
                    name,
                    e,
                )
        return results
