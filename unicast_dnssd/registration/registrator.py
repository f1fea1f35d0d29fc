"""Registering services through RFC 2136 dynamic updates."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Union

import dns.exception
import dns.name
import dns.rcode
import dns.rdata
import dns.rdataclass
import dns.rdatatype
from dns.rdtypes.ANY.PTR import PTR
from dns.rdtypes.ANY.TXT import TXT
from dns.rdtypes.IN.SRV import SRV

from unicast_dnssd.discovery.browser import select_srv, services_name
from unicast_dnssd.errors import (
    DnsSDError,
    InvalidArgumentError,
    InvalidNameError,
    RegistrationError,
    TransportError,
    UnregistrationError,
)
from unicast_dnssd.registration.registration_result import (
    CleanupOutcome,
    UnregisterOutcome,
    UnregistrationResult,
)
from unicast_dnssd.service.service_data import ServiceData
from unicast_dnssd.service.service_name import ServiceName, parse_domain
from unicast_dnssd.service.service_type import ServiceType
from unicast_dnssd.service.txt_record import encode_txt_strings
from unicast_dnssd.transport.dns_query_transport import DnsQueryTransport
from unicast_dnssd.transport.dns_update import (
    Deletion,
    DnsUpdate,
    Prerequisite,
    ResourceRecord,
)
from unicast_dnssd.transport.dns_update_transport import (
    DnsUpdateTransport,
    UpdateEndpoint,
    UpdateTransportFactory,
)
from unicast_dnssd.transport.dnspython_update_transport import (
    DnsPythonUpdateTransport,
    default_update_endpoint,
)
from unicast_dnssd.transport.tsig_key import TsigKey
from unicast_dnssd.util import domain_util

_logger = logging.getLogger(__name__)

_DNS_UPDATE_UDP = (b"_dns-update", b"_udp")

DEFAULT_TTL = 60
MAX_TTL = 2**31 - 1
MAX_PORT = 65535


def default_update_transport_factory(
    endpoint: Optional[UpdateEndpoint], *, timeout: float = 10.0
) -> DnsUpdateTransport:
    """Creates a `DnsPythonUpdateTransport` for `endpoint`.

    Without an endpoint the first system nameserver is used.
    """
    if endpoint is None:
        endpoint = default_update_endpoint()
    return DnsPythonUpdateTransport(endpoint, timeout=timeout)


def _validate_ttl(ttl: int) -> int:
    if isinstance(ttl, bool) or not isinstance(ttl, int):
        raise InvalidArgumentError(f"TTL must be an int, got {ttl!r}.")
    if not 0 <= ttl <= MAX_TTL:
        raise InvalidArgumentError(f"TTL out of range: {ttl}.")
    return ttl


def _ptr(target: dns.name.Name) -> PTR:
    return PTR(dns.rdataclass.IN, dns.rdatatype.PTR, target)


class DnsSDRegistrator(ABC):
    """Registers and unregisters services in a registration domain."""

    # pylint: disable=W0622 # Mirrors the attribute name of ServiceName.
    @abstractmethod
    def make_service_name(self, name: str, type: ServiceType) -> ServiceName:
        """Returns a ServiceName for `name` in the registration domain."""

    @abstractmethod
    def get_local_host_name(self) -> str:
        """Returns the fully qualified name of this host."""

    @property
    @abstractmethod
    def ttl(self) -> int:
        """Time to live of registered records, in seconds."""

    @ttl.setter
    @abstractmethod
    def ttl(self, ttl: int) -> None:
        pass

    @abstractmethod
    def set_tsig_key(
        self,
        name: Optional[str],
        algorithm: Optional[str],
        secret: Optional[str],
    ) -> None:
        """Sets the key signing updates. Any empty field disables signing."""

    @abstractmethod
    def register_service(self, data: ServiceData) -> bool:
        """Registers `data`.

        Returns:
            True if registered, False if the instance name is already taken.
        """

    @abstractmethod
    def unregister_service(self, name: ServiceName) -> bool:
        """Unregisters `name`.

        Returns:
            True if removed, False if there was no such instance.
        """


class UnicastDnsSDRegistrator(DnsSDRegistrator):
    """DnsSDRegistrator that sends dynamic updates for one domain.

    The update server is found through the `_dns-update._udp.<domain>` SRV
    record. Without one, the update transport factory is handed None and
    picks its own default.
    """

    def __init__(
        self,
        registration_domain: Union[str, dns.name.Name],
        query_transport: DnsQueryTransport,
        *,
        update_transport_factory: Optional[UpdateTransportFactory] = None,
        ttl: int = DEFAULT_TTL,
        tsig_key: Optional[TsigKey] = None,
        local_host_name: Optional[str] = None,
    ) -> None:
        """Initializes the UnicastDnsSDRegistrator.

        Args:
            registration_domain: Domain to register services in. It is also
                the zone every update is sent for.
            query_transport: Transport used to find the update server.
            update_transport_factory: Creates the update transport from the
                discovered endpoint (or None). Defaults to
                `default_update_transport_factory`.
            ttl: Time to live of registered records, in seconds.
            tsig_key: Key to sign updates with, if any.
            local_host_name: Overrides the name `get_local_host_name`
                returns.

        Raises:
            InvalidNameError: If `registration_domain` is not a valid name.
            InvalidArgumentError: If `ttl` is invalid.
            TransportError: If the discovered update server has no address.
        """
        if query_transport is None:
            raise ValueError("query_transport cannot be None.")
        if update_transport_factory is None:
            update_transport_factory = default_update_transport_factory

        self.__domain = parse_domain(registration_domain)
        self.__query_transport = query_transport
        self.__ttl = _validate_ttl(ttl)
        self.__tsig_key = tsig_key
        self.__local_host_name = local_host_name
        self.__services_name = services_name(self.__domain)

        endpoint = self.__find_update_endpoint()
        self.__update_transport = update_transport_factory(endpoint)
        _logger.info(
            "Created registrator for domain %s (update server: %s).",
            self.__domain,
            endpoint if endpoint is not None else "default",
        )

    @property
    def registration_domain(self) -> str:
        return self.__domain.to_text()

    @property
    def ttl(self) -> int:
        return self.__ttl

    @ttl.setter
    def ttl(self, ttl: int) -> None:
        self.__ttl = _validate_ttl(ttl)

    @property
    def tsig_key(self) -> Optional[TsigKey]:
        return self.__tsig_key

    def set_tsig_key(
        self,
        name: Optional[str],
        algorithm: Optional[str],
        secret: Optional[str],
    ) -> None:
        self.__tsig_key = TsigKey.create(name, algorithm, secret)

    # pylint: disable=W0622 # Mirrors the attribute name of ServiceName.
    def make_service_name(self, name: str, type: ServiceType) -> ServiceName:
        return ServiceName(name, type, self.__domain.to_text())

    def get_local_host_name(self) -> str:
        if self.__local_host_name:
            return domain_util.absolute_host_name(self.__local_host_name)
        return domain_util.get_local_host_name()

    def register_service(self, data: ServiceData) -> bool:
        """Registers `data` unless its instance name is already in use.

        A single update adds the type enumeration PTR, the instance PTR and
        the instance SRV and TXT records, all guarded by the prerequisite
        that the instance name does not exist yet.

        Raises:
            InvalidArgumentError: If the name is outside the registration
                domain, or the host, port or properties are invalid.
            RegistrationError: If the server rejected the update.
            TransportError: If the update could not be sent.
        """
        instance_name = self.__instance_dns_name(data.name)
        type_name = data.name.type.to_dns_name(self.__domain)
        if isinstance(data.port, bool) or not isinstance(data.port, int):
            raise InvalidArgumentError(f"Invalid port: {data.port!r}.")
        if not 0 <= data.port <= MAX_PORT:
            raise InvalidArgumentError(f"Port out of range: {data.port}.")
        target = self.__host_dns_name(data.host)

        records: List[dns.rdata.Rdata] = [
            SRV(
                dns.rdataclass.IN,
                dns.rdatatype.SRV,
                0,
                0,
                data.port,
                target,
            ),
            TXT(
                dns.rdataclass.IN,
                dns.rdatatype.TXT,
                encode_txt_strings(data.properties),
            ),
        ]
        update = DnsUpdate(
            zone=self.__domain,
            prerequisites=[Prerequisite.name_absent(instance_name)],
            additions=[
                ResourceRecord(
                    self.__services_name, self.__ttl, _ptr(type_name)
                ),
                ResourceRecord(type_name, self.__ttl, _ptr(instance_name)),
            ]
            + [
                ResourceRecord(instance_name, self.__ttl, record)
                for record in records
            ],
        )

        rcode = self.__update_transport.send_update(update, self.__tsig_key)
        if rcode == dns.rcode.NOERROR:
            _logger.info("Registered service %s.", data.name)
            return True
        if rcode == dns.rcode.YXDOMAIN:
            _logger.info("Service %s already exists.", data.name)
            return False
        raise RegistrationError(f"Failed to register {data.name}", rcode)

    def unregister_service(self, name: ServiceName) -> bool:
        return self._unregister(name).removed

    def _unregister(self, name: ServiceName) -> UnregistrationResult:
        """Removes `name` and then, if possible, its type advertisement.

        Raises:
            InvalidArgumentError: If the name is outside the registration
                domain.
            UnregistrationError: If the server rejected the first update.
            TransportError: If the first update could not be sent.
        """
        instance_name = self.__instance_dns_name(name)
        type_name = name.type.to_dns_name(self.__domain)
        update = DnsUpdate(
            zone=self.__domain,
            prerequisites=[Prerequisite.name_present(instance_name)],
            deletions=[
                Deletion(type_name, _ptr(instance_name)),
                Deletion(instance_name),
            ],
        )
        rcode = self.__update_transport.send_update(update, self.__tsig_key)
        if rcode == dns.rcode.NXDOMAIN:
            _logger.info("No service %s to unregister.", name)
            return UnregistrationResult(UnregisterOutcome.NOT_FOUND)
        if rcode != dns.rcode.NOERROR:
            raise UnregistrationError(f"Failed to unregister {name}", rcode)

        _logger.info("Unregistered service %s.", name)
        cleanup = self.__remove_service_type(type_name)
        return UnregistrationResult(UnregisterOutcome.REMOVED, cleanup)

    def __remove_service_type(self, type_name: dns.name.Name) -> CleanupOutcome:
        update = DnsUpdate(
            zone=self.__domain,
            prerequisites=[Prerequisite.name_absent(type_name)],
            deletions=[Deletion(self.__services_name, _ptr(type_name))],
        )
        try:
            rcode = self.__update_transport.send_update(
                update, self.__tsig_key
            )
        except (DnsSDError, dns.exception.DNSException, OSError) as e:
            _logger.warning(
                "Failed to remove service type %s: %s",
                type_name,
                e,
                exc_info=True,
            )
            return CleanupOutcome.FAILED

        if rcode == dns.rcode.NOERROR:
            _logger.debug("Removed service type record %s.", type_name)
            return CleanupOutcome.DONE
        if rcode == dns.rcode.YXDOMAIN:
            _logger.debug(
                "Kept service type record %s, instances left.", type_name
            )
            return CleanupOutcome.SKIPPED
        _logger.warning(
            "Failed to remove service type %s, server returned %s.",
            type_name,
            dns.rcode.to_text(rcode),
        )
        return CleanupOutcome.WARNED

    def __instance_dns_name(self, name: ServiceName) -> dns.name.Name:
        if parse_domain(name.domain) != self.__domain:
            raise InvalidNameError(
                f"Service {name} is not in registration domain "
                f"{self.__domain}."
            )
        return name.to_dns_name()

    def __host_dns_name(self, host: str) -> dns.name.Name:
        if not host:
            raise InvalidNameError("Service host must not be empty.")
        try:
            return dns.name.from_text(host)
        except dns.exception.DNSException as e:
            raise InvalidNameError(f"Invalid service host: '{host}'.") from e

    def __find_update_endpoint(self) -> Optional[UpdateEndpoint]:
        name = dns.name.Name(_DNS_UPDATE_UDP + self.__domain.labels)
        try:
            records = self.__query_transport.query(name, dns.rdatatype.SRV)
        except TransportError as e:
            _logger.warning(
                "Failed to look up update server %s, using default: %s",
                name,
                e,
                exc_info=True,
            )
            return None

        srv = select_srv(records)
        if srv is None:
            _logger.debug("No update server advertised at %s.", name)
            return None

        for rdtype in (dns.rdatatype.A, dns.rdatatype.AAAA):
            addresses = self.__query_transport.query(srv.target, rdtype)
            if addresses:
                endpoint = UpdateEndpoint(addresses[0].address, srv.port)
                _logger.info("Using %s to perform updates.", endpoint)
                return endpoint
        raise TransportError(
            f"Update server {srv.target} advertised at {name} has no address"
        )
