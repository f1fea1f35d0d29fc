"""DnsQueryTransport implementation backed by dnspython's stub resolver."""

import logging
from typing import List, Optional, Sequence

import dns.exception
import dns.name
import dns.rdata
import dns.rdatatype
import dns.resolver

from unicast_dnssd.errors import TransportError
from unicast_dnssd.transport.dns_query_transport import DnsQueryTransport

_logger = logging.getLogger(__name__)


class ResolverQueryTransport(DnsQueryTransport):
    """Queries the system (or configured) recursive resolvers.

    NXDOMAIN and empty answers are reported as an empty list. Every other
    resolver failure (timeouts, no reachable nameserver, ...) is raised as
    `TransportError`.
    """

    def __init__(
        self,
        resolver: Optional[dns.resolver.Resolver] = None,
        *,
        nameservers: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initializes the ResolverQueryTransport.

        Args:
            resolver: Resolver to use. A new one configured from the system
                settings is created if None.
            nameservers: Optional nameserver addresses overriding the
                system configuration.
            timeout: Optional total lifetime of a single query, in seconds.

        Raises:
            TransportError: If the system resolver configuration is needed
                but missing.
        """
        if resolver is None:
            try:
                resolver = dns.resolver.Resolver(configure=not nameservers)
            except dns.exception.DNSException as e:
                raise TransportError(
                    "No system resolver configuration found"
                ) from e
        if nameservers:
            resolver.nameservers = list(nameservers)
        if timeout is not None:
            resolver.lifetime = timeout
        self.__resolver = resolver

    def query(
        self, name: dns.name.Name, rdtype: dns.rdatatype.RdataType
    ) -> List[dns.rdata.Rdata]:
        try:
            answer = self.__resolver.resolve(
                name, rdtype, search=False, raise_on_no_answer=False
            )
        except dns.resolver.NXDOMAIN:
            _logger.debug(
                "No such name %s (%s).", name, dns.rdatatype.to_text(rdtype)
            )
            return []
        except dns.exception.DNSException as e:
            raise TransportError(
                f"Failed to look up {dns.rdatatype.to_text(rdtype)} "
                f"records for {name}"
            ) from e

        if answer.rrset is None:
            _logger.debug(
                "No %s records at %s.", dns.rdatatype.to_text(rdtype), name
            )
            return []
        return list(answer.rrset)
