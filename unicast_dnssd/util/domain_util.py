"""Guessing the DNS domains and host names of this computer.

Both lookups start from the addresses of the network interfaces. The domain
of an address is its reverse-resolved host name minus the leftmost label;
the reverse lookup zone of the interface network is a domain too. Reverse
lookups are PTR queries sent through a `DnsQueryTransport`.
"""

import logging
import socket
from typing import TYPE_CHECKING, List, Optional

import dns.name
import dns.rdatatype
import dns.reversename

from unicast_dnssd.errors import TransportError
from unicast_dnssd.transport.dns_query_transport import DnsQueryTransport
from unicast_dnssd.transport.resolver_query_transport import (
    ResolverQueryTransport,
)
from unicast_dnssd.util import ip

if TYPE_CHECKING:
    from unicast_dnssd.config.dnssd_config import DnsSDConfig

_logger = logging.getLogger(__name__)


def absolute_host_name(host_name: str) -> str:
    """Appends the trailing dot of an absolute name if missing."""
    return host_name if host_name.endswith(".") else host_name + "."


def _append_unique(results: List[str], value: str) -> None:
    if value not in results:
        results.append(value)


def _query_transport(
    config: Optional["DnsSDConfig"],
    query_transport: Optional[DnsQueryTransport],
) -> Optional[DnsQueryTransport]:
    if query_transport is not None:
        return query_transport
    try:
        if config is None:
            return ResolverQueryTransport()
        return ResolverQueryTransport(
            nameservers=config.nameservers or None,
            timeout=config.query_timeout,
        )
    except TransportError as e:
        _logger.warning("Reverse lookups disabled: %s", e)
        return None


def _reverse_resolve(
    address: str, query_transport: Optional[DnsQueryTransport]
) -> Optional[dns.name.Name]:
    if query_transport is None:
        return None
    try:
        records = query_transport.query(
            dns.reversename.from_address(address), dns.rdatatype.PTR
        )
    except TransportError as e:
        _logger.debug("Reverse lookup of %s failed: %s", address, e)
        return None
    if not records:
        _logger.debug("No host name for address %s.", address)
        return None
    return records[0].target


def get_computer_domains(
    config: Optional["DnsSDConfig"] = None,
    query_transport: Optional[DnsQueryTransport] = None,
) -> List[str]:
    """Returns the candidate domains of this computer, most specific first.

    Args:
        config: `config.computer_domain` replaces the guess when set. Its
            nameservers and query timeout are used for reverse lookups.
        query_transport: Transport for the reverse lookups. One honouring
            `config` is created if None.
    """
    if config is not None and config.computer_domain:
        return [absolute_host_name(config.computer_domain)]

    transport = _query_transport(config, query_transport)
    results: List[str] = []
    for network in ip.get_interface_networks():
        host_name = _reverse_resolve(str(network.ip), transport)
        # The root label counts, so "host.lan." has three.
        if host_name is not None and len(host_name.labels) > 2:
            _append_unique(results, host_name.parent().to_text())

        network_address = str(network.network.network_address)
        _append_unique(
            results, dns.reversename.from_address(network_address).to_text()
        )
    _logger.debug("Computer domains: %s", results)
    return results


def get_computer_host_names(
    config: Optional["DnsSDConfig"] = None,
    query_transport: Optional[DnsQueryTransport] = None,
) -> List[str]:
    """Returns the host names the interface addresses reverse-resolve to.

    `config.host_name` replaces the lookup when set.
    """
    if config is not None and config.host_name:
        return [absolute_host_name(config.host_name)]

    transport = _query_transport(config, query_transport)
    results: List[str] = []
    for network in ip.get_interface_networks():
        host_name = _reverse_resolve(str(network.ip), transport)
        if host_name is not None:
            _append_unique(results, host_name.to_text())
    return results


def get_local_host_name(config: Optional["DnsSDConfig"] = None) -> str:
    """Returns the fully qualified name of this host, with a trailing dot."""
    if config is not None and config.host_name:
        return absolute_host_name(config.host_name)
    return absolute_host_name(socket.getfqdn())
