"""Utilities for network interface addresses."""

import ipaddress
import logging
import socket
from typing import List, Optional, Union

import psutil  # type: ignore[import-untyped]

_logger = logging.getLogger(__name__)

IPInterface = Union[ipaddress.IPv4Interface, ipaddress.IPv6Interface]


def _prefix_length(
    family: int, netmask: Optional[str]
) -> Optional[int]:
    """Converts a psutil netmask ("255.255.255.0" or "ffff:ffff::") to a
    prefix length. None means a host route."""
    if not netmask:
        return None
    netmask = netmask.split("%", 1)[0]
    if family == socket.AF_INET:
        mask = int(ipaddress.IPv4Address(netmask))
    else:
        mask = int(ipaddress.IPv6Address(netmask))
    return bin(mask).count("1")


def get_interface_networks() -> List[IPInterface]:
    """Retrieves the IPv4 and IPv6 addresses of every usable interface.

    Interfaces that are down are skipped, as are loopback and link-local
    addresses, since neither can have a meaningful unicast DNS domain.

    Returns:
        `ipaddress` interface objects (address plus network) in interface
        order. Empty if no interface qualifies.
    """
    stats = psutil.net_if_stats()
    results: List[IPInterface] = []
    for interface, addresses in psutil.net_if_addrs().items():
        interface_stats = stats.get(interface)
        if interface_stats is not None and not interface_stats.isup:
            continue
        for address in addresses:
            if address.family not in (socket.AF_INET, socket.AF_INET6):
                continue
            host = address.address.split("%", 1)[0]
            try:
                prefix = _prefix_length(address.family, address.netmask)
                network = ipaddress.ip_interface(
                    host if prefix is None else f"{host}/{prefix}"
                )
            except ValueError:
                _logger.debug(
                    "Ignoring unparsable address %s on %s.",
                    address.address,
                    interface,
                )
                continue
            if network.is_loopback or network.is_link_local:
                continue
            results.append(network)
    return results

