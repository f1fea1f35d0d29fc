"""Utility functions for interface and host name introspection."""

from unicast_dnssd.util.domain_util import (
    get_computer_domains,
    get_computer_host_names,
    get_local_host_name,
)
from unicast_dnssd.util.ip import get_interface_networks

__all__ = [
    "get_computer_domains",
    "get_computer_host_names",
    "get_interface_networks",
    "get_local_host_name",
]
