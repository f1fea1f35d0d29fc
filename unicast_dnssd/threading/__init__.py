"""Threading helpers for concurrent per-domain lookups."""

from unicast_dnssd.threading.domain_fan_out import DomainFanOut
from unicast_dnssd.threading.throwing_thread_pool_executor import (
    ThrowingThreadPoolExecutor,
)

__all__ = [
    "DomainFanOut",
    "ThrowingThreadPoolExecutor",
]
