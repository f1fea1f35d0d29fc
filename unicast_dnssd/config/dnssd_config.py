# unicast_dnssd/config/dnssd_config.py
import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Tuple, TypeVar

from unicast_dnssd.errors import InvalidArgumentError

T = TypeVar("T")

ENV_DOMAIN = "DNSSD_DOMAIN"
ENV_HOSTNAME = "DNSSD_HOSTNAME"
ENV_NAMESERVERS = "DNSSD_NAMESERVERS"
ENV_QUERY_TIMEOUT = "DNSSD_QUERY_TIMEOUT"
ENV_UPDATE_TIMEOUT = "DNSSD_UPDATE_TIMEOUT"
ENV_TTL = "DNSSD_TTL"
ENV_MAX_WORKERS = "DNSSD_MAX_WORKERS"


def _parse(
    environ: Mapping[str, str], key: str, parser: Callable[[str], T]
) -> Optional[T]:
    value = environ.get(key, "").strip()
    if not value:
        return None
    try:
        return parser(value)
    except ValueError as e:
        raise InvalidArgumentError(f"Invalid {key}: '{value}'.") from e


@dataclass(frozen=True)
class DnsSDConfig:
    """Configuration shared by the objects DnsSDFactory creates."""

    # Replaces the computer domains guessed from the network interfaces.
    computer_domain: Optional[str] = None

    # Replaces the local host name and the computer host names.
    host_name: Optional[str] = None

    # Resolver addresses. The system configuration is used if empty.
    nameservers: Tuple[str, ...] = ()

    # Seconds.
    query_timeout: float = 5.0
    update_timeout: float = 10.0

    default_ttl: int = 60

    # Upper bound on concurrent per-domain queries. None lets
    # ThreadPoolExecutor decide.
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "nameservers", tuple(self.nameservers))
        if self.query_timeout <= 0 or self.update_timeout <= 0:
            raise InvalidArgumentError("Timeouts must be positive.")
        if self.default_ttl < 0:
            raise InvalidArgumentError(
                f"default_ttl must not be negative, got {self.default_ttl}."
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise InvalidArgumentError(
                f"max_workers must be at least 1, got {self.max_workers}."
            )

    @classmethod
    def from_environment(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "DnsSDConfig":
        """Reads the DNSSD_* environment variables.

        Unset or empty variables keep their defaults. DNSSD_NAMESERVERS is a
        comma separated list.

        Raises:
            InvalidArgumentError: If a numeric variable does not parse.
        """
        if environ is None:
            environ = os.environ

        overrides = {
            "computer_domain": environ.get(ENV_DOMAIN) or None,
            "host_name": environ.get(ENV_HOSTNAME) or None,
            "nameservers": tuple(
                server.strip()
                for server in environ.get(ENV_NAMESERVERS, "").split(",")
                if server.strip()
            ),
            "query_timeout": _parse(environ, ENV_QUERY_TIMEOUT, float),
            "update_timeout": _parse(environ, ENV_UPDATE_TIMEOUT, float),
            "default_ttl": _parse(environ, ENV_TTL, int),
            "max_workers": _parse(environ, ENV_MAX_WORKERS, int),
        }
        return cls(
            **{
                key: value
                for key, value in overrides.items()
                if value is not None
            }
        )
