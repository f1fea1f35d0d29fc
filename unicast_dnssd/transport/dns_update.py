"""Transport-neutral model of an RFC 2136 dynamic update transaction."""

import dataclasses
from typing import List, Optional

import dns.name
import dns.rdata


@dataclasses.dataclass(frozen=True)
class Prerequisite:
    """Requires that a name is in use (`exists`) or not in use."""

    name: dns.name.Name
    exists: bool

    @classmethod
    def name_present(cls, name: dns.name.Name) -> "Prerequisite":
        return cls(name, True)

    @classmethod
    def name_absent(cls, name: dns.name.Name) -> "Prerequisite":
        return cls(name, False)


@dataclasses.dataclass(frozen=True)
class ResourceRecord:
    """A record to add."""

    name: dns.name.Name
    ttl: int
    rdata: dns.rdata.Rdata


@dataclasses.dataclass(frozen=True)
class Deletion:
    """A single record to delete, or every record set at `name`."""

    name: dns.name.Name
    rdata: Optional[dns.rdata.Rdata] = None


@dataclasses.dataclass
class DnsUpdate:
    """An atomic update against `zone`.

    The server checks every prerequisite before applying any change. If one
    fails, nothing is changed and the response code says why (YXDOMAIN for a
    name that should be absent, NXDOMAIN for one that should be present).
    """

    zone: dns.name.Name
    prerequisites: List[Prerequisite] = dataclasses.field(default_factory=list)
    additions: List[ResourceRecord] = dataclasses.field(default_factory=list)
    deletions: List[Deletion] = dataclasses.field(default_factory=list)
