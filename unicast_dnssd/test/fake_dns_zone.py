"""In-memory DNS zone that serves both queries and dynamic updates."""

import threading
from typing import Dict, List, Optional, Sequence, Tuple, Union

import dns.name
import dns.rcode
import dns.rdata
import dns.rdataclass
import dns.rdatatype

from unicast_dnssd.errors import TransportError
from unicast_dnssd.transport.dns_query_transport import DnsQueryTransport
from unicast_dnssd.transport.dns_update import DnsUpdate
from unicast_dnssd.transport.dns_update_transport import (
    DnsUpdateTransport,
    UpdateEndpoint,
)
from unicast_dnssd.transport.tsig_key import TsigKey

NameLike = Union[str, dns.name.Name]
UpdateResult = Union[dns.rcode.Rcode, Exception]


def _to_name(name: NameLike) -> dns.name.Name:
    if isinstance(name, dns.name.Name):
        return name
    return dns.name.from_text(name)


def make_rdata(rdtype: str, text: str) -> dns.rdata.Rdata:
    """Parses `text` as an IN-class record of type `rdtype`."""
    return dns.rdata.from_text(
        dns.rdataclass.IN, dns.rdatatype.from_text(rdtype), text
    )


class FakeDnsZone(DnsQueryTransport, DnsUpdateTransport):
    """
    Record store keyed by (name, type) that applies RFC 2136 prerequisites.

    A "name absent" prerequisite on a name that holds records fails with
    YXDOMAIN, a "name present" one on an empty name with NXDOMAIN. Identical
    records are stored once. Every update is recorded together with the key
    it was signed with.
    """

    __test__ = False

    def __init__(self) -> None:
        self.__lock = threading.Lock()
        self.__records: Dict[
            Tuple[dns.name.Name, dns.rdatatype.RdataType], List[dns.rdata.Rdata]
        ] = {}
        self.__failing_names: Optional[List[dns.name.Name]] = None
        self.__pending_results: List[UpdateResult] = []
        self.queries: List[Tuple[dns.name.Name, dns.rdatatype.RdataType]] = []
        self.updates: List[Tuple[DnsUpdate, Optional[TsigKey]]] = []
        self.endpoints: List[Optional[UpdateEndpoint]] = []

    # Zone contents.

    def add(self, name: NameLike, rdtype: str, text: str) -> None:
        """Adds one record given in presentation format."""
        self.add_rdata(name, make_rdata(rdtype, text))

    def add_rdata(self, name: NameLike, rdata: dns.rdata.Rdata) -> None:
        with self.__lock:
            self.__add_locked(_to_name(name), rdata)

    def add_ptr(self, owner: NameLike, target: NameLike) -> None:
        self.add(owner, "PTR", _to_name(target).to_text())

    def records(
        self, name: NameLike, rdtype: Union[str, dns.rdatatype.RdataType]
    ) -> List[dns.rdata.Rdata]:
        if isinstance(rdtype, str):
            rdtype = dns.rdatatype.from_text(rdtype)
        with self.__lock:
            return list(self.__records.get((_to_name(name), rdtype), []))

    def name_exists(self, name: NameLike) -> bool:
        with self.__lock:
            return self.__name_exists_locked(_to_name(name))

    # Failure injection.

    def fail_queries(self, names: Optional[Sequence[NameLike]] = None) -> None:
        """Makes queries raise TransportError, for every name if `names` is
        None."""
        with self.__lock:
            self.__failing_names = (
                [] if names is None else [_to_name(n) for n in names]
            )

    def clear_query_failures(self) -> None:
        with self.__lock:
            self.__failing_names = None

    def queue_update_results(self, *results: UpdateResult) -> None:
        """Answers the next updates with these rcodes (nothing is applied) or
        raises these exceptions, in order."""
        with self.__lock:
            self.__pending_results.extend(results)

    # Transports.

    def update_transport_factory(
        self, endpoint: Optional[UpdateEndpoint]
    ) -> "FakeDnsZone":
        self.endpoints.append(endpoint)
        return self

    def query(
        self, name: dns.name.Name, rdtype: dns.rdatatype.RdataType
    ) -> List[dns.rdata.Rdata]:
        with self.__lock:
            self.queries.append((name, rdtype))
            failing = self.__failing_names
            if failing is not None and (not failing or name in failing):
                raise TransportError(f"Injected query failure for {name}")
            return list(self.__records.get((name, rdtype), []))

    def send_update(
        self, update: DnsUpdate, tsig_key: Optional[TsigKey] = None
    ) -> dns.rcode.Rcode:
        with self.__lock:
            self.updates.append((update, tsig_key))
            if self.__pending_results:
                result = self.__pending_results.pop(0)
                if isinstance(result, Exception):
                    raise result
                return result

            for prerequisite in update.prerequisites:
                exists = self.__name_exists_locked(prerequisite.name)
                if prerequisite.exists and not exists:
                    return dns.rcode.NXDOMAIN
                if not prerequisite.exists and exists:
                    return dns.rcode.YXDOMAIN

            for deletion in update.deletions:
                if deletion.rdata is None:
                    for key in [
                        k for k in self.__records if k[0] == deletion.name
                    ]:
                        del self.__records[key]
                    continue
                key = (deletion.name, deletion.rdata.rdtype)
                existing = self.__records.get(key, [])
                if deletion.rdata in existing:
                    existing.remove(deletion.rdata)
                if not existing:
                    self.__records.pop(key, None)

            for record in update.additions:
                self.__add_locked(record.name, record.rdata)
            return dns.rcode.NOERROR

    def __add_locked(
        self, name: dns.name.Name, rdata: dns.rdata.Rdata
    ) -> None:
        existing = self.__records.setdefault((name, rdata.rdtype), [])
        if rdata not in existing:
            existing.append(rdata)

    def __name_exists_locked(self, name: dns.name.Name) -> bool:
        return any(key[0] == name for key in self.__records)
