"""DnsQueryTransport ABC for looking up DNS record sets."""

from abc import ABC, abstractmethod
from typing import List

import dns.name
import dns.rdata
import dns.rdatatype


# pylint: disable=R0903 # Interface definition
class DnsQueryTransport(ABC):
    """Looks up the records of one type at one name.

    Implementations must tell an empty result apart from a failure: a name
    or record set that does not exist is an empty list, while a resolver
    that could not be reached raises `TransportError`.
    """

    @abstractmethod
    def query(
        self, name: dns.name.Name, rdtype: dns.rdatatype.RdataType
    ) -> List[dns.rdata.Rdata]:
        """Returns the records of type `rdtype` at `name`.

        Args:
            name: Absolute name to look up.
            rdtype: Record type, e.g. `dns.rdatatype.PTR`.

        Returns:
            The records found, in answer order. Empty if there are none.

        Raises:
            TransportError: If the lookup could not be performed.
        """
        raise NotImplementedError(
            "DnsQueryTransport.query must be implemented by subclasses."
        )
