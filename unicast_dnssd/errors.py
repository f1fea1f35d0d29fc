"""Exception types raised by unicast_dnssd.

Expected negative outcomes (a name conflict on registration, an absent
name on unregistration, a missing record set) are communicated through
return values. The exceptions below cover caller mistakes, network
failures and unexpected server responses.
"""

from typing import Optional

import dns.rcode


class DnsSDError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgumentError(DnsSDError, ValueError):
    """A malformed name, type, domain or other caller supplied value."""


class InvalidNameError(InvalidArgumentError):
    """A name or domain that can not be expressed as a DNS name."""


class NameTooLongError(InvalidNameError):
    """An instance label longer than 63 bytes once UTF-8 encoded."""


class InvalidFormatError(InvalidArgumentError):
    """Text that does not follow the expected service name/type syntax."""


class InvalidTransportError(InvalidArgumentError):
    """A transport label other than `_tcp` or `_udp`."""


class TransportError(DnsSDError):
    """The resolver or update server could not be reached.

    The underlying exception is chained as `__cause__`. No retry is
    attempted by this package.
    """


class ProtocolError(DnsSDError):
    """The server answered with an unexpected response code."""

    def __init__(self, message: str, rcode: Optional[dns.rcode.Rcode] = None):
        if rcode is not None:
            message = f"{message}: {dns.rcode.to_text(rcode)}"
        super().__init__(message)
        self.rcode = rcode


class RegistrationError(ProtocolError):
    """A registration update was rejected for a reason other than a conflict."""


class UnregistrationError(ProtocolError):
    """An unregistration update was rejected for a reason other than absence."""


class NoRegistrationDomainError(DnsSDError):
    """Domain enumeration did not yield any registration domain."""
