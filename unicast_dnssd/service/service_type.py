"""Defines the Transport enum and the ServiceType value class."""

import dataclasses
import enum
from typing import Sequence, Tuple

import dns.exception
import dns.name

from unicast_dnssd.errors import (
    InvalidFormatError,
    InvalidNameError,
    InvalidTransportError,
)

_SUB_LABEL = b"_sub"


def decode_label(label: bytes) -> str:
    """Decodes a raw DNS label as UTF-8.

    Raises:
        InvalidNameError: If the label is not valid UTF-8.
    """
    try:
        return label.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidNameError(f"Label is not valid UTF-8: {label!r}") from e


class Transport(enum.Enum):
    """Transport protocol label of a DNS-SD service type."""

    TCP = "_tcp"
    UDP = "_udp"

    @property
    def label(self) -> str:
        """The DNS label for this transport (e.g. "_tcp")."""
        return self.value

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> "Transport":
        """Looks up a transport by its label, ignoring case.

        Raises:
            InvalidTransportError: If `label` is neither "_tcp" nor "_udp".
        """
        for transport in cls:
            if transport.value == label.lower():
                return transport
        raise InvalidTransportError(f"Not a valid transport label: '{label}'.")


@dataclasses.dataclass(frozen=True)
class ServiceType:
    """A DNS-SD service type such as `_http._tcp`.

    Subtypes only act as a browsing filter. They take no part in equality
    or hashing, so `_http._tcp,_printer` and `_http._tcp` are the same
    service type.
    """

    type: str
    transport: Transport
    subtypes: Tuple[str, ...] = dataclasses.field(default=(), compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.type, str) or not self.type:
            raise InvalidFormatError("Service type must be a non-empty string.")
        if isinstance(self.transport, str):
            object.__setattr__(
                self, "transport", Transport.from_label(self.transport)
            )
        elif not isinstance(self.transport, Transport):
            raise InvalidTransportError(
                f"transport must be Transport or str, "
                f"got {type(self.transport).__name__}."
            )
        subtypes = tuple(self.subtypes)
        for subtype in subtypes:
            if not subtype:
                raise InvalidFormatError(
                    f"Empty subtype in service type '{self.to_dns_string()}'."
                )
        object.__setattr__(self, "subtypes", subtypes)

    @classmethod
    def parse(cls, text: str) -> "ServiceType":
        """Parses the `type.transport[,subtype]*` form.

        Raises:
            InvalidFormatError: If the text is malformed or a subtype is empty.
            InvalidTransportError: If the transport label is unknown.
        """
        main, *subtypes = text.split(",")
        type_, sep, transport = main.partition(".")
        if not sep or not type_:
            raise InvalidFormatError(f"Invalid service type: '{text}'.")
        return cls(type_, Transport.from_label(transport), tuple(subtypes))

    @classmethod
    def from_dns_name(cls, name: dns.name.Name) -> "ServiceType":
        """Builds a ServiceType from the first two labels of `name`.

        Used on the targets of `_services._dns-sd._udp` PTR records.

        Raises:
            InvalidNameError: If `name` has fewer than two labels or a
                label is not valid UTF-8.
            InvalidTransportError: If the second label is not a transport.
        """
        if len(name.labels) < 2:
            raise InvalidNameError(f"Too few labels in service type: {name}")
        return cls(
            decode_label(name.labels[0]),
            Transport.from_label(decode_label(name.labels[1])),
        )

    def base_type(self) -> "ServiceType":
        """Returns this type without any subtypes."""
        return dataclasses.replace(self, subtypes=())

    def with_subtype(self, subtype: str) -> "ServiceType":
        """Returns a copy with `subtype` appended to the subtype list."""
        return self.with_subtypes(subtype)

    def with_subtypes(self, *subtypes: str) -> "ServiceType":
        """Returns a copy with `subtypes` appended to the subtype list."""
        return dataclasses.replace(self, subtypes=self.subtypes + subtypes)

    def to_dns_string(self) -> str:
        """Returns `type.transport` without subtypes, e.g. "_http._tcp"."""
        return f"{self.type}.{self.transport}"

    def to_dns_name(self, domain: dns.name.Name) -> dns.name.Name:
        """Returns the `type.transport.<domain>` name used for PTR browsing."""
        try:
            return dns.name.Name(
                (self.type.encode("utf-8"), self.transport.label.encode("ascii"))
                + domain.labels
            )
        except dns.exception.DNSException as e:
            raise InvalidNameError(
                f"Invalid service type name: {self.to_dns_string()}.{domain}"
            ) from e

    def browse_dns_names(
        self, domain: dns.name.Name
    ) -> Sequence[dns.name.Name]:
        """Returns the PTR names to query when browsing for this type.

        Without subtypes this is just the type name. Otherwise there is one
        `<subtype>._sub.<type>.<transport>.<domain>` name per subtype and the
        instances found under any of them match (an OR of subtypes).
        """
        type_name = self.to_dns_name(domain)
        if not self.subtypes:
            return [type_name]
        names = []
        for subtype in self.subtypes:
            try:
                names.append(
                    dns.name.Name(
                        (subtype.encode("utf-8"), _SUB_LABEL) + type_name.labels
                    )
                )
            except dns.exception.DNSException as e:
                raise InvalidNameError(
                    f"Invalid subtype '{subtype}' for {type_name}"
                ) from e
        return names

    def __str__(self) -> str:
        return "".join([self.to_dns_string()] + [f",{s}" for s in self.subtypes])
