"""Defines ServiceName, the identity of a DNS-SD service instance.

A ServiceName has two external forms:

* The DNS wire name `<instance>.<type>.<transport>.<domain>`, whose leftmost
  label holds the raw UTF-8 bytes of the instance name. DNS presentation
  escaping never applies to that label.
* The human readable form `name.type.transport.domain[,subtype]*`, where
  `.` and `\\` inside the instance name are backslash escaped as described
  in RFC 6763 section 4.3, and `,` inside the domain is escaped so it is
  not taken for a subtype separator.
"""

import dataclasses
from typing import List, Tuple, Union

import dns.exception
import dns.name

from unicast_dnssd.errors import (
    InvalidFormatError,
    InvalidNameError,
    NameTooLongError,
)
from unicast_dnssd.service.service_type import (
    ServiceType,
    Transport,
    decode_label,
)

MAX_LABEL_LENGTH = 63


def escape_instance_name(name: str) -> str:
    """Backslash-escapes `.` and `\\` in an instance name."""
    return name.replace("\\", "\\\\").replace(".", "\\.")


def _split_instance_name(text: str) -> Tuple[str, str]:
    """Splits at the first unescaped `.`, returning (unescaped name, rest)."""
    chars: List[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\\":
            if index + 1 >= len(text):
                raise InvalidFormatError(f"Dangling escape in '{text}'.")
            chars.append(text[index + 1])
            index += 2
        elif char == ".":
            return "".join(chars), text[index + 1 :]
        else:
            chars.append(char)
            index += 1
    raise InvalidFormatError(f"No service type in service name '{text}'.")


def _split_subtypes(text: str) -> List[str]:
    """Splits at unescaped `,`. Escaped commas are unescaped, any other
    escape is kept for the DNS presentation parser."""
    parts: List[str] = []
    chars: List[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text):
            next_char = text[index + 1]
            chars.append(next_char if next_char == "," else char + next_char)
            index += 2
        elif char == ",":
            parts.append("".join(chars))
            chars = []
            index += 1
        else:
            chars.append(char)
            index += 1
    parts.append("".join(chars))
    return parts


def parse_domain(domain: Union[str, dns.name.Name]) -> dns.name.Name:
    """Returns `domain` as an absolute name.

    Raises:
        InvalidNameError: If `domain` is not a valid domain name.
    """
    if isinstance(domain, dns.name.Name):
        return domain
    try:
        return dns.name.from_text(domain)
    except dns.exception.DNSException as e:
        raise InvalidNameError(f"Invalid domain name: '{domain}'.") from e


@dataclasses.dataclass(frozen=True)
class ServiceName:
    """The (instance name, service type, domain) triple of a service.

    Equality uses the subtype-agnostic equality of `ServiceType`, so two
    names differing only in their subtype filter are the same service.
    """

    name: str
    type: ServiceType
    domain: str

    def __post_init__(self) -> None:
        if not isinstance(self.type, ServiceType):
            raise TypeError(
                f"type must be ServiceType, got {type(self.type).__name__}."
            )
        if not self.domain.endswith("."):
            object.__setattr__(self, "domain", self.domain + ".")

    @classmethod
    def parse(cls, text: str) -> "ServiceName":
        """Parses `name.type.transport.domain[,subtype]*`.

        Raises:
            InvalidFormatError: On dangling escapes, missing components or
                empty subtypes.
            InvalidTransportError: If the transport label is unknown.
        """
        name, rest = _split_instance_name(text)
        main, *subtypes = _split_subtypes(rest)
        parts = main.split(".", 2)
        if len(parts) != 3 or not parts[0] or not parts[2]:
            raise InvalidFormatError(f"Invalid service name: '{text}'.")
        type_, transport, domain = parts
        service_type = ServiceType(
            type_, Transport.from_label(transport), tuple(subtypes)
        )
        return cls(name, service_type, domain)

    @classmethod
    def from_dns_name(cls, dns_name: dns.name.Name) -> "ServiceName":
        """Decodes a service instance wire name.

        Raises:
            InvalidNameError: If the name has fewer than four labels or its
                instance label is not valid UTF-8.
            InvalidTransportError: If the third label is not a transport.
        """
        labels = dns_name.labels
        if len(labels) < 4:
            raise InvalidNameError(
                f"Too few labels in service name: {dns_name}"
            )
        name = decode_label(labels[0])
        service_type = ServiceType.from_dns_name(
            dns.name.Name(labels[1:3])
        )
        domain = dns.name.Name(labels[3:]).to_text()
        return cls(name, service_type, domain)

    def to_dns_name(self) -> dns.name.Name:
        """Encodes this service as its DNS wire name.

        Raises:
            NameTooLongError: If the instance name exceeds 63 UTF-8 bytes.
            InvalidNameError: If any other label or the domain is invalid.
        """
        raw_name = self.name.encode("utf-8")
        if len(raw_name) > MAX_LABEL_LENGTH:
            raise NameTooLongError(
                f"Name too long ({len(raw_name)} bytes): '{self.name}'."
            )
        if not raw_name:
            raise InvalidNameError("Service instance name must not be empty.")
        type_name = self.type.to_dns_name(parse_domain(self.domain))
        try:
            return dns.name.Name((raw_name,) + type_name.labels)
        except dns.exception.DNSException as e:
            raise InvalidNameError(f"Invalid service name: {self}") from e

    def __str__(self) -> str:
        subtypes = "".join(f",{s}" for s in self.type.subtypes)
        domain = self.domain.replace(",", "\\,")
        return (
            f"{escape_instance_name(self.name)}."
            f"{self.type.to_dns_string()}.{domain}{subtypes}"
        )
