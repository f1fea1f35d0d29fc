"""Encoding and parsing of DNS-SD TXT record key/value strings.

See RFC 6763 section 6. A property with a `None` value is a boolean
attribute and is encoded as the bare key.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Union

from unicast_dnssd.errors import InvalidFormatError

_logger = logging.getLogger(__name__)

MAX_TXT_STRING_LENGTH = 255

Properties = Dict[str, Optional[str]]


def encode_txt_strings(properties: Mapping[str, Optional[str]]) -> List[bytes]:
    """Encodes properties as TXT character strings.

    Args:
        properties: Keys mapped to values, or to None for key-only entries.

    Returns:
        One `key` or `key=value` UTF-8 string per property. An empty
        mapping yields a single empty string since a TXT record must hold
        at least one string.

    Raises:
        InvalidFormatError: If a key is empty or contains `=`, or if an
            encoded string exceeds 255 bytes.
    """
    strings: List[bytes] = []
    for key, value in properties.items():
        if not key or "=" in key:
            raise InvalidFormatError(f"Invalid TXT key: '{key}'.")
        entry = key if value is None else f"{key}={value}"
        encoded = entry.encode("utf-8")
        if len(encoded) > MAX_TXT_STRING_LENGTH:
            raise InvalidFormatError(
                f"TXT entry for key '{key}' is {len(encoded)} bytes, "
                f"exceeding {MAX_TXT_STRING_LENGTH}."
            )
        strings.append(encoded)
    if not strings:
        strings.append(b"")
    return strings


def parse_txt_strings(
    strings: Iterable[Union[bytes, str]],
    properties: Optional[Properties] = None,
) -> Properties:
    """Parses TXT character strings into a property dict.

    Keys are lower-cased. The first occurrence of a key wins, including
    occurrences already present in `properties`, which lets callers feed
    several TXT records in order. Empty strings and strings starting with
    `=` are skipped.

    Args:
        strings: The character strings of one TXT record.
        properties: Dict to update in place. A new dict is used if None.

    Returns:
        The updated property dict.
    """
    if properties is None:
        properties = {}
    for raw in strings:
        text = raw.decode("utf-8", "replace") if isinstance(raw, bytes) else raw
        index = text.find("=")
        if not text or index == 0:
            _logger.debug("Ignoring TXT string with empty key: %r", text)
            continue
        if index > 0:
            key, value = text[:index].lower(), text[index + 1 :]
        else:
            key, value = text.lower(), None
        if key not in properties:
            properties[key] = value
    return properties
