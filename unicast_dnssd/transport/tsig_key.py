"""TsigKey, the shared secret used to sign dynamic updates."""

import base64
import binascii
import dataclasses
from typing import Dict, Optional

import dns.name
import dns.tsig

from unicast_dnssd.errors import InvalidArgumentError

# Accepted spellings, lower-cased and without the trailing dot.
_ALGORITHMS: Dict[str, dns.name.Name] = {
    "hmac-md5": dns.tsig.HMAC_MD5,
    "hmac-md5.sig-alg.reg.int": dns.tsig.HMAC_MD5,
    "hmac-sha1": dns.tsig.HMAC_SHA1,
    "hmac-sha256": dns.tsig.HMAC_SHA256,
}


def _canonical_algorithm(algorithm: str) -> dns.name.Name:
    try:
        return _ALGORITHMS[algorithm.lower().rstrip(".")]
    except KeyError:
        raise InvalidArgumentError(
            f"Unsupported TSIG algorithm '{algorithm}'. Expected one of "
            "hmac-md5, hmac-sha1 or hmac-sha256."
        ) from None


@dataclasses.dataclass(frozen=True)
class TsigKey:
    """A named TSIG key: HMAC-MD5, HMAC-SHA1 or HMAC-SHA256 and a base64 secret.

    The algorithm is stored as its canonical DNS name text, e.g.
    "hmac-sha256.".
    """

    name: str
    algorithm: str
    secret: str

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidArgumentError("TSIG key name must not be empty.")
        object.__setattr__(
            self,
            "algorithm",
            _canonical_algorithm(self.algorithm).to_text().lower(),
        )
        try:
            base64.b64decode(self.secret, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidArgumentError(
                f"TSIG secret for key '{self.name}' is not valid base64."
            ) from e

    @classmethod
    def create(
        cls,
        name: Optional[str],
        algorithm: Optional[str],
        secret: Optional[str],
    ) -> Optional["TsigKey"]:
        """Builds a key, or returns None if any field is empty.

        An empty field means updates are sent unauthenticated.
        """
        if not name or not algorithm or not secret:
            return None
        return cls(name, algorithm, secret)

    def to_dnspython_key(self) -> dns.tsig.Key:
        """Returns the equivalent `dns.tsig.Key` for signing messages."""
        return dns.tsig.Key(self.name, self.secret, self.algorithm)

    def __repr__(self) -> str:
        return f"TsigKey(name={self.name!r}, algorithm={self.algorithm!r})"
