"""
credential.py — The immutable ``Credential`` value object and its
provisioning-URI representation.

A Credential is only ever constructed valid: the constructor runs the same
checks as the URI parser and raises the same errors, so no code path can hold
a credential the generator cannot use.
"""

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import quote, urlencode

from .config import (
    DEFAULT_ACCOUNT_NAME,
    DEFAULT_DIGITS,
    DEFAULT_ISSUER,
    DEFAULT_PERIOD,
    MAX_DIGITS,
    MIN_DIGITS,
)
from .errors import InvalidDigitsError, InvalidPeriodError
from .secret import decode_base32_secret, normalize_base32_secret


class Algorithm(str, Enum):
    """HMAC hash functions accepted in the ``algorithm`` URI parameter."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def digestmod(self):
        """hashlib constructor to pass to ``hmac.new``."""
        return getattr(hashlib, self.value.lower())

    @classmethod
    def from_name(cls, name: str) -> Optional["Algorithm"]:
        """Case-insensitive lookup; returns None for anything unrecognised."""
        if not isinstance(name, str):
            return None
        return cls.__members__.get(name.strip().upper())


@dataclass(frozen=True)
class Credential:
    """
    A validated TOTP shared secret plus its display labels.

    Fields:
        issuer: service name shown on the tile (default "Account")
        account_name: user / login shown under the issuer (default "Unknown")
        secret: Base32 text, stored upper case without padding
        algorithm: Algorithm.SHA1 / SHA256 / SHA512
        digits: code length, 6-8
        period: time step in seconds, > 0

    Raises on construction:
        InvalidSecretEncodingError, InvalidDigitsError, InvalidPeriodError,
        ValueError (unknown algorithm)
    """

    issuer: str
    account_name: str
    secret: str
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = DEFAULT_DIGITS
    period: int = DEFAULT_PERIOD

    def __post_init__(self):
        issuer = (self.issuer or "").strip() or DEFAULT_ISSUER
        account_name = (self.account_name or "").strip() or DEFAULT_ACCOUNT_NAME

        # Raises InvalidSecretEncodingError when the secret is unusable.
        decode_base32_secret(self.secret)
        secret = normalize_base32_secret(self.secret)

        algorithm = self.algorithm
        if not isinstance(algorithm, Algorithm):
            algorithm = Algorithm.from_name(algorithm)
            if algorithm is None:
                raise ValueError(f"Unsupported algorithm: {self.algorithm!r}")

        if (
            not isinstance(self.digits, int)
            or isinstance(self.digits, bool)
            or not MIN_DIGITS <= self.digits <= MAX_DIGITS
        ):
            raise InvalidDigitsError(
                f"digits must be an integer in {MIN_DIGITS}-{MAX_DIGITS}, got {self.digits!r}"
            )
        if (
            not isinstance(self.period, int)
            or isinstance(self.period, bool)
            or self.period <= 0
        ):
            raise InvalidPeriodError(
                f"period must be a positive integer, got {self.period!r}"
            )

        object.__setattr__(self, "issuer", issuer)
        object.__setattr__(self, "account_name", account_name)
        object.__setattr__(self, "secret", secret)
        object.__setattr__(self, "algorithm", algorithm)

    @property
    def label(self) -> str:
        """Display label in the usual "Issuer:Account" form."""
        return f"{self.issuer}:{self.account_name}"

    def __repr__(self) -> str:
        # secret is left out on purpose so credentials can be logged
        return (
            f"Credential(issuer={self.issuer!r}, account_name={self.account_name!r}, "
            f"algorithm={self.algorithm.value}, digits={self.digits}, period={self.period})"
        )


def format_otpauth_uri(credential: Credential) -> str:
    """
    Build the otpauth:// provisioning URI for a credential.

    otpauth://totp/{issuer}:{account}?secret=...&issuer=...&algorithm=...&digits=...&period=...

    Label and query values are percent-encoded, so the result parses back to
    an equal Credential. An issuer that itself contains ':' is left out of
    the label (which becomes ":account") and carried only by the ``issuer``
    parameter.
    """
    if ":" in credential.issuer:
        # empty issuer part keeps a ":" in the account name intact
        label = ":" + credential.account_name
    else:
        label = credential.label
    query = urlencode(
        {
            "secret": credential.secret,
            "issuer": credential.issuer,
            "algorithm": credential.algorithm.value,
            "digits": credential.digits,
            "period": credential.period,
        },
        quote_via=quote,
    )
    return f"otpauth://totp/{quote(label, safe=':@')}?{query}"
