"""
secret.py — Base32 shared-secret helpers (RFC 4648).

The same decoder is used when a provisioning URI is parsed, when a
``Credential`` is constructed and when a code is generated, so a secret that
passed validation once always decodes the same way later.
"""

import base64
import binascii
import os

from .config import SECRET_BYTES
from .errors import InvalidSecretEncodingError

BASE32_ALPHABET = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ234567")

# A Base32 quantum is 8 characters; these remainders cannot come from any
# whole number of input bytes.
_IMPOSSIBLE_REMAINDERS = (1, 3, 6)


def normalize_base32_secret(secret_b32: str) -> str:
    """
    Return the canonical form of a Base32 secret: upper case, no '=' padding.

    Raises:
        InvalidSecretEncodingError: if the text is not Base32 at all
    """
    if not isinstance(secret_b32, str):
        raise InvalidSecretEncodingError("Secret must be a string")
    text = secret_b32.upper().rstrip("=")
    invalid = set(text) - BASE32_ALPHABET
    if invalid:
        raise InvalidSecretEncodingError(
            "Secret contains characters outside the Base32 alphabet: "
            + ", ".join(sorted(repr(c) for c in invalid))
        )
    return text


def decode_base32_secret(secret_b32: str) -> bytes:
    """
    Decode a Base32 secret to raw key bytes.

    - Case-insensitive.
    - '=' padding is optional; missing padding is added before decoding.
    - The result must be at least 1 byte long.

    Arguments:
        secret_b32: Base32 text, e.g. "JBSWY3DPEHPK3PXP"

    Returns:
        bytes: the raw HMAC key

    Raises:
        InvalidSecretEncodingError: on bad alphabet, bad length or empty result
    """
    text = normalize_base32_secret(secret_b32)
    if not text:
        raise InvalidSecretEncodingError("Secret decodes to zero bytes")
    if len(text) % 8 in _IMPOSSIBLE_REMAINDERS:
        raise InvalidSecretEncodingError(
            f"Secret length {len(text)} is not a valid Base32 length"
        )

    padded = text + "=" * (-len(text) % 8)
    try:
        key = base64.b32decode(padded)
    except binascii.Error as e:
        raise InvalidSecretEncodingError("Invalid Base32 secret") from e
    if not key:
        raise InvalidSecretEncodingError("Secret decodes to zero bytes")
    return key


def generate_base32_secret() -> str:
    """
    Generate a random secret and return it as Base32 without padding.

    SECRET_BYTES bytes come from os.urandom (CSPRNG); 20 bytes encode to 32
    characters, so no padding is ever produced.
    """
    raw = os.urandom(SECRET_BYTES)
    return base64.b32encode(raw).decode("ascii").rstrip("=")
