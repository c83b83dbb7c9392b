"""
totp_generator.py — Time-based one-time passcodes (RFC 6238) built on the
HOTP construction of RFC 4226.

    code = Truncate(HMAC-<alg>(key=secret, msg=counter)) mod 10^digits
    counter = floor(unix_time / period)

Every function here is pure: the caller supplies the time, nothing reads the
clock, touches disk or keeps state, so the functions may be called from any
number of threads at once.
"""

import hmac
import logging
import struct
from typing import NamedTuple

from .config import EXPIRY_WARNING_SECONDS
from .credential import Credential
from .errors import CorruptCredentialError, OTPError
from .secret import decode_base32_secret

logger = logging.getLogger(__name__)

MAX_COUNTER = 0xFFFFFFFFFFFFFFFF


class Countdown(NamedTuple):
    """Time left for the code currently on screen."""

    remaining: int      # seconds, 1..period
    fraction: float     # remaining / period, for a progress bar
    expiring: bool      # remaining <= EXPIRY_WARNING_SECONDS


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Pack the moving factor as the 8-byte big-endian value RFC 4226 requires.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    Apply RFC 4226 dynamic truncation.

    - offset = last_byte & 0x0F
    - take 4 bytes from offset, clear the MSB of the first one
    - return the resulting 31-bit unsigned integer

    The smallest supported digest (SHA1, 20 bytes) always has the 4 bytes at
    offset 15, so the slice never runs off the end.
    """
    offset = hmac_digest[-1] & 0x0F
    code = (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )
    return code


def time_counter(at_time: int, period: int) -> int:
    """
    TOTP moving factor: floor(at_time / period).

    Raises:
        ValueError: negative time, non-positive period or a counter that does
            not fit in 64 bits
    """
    _check_time(at_time)
    _check_period(period)
    counter = int(at_time // period)
    if counter > MAX_COUNTER:
        raise ValueError(f"time {at_time} is out of range for a 64-bit counter")
    return counter


# --- public API ------------------------------------------------------------
def generate(credential: Credential, at_time: int) -> str:
    """
    Compute the TOTP code of ``credential`` at unix time ``at_time``.

    Steps:
    1. Base32-decode the secret -> raw key bytes
    2. counter = floor(at_time / period), as 8 bytes big-endian
    3. HMAC(key, counter) with the credential's hash algorithm
    4. Dynamic truncate -> 31-bit integer
    5. code = value % 10^digits
    6. Zero-pad to exactly ``digits`` characters

    Arguments:
        credential: a Credential produced by the URI parser
        at_time: seconds since the Unix epoch (supplied by the caller)

    Returns:
        str: decimal code, e.g. "007081"

    Raises:
        CorruptCredentialError: the secret cannot be decoded (a bug upstream)
        ValueError: at_time is negative or not a number
    """
    key = _secret_bytes(credential)
    counter = time_counter(at_time, credential.period)

    digest = hmac.new(key, int_to_bytes(counter), credential.algorithm.digestmod).digest()
    otp_val = dynamic_truncate(digest) % (10 ** credential.digits)
    return str(otp_val).zfill(credential.digits)


def time_remaining(at_time: int, period: int) -> int:
    """Seconds until the current code rolls over: period - (at_time mod period)."""
    _check_time(at_time)
    _check_period(period)
    return period - (int(at_time) % period)


def countdown(at_time: int, period: int) -> Countdown:
    """Countdown state for a tile: seconds left, bar fraction and expiry flag."""
    remaining = time_remaining(at_time, period)
    return Countdown(
        remaining=remaining,
        fraction=remaining / period,
        expiring=remaining <= EXPIRY_WARNING_SECONDS,
    )


# --- internals -------------------------------------------------------------
def _secret_bytes(credential: Credential) -> bytes:
    try:
        return decode_base32_secret(credential.secret)
    except OTPError as e:
        logger.error("Credential %r has an undecodable secret", credential)
        raise CorruptCredentialError(
            f"Cannot decode the secret of {credential.label!r}"
        ) from e


def _check_time(at_time) -> None:
    if isinstance(at_time, bool) or not isinstance(at_time, (int, float)):
        raise ValueError(f"time must be a number of seconds, got {at_time!r}")
    if at_time < 0:
        raise ValueError(f"time must not be negative, got {at_time}")


def _check_period(period) -> None:
    if isinstance(period, bool) or not isinstance(period, int) or period <= 0:
        raise ValueError(f"period must be a positive integer, got {period!r}")
