"""
totp_core package
=================

Parse otpauth:// provisioning URIs and compute TOTP codes (RFC 6238 over
RFC 4226) for an authenticator that shows one tile per account.

──────────────────────────────────────────────
Core algorithms
──────────────────────────────────────────────
- URI parsing:
  otpauth://totp/Issuer:account?secret=BASE32&issuer=..&algorithm=..&digits=..&period=..
  → an immutable Credential, or a ParseError subclass. Nothing in between.

- TOTP:
  counter = floor(unix_time / period)
  code    = Truncate(HMAC-<alg>(secret, counter)) mod 10^digits, zero-padded
  → default SHA1, 6 digits, 30 s, the values nearly every provider uses.

- Dynamic truncation:
  4 bytes taken at offset (last byte & 0x0F), MSB cleared → 31-bit integer.

──────────────────────────────────────────────
Notes for the layers around the core
──────────────────────────────────────────────

1. Scanner / import code
   - Call `parse` once per decoded QR string and keep the Credential.
        from totp_core import parse, ParseError
        try:
            credential = parse(qr_text)
        except ParseError as e:
            reject_scan(e.code)

2. Tile rendering
   - Once per tick, for every stored credential, pass the current time in.
        now = int(time.time())
        code = generate(credential, now)
        left = countdown(now, credential.period)

3. The core never reads the clock and never schedules itself; the tick loop
   belongs to the caller (see totp_core.otp_cli `watch`, totp_backend).

──────────────────────────────────────────────
Quick example
──────────────────────────────────────────────
>>> from totp_core import parse, generate
>>> c = parse("otpauth://totp/Example:alice@example.com?secret=JBSWY3DPEHPK3PXP&issuer=Example")
>>> (c.issuer, c.account_name, c.digits, c.period)
('Example', 'alice@example.com', 6, 30)
>>> len(generate(c, 59))
6
"""
from .credential import Algorithm, Credential, format_otpauth_uri
from .errors import (
    CorruptCredentialError,
    InvalidDigitsError,
    InvalidPeriodError,
    InvalidSecretEncodingError,
    MalformedURIError,
    MissingSecretError,
    OTPError,
    ParseError,
    UnsupportedTypeError,
)
from .secret import decode_base32_secret, generate_base32_secret
from .totp_generator import Countdown, countdown, generate, time_remaining
from .uri_parser import parse

__version__ = "0.1.0"

__all__ = [
    "Algorithm",
    "CorruptCredentialError",
    "Countdown",
    "Credential",
    "InvalidDigitsError",
    "InvalidPeriodError",
    "InvalidSecretEncodingError",
    "MalformedURIError",
    "MissingSecretError",
    "OTPError",
    "ParseError",
    "UnsupportedTypeError",
    "countdown",
    "decode_base32_secret",
    "format_otpauth_uri",
    "generate",
    "generate_base32_secret",
    "parse",
    "time_remaining",
]
