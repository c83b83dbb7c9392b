"""
uri_parser.py — Parse an ``otpauth://totp/...`` provisioning URI into a
validated Credential.

Format (the de-facto authenticator convention):

    otpauth://totp/<label>?secret=<base32>&issuer=<string>
        &algorithm=<SHA1|SHA256|SHA512>&digits=<6|7|8>&period=<seconds>

<label> is "Issuer:AccountName" or a bare "AccountName", percent-encoded.
Only ``secret`` is mandatory.

The parser is a pure function of its input: a scan is either turned into a
complete Credential or rejected with a ParseError subclass.
"""

import logging
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qs, unquote, urlsplit

from .config import DEFAULT_ACCOUNT_NAME, DEFAULT_DIGITS, DEFAULT_ISSUER, DEFAULT_PERIOD, MAX_DIGITS, MIN_DIGITS
from .credential import Algorithm, Credential
from .errors import (
    InvalidDigitsError,
    InvalidPeriodError,
    MalformedURIError,
    MissingSecretError,
    UnsupportedTypeError,
)
from .secret import decode_base32_secret

logger = logging.getLogger(__name__)

SCHEME = "otpauth"
OTP_TYPE = "totp"


def parse(uri: str) -> Credential:
    """
    Parse a provisioning URI.

    Steps:
    1. Check scheme "otpauth" and the exact, case-sensitive type "totp"
    2. Percent-decode the label and split it on the first ':'
    3. Resolve issuer: ``issuer`` parameter -> label issuer -> "Account"
    4. Resolve account name: label account -> "Unknown"
    5. Require a non-empty ``secret``
    6. Read algorithm / digits / period (with defaults)
    7. Check the secret is valid Base32
    8. Build the Credential

    Raises:
        MalformedURIError, UnsupportedTypeError, MissingSecretError,
        InvalidDigitsError, InvalidPeriodError, InvalidSecretEncodingError
    """
    parsed = _split_uri(uri)
    params = parse_qs(parsed.query, keep_blank_values=True)

    label_issuer, account_name = split_label(unquote(parsed.path[1:]))
    issuer = _first(params, "issuer") or label_issuer or DEFAULT_ISSUER
    account_name = account_name or DEFAULT_ACCOUNT_NAME

    secret = _first(params, "secret")
    if not secret:
        raise MissingSecretError("Provisioning URI has no secret")

    algorithm = _parse_algorithm(_first(params, "algorithm"))
    digits = _parse_digits(_first(params, "digits"))
    period = _parse_period(_first(params, "period"))

    decode_base32_secret(secret)

    credential = Credential(
        issuer=issuer,
        account_name=account_name,
        secret=secret,
        algorithm=algorithm,
        digits=digits,
        period=period,
    )
    logger.debug("Parsed credential %s:%s (%s, %d digits, %ds)",
                 credential.issuer, credential.account_name,
                 credential.algorithm.value, credential.digits, credential.period)
    return credential


def split_label(label: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a decoded label into (label_issuer, account_name).

    "Example:alice@example.com" -> ("Example", "alice@example.com")
    "SoloName"                  -> ("SoloName", "SoloName")
    ""                          -> (None, None)

    Only the first ':' separates; the rest stays in the account name. Empty
    parts come back as None so the caller can apply its defaults.
    """
    label = label.strip()
    if not label:
        return None, None
    if ":" in label:
        issuer, account = label.split(":", 1)
        return issuer.strip() or None, account.strip() or None
    return label, label


# --- helpers ---------------------------------------------------------------
def _split_uri(uri: str):
    if not isinstance(uri, str) or not uri.strip():
        raise MalformedURIError("Provisioning URI must be a non-empty string")
    try:
        parsed = urlsplit(uri.strip())
    except ValueError as e:
        raise MalformedURIError(f"Not a valid URI: {e}") from e

    # urlsplit lower-cases the scheme; the type segment keeps its case.
    if parsed.scheme != SCHEME:
        raise MalformedURIError(f"Expected scheme '{SCHEME}', got '{parsed.scheme}'")
    if not parsed.netloc:
        raise MalformedURIError("Provisioning URI has no OTP type segment")
    if parsed.netloc != OTP_TYPE:
        raise UnsupportedTypeError(f"Unsupported OTP type '{parsed.netloc}', only '{OTP_TYPE}' is supported")
    return parsed


def _first(params: Dict[str, List[str]], name: str) -> Optional[str]:
    """First value of a query parameter, stripped; None when absent or blank."""
    values = params.get(name)
    if not values:
        return None
    value = values[0].strip()
    return value or None


def _parse_algorithm(raw: Optional[str]) -> Algorithm:
    if raw is None:
        return Algorithm.SHA1
    algorithm = Algorithm.from_name(raw)
    if algorithm is None:
        # unknown names fall back to SHA1, never to SHA256/SHA512
        logger.warning("Unrecognised algorithm %r, using SHA1", raw)
        return Algorithm.SHA1
    return algorithm


def _parse_digits(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_DIGITS
    if not (raw.isascii() and raw.isdigit()):
        raise InvalidDigitsError(f"digits must be an integer, got {raw!r}")
    digits = int(raw)
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise InvalidDigitsError(f"digits must be between {MIN_DIGITS} and {MAX_DIGITS}, got {digits}")
    return digits


def _parse_period(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_PERIOD
    if not (raw.isascii() and raw.isdigit()):
        raise InvalidPeriodError(f"period must be a positive integer, got {raw!r}")
    period = int(raw)
    if period <= 0:
        raise InvalidPeriodError(f"period must be positive, got {period}")
    return period
