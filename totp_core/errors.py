"""
errors.py — Exception types raised by the URI parser and the TOTP generator.

Every class carries a stable ``code`` string so the CLI and the HTTP API can
report the failure without depending on the message text.
"""


class OTPError(ValueError):
    """Base class for every error raised by totp_core."""

    code = "OTPError"


# --- Parser errors ---------------------------------------------------------
class ParseError(OTPError):
    """A scanned provisioning URI was rejected. Terminal for that scan."""

    code = "ParseError"


class MalformedURIError(ParseError):
    code = "MalformedURI"


class UnsupportedTypeError(ParseError):
    code = "UnsupportedType"


class MissingSecretError(ParseError):
    code = "MissingSecret"


class InvalidSecretEncodingError(ParseError):
    code = "InvalidSecretEncoding"


class InvalidDigitsError(ParseError):
    code = "InvalidDigits"


class InvalidPeriodError(ParseError):
    code = "InvalidPeriod"


# --- Generator errors ------------------------------------------------------
class CorruptCredentialError(OTPError):
    """
    The generator was handed a credential whose secret cannot be decoded.

    Credentials are validated on construction, so this indicates a bug in the
    caller, not a condition to show to the end user.
    """

    code = "CorruptCredential"
