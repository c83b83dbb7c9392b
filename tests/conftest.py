import base64

import pytest

from totp_backend import create_app
from totp_backend.config import TestConfig
from totp_core import Algorithm, Credential

# RFC 6238 Appendix B seeds (ASCII), one per hash function
RFC_SEED_SHA1 = b"12345678901234567890"
RFC_SEED_SHA256 = b"12345678901234567890123456789012"
RFC_SEED_SHA512 = b"1234567890123456789012345678901234567890123456789012345678901234"

EXAMPLE_SECRET = "JBSWY3DPEHPK3PXP"
EXAMPLE_URI = "otpauth://totp/Example:alice@example.com?secret=JBSWY3DPEHPK3PXP&issuer=Example"


def b32(seed: bytes) -> str:
    return base64.b32encode(seed).decode("ascii")


RFC_URI_SHA1 = f"otpauth://totp/RFC:test?secret={b32(RFC_SEED_SHA1)}&digits=8"


@pytest.fixture
def rfc_sha1():
    """RFC 6238 SHA1 credential, 8 digits, 30 s."""
    return Credential(issuer="RFC", account_name="test", secret=b32(RFC_SEED_SHA1), digits=8)


@pytest.fixture
def rfc_sha256():
    return Credential(
        issuer="RFC", account_name="test", secret=b32(RFC_SEED_SHA256),
        algorithm=Algorithm.SHA256, digits=8,
    )


@pytest.fixture
def rfc_sha512():
    return Credential(
        issuer="RFC", account_name="test", secret=b32(RFC_SEED_SHA512),
        algorithm=Algorithm.SHA512, digits=8,
    )


@pytest.fixture
def app():
    return create_app(TestConfig)


@pytest.fixture
def client(app):
    return app.test_client()
