"""
config.py — Default values and logging setup shared by the library, the CLI
and the backend.
"""

import logging

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6          # standard: 6 digits
MIN_DIGITS = 6
MAX_DIGITS = 8
DEFAULT_PERIOD = 30         # TOTP step (seconds)
DEFAULT_ALGORITHM = "SHA1"
DEFAULT_ISSUER = "Account"
DEFAULT_ACCOUNT_NAME = "Unknown"
SECRET_BYTES = 20           # 160-bit secret (common practice)
EXPIRY_WARNING_SECONDS = 5  # countdown turns "expiring" at or below this

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def configure_logging(level=logging.INFO) -> None:
    """
    Configure the root logger once for CLI / server use.

    Arguments:
        level: logging level, either an int or a name such as "DEBUG"
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    logging.getLogger().setLevel(level)
