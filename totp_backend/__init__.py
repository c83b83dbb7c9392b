"""
Backend package for the TOTP tiles app, using Flask.

Keeps the account list in memory and serves codes computed by totp_core.
"""

from .app import create_app

__all__ = ["create_app"]
