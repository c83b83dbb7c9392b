#!/usr/bin/env python3
"""
otp_cli.py — Command-line front end for totp_core.

Subcommands:
- parse  : validate a provisioning URI and show the credential
- code   : print the current TOTP code for a URI
- watch  : show codes for one or more URIs in real time
- uri    : build a provisioning URI (new random secret unless --secret)

eg..:
    totp-tiles parse "otpauth://totp/Example:alice@example.com?secret=JBSWY3DPEHPK3PXP&issuer=Example"
    totp-tiles code "otpauth://totp/Example:alice?secret=JBSWY3DPEHPK3PXP" --at 1111111109
    totp-tiles watch "otpauth://totp/A:x?secret=JBSWY3DPEHPK3PXP" "otpauth://totp/B:y?secret=GEZDGNBV"
    totp-tiles uri --issuer MyService --account alice@example.com --digits 8 --qr
"""

import argparse
import logging
import sys
import time

import qrcode

from .config import DEFAULT_DIGITS, DEFAULT_PERIOD, configure_logging
from .credential import Algorithm, Credential, format_otpauth_uri
from .errors import OTPError
from .secret import generate_base32_secret
from .totp_generator import countdown, generate
from .uri_parser import parse

logger = logging.getLogger(__name__)


def mask_secret(secret: str, visible: int = 4) -> str:
    """Keep the first few characters of a secret, star out the rest."""
    return secret[:visible] + "*" * max(len(secret) - visible, 0)


# --- CLI command handlers ---
def cmd_parse(args):
    credential = parse(args.uri)
    secret = credential.secret if args.reveal else mask_secret(credential.secret)
    print(f"issuer:    {credential.issuer}")
    print(f"account:   {credential.account_name}")
    print(f"secret:    {secret}")
    print(f"algorithm: {credential.algorithm.value}")
    print(f"digits:    {credential.digits}")
    print(f"period:    {credential.period}s")


def cmd_code(args):
    credential = parse(args.uri)
    now = int(time.time()) if args.at is None else args.at
    code = generate(credential, now)
    left = countdown(now, credential.period)
    print(f"{code}  (valid ~{left.remaining:2d}s)")


def cmd_watch(args):
    credentials = [parse(uri) for uri in args.uris]
    print(f"Press Ctrl+C to quit. Watching {len(credentials)} account(s)...\n")
    try:
        watch(credentials, interval=args.interval)
    except KeyboardInterrupt:
        print("\nBye.")


def watch(credentials, interval: float = 1.0, clock=time.time, sleep=time.sleep, max_ticks=None):
    """
    The tick loop: once per ``interval``, compute every credential's code.

    A line is printed whenever a code changes; between changes only the
    countdown of the first credential is refreshed in place. ``clock`` and
    ``sleep`` are injectable; ``max_ticks`` bounds the loop (None = forever).
    """
    last_codes = [None] * len(credentials)
    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        now = int(clock())
        changed = False
        for i, credential in enumerate(credentials):
            code = generate(credential, now)
            if code != last_codes[i]:
                left = countdown(now, credential.period)
                print(f"{credential.label:<32} {code}  (valid ~{left.remaining:2d}s)")
                last_codes[i] = code
                changed = True
        if not changed and credentials:
            left = countdown(now, credentials[0].period)
            marker = "!" if left.expiring else "."
            print(f"{marker}{marker} {left.remaining:2d}s left", end="\r", flush=True)
        ticks += 1
        sleep(interval)


def cmd_uri(args):
    secret = args.secret or generate_base32_secret()
    credential = Credential(
        issuer=args.issuer,
        account_name=args.account,
        secret=secret,
        algorithm=Algorithm(args.algorithm),
        digits=args.digits,
        period=args.period,
    )
    uri = format_otpauth_uri(credential)
    print(uri)
    if args.qr:
        qr = qrcode.QRCode(border=2)
        qr.add_data(uri)
        qr.make(fit=True)
        qr.print_ascii(out=sys.stdout)


def cmd_help(args):
    print("No command specified. Use -h for help.")


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="totp-tiles", description="TOTP provisioning-URI parser and code generator")
    p.add_argument("--verbose", action="store_true", help="Verbose (DEBUG) logging")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    # parse
    pp = sub.add_parser("parse", help="Validate a provisioning URI and show the credential")
    pp.add_argument("uri", help="otpauth://totp/... URI")
    pp.add_argument("--reveal", action="store_true", help="Show the full secret")
    pp.set_defaults(func=cmd_parse)

    # code
    pc = sub.add_parser("code", help="Print the current TOTP code")
    pc.add_argument("uri", help="otpauth://totp/... URI")
    pc.add_argument("--at", type=int, help="Unix time to compute the code for (default: now)")
    pc.set_defaults(func=cmd_code)

    # watch
    pw = sub.add_parser("watch", help="Show TOTP codes in real time")
    pw.add_argument("uris", nargs="+", metavar="uri", help="otpauth://totp/... URI(s)")
    pw.add_argument("--interval", type=float, default=1.0, help="Refresh interval (seconds)")
    pw.set_defaults(func=cmd_watch)

    # uri
    pu = sub.add_parser("uri", help="Build a provisioning URI")
    pu.add_argument("--issuer", required=True, help="Issuer label")
    pu.add_argument("--account", required=True, help="Account name, e.g. alice@example.com")
    pu.add_argument("--secret", help="Base32 secret (default: generate a new one)")
    pu.add_argument("--algorithm", choices=[a.value for a in Algorithm], default=Algorithm.SHA1.value)
    pu.add_argument("--digits", type=int, default=DEFAULT_DIGITS, help="Number of OTP digits")
    pu.add_argument("--period", type=int, default=DEFAULT_PERIOD, help="TOTP time step (seconds)")
    pu.add_argument("--qr", action="store_true", help="Also print the URI as a terminal QR code")
    pu.set_defaults(func=cmd_uri)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        args.func(args)
    except OTPError as e:
        logger.debug("Command %s failed", args.cmd, exc_info=True)
        print(f"[!] {e.code}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
