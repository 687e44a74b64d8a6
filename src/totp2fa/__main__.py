"""totp2fa CLI: operator helpers around the second-factor gate.

Usage:
    python -m totp2fa keygen                         # New AES master key for TOTP2FA_MASTER_KEY
    python -m totp2fa provision --email a@b.c        # Secret, otpauth URI and QR data URI
    python -m totp2fa code --secret BASE32           # Current code for a secret
    python -m totp2fa verify --secret S --token T    # Exit 0 if the token matches
"""

from __future__ import annotations

import argparse
import logging
import sys

from totp2fa.auth import totp
from totp2fa.auth.qr import render_qr_data_uri
from totp2fa.config import settings
from totp2fa.crypto import generate_master_key
from totp2fa.errors import ValidationError

logger = logging.getLogger("totp2fa")


def cmd_keygen(args: argparse.Namespace) -> None:
    """Print a fresh master key."""
    print(generate_master_key())


def cmd_provision(args: argparse.Namespace) -> None:
    """Print enrollment material for an email address."""
    secret = args.secret or totp.generate_secret()
    uri = totp.get_provisioning_uri(secret, args.email, args.issuer)
    print(f"secret: {secret}")
    print(f"uri:    {uri}")
    if not args.no_qr:
        print(f"qr:     {render_qr_data_uri(uri)}")


def cmd_code(args: argparse.Namespace) -> None:
    """Print the current code."""
    print(totp.get_code(args.secret))


def cmd_verify(args: argparse.Namespace) -> None:
    """Check a token against a secret."""
    try:
        ok = totp.verify_code(args.token, args.secret, valid_window=args.window)
    except ValidationError as e:
        print(f"Error: {e.message}")
        sys.exit(2)
    print("valid" if ok else "invalid")
    sys.exit(0 if ok else 1)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="totp2fa",
        description="totp2fa: TOTP second factor helpers",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", help="Command to run")

    # keygen
    sub.add_parser("keygen", help="Generate a base64 AES-256 master key")

    # provision
    p_prov = sub.add_parser("provision", help="Generate enrollment material")
    p_prov.add_argument("--email", required=True, help="Account label")
    p_prov.add_argument("--issuer", default=settings.totp2fa_application_name)
    p_prov.add_argument("--secret", help="Use this secret instead of a new one")
    p_prov.add_argument("--no-qr", action="store_true", help="Skip the QR data URI")

    # code
    p_code = sub.add_parser("code", help="Current code for a secret")
    p_code.add_argument("--secret", required=True)

    # verify
    p_verify = sub.add_parser("verify", help="Verify a token against a secret")
    p_verify.add_argument("--secret", required=True)
    p_verify.add_argument("--token", required=True)
    p_verify.add_argument("--window", type=int, default=settings.totp2fa_valid_window)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.command:
        parser.print_help()
        sys.exit(0)

    dispatch = {
        "keygen": cmd_keygen,
        "provision": cmd_provision,
        "code": cmd_code,
        "verify": cmd_verify,
    }
    logger.debug("Running %s", args.command)
    dispatch[args.command](args)


if __name__ == "__main__":
    main()
