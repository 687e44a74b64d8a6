"""TOTP (Time-based One-Time Password) primitives for 2FA.

Uses pyotp to generate secrets and codes, build enrollment URIs and verify
submitted codes.
"""

from __future__ import annotations

import binascii

import pyotp

from totp2fa.errors import ValidationError


def generate_secret() -> str:
    """Generate a new TOTP secret (base32-encoded, 32 chars)."""
    return pyotp.random_base32()


def get_code(secret: str) -> str:
    """Get the current TOTP code for a secret."""
    return pyotp.TOTP(secret).now()


def verify_code(code: str | None, secret: str | None, valid_window: int = 1) -> bool:
    """Verify a TOTP code against a secret (allows +-valid_window periods).

    Raises ValidationError for an empty code or secret; a code that simply
    does not match returns False.
    """
    if not code:
        raise ValidationError.no_token()
    if not secret:
        raise ValidationError.no_secret()
    try:
        return pyotp.TOTP(secret).verify(code, valid_window=valid_window)
    except (binascii.Error, ValueError):
        # not valid base32
        return False


def get_provisioning_uri(secret: str, username: str, issuer: str) -> str:
    """Get the otpauth:// URI for QR code enrollment."""
    return pyotp.TOTP(secret).provisioning_uri(name=username, issuer_name=issuer)
