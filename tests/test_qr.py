"""Tests for QR rendering and enrollment material."""

from __future__ import annotations

import base64

from totp2fa.auth.qr import get_qr_code_secret, render_qr_data_uri
from totp2fa.config import GateOptions
from totp2fa.models import Account

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_render_qr_data_uri_is_png():
    uri = render_qr_data_uri("otpauth://totp/Acme:user?secret=JBSWY3DPEHPK3PXP&issuer=Acme")
    prefix = "data:image/png;base64,"
    assert uri.startswith(prefix)
    assert base64.b64decode(uri[len(prefix):]).startswith(PNG_MAGIC)


def test_get_qr_code_secret_generates_secret():
    account = Account(id="1", email="user@example.com")
    bundle = get_qr_code_secret(account, GateOptions())
    assert len(bundle.secret) == 32
    assert bundle.qr.startswith("data:image/png;base64,")


def test_get_qr_code_secret_uses_given_secret():
    account = Account(id="1", email="user@example.com")
    bundle = get_qr_code_secret(account, GateOptions(), secret="JBSWY3DPEHPK3PXP")
    assert bundle.secret == "JBSWY3DPEHPK3PXP"


def test_get_qr_code_secret_is_fresh_each_call():
    account = Account(id="1", email="user@example.com")
    opts = GateOptions()
    assert get_qr_code_secret(account, opts).secret != get_qr_code_secret(account, opts).secret
