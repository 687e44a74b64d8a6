"""QR code rendering for TOTP enrollment."""

from __future__ import annotations

import base64
import io
from typing import TYPE_CHECKING

import qrcode

from totp2fa.auth import totp
from totp2fa.models import Account, ProvisioningBundle

if TYPE_CHECKING:
    from totp2fa.config import GateOptions


def render_qr_data_uri(uri: str) -> str:
    """Render ``uri`` as a PNG QR code and return it as a data URI."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=4,
    )
    qr.add_data(uri)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    data = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{data}"


def get_qr_code_secret(
    account: Account,
    options: GateOptions,
    secret: str | None = None,
) -> ProvisioningBundle:
    """Build enrollment material for ``account``.

    Generates a new secret unless one is given. Nothing is persisted.
    """
    secret = secret or totp.generate_secret()
    otpauth = totp.get_provisioning_uri(secret, account.label, options.application_name)
    return ProvisioningBundle(qr=render_qr_data_uri(otpauth), secret=secret)
