"""TOTP second factor helpers (RFC 6238, 30 second steps)."""

import base64
from datetime import datetime
from io import BytesIO

import pyotp
import qrcode

from src.gatekeeper.core.config import get_settings


def generate_totp_secret() -> str:
    """Generate a new random base32 TOTP secret."""
    return pyotp.random_base32(length=32)


def provisioning_uri(secret: str, account_name: str) -> str:
    """Build the otpauth:// URI authenticator apps enrol from."""
    issuer = get_settings().totp_issuer
    return pyotp.TOTP(secret).provisioning_uri(name=account_name, issuer_name=issuer)


def render_qr_data_uri(payload: str) -> str:
    """Render a payload as a base64 PNG data URI suitable for an <img> tag."""
    qr = qrcode.QRCode(version=1, box_size=10, border=4)
    qr.add_data(payload)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode()
    return f"data:image/png;base64,{encoded}"


def verify_totp_code(secret: str, code: str, for_time: datetime | None = None) -> bool:
    """Check a code against the secret, accepting the configured drift window.

    Args:
        secret: Base32 secret stored on the principal.
        code: Code typed by the user.
        for_time: Server time to verify against; defaults to now.
    """
    if not secret or not code:
        return False
    window = get_settings().totp_valid_window
    totp = pyotp.TOTP(secret)
    if for_time is None:
        return totp.verify(code.strip(), valid_window=window)
    return totp.verify(code.strip(), for_time=for_time, valid_window=window)
