from __future__ import annotations

from pathlib import Path

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from ..settings import Settings
from .assets import asset_path

QR_SIZE = 256


def make_qr_image(content: str, *, size: int = QR_SIZE):
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, border=4)
    qr.add_data(content)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white").get_image()
    return img.resize((size, size))


def write_qrcode(settings: Settings, *, content: str | None = None) -> Path:
    path = asset_path(settings, "qrcode", "qrcode.png")
    make_qr_image(content or settings.qrcode_content).save(path, format="PNG")
    return path
