"""
Receipt PDF for an order.

Text is drawn with reportlab onto an A4 landscape page and, when a template is
configured, merged over its first page with pypdf. Coordinates below are
top-left based (x right, y down) and converted to PDF space when drawing.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from pypdf import PdfReader, PdfWriter
from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from ..settings import Settings
from .assets import asset_path
from .japanese_era import to_japanese_date

PAGE_SIZE = landscape(A4)

DEFAULT_FONT = "HeiseiKakuGo-W5"
CUSTOM_FONT = "ReceiptFont"

NAME_POS = (300, 140)
YEAR_POS = (600, 100)
MONTH_POS = (635, 100)
DAY_POS = (676, 100)
PRICE_POS = (280, 200)

LARGE = 28
SMALL = 15


@dataclass(frozen=True)
class ReceiptData:
    order_id: str
    recipient: str
    ordered_at: datetime
    total_price: int


def format_price(price: int) -> str:
    """Comma-grouped yen amount, e.g. 1234567 -> "1,234,567"."""
    return f"{int(price):,}"


def price_label(price: int) -> str:
    return f"¥{format_price(price)}-"


def _register_font(font_path: str | None) -> str:
    if font_path:
        if CUSTOM_FONT not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(TTFont(CUSTOM_FONT, font_path))
        return CUSTOM_FONT
    if DEFAULT_FONT not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(UnicodeCIDFont(DEFAULT_FONT))
    return DEFAULT_FONT


def _draw(c: canvas.Canvas, pos: tuple[int, int], text: str, *, font: str, size: int) -> None:
    _, height = PAGE_SIZE
    x, y = pos
    c.setFont(font, size)
    # y is the top of the text line; reportlab draws from the baseline.
    c.drawString(x, height - y - size, text)


def render_overlay(data: ReceiptData, *, font_path: str | None = None) -> bytes:
    font = _register_font(font_path)
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=PAGE_SIZE)

    _draw(c, NAME_POS, data.recipient, font=font, size=LARGE)

    year, month, day = to_japanese_date(data.ordered_at)
    _draw(c, YEAR_POS, year, font=font, size=SMALL)
    _draw(c, MONTH_POS, month, font=font, size=SMALL)
    _draw(c, DAY_POS, day, font=font, size=SMALL)

    _draw(c, PRICE_POS, price_label(data.total_price), font=font, size=LARGE)

    c.showPage()
    c.save()
    return buf.getvalue()


def render_receipt(data: ReceiptData, *, template_path: str | None = None, font_path: str | None = None) -> bytes:
    overlay = render_overlay(data, font_path=font_path)
    if not template_path:
        return overlay

    width, height = PAGE_SIZE
    page = PdfReader(template_path).pages[0]
    page.scale_to(width, height)
    page.merge_page(PdfReader(io.BytesIO(overlay)).pages[0])

    writer = PdfWriter()
    writer.add_page(page)
    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()


def write_receipt(settings: Settings, data: ReceiptData, *, at: datetime | None = None) -> Path:
    stamp = (at or datetime.now()).strftime("%Y%m%d%H%M%S")
    path = asset_path(settings, "pdf", f"{data.order_id}_{stamp}.pdf")
    path.write_bytes(
        render_receipt(
            data,
            template_path=settings.pdf_template_path,
            font_path=settings.pdf_font_path,
        )
    )
    return path
