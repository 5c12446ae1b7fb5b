from __future__ import annotations

import csv
import io
from datetime import date, datetime

from PIL import Image
from pypdf import PdfReader
from reportlab.pdfgen import canvas
from sqlalchemy import select

from admin_api.db.models import Order, Product
from admin_api.services.csv_export import ORDER_HEADER, export_orders, orders_csv_path
from admin_api.services.japanese_era import era_of, format_japanese_date, to_japanese_date
from admin_api.services.product_import import import_products, parse_record
from admin_api.services.qrcode_writer import write_qrcode
from admin_api.services.receipt_pdf import (
    PAGE_SIZE,
    ReceiptData,
    format_price,
    price_label,
    render_receipt,
    write_receipt,
)


def test_era_boundaries():
    assert era_of(date(2019, 5, 1)) == ("令和", 1)
    assert era_of(date(2019, 4, 30)) == ("平成", 31)
    assert era_of(date(1989, 1, 8)) == ("平成", 1)
    assert era_of(date(1989, 1, 7)) == ("昭和", 64)
    assert era_of(date(1926, 12, 25)) == ("昭和", 1)
    assert era_of(date(1912, 7, 30)) == ("大正", 1)


def test_first_year_is_gannen():
    assert to_japanese_date(datetime(2019, 6, 3, 12, 0)) == ("元", "6", "3")
    assert to_japanese_date(date(2023, 4, 1)) == ("5", "4", "1")
    assert format_japanese_date(date(1989, 1, 8)) == "平成元年1月8日"


def test_price_formatting():
    assert format_price(0) == "0"
    assert format_price(999) == "999"
    assert format_price(1000) == "1,000"
    assert format_price(1234567) == "1,234,567"
    assert price_label(200) == "¥200-"


def _receipt() -> ReceiptData:
    return ReceiptData(
        order_id="0b0c4a4e-8a53-4a8e-9d1e-3c7f1b2a9e10",
        recipient="山田太郎",
        ordered_at=datetime(2023, 4, 1, 10, 0),
        total_price=12800,
    )


def test_receipt_without_template(settings):
    pdf = render_receipt(_receipt())
    assert pdf.startswith(b"%PDF")
    page = PdfReader(io.BytesIO(pdf)).pages[0]
    assert round(float(page.mediabox.width)) == round(PAGE_SIZE[0])
    assert float(page.mediabox.width) > float(page.mediabox.height)


def test_receipt_merged_onto_template(tmp_path):
    template = tmp_path / "template.pdf"
    c = canvas.Canvas(str(template), pagesize=PAGE_SIZE)
    c.drawString(10, 10, "template")
    c.showPage()
    c.save()

    pdf = render_receipt(_receipt(), template_path=str(template))
    reader = PdfReader(io.BytesIO(pdf))
    assert len(reader.pages) == 1


def test_write_receipt_path(settings):
    path = write_receipt(settings, _receipt(), at=datetime(2024, 1, 2, 3, 4, 5))
    assert path.name == "0b0c4a4e-8a53-4a8e-9d1e-3c7f1b2a9e10_20240102030405.pdf"
    assert path.parent.name == "pdf"
    assert path.read_bytes().startswith(b"%PDF")


def test_orders_csv_export(settings, db_session):
    db_session.add(
        Order(
            user_id="u-1",
            quantity=3,
            total_price=200,
            order_status="new",
            remarks="gift",
            created_at=datetime(2024, 1, 5, 9, 30, 0),
            updated_at=datetime(2024, 1, 5, 9, 30, 0),
        )
    )
    db_session.commit()

    day = datetime(2024, 1, 5)
    path, count = export_orders(settings, db_session.scalars(select(Order)).all(), day=day)
    assert count == 1
    assert path == orders_csv_path(settings, day)
    assert path.as_posix().endswith("csv/orders/2024/1/5/20240105_orders.csv")

    with path.open(encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ORDER_HEADER
    assert rows[1][1:] == ["u-1", "3", "200", "new", "gift", "2024-01-05 09:30:00", "2024-01-05 09:30:00"]


def test_users_csv_export_endpoint(client, settings):
    client.post(
        "/users",
        json={"first_name": "Taro", "last_name": "Yamada", "email": "taro@example.com", "age": 40},
    )
    r = client.post("/users/exportCsv")
    assert r.status_code == 200
    assert r.json()["message"] == "CSVを出力しました"

    with open(r.json()["path"], encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["ID", "LastName", "FirstName", "Email", "Age"]
    assert rows[1][1:] == ["Yamada", "Taro", "taro@example.com", "40"]


def test_parse_record_fills_defaults():
    values = parse_record(["", "りんご", "120", "", "x"])
    assert len(values["id"]) == 36
    assert values["name"] == "りんご"
    assert values["price"] == 120
    assert values["quantity"] == 0


def test_import_shift_jis_products(tmp_path, db_session):
    path = tmp_path / "product.CSV"
    path.write_bytes(
        "p-1,りんご,120,青森産,10\r\n,みかん,80,,5\r\n".encode("shift_jis")
    )

    assert import_products(db_session, path) == 2

    products = {p.name: p for p in db_session.scalars(select(Product)).all()}
    assert products["りんご"].id == "p-1"
    assert products["りんご"].remarks == "青森産"
    assert products["みかん"].price == 80
    assert products["みかん"].quantity == 5


def test_qrcode_written(settings):
    path = write_qrcode(settings)
    assert path.as_posix().endswith("qrcode/qrcode.png")
    with Image.open(path) as img:
        assert img.size == (256, 256)


def test_qrcode_endpoint(client):
    r = client.get("/qrcode")
    assert r.status_code == 200
    assert r.json()["path"].endswith("qrcode.png")
