"""
Map pydantic validation failures to the localized 400 body:

    {"code": 400, "message": "パラメータが不正です",
     "details": [{"attribute": "title", "message": "タイトルは不正です"}]}
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

INVALID_PARAMETERS_MESSAGE = "パラメータが不正です"

# Request locations FastAPI prefixes onto `loc`.
_LOCATIONS = ("body", "query", "path", "header", "cookie")

ATTRIBUTE_LABELS: dict[str, str] = {
    "body": "本文",
    "title": "タイトル",
    "user_id": "ユーザーID",
    "status": "ステータス",
    "age": "年齢",
    "password": "パスワード",
    "email": "メールアドレス",
    "password_confirmation": "パスワード確認",
    "first_name": "名",
    "last_name": "姓",
    "order_status": "注文ステータス",
    "order_id": "注文ID",
    "remarks": "備考",
    "quantity": "数量",
    "total_price": "合計金額",
    "created_at": "作成日時",
    "updated_at": "更新日時",
    "product_id": "商品ID",
    "price": "価格",
    "name": "商品名",
    "order_details": "注文明細",
}


def attribute_label(attribute: str) -> str:
    return ATTRIBUTE_LABELS.get(attribute, attribute)


def validation_message(attribute: str, error_type: str) -> str:
    label = attribute_label(attribute)
    if error_type == "missing":
        return f"{label}は必須です"
    return f"{label}は不正です"


def _is_required_failure(e: Mapping[str, Any]) -> bool:
    # An empty string for a required field counts as missing.
    kind = str(e.get("type") or "")
    return kind == "missing" or (kind == "string_too_short" and e.get("input") == "")


def _field_path(loc: Iterable[Any]) -> list[str]:
    parts = [str(x) for x in loc]
    if parts and parts[0] in _LOCATIONS:
        parts = parts[1:]
    return parts


def build_validation_error_body(errors: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    errs = list(errors)
    details: list[dict[str, str]] = []
    for e in errs:
        path = _field_path(e.get("loc") or ())
        if not path or e.get("type") == "json_invalid":
            # Not tied to a field (malformed JSON, wrong body type): report the raw text.
            return {
                "code": 400,
                "message": str(e.get("msg") or "Invalid request"),
                "details": [],
            }
        # List indices are not labels; use the nearest field name.
        field_name = next((p for p in reversed(path) if not p.isdigit()), path[-1])
        details.append(
            {
                "attribute": ".".join(path),
                "message": validation_message(
                    field_name,
                    "missing" if _is_required_failure(e) else str(e.get("type") or ""),
                ),
            }
        )

    return {
        "code": 400,
        "message": INVALID_PARAMETERS_MESSAGE,
        "details": details,
    }
