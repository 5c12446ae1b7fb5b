"""
Shared query-string field types for list endpoints.

Every field is a string where `""` means "not set"; the patterns below accept
the empty string so omitted parameters never fail validation.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel, StringConstraints

from ..db.query_spec import as_datetime

# Capped at 18 digits so every value fits a signed 64-bit column.
Numeric = Annotated[str, StringConstraints(pattern=r"^\d{0,18}$")]

BoolText = Annotated[
    str,
    StringConstraints(pattern=r"^(|1|t|T|TRUE|true|True|0|f|F|FALSE|false|False)$"),
]

UUID4Text = Annotated[
    str,
    StringConstraints(
        pattern=r"^([0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12})?$"
    ),
]


def _check_datetime(v: str) -> str:
    if v:
        as_datetime(v)
    return v


DateTimeText = Annotated[str, AfterValidator(_check_datetime)]


Text64 = Annotated[str, StringConstraints(max_length=64)]
Text255 = Annotated[str, StringConstraints(max_length=255)]


class PageParams(BaseModel):
    offset: Numeric = "0"
    limit: Numeric = "10"
