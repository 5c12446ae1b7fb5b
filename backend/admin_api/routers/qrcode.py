from __future__ import annotations

from fastapi import APIRouter, Request

from ..observability.logging import get_logger
from ..services.qrcode_writer import write_qrcode

router = APIRouter(tags=["qrcode"])
log = get_logger("qrcode")


@router.get("/qrcode")
def generate_qrcode(request: Request):
    path = write_qrcode(request.app.state.settings)
    log.info("qrcode_written", path=str(path))
    return {"message": "QRコードを出力しました", "path": str(path)}
