from __future__ import annotations

import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from ..observability.context import trace_id_var


class TraceContextMiddleware(BaseHTTPMiddleware):
    """
    - Accepts inbound X-Trace-Id / X-Cgi-Trace-Id or generates a UUIDv4.
    - Stores it in request.state.trace_id and the logging contextvar.
    - Always echoes X-Trace-Id on the response.
    """

    header_name = "X-Trace-Id"

    async def dispatch(self, request: Request, call_next):
        inbound = request.headers.get("x-trace-id") or request.headers.get("x-cgi-trace-id")
        trace_id = (str(inbound).strip() if inbound else "") or str(uuid.uuid4())

        request.state.trace_id = trace_id
        token = trace_id_var.set(trace_id)
        try:
            response = await call_next(request)
            response.headers[self.header_name] = trace_id
            return response
        finally:
            trace_id_var.reset(token)
