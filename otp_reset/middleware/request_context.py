from __future__ import annotations
import logging
import time
from datetime import datetime, timezone
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from ..observability.logging import get_request_id, request_record
from ..config import get_settings

S = get_settings()
log = logging.getLogger("otp_reset.request")

class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = get_request_id(request)
        start = time.perf_counter()
        timestamp = datetime.now(timezone.utc).isoformat()

        try:
            response = await call_next(request)
        except Exception:
            dur_ms = int((time.perf_counter() - start) * 1000)
            log.handle(request_record(
                logging.ERROR, "unhandled_error", request_id=rid,
                timestamp=timestamp, path=request.url.path, method=request.method, ms=dur_ms,
            ))
            raise

        dur_ms = int((time.perf_counter() - start) * 1000)
        response.headers[S.REQUEST_ID_HEADER] = rid
        log.handle(request_record(
            logging.INFO, "request", request_id=rid,
            timestamp=timestamp, path=request.url.path, method=request.method,
            status=response.status_code, ms=dur_ms,
        ))
        return response
