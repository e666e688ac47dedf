from __future__ import annotations
import logging
import sys
import uuid
from pythonjsonlogger import jsonlogger
from fastapi import Request
from ..config import get_settings

S = get_settings()

# Fields every line carries; services attach `identity` through `extra=`.
LOG_FORMAT = "%(levelname)s %(name)s %(message)s %(asctime)s %(request_id)s %(identity)s %(extra)s"


def build_formatter() -> jsonlogger.JsonFormatter:
    return jsonlogger.JsonFormatter(LOG_FORMAT, static_fields={"service": S.APP_NAME})


def setup_logging() -> None:
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter())
    root.addHandler(handler)
    root.setLevel(S.LOG_LEVEL)

    logging.getLogger("uvicorn.access").setLevel("WARNING")


def get_request_id(req: Request) -> str:
    return req.headers.get(S.REQUEST_ID_HEADER) or uuid.uuid4().hex


def request_record(level: int, msg: str, *, request_id: str, **fields) -> logging.LogRecord:
    """Build a record for the request logger with the id and `k=v` detail attached."""
    rec = logging.LogRecord(
        name="otp_reset.request", level=level, pathname=__file__, lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    rec.request_id = request_id
    rec.extra = " ".join(f"{k}={v}" for k, v in fields.items())
    return rec
