import json
import logging

from otp_reset.observability.logging import build_formatter, request_record


def _format(record: logging.LogRecord) -> dict:
    return json.loads(build_formatter().format(record))


def test_identity_field_is_emitted():
    log = logging.getLogger("otp_reset.services.otp_ledger")
    record = log.makeRecord(log.name, logging.INFO, __file__, 1, "otp issued", (), None,
                            extra={"identity": "a@x.test"})

    out = _format(record)

    assert out["message"] == "otp issued"
    assert out["identity"] == "a@x.test"
    assert out["service"]


def test_request_record_carries_request_id_and_details():
    rec = request_record(logging.INFO, "request", request_id="rid-1", path="/api/send-otp", status=200)

    out = _format(rec)

    assert out["request_id"] == "rid-1"
    assert out["extra"] == "path=/api/send-otp status=200"
    assert out["identity"] is None
