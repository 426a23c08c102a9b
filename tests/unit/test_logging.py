import json
import logging
from uuid import uuid4

from peptide_store.core.logging import JsonFormatter, RequestIdFilter, request_id_ctx


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("peptide_store.services.order_lifecycle", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_stock_fields_become_top_level_keys():
    order_id = uuid4()
    record = _record("stock_deducted", order_id=order_id, quantity=3, stock_before=10, stock_after=7)

    data = json.loads(JsonFormatter().format(record))

    assert data["message"] == "stock_deducted"
    assert data["level"] == "INFO"
    assert data["order_id"] == str(order_id)
    assert data["stock_before"] == 10
    assert data["stock_after"] == 7
    assert "variation_id" not in data


def test_request_id_attached_inside_request():
    record = _record("order_confirmed")
    token = request_id_ctx.set("req-123")
    try:
        RequestIdFilter().filter(record)
    finally:
        request_id_ctx.reset(token)

    assert json.loads(JsonFormatter().format(record))["request_id"] == "req-123"


def test_no_request_id_outside_request():
    record = _record("order_confirmed")
    RequestIdFilter().filter(record)
    assert "request_id" not in json.loads(JsonFormatter().format(record))
