"""
Prometheus metrics: HTTP traffic labelled by route template, plus order lifecycle
and stock deduction counters.
"""
from __future__ import annotations

from prometheus_client import Counter, Histogram
from starlette.requests import Request

REQUEST_COUNT = Counter("http_requests_total", "Total requests", ["method", "route", "status"])
REQUEST_LATENCY = Histogram("http_request_duration_seconds", "Request latency", ["method", "route"])

ORDER_TRANSITIONS = Counter(
    "order_transitions_total",
    "Order status transition attempts",
    ["target", "outcome"],
)
STOCK_DEDUCTIONS = Counter(
    "stock_deductions_total",
    "Per-item stock deductions performed on order confirmation",
    ["target", "outcome"],
)


def route_label(request: Request) -> str:
    """Route template (`/api/v1/orders/{order_id}/confirm`), so ids don't explode label cardinality."""
    route = request.scope.get("route")
    path_format = getattr(route, "path_format", None)
    return path_format or "unmatched"
