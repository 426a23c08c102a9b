"""
Peptide storefront and admin console API.
FastAPI async backend; catalog, checkout, order lifecycle with stock deduction,
categories, testimonials, inventory dashboard and dosage calculator.
"""
from __future__ import annotations

import time
import uuid as uuid_lib

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest
from starlette.responses import Response

from peptide_store import __version__
from peptide_store.api import admin, auth, calculator, catalog, categories, orders, testimonials
from peptide_store.config import get_settings
from peptide_store.core.logging import get_logger, request_id_ctx
from peptide_store.core.metrics import REQUEST_COUNT, REQUEST_LATENCY, route_label

settings = get_settings()
# Package-level logger; module loggers (peptide_store.*) propagate to it
logger = get_logger("peptide_store", settings.log_level.upper())

# Sentry (configurable via SENTRY_DSN)
if settings.sentry_dsn:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.app_env,
        traces_sample_rate=0.1,
        integrations=[FastApiIntegration()],
    )

app = FastAPI(
    title="Peptide Store API",
    description="Research peptide storefront: catalog, checkout and order administration.",
    version=__version__,
    openapi_tags=[
        {"name": "catalog", "description": "Products, variations and prices"},
        {"name": "categories", "description": "Catalog categories"},
        {"name": "orders", "description": "Checkout and order lifecycle"},
        {"name": "testimonials", "description": "Customer testimonials gallery"},
        {"name": "calculator", "description": "Peptide dosage calculator"},
        {"name": "auth", "description": "JWT login"},
        {"name": "admin", "description": "Product and inventory management (admin only)"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_and_metrics(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid_lib.uuid4())
    request_id_ctx.set(request_id)
    start = time.perf_counter()
    response = await call_next(request)
    duration = time.perf_counter() - start
    route = route_label(request)
    REQUEST_COUNT.labels(method=request.method, route=route, status=response.status_code).inc()
    REQUEST_LATENCY.labels(method=request.method, route=route).observe(duration)
    if response.status_code >= 500:
        logger.warning("request_failed", extra={"status_code": response.status_code})
    response.headers["X-Request-ID"] = request_id
    return response


prefix = settings.api_prefix
app.include_router(catalog.router, prefix=prefix)
app.include_router(categories.router, prefix=prefix)
app.include_router(orders.router, prefix=prefix)
app.include_router(testimonials.router, prefix=prefix)
app.include_router(calculator.router, prefix=prefix)
app.include_router(auth.router, prefix=prefix)
app.include_router(admin.router, prefix=prefix)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type="text/plain")


@app.get("/")
async def root():
    return {"message": "Peptide Store API", "docs": "/docs"}
