# ==== PROMETHEUS METRICS ==== #

"""
Prometheus metrics for the procurement API.

Request latency, invoice calculations, vendor verification outcomes,
attachment storage and workbook exports, exposed on the scrape endpoint.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    REGISTRY
)


# ==== REQUEST METRICS ==== #

http_request_latency_seconds = Histogram(
    "procurement_http_request_latency_seconds",
    "HTTP request latency in seconds",
    ["method", "resource", "status_code"]
)


# ==== BUSINESS METRICS ==== #

invoice_calculations_total = Counter(
    "procurement_invoice_calculations_total",
    "Invoice derived-field calculations by PPN status",
    ["ppn_status"]
)

vendor_verifications_total = Counter(
    "procurement_vendor_verifications_total",
    "Vendor verification evaluations by outcome",
    ["outcome"]
)

attachments_stored_total = Counter(
    "procurement_attachments_stored_total",
    "Attachments stored by related table",
    ["related_table"]
)

attachments_deleted_total = Counter(
    "procurement_attachments_deleted_total",
    "Attachments deleted by related table",
    ["related_table"]
)

exports_total = Counter(
    "procurement_exports_total",
    "Excel exports generated by resource",
    ["resource"]
)


# ==== DATABASE METRICS ==== #

db_connections_active = Gauge(
    "procurement_db_connections_active",
    "Number of active database sessions"
)


# ==== SYSTEM METRICS ==== #

app_info = Gauge(
    "procurement_app_info",
    "Application information",
    ["version", "environment", "service_name"]
)


def init_metrics(version: str) -> None:
    """Initialize metrics collection.

    Args:
        version: Application version label
    """
    from procurement.settings import settings
    app_info.labels(
        version=version,
        environment=settings.APP_ENV,
        service_name=settings.SERVICE_NAME
    ).set(1)


# Metrics router for Prometheus scraping
metrics_router = APIRouter()


@metrics_router.get("/metrics")
def get_metrics() -> PlainTextResponse:
    """Expose Prometheus metrics for scraping.

    Returns:
        Prometheus metrics in text format
    """
    return PlainTextResponse(
        generate_latest(REGISTRY).decode("utf-8"),
        media_type="text/plain"
    )
