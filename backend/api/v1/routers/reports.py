"""
Reports Router — Read-only proxies to the WMS and Metabase.

Upstream payloads are not cached or reconciled; every request is a single
outbound fetch. Failures are logged here and answered with a 500 carrying a
short message plus the underlying error text.
"""

from collections.abc import Awaitable
from typing import Any

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.deps import get_current_user
from core.config import get_settings
from integrations import MetabaseClient, ReportSourceError, ReportSources, UpstreamConfigError, WMSClient

router = APIRouter(
    prefix="/api/v1/reports",
    tags=["reports"],
    dependencies=[Depends(get_current_user)],
)
logger = structlog.get_logger()


def get_report_sources() -> ReportSources:
    """Upstream settings, resolved once from the cached application settings."""
    return ReportSources.from_settings(get_settings())


def get_wms_client(sources: ReportSources = Depends(get_report_sources)) -> WMSClient:
    return WMSClient(sources)


def get_metabase_client(sources: ReportSources = Depends(get_report_sources)) -> MetabaseClient:
    return MetabaseClient(sources)


async def _proxy(report: str, failure_message: str, fetch: Awaitable[Any]) -> Any:
    try:
        return await fetch
    except UpstreamConfigError as exc:
        logger.error("reports.not_configured", report=report, error=str(exc))
        return JSONResponse(status_code=500, content={"detail": str(exc)})
    except ReportSourceError as exc:
        logger.error("reports.upstream_failed", report=report, error=str(exc))
        return JSONResponse(status_code=500, content={"detail": failure_message, "error": str(exc)})


# ─── Endpoints ──────────────────────────────────────────────────────────────


@router.get("/daily-shipping")
async def daily_shipping(wms: WMSClient = Depends(get_wms_client)):
    """B2C daily shipping batch, passed through from the WMS."""
    return await _proxy("daily_shipping", "Failed to fetch daily shipping data", wms.get_daily_shipping())


@router.get("/b2b-bulk-orders")
async def b2b_bulk_orders(wms: WMSClient = Depends(get_wms_client)):
    """B2B bulk orders, passed through from the WMS."""
    return await _proxy("b2b_bulk_orders", "Failed to fetch B2B bulk orders", wms.get_b2b_bulk_orders())


@router.get("/inventory")
async def inventory(metabase: MetabaseClient = Depends(get_metabase_client)):
    """Channel inventory snapshot from the Metabase inventory card."""

    async def _fetch() -> dict:
        rows = await metabase.get_inventory_rows()
        return {"success": True, "data": rows, "row_count": len(rows)}

    return await _proxy("inventory", "Failed to fetch inventory data", _fetch())
