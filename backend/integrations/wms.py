"""
WMS Report Client

Fetches pre-built Metabase reports that the warehouse-management API exposes
under ``/metabase/...``. Payloads are passed through untouched:
``{success, columns, data, row_count}``.
"""

import httpx
import structlog

from integrations.base import ReportSources, UpstreamConfigError, UpstreamError

logger = structlog.get_logger()

DAILY_SHIPPING_PATH = "/metabase/daily-shipping-batch/"
B2B_BULK_ORDERS_PATH = "/metabase/b2b-bulk-orders/"


class WMSClient:
    """Client for WMS report endpoints."""

    def __init__(self, sources: ReportSources, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = sources.wms_api_base
        self.token = sources.wms_api_token
        self.timeout = sources.timeout_seconds
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.token)

    async def get_report(self, path: str) -> dict:
        """GET a report path and return its JSON body."""
        if not self.configured:
            raise UpstreamConfigError("WMS_API_TOKEN not configured")

        url = f"{self.base_url}{path}"
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self.timeout,
            follow_redirects=True,
        ) as client:
            try:
                response = await client.get(
                    url,
                    headers={"Authorization": f"Bearer {self.token}"},
                )
            except httpx.HTTPError as exc:
                raise UpstreamError(f"WMS API {path} failed: {exc}") from exc

        if not response.is_success:
            raise UpstreamError(f"WMS API {path} failed: {response.status_code}", response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(f"WMS API {path} returned invalid JSON: {exc}", response.status_code) from exc

        logger.info("wms.report.fetched", path=path, status=response.status_code)
        return payload

    async def get_daily_shipping(self) -> dict:
        return await self.get_report(DAILY_SHIPPING_PATH)

    async def get_b2b_bulk_orders(self) -> dict:
        return await self.get_report(B2B_BULK_ORDERS_PATH)
