"""
Metabase Client

Runs saved questions ("cards") through the Metabase API and returns the raw
row list from ``/api/card/{id}/query/json``.
"""

import httpx
import structlog

from integrations.base import ReportSources, UpstreamConfigError, UpstreamError

logger = structlog.get_logger()


class MetabaseClient:
    """Client for Metabase card queries, authenticated with an API key."""

    def __init__(self, sources: ReportSources, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = sources.metabase_url
        self.api_key = sources.metabase_api_key
        self.inventory_card_id = sources.metabase_inventory_card_id
        self.timeout = sources.timeout_seconds
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def query_card(self, card_id: int) -> list[dict]:
        """Execute a saved question and return its rows."""
        if not self.configured:
            raise UpstreamConfigError("METABASE_API_KEY not configured")

        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/api/card/{card_id}/query/json",
                    headers={"x-api-key": self.api_key},
                    json={},
                )
            except httpx.HTTPError as exc:
                raise UpstreamError(f"Metabase Q{card_id} failed: {exc}") from exc

        if not response.is_success:
            raise UpstreamError(f"Metabase Q{card_id} failed: {response.status_code}", response.status_code)

        try:
            rows = response.json()
        except ValueError as exc:
            raise UpstreamError(f"Metabase Q{card_id} returned invalid JSON: {exc}", response.status_code) from exc
        if not isinstance(rows, list):
            raise UpstreamError(f"Metabase Q{card_id} returned unexpected payload")

        logger.info("metabase.card.queried", card_id=card_id, row_count=len(rows))
        return rows

    async def get_inventory_rows(self) -> list[dict]:
        return await self.query_card(self.inventory_card_id)
