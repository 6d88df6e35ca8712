"""
Report Upstreams — Shared configuration and error types

Both report sources (the WMS Metabase proxy and Metabase itself) are read-only
HTTP services gated by a secret configured out-of-band. Their settings are
resolved once into a ``ReportSources`` value and handed to the clients, so no
client reads the environment per request.
"""

from dataclasses import dataclass

from core.config import Settings


# ── Errors ────────────────────────────────────────────────────────────────


class ReportSourceError(Exception):
    """Base class for failures talking to a report upstream."""


class UpstreamConfigError(ReportSourceError):
    """Required credential for an upstream is not configured."""


class UpstreamError(ReportSourceError):
    """Upstream was unreachable or answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


# ── Configuration ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ReportSources:
    """Connection settings for every report upstream."""

    wms_api_base: str
    wms_api_token: str
    metabase_url: str
    metabase_api_key: str
    metabase_inventory_card_id: int = 19168
    timeout_seconds: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReportSources":
        return cls(
            wms_api_base=settings.wms_api_base.rstrip("/"),
            wms_api_token=settings.wms_api_token,
            metabase_url=settings.metabase_url.rstrip("/"),
            metabase_api_key=settings.metabase_api_key,
            metabase_inventory_card_id=settings.metabase_inventory_card_id,
            timeout_seconds=settings.upstream_timeout_seconds,
        )
