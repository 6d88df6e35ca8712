"""
Report upstream clients package.

Read-only connectors used by the reports proxy:
  - WMS (warehouse-management API, Metabase-backed report endpoints)
  - Metabase (BI saved-question queries)

Usage:
    from integrations import ReportSources, WMSClient

    sources = ReportSources.from_settings(get_settings())
    payload = await WMSClient(sources).get_daily_shipping()
"""

from integrations.base import (
    ReportSourceError,
    ReportSources,
    UpstreamConfigError,
    UpstreamError,
)
from integrations.metabase import MetabaseClient
from integrations.wms import WMSClient

__all__ = [
    "ReportSources",
    "ReportSourceError",
    "UpstreamConfigError",
    "UpstreamError",
    "MetabaseClient",
    "WMSClient",
]
