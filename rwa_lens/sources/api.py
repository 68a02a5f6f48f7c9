"""Atlas REST API client for asset records, their history and monitoring alerts."""
from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Any
from urllib.parse import quote

import aiohttp
import certifi

from ..config import ApiSourceConfig
from ..models import AssetRecord, ComplianceEvent, MonitoringAlert, YieldDistribution
from ..parser import (
    parse_alerts,
    parse_asset,
    parse_assets,
    parse_compliance_events,
    parse_yield_distributions,
)

logger = logging.getLogger(__name__)


class AtlasApiClient:
    """Fetch asset records and alerts from the Atlas backend.

    Every endpoint wraps its payload as ``{"data": ...}``. Failures are
    logged and produce empty results.
    """

    def __init__(self, config: ApiSourceConfig) -> None:
        self.base_url = config.base_url.rstrip("/")
        self.api_key = config.api_key
        self.timeout = config.timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        return headers

    async def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``endpoint`` and return its ``data`` member, or None on failure."""
        url = f"{self.base_url}{endpoint}"
        query = {k: v for k, v in (params or {}).items() if v is not None}

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(
                    url,
                    params=query,
                    headers=self._headers(),
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if response.status != 200:
                        logger.error(
                            "Atlas API error for %s: HTTP %s", endpoint, response.status
                        )
                        return None
                    body = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error("Atlas API request to %s failed: %s", endpoint, e)
            return None

        if not isinstance(body, dict):
            logger.error("Unexpected Atlas API response for %s", endpoint)
            return None
        return body.get("data")

    async def fetch_assets(
        self,
        asset_type: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[AssetRecord]:
        """Fetch asset records, optionally by type and paginated."""
        params: dict[str, Any] = {
            "limit": limit,
            "offset": offset or None,
            "assetType": asset_type,
        }
        data = await self._get("/assets", params)
        if not isinstance(data, list):
            return []

        assets = parse_assets(data)
        logger.info("Fetched %d assets from Atlas API", len(assets))
        return assets

    async def fetch_asset(self, asset_id: str) -> AssetRecord | None:
        data = await self._get(f"/assets/{quote(asset_id, safe='')}")
        if not isinstance(data, dict):
            return None
        try:
            return parse_asset(data)
        except ValueError as e:
            logger.warning("Malformed asset %s from Atlas API: %s", asset_id, e)
            return None

    async def fetch_alerts(
        self,
        severity: str | None = None,
        resolved: bool | None = None,
        limit: int | None = None,
    ) -> list[MonitoringAlert]:
        params: dict[str, Any] = {
            "severity": severity,
            "resolved": None if resolved is None else str(resolved).lower(),
            "limit": limit,
        }
        data = await self._get("/alerts", params)
        if not isinstance(data, list):
            return []
        return parse_alerts(data)

    async def fetch_compliance_events(self, asset_id: str) -> list[ComplianceEvent]:
        data = await self._get(f"/assets/{quote(asset_id, safe='')}/compliance")
        if not isinstance(data, list):
            return []
        return parse_compliance_events(data)

    async def fetch_yield_distributions(self, asset_id: str) -> list[YieldDistribution]:
        """Yield payout history for one asset, in API order."""
        data = await self._get(f"/assets/{quote(asset_id, safe='')}/yield")
        if not isinstance(data, list):
            return []
        return parse_yield_distributions(data)
