"""File-backed asset and alert source (JSON or YAML)."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ..alerts import filter_alerts
from ..models import AssetRecord, ComplianceEvent, MonitoringAlert, YieldDistribution
from ..parser import (
    parse_alerts,
    parse_assets,
    parse_compliance_events,
    parse_yield_distributions,
)

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = (".yaml", ".yml")


class FileAssetSource:
    """Serve assets and alerts from a local snapshot file.

    The file holds either a list of asset records or an object with
    ``assets`` and (optionally) ``alerts``, ``complianceEvents`` and
    ``yieldDistributions`` lists, in the camelCase API shape.
    The file is read once, on first use.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._assets: list[AssetRecord] | None = None
        self._alerts: list[MonitoringAlert] = []
        self._compliance_events: list[ComplianceEvent] = []
        self._yield_distributions: list[YieldDistribution] = []

    def _read(self) -> Any:
        with open(self.path) as f:
            if self.path.suffix.lower() in _YAML_SUFFIXES:
                return yaml.safe_load(f)
            return json.load(f)

    def _load(self) -> list[AssetRecord]:
        if self._assets is not None:
            return self._assets

        if not self.path.exists():
            raise FileNotFoundError(f"Asset file not found: {self.path}")

        raw = self._read() or []
        if isinstance(raw, dict):
            raw_assets = raw.get("assets", [])
            self._alerts = parse_alerts(raw.get("alerts", []))
            self._compliance_events = parse_compliance_events(raw.get("complianceEvents", []))
            self._yield_distributions = parse_yield_distributions(
                raw.get("yieldDistributions", [])
            )
        else:
            raw_assets = raw

        self._assets = parse_assets(raw_assets)
        logger.info("Loaded %d assets from %s", len(self._assets), self.path)
        return self._assets

    async def fetch_assets(
        self,
        asset_type: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[AssetRecord]:
        assets = self._load()
        if asset_type:
            assets = [a for a in assets if a.asset_type == asset_type]
        end = offset + limit if limit is not None else None
        return assets[offset:end]

    async def fetch_asset(self, asset_id: str) -> AssetRecord | None:
        return next((a for a in self._load() if a.id == asset_id), None)

    async def fetch_compliance_events(self, asset_id: str) -> list[ComplianceEvent]:
        self._load()
        return [e for e in self._compliance_events if e.asset_id == asset_id]

    async def fetch_yield_distributions(self, asset_id: str) -> list[YieldDistribution]:
        self._load()
        return [d for d in self._yield_distributions if d.asset_id == asset_id]

    async def fetch_alerts(
        self,
        severity: str | None = None,
        resolved: bool | None = None,
        limit: int | None = None,
    ) -> list[MonitoringAlert]:
        self._load()
        return filter_alerts(self._alerts, severity=severity, resolved=resolved, limit=limit)
