"""Source of the asset-record working set."""
from typing import Protocol

from ..models import AssetRecord, ComplianceEvent, YieldDistribution


class AssetSource(Protocol):
    """Abstract interface for fetching asset records and their history."""

    async def fetch_assets(
        self,
        asset_type: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[AssetRecord]: ...

    async def fetch_asset(self, asset_id: str) -> AssetRecord | None: ...

    async def fetch_compliance_events(self, asset_id: str) -> list[ComplianceEvent]: ...

    async def fetch_yield_distributions(self, asset_id: str) -> list[YieldDistribution]: ...
