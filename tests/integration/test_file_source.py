"""Integration tests for the file-backed asset source."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from rwa_lens.sources.file import FileAssetSource


def _asset(asset_id: str, asset_type: str = "bond", **extra: Any) -> dict[str, Any]:
    return {
        "id": asset_id,
        "name": f"Asset {asset_id}",
        "symbol": asset_id,
        "assetType": asset_type,
        "totalValue": "100",
        "complianceStatus": "compliant",
        "custodyStatus": "bank-custody",
        **extra,
    }


@pytest.fixture()
def json_snapshot(tmp_path: Path) -> Path:
    path = tmp_path / "assets.json"
    path.write_text(
        json.dumps(
            {
                "assets": [
                    _asset("B1"),
                    _asset("E1", "equity", parentAssets=["B1"]),
                    _asset("B2"),
                    {"name": "missing id"},
                ],
                "alerts": [
                    {"id": "AL-1", "severity": "critical", "assetId": "B1"},
                    {"id": "AL-2", "severity": "low", "assetId": "E1", "resolved": True},
                ],
                "complianceEvents": [
                    {"id": "CE-1", "assetId": "B1", "eventType": "audit", "status": "compliant",
                     "timestamp": 1_690_000_000},
                    {"id": "CE-2", "assetId": "E1", "eventType": "violation", "status": "failed",
                     "timestamp": 1_695_000_000},
                ],
                "yieldDistributions": [
                    {"id": "YD-1", "assetId": "B1", "amount": "1250.00", "currency": "USD",
                     "recipients": 12, "timestamp": 1_696_000_000, "txHash": "0xaa"},
                ],
            }
        )
    )
    return path


class TestFileAssetSource:
    @pytest.mark.asyncio
    async def test_reads_object_snapshot(self, json_snapshot: Path) -> None:
        source = FileAssetSource(json_snapshot)
        assets = await source.fetch_assets()
        assert [a.id for a in assets] == ["B1", "E1", "B2"]
        assert assets[1].parent_assets == ("B1",)

    @pytest.mark.asyncio
    async def test_reads_plain_list_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "assets.yaml"
        path.write_text(yaml.safe_dump([_asset("X"), _asset("Y")]))
        source = FileAssetSource(path)
        assert [a.id for a in await source.fetch_assets()] == ["X", "Y"]
        assert await source.fetch_alerts() == []

    @pytest.mark.asyncio
    async def test_type_filter_and_pagination(self, json_snapshot: Path) -> None:
        source = FileAssetSource(json_snapshot)
        assert [a.id for a in await source.fetch_assets(asset_type="bond")] == ["B1", "B2"]
        assert [a.id for a in await source.fetch_assets(limit=1, offset=1)] == ["E1"]
        assert [a.id for a in await source.fetch_assets(offset=2)] == ["B2"]

    @pytest.mark.asyncio
    async def test_fetch_asset(self, json_snapshot: Path) -> None:
        source = FileAssetSource(json_snapshot)
        asset = await source.fetch_asset("E1")
        assert asset is not None
        assert asset.asset_type == "equity"
        assert await source.fetch_asset("NOPE") is None

    @pytest.mark.asyncio
    async def test_fetch_alerts_filters(self, json_snapshot: Path) -> None:
        source = FileAssetSource(json_snapshot)
        assert [a.id for a in await source.fetch_alerts()] == ["AL-1", "AL-2"]
        assert [a.id for a in await source.fetch_alerts(resolved=False)] == ["AL-1"]
        assert [a.id for a in await source.fetch_alerts(severity="low")] == ["AL-2"]

    @pytest.mark.asyncio
    async def test_reads_file_once(self, json_snapshot: Path) -> None:
        source = FileAssetSource(json_snapshot)
        await source.fetch_assets()
        json_snapshot.write_text("[]")
        assert len(await source.fetch_assets()) == 3

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, tmp_path: Path) -> None:
        source = FileAssetSource(tmp_path / "absent.json")
        with pytest.raises(FileNotFoundError):
            await source.fetch_assets()

    @pytest.mark.asyncio
    async def test_history_filtered_by_asset(self, json_snapshot: Path) -> None:
        source = FileAssetSource(json_snapshot)
        assert [e.id for e in await source.fetch_compliance_events("E1")] == ["CE-2"]
        [dist] = await source.fetch_yield_distributions("B1")
        assert dist.amount == "1250.00"
        assert await source.fetch_yield_distributions("E1") == []

    @pytest.mark.asyncio
    async def test_list_snapshot_has_no_history(self, tmp_path: Path) -> None:
        path = tmp_path / "assets.json"
        path.write_text(json.dumps([_asset("X")]))
        source = FileAssetSource(path)
        assert await source.fetch_compliance_events("X") == []
        assert await source.fetch_yield_distributions("X") == []
