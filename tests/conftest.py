"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Callable

import pytest

from rwa_lens.config import (
    ApiSourceConfig,
    AppConfig,
    CacheConfig,
    DataSourceConfig,
    EmailConfig,
    FileSourceConfig,
    NotificationsConfig,
    ScoringConfig,
    TelegramConfig,
)
from rwa_lens.models import AssetRecord, MonitoringAlert

# Fixed reference time for every audit-age computation.
NOW = 1_700_000_000
DAY = 24 * 60 * 60


# ---------------------------------------------------------------------------
# Asset fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def now() -> int:
    return NOW


@pytest.fixture()
def make_asset() -> Callable[..., AssetRecord]:
    """Factory for minimal, fully-compliant asset records."""

    def _make(asset_id: str, **overrides: Any) -> AssetRecord:
        fields: dict[str, Any] = {
            "id": asset_id,
            "address": f"0x{asset_id.lower()}",
            "name": f"Asset {asset_id}",
            "symbol": asset_id,
            "asset_type": "bond",
            "owner": "0xowner",
            "total_value": "0",
            "compliance_status": "compliant",
            "custody_status": "bank-custody",
        }
        fields.update(overrides)
        return AssetRecord(**fields)

    return _make


@pytest.fixture()
def sample_assets(make_asset: Callable[..., AssetRecord]) -> list[AssetRecord]:
    """Office tower, its two fractions, a synthetic and a lending position.

    Health scores at NOW: RE-1 86, FR-1 69, FR-2 89, SY-1 0, DP-1 86.
    """
    return [
        make_asset(
            "RE-1",
            name="Manhattan Office Tower",
            symbol="MOT",
            asset_type="real-estate",
            total_value="1000000",
            total_yield_generated="55000",
            yield_rate=5.5,
            risk_score=20,
            liquidity_score=60,
            last_audit_date=NOW - 30 * DAY,
            child_assets=("FR-1", "FR-2"),
            collateral_for=("DP-1",),
            custodian="First Custody Bank",
        ),
        make_asset(
            "FR-1",
            name="MOT Fraction A",
            symbol="MOTA",
            asset_type="fund-share",
            total_value="400000",
            total_yield_generated="12000.5",
            yield_rate=5.5,
            risk_score=30,
            liquidity_score=80,
            compliance_status="pending",
            custody_status="smart-contract",
            parent_assets=("RE-1",),
            child_assets=("SY-1",),
        ),
        make_asset(
            "FR-2",
            name="MOT Fraction B",
            symbol="MOTB",
            asset_type="fund-share",
            total_value="300000",
            yield_rate=4.0,
            custody_status="multi-sig",
            parent_assets=("RE-1", "GHOST"),
        ),
        make_asset(
            "SY-1",
            name="Synthetic MOT Index",
            symbol="sMOT",
            asset_type="synthetic",
            total_value="not-a-number",
            risk_score=90,
            liquidity_score=20,
            compliance_status="failed",
            custody_status="self-custody",
            last_audit_date=NOW - 200 * DAY,
            parent_assets=("FR-1",),
        ),
        make_asset(
            "DP-1",
            name="Lending Vault Position",
            symbol="LVP",
            asset_type="defi-position",
            total_value="800000",
            compliance_status="not-required",
            custody_status="smart-contract",
        ),
    ]


@pytest.fixture()
def raw_asset() -> dict[str, Any]:
    """One asset in the camelCase API shape."""
    return {
        "id": "RWA-001",
        "address": "0xABC123",
        "chainId": 5000,
        "name": "Treasury Bill 2026",
        "symbol": "TB26",
        "assetType": "bond",
        "owner": "0xOWNER",
        "custodian": "State Street",
        "custodyStatus": "qualified-custodian",
        "totalSupply": "1000000",
        "totalValue": "2500000.75",
        "currency": "USD",
        "yieldRate": 4.25,
        "totalYieldGenerated": "106250.00",
        "complianceStatus": "compliant",
        "lastAuditDate": NOW - 10 * DAY,
        "parentAssets": [],
        "childAssets": ["RWA-002"],
        "collateralFor": ["DEFI-9"],
        "createdAt": NOW - 400 * DAY,
        "riskScore": 12,
        "liquidityScore": 88,
    }


@pytest.fixture()
def sample_alerts() -> list[MonitoringAlert]:
    return [
        MonitoringAlert(
            id="A1", severity="critical", type="compliance", asset_id="SY-1",
            asset_name="Synthetic MOT Index", message="Compliance check failed",
            timestamp=NOW - 60,
        ),
        MonitoringAlert(
            id="A2", severity="high", type="collateral", asset_id="DP-1",
            asset_name="Lending Vault Position", message="Collateral ratio dropping",
            timestamp=NOW - 3600,
        ),
        MonitoringAlert(
            id="A3", severity="low", type="yield", asset_id="FR-1",
            asset_name="MOT Fraction A", message="Yield distribution delayed",
            timestamp=NOW - 7200,
        ),
        MonitoringAlert(
            id="A4", severity="critical", type="custody", asset_id="RE-1",
            asset_name="Manhattan Office Tower", message="Custodian attestation late",
            timestamp=NOW - 86400, resolved=True,
        ),
    ]


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_api_config() -> ApiSourceConfig:
    return ApiSourceConfig(
        base_url="https://atlas.example.com", api_key="secret-key", timeout=5
    )


@pytest.fixture()
def sample_app_config(sample_api_config: ApiSourceConfig) -> AppConfig:
    return AppConfig(
        data_source=DataSourceConfig(provider="api", api=sample_api_config),
        scoring=ScoringConfig(),
        cache=CacheConfig(ttl_seconds=60),
        notifications=NotificationsConfig(
            telegram=TelegramConfig(
                enabled=True,
                alert_bot_token="fake-alert-token",
                log_bot_token="fake-log-token",
                chat_id="12345",
            ),
            email=EmailConfig(enabled=False),
        ),
    )


@pytest.fixture()
def file_app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        data_source=DataSourceConfig(
            provider="file", file=FileSourceConfig(path=str(tmp_path / "assets.json"))
        ),
        cache=CacheConfig(ttl_seconds=0),
    )


SAMPLE_YAML = textwrap.dedent("""\
    data_source:
      provider: api
      api:
        base_url: "https://atlas.example.com/"
        api_key: "key-123"
        timeout: 10
    scoring:
      compliance_penalties: {pending: 20}
      risk_weight: 0.25
      default_liquidity: 65
    cache:
      ttl_seconds: 30
    notifications:
      telegram:
        enabled: true
        alert_bot_token: "tok1"
        log_bot_token: "tok2"
        chat_id: 999
      email:
        enabled: false
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
