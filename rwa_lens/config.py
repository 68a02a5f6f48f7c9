"""Load config.yaml with ${VAR} interpolation from the environment and .env, then validate."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------

_DEFAULT_COMPLIANCE_PENALTIES = {
    "compliant": 0.0,
    "pending": 15.0,
    "expired": 30.0,
    "failed": 40.0,
    "not-required": 5.0,
}

_DEFAULT_CUSTODY_PENALTIES = {
    "bank-custody": 0.0,
    "qualified-custodian": 0.0,
    "smart-contract": 3.0,
    "multi-sig": 5.0,
    "self-custody": 10.0,
}


@dataclass(frozen=True)
class ScoringConfig:
    compliance_penalties: dict[str, float] = field(
        default_factory=lambda: dict(_DEFAULT_COMPLIANCE_PENALTIES)
    )
    custody_penalties: dict[str, float] = field(
        default_factory=lambda: dict(_DEFAULT_CUSTODY_PENALTIES)
    )
    risk_weight: float = 0.3
    liquidity_weight: float = 0.2
    default_liquidity: float = 70.0
    audit_warning_days: float = 90.0
    audit_warning_penalty: float = 5.0
    audit_critical_days: float = 180.0
    audit_critical_penalty: float = 10.0


@dataclass(frozen=True)
class ApiSourceConfig:
    base_url: str = "https://api.mantle-atlas.xyz"
    api_key: str = ""
    timeout: int = 30


@dataclass(frozen=True)
class FileSourceConfig:
    path: str = ""


@dataclass(frozen=True)
class DataSourceConfig:
    provider: str = "api"
    api: ApiSourceConfig = field(default_factory=ApiSourceConfig)
    file: FileSourceConfig = field(default_factory=FileSourceConfig)


@dataclass(frozen=True)
class CacheConfig:
    ttl_seconds: float = 60.0


@dataclass(frozen=True)
class TelegramConfig:
    enabled: bool = False
    alert_bot_token: str = ""
    log_bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class EmailConfig:
    enabled: bool = False
    alert_email: str = ""
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    sender_email: str = ""
    sender_password: str = ""


@dataclass(frozen=True)
class NotificationsConfig:
    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    email: EmailConfig = field(default_factory=EmailConfig)


@dataclass(frozen=True)
class AppConfig:
    data_source: DataSourceConfig = field(default_factory=DataSourceConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_data_source(raw: dict[str, Any]) -> DataSourceConfig:
    api_raw = raw.get("api", {}) or {}
    file_raw = raw.get("file", {}) or {}
    return DataSourceConfig(
        provider=raw.get("provider", "api"),
        api=ApiSourceConfig(
            base_url=api_raw.get("base_url", ApiSourceConfig.base_url).rstrip("/"),
            api_key=api_raw.get("api_key", ""),
            timeout=int(api_raw.get("timeout", 30)),
        ),
        file=FileSourceConfig(path=str(file_raw.get("path", ""))),
    )


def _build_penalties(raw: dict[str, Any], defaults: dict[str, float]) -> dict[str, float]:
    penalties = dict(defaults)
    for status, penalty in raw.items():
        penalties[status] = float(penalty)
    return penalties


def _build_scoring(raw: dict[str, Any]) -> ScoringConfig:
    return ScoringConfig(
        compliance_penalties=_build_penalties(
            raw.get("compliance_penalties", {}), _DEFAULT_COMPLIANCE_PENALTIES
        ),
        custody_penalties=_build_penalties(
            raw.get("custody_penalties", {}), _DEFAULT_CUSTODY_PENALTIES
        ),
        risk_weight=float(raw.get("risk_weight", 0.3)),
        liquidity_weight=float(raw.get("liquidity_weight", 0.2)),
        default_liquidity=float(raw.get("default_liquidity", 70.0)),
        audit_warning_days=float(raw.get("audit_warning_days", 90.0)),
        audit_warning_penalty=float(raw.get("audit_warning_penalty", 5.0)),
        audit_critical_days=float(raw.get("audit_critical_days", 180.0)),
        audit_critical_penalty=float(raw.get("audit_critical_penalty", 10.0)),
    )


def _build_cache(raw: dict[str, Any]) -> CacheConfig:
    return CacheConfig(ttl_seconds=float(raw.get("ttl_seconds", 60.0)))


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    tg = raw.get("telegram", {})
    em = raw.get("email", {})
    return NotificationsConfig(
        telegram=TelegramConfig(
            enabled=bool(tg.get("enabled", False)),
            alert_bot_token=tg.get("alert_bot_token", ""),
            log_bot_token=tg.get("log_bot_token", ""),
            chat_id=str(tg.get("chat_id", "")),
        ),
        email=EmailConfig(
            enabled=bool(em.get("enabled", False)),
            alert_email=em.get("alert_email", ""),
            smtp_server=em.get("smtp_server", "smtp.gmail.com"),
            smtp_port=int(em.get("smtp_port", 587)),
            sender_email=em.get("sender_email", ""),
            sender_password=em.get("sender_password", ""),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        data_source=_build_data_source(raw.get("data_source", {})),
        scoring=_build_scoring(raw.get("scoring", {})),
        cache=_build_cache(raw.get("cache", {})),
        notifications=_build_notifications(raw.get("notifications", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    source = cfg.data_source
    if source.provider not in ("api", "file"):
        raise ValueError(f"Unknown data source provider '{source.provider}'")
    if source.provider == "api" and not source.api.base_url:
        raise ValueError("API data source requires a base_url")
    if source.provider == "file" and not source.file.path:
        raise ValueError("File data source requires a path")

    scoring = cfg.scoring
    if scoring.risk_weight < 0 or scoring.liquidity_weight < 0:
        raise ValueError("Scoring weights must be non-negative")
    if scoring.audit_warning_days > scoring.audit_critical_days:
        raise ValueError("audit_warning_days must not exceed audit_critical_days")

    if cfg.cache.ttl_seconds < 0:
        raise ValueError("cache.ttl_seconds must be non-negative")
