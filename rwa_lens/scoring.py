"""Asset health scoring. Pure functions, no I/O."""
from __future__ import annotations

import logging
import math
from datetime import datetime, timezone

from .config import ScoringConfig
from .models import AssetHealth, AssetRecord

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

_DEFAULT_SCORING = ScoringConfig()

# assess_asset_health reports these defaults; calc_health_score uses the
# configured default_liquidity instead.
ASSESS_DEFAULT_RISK = 50.0
ASSESS_DEFAULT_LIQUIDITY = 50.0

LOW_LIQUIDITY_THRESHOLD = 50.0
HIGH_RISK_THRESHOLD = 70.0
LOW_YIELD_CONSISTENCY = 70.0
LOW_COLLATERALIZATION_RATIO = 120.0

_COMPLIANCE_SCORES = {"compliant": 100, "pending": 70, "expired": 30}


def now_timestamp() -> float:
    """Current UTC time in unix seconds."""
    return datetime.now(timezone.utc).timestamp()


def days_since(timestamp: float, now: float) -> float:
    return (now - timestamp) / SECONDS_PER_DAY


def _status_penalty(
    status: str, penalties: dict[str, float], kind: str, asset_id: str
) -> float:
    penalty = penalties.get(status)
    if penalty is None:
        logger.warning("Unknown %s status '%s' on asset %s", kind, status, asset_id)
        return 0.0
    return penalty


def _audit_penalty(
    last_audit_date: int | None, now: float, scoring: ScoringConfig
) -> float:
    if last_audit_date is None:
        return 0.0
    age = days_since(last_audit_date, now)
    if age > scoring.audit_critical_days:
        return scoring.audit_critical_penalty
    if age > scoring.audit_warning_days:
        return scoring.audit_warning_penalty
    return 0.0


def calc_health_score(
    asset: AssetRecord,
    now: float | None = None,
    scoring: ScoringConfig = _DEFAULT_SCORING,
) -> int:
    """Composite 0-100 health score.

    Starts at 100 and subtracts compliance, risk, liquidity, audit-recency
    and custody penalties, then clamps to [0, 100] and rounds half up.

    Args:
        asset: Asset to score.
        now: Reference time in unix seconds for audit age. Defaults to the
            current time.
        scoring: Penalty table and weights.
    """
    if now is None:
        now = now_timestamp()

    score = 100.0
    score -= _status_penalty(
        asset.compliance_status, scoring.compliance_penalties, "compliance", asset.id
    )

    risk = asset.risk_score if asset.risk_score is not None else 0.0
    score -= risk * scoring.risk_weight

    liquidity = (
        asset.liquidity_score
        if asset.liquidity_score is not None
        else scoring.default_liquidity
    )
    score -= (100.0 - liquidity) * scoring.liquidity_weight

    score -= _audit_penalty(asset.last_audit_date, now, scoring)

    score -= _status_penalty(
        asset.custody_status, scoring.custody_penalties, "custody", asset.id
    )

    return math.floor(max(0.0, min(100.0, score)) + 0.5)


def calc_compliance_score(compliance_status: str) -> int:
    return _COMPLIANCE_SCORES.get(compliance_status, 20)


def assess_asset_health(
    asset: AssetRecord,
    now: float | None = None,
    collateralization_ratio: float | None = None,
    yield_consistency: float | None = None,
    scoring: ScoringConfig = _DEFAULT_SCORING,
) -> AssetHealth:
    """Full health assessment with issues and recommendations.

    ``collateralization_ratio`` and ``yield_consistency`` cannot be derived
    from the asset record and must be supplied by the caller. The ratio is
    only reported for assets that collateralize something.
    """
    if now is None:
        now = now_timestamp()

    issues: list[str] = []
    recommendations: list[str] = []

    if asset.compliance_status != "compliant":
        issues.append(f"Compliance status: {asset.compliance_status}")
        recommendations.append(
            "Update compliance documentation and renew certificates"
        )

    if (
        asset.last_audit_date is not None
        and days_since(asset.last_audit_date, now) > scoring.audit_critical_days
    ):
        issues.append(
            f"Audit report overdue (>{scoring.audit_critical_days:g} days)"
        )
        recommendations.append("Schedule independent audit within 30 days")

    liquidity = (
        asset.liquidity_score
        if asset.liquidity_score is not None
        else ASSESS_DEFAULT_LIQUIDITY
    )
    if liquidity < LOW_LIQUIDITY_THRESHOLD:
        issues.append("Low liquidity score")
        recommendations.append("Improve market depth or add to DEX pools")

    if asset.risk_score is not None and asset.risk_score > HIGH_RISK_THRESHOLD:
        issues.append("High risk score detected")
        recommendations.append("Review and mitigate identified risk factors")

    has_yield = bool(asset.yield_rate and asset.yield_rate > 0)
    if yield_consistency is None:
        yield_consistency = 100.0 if has_yield else 0.0
    if has_yield and yield_consistency < LOW_YIELD_CONSISTENCY:
        issues.append("Inconsistent yield distributions")
        recommendations.append("Investigate yield generation stability")

    ratio: float | None = None
    if asset.collateral_for:
        ratio = collateralization_ratio
        if ratio is not None and ratio < LOW_COLLATERALIZATION_RATIO:
            issues.append("Low collateralization ratio")
            recommendations.append(
                "Add collateral or reduce debt to maintain healthy ratio"
            )

    return AssetHealth(
        asset_id=asset.id,
        health_score=calc_health_score(asset, now=now, scoring=scoring),
        risk_score=(
            asset.risk_score if asset.risk_score is not None else ASSESS_DEFAULT_RISK
        ),
        compliance_score=calc_compliance_score(asset.compliance_status),
        liquidity_score=liquidity,
        yield_consistency=yield_consistency,
        collateralization_ratio=ratio,
        issues=tuple(issues),
        recommendations=tuple(recommendations),
    )
