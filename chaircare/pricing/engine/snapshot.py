from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, TypeVar

from chaircare.core.logging_config import logger
from chaircare.observability.metrics import record_rule_fetch_failure

from ..domain.models import BulkDiscountRule, PricingTier, SeasonalPricingWindow
from ..repository.base import RuleRepository

T = TypeVar("T")

RULE_SET_BULK = "bulk_rules"
RULE_SET_TIER = "client_tier"
RULE_SET_SEASONAL = "seasonal_pricing"


@dataclass(frozen=True)
class RuleSnapshot:
    """Point-in-time view of the rule tables for one calculation."""

    bulk_rules: Tuple[BulkDiscountRule, ...] = ()
    client_tier: Optional[PricingTier] = None
    seasonal_windows: Tuple[SeasonalPricingWindow, ...] = ()
    warnings: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)


def rule_fetch_warning(rule_set: str, reason: str, error: str = "") -> Dict[str, Any]:
    msg = f"Rule table '{rule_set}' unavailable ({reason}); calculated without it."
    if error:
        msg = f"{msg} {error}"
    return {
        "code": "RULE_FETCH_FAILED",
        "message": msg,
        "meta": {"ruleSet": rule_set, "reason": reason},
    }


async def _guarded(
    rule_set: str,
    fetch: Callable[[], Awaitable[T]],
    empty: T,
    timeout: Optional[float],
    warnings: List[Dict[str, Any]],
) -> T:
    try:
        return await asyncio.wait_for(fetch(), timeout=timeout)
    except asyncio.TimeoutError:
        reason, error = "timeout", f"no answer within {timeout}s"
    except Exception as e:
        reason, error = "error", f"{type(e).__name__}: {e}"

    logger.warning("rule_fetch_failed", rule_set=rule_set, reason=reason, error=error)
    record_rule_fetch_failure(rule_set, reason)
    warnings.append(rule_fetch_warning(rule_set, reason, error))
    return empty


async def load_rule_snapshot(
    repository: RuleRepository,
    client_id: str,
    *,
    timeout: Optional[float] = 2.0,
) -> RuleSnapshot:
    """
    Fetch the three rule tables concurrently.

    A table that raises or times out is replaced by its empty value and
    reported as a RULE_FETCH_FAILED warning; this function never raises
    for a rule-table failure.
    """
    # warnings in vaste volgorde: bulk, tier, seasonal
    bulk_w: List[Dict[str, Any]] = []
    tier_w: List[Dict[str, Any]] = []
    seasonal_w: List[Dict[str, Any]] = []

    async def fetch_tier() -> Optional[PricingTier]:
        assignment = await repository.get_tier_assignment(client_id)
        if assignment is None:
            return None
        return await repository.get_tier(assignment.tier_id)

    bulk, tier, seasonal = await asyncio.gather(
        _guarded(RULE_SET_BULK, repository.get_active_bulk_rules, (), timeout, bulk_w),
        _guarded(RULE_SET_TIER, fetch_tier, None, timeout, tier_w),
        _guarded(RULE_SET_SEASONAL, repository.get_active_seasonal_windows, (), timeout, seasonal_w),
    )

    return RuleSnapshot(
        bulk_rules=tuple(bulk),
        client_tier=tier,
        seasonal_windows=tuple(seasonal),
        warnings=tuple(bulk_w + tier_w + seasonal_w),
    )
