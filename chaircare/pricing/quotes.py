from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence, Tuple

from .domain.models import BulkDiscountRule, ServiceCategory, ServicePriceEntry
from .engine.context import PricingPolicyConfig
from .errors import InvalidPricingInput
from .rule_types.base import ZERO, Adjustment, D, q, total
from .rule_types.bulk_discount import evaluate_bulk_discounts


@dataclass(frozen=True)
class ChairQuote:
    client_id: str
    service_id: str
    service_category: ServiceCategory
    chair_count: int
    price_per_chair: D
    total_cost: D
    discount: D
    final_cost: D
    adjustments: Tuple[Adjustment, ...]
    valid_until: datetime
    created_at: datetime


def build_chair_quote(
    client_id: str,
    service: ServicePriceEntry,
    chair_count: int,
    bulk_rules: Sequence[BulkDiscountRule],
    config: Optional[PricingPolicyConfig] = None,
    now: Optional[datetime] = None,
) -> ChairQuote:
    """
    Quick per-chair quote for the client portal.

    Uses the same bulk evaluator and policy as the job engine: the quoted
    service counts once per chair.
    """
    cfg = config or PricingPolicyConfig.from_settings()

    if not isinstance(client_id, str) or not client_id.strip():
        raise InvalidPricingInput("client_id", "must be a non-empty string")
    if isinstance(chair_count, bool) or not isinstance(chair_count, int) or chair_count < 1:
        raise InvalidPricingInput("chair_count", "must be an integer >= 1", {"value": chair_count})

    total_cost = q(service.base_price * chair_count)
    adjustments = evaluate_bulk_discounts(
        chair_count, [service] * chair_count, bulk_rules, cfg.bulk_discount_policy
    )
    discount = total(a.amount for a in adjustments)

    created_at = now or datetime.now(timezone.utc)
    return ChairQuote(
        client_id=client_id,
        service_id=service.id,
        service_category=service.category,
        chair_count=chair_count,
        price_per_chair=q(service.base_price),
        total_cost=total_cost,
        discount=discount,
        final_cost=max(ZERO, q(total_cost - discount)),
        adjustments=tuple(adjustments),
        valid_until=created_at + timedelta(days=cfg.quote_validity_days),
        created_at=created_at,
    )
