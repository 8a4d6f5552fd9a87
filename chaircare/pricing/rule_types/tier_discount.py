from __future__ import annotations

from typing import List, Optional

from ..domain.models import PricingTier
from .base import D, ZERO, Adjustment, AdjustmentKind, pct_of


def evaluate_tier_discount(tier: Optional[PricingTier], base_total: D) -> List[Adjustment]:
    if tier is None or not tier.is_active:
        return []
    if tier.minimum_job_value is not None and base_total < tier.minimum_job_value:
        return []

    amount = pct_of(base_total, tier.discount_percentage)
    if amount <= ZERO:
        return []

    return [
        Adjustment.discount(
            AdjustmentKind.TIER_DISCOUNT,
            f"{tier.name} tier discount ({tier.discount_percentage}%)",
            amount,
            percentage=tier.discount_percentage,
            source_id=tier.id,
        )
    ]
