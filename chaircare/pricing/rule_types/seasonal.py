from __future__ import annotations

from datetime import date
from typing import List, Sequence

from ..domain.models import (
    SeasonalAdjustmentType,
    SeasonalPricingWindow,
    SeasonalScope,
    ServicePriceEntry,
)
from .base import HUNDRED, ZERO, Adjustment, AdjustmentKind, q, total


def evaluate_seasonal_adjustments(
    scheduled_date: date,
    services: Sequence[ServicePriceEntry],
    windows: Sequence[SeasonalPricingWindow],
) -> List[Adjustment]:
    """
    Seasonal windows (promotions or peak surcharges).

    Every window open on the scheduled date contributes on its own, so
    overlapping windows add up. Sign of adjustment_value decides direction.
    """
    out: List[Adjustment] = []

    for w in windows:
        if not w.is_open_on(scheduled_date):
            continue

        if w.applies_to == SeasonalScope.SPECIFIC_SERVICES:
            wanted = set(w.service_ids)
            subtotal = total(s.base_price for s in services if s.id in wanted)
        else:
            subtotal = total(s.base_price for s in services)

        if w.adjustment_type == SeasonalAdjustmentType.PERCENTAGE:
            signed = q(subtotal * w.adjustment_value / HUNDRED)
            pct = w.adjustment_value
        else:
            signed = q(w.adjustment_value)
            pct = None

        if signed == ZERO:
            continue

        out.append(
            Adjustment.signed(
                AdjustmentKind.SEASONAL,
                f"Seasonal: {w.name}",
                signed,
                percentage=pct,
                source_id=w.id,
            )
        )

    return out
