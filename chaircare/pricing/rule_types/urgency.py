from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..domain.models import Urgency
from .base import D, ZERO, Adjustment, AdjustmentKind, pct_of

if TYPE_CHECKING:
    from ..engine.context import PricingPolicyConfig


def evaluate_urgency_surcharge(urgency: Urgency, base_total: D, config: "PricingPolicyConfig") -> List[Adjustment]:
    urgency = Urgency(urgency)
    if urgency == Urgency.URGENT:
        pct = config.urgent_surcharge_percent
    elif urgency == Urgency.EMERGENCY:
        pct = config.emergency_surcharge_percent
    else:
        return []

    amount = pct_of(base_total, pct)
    if amount <= ZERO:
        return []

    return [
        Adjustment.surcharge(
            AdjustmentKind.URGENCY_SURCHARGE,
            f"{urgency.value.capitalize()} service surcharge ({pct}%)",
            amount,
            percentage=pct,
        )
    ]
