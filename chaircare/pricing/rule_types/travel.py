from __future__ import annotations

from decimal import ROUND_CEILING
from typing import TYPE_CHECKING, List, Optional

from .base import D, ZERO, Adjustment, AdjustmentKind, q

if TYPE_CHECKING:
    from ..engine.context import PricingPolicyConfig


def evaluate_travel_surcharge(distance_km: Optional[D], config: "PricingPolicyConfig") -> List[Adjustment]:
    """
    Travel outside the free radius, charged per started block.

    35 km with defaults (20 km free, 10 km blocks, 50 per block): 2 blocks -> 100.
    """
    if distance_km is None or distance_km <= config.free_travel_radius_km:
        return []

    extra_km = distance_km - config.free_travel_radius_km
    blocks = (extra_km / config.travel_block_km).to_integral_value(rounding=ROUND_CEILING)
    amount = q(blocks * config.travel_fee_per_block)
    if amount <= ZERO:
        return []

    return [
        Adjustment.surcharge(
            AdjustmentKind.TRAVEL_SURCHARGE,
            f"Travel surcharge: {extra_km} km beyond {config.free_travel_radius_km} km radius",
            amount,
        )
    ]
