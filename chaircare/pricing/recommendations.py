from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .domain.models import ServicePriceEntry
from .engine.context import PricingPolicyConfig
from .engine.pricing_engine import margin_percent
from .rule_types.base import HUNDRED, ZERO, D, q

CONFIDENCE_WITH_COST = D("0.7")
CONFIDENCE_WITHOUT_COST = D("0.3")


class MarketPosition(str, Enum):
    BELOW = "below"
    AT = "at"
    ABOVE = "above"


@dataclass(frozen=True)
class PricingRecommendation:
    service_id: str
    current_price: D
    recommended_price: D
    current_margin_percent: D
    target_margin_percent: D
    confidence: D
    market_position: MarketPosition
    reasoning: str


def recommend_price(service: ServicePriceEntry, config: Optional[PricingPolicyConfig] = None) -> PricingRecommendation:
    cfg = config or PricingPolicyConfig.from_settings()
    target = cfg.target_margin_percent
    tolerance = cfg.margin_tolerance_percent

    price = q(service.base_price)
    cost = q(service.cost_price)
    current_margin = margin_percent(price, cost)

    if current_margin < target - tolerance:
        position = MarketPosition.BELOW
        recommended = q(cost / (1 - target / HUNDRED))
        reasoning = (
            f"Margin {current_margin}% is below the {target}% target; "
            f"{recommended} reaches the target at cost {cost}."
        )
    elif current_margin > target + tolerance:
        position = MarketPosition.ABOVE
        recommended = q(cost / (1 - target / HUNDRED))
        reasoning = (
            f"Margin {current_margin}% is above the {target}% target; "
            f"{recommended} would still reach the target and price more competitively."
        )
    else:
        position = MarketPosition.AT
        recommended = price
        reasoning = f"Margin {current_margin}% is within {tolerance} points of the {target}% target."

    return PricingRecommendation(
        service_id=service.id,
        current_price=price,
        recommended_price=recommended,
        current_margin_percent=current_margin,
        target_margin_percent=target,
        confidence=CONFIDENCE_WITH_COST if cost > ZERO else CONFIDENCE_WITHOUT_COST,
        market_position=position,
        reasoning=reasoning,
    )
