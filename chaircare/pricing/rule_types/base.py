from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Optional

D = Decimal
ZERO = D("0.00")
CENT = D("0.01")
HUNDRED = D("100")


def q(x: D) -> D:
    """Quantize a currency amount to cents (half-up)."""
    return D(x).quantize(CENT, rounding=ROUND_HALF_UP)


def pct_of(amount: D, pct: D) -> D:
    return q(amount * pct / HUNDRED)


def total(values: Iterable[D]) -> D:
    return q(sum(values, ZERO))


class AdjustmentKind(str, Enum):
    BULK_DISCOUNT = "bulk_discount"
    TIER_DISCOUNT = "tier_discount"
    SEASONAL = "seasonal"
    URGENCY_SURCHARGE = "urgency_surcharge"
    TRAVEL_SURCHARGE = "travel_surcharge"


class Direction(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


# Kinds die per definitie één kant op werken. Seasonal kan beide.
FIXED_DIRECTION = {
    AdjustmentKind.BULK_DISCOUNT: Direction.DECREASE,
    AdjustmentKind.TIER_DISCOUNT: Direction.DECREASE,
    AdjustmentKind.URGENCY_SURCHARGE: Direction.INCREASE,
    AdjustmentKind.TRAVEL_SURCHARGE: Direction.INCREASE,
}


@dataclass(frozen=True)
class Adjustment:
    """
    One contributing rule in a pricing calculation.

    - amount: always a non-negative magnitude (cents)
    - direction: whether the amount raises or lowers the total
    - percentage: informational only
    - source_id: id of the rule/window/tier that produced it (if any)
    """

    kind: AdjustmentKind
    description: str
    amount: D
    direction: Direction
    percentage: Optional[D] = None
    source_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Adjustment.amount is a magnitude and must be >= 0")
        fixed = FIXED_DIRECTION.get(self.kind)
        if fixed is not None and self.direction != fixed:
            raise ValueError(f"{self.kind.value} must have direction {fixed.value}")

    @property
    def signed_amount(self) -> D:
        return self.amount if self.direction == Direction.INCREASE else -self.amount

    @staticmethod
    def discount(kind: AdjustmentKind, description: str, amount: D, **kw) -> "Adjustment":
        return Adjustment(kind=kind, description=description, amount=q(amount), direction=Direction.DECREASE, **kw)

    @staticmethod
    def surcharge(kind: AdjustmentKind, description: str, amount: D, **kw) -> "Adjustment":
        return Adjustment(kind=kind, description=description, amount=q(amount), direction=Direction.INCREASE, **kw)

    @staticmethod
    def signed(kind: AdjustmentKind, description: str, signed_amount: D, **kw) -> "Adjustment":
        direction = Direction.INCREASE if signed_amount >= 0 else Direction.DECREASE
        return Adjustment(kind=kind, description=description, amount=q(abs(signed_amount)), direction=direction, **kw)
