from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from ..domain.models import (  # noqa: F401 (re-exported)
    DEFAULT_BULK_DISCOUNT_POLICY,
    BulkDiscountPolicy,
    Urgency,
    to_decimal,
)
from ..errors import InvalidPricingInput
from ..rule_types.base import Adjustment, AdjustmentKind, Direction, total

D = Decimal

# -----------------------------
# Policy config
# -----------------------------

_NON_NEGATIVE_POLICY_FIELDS = (
    "hourly_labor_rate",
    "overhead_rate",
    "free_travel_radius_km",
    "travel_fee_per_block",
    "urgent_surcharge_percent",
    "emergency_surcharge_percent",
    "margin_tolerance_percent",
)


@dataclass(frozen=True)
class PricingPolicyConfig:
    hourly_labor_rate: D = D("350")
    overhead_rate: D = D("0.15")
    free_travel_radius_km: D = D("20")
    travel_block_km: D = D("10")
    travel_fee_per_block: D = D("50")
    urgent_surcharge_percent: D = D("25")
    emergency_surcharge_percent: D = D("50")
    bulk_discount_policy: BulkDiscountPolicy = DEFAULT_BULK_DISCOUNT_POLICY
    quote_validity_days: int = 7
    target_margin_percent: D = D("35")
    margin_tolerance_percent: D = D("2")
    rule_fetch_timeout_seconds: float = 2.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "bulk_discount_policy", BulkDiscountPolicy(self.bulk_discount_policy))
        for name in _NON_NEGATIVE_POLICY_FIELDS:
            value = to_decimal(getattr(self, name), field_name=name)
            if value < 0:
                raise InvalidPricingInput(name, "must be >= 0", {"value": str(value)})
            object.__setattr__(self, name, value)

        object.__setattr__(self, "travel_block_km", to_decimal(self.travel_block_km, field_name="travel_block_km"))
        object.__setattr__(
            self, "target_margin_percent", to_decimal(self.target_margin_percent, field_name="target_margin_percent")
        )
        if self.quote_validity_days < 0:
            raise InvalidPricingInput("quote_validity_days", "must be >= 0")
        if self.rule_fetch_timeout_seconds <= 0:
            raise InvalidPricingInput("rule_fetch_timeout_seconds", "must be > 0")
        if self.travel_block_km <= 0:
            raise InvalidPricingInput("travel_block_km", "must be > 0")
        if not (D("0") <= self.target_margin_percent < D("100")):
            raise InvalidPricingInput("target_margin_percent", "must be in [0, 100)")

    @classmethod
    def from_settings(cls, s=None) -> "PricingPolicyConfig":
        if s is None:
            from chaircare.core.settings import get_settings

            s = get_settings()
        return cls(
            hourly_labor_rate=D(str(s.hourly_labor_rate)),
            overhead_rate=D(str(s.overhead_rate)),
            free_travel_radius_km=D(str(s.free_travel_radius_km)),
            travel_block_km=D(str(s.travel_block_km)),
            travel_fee_per_block=D(str(s.travel_fee_per_block)),
            urgent_surcharge_percent=D(str(s.urgent_surcharge_percent)),
            emergency_surcharge_percent=D(str(s.emergency_surcharge_percent)),
            bulk_discount_policy=BulkDiscountPolicy(s.bulk_discount_policy),
            quote_validity_days=int(s.quote_validity_days),
            target_margin_percent=D(str(s.target_margin_percent)),
            margin_tolerance_percent=D(str(s.margin_tolerance_percent)),
            rule_fetch_timeout_seconds=float(s.rule_fetch_timeout_seconds),
        )


# -----------------------------
# Input
# -----------------------------


@dataclass(frozen=True)
class PricingContext:
    """
    Per-request pricing input, built by the job-creation flow.
    Validated on construction; malformed input never reaches an evaluator.
    """

    client_id: str
    chair_count: int
    scheduled_date: date
    urgency: Urgency = Urgency.NORMAL
    distance_from_base_km: Optional[D] = None

    def __post_init__(self) -> None:
        if not isinstance(self.client_id, str) or not self.client_id.strip():
            raise InvalidPricingInput("client_id", "must be a non-empty string")

        if isinstance(self.chair_count, bool) or not isinstance(self.chair_count, int):
            raise InvalidPricingInput("chair_count", "must be an integer")
        if self.chair_count < 1:
            raise InvalidPricingInput("chair_count", "must be >= 1", {"value": self.chair_count})

        try:
            object.__setattr__(self, "urgency", Urgency(self.urgency))
        except ValueError:
            raise InvalidPricingInput("urgency", f"unknown urgency: {self.urgency!r}")

        sd = self.scheduled_date
        if isinstance(sd, datetime):
            object.__setattr__(self, "scheduled_date", sd.date())
        elif not isinstance(sd, date):
            raise InvalidPricingInput("scheduled_date", "must be a date")

        if self.distance_from_base_km is not None:
            km = to_decimal(self.distance_from_base_km, field_name="distance_from_base_km")
            if km < 0:
                raise InvalidPricingInput("distance_from_base_km", "must be >= 0")
            object.__setattr__(self, "distance_from_base_km", km)


# -----------------------------
# Output
# -----------------------------


@dataclass(frozen=True)
class PricingCalculation:
    client_id: str
    base_total: D
    adjustments: Tuple[Adjustment, ...]
    final_total: D
    total_costs: D
    profit_margin_percent: D
    calculated_at: datetime
    job_id: Optional[str] = None
    calculated_by: str = "system"
    warnings: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)

    def _sum(self, *kinds: AdjustmentKind, direction: Optional[Direction] = None) -> D:
        return total(
            a.amount if direction else a.signed_amount
            for a in self.adjustments
            if a.kind in kinds and (direction is None or a.direction == direction)
        )

    @property
    def discount_total(self) -> D:
        return self._sum(AdjustmentKind.BULK_DISCOUNT, AdjustmentKind.TIER_DISCOUNT, direction=Direction.DECREASE)

    @property
    def surcharge_total(self) -> D:
        return self._sum(
            AdjustmentKind.URGENCY_SURCHARGE, AdjustmentKind.TRAVEL_SURCHARGE, direction=Direction.INCREASE
        )

    @property
    def seasonal_total(self) -> D:
        """Signed: negative when seasonal windows lower the price."""
        return self._sum(AdjustmentKind.SEASONAL)

    def with_job_id(self, job_id: str) -> "PricingCalculation":
        return replace(self, job_id=str(job_id))
