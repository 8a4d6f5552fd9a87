from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Tuple

from ..errors import InvalidPricingInput

D = Decimal


class ServiceCategory(str, Enum):
    CLEANING = "cleaning"
    REPAIR = "repair"
    MAINTENANCE = "maintenance"
    ASSESSMENT = "assessment"
    INSPECTION = "inspection"


class BulkScope(str, Enum):
    ALL = "all"
    CLEANING = "cleaning"
    REPAIR = "repair"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


class SeasonalScope(str, Enum):
    ALL_SERVICES = "all_services"
    SPECIFIC_SERVICES = "specific_services"


class SeasonalAdjustmentType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"

    @classmethod
    def _missing_(cls, value):
        # admin UI schrijft "fixed_amount"
        if value == "fixed_amount":
            return cls.FIXED
        return None


class Urgency(str, Enum):
    NORMAL = "normal"
    URGENT = "urgent"
    EMERGENCY = "emergency"

    @classmethod
    def _missing_(cls, value):
        # oudere job-forms sturen "standard"
        if value == "standard":
            return cls.NORMAL
        return None


class BulkDiscountPolicy(str, Enum):
    """
    How qualifying bulk rules combine.

    CUMULATIVE: every qualifying rule applies (default, used by every pricing path).
    BEST_ONLY: only the single largest qualifying discount applies.
    """

    CUMULATIVE = "cumulative"
    BEST_ONLY = "best_only"


DEFAULT_BULK_DISCOUNT_POLICY = BulkDiscountPolicy.CUMULATIVE


def to_decimal(value, *, field_name: str) -> D:
    if isinstance(value, bool):
        raise InvalidPricingInput(field_name, "expected a number, got bool")
    if isinstance(value, D):
        d = value
    else:
        try:
            d = D(str(value))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidPricingInput(field_name, f"invalid number: {value!r}")
    # NaN / Infinity
    if not d.is_finite():
        raise InvalidPricingInput(field_name, "must be a finite number", {"value": str(d)})
    return d


def _non_negative(value, *, field_name: str) -> D:
    d = to_decimal(value, field_name=field_name)
    if d < 0:
        raise InvalidPricingInput(field_name, "must be >= 0", {"value": str(d)})
    return d


def _percentage(value, *, field_name: str) -> D:
    d = to_decimal(value, field_name=field_name)
    if d < 0 or d > 100:
        raise InvalidPricingInput(field_name, "must be between 0 and 100", {"value": str(d)})
    return d


def _enum(enum_cls, value, *, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [e.value for e in enum_cls]
        raise InvalidPricingInput(field_name, f"must be one of {allowed}, got {value!r}")


# -----------------------------
# Price catalogue
# -----------------------------


@dataclass(frozen=True)
class ServicePriceEntry:
    id: str
    name: str
    category: ServiceCategory
    base_price: D
    cost_price: D
    is_active: bool = True
    estimated_duration_minutes: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", _enum(ServiceCategory, self.category, field_name="category"))
        object.__setattr__(self, "base_price", _non_negative(self.base_price, field_name="base_price"))
        object.__setattr__(self, "cost_price", _non_negative(self.cost_price, field_name="cost_price"))
        if self.estimated_duration_minutes < 0:
            raise InvalidPricingInput("estimated_duration_minutes", "must be >= 0")


@dataclass(frozen=True)
class PartPriceEntry:
    id: str
    name: str
    sell_price: D
    cost_price: D
    is_active: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "sell_price", _non_negative(self.sell_price, field_name="sell_price"))
        object.__setattr__(self, "cost_price", _non_negative(self.cost_price, field_name="cost_price"))


# -----------------------------
# Rule tables
# -----------------------------


@dataclass(frozen=True)
class BulkDiscountRule:
    id: str
    applies_to: BulkScope
    minimum_quantity: int
    discount_type: DiscountType
    discount_percentage: D = D("0")
    discount_value: D = D("0")
    is_active: bool = True
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "applies_to", _enum(BulkScope, self.applies_to, field_name="applies_to"))
        object.__setattr__(
            self, "discount_type", _enum(DiscountType, self.discount_type, field_name="discount_type")
        )
        if not isinstance(self.minimum_quantity, int) or isinstance(self.minimum_quantity, bool):
            raise InvalidPricingInput("minimum_quantity", "must be an integer")
        if self.minimum_quantity < 1:
            raise InvalidPricingInput("minimum_quantity", "must be >= 1")
        object.__setattr__(
            self,
            "discount_percentage",
            _percentage(self.discount_percentage, field_name="discount_percentage"),
        )
        object.__setattr__(
            self, "discount_value", _non_negative(self.discount_value, field_name="discount_value")
        )


@dataclass(frozen=True)
class PricingTier:
    id: str
    name: str
    discount_percentage: D
    minimum_job_value: Optional[D] = None
    is_active: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "discount_percentage",
            _percentage(self.discount_percentage, field_name="discount_percentage"),
        )
        if self.minimum_job_value is not None:
            object.__setattr__(
                self,
                "minimum_job_value",
                _non_negative(self.minimum_job_value, field_name="minimum_job_value"),
            )


@dataclass(frozen=True)
class ClientTierAssignment:
    client_id: str
    tier_id: str


@dataclass(frozen=True)
class SeasonalPricingWindow:
    id: str
    name: str
    start_date: date
    end_date: date
    adjustment_type: SeasonalAdjustmentType
    adjustment_value: D
    applies_to: SeasonalScope = SeasonalScope.ALL_SERVICES
    service_ids: Tuple[str, ...] = field(default_factory=tuple)
    is_active: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "applies_to", _enum(SeasonalScope, self.applies_to, field_name="applies_to")
        )
        object.__setattr__(
            self,
            "adjustment_type",
            _enum(SeasonalAdjustmentType, self.adjustment_type, field_name="adjustment_type"),
        )
        object.__setattr__(
            self, "adjustment_value", to_decimal(self.adjustment_value, field_name="adjustment_value")
        )
        object.__setattr__(self, "service_ids", tuple(self.service_ids or ()))
        if self.end_date < self.start_date:
            raise InvalidPricingInput(
                "end_date",
                "must not be before start_date",
                {"start_date": self.start_date.isoformat(), "end_date": self.end_date.isoformat()},
            )

    def is_open_on(self, day: date) -> bool:
        # inclusief beide grenzen
        return self.is_active and self.start_date <= day <= self.end_date
