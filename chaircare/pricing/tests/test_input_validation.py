from datetime import date, datetime
from decimal import Decimal

import pytest

from chaircare.pricing.domain.models import (
    BulkDiscountRule,
    PricingTier,
    SeasonalPricingWindow,
    ServicePriceEntry,
    Urgency,
)
from chaircare.pricing.engine.context import PricingContext, PricingPolicyConfig
from chaircare.pricing.errors import InvalidPricingInput
from chaircare.pricing.profit import analyze_profit
from chaircare.pricing.rule_types.base import Adjustment, AdjustmentKind, Direction


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"client_id": ""}, "client_id"),
        ({"client_id": "   "}, "client_id"),
        ({"chair_count": 0}, "chair_count"),
        ({"chair_count": True}, "chair_count"),
        ({"chair_count": "4"}, "chair_count"),
        ({"urgency": "asap"}, "urgency"),
        ({"scheduled_date": "2026-03-10"}, "scheduled_date"),
        ({"distance_from_base_km": "-1"}, "distance_from_base_km"),
        ({"distance_from_base_km": "far"}, "distance_from_base_km"),
    ],
)
def test_context_rejects_malformed_input(make_context, overrides, field):
    with pytest.raises(InvalidPricingInput) as exc:
        make_context(**overrides)
    assert exc.value.field == field


def test_context_normalises_input(make_context):
    ctx = make_context(
        urgency="standard",
        scheduled_date=datetime(2026, 6, 1, 14, 30),
        distance_from_base_km="12.5",
    )

    assert ctx.urgency == Urgency.NORMAL
    assert ctx.scheduled_date == date(2026, 6, 1)
    assert ctx.distance_from_base_km == Decimal("12.5")


def test_context_is_immutable(make_context):
    ctx = make_context()
    with pytest.raises(AttributeError):
        ctx.chair_count = 99


def test_invalid_pricing_input_is_value_error():
    with pytest.raises(ValueError):
        PricingContext(client_id="c", chair_count=0, scheduled_date=date(2026, 1, 1))


def test_catalogue_and_rule_rows_validate():
    with pytest.raises(InvalidPricingInput):
        ServicePriceEntry(id="s", name="S", category="painting", base_price="1", cost_price="1")
    with pytest.raises(InvalidPricingInput):
        ServicePriceEntry(id="s", name="S", category="cleaning", base_price="-1", cost_price="1")
    with pytest.raises(InvalidPricingInput):
        BulkDiscountRule(id="b", applies_to="all", minimum_quantity=0, discount_type="percentage")
    with pytest.raises(InvalidPricingInput):
        PricingTier(id="t", name="T", discount_percentage="101")
    with pytest.raises(InvalidPricingInput):
        SeasonalPricingWindow(
            id="w",
            name="W",
            start_date=date(2026, 7, 1),
            end_date=date(2026, 6, 1),
            adjustment_type="percentage",
            adjustment_value="5",
        )


def test_policy_config_validates():
    with pytest.raises(InvalidPricingInput):
        PricingPolicyConfig(travel_block_km=Decimal("0"))
    with pytest.raises(InvalidPricingInput):
        PricingPolicyConfig(target_margin_percent=Decimal("100"))


def test_policy_config_from_settings_defaults():
    cfg = PricingPolicyConfig.from_settings()

    assert cfg.hourly_labor_rate == Decimal("350")
    assert cfg.overhead_rate == Decimal("0.15")
    assert cfg.quote_validity_days == 7
    assert cfg.bulk_discount_policy.value == "cumulative"


def test_adjustment_amount_is_a_magnitude():
    with pytest.raises(ValueError):
        Adjustment(AdjustmentKind.SEASONAL, "x", Decimal("-1"), Direction.DECREASE)
    with pytest.raises(ValueError):
        Adjustment(AdjustmentKind.BULK_DISCOUNT, "x", Decimal("1"), Direction.INCREASE)

    adj = Adjustment.signed(AdjustmentKind.SEASONAL, "x", Decimal("-12.345"))
    assert adj.direction == Direction.DECREASE
    assert adj.amount == Decimal("12.35")
    assert adj.signed_amount == Decimal("-12.35")


@pytest.mark.parametrize("value", ["NaN", "sNaN", "Infinity", "-Infinity", Decimal("NaN"), Decimal("Infinity"), float("inf")])
def test_non_finite_numbers_are_rejected(make_context, value):
    with pytest.raises(InvalidPricingInput) as exc:
        make_context(distance_from_base_km=value)
    assert exc.value.field == "distance_from_base_km"

    with pytest.raises(InvalidPricingInput) as exc:
        ServicePriceEntry(id="s", name="S", category="cleaning", base_price=value, cost_price="1")
    assert exc.value.field == "base_price"

    with pytest.raises(InvalidPricingInput) as exc:
        BulkDiscountRule(
            id="b", applies_to="all", minimum_quantity=5, discount_type="percentage", discount_percentage=value
        )
    assert exc.value.field == "discount_percentage"


def test_profit_analysis_rejects_non_finite_revenue():
    with pytest.raises(InvalidPricingInput) as exc:
        analyze_profit("job_1", "Infinity", [], [], labor_hours=1, config=PricingPolicyConfig())
    assert exc.value.field == "total_revenue"


@pytest.mark.parametrize(
    "name",
    [
        "hourly_labor_rate",
        "overhead_rate",
        "free_travel_radius_km",
        "travel_fee_per_block",
        "urgent_surcharge_percent",
        "emergency_surcharge_percent",
    ],
)
def test_policy_config_rejects_negative_rates(name):
    with pytest.raises(InvalidPricingInput) as exc:
        PricingPolicyConfig(**{name: Decimal("-1")})
    assert exc.value.field == name


def test_policy_config_rejects_non_finite_and_bad_timeouts():
    with pytest.raises(InvalidPricingInput):
        PricingPolicyConfig(travel_block_km=Decimal("NaN"))
    with pytest.raises(InvalidPricingInput):
        PricingPolicyConfig(rule_fetch_timeout_seconds=0)
    with pytest.raises(InvalidPricingInput):
        PricingPolicyConfig(quote_validity_days=-1)


def test_policy_config_coerces_plain_numbers():
    cfg = PricingPolicyConfig(overhead_rate="0.2", travel_fee_per_block=40)

    assert cfg.overhead_rate == Decimal("0.2")
    assert cfg.travel_fee_per_block == Decimal("40")
