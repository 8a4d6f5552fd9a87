from decimal import Decimal

from chaircare.pricing.domain.models import PricingTier
from chaircare.pricing.rule_types.base import AdjustmentKind, Direction
from chaircare.pricing.rule_types.tier_discount import evaluate_tier_discount


def test_tier_happy(gold_tier):
    out = evaluate_tier_discount(gold_tier, Decimal("1000.00"))

    assert len(out) == 1
    assert out[0].kind == AdjustmentKind.TIER_DISCOUNT
    assert out[0].direction == Direction.DECREASE
    assert out[0].amount == Decimal("50.00")
    assert out[0].source_id == "tier_gold"
    assert "Gold" in out[0].description


def test_tier_minimum_job_value_is_inclusive(gold_tier):
    assert evaluate_tier_discount(gold_tier, Decimal("499.99")) == []
    assert evaluate_tier_discount(gold_tier, Decimal("500.00"))[0].amount == Decimal("25.00")


def test_tier_no_tier_or_inactive():
    assert evaluate_tier_discount(None, Decimal("1000")) == []

    inactive = PricingTier(id="t", name="Old", discount_percentage="10", is_active=False)
    assert evaluate_tier_discount(inactive, Decimal("1000")) == []


def test_tier_zero_amount_is_skipped():
    zero = PricingTier(id="t0", name="Basic", discount_percentage="0")
    assert evaluate_tier_discount(zero, Decimal("1000")) == []

    tier = PricingTier(id="t3", name="Silver", discount_percentage="3")
    assert evaluate_tier_discount(tier, Decimal("0.00")) == []
