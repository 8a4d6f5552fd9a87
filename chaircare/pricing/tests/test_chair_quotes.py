from datetime import timedelta
from decimal import Decimal

import pytest

from chaircare.pricing.domain.models import BulkDiscountPolicy, BulkDiscountRule
from chaircare.pricing.engine.context import PricingPolicyConfig
from chaircare.pricing.engine.pricing_engine import PricingEngine
from chaircare.pricing.engine.snapshot import RuleSnapshot
from chaircare.pricing.errors import InvalidPricingInput
from chaircare.pricing.quotes import build_chair_quote


@pytest.fixture
def clean_fixed_150():
    return BulkDiscountRule(
        id="clean_fixed", applies_to="cleaning", minimum_quantity=5, discount_type="fixed_amount", discount_value="150"
    )


def test_chair_quote_six_chairs(policy, clean_service, bulk_10pct_all, fixed_now):
    qt = build_chair_quote("client_acme", clean_service, 6, [bulk_10pct_all], policy, now=fixed_now)

    assert qt.price_per_chair == Decimal("150.00")
    assert qt.total_cost == Decimal("900.00")
    assert qt.discount == Decimal("90.00")
    assert qt.final_cost == Decimal("810.00")
    assert qt.created_at == fixed_now
    assert qt.valid_until == fixed_now + timedelta(days=7)


def test_chair_quote_without_qualifying_rule(policy, clean_service, bulk_10pct_all):
    qt = build_chair_quote("client_acme", clean_service, 2, [bulk_10pct_all], policy)

    assert qt.discount == Decimal("0.00")
    assert qt.final_cost == Decimal("300.00")
    assert qt.adjustments == ()


@pytest.mark.parametrize("bulk_policy", list(BulkDiscountPolicy))
def test_chair_quote_agrees_with_job_engine(make_context, clean_service, bulk_10pct_all, clean_fixed_150, bulk_policy):
    cfg = PricingPolicyConfig(bulk_discount_policy=bulk_policy)
    rules = [bulk_10pct_all, clean_fixed_150]

    qt = build_chair_quote("client_acme", clean_service, 6, rules, cfg)
    calc = PricingEngine(config=cfg).calculate(
        make_context(chair_count=6), [clean_service] * 6, [], RuleSnapshot(bulk_rules=tuple(rules))
    )

    assert qt.discount == calc.discount_total
    assert qt.final_cost == calc.final_total


def test_chair_quote_validity_from_config(clean_service, fixed_now):
    qt = build_chair_quote("c1", clean_service, 1, [], PricingPolicyConfig(quote_validity_days=14), now=fixed_now)
    assert qt.valid_until - qt.created_at == timedelta(days=14)


@pytest.mark.parametrize("chairs", [0, -1, True, "3"])
def test_chair_quote_rejects_bad_chair_count(policy, clean_service, chairs):
    with pytest.raises(InvalidPricingInput):
        build_chair_quote("client_acme", clean_service, chairs, [], policy)
