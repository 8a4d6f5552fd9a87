from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from chaircare.pricing.domain.models import (
    BulkDiscountRule,
    ClientTierAssignment,
    PartPriceEntry,
    PricingTier,
    ServicePriceEntry,
)
from chaircare.pricing.engine.context import PricingContext, PricingPolicyConfig
from chaircare.pricing.engine.pricing_engine import PricingEngine
from chaircare.pricing.repository.memory import InMemoryRuleRepository


@pytest.fixture
def anyio_backend():
    # alleen asyncio, geen trio
    return "asyncio"


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 10, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def policy():
    return PricingPolicyConfig()


@pytest.fixture
def clean_service():
    return ServicePriceEntry(
        id="svc_clean", name="Basic chair cleaning", category="cleaning", base_price="150", cost_price="60"
    )


@pytest.fixture
def repair_service():
    return ServicePriceEntry(
        id="svc_repair", name="Gas lift replacement", category="repair", base_price="400", cost_price="180"
    )


@pytest.fixture
def gas_lift_part():
    return PartPriceEntry(id="part_gas_lift", name="Class 4 gas lift", sell_price="220", cost_price="120")


@pytest.fixture
def bulk_10pct_all():
    return BulkDiscountRule(
        id="bulk_all_5",
        description="5+ chairs",
        applies_to="all",
        minimum_quantity=5,
        discount_type="percentage",
        discount_percentage="10",
    )


@pytest.fixture
def gold_tier():
    return PricingTier(id="tier_gold", name="Gold", discount_percentage="5", minimum_job_value="500")


@pytest.fixture
def make_context():
    def _make(**overrides) -> PricingContext:
        kw = dict(client_id="client_acme", chair_count=1, scheduled_date=date(2026, 3, 10))
        kw.update(overrides)
        return PricingContext(**kw)

    return _make


@pytest.fixture
def repo(clean_service, repair_service, gas_lift_part, bulk_10pct_all, gold_tier):
    return InMemoryRuleRepository(
        bulk_rules=[bulk_10pct_all],
        tiers=[gold_tier],
        assignments=[ClientTierAssignment(client_id="client_acme", tier_id="tier_gold")],
        services=[clean_service, repair_service],
        parts=[gas_lift_part],
    )


@pytest.fixture
def engine(repo, policy):
    return PricingEngine(repo, policy)
