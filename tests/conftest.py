import pytest
from fastapi.testclient import TestClient

from chaircare.main import app
from chaircare.pricing.api.pricing import get_policy_config, get_rule_repository
from chaircare.pricing.domain.models import (
    BulkDiscountRule,
    ClientTierAssignment,
    PartPriceEntry,
    PricingTier,
    ServicePriceEntry,
)
from chaircare.pricing.engine.context import PricingPolicyConfig
from chaircare.pricing.repository.memory import InMemoryRuleRepository


@pytest.fixture
def anyio_backend():
    # Dwing anyio om alleen asyncio te gebruiken (geen Trio nodig)
    return "asyncio"


@pytest.fixture
def rule_repo():
    return InMemoryRuleRepository(
        bulk_rules=[
            BulkDiscountRule(
                id="bulk_all_5",
                applies_to="all",
                minimum_quantity=5,
                discount_type="percentage",
                discount_percentage="10",
            )
        ],
        tiers=[PricingTier(id="tier_gold", name="Gold", discount_percentage="5", minimum_job_value="500")],
        assignments=[ClientTierAssignment(client_id="client_gold", tier_id="tier_gold")],
        services=[
            ServicePriceEntry(
                id="svc_clean", name="Basic chair cleaning", category="cleaning", base_price="150", cost_price="60"
            ),
            ServicePriceEntry(
                id="svc_repair", name="Gas lift replacement", category="repair", base_price="100", cost_price="80"
            ),
        ],
        parts=[PartPriceEntry(id="part_gas_lift", name="Class 4 gas lift", sell_price="220", cost_price="120")],
    )


@pytest.fixture
def client(rule_repo):
    app.dependency_overrides[get_rule_repository] = lambda: rule_repo
    app.dependency_overrides[get_policy_config] = lambda: PricingPolicyConfig()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
