# chaircare/pricing/schemas/pricing_output_v1.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from chaircare.pricing.engine.context import PricingCalculation
from chaircare.pricing.profit import ProfitAnalysis
from chaircare.pricing.quotes import ChairQuote
from chaircare.pricing.recommendations import PricingRecommendation
from chaircare.pricing.rule_types.base import Adjustment


class AdjustmentV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: str
    description: str
    amount: Decimal
    direction: Literal["increase", "decrease"]
    signed_amount: Decimal
    percentage: Optional[Decimal] = None
    source_id: Optional[str] = None

    @classmethod
    def from_domain(cls, a: Adjustment) -> "AdjustmentV1":
        return cls(
            kind=a.kind.value,
            description=a.description,
            amount=a.amount,
            direction=a.direction.value,
            signed_amount=a.signed_amount,
            percentage=a.percentage,
            source_id=a.source_id,
        )


class PricingCalculationV1(BaseModel):
    """
    Output lock v1:
    - bedragen als Decimal (JSON: string met 2 decimalen)
    - adjustments in evaluatie-volgorde
    """

    model_config = ConfigDict(extra="forbid")

    version: Literal["v1"] = "v1"
    job_id: Optional[str] = None
    client_id: str
    base_total: Decimal
    adjustments: List[AdjustmentV1]
    discount_total: Decimal
    surcharge_total: Decimal
    seasonal_total: Decimal
    final_total: Decimal
    total_costs: Decimal
    profit_margin_percent: Decimal
    calculated_at: datetime
    calculated_by: str
    warnings: List[Dict[str, Any]]

    @classmethod
    def from_domain(cls, c: PricingCalculation) -> "PricingCalculationV1":
        return cls(
            job_id=c.job_id,
            client_id=c.client_id,
            base_total=c.base_total,
            adjustments=[AdjustmentV1.from_domain(a) for a in c.adjustments],
            discount_total=c.discount_total,
            surcharge_total=c.surcharge_total,
            seasonal_total=c.seasonal_total,
            final_total=c.final_total,
            total_costs=c.total_costs,
            profit_margin_percent=c.profit_margin_percent,
            calculated_at=c.calculated_at,
            calculated_by=c.calculated_by,
            warnings=list(c.warnings),
        )


class ProfitAnalysisV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    job_id: str
    total_revenue: Decimal
    labor_costs: Decimal
    parts_costs: Decimal
    service_costs: Decimal
    overhead_costs: Decimal
    total_costs: Decimal
    gross_profit: Decimal
    profit_margin_percent: Decimal
    calculated_at: datetime

    @classmethod
    def from_domain(cls, p: ProfitAnalysis) -> "ProfitAnalysisV1":
        return cls(**{name: getattr(p, name) for name in cls.model_fields})


class ChairQuoteV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    client_id: str
    service_id: str
    service_category: str
    chair_count: int
    price_per_chair: Decimal
    total_cost: Decimal
    discount: Decimal
    final_cost: Decimal
    adjustments: List[AdjustmentV1]
    valid_until: datetime
    created_at: datetime

    @classmethod
    def from_domain(cls, qt: ChairQuote) -> "ChairQuoteV1":
        return cls(
            client_id=qt.client_id,
            service_id=qt.service_id,
            service_category=qt.service_category.value,
            chair_count=qt.chair_count,
            price_per_chair=qt.price_per_chair,
            total_cost=qt.total_cost,
            discount=qt.discount,
            final_cost=qt.final_cost,
            adjustments=[AdjustmentV1.from_domain(a) for a in qt.adjustments],
            valid_until=qt.valid_until,
            created_at=qt.created_at,
        )


class PricingRecommendationV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    service_id: str
    current_price: Decimal
    recommended_price: Decimal
    current_margin_percent: Decimal
    target_margin_percent: Decimal
    confidence: Decimal
    market_position: Literal["below", "at", "above"]
    reasoning: str

    @classmethod
    def from_domain(cls, r: PricingRecommendation) -> "PricingRecommendationV1":
        return cls(
            service_id=r.service_id,
            current_price=r.current_price,
            recommended_price=r.recommended_price,
            current_margin_percent=r.current_margin_percent,
            target_margin_percent=r.target_margin_percent,
            confidence=r.confidence,
            market_position=r.market_position.value,
            reasoning=r.reasoning,
        )
