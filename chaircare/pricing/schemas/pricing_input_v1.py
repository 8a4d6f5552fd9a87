# chaircare/pricing/schemas/pricing_input_v1.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, constr

from chaircare.pricing.domain.models import Urgency

Id = constr(strip_whitespace=True, min_length=1)


class PricingContextV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    client_id: Id  # type: ignore
    chair_count: int = Field(ge=1, strict=True)
    scheduled_date: date
    urgency: Urgency = Urgency.NORMAL
    distance_from_base_km: Optional[Decimal] = Field(default=None, ge=0)


class PricingCalculateInputV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    context: PricingContextV1
    service_ids: List[Id] = Field(min_length=1)  # type: ignore
    part_ids: List[Id] = Field(default_factory=list)  # type: ignore


class ProfitInputV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    job_id: Id  # type: ignore
    total_revenue: Decimal = Field(ge=0)
    service_ids: List[Id] = Field(default_factory=list)  # type: ignore
    part_ids: List[Id] = Field(default_factory=list)  # type: ignore
    labor_hours: Decimal = Field(ge=0)
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0)


class ChairQuoteInputV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    client_id: Id  # type: ignore
    service_id: Id  # type: ignore
    chair_count: int = Field(ge=1, strict=True)


class RecommendationInputV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    service_id: Id  # type: ignore
