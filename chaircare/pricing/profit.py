from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence

from .domain.models import PartPriceEntry, ServicePriceEntry, to_decimal
from .engine.context import PricingPolicyConfig
from .engine.pricing_engine import margin_percent
from .errors import InvalidPricingInput
from .rule_types.base import D, q, total


@dataclass(frozen=True)
class ProfitAnalysis:
    job_id: str
    total_revenue: D
    labor_costs: D
    parts_costs: D
    service_costs: D
    overhead_costs: D
    total_costs: D
    gross_profit: D
    profit_margin_percent: D
    calculated_at: datetime


def _non_negative(value, field_name: str) -> D:
    d = to_decimal(value, field_name=field_name)
    if d < 0:
        raise InvalidPricingInput(field_name, "must be >= 0", {"value": str(d)})
    return d


def analyze_profit(
    job_id: str,
    total_revenue,
    services: Sequence[ServicePriceEntry],
    parts: Sequence[PartPriceEntry],
    labor_hours,
    hourly_rate=None,
    config: Optional[PricingPolicyConfig] = None,
    now: Optional[datetime] = None,
) -> ProfitAnalysis:
    """
    Post-job margin from actual costs.

    Overhead is a share of revenue (config.overhead_rate), labour is hours
    times the hourly rate (config.hourly_labor_rate unless given).
    """
    cfg = config or PricingPolicyConfig.from_settings()

    revenue = q(_non_negative(total_revenue, "total_revenue"))
    hours = _non_negative(labor_hours, "labor_hours")
    rate = cfg.hourly_labor_rate if hourly_rate is None else _non_negative(hourly_rate, "hourly_rate")

    labor_costs = q(hours * rate)
    parts_costs = total(p.cost_price for p in parts)
    service_costs = total(s.cost_price for s in services)
    overhead_costs = q(revenue * cfg.overhead_rate)
    total_costs = total([labor_costs, parts_costs, service_costs, overhead_costs])
    gross_profit = q(revenue - total_costs)

    return ProfitAnalysis(
        job_id=str(job_id),
        total_revenue=revenue,
        labor_costs=labor_costs,
        parts_costs=parts_costs,
        service_costs=service_costs,
        overhead_costs=overhead_costs,
        total_costs=total_costs,
        gross_profit=gross_profit,
        profit_margin_percent=margin_percent(revenue, total_costs),
        calculated_at=now or datetime.now(timezone.utc),
    )
