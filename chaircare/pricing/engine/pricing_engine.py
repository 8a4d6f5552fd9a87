from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from chaircare.core.logging_config import logger
from chaircare.observability.metrics import record_pricing_calculation

from ..domain.models import PartPriceEntry, ServicePriceEntry
from ..errors import CatalogError, InvalidPricingInput
from ..repository.base import RuleRepository
from ..rule_types import (
    evaluate_bulk_discounts,
    evaluate_seasonal_adjustments,
    evaluate_tier_discount,
    evaluate_travel_surcharge,
    evaluate_urgency_surcharge,
)
from ..rule_types.base import HUNDRED, ZERO, Adjustment, q, total
from .context import PricingCalculation, PricingContext, PricingPolicyConfig
from .snapshot import RuleSnapshot, load_rule_snapshot


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def margin_percent(revenue, costs):
    """(revenue - costs) / revenue * 100, or 0 when there is no revenue."""
    if revenue <= ZERO:
        return ZERO
    return q((revenue - costs) / revenue * HUNDRED)


class PricingEngine:
    """
    Combines the five pricing rules into one PricingCalculation.

    - calculate(): pure; everything it needs is passed in (snapshot, now)
    - price_job(): fetches catalogue + rule snapshot concurrently, then calculate()
    """

    def __init__(
        self,
        repository: Optional[RuleRepository] = None,
        config: Optional[PricingPolicyConfig] = None,
    ):
        self.repository = repository
        self.config = config or PricingPolicyConfig.from_settings()

    # -----------------
    # pure core
    # -----------------

    def calculate(
        self,
        context: PricingContext,
        services: Sequence[ServicePriceEntry],
        parts: Sequence[PartPriceEntry],
        snapshot: RuleSnapshot,
        *,
        now: Optional[datetime] = None,
    ) -> PricingCalculation:
        if not isinstance(context, PricingContext):
            raise InvalidPricingInput("context", "must be a PricingContext")

        cfg = self.config
        base_total = total([s.base_price for s in services] + [p.sell_price for p in parts])

        # vaste volgorde: bulk, tier, seasonal, urgency, travel
        adjustments: List[Adjustment] = []
        adjustments += evaluate_bulk_discounts(
            context.chair_count, services, snapshot.bulk_rules, cfg.bulk_discount_policy
        )
        adjustments += evaluate_tier_discount(snapshot.client_tier, base_total)
        adjustments += evaluate_seasonal_adjustments(context.scheduled_date, services, snapshot.seasonal_windows)
        adjustments += evaluate_urgency_surcharge(context.urgency, base_total, cfg)
        adjustments += evaluate_travel_surcharge(context.distance_from_base_km, cfg)

        final_total = max(ZERO, q(base_total + sum((a.signed_amount for a in adjustments), ZERO)))
        total_costs = total([s.cost_price for s in services] + [p.cost_price for p in parts])

        return PricingCalculation(
            client_id=context.client_id,
            base_total=base_total,
            adjustments=tuple(adjustments),
            final_total=final_total,
            total_costs=total_costs,
            profit_margin_percent=margin_percent(final_total, total_costs),
            calculated_at=now or _utcnow(),
            warnings=tuple(snapshot.warnings),
        )

    # -----------------
    # I/O wrapper
    # -----------------

    async def fetch_services(self, ids: Sequence[str]) -> List[ServicePriceEntry]:
        try:
            found = await self.repository.get_services(list(ids))
        except Exception as e:
            raise CatalogError("service", list(ids), f"catalogue read failed: {e}") from e
        active = [s for s in found if s.is_active]
        missing = sorted(set(ids) - {s.id for s in active})
        if missing:
            raise CatalogError("service", missing)
        return active

    async def fetch_parts(self, ids: Sequence[str]) -> List[PartPriceEntry]:
        if not ids:
            return []
        try:
            found = await self.repository.get_parts(list(ids))
        except Exception as e:
            raise CatalogError("part", list(ids), f"catalogue read failed: {e}") from e
        active = [p for p in found if p.is_active]
        missing = sorted(set(ids) - {p.id for p in active})
        if missing:
            raise CatalogError("part", missing)
        return active

    async def price_job(
        self,
        context: PricingContext,
        service_ids: Sequence[str],
        part_ids: Sequence[str] = (),
        *,
        now: Optional[datetime] = None,
    ) -> PricingCalculation:
        if self.repository is None:
            raise RuntimeError("PricingEngine.price_job needs a repository")

        started = time.perf_counter()
        tasks = [
            asyncio.ensure_future(
                load_rule_snapshot(self.repository, context.client_id, timeout=self.config.rule_fetch_timeout_seconds)
            ),
            asyncio.ensure_future(self.fetch_services(service_ids)),
            asyncio.ensure_future(self.fetch_parts(part_ids)),
        ]
        try:
            snapshot, services, parts = await asyncio.gather(*tasks)
        except BaseException:
            # CatalogError (of cancel): niets mag doorlopen na de response
            for t in tasks:
                t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        calc = self.calculate(context, services, parts, snapshot, now=now)

        record_pricing_calculation(context.urgency.value, time.perf_counter() - started)
        logger.bind(client_id=context.client_id).info(
            "pricing_calculated",
            base_total=str(calc.base_total),
            final_total=str(calc.final_total),
            adjustments=len(calc.adjustments),
            warnings=len(calc.warnings),
        )
        return calc


def calculate_job_pricing(
    repository: RuleRepository,
    context: PricingContext,
    service_ids: Sequence[str],
    part_ids: Sequence[str] = (),
    *,
    config: Optional[PricingPolicyConfig] = None,
    now: Optional[datetime] = None,
) -> PricingCalculation:
    """Blocking entry point for callers without a running event loop."""
    engine = PricingEngine(repository, config)
    return asyncio.run(engine.price_job(context, service_ids, part_ids, now=now))
