from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence

from ..domain.models import (
    BulkDiscountRule,
    ClientTierAssignment,
    PartPriceEntry,
    PricingTier,
    SeasonalPricingWindow,
    ServicePriceEntry,
)


class InMemoryRuleRepository:
    """
    Dict-backed RuleRepository for tests and for embedding the engine
    in a process that already holds the tables.

    Lookups by id return entries in the requested order and silently skip
    unknown ids; the engine decides whether a missing id is an error.
    """

    def __init__(
        self,
        *,
        bulk_rules: Iterable[BulkDiscountRule] = (),
        tiers: Iterable[PricingTier] = (),
        assignments: Iterable[ClientTierAssignment] = (),
        seasonal_windows: Iterable[SeasonalPricingWindow] = (),
        services: Iterable[ServicePriceEntry] = (),
        parts: Iterable[PartPriceEntry] = (),
    ):
        self.bulk_rules = list(bulk_rules)
        self.tiers: Dict[str, PricingTier] = {t.id: t for t in tiers}
        self.assignments: Dict[str, ClientTierAssignment] = {a.client_id: a for a in assignments}
        self.seasonal_windows = list(seasonal_windows)
        self.services: Dict[str, ServicePriceEntry] = {s.id: s for s in services}
        self.parts: Dict[str, PartPriceEntry] = {p.id: p for p in parts}

    async def get_active_bulk_rules(self) -> Sequence[BulkDiscountRule]:
        return [r for r in self.bulk_rules if r.is_active]

    async def get_tier_assignment(self, client_id: str) -> Optional[ClientTierAssignment]:
        return self.assignments.get(client_id)

    async def get_tier(self, tier_id: str) -> Optional[PricingTier]:
        return self.tiers.get(tier_id)

    async def get_active_seasonal_windows(self) -> Sequence[SeasonalPricingWindow]:
        return [w for w in self.seasonal_windows if w.is_active]

    async def get_services(self, ids: Sequence[str]) -> Sequence[ServicePriceEntry]:
        return [self.services[i] for i in ids if i in self.services]

    async def get_parts(self, ids: Sequence[str]) -> Sequence[PartPriceEntry]:
        return [self.parts[i] for i in ids if i in self.parts]
