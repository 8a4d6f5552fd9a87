from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

from ..domain.models import (
    BulkDiscountRule,
    ClientTierAssignment,
    PartPriceEntry,
    PricingTier,
    SeasonalPricingWindow,
    ServicePriceEntry,
)


@runtime_checkable
class RuleRepository(Protocol):
    """
    Read-only access to the rule tables and the price catalogue.

    Every call reads the current state of the backing store. Implementations
    must not cache between calls: a rule edit is visible on the next calculation.
    """

    async def get_active_bulk_rules(self) -> Sequence[BulkDiscountRule]: ...

    async def get_tier_assignment(self, client_id: str) -> Optional[ClientTierAssignment]: ...

    async def get_tier(self, tier_id: str) -> Optional[PricingTier]: ...

    async def get_active_seasonal_windows(self) -> Sequence[SeasonalPricingWindow]: ...

    async def get_services(self, ids: Sequence[str]) -> Sequence[ServicePriceEntry]: ...

    async def get_parts(self, ids: Sequence[str]) -> Sequence[PartPriceEntry]: ...
