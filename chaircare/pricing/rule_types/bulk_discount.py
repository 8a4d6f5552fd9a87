from __future__ import annotations

from typing import List, Sequence

from ..domain.models import (
    DEFAULT_BULK_DISCOUNT_POLICY,
    BulkDiscountPolicy,
    BulkDiscountRule,
    BulkScope,
    DiscountType,
    ServicePriceEntry,
)
from .base import ZERO, Adjustment, AdjustmentKind, pct_of, q, total


def _qualifies(rule: BulkDiscountRule, chair_count: int, services: Sequence[ServicePriceEntry]) -> bool:
    if not rule.is_active:
        return False
    if rule.applies_to == BulkScope.ALL:
        return chair_count >= rule.minimum_quantity
    in_scope = sum(1 for s in services if s.category.value == rule.applies_to.value)
    return in_scope >= rule.minimum_quantity


def _subtotal(rule: BulkDiscountRule, services: Sequence[ServicePriceEntry]):
    if rule.applies_to == BulkScope.ALL:
        return total(s.base_price for s in services)
    return total(s.base_price for s in services if s.category.value == rule.applies_to.value)


def _to_adjustment(rule: BulkDiscountRule, services: Sequence[ServicePriceEntry]) -> Adjustment:
    label = rule.description or rule.id
    if rule.discount_type == DiscountType.PERCENTAGE:
        amount = pct_of(_subtotal(rule, services), rule.discount_percentage)
        return Adjustment.discount(
            AdjustmentKind.BULK_DISCOUNT,
            f"Bulk discount: {label} ({rule.discount_percentage}%)",
            amount,
            percentage=rule.discount_percentage,
            source_id=rule.id,
        )
    return Adjustment.discount(
        AdjustmentKind.BULK_DISCOUNT,
        f"Bulk discount: {label}",
        q(rule.discount_value),
        source_id=rule.id,
    )


def evaluate_bulk_discounts(
    chair_count: int,
    services: Sequence[ServicePriceEntry],
    rules: Sequence[BulkDiscountRule],
    policy: BulkDiscountPolicy = DEFAULT_BULK_DISCOUNT_POLICY,
) -> List[Adjustment]:
    """
    Bulk-quantity discounts.

    A rule qualifies on chair count (scope "all") or on the number of selected
    services in its category. Zero-amount rules are dropped. With BEST_ONLY only
    the largest qualifying discount survives (first rule wins a tie).
    """
    out = [
        adj
        for adj in (_to_adjustment(r, services) for r in rules if _qualifies(r, chair_count, services))
        if adj.amount > ZERO
    ]

    if BulkDiscountPolicy(policy) == BulkDiscountPolicy.BEST_ONLY and out:
        best = out[0]
        for adj in out[1:]:
            if adj.amount > best.amount:
                best = adj
        return [best]

    return out
