from datetime import date
from decimal import Decimal

import pytest

from chaircare.pricing.domain.models import SeasonalPricingWindow, ServicePriceEntry
from chaircare.pricing.rule_types.base import AdjustmentKind, Direction
from chaircare.pricing.rule_types.seasonal import evaluate_seasonal_adjustments


def _window(wid="june", value="-10", **kw):
    base = dict(
        id=wid,
        name=f"Window {wid}",
        start_date=date(2026, 6, 1),
        end_date=date(2026, 6, 30),
        adjustment_type="percentage",
        adjustment_value=value,
    )
    base.update(kw)
    return SeasonalPricingWindow(**base)


@pytest.fixture
def thousand():
    return ServicePriceEntry(id="svc_1000", name="Full refurb", category="repair", base_price="1000", cost_price="400")


@pytest.mark.parametrize(
    "day,applies",
    [
        (date(2026, 5, 31), False),
        (date(2026, 6, 1), True),
        (date(2026, 6, 30), True),
        (date(2026, 7, 1), False),
    ],
)
def test_seasonal_window_bounds_are_inclusive(thousand, day, applies):
    out = evaluate_seasonal_adjustments(day, [thousand], [_window()])
    assert bool(out) is applies


def test_seasonal_negative_percentage_is_decrease(thousand):
    out = evaluate_seasonal_adjustments(date(2026, 6, 15), [thousand], [_window(value="-10")])

    assert out[0].kind == AdjustmentKind.SEASONAL
    assert out[0].direction == Direction.DECREASE
    assert out[0].amount == Decimal("100.00")
    assert out[0].signed_amount == Decimal("-100.00")


def test_seasonal_overlapping_windows_sum(thousand):
    windows = [_window("peak", value="5"), _window("promo", value="-3")]

    out = evaluate_seasonal_adjustments(date(2026, 6, 15), [thousand], windows)

    assert [a.signed_amount for a in out] == [Decimal("50.00"), Decimal("-30.00")]
    assert sum(a.signed_amount for a in out) == Decimal("20.00")


def test_seasonal_specific_services_subtotal(thousand, clean_service):
    w = _window(value="-10", applies_to="specific_services", service_ids=["svc_clean"])

    out = evaluate_seasonal_adjustments(date(2026, 6, 15), [thousand, clean_service], [w])

    assert out[0].amount == Decimal("15.00")


def test_seasonal_fixed_amount_alias(thousand):
    w = _window(adjustment_type="fixed_amount", value="75")

    out = evaluate_seasonal_adjustments(date(2026, 6, 15), [thousand], [w])

    assert out[0].direction == Direction.INCREASE
    assert out[0].amount == Decimal("75.00")
    assert out[0].percentage is None


def test_seasonal_zero_and_inactive_windows_skipped(thousand):
    windows = [_window("zero", value="0"), _window("off", value="10", is_active=False)]
    assert evaluate_seasonal_adjustments(date(2026, 6, 15), [thousand], windows) == []
