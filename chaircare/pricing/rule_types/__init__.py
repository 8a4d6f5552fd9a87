from .base import Adjustment, AdjustmentKind, Direction  # noqa
from .bulk_discount import evaluate_bulk_discounts  # noqa
from .seasonal import evaluate_seasonal_adjustments  # noqa
from .tier_discount import evaluate_tier_discount  # noqa
from .travel import evaluate_travel_surcharge  # noqa
from .urgency import evaluate_urgency_surcharge  # noqa
