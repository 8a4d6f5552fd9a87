# chaircare/observability/metrics.py
from fastapi import APIRouter
from starlette.responses import Response

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

router = APIRouter(tags=["observability"])

# ---------------------------
# Pricing metrics
# ---------------------------
PRICING_CALCULATIONS = Counter(
    "chaircare_pricing_calculations_total",
    "Aantal prijsberekeningen",
    ["urgency"],  # normal|urgent|emergency
)

RULE_FETCH_FAILURES = Counter(
    "chaircare_rule_fetch_failures_total",
    "Rule-tabellen die niet gelezen konden worden (calculatie liep door zonder)",
    ["rule_set", "reason"],  # reason: error|timeout
)

PRICING_LATENCY = Histogram(
    "chaircare_pricing_duration_seconds",
    "Duur van een prijsberekening incl. ophalen van rule-tabellen",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


def record_rule_fetch_failure(rule_set: str, reason: str) -> None:
    RULE_FETCH_FAILURES.labels(rule_set=rule_set, reason=reason).inc()


def record_pricing_calculation(urgency: str, duration: float) -> None:
    PRICING_CALCULATIONS.labels(urgency=urgency).inc()
    PRICING_LATENCY.observe(duration)


@router.get("/metrics", include_in_schema=True)
def metrics() -> Response:
    # Prometheus expects text/plain; version=0.0.4
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
