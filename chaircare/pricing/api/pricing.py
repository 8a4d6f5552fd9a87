from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException, Request

from chaircare.core.logging_config import logger
from chaircare.core.settings import get_settings
from chaircare.pricing.engine.context import PricingContext, PricingPolicyConfig
from chaircare.pricing.engine.pricing_engine import PricingEngine
from chaircare.pricing.engine.snapshot import load_rule_snapshot
from chaircare.pricing.errors import CatalogError, InvalidPricingInput
from chaircare.pricing.profit import analyze_profit
from chaircare.pricing.quotes import build_chair_quote
from chaircare.pricing.recommendations import recommend_price
from chaircare.pricing.repository.base import RuleRepository
from chaircare.pricing.repository.yaml_store import YamlRuleRepository
from chaircare.pricing.schemas.pricing_input_v1 import (
    ChairQuoteInputV1,
    PricingCalculateInputV1,
    ProfitInputV1,
    RecommendationInputV1,
)
from chaircare.pricing.schemas.pricing_output_v1 import (
    ChairQuoteV1,
    PricingCalculationV1,
    PricingRecommendationV1,
    ProfitAnalysisV1,
)

# ----------------------------
# Router + dependencies
# ----------------------------
router = APIRouter(prefix="/api/pricing", tags=["pricing"])


def get_rule_repository() -> RuleRepository:
    return YamlRuleRepository(get_settings().rules_path)


def get_policy_config() -> PricingPolicyConfig:
    return PricingPolicyConfig.from_settings()


# ----------------------------
# Helpers
# ----------------------------
def _log_obs(*, request: Request, endpoint: str, t0: float, result: str, status_code: int, **extra) -> None:
    request_id = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID", "unknown")
    logger.bind(
        request_id=request_id,
        endpoint=endpoint,
        duration_ms=round((time.time() - t0) * 1000, 2),
        result=result,
        status_code=status_code,
        **extra,
    ).info("pricing_api_request")


def _http_error(exc: Exception, *, request: Request, endpoint: str, t0: float) -> HTTPException:
    if isinstance(exc, CatalogError):
        _log_obs(request=request, endpoint=endpoint, t0=t0, result="not_found", status_code=404)
        return HTTPException(status_code=404, detail={"code": "CATALOG_NOT_FOUND", "kind": exc.kind, "ids": exc.ids})
    _log_obs(request=request, endpoint=endpoint, t0=t0, result="invalid", status_code=422)
    return HTTPException(status_code=422, detail={"code": "INVALID_INPUT", "message": str(exc)})


async def _one_service(repo: RuleRepository, config: PricingPolicyConfig, service_id: str):
    return (await PricingEngine(repo, config).fetch_services([service_id]))[0]


# ----------------------------
# 1) Calculate
# ----------------------------
@router.post("/calculate", response_model=PricingCalculationV1)
async def calculate_pricing(
    payload: PricingCalculateInputV1,
    request: Request,
    repo: RuleRepository = Depends(get_rule_repository),
    config: PricingPolicyConfig = Depends(get_policy_config),
) -> PricingCalculationV1:
    t0 = time.time()
    endpoint = "/api/pricing/calculate"

    try:
        ctx = PricingContext(**payload.context.model_dump())
        calc = await PricingEngine(repo, config).price_job(ctx, payload.service_ids, payload.part_ids)
    except (CatalogError, InvalidPricingInput) as e:
        raise _http_error(e, request=request, endpoint=endpoint, t0=t0)

    _log_obs(
        request=request,
        endpoint=endpoint,
        t0=t0,
        result="warning" if calc.warnings else "ok",
        status_code=200,
        client_id=calc.client_id,
    )
    return PricingCalculationV1.from_domain(calc)


# ----------------------------
# 2) Profit (na afronden job)
# ----------------------------
@router.post("/profit", response_model=ProfitAnalysisV1)
async def job_profit(
    payload: ProfitInputV1,
    request: Request,
    repo: RuleRepository = Depends(get_rule_repository),
    config: PricingPolicyConfig = Depends(get_policy_config),
) -> ProfitAnalysisV1:
    t0 = time.time()
    endpoint = "/api/pricing/profit"

    try:
        engine = PricingEngine(repo, config)
        services = await engine.fetch_services(payload.service_ids)
        parts = await engine.fetch_parts(payload.part_ids)
        analysis = analyze_profit(
            payload.job_id,
            payload.total_revenue,
            services,
            parts,
            payload.labor_hours,
            hourly_rate=payload.hourly_rate,
            config=config,
        )
    except (CatalogError, InvalidPricingInput) as e:
        raise _http_error(e, request=request, endpoint=endpoint, t0=t0)

    _log_obs(request=request, endpoint=endpoint, t0=t0, result="ok", status_code=200, job_id=analysis.job_id)
    return ProfitAnalysisV1.from_domain(analysis)


# ----------------------------
# 3) Chair quote (client portal)
# ----------------------------
@router.post("/quote", response_model=ChairQuoteV1)
async def chair_quote(
    payload: ChairQuoteInputV1,
    request: Request,
    repo: RuleRepository = Depends(get_rule_repository),
    config: PricingPolicyConfig = Depends(get_policy_config),
) -> ChairQuoteV1:
    t0 = time.time()
    endpoint = "/api/pricing/quote"

    try:
        service = await _one_service(repo, config, payload.service_id)
        # zelfde degradatie als de job engine: kapotte bulk-tabel -> geen korting
        snapshot = await load_rule_snapshot(repo, payload.client_id, timeout=config.rule_fetch_timeout_seconds)
        quote = build_chair_quote(payload.client_id, service, payload.chair_count, snapshot.bulk_rules, config)
    except (CatalogError, InvalidPricingInput) as e:
        raise _http_error(e, request=request, endpoint=endpoint, t0=t0)

    _log_obs(request=request, endpoint=endpoint, t0=t0, result="ok", status_code=200, client_id=quote.client_id)
    return ChairQuoteV1.from_domain(quote)


# ----------------------------
# 4) Price recommendation
# ----------------------------
@router.post("/recommendation", response_model=PricingRecommendationV1)
async def price_recommendation(
    payload: RecommendationInputV1,
    request: Request,
    repo: RuleRepository = Depends(get_rule_repository),
    config: PricingPolicyConfig = Depends(get_policy_config),
) -> PricingRecommendationV1:
    t0 = time.time()
    endpoint = "/api/pricing/recommendation"

    try:
        rec = recommend_price(await _one_service(repo, config, payload.service_id), config)
    except (CatalogError, InvalidPricingInput) as e:
        raise _http_error(e, request=request, endpoint=endpoint, t0=t0)

    _log_obs(request=request, endpoint=endpoint, t0=t0, result="ok", status_code=200, service_id=rec.service_id)
    return PricingRecommendationV1.from_domain(rec)
