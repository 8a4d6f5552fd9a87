# chaircare/main.py
import time
from uuid import uuid4

from fastapi import FastAPI, Request

from chaircare.core.logging_config import bind_request_context, clear_request_context, logger, setup_logging
from chaircare.core.settings import settings
from chaircare.observability.metrics import router as metrics_router
from chaircare.pricing.api.pricing import router as pricing_router

# ----------------------------------------------------
# App init
# ----------------------------------------------------
app = FastAPI(title="ChairCare Pricing", version="0.1.0")

setup_logging()
logger.info("startup", service=settings.app_name, env=settings.app_env)


# ----------------------------------------------------
# Health
# ----------------------------------------------------
@app.get("/health", include_in_schema=True)
def health() -> dict:
    return {"status": "ok"}


# ----------------------------------------------------
# Logging middleware
# ----------------------------------------------------
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    start = time.time()

    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    request.state.request_id = request_id

    # request_id zit vanaf hier in elke log regel van dit request
    bind_request_context(request_id, endpoint=str(request.url.path), method=request.method)
    try:
        logger.info("request_started")
        response = await call_next(request)
        latency_ms = round((time.time() - start) * 1000, 2)

        logger.bind(status_code=response.status_code, latency_ms=latency_ms).info("request_finished")
    finally:
        clear_request_context()

    response.headers["X-Request-ID"] = request_id
    return response


# ----------------------------------------------------
# Routers
# ----------------------------------------------------
app.include_router(pricing_router)
if settings.metrics_enabled:
    app.include_router(metrics_router)  # /metrics
