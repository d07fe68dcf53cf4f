# projersey/main.py
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from projersey import __version__
from projersey.config import get_settings
from projersey.core.logging_config import logger, setup_logging
from projersey.core.rate_limit import limiter
from projersey.observability.metrics import latency_hist
from projersey.observability.metrics import router as metrics_router
from projersey.payments.api import router as checkout_router
from projersey.pricing.api.price import router as price_router
from projersey.shipping.api import router as shipping_router
from projersey.subscriptions.api import router as subscription_router

settings = get_settings()

setup_logging(settings.log_level)

# ----------------------------------------------------
# App init
# ----------------------------------------------------
app = FastAPI(title=settings.app_name, version=__version__)

logger.info("startup", service="projersey-api", env=settings.app_env)


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
    client_ip = request.client.host if request.client else "unknown"

    bound_logger = logger.bind(
        request_id=request_id,
        ip=client_ip,
        endpoint=str(request.url.path),
        method=request.method,
    )

    bound_logger.info("request_started")
    response = await call_next(request)
    latency_ms = round((time.time() - start) * 1000, 2)

    response.headers["X-Request-ID"] = request_id
    latency_hist.labels(route=str(request.url.path)).observe(latency_ms / 1000)
    bound_logger.bind(status_code=response.status_code, latency_ms=latency_ms).info(
        "request_finished"
    )
    return response


# ----------------------------------------------------
# Middleware
# ----------------------------------------------------
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RateLimitExceeded)
def ratelimit_handler(request: Request, exc: RateLimitExceeded):
    return PlainTextResponse(str(exc), status_code=429)


# ----------------------------------------------------
# Routers
# ----------------------------------------------------
app.include_router(price_router)
app.include_router(shipping_router)
app.include_router(subscription_router)
app.include_router(checkout_router)
app.include_router(metrics_router)  # /metrics
