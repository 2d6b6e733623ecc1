"""FastAPI application initialization."""

import logging
from contextlib import asynccontextmanager

import logfire
import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api import health, webhook
from src.config import get_settings
from src.logging_config import setup_logfire
from src.middleware.correlation_id import CorrelationIDMiddleware

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"

BANNER_RULE = "=" * 47


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()

    setup_logfire(app, settings)

    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            traces_sample_rate=settings.sentry_traces_sample_rate,
            environment=settings.environment,
            integrations=[FastApiIntegration()],
        )

    logger.info(BANNER_RULE)
    logger.info("Starting Facebook-Gemini Webhook Server")
    logger.info(BANNER_RULE)
    logger.info("Listening on port %s", settings.port)
    logger.info("Environment: %s", settings.environment)
    logger.info(BANNER_RULE)

    for name in settings.missing_credentials():
        logfire.warning("{name} not configured", name=name)

    logfire.info(
        "Application startup complete",
        model=settings.gemini_model,
        environment=settings.environment,
    )

    yield

    logfire.info("Application shutdown complete")


app = FastAPI(
    title="Facebook Gemini Webhook",
    description="Relays Facebook Messenger messages to Google Gemini and sends back the replies",
    version=APP_VERSION,
    lifespan=lifespan,
)

# Correlation ID middleware (must be first for request tracing)
app.add_middleware(CorrelationIDMiddleware)

# Register routers
app.include_router(health.router, tags=["health"])
app.include_router(webhook.router, prefix="/webhook", tags=["webhook"])


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as JSON; unmatched routes get a fixed message."""
    if exc.status_code == 404:
        return JSONResponse({"error": "Endpoint not found"}, status_code=404)
    return JSONResponse(
        {"error": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last-resort handler so no request error takes the server down."""
    logger.error("Unhandled error: %s", exc, exc_info=exc)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.environment in ("development", "local"),
    )
