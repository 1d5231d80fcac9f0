"""FastAPI application initialization."""

import asyncio
import os
import signal
from contextlib import asynccontextmanager

import logfire
import sentry_sdk
from fastapi import FastAPI
from sentry_sdk.integrations.fastapi import FastApiIntegration

from src.api import account_linking, health, webhook
from src.background import (
    drain_background_tasks,
    pending_task_count,
    shutdown_event,
)
from src.config import ConfigMissingError, get_settings
from src.constants import FACEBOOK_GRAPH_API_VERSION, GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS
from src.logging_config import mask_pii, setup_logfire
from src.middleware.correlation_id import CorrelationIDMiddleware

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager with graceful shutdown support."""
    # Startup: missing configuration aborts the process
    try:
        settings = get_settings()
    except ConfigMissingError as e:
        logfire.error("Missing config values", fields=e.fields)
        raise

    setup_logfire(app, settings)

    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            traces_sample_rate=settings.sentry_traces_sample_rate,
            environment=settings.env,
            integrations=[FastApiIntegration()],
        )

    loop = asyncio.get_running_loop()

    def signal_handler(sig_name: str):
        """Handle shutdown signals gracefully."""
        logfire.info(
            "Received shutdown signal, initiating graceful shutdown",
            signal=sig_name,
            pending_tasks=pending_task_count(),
        )
        shutdown_event.set()

    # Register signal handlers (only works on Unix-like systems)
    try:
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                lambda s=sig: signal_handler(s.name),
            )
    except (NotImplementedError, RuntimeError, ValueError):
        # Windows, or not running in the main thread (e.g. TestClient)
        logfire.warning(
            "Signal handlers not supported here, "
            "graceful shutdown may not work as expected"
        )

    logfire.info(
        "Application startup complete",
        environment=settings.env,
        server_url=settings.server_url,
        page_access_token=mask_pii(settings.messenger_page_access_token),
        signature_missing_policy=settings.signature_missing_policy,
    )

    yield

    # ==========================================================================
    # Graceful Shutdown
    # ==========================================================================
    logfire.info(
        "Application shutdown initiated",
        pending_tasks=pending_task_count(),
    )
    await drain_background_tasks(GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS)
    logfire.info("Application shutdown complete")


app = FastAPI(
    title="Famous Greek Messenger Bot",
    description="Facebook Messenger webhook serving menus, specials, location and hours",
    version=APP_VERSION,
    lifespan=lifespan,
)

# Correlation ID middleware (must be first for request tracing)
app.add_middleware(CorrelationIDMiddleware)

# Register routers
app.include_router(health.router, tags=["health"])
app.include_router(webhook.router, prefix="/webhook", tags=["webhook"])
app.include_router(account_linking.router, tags=["account-linking"])


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "Famous Greek Messenger Bot",
        "version": APP_VERSION,
        "graph_api_version": FACEBOOK_GRAPH_API_VERSION,
    }


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 5000))
    uvicorn.run(
        "src.main:app", host="0.0.0.0", port=port, reload=os.getenv("ENV") == "local"
    )
