"""
FastAPI Application Entry Point

Integrates:
  - WhatsApp webhook (verification + message events)
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --host 0.0.0.0 --port 3000
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import Config
from infra import InfraBootstrap, bootstrap_infrastructure
from transport.whatsapp import router as whatsapp_router

# Setup logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


APP_NAME = "Message Highlight Bot"
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.

    Missing configuration raises here, so the server never starts half-wired.
    """
    # Startup
    if getattr(app.state, "bootstrap", None) is None:
        app.state.bootstrap = bootstrap_infrastructure()

    config: Config = app.state.bootstrap.config
    logger.info("=" * 60)
    logger.info(f"{APP_NAME} starting up...")
    logger.info(f"Bot running on port {config.port}")
    logger.info(f"Webhook: {config.webhook_url}/webhook")
    logger.info(f"Environment: {config.environment}")
    logger.info(f"Infrastructure: {app.state.bootstrap!r}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info(f"{APP_NAME} shutting down...")


def create_app(bootstrap: Optional[InfraBootstrap] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        bootstrap: Pre-built services. When omitted they are created from the
            environment during startup.
    """
    app = FastAPI(
        title=APP_NAME,
        description="Turns WhatsApp text messages into highlight images",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.bootstrap = bootstrap

    # Middleware for logging
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests."""
        logger.debug(f"{request.method} {request.url.path}")
        try:
            response = await call_next(request)
            return response
        except Exception as e:
            logger.error(f"Request error: {str(e)}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error"},
            )

    # Include routers
    app.include_router(whatsapp_router)

    # Health check endpoints
    @app.get("/health")
    async def health():
        """Process is up."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health/live")
    async def health_live():
        """Live health check (Kubernetes liveness check)."""
        return {"status": "alive"}

    @app.get("/health/ready")
    async def health_ready(request: Request):
        """Readiness health check (Kubernetes readiness check)."""
        if getattr(request.app.state, "bootstrap", None) is None:
            return {"status": "not_ready", "reason": "services not bootstrapped"}
        return {"status": "ready"}

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "status": "running",
            "endpoints": {
                "webhook_verify": "GET /webhook",
                "webhook_events": "POST /webhook",
                "health": "GET /health",
                "health_live": "GET /health/live",
                "health_ready": "GET /health/ready",
                "config_info": "GET /config/info",
            },
        }

    @app.get("/config/info")
    async def config_info(request: Request):
        """Get non-sensitive configuration info."""
        bootstrap = getattr(request.app.state, "bootstrap", None)
        if bootstrap is None:
            return JSONResponse(
                status_code=503,
                content={"detail": "Service not initialised"},
            )
        return bootstrap.config.public_info()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=int(os.getenv("PORT", "3000")),
    )
