"""
FastAPI Application Entry Point

Integrates:
  - WhatsApp webhook (verification + message intake)
  - Admin broadcast endpoint
  - Health checks
  - Middleware for request logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 3000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import Config
from api.admin import router as admin_router
from api.whatsapp_webhook import router as whatsapp_router
from infra.bootstrap import bootstrap_bot

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    Config.validate()
    bot = bootstrap_bot()
    logger.info("=" * 60)
    logger.info("WhatsApp subscriber bot starting up...")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info(f"Services: {bot!r}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("WhatsApp subscriber bot shutting down...")


# Create FastAPI app
app = FastAPI(
    title="WhatsApp Subscriber Bot",
    description="Opt-in registry, media intake and broadcast over the WhatsApp Cloud API",
    version="1.0.0",
    lifespan=lifespan,
)


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
app.include_router(admin_router)


# Health check endpoints
@app.get("/health")
async def health():
    """Plain health check."""
    return {"ok": True}


@app.get("/health/live")
async def health_live():
    """Live health check (Kubernetes liveness probe)."""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Readiness health check (Kubernetes readiness probe)."""
    if Config.validate():
        return {"status": "ready"}
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "reason": "missing configuration"},
    )


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "WhatsApp Subscriber Bot",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "webhook_verify": "GET /webhook",
            "webhook_receive": "POST /webhook",
            "admin_broadcast": "POST /admin/broadcast",
            "health": "GET /health",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=Config.PORT,
        reload=Config.ENVIRONMENT == "development",
    )
