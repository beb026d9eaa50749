"""
app/main.py

Purpose: Application entry point

- Builds the FastAPI app, middleware and exception handlers
- Mounts every router under API_PREFIX
- Owns startup (config, MongoDB, indexes) and shutdown (vendor clients, MongoDB)
- Health, readiness and liveness probes
"""

import time
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import auth, billing, files, manage, profile, public, sites, voice
from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import get_logger, setup_logging
from app.db.indexes import create_indexes
from app.db.mongo import check_database_health, close_mongo_connection, connect_to_mongo
from app.services.llm_service import close_llm_service
from app.services.sarvam_service import close_sarvam_service

# Initialize logging first
setup_logging()
logger = get_logger(__name__)

APP_VERSION = "1.0.0"

SLOW_REQUEST_SECONDS = 15.0

# (router, path under API_PREFIX, tag)
ROUTERS = (
    (auth.router, "/auth", "Auth"),
    (sites.router, "/sites", "Sites"),
    (manage.router, "/manage", "Shop Owner"),
    (voice.router, "/voice", "Voice"),
    (billing.router, "/billing", "Billing"),
    (profile.router, "/profile", "Profile"),
    (files.router, "/files", "Files"),
    (public.router, "", "Public"),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 Starting VoiceSite API ({settings.ENVIRONMENT})")

    try:
        validate_settings()
        await connect_to_mongo()
        await create_indexes()

        if await check_database_health():
            logger.info("✅ MongoDB connected and indexed")
        else:
            logger.warning("⚠️ Database health check failed during startup")
    except Exception as e:
        logger.critical(f"Failed to start application: {e}", exc_info=True)
        raise

    yield

    logger.info("🛑 Shutting down VoiceSite API...")
    try:
        await close_llm_service()
        close_sarvam_service()
        await close_mongo_connection()
    except Exception as e:
        logger.error(f"Error during shutdown: {e}", exc_info=True)


app = FastAPI(
    title="VoiceSite",
    description="Speak about your shop, get a website",
    version=APP_VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = f"{process_time:.4f}"

    # Log slow requests
    if process_time > SLOW_REQUEST_SECONDS:
        logger.warning(f"Slow request: {request.method} {request.url.path} took {process_time:.1f}s")

    return response


add_exception_handlers(app)

for router, path, tag in ROUTERS:
    app.include_router(router, prefix=f"{settings.API_PREFIX}{path}", tags=[tag])


def _vendor_checks() -> Dict[str, str]:
    """Vendors are only checked for configuration, never called."""
    configured = {
        "speech_to_text": bool(settings.SARVAM_API_KEY),
        "llm": bool(settings.OPENAI_API_KEY),
        "sms": settings.sms_configured,
    }
    return {name: "configured" if ok else "not_configured" for name, ok in configured.items()}


@app.get("/", tags=["Health"])
async def root():
    return {
        "name": "VoiceSite API",
        "version": APP_VERSION,
        "description": "Voice-to-website builder for small businesses",
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Database connectivity plus vendor configuration. 503 unless healthy.
    """
    health: Dict[str, Any] = {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": APP_VERSION,
    }

    try:
        db_healthy = await check_database_health()
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_healthy = False

    if not db_healthy:
        health["status"] = "degraded"

    health["checks"] = {"database": "healthy" if db_healthy else "unhealthy", **_vendor_checks()}
    return JSONResponse(content=health, status_code=200 if db_healthy else 503)


@app.get("/ready", tags=["Health"])
async def readiness_check():
    try:
        if await check_database_health():
            return {"status": "ready"}
        reason = "database_unavailable"
    except Exception as e:
        reason = str(e)

    return JSONResponse(status_code=503, content={"status": "not_ready", "reason": reason})


@app.get("/live", tags=["Health"])
async def liveness_check():
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
