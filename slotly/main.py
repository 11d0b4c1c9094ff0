import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from . import models  # noqa: F401
from .config import ALLOWED_ORIGINS, CSRF_ENABLED, SECURITY_HEADERS_ENABLED
from .csrf import CSRFMiddleware, csrf_token_endpoint
from .database import Base, engine
from .domain.event_types.router import router as event_types_router
from .errors import register_error_handlers
from .pages.booking import router as booking_router
from .pages.dashboard import router as dashboard_router
from .routes.auth import router as auth_router
from .security_headers import SecurityHeadersMiddleware
from .session_gate import SessionGateMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Another worker may have created them first
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Slotly API", version="1.0.0", lifespan=lifespan)

register_error_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


# Innermost first: the gate runs after CSRF and gets security headers on its redirect
app.add_middleware(SessionGateMiddleware)

if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

if CSRF_ENABLED:
    app.add_middleware(CSRFMiddleware)
    logger.info("CSRF protection enabled")
else:
    logger.info("CSRF protection disabled")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/")
def root():
    return {"message": "Slotly API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/health/redis")
async def redis_health_check():
    """Rate limiter backend status; memory-only mode is still healthy"""
    from .rate_limiter import get_redis_client

    client = get_redis_client()
    if client is None:
        return {"status": "healthy", "redis": {"connected": False, "mode": "memory"}}

    try:
        start_time = time.time()
        client.ping()
        response_time = (time.time() - start_time) * 1000
    except Exception as e:
        logger.warning(f"⚠️ Redis health check failed: {e}")
        return {"status": "degraded", "redis": {"connected": False, "error": str(e)}}

    return {
        "status": "healthy",
        "redis": {"connected": True, "response_time_ms": round(response_time, 2)},
    }


@app.get("/csrf-token")
async def get_csrf_token(request: Request, response: Response):
    """
    Get a CSRF token for the frontend.
    The token is also set as a cookie; echo it in X-CSRF-Token on writes.
    """
    return await csrf_token_endpoint(request, response)


# Routes. The public booking page matches any two-segment path, so it goes last.
app.include_router(auth_router)
app.include_router(event_types_router)
app.include_router(dashboard_router)
app.include_router(booking_router)
