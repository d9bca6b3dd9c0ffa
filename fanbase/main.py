# fanbase/main.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from fanbase.audit import audit_logger
from fanbase.config import settings
from fanbase.errors import FanbaseError
from fanbase.middleware.cors import setup_cors
from fanbase.database.connection import DatabaseConnection

import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting Fanbase API...")
    try:
        await DatabaseConnection.get_pool()
        logger.info("Database connection pool initialized")
    except Exception as e:
        if settings.environment == "development":
            logger.warning(f"Database connection failed (development mode): {e}")
        else:
            logger.error(f"Failed to initialize database: {e}")
            raise

    yield

    # Shutdown
    logger.info("Shutting down Fanbase API...")
    await audit_logger.drain()
    try:
        await DatabaseConnection.close_pool()
        logger.info("Database connections closed")
    except Exception as e:
        logger.warning(f"Error closing database connections: {e}")

app = FastAPI(
    title="Fanbase API",
    description="Artist website backend: contact, subscribers, events and notifications",
    version="1.0.0",
    lifespan=lifespan
)

# Setup CORS
setup_cors(app)

from fanbase.auth.routes import router as auth_router
app.include_router(auth_router)

# Public endpoints
from fanbase.routes.contact import router as contact_router
app.include_router(contact_router)

from fanbase.routes.subscriptions import router as subscriptions_router
app.include_router(subscriptions_router)

from fanbase.routes.tracking import router as tracking_router
app.include_router(tracking_router)

from fanbase.routes.cron import router as cron_router
app.include_router(cron_router)

# Admin endpoints
from fanbase.routes.events import router as events_router, announcement_router
app.include_router(events_router)
app.include_router(announcement_router)

from fanbase.routes.admin_messages import router as admin_messages_router
app.include_router(admin_messages_router)

from fanbase.routes.admin_subscribers import router as admin_subscribers_router
app.include_router(admin_subscribers_router)

from fanbase.routes.admin_logs import router as admin_logs_router
app.include_router(admin_logs_router)

from fanbase.routes.admin_visitors import router as admin_visitors_router
app.include_router(admin_visitors_router)

from fanbase.routes.admin_email import router as admin_email_router
app.include_router(admin_email_router)

@app.get("/health")
async def health_check():
    """Health check including database"""
    try:
        pool = await DatabaseConnection.get_pool()
        async with pool.acquire() as conn:
            await conn.fetchval('SELECT 1')
        db_healthy = True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_healthy = False

    return {
        "status": "healthy" if db_healthy else "degraded",
        "environment": settings.environment,
        "database_healthy": db_healthy,
    }

@app.exception_handler(FanbaseError)
async def domain_exception_handler(request: Request, exc: FanbaseError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message}
    )

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
    return JSONResponse(
        status_code=400,
        content={"error": "invalid_input", "message": f"{field}: {first.get('msg', 'invalid value')}"}
    )

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "server_error", "message": "Internal server error"}
    )
