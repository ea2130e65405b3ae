"""
Tableside - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
import structlog

from tableside.config import settings
from tableside.api import auth, categories, menu, orders, payment_methods, realtime, site_settings, staff
from tableside.functions import staff as staff_functions
from tableside.rpc import router as rpc_router
from tableside.services.realtime import OrderChangeFeed

logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Tableside API", version="1.0.0")
    yield
    # Ends every open order stream
    app.state.order_feed.close()
    logger.info("Shutting down Tableside API")


# Create FastAPI application
app = FastAPI(
    title="Tableside",
    description="Menu, ordering and back-office API for a bar storefront",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.order_feed = OrderChangeFeed()

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": "1.0.0"}


@app.get("/health/ready")
async def ready():
    """Readiness check with dependency verification"""
    from tableside.database import SessionLocal

    checks = {}

    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


# Include API routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(categories.router, prefix="/categories", tags=["Catalog"])
app.include_router(menu.router, prefix="/menu_items", tags=["Catalog"])
app.include_router(payment_methods.router, prefix="/payment_methods", tags=["Payments"])
app.include_router(site_settings.router, prefix="/site_settings", tags=["Settings"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(staff.router, prefix="/staff", tags=["Staff"])

# Order change stream
app.include_router(realtime.router, prefix="/realtime", tags=["Realtime"])

# Remote procedures
app.include_router(rpc_router.router, prefix="/rpc", tags=["RPC"])

# Privileged functions
app.include_router(staff_functions.router, prefix="/functions/v1", tags=["Functions"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tableside.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
