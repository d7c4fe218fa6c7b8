"""
Inventory Service
Warehouses, products, per-warehouse stock and sales analytics over one relational store
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import subprocess
import os

from shared.core import ServiceHealth, setup_logging, RequestLoggingMiddleware, get_logger
from inventory_service.core_settings import get_settings
from inventory_service.infrastructure.db import Database
from inventory_service.api.errors import register_exception_handlers
from inventory_service.api.catalog import warehouse_router, product_router
from inventory_service.api.inventory import router as inventory_router
from inventory_service.api.analytics import router as analytics_router

# Service configuration
SERVICE_NAME = "inventory-service"
SERVICE_DESCRIPTION = "Warehouse inventory management service"
PROJECT_ROOT = os.path.join(os.path.dirname(__file__), "..")

settings = get_settings()

setup_logging(
    service_name=SERVICE_NAME,
    level=settings.LOG_LEVEL,
    environment=settings.ENVIRONMENT,
    version=settings.SERVICE_VERSION
)

logger = get_logger(__name__)

def run_migrations():
    logger.info("Running database migrations")
    result = subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        check=False
    )
    if result.returncode != 0:
        logger.error(f"Migration output: {result.stderr}")
        raise RuntimeError(f"alembic upgrade head exited with status {result.returncode}")
    logger.info("Database migrations completed")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup is fatal when the store cannot be reached; there is no degraded mode"""
    logger.info(f"Starting {SERVICE_NAME} version {settings.SERVICE_VERSION}")
    database: Database = app.state.database

    try:
        # Migrations own the schema when enabled
        if settings.RUN_MIGRATIONS:
            run_migrations()
        else:
            database.init_models()
        database.ping()
        logger.info("Database schema ready")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

    logger.info(f"{SERVICE_NAME} started successfully")

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")
    database.dispose()

app = FastAPI(
    title=SERVICE_NAME,
    description=SERVICE_DESCRIPTION,
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

# One pool for the whole process; routes reach it through get_db
app.state.database = Database.from_settings(settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

# Resolved per call, app.state.database may be swapped
health_service = ServiceHealth(
    SERVICE_NAME,
    settings.SERVICE_VERSION,
    datastore_check=lambda: app.state.database.ping()
)
app.include_router(health_service.create_health_router())

app.include_router(warehouse_router)
app.include_router(product_router)
app.include_router(inventory_router)
app.include_router(analytics_router)

@app.get("/")
async def root():
    return {
        "service": SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "status": "running",
        "docs": "/api/docs"
    }

@app.get("/info")
async def info():
    """Service information endpoint"""
    return {
        "service": SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "description": SERVICE_DESCRIPTION,
        "environment": settings.ENVIRONMENT,
        "endpoints": {
            "health": "/health",
            "ready": "/health/ready",
            "live": "/health/live",
            "metrics": "/metrics",
            "docs": "/api/docs"
        }
    }
