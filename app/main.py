# app/main.py
from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.config.settings import settings
from app.config.database import SessionLocal, create_tables, engine
from app.core.exceptions import register_exception_handlers
from app.core.logging_config import setup_logging
from app.core.middleware import setup_middleware
from app.api.v1.router import api_router
from app.shared.services.seed_service import SeedService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(settings.log_level)
    logger.info(f"🚀 {settings.app_name} starting - version {settings.version}")
    logger.info(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")
    logger.info(f"🗄️  Database: {settings.database_url.split('@')[-1]}")

    if settings.auto_create_tables:
        create_tables()

    if settings.seed_on_startup:
        db = SessionLocal()
        try:
            SeedService(db, settings.seed_data_path).seed_if_empty()
        finally:
            db.close()

    yield

    # Shutdown
    logger.info(f"🛑 {settings.app_name} shutting down")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="API de empresas y transferencias: validación de CUIT, alta transaccional y reportes mensuales",
    docs_url="/docs",
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)
register_exception_handlers(app)

# Include routers
app.include_router(api_router, prefix="/api/v1")


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": settings.app_name,
        "version": settings.version,
        "status": "running",
        "environment": "production" if not settings.debug else "development",
        "docs": "/docs",
        "api": "/api/v1"
    }


@app.get("/health")
def health_check():
    """Estado del servicio y de la conexión a la base"""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        database_status = "connected"
    except SQLAlchemyError as e:
        logger.error(f"❌ Health check sin base de datos: {e}")
        database_status = "unavailable"

    return {
        "status": "healthy" if database_status == "connected" else "degraded",
        "app": settings.app_name,
        "version": settings.version,
        "database": database_status
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
