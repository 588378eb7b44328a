# app/api/v1/router.py
from fastapi import APIRouter
from app.modules.companies.router import router as companies_router
from app.modules.transfers.router import router as transfers_router

from app.config.settings import settings


# Crear router principal de la API v1
api_router = APIRouter()

api_router.include_router(
    companies_router,
    prefix="/companies",
    tags=["Companies"]
)

api_router.include_router(
    transfers_router,
    prefix="/transfers",
    tags=["Transfers"]
)


@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": f"{settings.app_name} v1",
        "version": settings.version,
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "companies": "/api/v1/companies",
            "transfers": "/api/v1/transfers"
        }
    }


@api_router.get("/health")
async def health_check():
    """Health check de los módulos"""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version,
        "modules": {
            "companies": {
                "status": "active",
                "features": [
                    "Alta con validación de CUIT",
                    "Consulta por ID o UUID",
                    "Empresas adheridas el último mes"
                ]
            },
            "transfers": {
                "status": "active",
                "features": [
                    "Alta transaccional",
                    "Ciclo de vida de estados",
                    "Empresas con transferencias el último mes"
                ]
            }
        }
    }
