# app/modules/companies/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.config.settings import settings
from app.shared.schemas.common import BaseResponse, CreatedResponse, PaginatedResponse
from .service import CompaniesService
from .schemas import CompanyCreateRequest, CompanyResponse

router = APIRouter()


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_company(
    company_data: CompanyCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Alta de empresa

    - Valida el CUIT (formato y dígito verificador)
    - Normaliza el CUIT a XX-XXXXXXXX-X
    - Rechaza CUIT duplicado con 409
    """
    service = CompaniesService(db)
    return await service.create_company(company_data)


@router.get("", response_model=PaginatedResponse[CompanyResponse])
async def list_companies(
    page: int = Query(1, ge=1, description="Número de página"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Resultados por página"),
    db: Session = Depends(get_db)
):
    """Listado paginado de empresas"""
    service = CompaniesService(db)
    return await service.list_companies(page, limit)


@router.get("/adhering/last-month", response_model=List[CompanyResponse])
async def get_companies_adhering_last_month(db: Session = Depends(get_db)):
    """Empresas que se adhirieron durante el mes calendario anterior"""
    service = CompaniesService(db)
    return await service.get_companies_adhering_last_month()


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(company_id: str, db: Session = Depends(get_db)):
    """Obtener empresa por ID numérico o UUID"""
    service = CompaniesService(db)
    return await service.get_company(company_id)


@router.delete("/{company_id}", response_model=BaseResponse)
async def delete_company(company_id: str, db: Session = Depends(get_db)):
    """Baja lógica de empresa"""
    service = CompaniesService(db)
    return await service.delete_company(company_id)
