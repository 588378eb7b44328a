# app/modules/transfers/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.config.settings import settings
from app.modules.companies.schemas import CompanyResponse
from app.shared.schemas.common import BaseResponse, CreatedResponse, PaginatedResponse
from .service import TransfersService
from .schemas import TransferCreateRequest, TransferResponse, TransferStatusUpdate

router = APIRouter()


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_transfer(
    transfer_data: TransferCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Crear transferencia

    **Validaciones:**
    - Monto mayor a 0 y hasta el máximo configurado
    - Cuentas numéricas de 5 a 12 dígitos y distintas entre sí
    - La empresa debe existir (ID numérico o UUID)
    """
    service = TransfersService(db)
    return await service.create_transfer(transfer_data)


@router.get("", response_model=PaginatedResponse[TransferResponse])
async def list_transfers(
    page: int = Query(1, ge=1, description="Número de página"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Resultados por página"),
    db: Session = Depends(get_db)
):
    """Listado paginado de transferencias (cuentas enmascaradas)"""
    service = TransfersService(db)
    return await service.list_transfers(page, limit)


@router.get("/companies/last-month", response_model=List[CompanyResponse])
async def get_companies_with_transfers_last_month(db: Session = Depends(get_db)):
    """Empresas con transferencias completadas el mes calendario anterior"""
    service = TransfersService(db)
    return await service.get_companies_with_transfers_last_month()


@router.get("/company/{company_id}", response_model=List[TransferResponse])
async def get_transfers_by_company(company_id: str, db: Session = Depends(get_db)):
    """Transferencias de una empresa"""
    service = TransfersService(db)
    return await service.get_transfers_by_company(company_id)


@router.get("/{transfer_id}", response_model=TransferResponse)
async def get_transfer(transfer_id: str, db: Session = Depends(get_db)):
    """Obtener transferencia por ID numérico o UUID"""
    service = TransfersService(db)
    return await service.get_transfer(transfer_id)


@router.patch("/{transfer_id}/status", response_model=TransferResponse)
async def update_transfer_status(
    transfer_id: str,
    status_data: TransferStatusUpdate,
    db: Session = Depends(get_db)
):
    """
    Cambiar estado de la transferencia

    completed y failed registran la fecha de procesamiento.
    """
    service = TransfersService(db)
    return await service.update_status(transfer_id, status_data.status)


@router.delete("/{transfer_id}", response_model=BaseResponse)
async def delete_transfer(transfer_id: str, db: Session = Depends(get_db)):
    """Baja lógica de transferencia"""
    service = TransfersService(db)
    return await service.delete_transfer(transfer_id)
