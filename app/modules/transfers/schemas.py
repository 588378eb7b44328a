# app/modules/transfers/schemas.py
from pydantic import Field, validator
from typing import Optional, Union
from decimal import Decimal
from datetime import datetime

from app.shared.database.models import TransferStatus
from app.shared.schemas.common import CamelModel
from app.shared.utils.masking import mask_account
from app.modules.companies.schemas import CompanySimplifiedResponse, to_simplified_response


class TransferCreateRequest(CamelModel):
    amount: Decimal = Field(..., decimal_places=2, description="Monto de la transferencia", examples=[1000])
    company_id: Union[int, str] = Field(..., description="ID numérico o UUID de la empresa")
    debit_account: str = Field(..., description="Cuenta débito (5-12 dígitos)", examples=["123456789012"])
    credit_account: str = Field(..., description="Cuenta crédito (5-12 dígitos)", examples=["987654321012"])
    description: Optional[str] = Field(None, max_length=500, description="Descripción")
    reference_id: Optional[str] = Field(
        None,
        max_length=50,
        pattern=r"^[a-zA-Z0-9_-]+$",
        description="Referencia externa: alfanumérico, guiones y guiones bajos"
    )
    status: Optional[TransferStatus] = Field(None, description="Estado inicial (por defecto pending)")
    currency: Optional[str] = Field(None, pattern=r"^[A-Z]{3}$", description="Código de moneda ISO (ARS, USD)")

    @validator('debit_account', 'credit_account')
    def strip_account(cls, v):
        return v.strip()


class TransferStatusUpdate(CamelModel):
    status: TransferStatus = Field(..., description="Nuevo estado")


class TransferResponse(CamelModel):
    id: int
    uuid: str
    amount: Decimal
    company: Optional[CompanySimplifiedResponse] = None
    debit_account: str
    credit_account: str
    transfer_date: datetime
    status: TransferStatus
    description: Optional[str] = None
    reference_id: Optional[str] = None
    processed_date: Optional[datetime] = None
    currency: str
    created_at: Optional[datetime] = None


def to_transfer_response(transfer) -> TransferResponse:
    """Respuesta con cuentas enmascaradas (solo últimos 4 dígitos visibles)"""
    return TransferResponse(
        id=transfer.id,
        uuid=transfer.uuid,
        amount=transfer.amount,
        company=to_simplified_response(transfer.company) if transfer.company else None,
        debit_account=mask_account(transfer.debit_account),
        credit_account=mask_account(transfer.credit_account),
        transfer_date=transfer.transfer_date,
        status=transfer.status,
        description=transfer.description,
        reference_id=transfer.reference_id,
        processed_date=transfer.processed_date,
        currency=transfer.currency,
        created_at=transfer.created_at
    )
