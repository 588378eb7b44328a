# app/modules/companies/schemas.py
from pydantic import Field, validator
from typing import Optional
from datetime import datetime
import re

from app.shared.schemas.common import CamelModel

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class CompanyCreateRequest(CamelModel):
    cuit: str = Field(
        ...,
        pattern=r"^(20|23|24|25|26|27|30|33|34)(-[0-9]{8}-[0-9]|[0-9]{9})$",
        description="CUIT de la empresa (XX-XXXXXXXX-X o 11 dígitos)",
        examples=["30-71659554-0"]
    )
    business_name: str = Field(..., min_length=3, max_length=100, description="Razón social")
    address: Optional[str] = Field(None, max_length=255, description="Dirección")
    contact_email: Optional[str] = Field(None, max_length=100, description="Email de contacto")
    contact_phone: Optional[str] = Field(
        None,
        pattern=r"^\+?[0-9]{8,15}$",
        description="Teléfono: 8-15 dígitos, opcionalmente con +"
    )

    @validator('contact_email')
    def validate_email(cls, v):
        if v is not None and not EMAIL_PATTERN.match(v):
            raise ValueError('Formato de email inválido')
        return v


class CompanySimplifiedResponse(CamelModel):
    """Versión reducida usada dentro de la respuesta de transferencias"""
    id: int
    uuid: str
    cuit: str
    business_name: str


class CompanyResponse(CompanySimplifiedResponse):
    adhesion_date: datetime
    address: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @validator('is_active', pre=True)
    def default_active(cls, v):
        return True if v is None else v


def to_simplified_response(company) -> CompanySimplifiedResponse:
    return CompanySimplifiedResponse(
        id=company.id,
        uuid=company.uuid,
        cuit=company.cuit,
        business_name=company.business_name
    )


def to_company_response(company) -> CompanyResponse:
    return CompanyResponse(
        id=company.id,
        uuid=company.uuid,
        cuit=company.cuit,
        business_name=company.business_name,
        adhesion_date=company.adhesion_date,
        address=company.address,
        contact_email=company.contact_email,
        contact_phone=company.contact_phone,
        is_active=company.is_active,
        created_at=company.created_at
    )
