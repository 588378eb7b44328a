# app/modules/companies/service.py
from typing import Optional
from datetime import datetime
from uuid import uuid4
from fastapi import HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from .repository import CompaniesRepository
from .schemas import CompanyCreateRequest, CompanyResponse, to_company_response
from app.config.settings import settings
from app.core.exceptions import (
    BusinessValidationError, ConflictError, NotFoundError, TransactionError
)
from app.shared.database.models import Company
from app.shared.schemas.common import BaseResponse, CreatedResponse, PaginatedResponse
from app.shared.utils.cuit import format_cuit, is_valid_cuit
from app.shared.utils.dates import last_month_window
from app.shared.utils.identifiers import LookupKey, parse_lookup_key
from app.shared.utils.sanitizers import sanitize_business_name


def resolve_lookup_key(identifier, entity: str = "empresa") -> LookupKey:
    """Convertir el identificador recibido en LookupKey o fallar con 400"""
    key = parse_lookup_key(identifier)
    if key is None:
        raise BusinessValidationError(
            f"Formato de ID de {entity} inválido: {identifier}",
            error_code="INVALID_IDENTIFIER"
        )
    return key


class CompaniesService:
    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.repository = CompaniesRepository(db)
        self.logger = logger or logging.getLogger(__name__)

    async def create_company(self, company_data: CompanyCreateRequest) -> CreatedResponse:
        """
        Alta de empresa en una única transacción.

        1. Validar CUIT (formato + dígito verificador)
        2. Normalizar CUIT a XX-XXXXXXXX-X
        3. Sanitizar razón social
        4. Verificar que no exista otra empresa activa con el mismo CUIT
        5. Persistir y confirmar
        """
        self.logger.info(f"🏢 Creando empresa - CUIT: {company_data.cuit}")

        if not is_valid_cuit(company_data.cuit):
            raise BusinessValidationError(
                "El CUIT es inválido o tiene un dígito verificador incorrecto",
                error_code="INVALID_CUIT"
            )

        cuit = format_cuit(company_data.cuit)
        business_name = sanitize_business_name(company_data.business_name)
        if not business_name:
            raise BusinessValidationError(
                "La razón social no puede estar vacía",
                error_code="INVALID_BUSINESS_NAME"
            )

        try:
            if self.repository.find_by_cuit(cuit):
                raise ConflictError(
                    f"Ya existe una empresa con CUIT {cuit}",
                    error_code="COMPANY_ALREADY_EXISTS"
                )

            company = Company(
                uuid=str(uuid4()),
                cuit=cuit,
                business_name=business_name,
                adhesion_date=datetime.now(),
                address=company_data.address,
                contact_email=company_data.contact_email,
                contact_phone=company_data.contact_phone,
                is_active=True
            )
            self.repository.save(company)
            self.db.commit()

        except HTTPException:
            self.db.rollback()
            raise
        except IntegrityError as e:
            # Alta concurrente con el mismo CUIT: el índice único es la garantía final
            self.db.rollback()
            self.logger.warning(f"⚠️ Violación de unicidad creando empresa {cuit}: {e.orig}")
            raise ConflictError(
                f"Ya existe una empresa con CUIT {cuit}",
                error_code="COMPANY_ALREADY_EXISTS"
            )
        except Exception as e:
            self.db.rollback()
            self.logger.exception("❌ Error inesperado creando empresa")
            raise TransactionError(
                "Error creando la empresa",
                cause=e,
                error_code="COMPANY_CREATION_FAILED"
            )

        self.logger.info(f"✅ Empresa creada: {company.uuid}")
        return CreatedResponse(message="Empresa creada exitosamente", uuid=company.uuid)

    async def list_companies(self, page: int = 1, limit: Optional[int] = None) -> PaginatedResponse[CompanyResponse]:
        """Listado paginado de empresas activas"""
        page = max(page, 1)
        limit = min(limit or settings.default_page_size, settings.max_page_size)
        self.logger.info(f"Listando empresas - página: {page}, tamaño: {limit}")

        companies = self.repository.find_all(skip=(page - 1) * limit, limit=limit)
        if not companies:
            raise NotFoundError("No se encontraron empresas", error_code="NOT_COMPANIES_FOUND")

        total = self.repository.count()
        return PaginatedResponse[CompanyResponse].build(
            items=[to_company_response(company) for company in companies],
            total=total,
            page=page,
            size=limit
        )

    async def get_company(self, identifier: str) -> CompanyResponse:
        company = self.get_company_entity(resolve_lookup_key(identifier))
        return to_company_response(company)

    def get_company_entity(self, key: LookupKey) -> Company:
        company = self.repository.find_by_id(key)
        if not company:
            raise NotFoundError(
                f"Empresa con ID {key} no encontrada",
                error_code="COMPANY_NOT_FOUND"
            )
        return company

    async def get_companies_adhering_last_month(self, today: Optional[datetime] = None):
        """Empresas adheridas durante el mes calendario anterior"""
        start, end = last_month_window(today)
        self.logger.info(f"Buscando empresas adheridas entre {start:%Y-%m-%d} y {end:%Y-%m-%d}")

        companies = self.repository.find_adhering_in_window(start, end)
        if not companies:
            raise NotFoundError(
                "No se encontraron empresas adheridas el último mes",
                error_code="NOT_COMPANIES_FOUND"
            )
        return [to_company_response(company) for company in companies]

    async def delete_company(self, identifier: str) -> BaseResponse:
        """Baja lógica: marca deleted_at, nunca elimina la fila"""
        key = resolve_lookup_key(identifier)
        try:
            company = self.get_company_entity(key)
            self.repository.soft_delete(company)
            self.db.commit()
        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            self.logger.exception(f"❌ Error eliminando empresa {identifier}")
            raise TransactionError("Error eliminando la empresa", cause=e)

        self.logger.info(f"🗑️ Empresa {company.uuid} eliminada (soft delete)")
        return BaseResponse(success=True, message="Empresa eliminada exitosamente")
