# app/modules/transfers/service.py
import re
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from uuid import uuid4
from fastapi import HTTPException
from sqlalchemy.orm import Session
import logging

from .repository import TransfersRepository
from .schemas import TransferCreateRequest, TransferResponse, to_transfer_response
from .status_machine import TransferStatusMachine
from app.config.settings import settings
from app.core.exceptions import (
    BusinessValidationError, NotFoundError, TransactionError
)
from app.modules.companies.repository import CompaniesRepository
from app.modules.companies.schemas import CompanyResponse, to_company_response
from app.modules.companies.service import resolve_lookup_key
from app.shared.database.models import Transfer, TransferStatus, PROCESSED_STATUSES
from app.shared.schemas.common import BaseResponse, CreatedResponse, PaginatedResponse
from app.shared.utils.dates import last_month_window
from app.shared.utils.identifiers import LookupKey
from app.shared.utils.sanitizers import sanitize_account_number, sanitize_amount

ACCOUNT_PATTERN = re.compile(r"^[0-9]{5,12}$")


class TransfersService:
    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.repository = TransfersRepository(db)
        self.companies_repository = CompaniesRepository(db)
        self.logger = logger or logging.getLogger(__name__)
        self.status_machine = TransferStatusMachine(
            strict=settings.strict_status_transitions,
            logger=self.logger
        )
        self.MAX_TRANSFER_AMOUNT = Decimal(settings.max_transfer_amount)

    async def create_transfer(self, transfer_data: TransferCreateRequest) -> CreatedResponse:
        """
        Crear transferencia en una única transacción.

        Las validaciones de monto y cuentas ocurren antes de tocar la base.
        Si la empresa no existe se revierte y se propaga el 404 sin envolver;
        cualquier otro fallo de persistencia se revierte y se envuelve en
        TransactionError.

        processed_date se sella al crear solo si el estado inicial es
        completed o failed; una transferencia pending nace sin fecha de
        procesamiento y la recibe al cambiar de estado.
        """
        self.logger.info(f"💸 Creando transferencia para empresa: {transfer_data.company_id}")

        self._validate_amount(transfer_data.amount)
        self._validate_accounts(transfer_data.debit_account, transfer_data.credit_account)
        company_key = resolve_lookup_key(transfer_data.company_id)

        try:
            company = self.companies_repository.find_by_id(company_key)
            if not company:
                raise NotFoundError(
                    f"Empresa con ID {transfer_data.company_id} no encontrada",
                    error_code="COMPANY_NOT_FOUND"
                )

            status = (transfer_data.status or TransferStatus.PENDING).value
            now = datetime.now()
            transfer = Transfer(
                uuid=str(uuid4()),
                amount=sanitize_amount(transfer_data.amount),
                company=company,
                debit_account=sanitize_account_number(transfer_data.debit_account),
                credit_account=sanitize_account_number(transfer_data.credit_account),
                transfer_date=now,
                status=status,
                description=transfer_data.description,
                reference_id=transfer_data.reference_id,
                processed_date=now if status in PROCESSED_STATUSES else None,
                currency=transfer_data.currency or settings.default_currency
            )
            self.repository.save(transfer)
            self.db.commit()

        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            self.logger.exception("❌ Error creando transferencia, transacción revertida")
            raise TransactionError(
                "Error creando la transferencia",
                cause=e,
                error_code="TRANSFER_CREATION_FAILED"
            )

        self.logger.info(f"✅ Transferencia creada: {transfer.uuid}")
        return CreatedResponse(message="Transferencia creada exitosamente", uuid=transfer.uuid)

    async def list_transfers(self, page: int = 1, limit: Optional[int] = None) -> PaginatedResponse[TransferResponse]:
        page = max(page, 1)
        limit = min(limit or settings.default_page_size, settings.max_page_size)
        self.logger.info(f"Listando transferencias - página: {page}, tamaño: {limit}")

        transfers = self.repository.find_all(skip=(page - 1) * limit, limit=limit)
        if not transfers:
            raise NotFoundError("No se encontraron transferencias", error_code="NOT_TRANSFERS_FOUND")

        return PaginatedResponse[TransferResponse].build(
            items=[to_transfer_response(transfer) for transfer in transfers],
            total=self.repository.count(),
            page=page,
            size=limit
        )

    async def get_transfer(self, identifier: str) -> TransferResponse:
        transfer = self._get_transfer_entity(resolve_lookup_key(identifier, entity="transferencia"))
        return to_transfer_response(transfer)

    async def get_transfers_by_company(self, company_identifier: str) -> List[TransferResponse]:
        key = resolve_lookup_key(company_identifier)
        company = self.companies_repository.find_by_id(key)
        if not company:
            raise NotFoundError(
                f"Empresa con ID {company_identifier} no encontrada",
                error_code="COMPANY_NOT_FOUND"
            )

        transfers = self.repository.find_by_company(company.id)
        if not transfers:
            raise NotFoundError(
                "No se encontraron transferencias para esta empresa",
                error_code="NOT_TRANSFERS_FOUND"
            )
        return [to_transfer_response(transfer) for transfer in transfers]

    async def get_companies_with_transfers_last_month(self, today: Optional[datetime] = None) -> List[CompanyResponse]:
        """
        Empresas con transferencias completadas durante el mes calendario anterior.

        Un ID sin empresa resoluble se descarta con un warning en lugar de
        hacer fallar toda la consulta.
        """
        start, end = last_month_window(today)
        self.logger.info(f"Buscando empresas con transferencias entre {start:%Y-%m-%d} y {end:%Y-%m-%d}")

        company_ids = self.repository.find_distinct_company_ids_completed_in_window(start, end)
        if not company_ids:
            raise NotFoundError(
                "No se encontraron empresas con transferencias el último mes",
                error_code="NOT_COMPANIES_FOUND"
            )

        companies = []
        for company_id in company_ids:
            company = self.companies_repository.find_by_id(LookupKey.for_id(company_id))
            if not company:
                self.logger.warning(
                    f"⚠️ Empresa con ID {company_id} encontrada en transferencias pero no existe"
                )
                continue
            companies.append(to_company_response(company))

        if not companies:
            raise NotFoundError(
                "No se pudieron obtener empresas con transferencias el último mes",
                error_code="NOT_COMPANIES_FOUND"
            )
        return companies

    async def update_status(self, identifier: str, new_status: TransferStatus) -> TransferResponse:
        """
        Cambiar el estado de una transferencia.

        completed/failed sellan processed_date si aún no está seteada.
        """
        key = resolve_lookup_key(identifier, entity="transferencia")
        try:
            transfer = self._get_transfer_entity(key)
            previous = transfer.status
            target = self.status_machine.check(previous, TransferStatus(new_status).value)

            transfer.status = target.value
            if target.value in PROCESSED_STATUSES and transfer.processed_date is None:
                transfer.processed_date = datetime.now()

            self.db.flush()
            self.db.commit()
        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            self.logger.exception(f"❌ Error actualizando estado de transferencia {identifier}")
            raise TransactionError("Error actualizando el estado de la transferencia", cause=e)

        self.logger.info(f"🔄 Transferencia {transfer.uuid}: {previous} → {transfer.status}")
        return to_transfer_response(transfer)

    async def delete_transfer(self, identifier: str) -> BaseResponse:
        key = resolve_lookup_key(identifier, entity="transferencia")
        try:
            transfer = self._get_transfer_entity(key)
            self.repository.soft_delete(transfer)
            self.db.commit()
        except HTTPException:
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            self.logger.exception(f"❌ Error eliminando transferencia {identifier}")
            raise TransactionError("Error eliminando la transferencia", cause=e)

        self.logger.info(f"🗑️ Transferencia {transfer.uuid} eliminada (soft delete)")
        return BaseResponse(success=True, message="Transferencia eliminada exitosamente")

    def _get_transfer_entity(self, key: LookupKey) -> Transfer:
        transfer = self.repository.find_by_id(key)
        if not transfer:
            raise NotFoundError(
                f"Transferencia con ID {key} no encontrada",
                error_code="TRANSFER_NOT_FOUND"
            )
        return transfer

    def _validate_amount(self, amount: Decimal):
        if amount is None or amount <= 0:
            raise BusinessValidationError(
                "El monto de la transferencia debe ser mayor a cero",
                error_code="INVALID_AMOUNT"
            )
        if amount > self.MAX_TRANSFER_AMOUNT:
            raise BusinessValidationError(
                f"El monto supera el máximo permitido ({self.MAX_TRANSFER_AMOUNT:,})",
                error_code="INVALID_AMOUNT"
            )

    def _validate_accounts(self, debit_account: str, credit_account: str):
        if not ACCOUNT_PATTERN.match(debit_account or ""):
            raise BusinessValidationError(
                "La cuenta débito debe ser numérica y tener entre 5 y 12 dígitos",
                error_code="INVALID_ACCOUNT"
            )
        if not ACCOUNT_PATTERN.match(credit_account or ""):
            raise BusinessValidationError(
                "La cuenta crédito debe ser numérica y tener entre 5 y 12 dígitos",
                error_code="INVALID_ACCOUNT"
            )
        if debit_account == credit_account:
            raise BusinessValidationError(
                "La cuenta débito y la cuenta crédito no pueden ser iguales",
                error_code="INVALID_ACCOUNT"
            )
