# app/shared/services/seed_service.py
import json
import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from app.shared.database.models import Company, Transfer
from app.shared.utils.cuit import format_cuit

logger = logging.getLogger(__name__)


class SeedService:
    """Carga de datos de demo cuando la base está vacía"""

    def __init__(self, db: Session, seed_data_path: Optional[str] = None):
        self.db = db
        self.seed_data_path = seed_data_path

    def seed_if_empty(self) -> bool:
        """Devuelve True si se cargaron datos"""
        if self.db.query(Company).count() > 0:
            logger.info("La base ya contiene datos. Se omite la carga inicial.")
            return False

        logger.info("🌱 Base vacía. Iniciando carga de datos de demo...")
        self.seed(self.load_seed_data())
        return True

    def load_seed_data(self) -> Dict[str, Any]:
        if self.seed_data_path:
            try:
                with open(Path(self.seed_data_path), encoding="utf-8") as seed_file:
                    logger.info(f"Leyendo datos de demo desde: {self.seed_data_path}")
                    return json.load(seed_file)
            except (OSError, ValueError) as e:
                logger.error(f"No se pudo leer el archivo de datos de demo: {e}")
        logger.info("Usando datos de demo por defecto")
        return self.fallback_seed_data()

    def seed(self, seed_data: Dict[str, Any]):
        companies_by_uuid: Dict[str, Company] = {}

        for company_data in seed_data.get("companies", []):
            try:
                company = Company(
                    uuid=company_data["uuid"],
                    cuit=format_cuit(company_data["cuit"]),
                    business_name=company_data["businessName"],
                    adhesion_date=_parse_date(company_data["adhesionDate"]),
                    address=company_data.get("address"),
                    contact_email=company_data.get("contactEmail"),
                    contact_phone=company_data.get("contactPhone"),
                    is_active=company_data.get("isActive", True)
                )
                self.db.add(company)
                self.db.commit()
                companies_by_uuid[company.uuid] = company
                logger.debug(f"Empresa cargada: {company.business_name}")
            except Exception as e:
                self.db.rollback()
                logger.error(f"Error cargando empresa {company_data.get('businessName')}: {e}")

        for transfer_data in seed_data.get("transfers", []):
            company = companies_by_uuid.get(transfer_data.get("companyUuid"))
            if not company:
                logger.warning(
                    f"Empresa {transfer_data.get('companyUuid')} no encontrada para la transferencia {transfer_data.get('uuid')}"
                )
                continue
            try:
                transfer = Transfer(
                    uuid=transfer_data["uuid"],
                    amount=Decimal(str(transfer_data["amount"])),
                    company=company,
                    debit_account=transfer_data["debitAccount"],
                    credit_account=transfer_data["creditAccount"],
                    transfer_date=_parse_date(transfer_data["transferDate"]),
                    status=transfer_data.get("status", "pending"),
                    description=transfer_data.get("description"),
                    reference_id=transfer_data.get("referenceId"),
                    processed_date=_parse_date(transfer_data["processedDate"]) if transfer_data.get("processedDate") else None,
                    currency=transfer_data.get("currency", "ARS")
                )
                self.db.add(transfer)
                self.db.commit()
            except Exception as e:
                self.db.rollback()
                logger.error(f"Error cargando transferencia {transfer_data.get('uuid')}: {e}")

        logger.info(
            f"✅ Carga de datos de demo finalizada: {len(companies_by_uuid)} empresas"
        )

    @staticmethod
    def fallback_seed_data(today: Optional[datetime] = None) -> Dict[str, Any]:
        """Dataset relativo a hoy: dos empresas del mes pasado y una de hace dos meses"""
        today = today or datetime.now()
        last_month = (today - relativedelta(months=1)).isoformat()
        two_months_ago = (today - relativedelta(months=2)).isoformat()

        return {
            "companies": [
                {
                    "uuid": "f47ac10b-58cc-4372-a567-0e02b2c3d479",
                    "cuit": "30-71659554-0",
                    "businessName": "TechSolutions SA",
                    "adhesionDate": last_month,
                    "address": "Av. Corrientes 1234, CABA",
                    "contactEmail": "info@techsolutions.com",
                    "contactPhone": "1145678901",
                    "isActive": True
                },
                {
                    "uuid": "6ba7b810-9dad-11d1-80b4-00c04fd430c8",
                    "cuit": "30-71123456-6",
                    "businessName": "Constructora del Sur SRL",
                    "adhesionDate": last_month,
                    "address": "Av. Rivadavia 9876, CABA",
                    "contactEmail": "contacto@constructoradelsur.com",
                    "contactPhone": "1123456789",
                    "isActive": True
                },
                {
                    "uuid": "6ba7b811-9dad-11d1-80b4-00c04fd430c8",
                    "cuit": "30-70987654-2",
                    "businessName": "Distribuidora Norte SA",
                    "adhesionDate": two_months_ago,
                    "address": "Av. San Martín 4567, Córdoba",
                    "contactEmail": "ventas@disnorte.com",
                    "contactPhone": "3514567890",
                    "isActive": True
                }
            ],
            "transfers": [
                {
                    "uuid": "550e8400-e29b-41d4-a716-446655440000",
                    "amount": 25000.50,
                    "companyUuid": "f47ac10b-58cc-4372-a567-0e02b2c3d479",
                    "debitAccount": "123456789012",
                    "creditAccount": "098765432109",
                    "transferDate": last_month,
                    "status": "completed",
                    "description": "Pago de servicios IT mensuales",
                    "referenceId": "REF-IT-001",
                    "processedDate": last_month,
                    "currency": "ARS"
                },
                {
                    "uuid": "550e8400-e29b-41d4-a716-446655440002",
                    "amount": 35000.00,
                    "companyUuid": "6ba7b810-9dad-11d1-80b4-00c04fd430c8",
                    "debitAccount": "234567890123",
                    "creditAccount": "456789012345",
                    "transferDate": last_month,
                    "status": "completed",
                    "description": "Pago de materiales de construcción",
                    "referenceId": "REF-MAT-001",
                    "processedDate": last_month,
                    "currency": "ARS"
                },
                {
                    "uuid": "550e8400-e29b-41d4-a716-446655440004",
                    "amount": 42000.00,
                    "companyUuid": "6ba7b811-9dad-11d1-80b4-00c04fd430c8",
                    "debitAccount": "345678901234",
                    "creditAccount": "678901234567",
                    "transferDate": two_months_ago,
                    "status": "completed",
                    "description": "Pago a proveedores mayoristas",
                    "referenceId": "REF-MAY-001",
                    "processedDate": two_months_ago,
                    "currency": "ARS"
                }
            ]
        }


def _parse_date(value: str) -> datetime:
    """ISO 8601; los valores con zona horaria se pasan a hora local naive"""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
