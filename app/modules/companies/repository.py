# app/modules/companies/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import and_
from typing import List, Optional
from datetime import datetime

from app.shared.database.models import Company
from app.shared.utils.identifiers import LookupKey, LookupKind


class CompaniesRepository:
    """
    Acceso a datos de empresas.

    Los métodos no hacen commit: el servicio controla la transacción.
    Todas las consultas excluyen empresas eliminadas (deleted_at).
    """

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(Company).filter(Company.deleted_at.is_(None))

    def save(self, company: Company) -> Company:
        """Persistir empresa (flush para obtener el id)"""
        self.db.add(company)
        self.db.flush()
        self.db.refresh(company)
        return company

    def find_by_cuit(self, cuit: str) -> Optional[Company]:
        return self._active().filter(Company.cuit == cuit).first()

    def find_by_id(self, key: LookupKey) -> Optional[Company]:
        """Buscar por id numérico o UUID"""
        if key.kind == LookupKind.ID:
            return self._active().filter(Company.id == key.value).first()
        return self._active().filter(Company.uuid == key.value).first()

    def find_all(self, skip: int = 0, limit: int = 10) -> List[Company]:
        return self._active().order_by(
            Company.created_at.desc(), Company.id.desc()
        ).offset(skip).limit(limit).all()

    def count(self) -> int:
        return self._active().count()

    def find_adhering_in_window(self, start: datetime, end: datetime) -> List[Company]:
        """Empresas con fecha de adhesión en [start, end)"""
        return self._active().filter(
            and_(
                Company.adhesion_date >= start,
                Company.adhesion_date < end
            )
        ).order_by(Company.adhesion_date.asc()).all()

    def soft_delete(self, company: Company) -> Company:
        company.deleted_at = datetime.now()
        company.is_active = False
        self.db.flush()
        return company
