# app/modules/transfers/repository.py
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import and_
from typing import List, Optional
from datetime import datetime

from app.shared.database.models import Transfer, TransferStatus
from app.shared.utils.identifiers import LookupKey, LookupKind


class TransfersRepository:
    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(Transfer).options(
            joinedload(Transfer.company)
        ).filter(Transfer.deleted_at.is_(None))

    def save(self, transfer: Transfer) -> Transfer:
        """Persistir transferencia sin confirmar la transacción"""
        self.db.add(transfer)
        self.db.flush()
        self.db.refresh(transfer)
        return transfer

    def find_by_id(self, key: LookupKey) -> Optional[Transfer]:
        if key.kind == LookupKind.ID:
            return self._active().filter(Transfer.id == key.value).first()
        return self._active().filter(Transfer.uuid == key.value).first()

    def find_by_company(self, company_id: int) -> List[Transfer]:
        return self._active().filter(
            Transfer.company_id == company_id
        ).order_by(Transfer.transfer_date.desc(), Transfer.id.desc()).all()

    def find_all(self, skip: int = 0, limit: int = 10) -> List[Transfer]:
        return self._active().order_by(
            Transfer.created_at.desc(), Transfer.id.desc()
        ).offset(skip).limit(limit).all()

    def count(self) -> int:
        return self.db.query(Transfer).filter(Transfer.deleted_at.is_(None)).count()

    def find_distinct_company_ids_completed_in_window(self, start: datetime, end: datetime) -> List[int]:
        """IDs de empresas con transferencias completadas en [start, end)"""
        rows = self.db.query(Transfer.company_id).filter(
            and_(
                Transfer.deleted_at.is_(None),
                Transfer.status == TransferStatus.COMPLETED.value,
                Transfer.transfer_date >= start,
                Transfer.transfer_date < end
            )
        ).distinct().order_by(Transfer.company_id).all()
        return [row.company_id for row in rows]

    def soft_delete(self, transfer: Transfer) -> Transfer:
        transfer.deleted_at = datetime.now()
        self.db.flush()
        return transfer
