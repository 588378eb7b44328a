# app/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text,
    Numeric, ForeignKey, Index, CheckConstraint,
    event, text
)
from sqlalchemy.orm import relationship
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.config.database import Base
from app.shared.utils.cuit import format_cuit
from app.shared.utils.sanitizers import sanitize_account_number


class TransferStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REVERSED = "reversed"

    @classmethod
    def values(cls):
        return [status.value for status in cls]


# Estados que marcan la transferencia como procesada
PROCESSED_STATUSES = {TransferStatus.COMPLETED.value, TransferStatus.FAILED.value}


# =====================================================
# MIXIN PARA TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Mixin que agrega created_at, updated_at y deleted_at (soft delete)"""
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)
    deleted_at = Column(DateTime, nullable=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


# =====================================================
# EMPRESAS
# =====================================================

class Company(Base, TimestampMixin):
    """Empresa adherida"""
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, index=True)
    cuit = Column(String(13), nullable=False)
    business_name = Column(String(255), nullable=False)
    adhesion_date = Column(DateTime, nullable=False, index=True)
    address = Column(String(255))
    contact_email = Column(String(100))
    contact_phone = Column(String(50))
    is_active = Column(Boolean, nullable=False, default=True)

    # Único solo entre empresas no eliminadas
    __table_args__ = (
        Index(
            "uq_companies_cuit_active", "cuit",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL")
        ),
    )

    # Relationships
    transfers = relationship("Transfer", back_populates="company")

    def __repr__(self):
        return f"<Company(id={self.id}, cuit='{self.cuit}', business_name='{self.business_name}')>"


# =====================================================
# TRANSFERENCIAS
# =====================================================

class Transfer(Base, TimestampMixin):
    """Transferencia bancaria de una empresa"""
    __tablename__ = "transfers"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False, index=True)
    debit_account = Column(String(50), nullable=False)
    credit_account = Column(String(50), nullable=False)
    transfer_date = Column(DateTime, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=TransferStatus.PENDING.value, index=True)
    description = Column(Text)
    reference_id = Column(String(50))
    processed_date = Column(DateTime)
    currency = Column(String(3), nullable=False, default="ARS")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'completed', 'failed', 'reversed')",
            name="ck_transfers_status"
        ),
    )

    # Relationships
    company = relationship("Company", back_populates="transfers")

    def __repr__(self):
        return f"<Transfer(id={self.id}, amount={self.amount}, status='{self.status}')>"


# =====================================================
# HOOKS DE PERSISTENCIA
# =====================================================

@event.listens_for(Company, "before_insert")
@event.listens_for(Company, "before_update")
def _normalize_company(mapper, connection, target: Company):
    if target.cuit and "-" not in target.cuit:
        target.cuit = format_cuit(target.cuit)
    if target.business_name:
        target.business_name = target.business_name.strip()


@event.listens_for(Transfer, "before_insert")
@event.listens_for(Transfer, "before_update")
def _normalize_transfer(mapper, connection, target: Transfer):
    if target.amount is not None:
        target.amount = abs(Decimal(str(target.amount)))
    if target.amount is None or target.amount <= 0:
        raise ValueError("El monto de la transferencia debe ser mayor a cero")

    # Se comparan las cuentas ya normalizadas
    target.debit_account = sanitize_account_number(target.debit_account or "")
    target.credit_account = sanitize_account_number(target.credit_account or "")
    if target.debit_account == target.credit_account:
        raise ValueError("La cuenta débito y la cuenta crédito no pueden ser iguales")

    status = target.status.value if isinstance(target.status, TransferStatus) else target.status
    if status not in TransferStatus.values():
        status = TransferStatus.PENDING.value
    target.status = status

    if status in PROCESSED_STATUSES and target.processed_date is None:
        target.processed_date = datetime.now()
