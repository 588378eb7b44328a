"""Configuración de pytest y fixtures compartidas."""

import os

# La app lee la configuración al importarse: base en memoria para todos los tests
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_ON_STARTUP"] = "false"

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.config.database import Base, SessionLocal, engine
from app.main import app
from app.shared.database.models import Company, Transfer

VALID_CUITS = [
    "30-71659554-0",
    "20-12345678-6",
    "27-12345678-0",
    "30-71123456-6",
    "30-70987654-2",
]


@pytest.fixture
def db_session():
    """Sesión sobre una base en memoria recreada en cada test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def company_factory(db_session):
    """Insertar empresas directamente, sin pasar por el servicio."""

    def _create(cuit=VALID_CUITS[0], business_name="TechSolutions SA", adhesion_date=None, **kwargs):
        company = Company(
            uuid=str(uuid4()),
            cuit=cuit,
            business_name=business_name,
            adhesion_date=adhesion_date or datetime.now(),
            **kwargs
        )
        db_session.add(company)
        db_session.commit()
        db_session.refresh(company)
        return company

    return _create


@pytest.fixture
def transfer_factory(db_session):
    def _create(company, amount="1000.00", status="completed", transfer_date=None,
                debit_account="123456789012", credit_account="987654321012", **kwargs):
        transfer = Transfer(
            uuid=str(uuid4()),
            amount=Decimal(amount),
            company_id=company.id,
            debit_account=debit_account,
            credit_account=credit_account,
            transfer_date=transfer_date or datetime.now(),
            status=status,
            **kwargs
        )
        db_session.add(transfer)
        db_session.commit()
        db_session.refresh(transfer)
        return transfer

    return _create


@pytest.fixture
def valid_cuits():
    return list(VALID_CUITS)
