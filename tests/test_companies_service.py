"""Tests de CompaniesService contra SQLite en memoria."""

from datetime import datetime

import pytest

from app.core.exceptions import (
    BusinessValidationError,
    ConflictError,
    NotFoundError,
    TransactionError,
)
from app.modules.companies.schemas import CompanyCreateRequest
from app.modules.companies.service import CompaniesService
from app.shared.database.models import Company


@pytest.fixture
def service(db_session):
    return CompaniesService(db_session)


def make_request(cuit="30-71659554-0", business_name="TechSolutions SA", **kwargs):
    return CompanyCreateRequest(cuit=cuit, business_name=business_name, **kwargs)


class TestCreateCompany:
    @pytest.mark.asyncio
    async def test_creates_company_with_formatted_cuit(self, service, db_session):
        result = await service.create_company(make_request(cuit="30716595540"))

        assert result.success is True
        assert result.message == "Empresa creada exitosamente"

        company = db_session.query(Company).filter(Company.uuid == result.uuid).one()
        assert company.cuit == "30-71659554-0"
        assert company.is_active is True
        assert company.adhesion_date is not None

    @pytest.mark.asyncio
    async def test_business_name_is_sanitized(self, service, db_session):
        result = await service.create_company(make_request(business_name="  <Acme> SA  "))

        company = db_session.query(Company).filter(Company.uuid == result.uuid).one()
        assert company.business_name == "&lt;Acme&gt; SA"

    @pytest.mark.asyncio
    async def test_invalid_check_digit(self, service, db_session):
        with pytest.raises(BusinessValidationError) as exc_info:
            await service.create_company(make_request(cuit="30-71659554-9"))

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == "INVALID_CUIT"
        assert db_session.query(Company).count() == 0

    @pytest.mark.asyncio
    async def test_duplicate_cuit_conflict(self, service, company_factory):
        company_factory(cuit="30-71659554-0")

        with pytest.raises(ConflictError) as exc_info:
            await service.create_company(make_request(cuit="30716595540"))

        assert exc_info.value.status_code == 409
        assert exc_info.value.error_code == "COMPANY_ALREADY_EXISTS"

    @pytest.mark.asyncio
    async def test_cuit_with_non_ascii_digits_is_rejected(self, service, company_factory, db_session):
        company_factory(cuit="30-71659554-0")
        arabic = str.maketrans("0123456789", "٠١٢٣٤٥٦٧٨٩")
        # model_construct omite el pattern del schema para llegar al servicio
        request = CompanyCreateRequest.model_construct(
            cuit="30-" + "71659554".translate(arabic) + "-" + "0".translate(arabic),
            business_name="TechSolutions SA",
            address=None,
            contact_email=None,
            contact_phone=None
        )

        with pytest.raises(BusinessValidationError) as exc_info:
            await service.create_company(request)

        assert exc_info.value.error_code == "INVALID_CUIT"
        assert [company.cuit for company in db_session.query(Company).all()] == ["30-71659554-0"]

    @pytest.mark.asyncio
    async def test_unique_index_violation_maps_to_conflict(self, service, company_factory, db_session, monkeypatch):
        # Simula un alta concurrente que pasa la verificación previa
        company_factory(cuit="30-71659554-0")
        monkeypatch.setattr(service.repository, "find_by_cuit", lambda cuit: None)

        with pytest.raises(ConflictError) as exc_info:
            await service.create_company(make_request())

        assert exc_info.value.error_code == "COMPANY_ALREADY_EXISTS"
        assert db_session.query(Company).count() == 1

    @pytest.mark.asyncio
    async def test_cuit_can_be_reused_after_soft_delete(self, service, db_session):
        first = await service.create_company(make_request())
        await service.delete_company(first.uuid)

        second = await service.create_company(make_request())

        assert second.uuid != first.uuid
        assert db_session.query(Company).count() == 2

    @pytest.mark.asyncio
    async def test_persistence_failure_rolls_back(self, service, db_session, monkeypatch):
        def failing_save(company):
            raise RuntimeError("conexión perdida")

        monkeypatch.setattr(service.repository, "save", failing_save)

        with pytest.raises(TransactionError) as exc_info:
            await service.create_company(make_request())

        assert exc_info.value.status_code == 500
        assert exc_info.value.error_code == "COMPANY_CREATION_FAILED"
        assert exc_info.value.details == {"error": "conexión perdida"}
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert db_session.query(Company).count() == 0


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_empty_raises_not_found(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            await service.list_companies()

        assert exc_info.value.error_code == "NOT_COMPANIES_FOUND"

    @pytest.mark.asyncio
    async def test_list_is_paginated(self, service, company_factory, valid_cuits):
        for cuit in valid_cuits[:3]:
            company_factory(cuit=cuit)

        page = await service.list_companies(page=2, limit=2)

        assert len(page.items) == 1
        assert page.total == 3
        assert page.pages == 2
        assert page.has_next is False
        assert page.has_previous is True

    @pytest.mark.asyncio
    async def test_get_by_id_and_uuid(self, service, company_factory):
        company = company_factory()

        by_id = await service.get_company(str(company.id))
        by_uuid = await service.get_company(company.uuid.upper())

        assert by_id.uuid == company.uuid
        assert by_uuid.id == company.id

    @pytest.mark.asyncio
    async def test_invalid_identifier(self, service):
        with pytest.raises(BusinessValidationError) as exc_info:
            await service.get_company("not-an-id")

        assert exc_info.value.error_code == "INVALID_IDENTIFIER"

    @pytest.mark.asyncio
    async def test_missing_company(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            await service.get_company("999")

        assert exc_info.value.error_code == "COMPANY_NOT_FOUND"


class TestAdheringLastMonth:
    @pytest.mark.asyncio
    async def test_only_previous_calendar_month(self, service, company_factory, valid_cuits):
        company_factory(cuit=valid_cuits[0], business_name="Inicio", adhesion_date=datetime(2024, 2, 1))
        company_factory(cuit=valid_cuits[1], business_name="Medio", adhesion_date=datetime(2024, 2, 10, 15, 0))
        company_factory(cuit=valid_cuits[2], business_name="Mes actual", adhesion_date=datetime(2024, 3, 1))
        company_factory(cuit=valid_cuits[3], business_name="Enero", adhesion_date=datetime(2024, 1, 31, 23, 59))

        result = await service.get_companies_adhering_last_month(today=datetime(2024, 3, 15))

        assert [company.business_name for company in result] == ["Inicio", "Medio"]

    @pytest.mark.asyncio
    async def test_deleted_companies_are_excluded(self, service, company_factory):
        company = company_factory(adhesion_date=datetime(2024, 2, 10))
        await service.delete_company(str(company.id))

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_companies_adhering_last_month(today=datetime(2024, 3, 15))

        assert exc_info.value.error_code == "NOT_COMPANIES_FOUND"


class TestDeleteCompany:
    @pytest.mark.asyncio
    async def test_soft_delete_keeps_row(self, service, company_factory, db_session):
        company = company_factory()

        result = await service.delete_company(company.uuid)

        assert result.success is True
        db_session.refresh(company)
        assert company.deleted_at is not None
        assert company.is_active is False
        with pytest.raises(NotFoundError):
            await service.get_company(company.uuid)

    @pytest.mark.asyncio
    async def test_delete_missing_company(self, service):
        with pytest.raises(NotFoundError):
            await service.delete_company("12345")
