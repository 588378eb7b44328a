# app/modules/companies/__init__.py
"""
Módulo de Empresas

- Alta de empresas con validación de CUIT
- Consulta por ID numérico o UUID
- Reporte de empresas adheridas el último mes
- Baja lógica

Arquitectura:
- router.py: Endpoints de empresas
- service.py: Lógica de negocio y control de transacción
- repository.py: Acceso a datos
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import CompaniesService
from .repository import CompaniesRepository

__all__ = [
    "router",
    "CompaniesService",
    "CompaniesRepository"
]
