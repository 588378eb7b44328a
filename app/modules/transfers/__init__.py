# app/modules/transfers/__init__.py
"""
Módulo de Transferencias

- Alta de transferencias con validación de monto y cuentas
- Ciclo de vida de estados (pending, completed, failed, reversed)
- Reporte de empresas con transferencias el último mes
- Cuentas enmascaradas en todas las respuestas

Arquitectura:
- router.py: Endpoints de transferencias
- service.py: Lógica de negocio y control de transacción
- repository.py: Acceso a datos
- schemas.py: Modelos de request/response
- status_machine.py: Tabla de transiciones de estado
"""

from .router import router
from .service import TransfersService
from .repository import TransfersRepository

__all__ = [
    "router",
    "TransfersService",
    "TransfersRepository"
]
