# app/core/exceptions.py
"""
Errores de dominio de la API.

Cada error es un HTTPException con un ``error_code`` legible por máquina, de
modo que los servicios pueden lanzarlos directamente y los handlers los
convierten en un ``ErrorResponse`` uniforme.

Categorías:
- BusinessValidationError (400): datos de entrada inválidos
- ConflictError (409): CUIT duplicado, transición de estado no permitida
- NotFoundError (404): registro inexistente o reporte sin resultados
- TransactionError (500): fallo inesperado de persistencia (envuelto)
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.shared.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class AppException(HTTPException):
    """Base de los errores de dominio"""
    default_status_code: int = status.HTTP_400_BAD_REQUEST
    default_error_code: str = "APP_ERROR"

    def __init__(
        self,
        detail: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(
            status_code=status_code or self.default_status_code,
            detail=detail
        )
        self.error_code = error_code or self.default_error_code
        self.details = details

    @property
    def message(self) -> str:
        return self.detail


class BusinessValidationError(AppException):
    default_status_code = status.HTTP_400_BAD_REQUEST
    default_error_code = "VALIDATION_ERROR"


class ConflictError(AppException):
    default_status_code = status.HTTP_409_CONFLICT
    default_error_code = "CONFLICT"


class NotFoundError(AppException):
    default_status_code = status.HTTP_404_NOT_FOUND
    default_error_code = "NOT_FOUND"


class TransactionError(AppException):
    default_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_error_code = "TRANSACTION_ERROR"

    def __init__(self, detail: str, cause: Exception, error_code: Optional[str] = None):
        super().__init__(detail, error_code=error_code, details={"error": str(cause)})
        self.__cause__ = cause


def _error_response(status_code: int, message: str, error_code: str,
                    details: Optional[Dict[str, Any]] = None) -> JSONResponse:
    body = ErrorResponse(message=message, error_code=error_code, details=details)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(by_alias=True))
    )


async def app_exception_handler(request: Request, exc: AppException):
    return _error_response(exc.status_code, exc.detail, exc.error_code, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg")
        }
        for error in exc.errors()
    ]
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Datos de entrada inválidos",
        "VALIDATION_ERROR",
        {"errors": errors}
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Error no controlado en {request.method} {request.url.path}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Error interno del servidor",
        "INTERNAL_ERROR"
    )


def register_exception_handlers(app: FastAPI):
    """Registrar los handlers de errores en la aplicación"""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
