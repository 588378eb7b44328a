# app/core/middleware.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from typing import Any
import time
import uuid
import logging

from app.config.settings import settings

logger = logging.getLogger("app.http")

SENSITIVE_FIELDS = {'password', 'token', 'credit_card', 'creditcard', 'secret', 'apikey', 'api_key'}
REDACTED = "[REDACTED]"


def sanitize_data(data: Any) -> Any:
    """Reemplazar valores sensibles antes de loguear (recursivo)"""
    if isinstance(data, dict):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_FIELDS else sanitize_data(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [sanitize_data(item) for item in data]
    return data


def setup_middleware(app: FastAPI):
    """Configure all middleware for the application"""

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = uuid.uuid4().hex[:16]
        request.state.request_id = request_id
        start_time = time.time()

        query = sanitize_data(dict(request.query_params))
        client_ip = request.client.host if request.client else "unknown"
        user_agent = request.headers.get("user-agent", "unknown")
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} - "
            f"Query: {query} - IP: {client_ip} - User Agent: {user_agent}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} - "
                f"Error: {e} - Time: {process_time:.4f}s"
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )
        response.headers["X-Request-ID"] = request_id
        return response
