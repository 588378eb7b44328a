# app/core/logging_config.py
import logging

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO"):
    """Configurar el logger raíz de la aplicación (idempotente)"""
    root = logging.getLogger()
    root.setLevel(level.upper())

    if not any(getattr(handler, "_app_handler", False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._app_handler = True
        root.addHandler(handler)

    # Evitar logs duplicados de SQLAlchemy cuando echo está activo
    logging.getLogger("sqlalchemy.engine").propagate = False
