# app/config/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from .settings import settings

# Configuración del engine
engine_kwargs = {
    "echo": settings.debug
}

if settings.is_sqlite:
    # SQLite (desarrollo local y tests): una conexión compartida entre hilos
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if settings.database_url in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool
else:
    engine_kwargs["pool_pre_ping"] = True
    engine_kwargs["pool_recycle"] = 300

# Create engine
engine = create_engine(settings.database_url, **engine_kwargs)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()

# Database dependency
def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """Crear las tablas declaradas en los modelos si no existen"""
    # Registrar los modelos en Base.metadata
    import app.shared.database.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
