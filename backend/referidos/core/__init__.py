"""
Módulo core: funcionalidades centrales del sistema.
"""
from referidos.core.database import create_db_and_tables, get_session, engine
from referidos.core.exceptions import (
    BaseAppException,
    ValidationError,
    NotFoundError,
    ReferidoNotFoundError,
    PacienteNotFoundError,
    ExpedienteNotFoundError,
    ClinicaNotFoundError,
    PermisoDenegadoError,
    ConflictoError,
    ErrorInterno,
)

__all__ = [
    "create_db_and_tables",
    "get_session",
    "engine",
    "BaseAppException",
    "ValidationError",
    "NotFoundError",
    "ReferidoNotFoundError",
    "PacienteNotFoundError",
    "ExpedienteNotFoundError",
    "ClinicaNotFoundError",
    "PermisoDenegadoError",
    "ConflictoError",
    "ErrorInterno",
]
