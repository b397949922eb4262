"""
Schemas Pydantic para validación y serialización.
"""
from referidos.schemas.referido import (
    ReferidoCreate,
    ReferidoUpdate,
    ConfirmarEtapaRequest,
    CambiarEstadoRequest,
    PacienteResumen,
    ClinicaResumen,
    UsuarioResumen,
    ReferidoResponse,
    PaginacionResponse,
    ListaReferidosResponse,
)

from referidos.schemas.clinica import ClinicaResponse

from referidos.schemas.responses import ErrorResponse, ErrorHTTPResponse

from referidos.schemas.auth_schemas import TokenPayload

__all__ = [
    "ReferidoCreate",
    "ReferidoUpdate",
    "ConfirmarEtapaRequest",
    "CambiarEstadoRequest",
    "PacienteResumen",
    "ClinicaResumen",
    "UsuarioResumen",
    "ReferidoResponse",
    "PaginacionResponse",
    "ListaReferidosResponse",
    "ClinicaResponse",
    "ErrorResponse",
    "ErrorHTTPResponse",
    "TokenPayload",
]
