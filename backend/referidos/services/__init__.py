"""
Servicios de lógica de negocio.
"""
from referidos.services.referido_service import ReferidoService
from referidos.services.consulta_service import ConsultaReferidoService, ResultadoPaginado
from referidos.services.auth_service import AuthService, auth_service

__all__ = [
    "ReferidoService",
    "ConsultaReferidoService",
    "ResultadoPaginado",
    "AuthService",
    "auth_service",
]
