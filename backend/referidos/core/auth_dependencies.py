"""
Dependencies de autenticación para FastAPI.
Resuelven el token Bearer al usuario que hace la solicitud.
"""
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from referidos.core.database import get_session
from referidos.models.usuario import Usuario
from referidos.services.auth_service import auth_service


# Esquema de seguridad Bearer
security = HTTPBearer(auto_error=False)


class AuthError(HTTPException):
    """Excepción personalizada de autenticación."""
    def __init__(self, detail: str, status_code: int = status.HTTP_401_UNAUTHORIZED):
        super().__init__(
            status_code=status_code,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: Session = Depends(get_session)
) -> Usuario:
    """
    Obtiene el usuario actual autenticado.
    Lanza error 401 si no está autenticado.
    """
    if not credentials:
        raise AuthError("No se proporcionó token de autenticación")

    payload = auth_service.decode_token(credentials.credentials)

    if not payload:
        raise AuthError("Token inválido o expirado")

    if payload.type != "access":
        raise AuthError("Tipo de token inválido")

    user = auth_service.get_user_by_id(payload.sub, session)

    if not user:
        raise AuthError("Usuario no encontrado")

    if not user.is_active:
        raise AuthError("Usuario desactivado")

    return user
