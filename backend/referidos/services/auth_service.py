"""
Servicio de Autenticación.
Emisión y validación de tokens JWT del personal.

La verificación de credenciales (login) vive fuera de este sistema; aquí
solo se resuelve un token a un usuario activo.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from sqlmodel import Session
import logging

from referidos.config import settings
from referidos.models.usuario import Usuario
from referidos.schemas.auth_schemas import TokenPayload

logger = logging.getLogger("referidos.auth")


class AuthService:
    """Servicio de autenticación."""

    def __init__(self):
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.access_token_expire = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    def create_access_token(
        self,
        user: Usuario,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """Crea un access token JWT."""
        expire = datetime.now(timezone.utc) + (expires_delta or self.access_token_expire)

        payload = {
            "sub": user.id,
            "username": user.username,
            "rol": user.rol.value,
            "clinica_id": user.clinica_id,
            "exp": expire,
            "iat": datetime.now(timezone.utc),
            "type": "access"
        }

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Optional[TokenPayload]:
        """Decodifica y valida un JWT token."""
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm]
            )
            return TokenPayload(**payload)
        except JWTError as e:
            logger.debug(f"Token rechazado: {e}")
            return None

    def get_user_by_id(self, user_id: str, session: Session) -> Optional[Usuario]:
        """Obtiene un usuario por ID."""
        return session.get(Usuario, user_id)


# Instancia global del servicio
auth_service = AuthService()
