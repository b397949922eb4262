"""
Schemas de autenticación.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class TokenPayload(BaseModel):
    """Payload del JWT token."""
    sub: str  # user_id
    username: str
    rol: str
    clinica_id: Optional[str] = None
    exp: datetime
    iat: datetime
    type: str = "access"

