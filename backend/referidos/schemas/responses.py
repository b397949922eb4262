"""
Schemas de Respuestas Comunes.
"""
from pydantic import BaseModel
from typing import Dict, Any


class ErrorResponse(BaseModel):
    """Cuerpo `detail` de las respuestas de error."""
    codigo: str
    mensaje: str
    detalles: Dict[str, Any] = {}


class ErrorHTTPResponse(BaseModel):
    """Respuesta de error tal como la serializa FastAPI."""
    detail: ErrorResponse
