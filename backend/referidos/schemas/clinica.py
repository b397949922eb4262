"""
Schemas de Clínica.
"""
from pydantic import BaseModel, ConfigDict


class ClinicaResponse(BaseModel):
    """Clínica disponible como destino de referidos."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    nombre: str
    activo: bool
