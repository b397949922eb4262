"""
Modelo de Clínica.
"""
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
import uuid


class Clinica(SQLModel, table=True):
    """
    Modelo de Clínica.

    Representa un centro de atención que puede originar o recibir
    referidos de pacientes.
    """
    __tablename__ = "clinica"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )
    nombre: str = Field(index=True)
    activo: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"Clinica(id={self.id}, nombre={self.nombre}, activo={self.activo})"
