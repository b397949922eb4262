"""
Modelo de Expediente clínico.
"""
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
import uuid


class Expediente(SQLModel, table=True):
    """Expediente clínico de un paciente."""
    __tablename__ = "expediente"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )
    paciente_id: str = Field(foreign_key="paciente.id", index=True)
    numero: str = Field(index=True)
    activo: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"Expediente(id={self.id}, numero={self.numero})"
