"""
Modelo de Paciente.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone
import uuid


class Paciente(SQLModel, table=True):
    """
    Modelo de Paciente.

    Solo se incluyen los campos que usa el flujo de referidos. La clínica
    del paciente cambia únicamente al completarse un referido.
    """
    __tablename__ = "paciente"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )
    nombres: str = Field(index=True)
    apellidos: str = Field(index=True)
    cui: Optional[str] = Field(default=None, index=True)  # Documento nacional
    clinica_id: Optional[str] = Field(default=None, foreign_key="clinica.id", index=True)
    activo: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    modificado_por: Optional[str] = Field(default=None)
    fecha_modificacion: Optional[datetime] = Field(default=None)

    @property
    def nombre_completo(self) -> str:
        return f"{self.nombres} {self.apellidos}".strip()

    def __repr__(self) -> str:
        return f"Paciente(id={self.id}, nombre={self.nombre_completo})"
