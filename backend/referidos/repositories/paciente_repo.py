"""
Repository de Paciente.
"""
from typing import Optional
from datetime import datetime, timezone
from sqlmodel import Session, select

from referidos.repositories.base import BaseRepository
from referidos.models.paciente import Paciente


class PacienteRepository(BaseRepository[Paciente]):
    """Repository para operaciones de pacientes."""

    def __init__(self, session: Session):
        super().__init__(session, Paciente)

    def obtener_activo_por_id(self, paciente_id: str) -> Optional[Paciente]:
        """
        Obtiene un paciente activo por su ID.

        Args:
            paciente_id: ID del paciente

        Returns:
            El paciente o None si no existe o está inactivo
        """
        query = select(Paciente).where(
            Paciente.id == paciente_id,
            Paciente.activo == True
        )
        return self.session.exec(query).first()

    def asignar_clinica(self, paciente: Paciente, clinica_id: str, usuario: str) -> Paciente:
        """
        Reasigna la clínica del paciente dentro de la transacción en curso.

        No hace commit; el llamador confirma o revierte junto con el resto
        de cambios.

        Args:
            paciente: Paciente a modificar
            clinica_id: Nueva clínica
            usuario: Username que registra el cambio

        Returns:
            El paciente modificado
        """
        paciente.clinica_id = clinica_id
        paciente.modificado_por = usuario
        paciente.fecha_modificacion = datetime.now(timezone.utc)
        return self.agregar(paciente)
