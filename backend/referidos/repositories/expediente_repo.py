"""
Repository de Expediente.
"""
from typing import Optional
from sqlmodel import Session, select

from referidos.repositories.base import BaseRepository
from referidos.models.expediente import Expediente


class ExpedienteRepository(BaseRepository[Expediente]):
    """Repository para expedientes clínicos."""

    def __init__(self, session: Session):
        super().__init__(session, Expediente)

    def obtener_por_id_y_paciente(
        self,
        expediente_id: str,
        paciente_id: str
    ) -> Optional[Expediente]:
        """
        Obtiene un expediente activo que pertenezca al paciente indicado.

        Args:
            expediente_id: ID del expediente
            paciente_id: ID del paciente dueño

        Returns:
            El expediente o None
        """
        query = select(Expediente).where(
            Expediente.id == expediente_id,
            Expediente.paciente_id == paciente_id,
            Expediente.activo == True
        )
        return self.session.exec(query).first()
