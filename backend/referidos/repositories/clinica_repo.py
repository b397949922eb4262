"""
Repository de Clínica.
"""
from typing import Optional, List
from sqlmodel import Session, select, func

from referidos.repositories.base import BaseRepository
from referidos.models.clinica import Clinica
from referidos.models.usuario import Usuario


class ClinicaRepository(BaseRepository[Clinica]):
    """Repository para operaciones de clínicas."""

    def __init__(self, session: Session):
        super().__init__(session, Clinica)

    def obtener_activa_por_id(self, clinica_id: str) -> Optional[Clinica]:
        query = select(Clinica).where(
            Clinica.id == clinica_id,
            Clinica.activo == True
        )
        return self.session.exec(query).first()

    def contar_personal_activo(self, clinica_id: str) -> int:
        """
        Cuenta los usuarios activos asignados a una clínica.

        Args:
            clinica_id: ID de la clínica

        Returns:
            Número de usuarios activos
        """
        query = select(func.count()).select_from(Usuario).where(
            Usuario.clinica_id == clinica_id,
            Usuario.is_active == True
        )
        return self.session.exec(query).one() or 0

    def listar_activas(self) -> List[Clinica]:
        query = select(Clinica).where(
            Clinica.activo == True
        ).order_by(Clinica.nombre)
        return list(self.session.exec(query).all())
