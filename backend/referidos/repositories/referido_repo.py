"""
Repository de Referido.
"""
from typing import Optional, List, Tuple, Dict, Any
from sqlalchemy import update, or_
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import Session, select, func

from referidos.repositories.base import BaseRepository
from referidos.models.referido import Referido
from referidos.models.paciente import Paciente


class ReferidoRepository(BaseRepository[Referido]):
    """Repository para operaciones de referidos."""

    def __init__(self, session: Session):
        super().__init__(session, Referido)

    @staticmethod
    def _con_resumenes(query):
        """Carga paciente, clínica destino y creador junto con cada referido."""
        return query.options(
            selectinload(Referido.paciente),
            selectinload(Referido.clinica_destino),
            selectinload(Referido.usuario_creador),
        )

    def obtener_activo_por_id(self, referido_id: str) -> Optional[Referido]:
        """
        Obtiene un referido activo por su ID.

        Args:
            referido_id: ID del referido

        Returns:
            El referido o None si no existe o está inactivo
        """
        query = select(Referido).where(
            Referido.id == referido_id,
            Referido.activo == True
        )
        return self.session.exec(query).first()

    def actualizar_condicional(
        self,
        referido_id: str,
        version: int,
        valores: Dict[str, Any]
    ) -> bool:
        """
        Escribe `valores` solo si la versión persistida sigue siendo la
        leída, e incrementa la versión en la misma sentencia.

        Toda escritura sobre el referido cambia la versión, no solo las que
        confirman etapas.

        No hace commit: el llamador confirma la transacción.

        Args:
            referido_id: ID del referido
            version: Versión observada al leer
            valores: Columnas a actualizar

        Returns:
            True si se actualizó la fila, False si otra escritura la cambió
        """
        stmt = (
            update(Referido)
            .where(
                Referido.id == referido_id,
                Referido.activo == True,
                Referido.version == version,
            )
            .values(**valores, version=version + 1)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1

    def listar_filtrado(
        self,
        condicion: ColumnElement,
        busqueda: Optional[str] = None,
        offset: int = 0,
        limite: int = 10
    ) -> Tuple[List[Referido], int]:
        """
        Lista referidos activos que cumplan la condición, paginados.

        Args:
            condicion: Expresión SQL adicional (filtro por rol y categoría)
            busqueda: Fragmento a buscar en nombres, apellidos o CUI del paciente
            offset: Registros a saltar
            limite: Máximo de registros a retornar

        Returns:
            Tupla (referidos de la página, total de coincidencias)
        """
        filtros = [Referido.activo == True, condicion]

        if busqueda:
            filtros.append(or_(
                Paciente.nombres.icontains(busqueda, autoescape=True),
                Paciente.apellidos.icontains(busqueda, autoescape=True),
                Paciente.cui.icontains(busqueda, autoescape=True),
            ))

        base = (
            select(Referido)
            .join(Paciente, Paciente.id == Referido.paciente_id)
            .where(*filtros)
        )

        total = self.session.exec(
            select(func.count()).select_from(base.subquery())
        ).one()

        query = (
            self._con_resumenes(base)
            .order_by(Referido.fecha_creacion.desc(), Referido.id.desc())
            .offset(offset)
            .limit(limite)
        )
        return list(self.session.exec(query).all()), total

    def listar_por_paciente(self, paciente_id: str) -> List[Referido]:
        """
        Obtiene todos los referidos activos de un paciente, más recientes primero.

        Args:
            paciente_id: ID del paciente

        Returns:
            Lista de referidos
        """
        query = self._con_resumenes(select(Referido)).where(
            Referido.paciente_id == paciente_id,
            Referido.activo == True
        ).order_by(Referido.fecha_creacion.desc(), Referido.id.desc())
        return list(self.session.exec(query).all())
