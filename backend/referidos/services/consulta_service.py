"""
Servicio de Consulta de Referidos.
Listados paginados, historial por paciente y catálogo de clínicas destino.
"""
from typing import Optional, List, Dict, Union
from dataclasses import dataclass, field
import math
import logging

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import Session

from referidos.config import settings
from referidos.models.referido import Referido
from referidos.models.clinica import Clinica
from referidos.models.usuario import Usuario, PermisoEnum
from referidos.models.enums import FiltroReferidoEnum
from referidos.repositories.referido_repo import ReferidoRepository
from referidos.repositories.clinica_repo import ClinicaRepository
from referidos.core.rbac_service import rbac_service
from referidos.core.exceptions import ValidationError, ErrorInterno

logger = logging.getLogger("referidos.consulta")


@dataclass
class ResultadoPaginado:
    """Página de referidos con sus metadatos de paginación."""
    items: List[Referido] = field(default_factory=list)
    paginacion: Dict[str, int] = field(default_factory=dict)


class ConsultaReferidoService:
    """
    Servicio de lectura de referidos.

    Ninguna operación modifica datos. Los listados siempre excluyen los
    referidos inactivos.
    """

    def __init__(self, session: Session):
        self.session = session
        self.referido_repo = ReferidoRepository(session)
        self.clinica_repo = ClinicaRepository(session)

    # ============================================
    # FILTROS
    # ============================================

    def _condicion_filtro(self, filtro: FiltroReferidoEnum, usuario: Usuario) -> ColumnElement:
        """
        Traduce la categoría de listado a una condición SQL según el rol.

        - pendientes: el administrador ve los que esperan aprobación de
          administradores; el resto ve los que esperan la confirmación
          final de su propia clínica.
        - recibidos: dirigidos a la clínica del usuario.
        - completados: cuatro etapas confirmadas, dentro de lo visible.
        - todos: todo lo visible para el usuario.
        """
        es_admin = usuario.tiene_permiso(PermisoEnum.REFERIDO_VER_TODOS)

        if filtro == FiltroReferidoEnum.PENDIENTES:
            if es_admin:
                return and_(
                    Referido.confirmacion1 == True,
                    or_(
                        Referido.confirmacion2 == False,
                        Referido.confirmacion3 == False,
                    ),
                )
            return and_(
                rbac_service.condicion_clinica_destino(usuario),
                Referido.confirmacion3 == True,
                Referido.confirmacion4 == False,
            )

        if filtro == FiltroReferidoEnum.RECIBIDOS:
            return rbac_service.condicion_clinica_destino(usuario)

        if filtro == FiltroReferidoEnum.COMPLETADOS:
            return and_(
                Referido.confirmacion1 == True,
                Referido.confirmacion2 == True,
                Referido.confirmacion3 == True,
                Referido.confirmacion4 == True,
                rbac_service.condicion_visibilidad(usuario),
            )

        return rbac_service.condicion_visibilidad(usuario)

    # ============================================
    # LISTADOS
    # ============================================

    def listar(
        self,
        filtro: Union[FiltroReferidoEnum, str, None],
        usuario: Usuario,
        busqueda: Optional[str] = None,
        pagina: int = 1,
        limite: int = settings.PAGINACION_LIMITE_DEFAULT
    ) -> ResultadoPaginado:
        """
        Lista referidos visibles para el usuario, paginados.

        Args:
            filtro: Categoría (pendientes, recibidos, completados, todos)
            usuario: Usuario que consulta
            busqueda: Fragmento de nombre, apellido o CUI del paciente
            pagina: Página solicitada, desde 1
            limite: Registros por página (se recorta al máximo configurado)

        Returns:
            ResultadoPaginado con items y paginación

        Raises:
            ValidationError: filtro desconocido o paginación no positiva
            ErrorInterno: fallo de la base de datos al consultar
        """
        if filtro is None or filtro == "":
            filtro = FiltroReferidoEnum.TODOS
        try:
            filtro = FiltroReferidoEnum(filtro)
        except ValueError:
            raise ValidationError(
                f"Filtro de referidos desconocido: '{filtro}'",
                {"permitidos": [f.value for f in FiltroReferidoEnum]}
            )

        if isinstance(pagina, bool) or not isinstance(pagina, int) or pagina < 1:
            raise ValidationError("La página debe ser un entero positivo", {"pagina": pagina})
        if isinstance(limite, bool) or not isinstance(limite, int) or limite < 1:
            raise ValidationError("El límite debe ser un entero positivo", {"limite": limite})

        limite = min(limite, settings.PAGINACION_LIMITE_MAXIMO)
        busqueda = busqueda.strip() if busqueda else None

        try:
            items, total = self.referido_repo.listar_filtrado(
                self._condicion_filtro(filtro, usuario),
                busqueda=busqueda,
                offset=(pagina - 1) * limite,
                limite=limite,
            )
        except SQLAlchemyError as e:
            logger.exception(f"Fallo al listar referidos '{filtro.value}': {e}")
            raise ErrorInterno("No se pudo consultar el listado de referidos")

        logger.debug(
            f"Listado '{filtro.value}' para {usuario.username}: "
            f"{len(items)} de {total} (página {pagina})"
        )

        return ResultadoPaginado(
            items=items,
            paginacion={
                "total": total,
                "pagina": pagina,
                "limite": limite,
                "total_paginas": math.ceil(total / limite) if total else 0,
            }
        )

    def historial_paciente(self, paciente_id: str) -> List[Referido]:
        """
        Todos los referidos activos del paciente, más recientes primero.

        El control de acceso sobre el paciente corresponde a quien llama.
        """
        return self.referido_repo.listar_por_paciente(paciente_id)

    def listar_clinicas_activas(self) -> List[Clinica]:
        """Clínicas activas que pueden elegirse como destino."""
        return self.clinica_repo.listar_activas()
