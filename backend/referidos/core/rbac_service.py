"""
Servicio RBAC (Role-Based Access Control) de referidos.
Evalúa las reglas de autorización de cada acción sobre un referido.
"""
from dataclasses import dataclass
from sqlalchemy import or_, false, true
from sqlalchemy.sql.elements import ColumnElement

from referidos.core.exceptions import PermisoDenegadoError
from referidos.models.usuario import Usuario, PermisoEnum
from referidos.models.referido import Referido


# ============================================
# REGLAS
# ============================================

REGLA_CREAR = "CREAR"
REGLA_CONFIRMAR_ETAPA_2 = "CONFIRMAR_ETAPA_2"
REGLA_CONFIRMAR_ETAPA_3 = "CONFIRMAR_ETAPA_3"
REGLA_APROBADOR_DISTINTO = "APROBADOR_DISTINTO"
REGLA_CONFIRMAR_ETAPA_4 = "CONFIRMAR_ETAPA_4"
REGLA_DOCUMENTO_FINAL_REQUERIDO = "DOCUMENTO_FINAL_REQUERIDO"
REGLA_ACTUALIZAR = "ACTUALIZAR"
REGLA_ACTUALIZAR_DOCUMENTO_FINAL = "ACTUALIZAR_DOCUMENTO_FINAL"
REGLA_CAMBIAR_ESTADO = "CAMBIAR_ESTADO"
REGLA_VER = "VER"


@dataclass(frozen=True)
class Veredicto:
    """Resultado de evaluar una regla de autorización."""
    permitido: bool
    regla: str
    mensaje: str = ""

    def __bool__(self) -> bool:
        return self.permitido


def _permitir(regla: str) -> Veredicto:
    return Veredicto(permitido=True, regla=regla)


def _denegar(regla: str, mensaje: str) -> Veredicto:
    return Veredicto(permitido=False, regla=regla, mensaje=mensaje)


# ============================================
# FUNCIONES DE AUTORIZACIÓN
# ============================================

class RBACService:
    """
    Servicio de autorización sobre referidos.

    Las funciones `puede_*` son evaluaciones puras: no consultan la base de
    datos ni lanzan excepciones. `exigir` convierte un veredicto negativo
    en PermisoDenegadoError.
    """

    @staticmethod
    def es_creador(user: Usuario, referido: Referido) -> bool:
        return referido.usuario_creador_id == user.id

    @staticmethod
    def es_personal_destino(user: Usuario, referido: Referido) -> bool:
        return user.pertenece_a_clinica(referido.clinica_destino_id)

    @staticmethod
    def puede_crear(user: Usuario) -> Veredicto:
        """
        Cualquier miembro activo del personal puede crear referidos.
        La validación de la clínica destino la hace el servicio.
        """
        if not user.is_active or not user.tiene_permiso(PermisoEnum.REFERIDO_CREAR):
            return _denegar(REGLA_CREAR, "No tiene permiso para crear referidos")
        return _permitir(REGLA_CREAR)

    @staticmethod
    def puede_confirmar_etapa(user: Usuario, referido: Referido, etapa: int) -> Veredicto:
        """
        Evalúa si el usuario puede confirmar la etapa indicada.

        Args:
            user: Usuario que confirma
            referido: Estado actual del referido
            etapa: Etapa a confirmar (2, 3 o 4)

        Returns:
            Veredicto con la regla evaluada
        """
        if etapa == 2:
            if not user.tiene_permiso(PermisoEnum.REFERIDO_APROBAR):
                return _denegar(
                    REGLA_CONFIRMAR_ETAPA_2,
                    "Solo un administrador puede confirmar la etapa 2"
                )
            return _permitir(REGLA_CONFIRMAR_ETAPA_2)

        if etapa == 3:
            if not user.tiene_permiso(PermisoEnum.REFERIDO_APROBAR):
                return _denegar(
                    REGLA_CONFIRMAR_ETAPA_3,
                    "Solo un administrador puede confirmar la etapa 3"
                )
            if referido.usuario_confirma_2 == user.id:
                return _denegar(
                    REGLA_APROBADOR_DISTINTO,
                    "La etapa 3 debe confirmarla un administrador distinto al de la etapa 2"
                )
            return _permitir(REGLA_CONFIRMAR_ETAPA_3)

        if etapa == 4:
            if not (
                RBACService.es_personal_destino(user, referido)
                or user.tiene_permiso(PermisoEnum.REFERIDO_CONFIRMAR_DESTINO_TODOS)
            ):
                return _denegar(
                    REGLA_CONFIRMAR_ETAPA_4,
                    "Solo el personal de la clínica destino puede confirmar la etapa final"
                )
            if not referido.tiene_documento_final:
                return _denegar(
                    REGLA_DOCUMENTO_FINAL_REQUERIDO,
                    "Debe adjuntar el documento final antes de confirmar la etapa 4"
                )
            return _permitir(REGLA_CONFIRMAR_ETAPA_4)

        return _denegar(f"CONFIRMAR_ETAPA_{etapa}", f"La etapa {etapa} no es confirmable")

    @staticmethod
    def puede_actualizar(user: Usuario, referido: Referido) -> Veredicto:
        """Actualización general: creador o administrador."""
        if RBACService.es_creador(user, referido) or user.tiene_permiso(PermisoEnum.REFERIDO_EDITAR_TODOS):
            return _permitir(REGLA_ACTUALIZAR)
        return _denegar(REGLA_ACTUALIZAR, "Solo el creador o un administrador puede modificar el referido")

    @staticmethod
    def puede_actualizar_documento_final(user: Usuario, referido: Referido) -> Veredicto:
        """
        Carga del documento final mientras se espera la etapa 4: personal
        de la clínica destino o administrador.
        """
        if RBACService.es_personal_destino(user, referido) or user.tiene_permiso(PermisoEnum.REFERIDO_EDITAR_TODOS):
            return _permitir(REGLA_ACTUALIZAR_DOCUMENTO_FINAL)
        return _denegar(
            REGLA_ACTUALIZAR_DOCUMENTO_FINAL,
            "Solo el personal de la clínica destino puede adjuntar el documento final"
        )

    @staticmethod
    def puede_cambiar_estado(user: Usuario, referido: Referido) -> Veredicto:
        if RBACService.es_creador(user, referido) or user.tiene_permiso(PermisoEnum.REFERIDO_CAMBIAR_ESTADO_TODOS):
            return _permitir(REGLA_CAMBIAR_ESTADO)
        return _denegar(
            REGLA_CAMBIAR_ESTADO,
            "Solo el creador o un administrador puede activar o desactivar el referido"
        )

    @staticmethod
    def puede_ver(user: Usuario, referido: Referido) -> Veredicto:
        if (
            RBACService.es_creador(user, referido)
            or RBACService.es_personal_destino(user, referido)
            or user.tiene_permiso(PermisoEnum.REFERIDO_VER_TODOS)
        ):
            return _permitir(REGLA_VER)
        return _denegar(REGLA_VER, "No tiene acceso a este referido")

    @staticmethod
    def exigir(veredicto: Veredicto) -> None:
        """
        Lanza PermisoDenegadoError si el veredicto es negativo.

        Raises:
            PermisoDenegadoError: con la regla incumplida
        """
        if not veredicto.permitido:
            raise PermisoDenegadoError(veredicto.regla, veredicto.mensaje)

    # ============================================
    # FILTROS DE CONSULTA
    # ============================================

    @staticmethod
    def condicion_clinica_destino(user: Usuario) -> ColumnElement:
        """Referidos dirigidos a la clínica del usuario (nada si no tiene clínica)."""
        if not user.clinica_id:
            return false()
        return Referido.clinica_destino_id == user.clinica_id

    @staticmethod
    def condicion_visibilidad(user: Usuario) -> ColumnElement:
        """
        Condición SQL con los referidos que el usuario puede listar.

        Administradores ven todos; el resto ve los que creó y los dirigidos
        a su clínica.
        """
        if user.tiene_permiso(PermisoEnum.REFERIDO_VER_TODOS):
            return true()
        return or_(
            Referido.usuario_creador_id == user.id,
            RBACService.condicion_clinica_destino(user),
        )


# Instancia singleton
rbac_service = RBACService()
