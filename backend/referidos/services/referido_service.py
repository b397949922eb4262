"""
Servicio de Referidos.
Gestiona el ciclo de vida de un referido entre clínicas.

Etapas:
1. Creación (se cumple automáticamente al crear)
2. Aprobación de un administrador
3. Aprobación de un segundo administrador, distinto al de la etapa 2
4. Aprobación de la clínica destino con el documento final adjunto

Al confirmarse la etapa 4 el paciente pasa a la clínica destino en la
misma transacción.
"""
from typing import Optional, Dict, Any, Union
from datetime import datetime, timezone
import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from referidos.models.referido import Referido, ETAPA_FINAL
from referidos.models.clinica import Clinica
from referidos.models.usuario import Usuario
from referidos.repositories.referido_repo import ReferidoRepository
from referidos.repositories.paciente_repo import PacienteRepository
from referidos.repositories.clinica_repo import ClinicaRepository
from referidos.repositories.expediente_repo import ExpedienteRepository
from referidos.schemas.referido import ReferidoCreate
from referidos.core.rbac_service import rbac_service
from referidos.core.exceptions import (
    ValidationError,
    ReferidoNotFoundError,
    PacienteNotFoundError,
    ExpedienteNotFoundError,
    ClinicaNotFoundError,
    ConflictoError,
    ReferidoCompletadoError,
    ConcurrenciaError,
    ErrorInterno,
)

logger = logging.getLogger("referidos.referido")


CAMPOS_ACTUALIZABLES = frozenset({
    "clinica_destino_id",
    "comentario",
    "ruta_documento_inicial",
    "ruta_documento_final",
})

SEPARADOR_COMENTARIO = "\n---\n"


def anexar_comentario(anterior: Optional[str], autor: str, texto: str) -> str:
    """
    Agrega un comentario firmado al historial existente.

    Args:
        anterior: Comentario acumulado (puede ser None)
        autor: Username de quien comenta
        texto: Texto nuevo

    Returns:
        Historial con la nueva entrada al final
    """
    entrada = f"{autor}: {texto.strip()}"
    if not anterior:
        return entrada
    return f"{anterior}{SEPARADOR_COMENTARIO}{entrada}"


class ReferidoService:
    """
    Servicio para gestión de referidos.

    Maneja:
    - Creación con validación de paciente, expediente y clínica destino
    - Confirmación ordenada de etapas con escritura condicional
    - Actualización de metadatos mientras el referido no esté completado
    - Desactivación y restauración
    - Consulta individual con control de acceso
    """

    def __init__(self, session: Session):
        self.session = session
        self.referido_repo = ReferidoRepository(session)
        self.paciente_repo = PacienteRepository(session)
        self.clinica_repo = ClinicaRepository(session)
        self.expediente_repo = ExpedienteRepository(session)

    # ============================================
    # VALIDACIONES
    # ============================================

    def _validar_clinica_destino(self, clinica_id: str) -> Clinica:
        """
        Verifica que la clínica exista, esté activa y tenga personal activo.

        Raises:
            ClinicaNotFoundError: si no cumple alguna condición
        """
        clinica = self.clinica_repo.obtener_activa_por_id(clinica_id)
        if not clinica:
            raise ClinicaNotFoundError(clinica_id)

        if self.clinica_repo.contar_personal_activo(clinica_id) == 0:
            raise ClinicaNotFoundError(clinica_id, "no tiene personal activo asignado")

        return clinica

    def _obtener_activo(self, referido_id: str) -> Referido:
        referido = self.referido_repo.obtener_activo_por_id(referido_id)
        if not referido:
            raise ReferidoNotFoundError(referido_id)
        return referido

    def _fallo_persistencia(self, operacion: str, referido_id: Optional[str], error: Exception) -> ErrorInterno:
        """Revierte la transacción y registra el fallo con su contexto."""
        self.session.rollback()
        logger.exception(
            f"Fallo de persistencia en {operacion} (referido={referido_id}): {error}"
        )
        return ErrorInterno(f"No se pudo completar la operación '{operacion}'")

    # ============================================
    # CREACIÓN
    # ============================================

    def crear(
        self,
        datos: Union[ReferidoCreate, Dict[str, Any]],
        usuario: Usuario
    ) -> Referido:
        """
        Crea un referido con la etapa 1 confirmada por el creador.

        Args:
            datos: Datos del referido
            usuario: Usuario que crea el referido

        Returns:
            El referido creado

        Raises:
            ValidationError: datos faltantes o con tipo incorrecto
            PacienteNotFoundError / ExpedienteNotFoundError / ClinicaNotFoundError
            PermisoDenegadoError: si el usuario no puede crear referidos
        """
        if not isinstance(datos, ReferidoCreate):
            try:
                datos = ReferidoCreate.model_validate(datos)
            except PydanticValidationError as e:
                raise ValidationError(
                    "Datos del referido inválidos",
                    {"errores": [
                        {"campo": ".".join(str(p) for p in err["loc"]), "mensaje": err["msg"]}
                        for err in e.errors()
                    ]}
                )

        rbac_service.exigir(rbac_service.puede_crear(usuario))

        paciente = self.paciente_repo.obtener_activo_por_id(datos.paciente_id)
        if not paciente:
            raise PacienteNotFoundError(datos.paciente_id)

        expediente = self.expediente_repo.obtener_por_id_y_paciente(
            datos.expediente_id, paciente.id
        )
        if not expediente:
            raise ExpedienteNotFoundError(datos.expediente_id)

        self._validar_clinica_destino(datos.clinica_destino_id)

        comentario = None
        if datos.comentario and datos.comentario.strip():
            comentario = anexar_comentario(None, usuario.username, datos.comentario)

        referido = Referido(
            usuario_creador_id=usuario.id,
            paciente_id=paciente.id,
            expediente_id=expediente.id,
            clinica_destino_id=datos.clinica_destino_id,
            comentario=comentario,
            confirmacion1=True,
            usuario_confirma_1=usuario.id,
            ruta_documento_inicial=datos.ruta_documento_inicial,
            creado_por=usuario.username,
            fecha_creacion=datetime.now(timezone.utc),
            activo=True,
        )

        try:
            self.referido_repo.guardar(referido)
        except SQLAlchemyError as e:
            raise self._fallo_persistencia("crear", None, e)

        logger.info(
            f"Referido {referido.id} creado por {usuario.username}: "
            f"paciente {paciente.id} -> clínica {datos.clinica_destino_id}"
        )
        return referido

    # ============================================
    # CONFIRMACIÓN DE ETAPAS
    # ============================================

    def confirmar_etapa(
        self,
        referido_id: str,
        usuario: Usuario,
        comentario: Optional[str] = None,
        etapa: Optional[int] = None
    ) -> Referido:
        """
        Confirma la etapa pendiente del referido.

        La escritura solo se aplica si el referido no cambió desde la
        lectura; si otra solicitud escribió antes, se responde con conflicto
        y no se reintenta.

        Args:
            referido_id: ID del referido
            usuario: Usuario que confirma
            comentario: Comentario opcional a anexar
            etapa: Etapa que el llamador espera confirmar (opcional)

        Returns:
            El referido actualizado

        Raises:
            ReferidoNotFoundError: si no existe o está inactivo
            ConflictoError: completado, etapa fuera de orden o escritura concurrente
            PermisoDenegadoError: si la regla de la etapa no se cumple
        """
        referido = self._obtener_activo(referido_id)

        etapa_pendiente = referido.etapa_pendiente
        if etapa_pendiente is None:
            raise ReferidoCompletadoError(referido_id)

        if etapa is not None and etapa != etapa_pendiente:
            if etapa < etapa_pendiente:
                raise ConflictoError(
                    f"La etapa {etapa} ya fue confirmada",
                    "ETAPA_YA_CONFIRMADA",
                    etapa
                )
            raise ConflictoError(
                f"La etapa {etapa} no puede confirmarse antes de la etapa {etapa_pendiente}",
                "ETAPA_FUERA_DE_ORDEN",
                etapa
            )

        rbac_service.exigir(
            rbac_service.puede_confirmar_etapa(usuario, referido, etapa_pendiente)
        )

        ahora = datetime.now(timezone.utc)
        valores: Dict[str, Any] = {
            f"confirmacion{etapa_pendiente}": True,
            f"usuario_confirma_{etapa_pendiente}": usuario.id,
            "modificado_por": usuario.username,
            "fecha_modificacion": ahora,
        }
        if comentario and comentario.strip():
            valores["comentario"] = anexar_comentario(
                referido.comentario, usuario.username, comentario
            )

        try:
            if not self.referido_repo.actualizar_condicional(referido_id, referido.version, valores):
                self.session.rollback()
                logger.warning(
                    f"Confirmación concurrente rechazada: referido {referido_id}, "
                    f"etapa {etapa_pendiente}, usuario {usuario.username}"
                )
                raise ConcurrenciaError(referido_id, etapa_pendiente)

            if etapa_pendiente == ETAPA_FINAL:
                self._transferir_paciente(referido, usuario)

            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fallo_persistencia(f"confirmar_etapa_{etapa_pendiente}", referido_id, e)

        self.session.refresh(referido)

        logger.info(
            f"Referido {referido_id}: etapa {etapa_pendiente} confirmada por {usuario.username}"
        )
        return referido

    def _transferir_paciente(self, referido: Referido, usuario: Usuario) -> None:
        """
        Asigna la clínica destino al paciente dentro de la transacción de la
        etapa 4. El commit lo hace quien llama.
        """
        paciente = self.paciente_repo.obtener_por_id(referido.paciente_id)
        if not paciente:
            self.session.rollback()
            raise PacienteNotFoundError(referido.paciente_id)

        self.paciente_repo.asignar_clinica(
            paciente, referido.clinica_destino_id, usuario.username
        )
        logger.info(
            f"Paciente {paciente.id} transferido a clínica {referido.clinica_destino_id} "
            f"por referido {referido.id}"
        )

    # ============================================
    # ACTUALIZACIÓN
    # ============================================

    def actualizar(
        self,
        referido_id: str,
        usuario: Usuario,
        cambios: Dict[str, Any]
    ) -> Referido:
        """
        Aplica cambios parciales a un referido no completado.

        Un cambio que solo toca ruta_documento_final mientras se espera la
        etapa 4 lo puede hacer el personal de la clínica destino; cualquier
        otro requiere ser el creador o administrador.

        Args:
            referido_id: ID del referido
            usuario: Usuario que modifica
            cambios: Campos a cambiar

        Returns:
            El referido actualizado

        Raises:
            ValidationError: cambios vacíos o con campos no permitidos
            ReferidoNotFoundError: si no existe o está inactivo
            ReferidoCompletadoError: si ya completó la etapa 4
            PermisoDenegadoError: si no cumple la regla aplicable
            ClinicaNotFoundError: si la nueva clínica destino no es válida
        """
        if not cambios:
            raise ValidationError("No se indicaron cambios")

        no_permitidos = sorted(set(cambios) - CAMPOS_ACTUALIZABLES)
        if no_permitidos:
            raise ValidationError(
                "Campos no modificables en un referido",
                {"campos": no_permitidos}
            )

        for campo, valor in cambios.items():
            if valor is not None and not isinstance(valor, str):
                raise ValidationError(
                    f"El campo '{campo}' debe ser texto",
                    {"campo": campo}
                )

        if "clinica_destino_id" in cambios and not cambios["clinica_destino_id"]:
            raise ValidationError("La clínica destino no puede quedar vacía")

        referido = self._obtener_activo(referido_id)

        if referido.completado:
            raise ReferidoCompletadoError(referido_id)

        solo_documento_final = set(cambios) == {"ruta_documento_final"}
        if solo_documento_final and referido.etapa_pendiente == ETAPA_FINAL:
            veredicto = rbac_service.puede_actualizar_documento_final(usuario, referido)
        else:
            veredicto = rbac_service.puede_actualizar(usuario, referido)
        rbac_service.exigir(veredicto)

        valores: Dict[str, Any] = {}

        nueva_clinica = cambios.get("clinica_destino_id")
        if nueva_clinica and nueva_clinica != referido.clinica_destino_id:
            self._validar_clinica_destino(nueva_clinica)
            valores["clinica_destino_id"] = nueva_clinica

        texto = cambios.get("comentario")
        if texto and texto.strip():
            valores["comentario"] = anexar_comentario(
                referido.comentario, usuario.username, texto
            )

        for campo in ("ruta_documento_inicial", "ruta_documento_final"):
            if campo in cambios:
                valores[campo] = cambios[campo]

        valores["modificado_por"] = usuario.username
        valores["fecha_modificacion"] = datetime.now(timezone.utc)

        try:
            if not self.referido_repo.actualizar_condicional(
                referido_id, referido.version, valores
            ):
                self.session.rollback()
                raise ConflictoError(
                    f"El referido '{referido_id}' fue modificado durante la actualización",
                    "ESCRITURA_CONCURRENTE"
                )
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fallo_persistencia("actualizar", referido_id, e)

        self.session.refresh(referido)

        logger.info(
            f"Referido {referido_id} actualizado por {usuario.username}: "
            f"{', '.join(sorted(cambios))}"
        )
        return referido

    # ============================================
    # ESTADO (ACTIVO / INACTIVO)
    # ============================================

    def cambiar_estado(self, referido_id: str, usuario: Usuario, activo: bool) -> Referido:
        """
        Desactiva o restaura un referido. Repetir el estado actual no es error.

        Raises:
            ReferidoNotFoundError: si el referido no existe
            PermisoDenegadoError: si no es el creador ni administrador
        """
        referido = self.referido_repo.obtener_por_id(referido_id)
        if not referido:
            raise ReferidoNotFoundError(referido_id)

        rbac_service.exigir(rbac_service.puede_cambiar_estado(usuario, referido))

        if referido.activo == activo:
            return referido

        referido.activo = activo
        referido.modificado_por = usuario.username
        referido.fecha_modificacion = datetime.now(timezone.utc)
        referido.version += 1

        try:
            self.referido_repo.guardar(referido)
        except SQLAlchemyError as e:
            raise self._fallo_persistencia("cambiar_estado", referido_id, e)

        logger.info(
            f"Referido {referido_id} {'restaurado' if activo else 'desactivado'} "
            f"por {usuario.username}"
        )
        return referido

    # ============================================
    # CONSULTA INDIVIDUAL
    # ============================================

    def obtener_por_id(self, referido_id: str, usuario: Usuario) -> Referido:
        """
        Obtiene un referido activo si el usuario puede verlo.

        Raises:
            ReferidoNotFoundError: si no existe o está inactivo
            PermisoDenegadoError: si no es creador, administrador ni de la clínica destino
        """
        referido = self._obtener_activo(referido_id)
        rbac_service.exigir(rbac_service.puede_ver(usuario, referido))
        return referido
