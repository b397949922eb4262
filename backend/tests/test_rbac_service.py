"""
Tests unitarios para las reglas de autorización de referidos.
"""
import pytest

from referidos.core.exceptions import PermisoDenegadoError
from referidos.core.rbac_service import (
    rbac_service,
    REGLA_CREAR,
    REGLA_CONFIRMAR_ETAPA_2,
    REGLA_APROBADOR_DISTINTO,
    REGLA_CONFIRMAR_ETAPA_4,
    REGLA_DOCUMENTO_FINAL_REQUERIDO,
    REGLA_ACTUALIZAR,
    REGLA_ACTUALIZAR_DOCUMENTO_FINAL,
    REGLA_VER,
)
from referidos.models.referido import Referido
from referidos.models.usuario import Usuario, RolEnum


def _usuario(username, rol=RolEnum.MEDICO, clinica_id=None, is_active=True):
    return Usuario(
        username=username,
        nombre_completo=username,
        rol=rol,
        clinica_id=clinica_id,
        is_active=is_active
    )


def _referido(creador, destino="clinica-b", **campos):
    return Referido(
        usuario_creador_id=creador.id,
        paciente_id="paciente-1",
        expediente_id="expediente-1",
        clinica_destino_id=destino,
        usuario_confirma_1=creador.id,
        creado_por=creador.username,
        **campos
    )


@pytest.fixture
def actores():
    return {
        "creador": _usuario("creador", RolEnum.MEDICO, "clinica-a"),
        "admin_x": _usuario("admin_x", RolEnum.ADMINISTRADOR),
        "admin_y": _usuario("admin_y", RolEnum.ADMINISTRADOR),
        "destino": _usuario("destino", RolEnum.ENFERMERIA, "clinica-b"),
        "ajeno": _usuario("ajeno", RolEnum.RECEPCION, "clinica-c"),
        "sin_clinica": _usuario("sin_clinica", RolEnum.MEDICO),
    }


class TestReglaCrear:
    """Tests para la regla de creación."""

    def test_personal_activo_puede_crear(self, actores):
        for nombre in ("creador", "destino", "ajeno", "admin_x"):
            assert rbac_service.puede_crear(actores[nombre]).permitido

    def test_usuario_inactivo_no_puede_crear(self):
        veredicto = rbac_service.puede_crear(_usuario("baja", is_active=False))
        assert not veredicto
        assert veredicto.regla == REGLA_CREAR


class TestReglasConfirmacion:
    """Tests para las reglas de confirmación por etapa."""

    def test_etapa_2_solo_administrador(self, actores):
        referido = _referido(actores["creador"])

        assert rbac_service.puede_confirmar_etapa(actores["admin_x"], referido, 2).permitido

        veredicto = rbac_service.puede_confirmar_etapa(actores["creador"], referido, 2)
        assert not veredicto.permitido
        assert veredicto.regla == REGLA_CONFIRMAR_ETAPA_2

    def test_etapa_3_exige_administrador_distinto(self, actores):
        referido = _referido(
            actores["creador"],
            confirmacion2=True,
            usuario_confirma_2=actores["admin_x"].id
        )

        veredicto = rbac_service.puede_confirmar_etapa(actores["admin_x"], referido, 3)
        assert not veredicto.permitido
        assert veredicto.regla == REGLA_APROBADOR_DISTINTO

        assert rbac_service.puede_confirmar_etapa(actores["admin_y"], referido, 3).permitido

    def test_etapa_4_rechaza_clinica_ajena(self, actores):
        referido = _referido(
            actores["creador"],
            confirmacion2=True,
            confirmacion3=True,
            ruta_documento_final="docs/final.pdf"
        )

        veredicto = rbac_service.puede_confirmar_etapa(actores["ajeno"], referido, 4)
        assert not veredicto.permitido
        assert veredicto.regla == REGLA_CONFIRMAR_ETAPA_4

    def test_etapa_4_exige_documento_final(self, actores):
        referido = _referido(actores["creador"], confirmacion2=True, confirmacion3=True)

        veredicto = rbac_service.puede_confirmar_etapa(actores["destino"], referido, 4)
        assert not veredicto.permitido
        assert veredicto.regla == REGLA_DOCUMENTO_FINAL_REQUERIDO

        referido.ruta_documento_final = "   "
        assert not rbac_service.puede_confirmar_etapa(actores["destino"], referido, 4).permitido

    def test_etapa_4_personal_destino_o_administrador(self, actores):
        referido = _referido(
            actores["creador"],
            confirmacion2=True,
            confirmacion3=True,
            ruta_documento_final="docs/final.pdf"
        )

        assert rbac_service.puede_confirmar_etapa(actores["destino"], referido, 4).permitido
        assert rbac_service.puede_confirmar_etapa(actores["admin_y"], referido, 4).permitido

    def test_usuario_sin_clinica_no_es_personal_destino(self, actores):
        referido = _referido(
            actores["creador"],
            destino=None,
            confirmacion2=True,
            confirmacion3=True,
            ruta_documento_final="docs/final.pdf"
        )
        assert not rbac_service.puede_confirmar_etapa(actores["sin_clinica"], referido, 4).permitido


class TestReglasModificacion:
    """Tests para actualización, cambio de estado y visualización."""

    def test_actualizar_creador_o_administrador(self, actores):
        referido = _referido(actores["creador"])

        assert rbac_service.puede_actualizar(actores["creador"], referido).permitido
        assert rbac_service.puede_actualizar(actores["admin_x"], referido).permitido

        veredicto = rbac_service.puede_actualizar(actores["destino"], referido)
        assert not veredicto.permitido
        assert veredicto.regla == REGLA_ACTUALIZAR

    def test_documento_final_personal_destino(self, actores):
        referido = _referido(actores["creador"], confirmacion2=True, confirmacion3=True)

        assert rbac_service.puede_actualizar_documento_final(actores["destino"], referido).permitido

        veredicto = rbac_service.puede_actualizar_documento_final(actores["ajeno"], referido)
        assert veredicto.regla == REGLA_ACTUALIZAR_DOCUMENTO_FINAL
        assert not veredicto.permitido

    def test_cambiar_estado_creador_o_administrador(self, actores):
        referido = _referido(actores["creador"])

        assert rbac_service.puede_cambiar_estado(actores["creador"], referido).permitido
        assert rbac_service.puede_cambiar_estado(actores["admin_y"], referido).permitido
        assert not rbac_service.puede_cambiar_estado(actores["destino"], referido).permitido

    def test_ver_referido(self, actores):
        referido = _referido(actores["creador"])

        assert rbac_service.puede_ver(actores["creador"], referido).permitido
        assert rbac_service.puede_ver(actores["destino"], referido).permitido
        assert rbac_service.puede_ver(actores["admin_x"], referido).permitido

        veredicto = rbac_service.puede_ver(actores["ajeno"], referido)
        assert not veredicto.permitido
        assert veredicto.regla == REGLA_VER


class TestExigir:
    """Tests para la conversión de veredictos en excepciones."""

    def test_exigir_lanza_con_regla(self, actores):
        referido = _referido(actores["creador"])
        veredicto = rbac_service.puede_ver(actores["ajeno"], referido)

        with pytest.raises(PermisoDenegadoError) as exc_info:
            rbac_service.exigir(veredicto)

        assert exc_info.value.regla == REGLA_VER
        assert exc_info.value.detalles == {"regla": REGLA_VER}

    def test_exigir_no_lanza_si_esta_permitido(self, actores):
        referido = _referido(actores["creador"])
        rbac_service.exigir(rbac_service.puede_ver(actores["creador"], referido))
