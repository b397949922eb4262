"""
Modelos de datos del sistema.
Re-exporta todos los modelos para imports simplificados.
"""
from referidos.models.enums import (
    FiltroReferidoEnum,
    EtapaReferidoEnum,
)

from referidos.models.clinica import Clinica
from referidos.models.usuario import Usuario, RolEnum, PermisoEnum, PERMISOS_POR_ROL
from referidos.models.paciente import Paciente
from referidos.models.expediente import Expediente
from referidos.models.referido import Referido, ETAPA_FINAL

__all__ = [
    # Enums
    "FiltroReferidoEnum",
    "EtapaReferidoEnum",
    "RolEnum",
    "PermisoEnum",
    "PERMISOS_POR_ROL",
    # Models
    "Clinica",
    "Usuario",
    "Paciente",
    "Expediente",
    "Referido",
    "ETAPA_FINAL",
]
