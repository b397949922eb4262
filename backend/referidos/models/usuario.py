"""
Modelo de Usuario del personal clínico.
"""

from typing import Optional
from datetime import datetime, timezone
from enum import Enum
import uuid

from sqlmodel import SQLModel, Field


# ============================================
# ENUMS
# ============================================

class RolEnum(str, Enum):
    """
    Roles disponibles en el sistema.

    - ADMINISTRADOR: aprueba las etapas 2 y 3 y puede intervenir en
      cualquier referido.
    - MEDICO, ENFERMERIA, RECEPCION: personal de clínica; crean referidos
      y confirman la etapa final cuando su clínica es la destino.
    """
    ADMINISTRADOR = "administrador"
    MEDICO = "medico"
    ENFERMERIA = "enfermeria"
    RECEPCION = "recepcion"


class PermisoEnum(str, Enum):
    """Permisos granulares sobre referidos."""

    REFERIDO_CREAR = "referido:crear"
    REFERIDO_APROBAR = "referido:aprobar"  # Etapas 2 y 3
    REFERIDO_VER_TODOS = "referido:ver_todos"
    REFERIDO_EDITAR_TODOS = "referido:editar_todos"
    REFERIDO_CAMBIAR_ESTADO_TODOS = "referido:cambiar_estado_todos"
    REFERIDO_CONFIRMAR_DESTINO_TODOS = "referido:confirmar_destino_todos"


# ============================================
# PERMISOS POR ROL
# ============================================

_PERMISOS_PERSONAL_CLINICA: set[PermisoEnum] = {
    PermisoEnum.REFERIDO_CREAR,
}

PERMISOS_POR_ROL: dict[RolEnum, set[PermisoEnum]] = {
    RolEnum.ADMINISTRADOR: set(PermisoEnum),  # Todos los permisos
    RolEnum.MEDICO: set(_PERMISOS_PERSONAL_CLINICA),
    RolEnum.ENFERMERIA: set(_PERMISOS_PERSONAL_CLINICA),
    RolEnum.RECEPCION: set(_PERMISOS_PERSONAL_CLINICA),
}


# ============================================
# MODELO USUARIO
# ============================================

class Usuario(SQLModel, table=True):
    """Modelo de usuario del sistema."""

    __tablename__ = "usuarios"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )
    username: str = Field(unique=True, index=True, max_length=50)
    nombre_completo: str = Field(max_length=255)
    rol: RolEnum = Field(default=RolEnum.RECEPCION)

    # Clínica a la que pertenece el usuario
    clinica_id: Optional[str] = Field(default=None, foreign_key="clinica.id", index=True)

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def permisos(self) -> set[PermisoEnum]:
        """Obtiene los permisos basados en el rol."""
        return PERMISOS_POR_ROL.get(self.rol, set())

    def tiene_permiso(self, permiso: PermisoEnum) -> bool:
        """Verifica si el usuario tiene un permiso específico."""
        return permiso in self.permisos

    def pertenece_a_clinica(self, clinica_id: Optional[str]) -> bool:
        """Indica si el usuario es personal de la clínica indicada."""
        return self.clinica_id is not None and self.clinica_id == clinica_id

    def __repr__(self) -> str:
        return f"Usuario(id={self.id}, username={self.username}, rol={self.rol})"
