"""
Schemas de Referido.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime


# ============================================
# REQUEST SCHEMAS
# ============================================

class ReferidoCreate(BaseModel):
    """Datos para crear un referido."""
    paciente_id: str = Field(..., min_length=1)
    expediente_id: str = Field(..., min_length=1)
    clinica_destino_id: str = Field(..., min_length=1)
    comentario: Optional[str] = Field(default=None, max_length=2000)
    ruta_documento_inicial: Optional[str] = None


class ReferidoUpdate(BaseModel):
    """
    Cambios parciales sobre un referido.
    Solo se aceptan estos cuatro campos; cualquier otro es rechazado.
    """
    model_config = ConfigDict(extra="forbid")

    clinica_destino_id: Optional[str] = Field(default=None, min_length=1)
    comentario: Optional[str] = Field(default=None, max_length=2000)
    ruta_documento_inicial: Optional[str] = None
    ruta_documento_final: Optional[str] = None


class ConfirmarEtapaRequest(BaseModel):
    """Request para confirmar la etapa pendiente."""
    comentario: Optional[str] = Field(default=None, max_length=2000)
    etapa: Optional[int] = Field(default=None, ge=2, le=4)


class CambiarEstadoRequest(BaseModel):
    """Request para desactivar o restaurar un referido."""
    activo: bool


# ============================================
# RESPONSE SCHEMAS
# ============================================

class PacienteResumen(BaseModel):
    """Datos del paciente que acompañan al referido."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    nombres: str
    apellidos: str
    cui: Optional[str] = None


class ClinicaResumen(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    nombre: str


class UsuarioResumen(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    nombre_completo: str


class ReferidoResponse(BaseModel):
    """Schema de respuesta de referido."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    usuario_creador_id: str
    paciente_id: str
    expediente_id: str
    clinica_destino_id: str
    comentario: Optional[str] = None
    confirmacion1: bool
    confirmacion2: bool
    confirmacion3: bool
    confirmacion4: bool
    usuario_confirma_1: Optional[str] = None
    usuario_confirma_2: Optional[str] = None
    usuario_confirma_3: Optional[str] = None
    usuario_confirma_4: Optional[str] = None
    ruta_documento_inicial: Optional[str] = None
    ruta_documento_final: Optional[str] = None
    creado_por: str
    fecha_creacion: datetime
    modificado_por: Optional[str] = None
    fecha_modificacion: Optional[datetime] = None
    activo: bool
    etapa_pendiente: Optional[int] = None
    completado: bool = False

    # Datos relacionados
    paciente: Optional[PacienteResumen] = None
    clinica_destino: Optional[ClinicaResumen] = None
    usuario_creador: Optional[UsuarioResumen] = None


class PaginacionResponse(BaseModel):
    """Metadatos de paginación."""
    total: int
    pagina: int
    limite: int
    total_paginas: int


class ListaReferidosResponse(BaseModel):
    """Página de referidos."""
    items: List[ReferidoResponse]
    paginacion: PaginacionResponse
