"""
Endpoints de Referidos.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from typing import List, Optional

from referidos.config import settings
from referidos.core.database import get_session
from referidos.core.auth_dependencies import get_current_user
from referidos.core.exceptions import (
    BaseAppException,
    ValidationError,
    NotFoundError,
    PermisoDenegadoError,
    ConflictoError,
)
from referidos.models.usuario import Usuario
from referidos.models.referido import Referido
from referidos.schemas.referido import (
    ReferidoCreate,
    ReferidoUpdate,
    ConfirmarEtapaRequest,
    CambiarEstadoRequest,
    ReferidoResponse,
    ListaReferidosResponse,
    PaginacionResponse,
)
from referidos.schemas.clinica import ClinicaResponse
from referidos.services.referido_service import ReferidoService
from referidos.services.consulta_service import ConsultaReferidoService

router = APIRouter()


def _error_http(error: BaseAppException) -> HTTPException:
    """Traduce una excepción de la aplicación a su respuesta HTTP."""
    if isinstance(error, ValidationError):
        codigo = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, NotFoundError):
        codigo = status.HTTP_404_NOT_FOUND
    elif isinstance(error, PermisoDenegadoError):
        codigo = status.HTTP_403_FORBIDDEN
    elif isinstance(error, ConflictoError):
        codigo = status.HTTP_409_CONFLICT
    else:
        codigo = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=codigo, detail=error.to_dict())


def _respuesta(referido: Referido) -> ReferidoResponse:
    return ReferidoResponse.model_validate(referido)


# ============================================
# CONSULTAS
# ============================================

@router.get("/", response_model=ListaReferidosResponse)
def listar_referidos(
    filtro: Optional[str] = None,
    busqueda: Optional[str] = None,
    pagina: int = 1,
    limite: int = settings.PAGINACION_LIMITE_DEFAULT,
    current_user: Usuario = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """
    Lista referidos visibles para el usuario.

    Filtros: pendientes, recibidos, completados, todos (por defecto).
    La búsqueda compara nombres, apellidos y CUI del paciente.
    """
    service = ConsultaReferidoService(session)
    try:
        resultado = service.listar(filtro, current_user, busqueda, pagina, limite)
    except BaseAppException as e:
        raise _error_http(e)

    return ListaReferidosResponse(
        items=[_respuesta(r) for r in resultado.items],
        paginacion=PaginacionResponse(**resultado.paginacion)
    )


@router.get("/clinicas", response_model=List[ClinicaResponse])
def listar_clinicas(
    current_user: Usuario = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Clínicas activas disponibles como destino."""
    service = ConsultaReferidoService(session)
    return [ClinicaResponse.model_validate(c) for c in service.listar_clinicas_activas()]


@router.get("/paciente/{paciente_id}", response_model=List[ReferidoResponse])
def historial_paciente(
    paciente_id: str,
    current_user: Usuario = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Historial de referidos activos de un paciente."""
    service = ConsultaReferidoService(session)
    return [_respuesta(r) for r in service.historial_paciente(paciente_id)]


@router.get("/{referido_id}", response_model=ReferidoResponse)
def obtener_referido(
    referido_id: str,
    current_user: Usuario = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Obtiene un referido si el usuario tiene acceso."""
    service = ReferidoService(session)
    try:
        referido = service.obtener_por_id(referido_id, current_user)
    except BaseAppException as e:
        raise _error_http(e)
    return _respuesta(referido)


# ============================================
# OPERACIONES
# ============================================

@router.post("/", response_model=ReferidoResponse, status_code=status.HTTP_201_CREATED)
def crear_referido(
    request: ReferidoCreate,
    current_user: Usuario = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Crea un referido; la etapa 1 queda confirmada por el creador."""
    service = ReferidoService(session)
    try:
        referido = service.crear(request, current_user)
    except BaseAppException as e:
        raise _error_http(e)
    return _respuesta(referido)


@router.put("/{referido_id}/confirmar", response_model=ReferidoResponse)
def confirmar_etapa(
    referido_id: str,
    request: Optional[ConfirmarEtapaRequest] = None,
    current_user: Usuario = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """
    Confirma la etapa pendiente del referido.

    Si se indica `etapa` y no es la pendiente responde 409.
    """
    request = request or ConfirmarEtapaRequest()
    service = ReferidoService(session)
    try:
        referido = service.confirmar_etapa(
            referido_id,
            current_user,
            comentario=request.comentario,
            etapa=request.etapa
        )
    except BaseAppException as e:
        raise _error_http(e)
    return _respuesta(referido)


@router.put("/{referido_id}/estado", response_model=ReferidoResponse)
def cambiar_estado(
    referido_id: str,
    request: CambiarEstadoRequest,
    current_user: Usuario = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Desactiva o restaura un referido."""
    service = ReferidoService(session)
    try:
        referido = service.cambiar_estado(referido_id, current_user, request.activo)
    except BaseAppException as e:
        raise _error_http(e)
    return _respuesta(referido)


@router.put("/{referido_id}", response_model=ReferidoResponse)
def actualizar_referido(
    referido_id: str,
    request: ReferidoUpdate,
    current_user: Usuario = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Actualiza clínica destino, comentario o rutas de documentos."""
    service = ReferidoService(session)
    try:
        referido = service.actualizar(
            referido_id,
            current_user,
            request.model_dump(exclude_unset=True)
        )
    except BaseAppException as e:
        raise _error_http(e)
    return _respuesta(referido)
