"""
Router principal que agrupa todos los sub-routers.
"""
from fastapi import APIRouter

from referidos.api import health
from referidos.api import referidos
from referidos.schemas.responses import ErrorHTTPResponse

api_router = APIRouter()

# Health Check (sin autenticación para load balancers)
api_router.include_router(health.router)

api_router.include_router(
    referidos.router,
    prefix="/referidos",
    tags=["Referidos"],
    responses={
        400: {"model": ErrorHTTPResponse, "description": "Datos inválidos"},
        403: {"model": ErrorHTTPResponse, "description": "Regla de autorización incumplida"},
        404: {"model": ErrorHTTPResponse, "description": "Recurso no encontrado o inactivo"},
        409: {"model": ErrorHTTPResponse, "description": "Conflicto con la etapa actual"},
    }
)
