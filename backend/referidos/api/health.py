"""
Endpoints de Health Check.
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from datetime import datetime

from referidos.config import settings
from referidos.core.database import check_database_health

router = APIRouter(
    prefix="/health",
    tags=["health"],
    responses={
        200: {"description": "Sistema saludable"},
        503: {"description": "Sistema no disponible"}
    }
)


@router.get(
    "",
    summary="Health Check General",
    description="Verifica el estado de la aplicación y su base de datos",
    response_model=None
)
async def health_check() -> JSONResponse:
    """
    Retorna 200 si la aplicación responde y la base de datos está disponible,
    503 en caso contrario.
    """
    db_health = check_database_health()
    saludable = db_health.get("status") == "healthy"

    return JSONResponse(
        status_code=status.HTTP_200_OK if saludable else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if saludable else "unhealthy",
            "timestamp": datetime.now().isoformat(),
            "version": settings.APP_VERSION,
            "environment": settings.APP_ENV,
            "database": db_health
        }
    )
