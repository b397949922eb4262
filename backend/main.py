"""
API Principal del Sistema de Referidos entre Clínicas.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from referidos.config import settings
from referidos.core.database import create_db_and_tables
from referidos.api.router import api_router
from referidos.utils.logger import configurar_logging

logger = configurar_logging()

# Crear aplicación
app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION
)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


# ============================================
# EVENTOS DE INICIO
# ============================================

@app.on_event("startup")
def on_startup():
    create_db_and_tables()
    logger.info(f"{settings.APP_TITLE} v{settings.APP_VERSION} iniciado ({settings.APP_ENV})")


app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
