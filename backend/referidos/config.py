"""
Configuración centralizada de la aplicación.
Todas las configuraciones en un solo lugar para fácil mantenimiento.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Configuración principal del sistema."""

    # ============================================
    # APLICACIÓN
    # ============================================
    APP_TITLE: str = "Sistema de Referidos entre Clínicas"
    APP_DESCRIPTION: str = "Gestión de referidos de pacientes con aprobación en cuatro etapas"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    # ============================================
    # BASE DE DATOS
    # ============================================
    DATABASE_URL: str = "sqlite:///./referidos.db"

    # ============================================
    # CORS
    # ============================================
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: List[str] = ["*"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]

    # ============================================
    # JWT
    # ============================================
    JWT_SECRET_KEY: str = "cambiar-en-produccion"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # ============================================
    # PAGINACIÓN
    # ============================================
    PAGINACION_LIMITE_DEFAULT: int = 10
    PAGINACION_LIMITE_MAXIMO: int = 100

    # ============================================
    # LOGGING
    # ============================================
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Instancia global de configuración
settings = Settings()
