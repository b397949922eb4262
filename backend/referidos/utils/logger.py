"""
Configuración de logging del sistema.
"""
import logging
from referidos.config import settings


def configurar_logging(nivel: str = None) -> logging.Logger:
    """
    Configura y retorna el logger principal del sistema.

    Args:
        nivel: Nivel de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    if nivel is None:
        nivel = settings.LOG_LEVEL

    nivel_num = getattr(logging, nivel.upper(), logging.INFO)

    formato = logging.Formatter(
        settings.LOG_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formato)

    logger = logging.getLogger('referidos')
    logger.setLevel(nivel_num)

    # Evitar duplicación de handlers
    if not logger.handlers:
        logger.addHandler(console_handler)

    return logger
