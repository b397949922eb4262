"""
Utilidades compartidas.
"""
from referidos.utils.logger import configurar_logging

__all__ = [
    "configurar_logging",
]
