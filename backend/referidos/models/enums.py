"""
Enumeraciones del sistema de referidos.
"""
from enum import Enum


class FiltroReferidoEnum(str, Enum):
    """Categorías de listado de referidos."""
    PENDIENTES = "pendientes"
    RECIBIDOS = "recibidos"
    COMPLETADOS = "completados"
    TODOS = "todos"


class EtapaReferidoEnum(int, Enum):
    """
    Etapas de la cadena de aprobación.

    La etapa 1 se cumple al crear el referido. Las etapas 2 y 3 las
    confirman administradores distintos y la 4 la clínica destino.
    """
    CREACION = 1
    APROBACION_ADMIN_1 = 2
    APROBACION_ADMIN_2 = 3
    APROBACION_DESTINO = 4
