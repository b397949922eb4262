"""
Excepciones personalizadas del sistema.
Proporciona excepciones semánticas para mejor manejo de errores.
"""
from typing import Optional, Dict, Any


class BaseAppException(Exception):
    """
    Excepción base de la aplicación.
    Todas las excepciones personalizadas heredan de esta.
    """
    def __init__(
        self,
        message: str,
        code: str = "ERROR",
        detalles: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.detalles = detalles or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convierte la excepción a diccionario para respuestas de la API."""
        return {
            "codigo": self.code,
            "mensaje": self.message,
            "detalles": self.detalles,
        }


# ============================================
# ERRORES DE VALIDACIÓN
# ============================================

class ValidationError(BaseAppException):
    """Error de validación de datos."""
    def __init__(self, message: str, detalles: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", detalles)


# ============================================
# ERRORES DE NO ENCONTRADO
# ============================================

class NotFoundError(BaseAppException):
    """Recurso no encontrado."""
    def __init__(self, resource: str, identifier: str):
        super().__init__(
            f"{resource} con identificador '{identifier}' no encontrado",
            "NOT_FOUND",
            {"recurso": resource, "identificador": identifier}
        )
        self.resource = resource
        self.identifier = identifier


class ReferidoNotFoundError(NotFoundError):
    """Referido no encontrado o inactivo."""
    def __init__(self, referido_id: str):
        super().__init__("Referido", referido_id)


class PacienteNotFoundError(NotFoundError):
    """Paciente no encontrado o inactivo."""
    def __init__(self, paciente_id: str):
        super().__init__("Paciente", paciente_id)


class ExpedienteNotFoundError(NotFoundError):
    """Expediente no encontrado o no pertenece al paciente."""
    def __init__(self, expediente_id: str):
        super().__init__("Expediente", expediente_id)


class ClinicaNotFoundError(NotFoundError):
    """Clínica no encontrada, inactiva o sin personal activo."""
    def __init__(self, clinica_id: str, motivo: Optional[str] = None):
        super().__init__("Clínica", clinica_id)
        if motivo:
            self.message = f"{self.message}: {motivo}"
            self.detalles["motivo"] = motivo


# ============================================
# ERRORES DE PERMISOS
# ============================================

class PermisoDenegadoError(BaseAppException):
    """El usuario no cumple la regla de autorización requerida."""
    def __init__(self, regla: str, message: str):
        super().__init__(message, "FORBIDDEN", {"regla": regla})
        self.regla = regla


# ============================================
# ERRORES DE CONFLICTO DE ESTADO
# ============================================

class ConflictoError(BaseAppException):
    """
    La operación no es compatible con el estado actual del referido.

    Cubre etapas ya confirmadas, etapas fuera de orden, referidos
    completados y escrituras concurrentes perdidas.
    """
    def __init__(
        self,
        message: str,
        motivo: str,
        etapa: Optional[int] = None
    ):
        detalles: Dict[str, Any] = {"motivo": motivo}
        if etapa is not None:
            detalles["etapa"] = etapa
        super().__init__(message, "CONFLICT", detalles)
        self.motivo = motivo
        self.etapa = etapa


class ReferidoCompletadoError(ConflictoError):
    """El referido ya completó la etapa final y no admite cambios."""
    def __init__(self, referido_id: str):
        super().__init__(
            f"El referido '{referido_id}' ya fue completado",
            "REFERIDO_COMPLETADO"
        )


class ConcurrenciaError(ConflictoError):
    """Otra confirmación modificó el referido entre la lectura y la escritura."""
    def __init__(self, referido_id: str, etapa: int):
        super().__init__(
            f"La etapa {etapa} del referido '{referido_id}' fue confirmada por otra solicitud",
            "ESCRITURA_CONCURRENTE",
            etapa
        )


# ============================================
# ERRORES INTERNOS
# ============================================

class ErrorInterno(BaseAppException):
    """Fallo inesperado de persistencia u otra dependencia."""
    def __init__(self, message: str = "Error interno del servidor"):
        super().__init__(message, "INTERNAL_ERROR")
