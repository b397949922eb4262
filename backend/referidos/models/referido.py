"""
Modelo de Referido.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime, timezone
import uuid

from referidos.models.enums import EtapaReferidoEnum

if TYPE_CHECKING:
    from referidos.models.paciente import Paciente
    from referidos.models.clinica import Clinica
    from referidos.models.usuario import Usuario


ETAPA_FINAL = EtapaReferidoEnum.APROBACION_DESTINO.value


class Referido(SQLModel, table=True):
    """
    Modelo de Referido.

    Solicitud para trasladar la atención de un paciente desde la clínica
    que lo atiende hacia una clínica destino. El traslado solo se aplica
    al confirmarse las cuatro etapas de aprobación, en orden.

    Invariantes:
    - Las banderas de confirmación solo pasan de False a True.
    - confirmacionN implica confirmacion(N-1).
    - usuario_confirma_3 es distinto de usuario_confirma_2.
    - confirmacion4 implica ruta_documento_final no vacía.
    - Con confirmacion4 el referido queda cerrado; solo cambian activo y
      los campos de auditoría.

    `version` aumenta con cada escritura; las escrituras condicionales
    solo se aplican si coincide con la versión leída.
    """
    __tablename__ = "referido"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True
    )
    usuario_creador_id: str = Field(foreign_key="usuarios.id", index=True)
    paciente_id: str = Field(foreign_key="paciente.id", index=True)
    expediente_id: str = Field(foreign_key="expediente.id")
    clinica_destino_id: str = Field(foreign_key="clinica.id", index=True)
    comentario: Optional[str] = Field(default=None)

    # Cadena de aprobación
    confirmacion1: bool = Field(default=True)
    confirmacion2: bool = Field(default=False)
    confirmacion3: bool = Field(default=False)
    confirmacion4: bool = Field(default=False)
    usuario_confirma_1: Optional[str] = Field(default=None)
    usuario_confirma_2: Optional[str] = Field(default=None)
    usuario_confirma_3: Optional[str] = Field(default=None)
    usuario_confirma_4: Optional[str] = Field(default=None)

    # Documentos (rutas opacas del almacenamiento de archivos)
    ruta_documento_inicial: Optional[str] = Field(default=None)
    ruta_documento_final: Optional[str] = Field(default=None)

    # Auditoría
    creado_por: str
    fecha_creacion: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    modificado_por: Optional[str] = Field(default=None)
    fecha_modificacion: Optional[datetime] = Field(default=None)

    activo: bool = Field(default=True, index=True)
    version: int = Field(default=1)

    # Relaciones
    paciente: Optional["Paciente"] = Relationship()
    clinica_destino: Optional["Clinica"] = Relationship()
    usuario_creador: Optional["Usuario"] = Relationship()

    # ============================================
    # ESTADO DE LA CADENA
    # ============================================

    @property
    def etapa_pendiente(self) -> Optional[int]:
        """
        Menor etapa >= 2 que aún no está confirmada.

        Returns:
            Número de etapa, o None si el referido está completado
        """
        for etapa in range(EtapaReferidoEnum.APROBACION_ADMIN_1.value, ETAPA_FINAL + 1):
            if not getattr(self, f"confirmacion{etapa}"):
                return etapa
        return None

    @property
    def completado(self) -> bool:
        return self.confirmacion4

    @property
    def tiene_documento_final(self) -> bool:
        return bool(self.ruta_documento_final and self.ruta_documento_final.strip())

    def __repr__(self) -> str:
        return (
            f"Referido(id={self.id}, paciente={self.paciente_id}, "
            f"destino={self.clinica_destino_id}, etapa_pendiente={self.etapa_pendiente})"
        )
