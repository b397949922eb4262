"""
Repositories para acceso a datos.
Abstraen las queries SQL y proporcionan una interfaz limpia.
"""
from referidos.repositories.base import BaseRepository
from referidos.repositories.referido_repo import ReferidoRepository
from referidos.repositories.paciente_repo import PacienteRepository
from referidos.repositories.clinica_repo import ClinicaRepository
from referidos.repositories.expediente_repo import ExpedienteRepository

__all__ = [
    "BaseRepository",
    "ReferidoRepository",
    "PacienteRepository",
    "ClinicaRepository",
    "ExpedienteRepository",
]
