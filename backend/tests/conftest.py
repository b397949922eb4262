"""
Fixtures de pytest para tests.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine
from sqlmodel.pool import StaticPool

import referidos.models  # noqa: F401
from referidos.core.database import get_session
from referidos.models.usuario import Usuario, RolEnum
from referidos.services.auth_service import auth_service
from main import app


# Engine para tests (SQLite en memoria)
@pytest.fixture(name="engine")
def engine_fixture():
    """Crea un engine de test en memoria."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Crea una sesión de test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session):
    """Crea un cliente de test con sesión inyectada."""
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


# Fixtures de datos de prueba

@pytest.fixture
def crear_clinica(session):
    """Factory fixture para crear clínicas."""
    from referidos.models.clinica import Clinica

    def _crear_clinica(nombre="Clínica Test", activo=True):
        clinica = Clinica(nombre=nombre, activo=activo)
        session.add(clinica)
        session.commit()
        session.refresh(clinica)
        return clinica

    return _crear_clinica


@pytest.fixture
def crear_usuario(session):
    """Factory fixture para crear usuarios."""

    def _crear_usuario(username, rol=RolEnum.MEDICO, clinica_id=None, is_active=True):
        usuario = Usuario(
            username=username,
            nombre_completo=username.replace("_", " ").title(),
            rol=rol,
            clinica_id=clinica_id,
            is_active=is_active
        )
        session.add(usuario)
        session.commit()
        session.refresh(usuario)
        return usuario

    return _crear_usuario


@pytest.fixture
def crear_paciente(session):
    """Factory fixture para crear pacientes."""
    from referidos.models.paciente import Paciente

    def _crear_paciente(clinica_id, nombres="Juan", apellidos="Pérez", cui="1234567890101", activo=True):
        paciente = Paciente(
            nombres=nombres,
            apellidos=apellidos,
            cui=cui,
            clinica_id=clinica_id,
            activo=activo
        )
        session.add(paciente)
        session.commit()
        session.refresh(paciente)
        return paciente

    return _crear_paciente


@pytest.fixture
def crear_expediente(session):
    """Factory fixture para crear expedientes."""
    from referidos.models.expediente import Expediente

    def _crear_expediente(paciente_id, numero="EXP-001", activo=True):
        expediente = Expediente(paciente_id=paciente_id, numero=numero, activo=activo)
        session.add(expediente)
        session.commit()
        session.refresh(expediente)
        return expediente

    return _crear_expediente


@pytest.fixture
def escenario(crear_clinica, crear_usuario, crear_paciente, crear_expediente):
    """
    Red de tres clínicas con su personal.

    - clinica_a: origen del paciente, con un médico creador
    - clinica_b: destino, con personal de enfermería
    - clinica_c: clínica ajena al referido
    - admin_x, admin_y: administradores distintos
    """
    clinica_a = crear_clinica(nombre="Clínica A")
    clinica_b = crear_clinica(nombre="Clínica B")
    clinica_c = crear_clinica(nombre="Clínica C")

    creador = crear_usuario("medico_a", RolEnum.MEDICO, clinica_a.id)
    personal_b = crear_usuario("enfermera_b", RolEnum.ENFERMERIA, clinica_b.id)
    personal_c = crear_usuario("medico_c", RolEnum.MEDICO, clinica_c.id)
    admin_x = crear_usuario("admin_x", RolEnum.ADMINISTRADOR, clinica_a.id)
    admin_y = crear_usuario("admin_y", RolEnum.ADMINISTRADOR)

    paciente = crear_paciente(clinica_a.id)
    expediente = crear_expediente(paciente.id)

    return {
        "clinica_a": clinica_a,
        "clinica_b": clinica_b,
        "clinica_c": clinica_c,
        "creador": creador,
        "personal_b": personal_b,
        "personal_c": personal_c,
        "admin_x": admin_x,
        "admin_y": admin_y,
        "paciente": paciente,
        "expediente": expediente,
    }


@pytest.fixture
def crear_referido(session, escenario):
    """Factory fixture que crea referidos a través del servicio."""
    from referidos.services.referido_service import ReferidoService

    def _crear_referido(usuario=None, paciente=None, expediente=None, clinica_destino=None, **extra):
        paciente = paciente or escenario["paciente"]
        datos = {
            "paciente_id": paciente.id,
            "expediente_id": (expediente or escenario["expediente"]).id,
            "clinica_destino_id": (clinica_destino or escenario["clinica_b"]).id,
            **extra,
        }
        service = ReferidoService(session)
        return service.crear(datos, usuario or escenario["creador"])

    return _crear_referido


@pytest.fixture
def avanzar_referido(session, escenario):
    """
    Confirma etapas hasta dejar el referido con `hasta` etapas cumplidas.

    Usa admin_x para la etapa 2, admin_y para la 3 y personal de la
    clínica destino para la 4 (adjuntando el documento final).
    """
    from referidos.services.referido_service import ReferidoService

    def _avanzar(referido, hasta):
        service = ReferidoService(session)
        if hasta >= 2:
            referido = service.confirmar_etapa(referido.id, escenario["admin_x"])
        if hasta >= 3:
            referido = service.confirmar_etapa(referido.id, escenario["admin_y"])
        if hasta >= 4:
            referido = service.actualizar(
                referido.id,
                escenario["personal_b"],
                {"ruta_documento_final": "documentos/final.pdf"}
            )
            referido = service.confirmar_etapa(referido.id, escenario["personal_b"])
        return referido

    return _avanzar


@pytest.fixture
def auth_headers():
    """Genera el header Authorization con un JWT válido para el usuario."""

    def _auth_headers(usuario: Usuario):
        token = auth_service.create_access_token(usuario)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
