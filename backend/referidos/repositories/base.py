"""
Repository Base.
Proporciona operaciones comunes de lectura y escritura.
"""
from typing import TypeVar, Generic, Optional, Type
from sqlmodel import Session

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Repository base genérico.

    Las operaciones `agregar` no confirman la transacción: quien las usa
    decide cuándo hacer commit. `guardar` sí confirma.

    Uso:
        class MiRepository(BaseRepository[MiModelo]):
            def __init__(self, session: Session):
                super().__init__(session, MiModelo)
    """

    def __init__(self, session: Session, model: Type[T]):
        """
        Inicializa el repository.

        Args:
            session: Sesión de base de datos
            model: Clase del modelo SQLModel
        """
        self.session = session
        self.model = model

    def obtener_por_id(self, id: str) -> Optional[T]:
        """
        Obtiene un registro por ID, sin importar si está activo.

        Args:
            id: ID del registro

        Returns:
            El registro o None si no existe
        """
        return self.session.get(self.model, id)

    def agregar(self, obj: T) -> T:
        """
        Agrega un registro a la transacción en curso sin confirmarla.

        Args:
            obj: El registro a agregar

        Returns:
            El mismo registro, ya con flush hacia la base de datos
        """
        self.session.add(obj)
        self.session.flush()
        return obj

    def guardar(self, obj: T) -> T:
        """
        Guarda cambios en un registro y confirma la transacción.

        Args:
            obj: El registro a guardar

        Returns:
            El registro guardado
        """
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)
        return obj

