"""
Base repository implementation providing generic read and add operations.

Repositories never commit: callers group their writes with
``modelshop.infrastructure.database.unit_of_work.transaction`` so a
multi-row change is committed or rolled back as one unit.
"""

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from modelshop.domain.exceptions import DomainError, EntityNotFoundError, ErrorType

EntityType = TypeVar("EntityType", bound=SQLModel)


class DatabaseError(DomainError):
    """Raised when a database operation fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorType.REPOSITORY)


class BaseRepository(Generic[EntityType]):
    """
    Base repository class for one SQLModel table.

    Subclasses set ``entity_class``, ``entity_name`` and, when the primary
    key is not called ``id``, ``id_field``.
    """

    entity_class: type[EntityType]
    entity_name: str = "Entity"
    id_field: str = "id"

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, entity_id: Any) -> EntityType | None:
        """
        Get entity by primary key.

        Raises:
            DatabaseError: If database operation fails
        """
        try:
            return self.session.get(self.entity_class, entity_id)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during get_by_id: {str(e)}") from e

    def get_by_id_required(self, entity_id: Any) -> EntityType:
        """
        Get entity by primary key, raising if it does not exist.

        Raises:
            EntityNotFoundError: If entity not found
            DatabaseError: If database operation fails
        """
        entity = self.get_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError(self.entity_name, entity_id)
        return entity

    def get_all(self) -> list[EntityType]:
        try:
            statement = select(self.entity_class).order_by(
                getattr(self.entity_class, self.id_field)
            )
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during get_all: {str(e)}") from e

    def exists(self, entity_id: Any) -> bool:
        return self.get_by_id(entity_id) is not None

    def add(self, entity: EntityType) -> EntityType:
        """Stage an entity and flush so generated keys are populated."""
        try:
            self.session.add(entity)
            self.session.flush()
            return entity
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during add: {str(e)}") from e

    def add_all(self, entities: Iterable[EntityType]) -> list[EntityType]:
        entities = list(entities)
        try:
            self.session.add_all(entities)
            self.session.flush()
            return entities
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during add_all: {str(e)}") from e
