"""
Base repository for the data access layer.

Repositories translate store failures into domain errors:

* missing rows                      -> AppError.not_found
* unique constraint violations      -> AppError.bad_request("<field> is already in use")
* foreign key violations            -> AppError.bad_request
* anything else                     -> re-raised unchanged
"""

import logging
import re
from typing import Any, Generic, List, Mapping, Optional, Type, TypeVar
from uuid import UUID
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from abc import ABC

from app.exceptions import AppError

ModelType = TypeVar("ModelType")

logger = logging.getLogger("mealtrack.repositories")

# SQLSTATE codes (PostgreSQL)
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: \w+\.(\w+)")


def _sqlstate(exc: IntegrityError) -> Optional[str]:
    orig = exc.orig
    # psycopg2 exposes pgcode, psycopg 3 sqlstate
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def is_unique_violation(exc: IntegrityError) -> bool:
    return _sqlstate(exc) == UNIQUE_VIOLATION or "UNIQUE constraint failed" in str(
        exc.orig
    )


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    return _sqlstate(exc) == FOREIGN_KEY_VIOLATION or (
        "FOREIGN KEY constraint failed" in str(exc.orig)
    )


def violated_field(exc: IntegrityError, table: str) -> Optional[str]:
    """Column named by a unique violation, if the driver reports it"""
    diag = getattr(exc.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        prefix = f"uq_{table}_"
        if constraint.startswith(prefix):
            return constraint[len(prefix):]
        return constraint
    match = _SQLITE_UNIQUE.search(str(exc.orig))
    return match.group(1) if match else None


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common CRUD operations.
    Subclasses set ``entity_name`` and the foreign key messages.
    """

    entity_name = "Record"
    # Raised when a write references a row that does not exist
    missing_reference_message = "Referenced record does not exist"
    missing_reference_field: Optional[str] = None
    # Raised when deleting a row other rows still reference
    in_use_message = "Record is still in use"

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def not_found(self) -> AppError:
        return AppError.not_found(f"{self.entity_name} not found")

    def find_by_id(self, entity_id: UUID) -> ModelType:
        """
        Get entity by ID.

        Raises:
            AppError: NOT_FOUND when no row matches
        """
        entity = self.db.get(self.model, entity_id)
        if entity is None:
            raise self.not_found()
        return entity

    def find_all(self, skip: int = 0, limit: Optional[int] = None) -> List[ModelType]:
        """Get all entities, oldest first"""
        query = self.db.query(self.model).order_by(self.model.created_at, self.model.id)
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def create(self, entity: ModelType) -> ModelType:
        """Insert a new entity"""
        self.db.add(entity)
        self._commit(entity)
        return entity

    def update_by_id(self, entity_id: UUID, values: Mapping[str, Any]) -> ModelType:
        """Apply a partial update"""
        entity = self.find_by_id(entity_id)
        for key, value in values.items():
            setattr(entity, key, value)
        self._commit(entity)
        return entity

    def delete_by_id(self, entity_id: UUID) -> None:
        """
        Delete entity by ID.

        Raises:
            AppError: NOT_FOUND when no row matches,
                BAD_REQUEST while other rows still reference it
        """
        entity = self.find_by_id(entity_id)
        self.db.delete(entity)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            self._raise_domain_error(exc, deleting=True)
            raise
        except StaleDataError as exc:
            self.db.rollback()
            raise self.not_found() from exc

    def _commit(self, entity: ModelType) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            self._raise_domain_error(exc, deleting=False)
            raise
        except StaleDataError as exc:
            # The row disappeared between read and write
            self.db.rollback()
            raise self.not_found() from exc
        self.db.refresh(entity)

    def _raise_domain_error(self, exc: IntegrityError, deleting: bool) -> None:
        """Raise the domain error for ``exc``; return if it has none"""
        if is_unique_violation(exc):
            field = violated_field(exc, self.model.__tablename__) or "Field"
            logger.info(f"unique_violation table={self.model.__tablename__} field={field}")
            raise AppError.bad_request(f"{field} is already in use", field=field) from exc
        if is_foreign_key_violation(exc):
            if deleting:
                raise AppError.bad_request(self.in_use_message) from exc
            raise AppError.bad_request(
                self.missing_reference_message, field=self.missing_reference_field
            ) from exc
