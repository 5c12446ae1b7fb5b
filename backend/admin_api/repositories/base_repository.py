"""
Base repository.

Every resource repository is a `SqlRepository` bound to one model class and
one request-scoped `Session`.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.models import Base
from ..db.query_spec import FilterSpec, apply_filters
from ..errors import BadRequestError, InternalServerError, NotFoundError
from ..observability.logging import get_logger

ModelT = TypeVar("ModelT", bound=Base)

log = get_logger("repository")


class SqlRepository(Generic[ModelT]):
    """CRUD over a single table."""

    model: type[ModelT]
    # Used in "<label> not found" / "failed to create <label>" messages.
    label: str = "record"

    def __init__(self, db: Session):
        self.db = db

    def get(self, id: str) -> ModelT:
        """Get an entity by ID or raise `NotFoundError`."""
        obj = self.db.get(self.model, id)
        if obj is None:
            raise NotFoundError(f"{self.label} not found")
        return obj

    def list(self, spec: FilterSpec, params: Any) -> list[ModelT]:
        """List entities matching the non-empty filter parameters."""
        stmt = apply_filters(select(self.model), self.model, spec, params)
        return list(self.db.scalars(stmt).all())

    def create(self, values: dict[str, Any]) -> ModelT:
        obj = self.model(**values)
        self.db.add(obj)
        self._commit(f"failed to create {self.label}")
        return obj

    def update(self, id: str, values: dict[str, Any]) -> ModelT:
        """Overwrite the given fields of an existing entity."""
        obj = self.get(id)
        for k, v in values.items():
            setattr(obj, k, v)
        self._commit(f"failed to update {self.label}")
        return obj

    def delete(self, id: str) -> None:
        obj = self.get(id)
        self.db.delete(obj)
        self._commit(f"failed to delete {self.label}")

    def _commit(self, message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            log.warning("db_constraint_violation", action=message, model=self.model.__name__)
            raise BadRequestError(message=message, causes=[str(e.orig)]) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            log.error("db_commit_failed", action=message, model=self.model.__name__, error=str(e))
            raise InternalServerError.wrap(message, e) from e
