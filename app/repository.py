"""
Storage gateway for the resource models.

``Repository`` wraps one SQLAlchemy model and exposes the operations the
services need: ``insert``, ``find_by_id``, ``find_page``, ``count_where``,
``exists_where``, ``update`` and ``delete``. Every write is a single
transaction that is rolled back when the database rejects it; the SQLAlchemy
exception is re-raised for the service layer to classify.
"""

from typing import Any, Generic, Iterable, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from app import db
from app.models import MAX_ROW_ID

M = TypeVar("M", bound=db.Model)


class Repository(Generic[M]):
    """Repository for one model with ``id`` and ``created_at`` columns."""

    def __init__(self, model: type[M], eager: Iterable[Any] = ()) -> None:
        self.model = model
        # Relationships joined into every read, e.g. Task.user.
        self.eager = tuple(eager)

    def _select(self):
        stmt = select(self.model)
        for relationship in self.eager:
            stmt = stmt.options(joinedload(relationship))
        # Refresh identity-mapped rows so eager loads are always applied.
        return stmt.execution_options(populate_existing=True)

    def _where(self, stmt, filters: dict[str, Any]):
        for name, value in filters.items():
            stmt = stmt.where(getattr(self.model, name) == value)
        return stmt

    def _commit(self) -> None:
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

    def insert(self, **values: Any) -> M:
        """Insert a new row and return it reloaded with its relationships."""
        instance = self.model(**values)
        db.session.add(instance)
        try:
            db.session.flush()
        except SQLAlchemyError:
            db.session.rollback()
            raise
        instance_id = instance.id
        self._commit()
        return self.find_by_id(instance_id)

    def find_by_id(self, instance_id: int) -> M | None:
        stmt = self._select().where(self.model.id == instance_id)
        return db.session.scalars(stmt).first()

    def find_page(self, filters: dict[str, Any], offset: int, limit: int) -> list[M]:
        """Return rows newest-first, ties broken by ascending id."""
        if offset > MAX_ROW_ID:
            # No row lies past the INTEGER range.
            return []
        stmt = (
            self._where(self._select(), filters)
            .order_by(self.model.created_at.desc(), self.model.id.asc())
            .offset(offset)
            .limit(limit)
        )
        return list(db.session.scalars(stmt).unique())

    def count_where(self, **filters: Any) -> int:
        stmt = self._where(select(func.count()).select_from(self.model), filters)
        return db.session.scalar(stmt) or 0

    def exists_where(self, **filters: Any) -> bool:
        return self.count_where(**filters) > 0

    def update(self, instance: M, changes: dict[str, Any]) -> M:
        """Apply *changes* to *instance* in one commit and return it reloaded."""
        instance_id = instance.id
        for name, value in changes.items():
            setattr(instance, name, value)
        self._commit()
        return self.find_by_id(instance_id)

    def delete(self, instance: M) -> None:
        db.session.delete(instance)
        self._commit()
