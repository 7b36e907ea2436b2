"""Generic SQLModel repository for user-owned records."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Generic, Optional, Sequence, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, select

from ...errors import DuplicateEntryError
from ...models._time import utcnow
from ..database import SessionFactory, is_unique_violation

RecordT = TypeVar("RecordT", bound=SQLModel)


class SQLModelRecordRepository(Generic[RecordT]):
    """CRUD over a table with ``id``, ``user_id`` and ``updated_at`` columns.

    ``order_by`` names the columns used for listings, newest first, and
    ``date_field`` the column range queries filter on.
    """

    def __init__(
        self,
        model: type[RecordT],
        session_factory: SessionFactory,
        *,
        order_by: Sequence[str] = ("created_at",),
        date_field: str = "date",
        immutable_fields: Sequence[str] = (),
    ):
        self.model = model
        self.session_factory = session_factory
        self.order_by = tuple(order_by)
        self.date_field = date_field
        self.immutable_fields = {"id", "user_id", "created_at", *immutable_fields}

    def _column(self, name: str):
        return getattr(self.model, name)

    def _owned(self, user_id: int):
        return select(self.model).where(self._column("user_id") == user_id)

    def list_for_user(self, *, user_id: int, limit: Optional[int] = None) -> list[RecordT]:
        statement = self._owned(user_id).order_by(
            *(self._column(name).desc() for name in (*self.order_by, "id"))
        )
        if limit is not None:
            statement = statement.limit(limit)
        with self.session_factory() as session:
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_between(
        self, start: date | datetime, end: date | datetime, *, user_id: int
    ) -> list[RecordT]:
        """Records whose date column lies in ``[start, end]``, newest first."""
        column = self._column(self.date_field)
        statement = (
            self._owned(user_id)
            .where(column >= start)
            .where(column <= end)
            .order_by(column.desc())
        )
        with self.session_factory() as session:
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get(self, record_id: int, *, user_id: int) -> Optional[RecordT]:
        with self.session_factory() as session:
            obj = session.exec(self._owned(user_id).where(self._column("id") == record_id)).first()
            if obj:
                session.expunge(obj)
            return obj

    def find_one(self, *, user_id: int, **filters: Any) -> Optional[RecordT]:
        """First record matching equality ``filters``."""
        statement = self._owned(user_id)
        for name, value in filters.items():
            statement = statement.where(self._column(name) == value)
        with self.session_factory() as session:
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def _commit(self, session, obj: RecordT) -> RecordT:
        session.add(obj)
        try:
            session.commit()
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            raise DuplicateEntryError(
                f"{self.model.__name__} conflicts with an existing record"
            ) from exc
        session.refresh(obj)
        session.expunge(obj)
        return obj

    def create(self, record: RecordT, *, user_id: int) -> RecordT:
        """Insert ``record`` for ``user_id``.

        Raises:
            DuplicateEntryError: a unique constraint rejected the row.
        """
        with self.session_factory() as session:
            record.user_id = user_id  # type: ignore[attr-defined]
            return self._commit(session, record)

    def update(self, record_id: int, changes: dict[str, Any], *, user_id: int) -> Optional[RecordT]:
        with self.session_factory() as session:
            obj = session.exec(self._owned(user_id).where(self._column("id") == record_id)).first()
            if obj is None:
                return None
            for key, value in changes.items():
                if key not in self.immutable_fields:
                    setattr(obj, key, value)
            if hasattr(obj, "updated_at"):
                obj.updated_at = utcnow()  # type: ignore[attr-defined]
            return self._commit(session, obj)

    def delete(self, record_id: int, *, user_id: int) -> Optional[RecordT]:
        with self.session_factory() as session:
            obj = session.exec(self._owned(user_id).where(self._column("id") == record_id)).first()
            if obj is None:
                return None
            session.delete(obj)
            session.commit()
            return obj
