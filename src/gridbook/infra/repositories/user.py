"""SQLModel implementation of the user repository."""

from __future__ import annotations

from typing import Any, Optional

from sqlmodel import select

from ...models.user import User
from ..database import SessionFactory


class SQLModelUserRepository:
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self.session_factory() as session:
            user = session.get(User, user_id)
            if user:
                session.expunge(user)
            return user

    def get_by_email(self, email: str) -> Optional[User]:
        """Look up a user by email (stored lower-cased)."""
        with self.session_factory() as session:
            user = session.exec(select(User).where(User.email == email.strip().lower())).first()
            if user:
                session.expunge(user)
            return user

    def create(self, user: User) -> User:
        with self.session_factory() as session:
            user.email = user.email.strip().lower()
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    def update(self, user_id: int, changes: dict[str, Any]) -> Optional[User]:
        with self.session_factory() as session:
            user = session.get(User, user_id)
            if user is None:
                return None
            for key, value in changes.items():
                setattr(user, key, value)
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user
