from __future__ import annotations

from sqlalchemy import select

from ..db.models import User
from .base_repository import SqlRepository


class UsersRepository(SqlRepository[User]):
    model = User
    label = "user"

    def get_by_email(self, email: str) -> User | None:
        return self.db.scalars(select(User).where(User.email == email)).first()

    def all(self) -> list[User]:
        return list(self.db.scalars(select(User).order_by(User.created_at)).all())
