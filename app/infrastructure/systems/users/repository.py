"""Repositório de Users — SQLAlchemy."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.systems.users.entity import User, UserStatus
from app.domain.systems.users.repository import IUserRepository
from app.infrastructure.database.models import UserModel


class UserRepository(IUserRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            login=model.login,
            mail=model.mail,
            hashed_password=model.hashed_password,
            admin=model.admin,
            status=UserStatus(model.status),
            created_at=model.created_at,
        )

    async def get_by_id(self, user_id: int) -> Optional[User]:
        model = await self._session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    async def get_by_login(self, login: str) -> Optional[User]:
        # login é único sem diferenciar maiúsculas
        stmt = select(UserModel).where(func.lower(UserModel.login) == login.lower())
        model = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, user: User) -> User:
        model = UserModel(
            login=user.login,
            mail=user.mail,
            hashed_password=user.hashed_password,
            admin=user.admin,
            status=user.status.value,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)
