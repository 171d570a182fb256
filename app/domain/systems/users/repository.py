"""Porta do repositório de Users — só o que autenticação precisa."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .entity import User


class IUserRepository(ABC):

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    async def get_by_login(self, login: str) -> Optional[User]:
        ...

    @abstractmethod
    async def create(self, user: User) -> User:
        ...
