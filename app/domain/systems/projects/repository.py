"""Interface (porta) do repositório de Projetos e Memberships."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .entity import Membership, Project, Role


class IProjectRepository(ABC):

    @abstractmethod
    async def get_by_id(self, project_id: int) -> Optional[Project]:
        ...

    @abstractmethod
    async def get_membership(self, user_id: int, project_id: int) -> Optional[Membership]:
        """Membership com roles carregados, ou None se o usuário não é membro."""
        ...

    @abstractmethod
    async def get_non_member_role(self) -> Optional[Role]:
        ...
