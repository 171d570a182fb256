"""Repositório de Projetos, Roles e Memberships — SQLAlchemy."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.domain.systems.projects.entity import PERMISSIONS, Membership, Project, Role, RoleBuiltin
from app.domain.systems.projects.repository import IProjectRepository
from app.infrastructure.database.models import MemberModel, ProjectModel, RoleModel

logger = logging.getLogger(__name__)


class ProjectRepository(IProjectRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _to_entity(model: ProjectModel) -> Project:
        return Project(
            id=model.id,
            identifier=model.identifier,
            name=model.name,
            is_public=model.is_public,
            active=model.active,
            created_at=model.created_at,
        )

    @staticmethod
    def _role_to_entity(model: RoleModel) -> Role:
        """Permissões fora do catálogo são descartadas: não concedem nada aqui."""
        known, unknown = [], []
        for name in model.permissions or []:
            (known if name in PERMISSIONS else unknown).append(name)
        if unknown:
            logger.debug("Role %s: ignorando permissões desconhecidas %s", model.id, unknown)
        return Role(
            id=model.id,
            name=model.name,
            permissions=known,
            builtin=RoleBuiltin(model.builtin),
        )

    async def get_by_id(self, project_id: int) -> Optional[Project]:
        model = await self._session.get(ProjectModel, project_id)
        return self._to_entity(model) if model else None

    async def get_membership(self, user_id: int, project_id: int) -> Optional[Membership]:
        stmt = (
            select(MemberModel)
            .where(MemberModel.user_id == user_id)
            .where(MemberModel.project_id == project_id)
            .options(selectinload(MemberModel.role))
        )
        result = await self._session.execute(stmt)
        rows = result.scalars().all()
        if not rows:
            return None
        return Membership(
            user_id=user_id,
            project_id=project_id,
            roles=[self._role_to_entity(m.role) for m in rows],
        )

    async def get_non_member_role(self) -> Optional[Role]:
        stmt = select(RoleModel).where(RoleModel.builtin == RoleBuiltin.NON_MEMBER.value)
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._role_to_entity(model) if model else None
