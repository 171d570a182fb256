"""
Avaliador de acesso a anexos.

Combina o registro de containers, as memberships do projeto e a
AttachmentPolicy de domínio: dado (usuário, anexo) responde can_view /
can_delete. Anexos inexistentes nunca chegam aqui; quem chama converte
para NotFound antes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.domain.shared.value_objects import ContainerRef, PermissionSet
from app.domain.systems.attachments.entity import Attachment
from app.domain.systems.attachments.policy import AttachmentPolicy
from app.domain.systems.containers.entity import Container
from app.domain.systems.containers.repository import IContainerRepository
from app.domain.systems.projects.repository import IProjectRepository
from app.domain.systems.users.authorization_service import AuthorizationService
from app.domain.systems.users.entity import User


@dataclass(frozen=True)
class ContainerAccess:
    """Container resolvido + permissões efetivas do usuário no seu projeto."""
    container: Container
    permissions: PermissionSet


class AttachmentAccessService:
    def __init__(
        self,
        containers: IContainerRepository,
        projects: IProjectRepository,
        policy: AttachmentPolicy,
    ) -> None:
        self._containers = containers
        self._projects = projects
        self._policy = policy
        self._cache: dict[tuple[int, ContainerRef], Optional[ContainerAccess]] = {}

    async def resolve(self, user: User, ref: ContainerRef) -> Optional[ContainerAccess]:
        """None quando o container não existe (anexo órfão)."""
        key = (user.id, ref)
        if key in self._cache:
            return self._cache[key]

        container = await self._containers.get(ref)
        access = None
        if container is not None:
            project = await self._projects.get_by_id(container.project_id)
            membership = await self._projects.get_membership(user.id, container.project_id)
            non_member_role = None
            if membership is None and project is not None and project.is_public:
                non_member_role = await self._projects.get_non_member_role()
            permissions = AuthorizationService.effective_permissions(
                user, project, membership, non_member_role
            )
            access = ContainerAccess(container=container, permissions=permissions)

        self._cache[key] = access
        return access

    async def can_view_container(self, user: User, ref: ContainerRef) -> bool:
        access = await self.resolve(user, ref)
        return access is not None and self._policy.can_view(user, access.container, access.permissions)

    async def can_add(self, user: User, ref: ContainerRef) -> bool:
        access = await self.resolve(user, ref)
        return access is not None and self._policy.can_add(user, access.container, access.permissions)

    async def can_view(self, user: User, attachment: Attachment) -> bool:
        return await self.can_view_container(user, attachment.container)

    async def can_delete(self, user: User, attachment: Attachment) -> bool:
        access = await self.resolve(user, attachment.container)
        return access is not None and self._policy.can_delete(user, access.container, access.permissions)
