"""
Política de acesso a anexos — lógica pura de domínio.

Cada variante de container tem uma PermissionRequirement estática. A regra
de deleção é configurável por variante: permissão explícita, autoria do
container, ou qualquer uma das duas.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from app.domain.shared.value_objects import ContainerType, PermissionSet
from app.domain.systems.containers.entity import Container
from app.domain.systems.users.entity import User


class DeleteRule(str, enum.Enum):
    PERMISSION = "permission"
    AUTHOR = "author"
    PERMISSION_OR_AUTHOR = "permission_or_author"


@dataclass(frozen=True)
class PermissionRequirement:
    view: str
    add: tuple[str, ...]
    delete: str
    delete_rule: DeleteRule = DeleteRule.PERMISSION


REQUIREMENTS: dict[ContainerType, PermissionRequirement] = {
    ContainerType.WORK_PACKAGE: PermissionRequirement(
        view="view_work_packages",
        add=("edit_work_packages", "add_work_packages"),
        delete="edit_work_packages",
    ),
    ContainerType.WIKI_PAGE: PermissionRequirement(
        view="view_wiki_pages",
        add=("edit_wiki_pages",),
        delete="delete_wiki_pages_attachments",
    ),
    ContainerType.MESSAGE: PermissionRequirement(
        view="view_messages",
        add=("add_messages", "edit_messages"),
        delete="edit_messages",
        delete_rule=DeleteRule.PERMISSION_OR_AUTHOR,
    ),
}

_uncovered = set(ContainerType) - set(REQUIREMENTS)
if _uncovered:
    raise RuntimeError(f"Variantes sem PermissionRequirement: {sorted(t.value for t in _uncovered)}")


class AttachmentPolicy:
    """Decide view/add/delete para (usuário, container, permissões efetivas)."""

    def __init__(self, delete_rules: Optional[Mapping[str, str]] = None) -> None:
        self._requirements = dict(REQUIREMENTS)
        for key, rule in (delete_rules or {}).items():
            container_type = ContainerType(key)
            self._requirements[container_type] = replace(
                self._requirements[container_type], delete_rule=DeleteRule(rule)
            )

    def requirement_for(self, container_type: ContainerType) -> PermissionRequirement:
        return self._requirements[ContainerType(container_type)]

    def can_view(self, user: User, container: Container, permissions: PermissionSet) -> bool:
        requirement = self.requirement_for(container.container_type)
        return requirement.view in permissions

    def can_add(self, user: User, container: Container, permissions: PermissionSet) -> bool:
        if not self.can_view(user, container, permissions):
            return False
        requirement = self.requirement_for(container.container_type)
        return permissions.allows_any(*requirement.add)

    def can_delete(self, user: User, container: Container, permissions: PermissionSet) -> bool:
        if not self.can_view(user, container, permissions):
            return False
        if user.is_admin():
            return True
        requirement = self.requirement_for(container.container_type)
        has_permission = requirement.delete in permissions
        is_author = user.id is not None and container.author_id == user.id

        if requirement.delete_rule is DeleteRule.PERMISSION:
            return has_permission
        if requirement.delete_rule is DeleteRule.AUTHOR:
            return is_author
        return has_permission or is_author
