"""
Entidades de Projeto, Role e Membership.

O catálogo de permissões vive aqui: permissões públicas são concedidas
implicitamente a qualquer membro do projeto.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class Permission:
    name: str
    public: bool = False


PERMISSIONS: dict[str, Permission] = {
    p.name: p
    for p in (
        Permission("view_work_packages"),
        Permission("add_work_packages"),
        Permission("edit_work_packages"),
        Permission("view_wiki_pages"),
        Permission("edit_wiki_pages"),
        Permission("delete_wiki_pages_attachments"),
        Permission("view_messages", public=True),
        Permission("add_messages"),
        Permission("edit_messages"),
    )
}

PUBLIC_PERMISSIONS: frozenset[str] = frozenset(
    name for name, p in PERMISSIONS.items() if p.public
)
ALL_PERMISSIONS: frozenset[str] = frozenset(PERMISSIONS)


class RoleBuiltin(str, enum.Enum):
    NONE = "none"
    NON_MEMBER = "non_member"


@dataclass
class Role:
    id: Optional[int] = None
    name: str = ""
    permissions: list[str] = field(default_factory=list)
    builtin: RoleBuiltin = RoleBuiltin.NONE

    def __post_init__(self):
        unknown = [p for p in self.permissions if p not in PERMISSIONS]
        if unknown:
            raise ValueError(f"Permissões desconhecidas: {', '.join(unknown)}")


@dataclass
class Project:
    id: Optional[int] = None
    identifier: str = ""
    name: str = ""
    is_public: bool = False
    active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def archive(self) -> None:
        self.active = False


@dataclass
class Membership:
    """Vínculo de um usuário a um projeto, com um ou mais roles."""
    user_id: int
    project_id: int
    roles: list[Role] = field(default_factory=list)

    def permissions(self) -> set[str]:
        granted: set[str] = set()
        for role in self.roles:
            granted.update(role.permissions)
        return granted
