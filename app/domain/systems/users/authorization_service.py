"""
Serviço de domínio para autorização.

Resolve o conjunto efetivo de permissões de um usuário em um projeto —
lógica pura de domínio, sem dependências externas.
"""

from __future__ import annotations
from typing import Optional

from app.domain.shared.value_objects import EMPTY_PERMISSIONS, PermissionSet
from app.domain.systems.projects.entity import (
    ALL_PERMISSIONS,
    PUBLIC_PERMISSIONS,
    Membership,
    Project,
    Role,
)
from app.domain.systems.users.entity import User


class AuthorizationError(Exception):
    """Exceção de domínio para acesso negado."""
    pass


class AuthorizationService:
    """Regras de permissão centralizadas no domínio."""

    @staticmethod
    def effective_permissions(
        user: User,
        project: Optional[Project],
        membership: Optional[Membership],
        non_member_role: Optional[Role] = None,
    ) -> PermissionSet:
        """
        Permissões de `user` em `project`:

        - projeto inexistente ou arquivado: nenhuma
        - admin global: todas
        - membro: permissões dos roles + permissões públicas
        - não-membro em projeto público: role builtin non_member + públicas
        """
        if project is None or not project.active:
            return EMPTY_PERMISSIONS
        if user.is_admin():
            return PermissionSet(ALL_PERMISSIONS)
        if membership is not None and membership.roles:
            return PermissionSet.of(membership.permissions(), PUBLIC_PERMISSIONS)
        if project.is_public:
            role_permissions = non_member_role.permissions if non_member_role else []
            return PermissionSet.of(role_permissions, PUBLIC_PERMISSIONS)
        return EMPTY_PERMISSIONS

    @staticmethod
    def ensure_can_delete_attachment(actor: User, allowed: bool, attachment_id: int) -> None:
        if not allowed:
            raise AuthorizationError(
                f"Usuário {actor.login} não pode remover o anexo {attachment_id}"
            )

    @staticmethod
    def ensure_can_add_attachment(actor: User, allowed: bool, container_label: str) -> None:
        if not allowed:
            raise AuthorizationError(
                f"Usuário {actor.login} não pode anexar arquivos em {container_label}"
            )
