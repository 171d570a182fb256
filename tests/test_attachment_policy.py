"""Testes unitários da política de anexos e das permissões efetivas."""

import pytest

from app.domain.shared.value_objects import EMPTY_PERMISSIONS, ContainerType, PermissionSet
from app.domain.systems.attachments.policy import REQUIREMENTS, AttachmentPolicy, DeleteRule
from app.domain.systems.containers.entity import Message, WikiPage, WorkPackage
from app.domain.systems.projects.entity import Membership, Project, Role, RoleBuiltin
from app.domain.systems.users.authorization_service import AuthorizationService
from app.domain.systems.users.entity import User

USER = User(id=1, login="maria")
ADMIN = User(id=2, login="root", admin=True)

WORK_PACKAGE = WorkPackage(id=10, project_id=1, author_id=99)
WIKI_PAGE = WikiPage(id=20, wiki_id=5, project_id=1, author_id=99)
MESSAGE = Message(id=30, board_id=7, project_id=1, author_id=99)
OWN_MESSAGE = Message(id=31, board_id=7, project_id=1, author_id=USER.id)


def perms(*names: str) -> PermissionSet:
    return PermissionSet(frozenset(names))


def test_every_container_type_has_a_requirement():
    assert set(REQUIREMENTS) == set(ContainerType)


@pytest.mark.parametrize("container, view", [
    (WORK_PACKAGE, "view_work_packages"),
    (WIKI_PAGE, "view_wiki_pages"),
    (MESSAGE, "view_messages"),
])
def test_can_view_requires_view_permission(container, view):
    policy = AttachmentPolicy()
    assert policy.can_view(USER, container, perms(view))
    assert not policy.can_view(USER, container, EMPTY_PERMISSIONS)


@pytest.mark.parametrize("container, granted, allowed", [
    (WORK_PACKAGE, ("view_work_packages", "edit_work_packages"), True),
    (WORK_PACKAGE, ("view_work_packages", "add_work_packages"), True),
    (WORK_PACKAGE, ("view_work_packages",), False),
    (WORK_PACKAGE, ("edit_work_packages",), False),
    (WIKI_PAGE, ("view_wiki_pages", "edit_wiki_pages"), True),
    (WIKI_PAGE, ("view_wiki_pages", "delete_wiki_pages_attachments"), False),
    (MESSAGE, ("view_messages", "add_messages"), True),
    (MESSAGE, ("view_messages", "edit_messages"), True),
    (MESSAGE, ("view_messages",), False),
])
def test_can_add(container, granted, allowed):
    assert AttachmentPolicy().can_add(USER, container, perms(*granted)) is allowed


@pytest.mark.parametrize("container, granted, allowed", [
    (WORK_PACKAGE, ("view_work_packages", "edit_work_packages"), True),
    (WORK_PACKAGE, ("view_work_packages",), False),
    (WIKI_PAGE, ("view_wiki_pages", "delete_wiki_pages_attachments"), True),
    (WIKI_PAGE, ("view_wiki_pages", "edit_wiki_pages"), False),
    (MESSAGE, ("view_messages", "edit_messages"), True),
    (MESSAGE, ("view_messages",), False),
    (OWN_MESSAGE, ("view_messages",), True),
])
def test_can_delete_with_default_rules(container, granted, allowed):
    assert AttachmentPolicy().can_delete(USER, container, perms(*granted)) is allowed


def test_delete_requires_visibility():
    policy = AttachmentPolicy()
    assert not policy.can_delete(USER, WORK_PACKAGE, perms("edit_work_packages"))
    assert not policy.can_delete(ADMIN, WORK_PACKAGE, EMPTY_PERMISSIONS)


def test_admin_deletes_whatever_it_sees():
    policy = AttachmentPolicy()
    assert policy.can_delete(ADMIN, WIKI_PAGE, perms("view_wiki_pages"))


def test_delete_rule_override_from_settings():
    policy = AttachmentPolicy({"message": "permission", "work_package": "author"})
    assert policy.requirement_for(ContainerType.MESSAGE).delete_rule is DeleteRule.PERMISSION
    assert not policy.can_delete(USER, OWN_MESSAGE, perms("view_messages"))

    own_wp = WorkPackage(id=11, project_id=1, author_id=USER.id)
    assert policy.can_delete(USER, own_wp, perms("view_work_packages"))
    assert not policy.can_delete(USER, WORK_PACKAGE, perms("view_work_packages", "edit_work_packages"))


def test_delete_rule_override_rejects_unknown_values():
    with pytest.raises(ValueError):
        AttachmentPolicy({"message": "anyone"})
    with pytest.raises(ValueError):
        AttachmentPolicy({"news": "permission"})


# ════════════════════════════════════════════════════════════════
# PERMISSÕES EFETIVAS
# ════════════════════════════════════════════════════════════════

PRIVATE = Project(id=1, identifier="private")
PUBLIC = Project(id=2, identifier="public", is_public=True)
MEMBER_ROLE = Role(id=1, name="Member", permissions=["view_work_packages", "edit_work_packages"])
NON_MEMBER_ROLE = Role(id=2, name="Non member", permissions=["view_wiki_pages"], builtin=RoleBuiltin.NON_MEMBER)


def test_member_gets_role_and_public_permissions():
    membership = Membership(user_id=USER.id, project_id=PRIVATE.id, roles=[MEMBER_ROLE])
    granted = AuthorizationService.effective_permissions(USER, PRIVATE, membership)
    assert "edit_work_packages" in granted
    assert "view_messages" in granted
    assert "view_wiki_pages" not in granted


def test_non_member_of_private_project_gets_nothing():
    granted = AuthorizationService.effective_permissions(USER, PRIVATE, None, NON_MEMBER_ROLE)
    assert granted == EMPTY_PERMISSIONS


def test_non_member_of_public_project_gets_non_member_role():
    granted = AuthorizationService.effective_permissions(USER, PUBLIC, None, NON_MEMBER_ROLE)
    assert "view_wiki_pages" in granted
    assert "view_messages" in granted
    assert "view_work_packages" not in granted


def test_archived_project_grants_nothing_even_to_admin():
    archived = Project(id=3, identifier="old")
    archived.archive()
    membership = Membership(user_id=USER.id, project_id=archived.id, roles=[MEMBER_ROLE])
    assert not AuthorizationService.effective_permissions(USER, archived, membership)
    assert not AuthorizationService.effective_permissions(ADMIN, archived, None)


def test_admin_gets_every_permission():
    granted = AuthorizationService.effective_permissions(ADMIN, PRIVATE, None)
    assert granted.allows_any("delete_wiki_pages_attachments")
    assert "edit_messages" in granted


def test_role_rejects_unknown_permission():
    with pytest.raises(ValueError, match="desconhecidas"):
        Role(name="Broken", permissions=["launch_rockets"])
