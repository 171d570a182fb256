"""
Seed script — admin, usuário demo, projeto demo com roles e um
container de cada tipo (work package, página wiki, mensagem).

Uso:
    python -m app.seed

Idempotente: não recria nada se o projeto demo já existir.
"""

import asyncio

from sqlalchemy import select

from app.domain.systems.projects.entity import ALL_PERMISSIONS, PUBLIC_PERMISSIONS, RoleBuiltin
from app.domain.systems.users.entity import User
from app.infrastructure.database.models import (
    BoardModel,
    MemberModel,
    MessageModel,
    ProjectModel,
    RoleModel,
    WikiModel,
    WikiPageModel,
    WorkPackageModel,
)
from app.infrastructure.database.session import AsyncSessionLocal
from app.infrastructure.systems.users.repository import UserRepository
from app.presentation.api.v3.deps import hash_password

ADMIN_LOGIN = "admin"
ADMIN_MAIL = "admin@local.dev"
ADMIN_PASSWORD = "admin123"  # Trocar em produção!

DEMO_LOGIN = "demo"
DEMO_MAIL = "demo@local.dev"
DEMO_PASSWORD = "demo1234"

DEMO_PROJECT = "demo"


async def _ensure_user(repo: UserRepository, login: str, mail: str, password: str, admin: bool = False) -> User:
    existing = await repo.get_by_login(login)
    if existing:
        return existing
    return await repo.create(
        User(login=login, mail=mail, hashed_password=hash_password(password), admin=admin)
    )


async def seed() -> None:
    async with AsyncSessionLocal() as session:
        existing = await session.execute(
            select(ProjectModel).where(ProjectModel.identifier == DEMO_PROJECT)
        )
        if existing.scalar_one_or_none():
            print(f"ℹ️  Projeto '{DEMO_PROJECT}' já existe. Seed ignorado.")
            return

        repo = UserRepository(session)
        admin = await _ensure_user(repo, ADMIN_LOGIN, ADMIN_MAIL, ADMIN_PASSWORD, admin=True)
        demo = await _ensure_user(repo, DEMO_LOGIN, DEMO_MAIL, DEMO_PASSWORD)

        project = ProjectModel(identifier=DEMO_PROJECT, name="Projeto Demo", is_public=False)
        member_role = RoleModel(name="Member", permissions=sorted(ALL_PERMISSIONS))
        non_member = RoleModel(
            name="Non member",
            permissions=sorted(PUBLIC_PERMISSIONS),
            builtin=RoleBuiltin.NON_MEMBER.value,
        )
        session.add_all([project, member_role, non_member])
        await session.flush()

        session.add(MemberModel(user_id=demo.id, project_id=project.id, role_id=member_role.id))

        wiki = WikiModel(project_id=project.id)
        board = BoardModel(project_id=project.id, name="Geral")
        session.add_all([wiki, board])
        await session.flush()

        work_package = WorkPackageModel(project_id=project.id, subject="Primeiro work package", author_id=demo.id)
        wiki_page = WikiPageModel(wiki_id=wiki.id, title="Wiki", author_id=demo.id)
        message = MessageModel(board_id=board.id, subject="Boas-vindas", content="Olá!", author_id=demo.id)
        session.add_all([work_package, wiki_page, message])
        await session.commit()

        print("✅ Seed concluído:")
        print(f"   Admin:        {ADMIN_LOGIN} / {ADMIN_PASSWORD} (id={admin.id})")
        print(f"   Usuário demo: {DEMO_LOGIN} / {DEMO_PASSWORD} (id={demo.id})")
        print(f"   Projeto:      {DEMO_PROJECT} (id={project.id})")
        print(f"   Work package: id={work_package.id}")
        print(f"   Página wiki:  id={wiki_page.id}")
        print(f"   Mensagem:     id={message.id}")
        print("\n⚠️  Troque as senhas em produção!")


def main():
    asyncio.run(seed())


if __name__ == "__main__":
    main()
