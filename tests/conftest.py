"""
Fixtures de teste — client HTTP + banco SQLite + storage em tmp_path.

Usa SQLite async para testes rápidos sem Docker. Os dados de cenário
(projetos, roles, containers, anexos) são gravados direto no banco.
"""

import uuid
from dataclasses import dataclass, field
from typing import AsyncGenerator, Iterable, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.domain.shared.value_objects import ContainerType
from app.domain.systems.projects.entity import RoleBuiltin
from app.domain.systems.users.entity import User, UserStatus
from app.application.shared.event_handlers import register_all_handlers
from app.infrastructure.database.models import (
    AttachmentModel,
    BoardModel,
    MemberModel,
    MessageModel,
    ProjectModel,
    RoleModel,
    WikiModel,
    WikiPageModel,
    WorkPackageModel,
)
from app.infrastructure.database.session import Base, get_db, use_background_session_factory
from app.infrastructure.services.file_storage import FileStorageService
from app.infrastructure.systems.users.repository import UserRepository
from app.main import app
from app.presentation.api.v3.deps import get_file_storage, hash_password

# ── SQLite async para testes ──
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)

API = "/api/v3"
DEFAULT_PASSWORD = "senha123"
TEST_MAX_BYTES = 64 * 1024


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# Override dependency
app.dependency_overrides[get_db] = override_get_db

# ASGITransport não executa o lifespan: audit log precisa dos handlers e do banco de teste
use_background_session_factory(TestSessionLocal)
register_all_handlers()


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Cria/destrói tabelas antes/depois de cada teste."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def storage(tmp_path) -> FileStorageService:
    """Storage isolado por teste, injetado no lugar do UPLOAD_DIR."""
    service = FileStorageService(base_dir=tmp_path / "uploads", max_bytes=TEST_MAX_BYTES)
    app.dependency_overrides[get_file_storage] = lambda: service
    yield service
    app.dependency_overrides.pop(get_file_storage, None)


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# ════════════════════════════════════════════════════════════════
# BUILDERS — gravam direto no banco de teste
# ════════════════════════════════════════════════════════════════

async def create_user(
    login: str,
    *,
    admin: bool = False,
    status: UserStatus = UserStatus.ACTIVE,
) -> User:
    async with TestSessionLocal() as session:
        user = await UserRepository(session).create(User(
            login=login,
            mail=f"{login}@test.com",
            hashed_password=hash_password(DEFAULT_PASSWORD),
            admin=admin,
            status=status,
        ))
        await session.commit()
        return user


async def create_project(identifier: str = "demo", *, is_public: bool = False, active: bool = True) -> int:
    async with TestSessionLocal() as session:
        project = ProjectModel(identifier=identifier, name=identifier.title(), is_public=is_public, active=active)
        session.add(project)
        await session.commit()
        return project.id


async def create_role(
    name: str,
    permissions: Iterable[str],
    builtin: RoleBuiltin = RoleBuiltin.NONE,
) -> int:
    async with TestSessionLocal() as session:
        role = RoleModel(name=name, permissions=list(permissions), builtin=builtin.value)
        session.add(role)
        await session.commit()
        return role.id


async def add_member(user_id: int, project_id: int, role_id: int) -> None:
    async with TestSessionLocal() as session:
        session.add(MemberModel(user_id=user_id, project_id=project_id, role_id=role_id))
        await session.commit()


async def create_container(
    container_type: ContainerType,
    project_id: int,
    *,
    author_id: Optional[int] = None,
) -> int:
    async with TestSessionLocal() as session:
        if container_type is ContainerType.WORK_PACKAGE:
            model = WorkPackageModel(project_id=project_id, subject="Work package", author_id=author_id)
        elif container_type is ContainerType.WIKI_PAGE:
            wiki = (await session.execute(
                select(WikiModel).where(WikiModel.project_id == project_id)
            )).scalar_one_or_none()
            if wiki is None:
                wiki = WikiModel(project_id=project_id)
                session.add(wiki)
                await session.flush()
            model = WikiPageModel(wiki_id=wiki.id, title="Wiki", author_id=author_id)
        else:
            board = BoardModel(project_id=project_id, name="Board")
            session.add(board)
            await session.flush()
            model = MessageModel(board_id=board.id, subject="Mensagem", content="", author_id=author_id)
        session.add(model)
        await session.commit()
        return model.id


async def create_local_attachment(
    storage: FileStorageService,
    container_type: ContainerType,
    container_id: int,
    *,
    filename: str = "foobar.txt",
    content: bytes = b"conteudo do anexo",
    content_type: str = "text/plain",
    author_id: Optional[int] = None,
    write_payload: bool = True,
) -> int:
    disk_filename = f"{container_type.value}/{container_id}/{uuid.uuid4().hex}.txt"
    if write_payload:
        path = storage.base_dir / disk_filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    async with TestSessionLocal() as session:
        model = AttachmentModel(
            container_type=container_type.value,
            container_id=container_id,
            filename=filename,
            disk_filename=disk_filename,
            content_type=content_type,
            filesize=len(content),
            author_id=author_id,
        )
        session.add(model)
        await session.commit()
        return model.id


async def create_remote_attachment(
    container_type: ContainerType,
    container_id: int,
    url: str = "http://some_service.org/blubs.gif",
    *,
    filename: str = "blubs.gif",
) -> int:
    async with TestSessionLocal() as session:
        model = AttachmentModel(
            container_type=container_type.value,
            container_id=container_id,
            filename=filename,
            external_url=url,
            content_type="image/gif",
        )
        session.add(model)
        await session.commit()
        return model.id


async def get_attachment_row(attachment_id: int) -> Optional[AttachmentModel]:
    async with TestSessionLocal() as session:
        return await session.get(AttachmentModel, attachment_id)


async def login(client: AsyncClient, user_login: str, password: str = DEFAULT_PASSWORD) -> str:
    resp = await client.post(f"{API}/auth/login", json={"login": user_login, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


# ════════════════════════════════════════════════════════════════
# CENÁRIO PADRÃO
# ════════════════════════════════════════════════════════════════

DEFAULT_PERMISSIONS = [
    "view_work_packages",
    "view_wiki_pages",
    "delete_wiki_pages_attachments",
    "edit_work_packages",
    "edit_wiki_pages",
    "edit_messages",
]


@dataclass
class World:
    """Projeto com um container de cada tipo e o usuário corrente logado."""
    user: User
    token: str
    project_id: int
    role_id: int
    author: User
    containers: dict[ContainerType, int] = field(default_factory=dict)

    @property
    def headers(self) -> dict:
        return auth_header(self.token)


async def build_world(
    client: AsyncClient,
    *,
    permissions: Iterable[str] = DEFAULT_PERMISSIONS,
    member: bool = True,
    is_public: bool = False,
    admin: bool = False,
) -> World:
    """
    Usuário corrente é autor do work package; página wiki e mensagem
    pertencem a outro usuário.
    """
    user = await create_user("current_user", admin=admin)
    author = await create_user("other_author")
    project_id = await create_project(is_public=is_public)
    role_id = await create_role("Member", permissions)
    if member:
        await add_member(user.id, project_id, role_id)

    containers = {
        ContainerType.WORK_PACKAGE: await create_container(
            ContainerType.WORK_PACKAGE, project_id, author_id=user.id
        ),
        ContainerType.WIKI_PAGE: await create_container(
            ContainerType.WIKI_PAGE, project_id, author_id=author.id
        ),
        ContainerType.MESSAGE: await create_container(
            ContainerType.MESSAGE, project_id, author_id=author.id
        ),
    }
    token = await login(client, user.login)
    return World(
        user=user,
        token=token,
        project_id=project_id,
        role_id=role_id,
        author=author,
        containers=containers,
    )
