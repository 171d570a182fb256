"""Testes de anexos por container — listagem, upload multipart, arquivo externo e audit log."""

import hashlib
import json

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.domain.shared.value_objects import ContainerType
from app.infrastructure.database.models import AttachmentAuditLogModel
from app.presentation.api.v3.schemas import ContainerPath
from tests.conftest import (
    API,
    TEST_MAX_BYTES,
    TestSessionLocal,
    build_world,
    create_local_attachment,
    get_attachment_row,
)

ALL_PATHS = pytest.mark.parametrize("path", list(ContainerPath))


def attachments_url(path: ContainerPath, container_id: int) -> str:
    return f"{API}/{path.value}/{container_id}/attachments"


# ════════════════════════════════════════════════════════════════
# LISTAGEM
# ════════════════════════════════════════════════════════════════

@ALL_PATHS
@pytest.mark.asyncio
async def test_list_container_attachments(client: AsyncClient, storage, path):
    world = await build_world(client)
    container_id = world.containers[path.container_type]
    first = await create_local_attachment(storage, path.container_type, container_id, filename="a.txt")
    second = await create_local_attachment(storage, path.container_type, container_id, filename="b.txt")

    resp = await client.get(attachments_url(path, container_id), headers=world.headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["_type"] == "Collection"
    assert data["total"] == data["count"] == 2
    assert [e["id"] for e in data["_embedded"]["elements"]] == [first, second]


@pytest.mark.asyncio
async def test_list_attachments_of_invisible_container(client: AsyncClient):
    world = await build_world(client, permissions=[])
    wp_id = world.containers[ContainerType.WORK_PACKAGE]

    resp = await client.get(attachments_url(ContainerPath.work_packages, wp_id), headers=world.headers)
    assert resp.status_code == 404
    assert resp.json()["resource"] == "WorkPackage"


@pytest.mark.asyncio
async def test_list_attachments_of_unknown_container_path(client: AsyncClient):
    world = await build_world(client)

    resp = await client.get(f"{API}/projects/1/attachments", headers=world.headers)
    assert resp.status_code == 422


# ════════════════════════════════════════════════════════════════
# UPLOAD
# ════════════════════════════════════════════════════════════════

@ALL_PATHS
@pytest.mark.asyncio
async def test_upload_attachment(client: AsyncClient, storage, path):
    world = await build_world(client, permissions=[
        "view_work_packages", "edit_work_packages",
        "view_wiki_pages", "edit_wiki_pages",
        "add_messages",
    ])
    container_id = world.containers[path.container_type]
    payload = b"hello attachment"

    resp = await client.post(
        attachments_url(path, container_id),
        files={"file": ("report.txt", payload, "text/plain")},
        headers=world.headers,
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["fileName"] == "report.txt"
    assert data["fileSize"] == len(payload)
    assert data["contentType"] == "text/plain"
    assert data["digest"] == {"algorithm": "md5", "hash": hashlib.md5(payload).hexdigest()}

    row = await get_attachment_row(data["id"])
    assert row.author_id == world.user.id
    assert storage.get_path(row.disk_filename).read_bytes() == payload

    content = await client.get(data["_links"]["downloadLocation"]["href"], headers=world.headers)
    assert content.status_code == 200
    assert content.content == payload


@pytest.mark.asyncio
async def test_upload_with_metadata(client: AsyncClient):
    world = await build_world(client)
    wp_id = world.containers[ContainerType.WORK_PACKAGE]

    resp = await client.post(
        attachments_url(ContainerPath.work_packages, wp_id),
        files={"file": ("upload.bin", b"\x00\x01\x02", "application/octet-stream")},
        data={"metadata": json.dumps({"fileName": "../../diagrama.png", "description": "Fluxo"})},
        headers=world.headers,
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["fileName"] == "diagrama.png"
    assert data["contentType"] == "image/png"
    assert data["description"]["raw"] == "Fluxo"


@pytest.mark.asyncio
async def test_upload_with_invalid_metadata(client: AsyncClient):
    world = await build_world(client)
    wp_id = world.containers[ContainerType.WORK_PACKAGE]

    resp = await client.post(
        attachments_url(ContainerPath.work_packages, wp_id),
        files={"file": ("a.txt", b"a", "text/plain")},
        data={"metadata": "{not json"},
        headers=world.headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "bad_request"


@pytest.mark.asyncio
async def test_upload_too_large(client: AsyncClient, storage):
    world = await build_world(client)
    wp_id = world.containers[ContainerType.WORK_PACKAGE]

    resp = await client.post(
        attachments_url(ContainerPath.work_packages, wp_id),
        files={"file": ("big.bin", b"x" * (TEST_MAX_BYTES + 1), "application/octet-stream")},
        headers=world.headers,
    )
    assert resp.status_code == 413
    assert resp.json()["error"] == "payload_too_large"

    container_dir = storage.base_dir / "work_package" / str(wp_id)
    assert not container_dir.exists() or not any(container_dir.iterdir())


@pytest.mark.asyncio
async def test_upload_without_add_permission(client: AsyncClient, storage):
    world = await build_world(client, permissions=["view_work_packages"])
    wp_id = world.containers[ContainerType.WORK_PACKAGE]

    resp = await client.post(
        attachments_url(ContainerPath.work_packages, wp_id),
        files={"file": ("a.txt", b"a", "text/plain")},
        headers=world.headers,
    )
    assert resp.status_code == 403
    assert not (storage.base_dir / "work_package").exists()


@pytest.mark.asyncio
async def test_upload_to_invisible_container(client: AsyncClient):
    world = await build_world(client, member=False)
    wp_id = world.containers[ContainerType.WORK_PACKAGE]

    resp = await client.post(
        attachments_url(ContainerPath.work_packages, wp_id),
        files={"file": ("a.txt", b"a", "text/plain")},
        headers=world.headers,
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_upload_to_nonexistent_container(client: AsyncClient):
    world = await build_world(client)

    resp = await client.post(
        attachments_url(ContainerPath.wiki_pages, 9999),
        files={"file": ("a.txt", b"a", "text/plain")},
        headers=world.headers,
    )
    assert resp.status_code == 404
    assert resp.json()["resource"] == "WikiPage"


# ════════════════════════════════════════════════════════════════
# ARQUIVO EXTERNO
# ════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_register_external_attachment(client: AsyncClient):
    world = await build_world(client)
    wp_id = world.containers[ContainerType.WORK_PACKAGE]
    url = "https://files.example.org/blubs.gif"

    resp = await client.post(
        f"{attachments_url(ContainerPath.work_packages, wp_id)}/external",
        json={"fileName": "blubs.gif", "url": url, "fileSize": 2048},
        headers=world.headers,
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["contentType"] == "image/gif"
    assert data["fileSize"] == 2048
    assert data["_links"]["downloadLocation"]["href"] == url

    content = await client.get(f"{API}/attachments/{data['id']}/content", headers=world.headers)
    assert content.status_code == 302
    assert content.headers["Location"] == url


@pytest.mark.asyncio
async def test_register_external_attachment_rejects_invalid_url(client: AsyncClient):
    world = await build_world(client)
    wp_id = world.containers[ContainerType.WORK_PACKAGE]

    resp = await client.post(
        f"{attachments_url(ContainerPath.work_packages, wp_id)}/external",
        json={"fileName": "x.gif", "url": "ftp://example.org/x.gif"},
        headers=world.headers,
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_register_external_attachment_without_add_permission(client: AsyncClient):
    world = await build_world(client, permissions=["view_wiki_pages"])
    page_id = world.containers[ContainerType.WIKI_PAGE]

    resp = await client.post(
        f"{attachments_url(ContainerPath.wiki_pages, page_id)}/external",
        json={"fileName": "x.gif", "url": "https://example.org/x.gif"},
        headers=world.headers,
    )
    assert resp.status_code == 403


# ════════════════════════════════════════════════════════════════
# AUDIT LOG
# ════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_upload_and_delete_are_audited(client: AsyncClient):
    world = await build_world(client)
    page_id = world.containers[ContainerType.WIKI_PAGE]

    created = await client.post(
        attachments_url(ContainerPath.wiki_pages, page_id),
        files={"file": ("notes.txt", b"notes", "text/plain")},
        headers=world.headers,
    )
    att_id = created.json()["id"]
    deleted = await client.delete(f"{API}/attachments/{att_id}", headers=world.headers)
    assert deleted.status_code == 204

    async with TestSessionLocal() as session:
        rows = (await session.execute(
            select(AttachmentAuditLogModel)
            .where(AttachmentAuditLogModel.attachment_id == att_id)
            .order_by(AttachmentAuditLogModel.id)
        )).scalars().all()

    assert [r.action for r in rows] == ["created", "deleted"]
    assert all(r.performed_by == world.user.id for r in rows)
    assert all(r.container_type == "wiki_page" and r.container_id == page_id for r in rows)
    assert rows[0].filename == "notes.txt"
