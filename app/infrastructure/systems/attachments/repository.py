"""Implementação concreta do Attachment Store — SQLAlchemy."""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.shared.value_objects import ContainerRef, LocalFile, RemoteFile
from app.domain.systems.attachments.entity import Attachment
from app.domain.systems.attachments.repository import IAttachmentRepository
from app.infrastructure.database.models import AttachmentModel


class AttachmentRepository(IAttachmentRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _to_entity(model: AttachmentModel) -> Attachment:
        if model.external_url:
            storage = RemoteFile(url=model.external_url)
        else:
            storage = LocalFile(disk_filename=model.disk_filename)
        return Attachment(
            id=model.id,
            container=ContainerRef(model.container_type, model.container_id),
            storage=storage,
            filename=model.filename,
            content_type=model.content_type,
            filesize=model.filesize,
            digest=model.digest or "",
            description=model.description or "",
            author_id=model.author_id,
            downloads=model.downloads or 0,
            created_at=model.created_at,
        )

    async def get_by_id(self, attachment_id: int) -> Optional[Attachment]:
        model = await self._session.get(AttachmentModel, attachment_id)
        return self._to_entity(model) if model else None

    async def list_for_container(self, ref: ContainerRef) -> Sequence[Attachment]:
        stmt = (
            select(AttachmentModel)
            .where(AttachmentModel.container_type == ref.container_type.value)
            .where(AttachmentModel.container_id == ref.container_id)
            .order_by(AttachmentModel.created_at.asc(), AttachmentModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def create(self, attachment: Attachment) -> Attachment:
        attachment.validate()
        model = AttachmentModel(
            container_type=attachment.container.container_type.value,
            container_id=attachment.container.container_id,
            filename=attachment.filename,
            disk_filename=attachment.disk_filename,
            external_url=attachment.external_url,
            content_type=attachment.content_type,
            filesize=attachment.filesize,
            digest=attachment.digest,
            description=attachment.description,
            author_id=attachment.author_id,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def increment_downloads(self, attachment_id: int) -> None:
        stmt = (
            update(AttachmentModel)
            .where(AttachmentModel.id == attachment_id)
            .values(downloads=AttachmentModel.downloads + 1)
        )
        await self._session.execute(stmt)

    async def delete(self, attachment_id: int) -> None:
        model = await self._session.get(AttachmentModel, attachment_id)
        if model:
            await self._session.delete(model)
            await self._session.flush()
