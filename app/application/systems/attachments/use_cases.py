"""
Use Cases de Attachments — camada de Aplicação.

Anexo inexistente e anexo não visível produzem o mesmo NotFoundError;
Forbidden só é possível para quem já enxerga o anexo.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.domain.shared.exceptions import NotFoundError
from app.domain.shared.value_objects import ContainerRef, LocalFile, RemoteFile
from app.domain.systems.attachments.entity import Attachment, sanitize_filename
from app.domain.systems.attachments.repository import IAttachmentRepository
from app.domain.systems.containers.entity import Container
from app.domain.systems.users.authorization_service import AuthorizationService
from app.domain.systems.users.entity import User
from app.application.dtos.attachment_dtos import (
    AttachmentResult,
    DeleteAttachmentCommand,
    GetAttachmentContentQuery,
    GetAttachmentQuery,
    ListContainerAttachmentsQuery,
    RegisterExternalAttachmentCommand,
    UploadAttachmentCommand,
)
from app.application.shared.unit_of_work import UnitOfWork
from app.application.systems.attachments.access import AttachmentAccessService
from app.application.systems.attachments.delivery import Delivery, DeliveryResolver
from app.infrastructure.services.file_storage import FileStorageService

logger = logging.getLogger(__name__)


def _to_result(a: Attachment, container: Optional[Container], can_delete: bool) -> AttachmentResult:
    return AttachmentResult(
        id=a.id,
        filename=a.filename,
        filesize=a.filesize,
        content_type=a.content_type,
        digest=a.digest,
        description=a.description,
        container_type=a.container.container_type.value,
        container_id=a.container.container_id,
        container_title=container.title if container else "",
        author_id=a.author_id,
        external_url=a.external_url,
        downloads=a.downloads,
        can_delete=can_delete,
        created_at=a.created_at.isoformat() if a.created_at else None,
    )


class _AttachmentUseCase:
    def __init__(self, repo: IAttachmentRepository, access: AttachmentAccessService) -> None:
        self._repo = repo
        self._access = access

    async def _load_visible(self, attachment_id: int, actor: User) -> Attachment:
        attachment = await self._repo.get_by_id(attachment_id)
        if attachment is None or not await self._access.can_view(actor, attachment):
            raise NotFoundError("Attachment", attachment_id)
        return attachment

    async def _ensure_container_visible(self, ref: ContainerRef, actor: User) -> None:
        if not await self._access.can_view_container(actor, ref):
            raise NotFoundError(ref.container_type.label, ref.container_id)

    async def _result(self, attachment: Attachment, actor: User) -> AttachmentResult:
        access = await self._access.resolve(actor, attachment.container)
        can_delete = await self._access.can_delete(actor, attachment)
        return _to_result(attachment, access.container if access else None, can_delete)


class GetAttachmentUseCase(_AttachmentUseCase):
    async def execute(self, query: GetAttachmentQuery, actor: User) -> AttachmentResult:
        attachment = await self._load_visible(query.attachment_id, actor)
        return await self._result(attachment, actor)


class ListContainerAttachmentsUseCase(_AttachmentUseCase):
    async def execute(self, query: ListContainerAttachmentsQuery, actor: User) -> list[AttachmentResult]:
        ref = ContainerRef(query.container_type, query.container_id)
        await self._ensure_container_visible(ref, actor)
        attachments = await self._repo.list_for_container(ref)
        return [await self._result(a, actor) for a in attachments]


class GetAttachmentContentUseCase(_AttachmentUseCase):
    """Resolve a entrega (stream local ou redirect) e conta o download."""

    def __init__(
        self,
        repo: IAttachmentRepository,
        access: AttachmentAccessService,
        resolver: DeliveryResolver,
        uow: UnitOfWork,
    ) -> None:
        super().__init__(repo, access)
        self._resolver = resolver
        self._uow = uow

    async def execute(self, query: GetAttachmentContentQuery, actor: User) -> Delivery:
        attachment = await self._load_visible(query.attachment_id, actor)
        delivery = self._resolver.resolve(attachment)
        await self._repo.increment_downloads(attachment.id)
        await self._uow.commit()
        return delivery


class DeleteAttachmentUseCase(_AttachmentUseCase):
    """Remove metadados e payload juntos: payload vai para a lixeira até o commit."""

    def __init__(
        self,
        repo: IAttachmentRepository,
        access: AttachmentAccessService,
        storage: FileStorageService,
        uow: UnitOfWork,
    ) -> None:
        super().__init__(repo, access)
        self._storage = storage
        self._uow = uow

    async def execute(self, cmd: DeleteAttachmentCommand, actor: User) -> None:
        attachment = await self._load_visible(cmd.attachment_id, actor)
        AuthorizationService.ensure_can_delete_attachment(
            actor, await self._access.can_delete(actor, attachment), attachment.id
        )

        if isinstance(attachment.storage, LocalFile):
            disk_filename = attachment.storage.disk_filename
            staged = self._storage.stage_delete(disk_filename)
            self._uow.on_failure(lambda: self._storage.restore(staged, disk_filename))
            self._uow.after_commit(lambda: self._storage.purge(staged))

        attachment.record_deletion(deleted_by=cmd.performed_by)
        self._uow.collect_events_from(attachment)
        try:
            await self._repo.delete(attachment.id)
        except Exception:
            await self._uow.rollback()
            raise
        await self._uow.commit()
        logger.info("Attachment %d removido por user %d", attachment.id, cmd.performed_by)


class UploadAttachmentUseCase(_AttachmentUseCase):
    def __init__(
        self,
        repo: IAttachmentRepository,
        access: AttachmentAccessService,
        storage: FileStorageService,
        uow: UnitOfWork,
    ) -> None:
        super().__init__(repo, access)
        self._storage = storage
        self._uow = uow

    async def execute(self, cmd: UploadAttachmentCommand, actor: User) -> AttachmentResult:
        ref = ContainerRef(cmd.container_type, cmd.container_id)
        await self._ensure_container_visible(ref, actor)
        AuthorizationService.ensure_can_add_attachment(
            actor, await self._access.can_add(actor, ref), f"{ref.container_type.label} {ref.container_id}"
        )

        filename = sanitize_filename(cmd.filename or cmd.file.filename)
        stored = await self._storage.save(ref, cmd.file, filename)
        self._uow.on_failure(lambda: self._storage.delete(stored.disk_filename))

        attachment = Attachment(
            container=ref,
            storage=LocalFile(disk_filename=stored.disk_filename),
            filename=filename,
            content_type=stored.content_type,
            filesize=stored.filesize,
            digest=stored.digest,
            description=cmd.description,
            author_id=cmd.performed_by,
        )
        try:
            created = await self._repo.create(attachment)
        except Exception:
            await self._uow.rollback()
            raise

        created.record_creation()
        self._uow.collect_events_from(created)
        await self._uow.commit()
        logger.info(
            "Attachment %d (%s, %d bytes) criado em %s %d",
            created.id, created.filename, created.filesize,
            ref.container_type.value, ref.container_id,
        )
        return await self._result(created, actor)


class RegisterExternalAttachmentUseCase(_AttachmentUseCase):
    """Registra um arquivo hospedado externamente; servido por redirect."""

    def __init__(
        self,
        repo: IAttachmentRepository,
        access: AttachmentAccessService,
        uow: UnitOfWork,
    ) -> None:
        super().__init__(repo, access)
        self._uow = uow

    async def execute(self, cmd: RegisterExternalAttachmentCommand, actor: User) -> AttachmentResult:
        ref = ContainerRef(cmd.container_type, cmd.container_id)
        await self._ensure_container_visible(ref, actor)
        AuthorizationService.ensure_can_add_attachment(
            actor, await self._access.can_add(actor, ref), f"{ref.container_type.label} {ref.container_id}"
        )

        filename = sanitize_filename(cmd.filename)
        attachment = Attachment(
            container=ref,
            storage=RemoteFile(url=cmd.url),
            filename=filename,
            content_type=FileStorageService.detect_content_type(filename, cmd.content_type),
            filesize=cmd.filesize,
            description=cmd.description,
            author_id=cmd.performed_by,
        )
        created = await self._repo.create(attachment)
        created.record_creation()
        self._uow.collect_events_from(created)
        await self._uow.commit()
        return await self._result(created, actor)
