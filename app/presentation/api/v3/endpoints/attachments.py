"""
Endpoints de Attachments — /api/v3/attachments

Leitura, remoção e download (stream local ou redirect para URL externa).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import FileResponse, RedirectResponse

from app.domain.systems.users.entity import User
from app.application.dtos.attachment_dtos import (
    AttachmentResult,
    DeleteAttachmentCommand,
    GetAttachmentContentQuery,
    GetAttachmentQuery,
)
from app.application.shared.unit_of_work import UnitOfWork
from app.application.systems.attachments.access import AttachmentAccessService
from app.application.systems.attachments.delivery import DeliveryResolver, RemoteDelivery
from app.application.systems.attachments.use_cases import (
    DeleteAttachmentUseCase,
    GetAttachmentContentUseCase,
    GetAttachmentUseCase,
)
from app.infrastructure.config import get_settings
from app.infrastructure.services.file_storage import FileStorageService
from app.infrastructure.systems.attachments.repository import AttachmentRepository
from app.presentation.api.v3.schemas import (
    AttachmentLinks,
    AttachmentOut,
    ContainerPath,
    Digest,
    ErrorResponse,
    Formattable,
    Link,
)
from app.presentation.api.v3.deps import (
    get_access_service,
    get_attachment_repo,
    get_current_active_user,
    get_delivery_resolver,
    get_file_storage,
    get_uow,
)

router = APIRouter()
settings = get_settings()

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Anexo inexistente ou não visível"}}


def to_attachment_out(r: AttachmentResult) -> AttachmentOut:
    """AttachmentResult → representação HAL da API v3."""
    prefix = settings.API_V3_PREFIX
    self_href = f"{prefix}/attachments/{r.id}"
    container_path = ContainerPath.for_type(r.container_type).value
    return AttachmentOut(
        id=r.id,
        file_name=r.filename,
        file_size=r.filesize,
        content_type=r.content_type,
        digest=Digest(hash=r.digest),
        description=Formattable(raw=r.description),
        downloads=r.downloads,
        created_at=r.created_at,
        links=AttachmentLinks(
            self_=Link(href=self_href, title=r.filename),
            container=Link(
                href=f"{prefix}/{container_path}/{r.container_id}",
                title=r.container_title or None,
            ),
            author=Link(href=f"{prefix}/users/{r.author_id}") if r.author_id else None,
            download_location=Link(href=r.external_url or f"{self_href}/content"),
            delete=Link(href=self_href, method="delete") if r.can_delete else None,
        ),
    )


@router.get(
    "/{attachment_id}",
    response_model=AttachmentOut,
    response_model_exclude_none=True,
    summary="Detalhe de um anexo",
    responses=_NOT_FOUND,
)
async def get_attachment(
    attachment_id: int,
    repo: AttachmentRepository = Depends(get_attachment_repo),
    access: AttachmentAccessService = Depends(get_access_service),
    current_user: User = Depends(get_current_active_user),
):
    uc = GetAttachmentUseCase(repo, access)
    result = await uc.execute(GetAttachmentQuery(attachment_id=attachment_id), current_user)
    return to_attachment_out(result)


@router.delete(
    "/{attachment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remover anexo (metadados + arquivo)",
    responses={**_NOT_FOUND, 403: {"model": ErrorResponse, "description": "Sem permissão de remoção"}},
)
async def delete_attachment(
    attachment_id: int,
    repo: AttachmentRepository = Depends(get_attachment_repo),
    access: AttachmentAccessService = Depends(get_access_service),
    storage: FileStorageService = Depends(get_file_storage),
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_active_user),
):
    uc = DeleteAttachmentUseCase(repo, access, storage, uow)
    await uc.execute(
        DeleteAttachmentCommand(attachment_id=attachment_id, performed_by=current_user.id),
        current_user,
    )


@router.get(
    "/{attachment_id}/content",
    summary="Download do arquivo",
    description="Arquivos locais são enviados em binário; arquivos externos geram 302 para a URL de origem.",
    responses={
        **_NOT_FOUND,
        200: {"content": {"application/octet-stream": {}}, "description": "Conteúdo do arquivo"},
        302: {"description": "Redirect para arquivo hospedado externamente"},
    },
)
async def download_attachment(
    attachment_id: int,
    repo: AttachmentRepository = Depends(get_attachment_repo),
    access: AttachmentAccessService = Depends(get_access_service),
    resolver: DeliveryResolver = Depends(get_delivery_resolver),
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_active_user),
):
    uc = GetAttachmentContentUseCase(repo, access, resolver, uow)
    delivery = await uc.execute(GetAttachmentContentQuery(attachment_id=attachment_id), current_user)

    if isinstance(delivery, RemoteDelivery):
        return RedirectResponse(delivery.url, status_code=status.HTTP_302_FOUND)

    return FileResponse(path=str(delivery.path), headers=delivery.headers)
