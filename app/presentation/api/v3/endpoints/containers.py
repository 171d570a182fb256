"""
Endpoints de anexos por container — /api/v3/{work_packages|wiki_pages|messages}/{id}/attachments

Listagem, upload multipart e registro de arquivo externo.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import ValidationError

from app.domain.shared.exceptions import BadRequestError
from app.domain.systems.users.entity import User
from app.application.dtos.attachment_dtos import (
    ListContainerAttachmentsQuery,
    RegisterExternalAttachmentCommand,
    UploadAttachmentCommand,
)
from app.application.shared.unit_of_work import UnitOfWork
from app.application.systems.attachments.access import AttachmentAccessService
from app.application.systems.attachments.use_cases import (
    ListContainerAttachmentsUseCase,
    RegisterExternalAttachmentUseCase,
    UploadAttachmentUseCase,
)
from app.infrastructure.services.file_storage import FileStorageService
from app.infrastructure.systems.attachments.repository import AttachmentRepository
from app.presentation.api.v3.endpoints.attachments import to_attachment_out
from app.presentation.api.v3.schemas import (
    AttachmentCollectionOut,
    AttachmentOut,
    ContainerPath,
    EmbeddedAttachments,
    ExternalAttachmentCreate,
    UploadMetadata,
)
from app.presentation.api.v3.deps import (
    get_access_service,
    get_attachment_repo,
    get_current_active_user,
    get_file_storage,
    get_uow,
)

router = APIRouter()


def _parse_metadata(raw: Optional[str]) -> UploadMetadata:
    if not raw:
        return UploadMetadata()
    try:
        return UploadMetadata.model_validate_json(raw)
    except ValidationError as exc:
        raise BadRequestError(f"metadata inválido: {exc.errors()[0]['msg']}") from exc


@router.get(
    "/{container_path}/{container_id}/attachments",
    response_model=AttachmentCollectionOut,
    response_model_exclude_none=True,
    summary="Listar anexos de um container",
)
async def list_attachments(
    container_path: ContainerPath,
    container_id: int,
    repo: AttachmentRepository = Depends(get_attachment_repo),
    access: AttachmentAccessService = Depends(get_access_service),
    current_user: User = Depends(get_current_active_user),
):
    uc = ListContainerAttachmentsUseCase(repo, access)
    results = await uc.execute(
        ListContainerAttachmentsQuery(
            container_type=container_path.container_type.value,
            container_id=container_id,
        ),
        current_user,
    )
    elements = [to_attachment_out(r) for r in results]
    return AttachmentCollectionOut(
        total=len(elements),
        count=len(elements),
        embedded=EmbeddedAttachments(elements=elements),
    )


@router.post(
    "/{container_path}/{container_id}/attachments",
    response_model=AttachmentOut,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Upload de anexo",
    description="Multipart: `file` (obrigatório) e `metadata` (JSON opcional com fileName e description).",
)
async def upload_attachment(
    container_path: ContainerPath,
    container_id: int,
    file: UploadFile = File(...),
    metadata: Optional[str] = Form(default=None),
    repo: AttachmentRepository = Depends(get_attachment_repo),
    access: AttachmentAccessService = Depends(get_access_service),
    storage: FileStorageService = Depends(get_file_storage),
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_active_user),
):
    meta = _parse_metadata(metadata)
    uc = UploadAttachmentUseCase(repo, access, storage, uow)
    result = await uc.execute(
        UploadAttachmentCommand(
            container_type=container_path.container_type.value,
            container_id=container_id,
            performed_by=current_user.id,
            file=file,
            filename=meta.file_name,
            description=meta.description,
        ),
        current_user,
    )
    return to_attachment_out(result)


@router.post(
    "/{container_path}/{container_id}/attachments/external",
    response_model=AttachmentOut,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar anexo hospedado externamente",
    description="O conteúdo não é copiado; downloads são redirecionados para `url`.",
)
async def register_external_attachment(
    container_path: ContainerPath,
    container_id: int,
    payload: ExternalAttachmentCreate,
    repo: AttachmentRepository = Depends(get_attachment_repo),
    access: AttachmentAccessService = Depends(get_access_service),
    uow: UnitOfWork = Depends(get_uow),
    current_user: User = Depends(get_current_active_user),
):
    uc = RegisterExternalAttachmentUseCase(repo, access, uow)
    result = await uc.execute(
        RegisterExternalAttachmentCommand(
            container_type=container_path.container_type.value,
            container_id=container_id,
            performed_by=current_user.id,
            filename=payload.file_name,
            url=str(payload.url),
            content_type=payload.content_type,
            filesize=payload.file_size,
            description=payload.description,
        ),
        current_user,
    )
    return to_attachment_out(result)
