"""DTOs da camada de aplicação para Attachments — commands e queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


# ════════════════════════════════════════════════════════════════
# COMMANDS
# ════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class UploadAttachmentCommand:
    container_type: str
    container_id: int
    performed_by: int
    file: Any                      # UploadFile (async read)
    filename: Optional[str] = None  # sobrescreve o nome do upload
    description: str = ""


@dataclass(frozen=True)
class RegisterExternalAttachmentCommand:
    container_type: str
    container_id: int
    performed_by: int
    filename: str
    url: str
    content_type: Optional[str] = None
    filesize: int = 0
    description: str = ""


@dataclass(frozen=True)
class DeleteAttachmentCommand:
    attachment_id: int
    performed_by: int


# ════════════════════════════════════════════════════════════════
# QUERIES
# ════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class GetAttachmentQuery:
    attachment_id: int


@dataclass(frozen=True)
class GetAttachmentContentQuery:
    attachment_id: int


@dataclass(frozen=True)
class ListContainerAttachmentsQuery:
    container_type: str
    container_id: int


# ════════════════════════════════════════════════════════════════
# RESULT DTOs
# ════════════════════════════════════════════════════════════════

@dataclass
class AttachmentResult:
    id: int
    filename: str
    filesize: int
    content_type: str
    digest: str
    description: str
    container_type: str
    container_id: int
    container_title: str
    author_id: Optional[int]
    external_url: Optional[str]
    downloads: int
    can_delete: bool
    created_at: Optional[str] = None
