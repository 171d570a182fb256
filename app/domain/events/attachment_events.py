"""Eventos de domínio relacionados a Attachments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.domain.events.base import DomainEvent


@dataclass(frozen=True)
class AttachmentCreated(DomainEvent):
    attachment_id: int = 0
    container_type: str = ""
    container_id: int = 0
    filename: str = ""
    remote: bool = False
    created_by: Optional[int] = None


@dataclass(frozen=True)
class AttachmentDeleted(DomainEvent):
    attachment_id: int = 0
    container_type: str = ""
    container_id: int = 0
    filename: str = ""
    deleted_by: Optional[int] = None
