"""Entidade de domínio Attachment — arquivo + metadados, pertencente a um container."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from app.domain.events.base import AggregateRoot
from app.domain.events.attachment_events import AttachmentCreated, AttachmentDeleted
from app.domain.shared.value_objects import (
    ContainerRef,
    LocalFile,
    RemoteFile,
    StorageLocation,
)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
MAX_FILENAME_LENGTH = 255

_UNSAFE_CHARS = re.compile(r'[\x00-\x1f\x7f<>:"|?*]')


def sanitize_filename(name: Optional[str]) -> str:
    """Remove componentes de path e caracteres inválidos do nome original."""
    if not name:
        return "unnamed"
    base = re.split(r"[\\/]", name)[-1]
    base = _UNSAFE_CHARS.sub("_", base).strip().lstrip(".")
    if not base:
        return "unnamed"
    if len(base) > MAX_FILENAME_LENGTH:
        stem, dot, ext = base.rpartition(".")
        if dot and len(ext) < 16:
            base = stem[: MAX_FILENAME_LENGTH - len(ext) - 1] + "." + ext
        else:
            base = base[:MAX_FILENAME_LENGTH]
    return base


@dataclass
class Attachment(AggregateRoot):
    id: Optional[int] = None
    container: Optional[ContainerRef] = None
    storage: Optional[StorageLocation] = None
    filename: str = ""
    content_type: str = DEFAULT_CONTENT_TYPE
    filesize: int = 0
    digest: str = ""            # md5 hex; vazio para arquivos remotos
    description: str = ""
    author_id: Optional[int] = None
    downloads: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # ── Invariantes ──

    def validate(self) -> None:
        if self.container is None:
            raise ValueError("Anexo precisa de exatamente um container")
        if not isinstance(self.storage, (LocalFile, RemoteFile)):
            raise ValueError("Anexo precisa de um arquivo local ou de uma URL externa")
        if not self.filename.strip():
            raise ValueError("fileName não pode ser vazio")
        if self.filesize < 0:
            raise ValueError("fileSize não pode ser negativo")

    @property
    def is_remote(self) -> bool:
        return isinstance(self.storage, RemoteFile)

    @property
    def disk_filename(self) -> Optional[str]:
        return self.storage.disk_filename if isinstance(self.storage, LocalFile) else None

    @property
    def external_url(self) -> Optional[str]:
        return self.storage.url if isinstance(self.storage, RemoteFile) else None

    # ── Eventos ──

    def record_creation(self) -> None:
        self._record_event(AttachmentCreated(
            attachment_id=self.id,
            container_type=self.container.container_type.value,
            container_id=self.container.container_id,
            filename=self.filename,
            remote=self.is_remote,
            created_by=self.author_id,
        ))

    def record_deletion(self, deleted_by: Optional[int] = None) -> None:
        self._record_event(AttachmentDeleted(
            attachment_id=self.id,
            container_type=self.container.container_type.value,
            container_id=self.container.container_id,
            filename=self.filename,
            deleted_by=deleted_by,
        ))
