"""
Delivery Resolver — decide entre servir bytes locais ou redirecionar.

A decisão é tomada uma única vez por request, a partir do StorageLocation
do anexo. Arquivos remotos nunca têm payload lido pelo servidor.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union
from urllib.parse import quote

from app.domain.shared.exceptions import NotFoundError
from app.domain.shared.value_objects import LocalFile, RemoteFile
from app.domain.systems.attachments.entity import Attachment
from app.infrastructure.services.file_storage import FileStorageService

logger = logging.getLogger(__name__)

_TOKEN_FILENAME = re.compile(r"^[A-Za-z0-9!#$&+.^_`|~-]+$")


@dataclass(frozen=True)
class LocalDelivery:
    path: Path
    filename: str
    content_type: str

    @property
    def headers(self) -> dict[str, str]:
        return {
            "content-type": self.content_type,
            "content-disposition": content_disposition(self.filename),
        }


@dataclass(frozen=True)
class RemoteDelivery:
    url: str


Delivery = Union[LocalDelivery, RemoteDelivery]


def content_disposition(filename: str, disposition: str = "attachment") -> str:
    """
    `attachment; filename=<nome>` para nomes token-safe; caso contrário
    nome ASCII entre aspas + `filename*` (RFC 6266 / 5987).
    """
    if _TOKEN_FILENAME.match(filename):
        return f"{disposition}; filename={filename}"
    fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    fallback = fallback.replace("\\", "_").replace('"', "_")
    return f"{disposition}; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


class DeliveryResolver:
    def __init__(self, storage: FileStorageService) -> None:
        self._storage = storage

    def resolve(self, attachment: Attachment) -> Delivery:
        location = attachment.storage
        if isinstance(location, RemoteFile):
            return RemoteDelivery(url=location.url)
        if isinstance(location, LocalFile):
            path = self._storage.get_path(location.disk_filename)
            if not path.is_file():
                logger.warning("Payload ausente para anexo %d: %s", attachment.id, path)
                raise NotFoundError("Attachment", attachment.id)
            return LocalDelivery(
                path=path,
                filename=attachment.filename,
                content_type=attachment.content_type,
            )
        raise ValueError(f"Anexo {attachment.id} sem armazenamento definido")
