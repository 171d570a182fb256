"""Serviço de armazenamento de payloads de anexos no filesystem local."""

from __future__ import annotations

import hashlib
import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from app.domain.shared.exceptions import PayloadTooLargeError
from app.domain.shared.value_objects import ContainerRef
from app.infrastructure.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
TRASH_DIR = ".trash"


class FileStorageError(Exception):
    pass


@dataclass(frozen=True)
class StoredFile:
    disk_filename: str
    content_type: str
    filesize: int
    digest: str


class FileStorageService:
    """Armazena arquivos em disco local. Organiza por tipo/id do container."""

    def __init__(self, base_dir: Optional[str | Path] = None, max_bytes: Optional[int] = None) -> None:
        self.base_dir = Path(base_dir or settings.UPLOAD_DIR).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.max_bytes = max_bytes if max_bytes is not None else settings.MAX_FILE_SIZE_BYTES

    def _container_dir(self, ref: ContainerRef) -> Path:
        d = self.base_dir / ref.container_type.value / str(ref.container_id)
        d.mkdir(parents=True, exist_ok=True)
        return d

    @staticmethod
    def detect_content_type(filename: str, declared: Optional[str]) -> str:
        if declared and declared != "application/octet-stream":
            return declared
        guessed, _ = mimetypes.guess_type(filename)
        return guessed or "application/octet-stream"

    async def save(self, ref: ContainerRef, file: UploadFile, filename: str) -> StoredFile:
        """Grava o upload em chunks, calculando md5 e validando o tamanho."""
        ext = Path(filename).suffix.lower()[:16]
        dest = self._container_dir(ref) / f"{uuid.uuid4().hex}{ext}"

        md5 = hashlib.md5()
        size = 0
        try:
            with dest.open("wb") as out:
                while chunk := await file.read(CHUNK_SIZE):
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise PayloadTooLargeError(self.max_bytes)
                    md5.update(chunk)
                    out.write(chunk)
        except Exception:
            dest.unlink(missing_ok=True)
            raise

        return StoredFile(
            disk_filename=dest.relative_to(self.base_dir).as_posix(),
            content_type=self.detect_content_type(filename, file.content_type),
            filesize=size,
            digest=md5.hexdigest(),
        )

    def get_path(self, disk_filename: str) -> Path:
        """Retorna o path completo de um arquivo, recusando saída do UPLOAD_DIR."""
        path = (self.base_dir / disk_filename).resolve()
        if not path.is_relative_to(self.base_dir):
            raise FileStorageError(f"Path fora do diretório de uploads: {disk_filename}")
        return path

    def delete(self, disk_filename: str) -> None:
        self.get_path(disk_filename).unlink(missing_ok=True)

    # ── Remoção em duas fases ──

    def stage_delete(self, disk_filename: str) -> Optional[Path]:
        """
        Move o payload para a lixeira. Retorna o path na lixeira, ou None
        se o payload já não existia.
        """
        path = self.get_path(disk_filename)
        if not path.exists():
            logger.warning("Payload ausente ao remover anexo: %s", disk_filename)
            return None
        trash = self.base_dir / TRASH_DIR
        trash.mkdir(parents=True, exist_ok=True)
        staged = trash / f"{uuid.uuid4().hex}-{path.name}"
        path.rename(staged)
        return staged

    def restore(self, staged: Optional[Path], disk_filename: str) -> None:
        if staged is None:
            return
        staged.rename(self.get_path(disk_filename))

    def purge(self, staged: Optional[Path]) -> None:
        if staged is None:
            return
        try:
            staged.unlink(missing_ok=True)
        except OSError as exc:
            logger.error("Falha ao limpar payload removido %s: %s", staged, exc)
