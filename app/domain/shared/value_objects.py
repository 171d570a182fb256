"""Value Objects do domínio — imutáveis, comparados por valor."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union


class ContainerType(str, enum.Enum):
    """Variantes de container que podem possuir anexos."""
    WORK_PACKAGE = "work_package"
    WIKI_PAGE = "wiki_page"
    MESSAGE = "message"

    @property
    def label(self) -> str:
        return "".join(part.capitalize() for part in self.value.split("_"))


@dataclass(frozen=True)
class ContainerRef:
    """
    Referência não-proprietária de um anexo ao seu container.
    Todo anexo tem exatamente uma.
    """
    container_type: ContainerType
    container_id: int

    def __post_init__(self):
        if not isinstance(self.container_type, ContainerType):
            object.__setattr__(self, "container_type", ContainerType(self.container_type))
        if self.container_id is None:
            raise ValueError("Container de anexo não pode ser nulo")


@dataclass(frozen=True)
class LocalFile:
    """Payload armazenado no disco, relativo ao UPLOAD_DIR."""
    disk_filename: str


@dataclass(frozen=True)
class RemoteFile:
    """Payload hospedado fora do servidor; servido por redirect."""
    url: str

    def __post_init__(self):
        if not self.url.startswith(("http://", "https://")):
            raise ValueError(f"URL externa inválida: {self.url}")


StorageLocation = Union[LocalFile, RemoteFile]


@dataclass(frozen=True)
class PermissionSet:
    """Permissões efetivas de um usuário no escopo de um projeto."""
    permissions: frozenset[str] = frozenset()

    def __contains__(self, permission: str) -> bool:
        return permission in self.permissions

    def allows_any(self, *permissions: str) -> bool:
        return any(p in self.permissions for p in permissions)

    def __bool__(self) -> bool:
        return bool(self.permissions)

    @classmethod
    def of(cls, *groups) -> "PermissionSet":
        merged: set[str] = set()
        for group in groups:
            merged.update(group)
        return cls(frozenset(merged))


EMPTY_PERMISSIONS = PermissionSet()
