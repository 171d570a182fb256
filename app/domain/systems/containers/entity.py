"""
Containers de anexos — união etiquetada {WorkPackage, WikiPage, Message}.

Cada variante expõe project_id (para resolução de permissões) e
author_id (para regras de autoria).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from app.domain.shared.value_objects import ContainerType


@dataclass(frozen=True)
class WorkPackage:
    container_type: ClassVar[ContainerType] = ContainerType.WORK_PACKAGE

    id: int
    project_id: int
    subject: str = ""
    author_id: Optional[int] = None

    @property
    def title(self) -> str:
        return self.subject


@dataclass(frozen=True)
class WikiPage:
    container_type: ClassVar[ContainerType] = ContainerType.WIKI_PAGE

    id: int
    wiki_id: int
    project_id: int
    title: str = ""
    author_id: Optional[int] = None


@dataclass(frozen=True)
class Message:
    """Mensagem de fórum; o projeto é resolvido via board."""
    container_type: ClassVar[ContainerType] = ContainerType.MESSAGE

    id: int
    board_id: int
    project_id: int
    subject: str = ""
    author_id: Optional[int] = None

    @property
    def title(self) -> str:
        return self.subject


Container = Union[WorkPackage, WikiPage, Message]
