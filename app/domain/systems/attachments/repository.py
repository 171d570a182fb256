"""Interface (porta) do Attachment Store — metadados de anexos."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from app.domain.shared.value_objects import ContainerRef

from .entity import Attachment


class IAttachmentRepository(ABC):

    @abstractmethod
    async def get_by_id(self, attachment_id: int) -> Optional[Attachment]:
        ...

    @abstractmethod
    async def list_for_container(self, ref: ContainerRef) -> Sequence[Attachment]:
        ...

    @abstractmethod
    async def create(self, attachment: Attachment) -> Attachment:
        ...

    @abstractmethod
    async def increment_downloads(self, attachment_id: int) -> None:
        ...

    @abstractmethod
    async def delete(self, attachment_id: int) -> None:
        ...
