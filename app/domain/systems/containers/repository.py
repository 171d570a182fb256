"""Interface (porta) do registro de containers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.shared.value_objects import ContainerRef

from .entity import Container


class IContainerRepository(ABC):

    @abstractmethod
    async def get(self, ref: ContainerRef) -> Optional[Container]:
        """Resolve a referência para a variante concreta, ou None."""
        ...
