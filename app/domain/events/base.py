"""
Base dos eventos de domínio.

Entidades acumulam eventos enquanto a operação está em andamento; o
UnitOfWork os recolhe e publica somente depois do commit.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class DomainEvent:
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def event_type(self) -> str:
        return type(self).__name__


class AggregateRoot:
    """
    Mixin de entidades que emitem eventos.

    A fila vive em `__dict__` e é criada sob demanda, então subclasses
    dataclass não precisam chamar o __init__ da base.
    """

    def _record_event(self, event: DomainEvent) -> None:
        self.__dict__.setdefault("_events", []).append(event)

    @property
    def has_pending_events(self) -> bool:
        return bool(self.__dict__.get("_events"))

    def collect_events(self) -> list[DomainEvent]:
        return self.__dict__.pop("_events", [])
