"""
Barramento de eventos em processo.

O UnitOfWork publica aqui os eventos coletados após o commit. Um handler
que falha é logado e não interrompe os demais: a operação principal já
foi confirmada.
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Iterable, Type, Union

from app.domain.events.base import DomainEvent

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Union[None, Awaitable[None]]]


class EventBus:
    def __init__(self) -> None:
        self._handlers: dict[Type[DomainEvent], list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: Handler) -> None:
        """Inscreve `handler` em `event_type`; inscrever duas vezes não duplica."""
        if handler not in self._handlers[event_type]:
            self._handlers[event_type].append(handler)

    def handlers_for(self, event_type: Type[DomainEvent]) -> list[Handler]:
        return list(self._handlers.get(event_type, ()))

    async def publish(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            for handler in self.handlers_for(type(event)):
                try:
                    result = handler(event)
                    if inspect.isawaitable(result):
                        await result
                except Exception:
                    logger.exception(
                        "Handler %s falhou para %s (%s)",
                        getattr(handler, "__name__", repr(handler)),
                        event.event_type,
                        event.event_id,
                    )


event_bus = EventBus()
