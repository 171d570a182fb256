"""
Unit of Work — garante transacionalidade e despacho de eventos.

Encapsula a sessão do banco; após commit, executa os hooks de
pós-commit (ex.: limpeza de payload removido) e despacha os eventos
coletados das entidades. Se o commit falhar, executa os hooks de
compensação registrados.
"""

from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.events.base import AggregateRoot, DomainEvent
from app.application.shared.event_dispatcher import event_bus

logger = logging.getLogger(__name__)


class UnitOfWork:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._pending_events: list[DomainEvent] = []
        self._after_commit: list[Callable[[], None]] = []
        self._on_failure: list[Callable[[], None]] = []

    def collect_events_from(self, *aggregates: AggregateRoot) -> None:
        """Coleta eventos pendentes de um ou mais aggregates."""
        for agg in aggregates:
            self._pending_events.extend(agg.collect_events())

    def after_commit(self, callback: Callable[[], None]) -> None:
        self._after_commit.append(callback)

    def on_failure(self, callback: Callable[[], None]) -> None:
        """Compensação executada se o commit falhar ou houver rollback."""
        self._on_failure.append(callback)

    async def commit(self) -> None:
        """Commit da sessão + hooks + despacho de eventos."""
        try:
            await self._session.commit()
        except Exception:
            await self.rollback()
            raise

        for callback in self._after_commit:
            callback()
        self._after_commit.clear()
        self._on_failure.clear()

        if self._pending_events:
            await event_bus.publish(self._pending_events)
            self._pending_events.clear()

    async def rollback(self) -> None:
        await self._session.rollback()
        self._pending_events.clear()
        self._after_commit.clear()
        callbacks, self._on_failure = self._on_failure, []
        for callback in callbacks:
            try:
                callback()
            except Exception as exc:
                logger.error("Falha na compensação após rollback: %s", exc)
