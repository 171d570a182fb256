"""Registro de containers — resolve ContainerRef para a variante concreta."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.shared.value_objects import ContainerRef, ContainerType
from app.domain.systems.containers.entity import Container, Message, WikiPage, WorkPackage
from app.domain.systems.containers.repository import IContainerRepository
from app.infrastructure.database.models import (
    BoardModel,
    MessageModel,
    WikiModel,
    WikiPageModel,
    WorkPackageModel,
)


class ContainerRepository(IContainerRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, ref: ContainerRef) -> Optional[Container]:
        if ref.container_type is ContainerType.WORK_PACKAGE:
            return await self._get_work_package(ref.container_id)
        if ref.container_type is ContainerType.WIKI_PAGE:
            return await self._get_wiki_page(ref.container_id)
        if ref.container_type is ContainerType.MESSAGE:
            return await self._get_message(ref.container_id)
        raise ValueError(f"Tipo de container desconhecido: {ref.container_type}")

    async def _get_work_package(self, wp_id: int) -> Optional[WorkPackage]:
        model = await self._session.get(WorkPackageModel, wp_id)
        if not model:
            return None
        return WorkPackage(
            id=model.id,
            project_id=model.project_id,
            subject=model.subject,
            author_id=model.author_id,
        )

    async def _get_wiki_page(self, page_id: int) -> Optional[WikiPage]:
        stmt = (
            select(WikiPageModel, WikiModel.project_id)
            .join(WikiModel, WikiPageModel.wiki_id == WikiModel.id)
            .where(WikiPageModel.id == page_id)
        )
        row = (await self._session.execute(stmt)).first()
        if not row:
            return None
        page, project_id = row
        return WikiPage(
            id=page.id,
            wiki_id=page.wiki_id,
            project_id=project_id,
            title=page.title,
            author_id=page.author_id,
        )

    async def _get_message(self, message_id: int) -> Optional[Message]:
        stmt = (
            select(MessageModel, BoardModel.project_id)
            .join(BoardModel, MessageModel.board_id == BoardModel.id)
            .where(MessageModel.id == message_id)
        )
        row = (await self._session.execute(stmt)).first()
        if not row:
            return None
        message, project_id = row
        return Message(
            id=message.id,
            board_id=message.board_id,
            project_id=project_id,
            subject=message.subject,
            author_id=message.author_id,
        )
