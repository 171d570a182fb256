"""
Event Handlers — gravam audit logs de anexos a partir de eventos de domínio.

Registrados na inicialização da app (app/main.py).
"""

from __future__ import annotations

import logging
from typing import Optional

from app.domain.events.attachment_events import AttachmentCreated, AttachmentDeleted
from app.application.shared.event_dispatcher import event_bus
from app.infrastructure.database.models import AttachmentAuditLogModel
from app.infrastructure.database.session import background_session

logger = logging.getLogger(__name__)


async def _write_audit_log(
    *,
    attachment_id: int,
    container_type: str,
    container_id: int,
    filename: str,
    action: str,
    performed_by: Optional[int],
) -> None:
    async with background_session() as session:
        session.add(AttachmentAuditLogModel(
            attachment_id=attachment_id,
            container_type=container_type,
            container_id=container_id,
            filename=filename,
            action=action,
            performed_by=performed_by,
        ))
        await session.commit()


async def handle_attachment_created(event: AttachmentCreated) -> None:
    await _write_audit_log(
        attachment_id=event.attachment_id,
        container_type=event.container_type,
        container_id=event.container_id,
        filename=event.filename,
        action="created",
        performed_by=event.created_by,
    )
    logger.info(
        "Audit: Attachment %d created on %s %d",
        event.attachment_id, event.container_type, event.container_id,
    )


async def handle_attachment_deleted(event: AttachmentDeleted) -> None:
    await _write_audit_log(
        attachment_id=event.attachment_id,
        container_type=event.container_type,
        container_id=event.container_id,
        filename=event.filename,
        action="deleted",
        performed_by=event.deleted_by,
    )
    logger.info("Audit: Attachment %d deleted by %s", event.attachment_id, event.deleted_by)


# ════════════════════════════════════════════════════════════════
# REGISTRATION
# ════════════════════════════════════════════════════════════════

def register_all_handlers() -> None:
    """Inscreve os handlers de audit log no barramento (idempotente)."""
    event_bus.subscribe(AttachmentCreated, handle_attachment_created)
    event_bus.subscribe(AttachmentDeleted, handle_attachment_deleted)

    logger.info("Audit log event handlers registered")
