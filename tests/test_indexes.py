from app.infrastructure.database.models import (
    AttachmentAuditLogModel,
    AttachmentModel,
    MemberModel,
)


def test_attachment_model_indexes():
    """Listagem por container e ordenação por criação precisam de índice."""
    assert AttachmentModel.created_at.index is True, "AttachmentModel.created_at should have index=True"

    indexes = {i.name: i for i in AttachmentModel.__table__.indexes}
    assert "ix_attachments_container" in indexes
    col_names = [c.name for c in indexes["ix_attachments_container"].columns]
    assert col_names == ["container_type", "container_id"], f"got {col_names}"


def test_attachment_single_storage_constraint():
    names = {c.name for c in AttachmentModel.__table__.constraints}
    assert "ck_attachments_single_storage" in names


def test_attachment_audit_log_model_indexes():
    assert AttachmentAuditLogModel.performed_at.index is True
    assert AttachmentAuditLogModel.attachment_id.index is True


def test_member_lookup_index():
    indexes = {i.name: i for i in MemberModel.__table__.indexes}
    assert "ix_members_user_id_project_id" in indexes
    col_names = [c.name for c in indexes["ix_members_user_id_project_id"].columns]
    assert col_names == ["user_id", "project_id"]
