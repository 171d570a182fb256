"""attachments schema: users, projects, roles, members, containers, attachments

Revision ID: 0001_attachments_schema
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers
revision: str = "0001_attachments_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) Usuários
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("login", sa.String(150), nullable=False),
        sa.Column("mail", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.Text, nullable=False),
        sa.Column("admin", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_users_login"), "users", ["login"], unique=True)
    op.create_index(op.f("ix_users_mail"), "users", ["mail"], unique=True)
    op.create_index(op.f("ix_users_admin"), "users", ["admin"], unique=False)

    # 2) Projetos, roles e membros
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("identifier", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_projects_identifier"), "projects", ["identifier"], unique=True)

    op.create_table(
        "roles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("permissions", JSONB, nullable=True),
        sa.Column("builtin", sa.String(50), nullable=False, server_default="none"),
    )
    op.create_index(op.f("ix_roles_builtin"), "roles", ["builtin"], unique=False)

    op.create_table(
        "members",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role_id", sa.Integer, sa.ForeignKey("roles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "project_id", "role_id", name="uq_members_user_project_role"),
    )
    op.create_index("ix_members_user_id_project_id", "members", ["user_id", "project_id"], unique=False)

    # 3) Containers
    op.create_table(
        "work_packages",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("author_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_work_packages_project_id"), "work_packages", ["project_id"], unique=False)
    op.create_index(op.f("ix_work_packages_author_id"), "work_packages", ["author_id"], unique=False)

    op.create_table(
        "wikis",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("start_page", sa.String(255), nullable=False, server_default="Wiki"),
    )

    op.create_table(
        "wiki_pages",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("wiki_id", sa.Integer, sa.ForeignKey("wikis.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("author_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_wiki_pages_wiki_id"), "wiki_pages", ["wiki_id"], unique=False)
    op.create_index(op.f("ix_wiki_pages_author_id"), "wiki_pages", ["author_id"], unique=False)

    op.create_table(
        "boards",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
    )
    op.create_index(op.f("ix_boards_project_id"), "boards", ["project_id"], unique=False)

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("board_id", sa.Integer, sa.ForeignKey("boards.id", ondelete="CASCADE"), nullable=False),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("content", sa.Text),
        sa.Column("author_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_messages_board_id"), "messages", ["board_id"], unique=False)
    op.create_index(op.f("ix_messages_author_id"), "messages", ["author_id"], unique=False)

    # 4) Anexos (container polimórfico, arquivo local XOR URL externa)
    op.create_table(
        "attachments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("container_type", sa.String(50), nullable=False),
        sa.Column("container_id", sa.Integer, nullable=False),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("disk_filename", sa.String(500), nullable=True),
        sa.Column("external_url", sa.Text, nullable=True),
        sa.Column("content_type", sa.String(255), nullable=False, server_default="application/octet-stream"),
        sa.Column("filesize", sa.Integer, nullable=False, server_default="0"),
        sa.Column("digest", sa.String(64), nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("downloads", sa.Integer, nullable=False, server_default="0"),
        sa.Column("author_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "(disk_filename IS NULL) <> (external_url IS NULL)",
            name="ck_attachments_single_storage",
        ),
    )
    op.create_index("ix_attachments_container", "attachments", ["container_type", "container_id"], unique=False)
    op.create_index(op.f("ix_attachments_author_id"), "attachments", ["author_id"], unique=False)
    op.create_index(op.f("ix_attachments_created_at"), "attachments", ["created_at"], unique=False)

    # 5) Auditoria
    op.create_table(
        "attachment_audit_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("attachment_id", sa.Integer, nullable=False),
        sa.Column("container_type", sa.String(50), nullable=False),
        sa.Column("container_id", sa.Integer, nullable=False),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("performed_by", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("performed_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_attachment_audit_logs_attachment_id"), "attachment_audit_logs", ["attachment_id"], unique=False)
    op.create_index(op.f("ix_attachment_audit_logs_performed_by"), "attachment_audit_logs", ["performed_by"], unique=False)
    op.create_index(op.f("ix_attachment_audit_logs_performed_at"), "attachment_audit_logs", ["performed_at"], unique=False)


def downgrade() -> None:
    op.drop_table("attachment_audit_logs")
    op.drop_table("attachments")
    op.drop_table("messages")
    op.drop_table("boards")
    op.drop_table("wiki_pages")
    op.drop_table("wikis")
    op.drop_table("work_packages")
    op.drop_index("ix_members_user_id_project_id", table_name="members")
    op.drop_table("members")
    op.drop_table("roles")
    op.drop_table("projects")
    op.drop_table("users")
