"""
Modelos SQLAlchemy — camada de Infraestrutura.

Tabelas:
  - users                  (admin global, status active | locked)
  - projects               (público/privado, ativo/arquivado)
  - roles                  (lista de permissões JSON; builtin non_member)
  - members                (user × project × role)
  - work_packages
  - wikis / wiki_pages     (página → wiki → projeto)
  - boards / messages      (mensagem → board → projeto)
  - attachments            (container polimórfico; arquivo local XOR URL externa)
  - attachment_audit_logs  (criação/remoção de anexos)
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
    JSON,
    Index,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from app.infrastructure.database.session import Base


# ────────────────────────────────────────────────────────────────
# USERS
# ────────────────────────────────────────────────────────────────
class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    login = Column(String(150), unique=True, nullable=False, index=True)
    mail = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(Text, nullable=False)
    admin = Column(Boolean, default=False, nullable=False, index=True)
    status = Column(String(20), nullable=False, server_default="active")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    memberships = relationship("MemberModel", back_populates="user", cascade="all, delete-orphan")


# ────────────────────────────────────────────────────────────────
# PROJECTS / ROLES / MEMBERS
# ────────────────────────────────────────────────────────────────
class ProjectModel(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    identifier = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    is_public = Column(Boolean, default=False, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship("MemberModel", back_populates="project", cascade="all, delete-orphan")


class RoleModel(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    permissions = Column(JSON().with_variant(JSONB, "postgresql"), default=list)
    builtin = Column(String(50), nullable=False, server_default="none", index=True)


class MemberModel(Base):
    __tablename__ = "members"

    __table_args__ = (
        UniqueConstraint("user_id", "project_id", "role_id", name="uq_members_user_project_role"),
        Index("ix_members_user_id_project_id", "user_id", "project_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("UserModel", back_populates="memberships")
    project = relationship("ProjectModel", back_populates="members")
    role = relationship("RoleModel")


# ────────────────────────────────────────────────────────────────
# CONTAINERS
# ────────────────────────────────────────────────────────────────
class WorkPackageModel(Base):
    __tablename__ = "work_packages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class WikiModel(Base):
    __tablename__ = "wikis"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, unique=True)
    start_page = Column(String(255), nullable=False, server_default="Wiki")

    pages = relationship("WikiPageModel", back_populates="wiki", cascade="all, delete-orphan")


class WikiPageModel(Base):
    __tablename__ = "wiki_pages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    wiki_id = Column(Integer, ForeignKey("wikis.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    wiki = relationship("WikiModel", back_populates="pages")


class BoardModel(Base):
    __tablename__ = "boards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)

    messages = relationship("MessageModel", back_populates="board", cascade="all, delete-orphan")


class MessageModel(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    board_id = Column(Integer, ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    content = Column(Text, default="")
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    board = relationship("BoardModel", back_populates="messages")


# ────────────────────────────────────────────────────────────────
# ATTACHMENTS
# ────────────────────────────────────────────────────────────────
class AttachmentModel(Base):
    __tablename__ = "attachments"

    __table_args__ = (
        Index("ix_attachments_container", "container_type", "container_id"),
        CheckConstraint(
            "(disk_filename IS NULL) <> (external_url IS NULL)",
            name="ck_attachments_single_storage",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    container_type = Column(String(50), nullable=False)
    container_id = Column(Integer, nullable=False)
    filename = Column(String(255), nullable=False)
    disk_filename = Column(String(500), nullable=True)
    external_url = Column(Text, nullable=True)
    content_type = Column(String(255), nullable=False, server_default="application/octet-stream")
    filesize = Column(Integer, nullable=False, server_default="0")
    digest = Column(String(64), nullable=False, server_default="")
    description = Column(Text, nullable=False, server_default="")
    downloads = Column(Integer, nullable=False, server_default="0")
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    author = relationship("UserModel")


# ────────────────────────────────────────────────────────────────
# AUDIT LOGS — Anexos
# ────────────────────────────────────────────────────────────────
class AttachmentAuditLogModel(Base):
    __tablename__ = "attachment_audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    attachment_id = Column(Integer, nullable=False, index=True)  # sem FK: sobrevive à remoção
    container_type = Column(String(50), nullable=False)
    container_id = Column(Integer, nullable=False)
    filename = Column(String(255), nullable=False)
    action = Column(String(50), nullable=False)       # "created", "deleted"
    performed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    performed_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
