"""
Schemas Pydantic — camada de Apresentação.

Representação de anexos no formato HAL simplificado da API v3
(`_type`, `_links`, campos camelCase), auth e error model.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, HttpUrl
from pydantic.alias_generators import to_camel

from app.domain.shared.value_objects import ContainerType


class _CamelModel(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}


# ════════════════════════════════════════════════════════════════
# ERROR MODEL (para Swagger docs)
# ════════════════════════════════════════════════════════════════
class ErrorResponse(BaseModel):
    error: str = Field(..., examples=["not_found"])
    detail: str = Field(..., examples=["Attachment 42 não encontrado"])
    request_id: Optional[str] = None

    model_config = {"json_schema_extra": {"example": {"error": "not_found", "detail": "Attachment 42 não encontrado", "request_id": "a1b2c3d4"}}}


# ════════════════════════════════════════════════════════════════
# AUTH / JWT
# ════════════════════════════════════════════════════════════════
class LoginRequest(BaseModel):
    login: str = Field(..., min_length=1, examples=["joao_silva"])
    password: str = Field(..., examples=["senhaForte123"])


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(default=3600, description="Segundos até expiração")


class UserOut(_CamelModel):
    type_: str = Field("User", alias="_type")
    id: int
    login: str
    mail: str
    admin: bool
    status: str
    created_at: Optional[datetime] = None


# ════════════════════════════════════════════════════════════════
# CONTAINERS
# ════════════════════════════════════════════════════════════════
class ContainerPath(str, Enum):
    """Segmento de URL de cada variante de container."""
    work_packages = "work_packages"
    wiki_pages = "wiki_pages"
    messages = "messages"

    @property
    def container_type(self) -> ContainerType:
        return _PATH_TO_TYPE[self]

    @classmethod
    def for_type(cls, container_type: ContainerType | str) -> "ContainerPath":
        return _TYPE_TO_PATH[ContainerType(container_type)]


_PATH_TO_TYPE = {
    ContainerPath.work_packages: ContainerType.WORK_PACKAGE,
    ContainerPath.wiki_pages: ContainerType.WIKI_PAGE,
    ContainerPath.messages: ContainerType.MESSAGE,
}
_TYPE_TO_PATH = {v: k for k, v in _PATH_TO_TYPE.items()}


# ════════════════════════════════════════════════════════════════
# ATTACHMENTS
# ════════════════════════════════════════════════════════════════

class Link(BaseModel):
    href: str
    title: Optional[str] = None
    method: Optional[str] = None


class Digest(_CamelModel):
    algorithm: str = "md5"
    hash: str = ""


class Formattable(_CamelModel):
    format: str = "plain"
    raw: str = ""


class AttachmentLinks(_CamelModel):
    self_: Link = Field(..., alias="self")
    container: Link
    author: Optional[Link] = None
    download_location: Link
    delete: Optional[Link] = None


class AttachmentOut(_CamelModel):
    type_: str = Field("Attachment", alias="_type")
    id: int
    file_name: str
    file_size: int
    content_type: str
    digest: Digest
    description: Formattable
    downloads: int = 0
    created_at: Optional[datetime] = None
    links: AttachmentLinks = Field(..., alias="_links")


class EmbeddedAttachments(BaseModel):
    elements: list[AttachmentOut] = Field(default_factory=list)


class AttachmentCollectionOut(_CamelModel):
    type_: str = Field("Collection", alias="_type")
    total: int
    count: int
    embedded: EmbeddedAttachments = Field(..., alias="_embedded")


class UploadMetadata(_CamelModel):
    """Parte `metadata` (JSON) do upload multipart."""
    file_name: Optional[str] = Field(None, max_length=255)
    description: str = ""


class ExternalAttachmentCreate(_CamelModel):
    file_name: str = Field(..., min_length=1, max_length=255, examples=["blubs.gif"])
    url: HttpUrl = Field(..., examples=["http://some_service.org/blubs.gif"])
    content_type: Optional[str] = Field(None, max_length=255, examples=["image/gif"])
    file_size: int = Field(default=0, ge=0)
    description: str = ""
