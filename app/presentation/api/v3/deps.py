"""
Dependências de autenticação JWT e factories de DI.

Inclui: access token, active-user guard, repositórios, storage,
avaliador de acesso e use cases de anexos.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.config import get_settings
from app.infrastructure.database import get_db
from app.infrastructure.services.file_storage import FileStorageService
from app.infrastructure.systems.attachments.repository import AttachmentRepository
from app.infrastructure.systems.containers.repository import ContainerRepository
from app.infrastructure.systems.projects.repository import ProjectRepository
from app.infrastructure.systems.users.repository import UserRepository
from app.domain.systems.attachments.policy import AttachmentPolicy
from app.domain.systems.users.entity import User
from app.application.shared.unit_of_work import UnitOfWork
from app.application.systems.attachments.access import AttachmentAccessService
from app.application.systems.attachments.delivery import DeliveryResolver

settings = get_settings()
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V3_PREFIX}/auth/login")


# ════════════════════════════════════════════════════════════════
# PASSWORD
# ════════════════════════════════════════════════════════════════

def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


# ════════════════════════════════════════════════════════════════
# JWT
# ════════════════════════════════════════════════════════════════

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Decodifica e valida um token JWT. Raises JWTError."""
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


# ════════════════════════════════════════════════════════════════
# FASTAPI DEPENDENCIES
# ════════════════════════════════════════════════════════════════

async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extrai e valida o usuário do access token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token inválido ou expirado",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token)
        if payload.get("type") != "access":
            raise credentials_exception
        user_id = int(payload.get("sub", 0))
        if not user_id:
            raise credentials_exception
    except (JWTError, ValueError):
        raise credentials_exception

    repo = UserRepository(db)
    user = await repo.get_by_id(user_id)
    if user is None:
        raise credentials_exception
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Usuários bloqueados mantêm o token mas perdem o acesso."""
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuário bloqueado",
        )
    return current_user


# ════════════════════════════════════════════════════════════════
# DI FACTORIES — Repositórios, UoW, storage e acesso
# ════════════════════════════════════════════════════════════════

def get_uow(db: AsyncSession = Depends(get_db)) -> UnitOfWork:
    return UnitOfWork(db)


def get_user_repo(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_attachment_repo(db: AsyncSession = Depends(get_db)) -> AttachmentRepository:
    return AttachmentRepository(db)


def get_file_storage() -> FileStorageService:
    return FileStorageService()


def get_attachment_policy() -> AttachmentPolicy:
    return AttachmentPolicy(settings.ATTACHMENT_DELETE_RULES)


def get_access_service(
    db: AsyncSession = Depends(get_db),
    policy: AttachmentPolicy = Depends(get_attachment_policy),
) -> AttachmentAccessService:
    return AttachmentAccessService(ContainerRepository(db), ProjectRepository(db), policy)


def get_delivery_resolver(
    storage: FileStorageService = Depends(get_file_storage),
) -> DeliveryResolver:
    return DeliveryResolver(storage)
