"""Entidade de domínio User — conta que acessa a API (admin global ou não)."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    LOCKED = "locked"


@dataclass
class User:
    id: Optional[int] = None
    login: str = ""
    mail: str = ""
    hashed_password: str = ""
    admin: bool = False
    status: UserStatus = UserStatus.ACTIVE
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_active(self) -> bool:
        return self.status is UserStatus.ACTIVE

    def is_admin(self) -> bool:
        """Admin global: todas as permissões em qualquer projeto ativo."""
        return self.admin
