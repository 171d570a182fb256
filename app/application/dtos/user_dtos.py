"""DTOs de autenticação."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LoginCommand:
    login: str
    password: str


@dataclass(frozen=True)
class TokenResult:
    access_token: str
    user_id: int
