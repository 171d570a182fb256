"""Use Case de login — troca credenciais por um access token."""

from __future__ import annotations

import logging
from typing import Callable

from app.domain.systems.users.repository import IUserRepository
from app.application.dtos.user_dtos import LoginCommand, TokenResult

logger = logging.getLogger(__name__)


class LoginUseCase:
    def __init__(
        self,
        repo: IUserRepository,
        verify_fn: Callable[[str, str], bool],
        token_fn: Callable[..., str],
    ) -> None:
        self._repo = repo
        self._verify_fn = verify_fn
        self._token_fn = token_fn

    async def execute(self, cmd: LoginCommand) -> TokenResult:
        user = await self._repo.get_by_login(cmd.login)
        if user is None or not self._verify_fn(cmd.password, user.hashed_password):
            logger.info("Login recusado para '%s'", cmd.login)
            raise ValueError("Credenciais inválidas")
        if not user.is_active:
            raise ValueError("Usuário bloqueado")

        token = self._token_fn(data={"sub": str(user.id), "admin": user.admin})
        return TokenResult(access_token=token, user_id=user.id)
