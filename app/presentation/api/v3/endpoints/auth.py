"""
Endpoints de Autenticação — /api/v3/auth

Login (login + senha → JWT) e perfil do usuário autenticado.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.domain.systems.users.entity import User
from app.infrastructure.config import get_settings
from app.infrastructure.systems.users.repository import UserRepository
from app.application.dtos.user_dtos import LoginCommand
from app.application.systems.users.use_cases import LoginUseCase
from app.presentation.api.v3.schemas import ErrorResponse, LoginRequest, TokenOut, UserOut
from app.presentation.api.v3.deps import (
    create_access_token,
    get_current_active_user,
    get_user_repo,
    verify_password,
)

router = APIRouter()
settings = get_settings()


@router.post(
    "/login",
    response_model=TokenOut,
    summary="Login — gera access token",
    responses={400: {"model": ErrorResponse, "description": "Credenciais inválidas ou usuário bloqueado"}},
)
async def login(
    payload: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
):
    uc = LoginUseCase(repo, verify_password, create_access_token)
    result = await uc.execute(LoginCommand(login=payload.login, password=payload.password))
    return TokenOut(
        access_token=result.access_token,
        expires_in=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.get(
    "/me",
    response_model=UserOut,
    response_model_exclude_none=True,
    summary="Perfil do usuário autenticado",
)
async def me(current_user: User = Depends(get_current_active_user)):
    return UserOut(
        id=current_user.id,
        login=current_user.login,
        mail=current_user.mail,
        admin=current_user.admin,
        status=current_user.status.value,
        created_at=current_user.created_at,
    )
