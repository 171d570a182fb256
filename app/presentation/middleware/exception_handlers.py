"""
Exception handlers globais — converte exceções de domínio/aplicação
em respostas HTTP padronizadas.
"""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.domain.shared.exceptions import BadRequestError, NotFoundError, PayloadTooLargeError
from app.domain.systems.users.authorization_service import AuthorizationError
from app.infrastructure.services.file_storage import FileStorageError

logger = logging.getLogger(__name__)


def _error(request: Request, status_code: int, error: str, detail: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "detail": detail,
            **extra,
            "request_id": getattr(request.state, "request_id", None),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registra todos os handlers de exceção na app FastAPI."""

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError):
        logger.info("Forbidden on %s %s: %s", request.method, request.url.path, exc)
        return _error(request, status.HTTP_403_FORBIDDEN, "forbidden", str(exc))

    @app.exception_handler(NotFoundError)
    async def not_found_error_handler(request: Request, exc: NotFoundError):
        return _error(
            request, status.HTTP_404_NOT_FOUND, "not_found", str(exc), resource=exc.resource,
        )

    @app.exception_handler(PayloadTooLargeError)
    async def payload_too_large_handler(request: Request, exc: PayloadTooLargeError):
        return _error(request, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "payload_too_large", str(exc))

    @app.exception_handler(BadRequestError)
    async def bad_request_error_handler(request: Request, exc: BadRequestError):
        return _error(request, status.HTTP_400_BAD_REQUEST, "bad_request", str(exc))

    @app.exception_handler(FileStorageError)
    async def file_storage_error_handler(request: Request, exc: FileStorageError):
        return _error(request, status.HTTP_400_BAD_REQUEST, "bad_request", str(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _error(request, status.HTTP_400_BAD_REQUEST, "validation_error", str(exc))

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s: %s\n%s",
            request.method,
            request.url.path,
            exc,
            traceback.format_exc(),
        )
        return _error(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "internal_server_error",
            "Erro interno do servidor",
        )
