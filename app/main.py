"""
Ponto de entrada da API de anexos.

    uvicorn app.main:app --reload --port 8000

Monta logging, middleware (Request ID, CORS, headers de segurança),
exception handlers, rotas /api/v3 e o health check.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.shared.event_handlers import register_all_handlers
from app.infrastructure.config import get_settings
from app.infrastructure.database import get_db
from app.presentation.api.v3.router import api_v3_router
from app.presentation.middleware.exception_handlers import register_exception_handlers
from app.presentation.middleware.request_id import RequestIdLogFilter, RequestIdMiddleware
from app.presentation.middleware.security_headers import SecurityHeadersMiddleware

settings = get_settings()
logger = logging.getLogger(__name__)


def configure_logging() -> None:
    handler = logging.StreamHandler()
    handler.addFilter(RequestIdLogFilter())
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)-5s [%(name)s] [%(request_id)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    register_all_handlers()
    logger.info("✅ %s %s pronto — upload dir: %s", settings.APP_NAME, settings.APP_VERSION, settings.UPLOAD_DIR)
    yield
    logger.info("🛑 App shutting down")


def create_app() -> FastAPI:
    configure_logging()

    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Anexos de work packages, páginas wiki e mensagens de fórum: "
            "metadados, remoção e download (arquivo local ou redirect para URL externa), "
            "com permissões resolvidas por projeto."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=f"{settings.API_V3_PREFIX}/openapi.json",
        lifespan=lifespan,
        responses={
            401: {"description": "Token inválido ou ausente"},
            422: {"description": "Erro de validação"},
        },
    )

    # Último adicionado = mais externo
    application.add_middleware(RequestIdMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Content-Disposition"],
    )
    application.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(application)
    application.include_router(api_v3_router, prefix=settings.API_V3_PREFIX)
    application.add_api_route(
        "/health",
        health_check,
        methods=["GET"],
        tags=["❤️ Health"],
        summary="Verificação de saúde da API",
    )
    return application


async def health_check(db: AsyncSession = Depends(get_db)):
    """Status da API e conectividade com o banco."""
    try:
        await db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as exc:
        logger.warning("Health check: banco indisponível (%s)", exc)
        db_ok = False

    return {
        "status": "ok" if db_ok else "degraded",
        "version": settings.APP_VERSION,
        "database": "connected" if db_ok else "disconnected",
    }


app = create_app()
