"""Router API v3 — agrega todos os sub-routers."""

from fastapi import APIRouter

from app.presentation.api.v3.endpoints.auth import router as auth_router
from app.presentation.api.v3.endpoints.attachments import router as attachments_router
from app.presentation.api.v3.endpoints.containers import router as containers_router

api_v3_router = APIRouter()

api_v3_router.include_router(auth_router, prefix="/auth", tags=["🔐 Autenticação"])
api_v3_router.include_router(attachments_router, prefix="/attachments", tags=["📎 Anexos"])
api_v3_router.include_router(containers_router, tags=["🗂️ Anexos por container"])
