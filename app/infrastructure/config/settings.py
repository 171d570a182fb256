"""Configuração via variáveis de ambiente / .env (pydantic-settings)."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings

_CONTAINER_TYPES = {"work_package", "wiki_page", "message"}
_DELETE_RULES = {"permission", "author", "permission_or_author"}


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # ── App ──
    APP_NAME: str = "Attachments API"
    APP_VERSION: str = "0.1.0"
    API_V3_PREFIX: str = "/api/v3"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # ── Database ──
    POSTGRES_USER: str = "app_user"
    POSTGRES_PASSWORD: str = "app_secret"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "attachments"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5

    @property
    def DATABASE_URL(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # ── JWT ──
    JWT_SECRET_KEY: str = "CHANGE-ME-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # ── Attachments ──
    UPLOAD_DIR: str = "uploads"
    MAX_FILE_SIZE_MB: int = 5
    # Regra de deleção por variante: permission | author | permission_or_author
    ATTACHMENT_DELETE_RULES: dict[str, str] = {
        "work_package": "permission",
        "wiki_page": "permission",
        "message": "permission_or_author",
    }

    @property
    def MAX_FILE_SIZE_BYTES(self) -> int:
        return self.MAX_FILE_SIZE_MB * 1024 * 1024

    @field_validator("ATTACHMENT_DELETE_RULES")
    @classmethod
    def _known_delete_rules(cls, rules: dict[str, str]) -> dict[str, str]:
        for container_type, rule in rules.items():
            if container_type not in _CONTAINER_TYPES:
                raise ValueError(f"Tipo de container desconhecido: {container_type}")
            if rule not in _DELETE_RULES:
                raise ValueError(f"Regra de deleção desconhecida para {container_type}: {rule}")
        return rules


@lru_cache
def get_settings() -> Settings:
    return Settings()
