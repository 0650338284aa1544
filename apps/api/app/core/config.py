"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    environment: str = "production"
    auth_provider: Literal["mock", "firebase"] = "firebase"
    backend: Literal["memory", "firebase"] = "firebase"
    firebase_project_id: str | None = None
    firebase_audience: str | None = None
    firebase_storage_bucket: str | None = None
    firebase_credentials_file: str | None = None
    check_revoked_tokens: bool = True
    items_collection: str = "items"
    admin_roles: set[str] = {"admin"}
    allowed_origins: list[str] = ["http://localhost:3000"]

    model_config = SettingsConfigDict(env_prefix="STARTER_", extra="ignore")

    @property
    def uses_firebase(self) -> bool:
        return self.auth_provider == "firebase" or self.backend == "firebase"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
