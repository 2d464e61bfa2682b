from typing import Literal, List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import SecretStr, field_validator


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    APP_NAME: str = "DataPorter API"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["local", "dev", "staging", "prod"] = "local"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"      # comma-separated or '*'
    API_PREFIX: str = "/api"

    # Bulk-data backend
    BACKEND_URL: str = "http://localhost:8080/services/apexrest/dataporter"
    BACKEND_TOKEN: SecretStr = SecretStr("")
    BACKEND_TIMEOUT_SEC: float = 30.0

    # Porter
    PREVIEW_MAX_ROWS: int = 10
    MAX_UPLOAD_MB: int = 10

    # Sessions
    MAX_SESSIONS: int = 500
    SESSION_IDLE_TTL_SEC: float = 1800.0

    # -------- validators --------
    @field_validator("BACKEND_URL")
    @classmethod
    def _normalize_url(cls, v: str) -> str:
        v = (v or "").strip().rstrip("/")
        if not v:
            raise ValueError("BACKEND_URL is required (set it in .env)")
        return v

    @field_validator("API_PREFIX")
    @classmethod
    def _normalize_prefix(cls, v: str) -> str:
        v = (v or "").strip().strip("/")
        return f"/{v}" if v else ""

    @field_validator("BACKEND_TIMEOUT_SEC", "PREVIEW_MAX_ROWS", "MAX_UPLOAD_MB", "MAX_SESSIONS", "SESSION_IDLE_TTL_SEC")
    @classmethod
    def _positive(cls, v, info):
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @property
    def CORS_ORIGINS_LIST(self) -> List[str]:
        return ["*"] if self.CORS_ORIGINS.strip() == "*" else [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def MAX_UPLOAD_BYTES(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024

    @property
    def BACKEND_HEADERS(self) -> dict:
        headers = {"Accept": "application/json"}
        token = self.BACKEND_TOKEN.get_secret_value()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

settings = Settings()
