from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
    )

    APP_NAME: str = "RiskGov"
    APP_VERSION: str = "0.3.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite+aiosqlite:///./riskgov.db"

    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:8080,http://localhost:3000"

    # Readiness templates: bundled YAML is used unless a file with the same
    # assessment type exists in this directory.
    READINESS_TEMPLATE_DIR: str | None = None
    DEFAULT_ASSESSMENT_TYPE: str = "project_readiness"

    # Off: any status change is accepted (only `verified` locks editing).
    STRICT_STATUS_TRANSITIONS: bool = False

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


settings = Settings()
