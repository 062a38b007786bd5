import warnings
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, HttpUrl, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "Model Shop Workflow"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    FRONTEND_HOST: str = "http://localhost:3000"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    SENTRY_DSN: HttpUrl | None = None

    # Database
    DATABASE_URL: str = "sqlite:///./modelshop.db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    DATABASE_POOL_RECYCLE: int = 3600
    DATABASE_POOL_PRE_PING: bool = True

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        # Postgres URLs are pinned to the psycopg (v3) driver
        if self.DATABASE_URL.startswith("postgresql://"):
            return self.DATABASE_URL.replace(
                "postgresql://", "postgresql+psycopg://", 1
            )
        elif self.DATABASE_URL.startswith("postgres://"):
            return self.DATABASE_URL.replace("postgres://", "postgresql+psycopg://", 1)
        return self.DATABASE_URL

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_sqlite(self) -> bool:
        return self.SQLALCHEMY_DATABASE_URI.startswith("sqlite")

    # File uploads
    UPLOAD_DIR: Path = Path("public/uploads")
    UPLOAD_URL_PREFIX: str = "/uploads"

    # Task lifecycle
    DEFAULT_COMPLETION_REASON: str = "Task completed successfully"

    # Observability
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"
    LOG_SQL: bool = False
    ENABLE_METRICS: bool = False
    METRICS_PORT: int = 8001

    @model_validator(mode="after")
    def _check_upload_prefix(self) -> Self:
        if not self.UPLOAD_URL_PREFIX.startswith("/"):
            self.UPLOAD_URL_PREFIX = "/" + self.UPLOAD_URL_PREFIX
        self.UPLOAD_URL_PREFIX = self.UPLOAD_URL_PREFIX.rstrip("/")
        return self

    @model_validator(mode="after")
    def _warn_on_sqlite_outside_local(self) -> Self:
        if self.ENVIRONMENT != "local" and self.is_sqlite:
            message = (
                "DATABASE_URL points at SQLite while ENVIRONMENT is "
                f'"{self.ENVIRONMENT}"; use PostgreSQL for shared deployments.'
            )
            warnings.warn(message, stacklevel=1)
        return self


settings = Settings()  # type: ignore
