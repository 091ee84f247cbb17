"""Configuration system for the benefits cost service."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


@dataclass(slots=True)
class DatabaseSettings:
    """Connection details for the worker/enrollment store."""

    driver: str
    host: str
    port: int
    user: str
    password: str
    name: str
    url_override: str | None = None

    @property
    def sqlalchemy_url(self) -> str:
        """Build a SQLAlchemy compatible URL."""

        if self.url_override:
            return self.url_override
        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"

    @property
    def masked_url(self) -> str:
        if self.url_override:
            scheme, _, rest = self.url_override.partition("://")
            if "@" in rest:
                rest = "***@" + rest.split("@", 1)[1]
            return f"{scheme}://{rest}"
        return "{driver}://{user}:{pwd}@{host}:{port}/{name}".format(
            driver=self.driver,
            user=self.user,
            pwd="***" if self.password else "",
            host=self.host,
            port=self.port,
            name=self.name,
        )


@dataclass(slots=True)
class ReportingSettings:
    """Knobs for report queries and the import pipeline."""

    query_timeout_seconds: int = 30
    import_actor: str = "integration@demo.local"
    import_max_bytes: int = 5 * 1024 * 1024
    envelope_max_bytes: int = 5 * 1024 * 1024


@dataclass(slots=True)
class LoggingSettings:
    level: str = "INFO"
    log_dir: str | None = "logs"


@dataclass(slots=True)
class Settings:
    """Top-level application configuration container."""

    database: DatabaseSettings
    reporting: ReportingSettings
    logging: LoggingSettings
    sqlalchemy_echo: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration values from environment variables."""

        def _get_env(name: str, default: str) -> str:
            return os.getenv(name, default)

        def _positive_int(name: str, default: str) -> int:
            raw_value = _get_env(name, default).strip()
            if not raw_value.isdigit() or int(raw_value) <= 0:
                raise ValueError(f"{name} must be a positive integer, got {raw_value!r}.")
            return int(raw_value)

        db = DatabaseSettings(
            driver=_get_env("DB_DRIVER", "mysql+pymysql"),
            host=_get_env("DB_HOST", "127.0.0.1"),
            port=int(_get_env("DB_PORT", "3306")),
            user=_get_env("DB_USER", "benefits"),
            password=_get_env("DB_PASSWORD", "benefits"),
            name=_get_env("DB_NAME", "benefits"),
            url_override=os.getenv("DATABASE_URL") or None,
        )
        reporting = ReportingSettings(
            query_timeout_seconds=_positive_int("QUERY_TIMEOUT_SECONDS", "30"),
            import_actor=_get_env("IMPORT_ACTOR", "integration@demo.local"),
            import_max_bytes=_positive_int("IMPORT_MAX_BYTES", str(5 * 1024 * 1024)),
            envelope_max_bytes=_positive_int("ENVELOPE_MAX_BYTES", str(5 * 1024 * 1024)),
        )
        log_dir = _get_env("LOG_DIR", "logs")
        logging_settings = LoggingSettings(
            level=_get_env("LOG_LEVEL", "INFO"),
            log_dir=log_dir or None,
        )
        echo_flag = _get_env("SQLALCHEMY_ECHO", "0")
        return cls(
            database=db,
            reporting=reporting,
            logging=logging_settings,
            sqlalchemy_echo=echo_flag not in {"0", "false", "False"},
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    # Import locally to avoid circular dependencies during module import time.
    from .logger import get_logger

    logger = get_logger(__name__)
    logger.debug(
        "Settings initialised",
        extra={
            "sqlalchemy_echo": settings.sqlalchemy_echo,
            "database": settings.database.masked_url,
            "reporting": {
                "query_timeout_seconds": settings.reporting.query_timeout_seconds,
                "import_actor": settings.reporting.import_actor,
                "import_max_bytes": settings.reporting.import_max_bytes,
            },
        },
    )
    return settings
