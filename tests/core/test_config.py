import pytest
from sqlalchemy.pool import StaticPool

from benefits.core.config import Settings
from benefits.db import create_sync_engine, timeout_connect_args


def test_database_url_overrides_composed_url(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://user:secret@db:5432/benefits")

    database = Settings.from_env().database

    assert database.sqlalchemy_url == "postgresql+psycopg://user:secret@db:5432/benefits"
    assert "secret" not in database.masked_url


def test_invalid_timeout_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("QUERY_TIMEOUT_SECONDS", "soon")

    with pytest.raises(ValueError, match="QUERY_TIMEOUT_SECONDS"):
        Settings.from_env()


def test_blank_log_dir_disables_file_logging(monkeypatch) -> None:
    monkeypatch.setenv("LOG_DIR", "")
    monkeypatch.setenv("SQLALCHEMY_ECHO", "1")

    settings = Settings.from_env()

    assert settings.logging.log_dir is None
    assert settings.sqlalchemy_echo is True


@pytest.mark.parametrize(
    ("backend", "expected"),
    [
        ("postgresql", {"options": "-c statement_timeout=5000"}),
        ("mysql", {"read_timeout": 5, "write_timeout": 5}),
        ("sqlite", {"timeout": 5}),
        ("oracle", {}),
    ],
)
def test_query_timeout_connect_args(backend: str, expected: dict) -> None:
    assert timeout_connect_args(backend, 5) == expected


@pytest.mark.parametrize("url", ["sqlite://", "sqlite+pysqlite://", "sqlite:///:memory:"])
def test_in_memory_sqlite_shares_one_connection(url: str) -> None:
    engine = create_sync_engine(url)
    try:
        assert isinstance(engine.pool, StaticPool)
    finally:
        engine.dispose()


def test_file_sqlite_uses_regular_pool(tmp_path) -> None:
    engine = create_sync_engine(f"sqlite:///{tmp_path / 'benefits.db'}")
    try:
        assert not isinstance(engine.pool, StaticPool)
    finally:
        engine.dispose()
