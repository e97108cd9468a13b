from pathlib import Path

import pytest

from pulselift.core.config import Settings

ROOT = Path(__file__).resolve().parents[1]


def test_sqlite_dsn():
    settings = Settings(database_dsn="sqlite+aiosqlite:///./pulselift.db")
    assert settings.is_sqlite
    assert settings.async_database_url == "sqlite+aiosqlite:///./pulselift.db"
    assert settings.database_url == "sqlite:///./pulselift.db"


def test_postgres_urls_from_fields():
    settings = Settings(database_dsn="", database_user="lifter", database_password="p@ss", database_name="gym")
    assert not settings.is_sqlite
    assert settings.async_database_url.startswith("postgresql+asyncpg://lifter:p%40ss@")
    assert settings.database_url.startswith("postgresql://lifter:p%40ss@")
    assert settings.database_url.endswith("/gym?sslmode=prefer")


def test_sqlite_driver_is_an_installable_extra():
    tomllib = pytest.importorskip("tomllib")
    project = tomllib.loads((ROOT / "pyproject.toml").read_text())["project"]
    sqlite_extra = project["optional-dependencies"]["sqlite"]
    assert any(dep.startswith("aiosqlite") for dep in sqlite_extra)
    assert not any(dep.startswith("aiosqlite") for dep in project["dependencies"])
