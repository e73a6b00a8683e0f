import pytest
from sqlalchemy import inspect

from product_ethics.db import database


def test_pytest_runtime_uses_in_memory_sqlite():
    assert database._is_pytest_runtime()
    assert database.engine.url.get_backend_name() == "sqlite"


def test_database_url_from_parts(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    for name, value in {
        "POSTGRES_USER": "u",
        "POSTGRES_PASSWORD": "p",
        "POSTGRES_HOST": "db",
        "POSTGRES_PORT": "5432",
        "POSTGRES_DB": "ethics",
    }.items():
        monkeypatch.setenv(name, value)
    assert database._get_database_url() == "postgresql://u:p@db:5432/ethics"

    monkeypatch.setenv("DATABASE_URL", "sqlite:///x.db")
    assert database._get_database_url() == "sqlite:///x.db"


def test_database_url_requires_all_parts(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("POSTGRES_USER", "u")
    for name in ("POSTGRES_PASSWORD", "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_DB"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(ValueError, match="POSTGRES_PASSWORD"):
        database._get_database_url()


def test_init_db_and_get_db():
    database.init_db()
    assert "clients" in inspect(database.engine).get_table_names()

    gen = database.get_db()
    session = next(gen)
    assert session.is_active
    gen.close()
