import pytest

from product_ethics.db import models
from product_ethics.db.database import SessionLocal, engine
from product_ethics.utils.settings import refresh_settings_cache


@pytest.fixture(scope="module")
def db():
    models.Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        models.Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean(request):
    """Empty every table before each database test."""
    if "db" not in request.fixturenames:
        yield
        return
    db = request.getfixturevalue("db")
    db.rollback()
    for table in reversed(models.Base.metadata.sorted_tables):
        db.execute(table.delete())
    db.commit()
    refresh_settings_cache()
    yield


@pytest.fixture
def make_client(db):
    """Factory for clients persisted directly, bypassing registration."""
    def _make(verified: bool = True, trust_level: float = 0.5, role: str = "user",
              username: str = None, enabled: bool = True, banned: bool = False):
        c = models.Client(
            username=username,
            verified=verified,
            trust_level=trust_level,
            role=role,
            enabled=enabled,
            banned=banned,
        )
        db.add(c)
        db.commit()
        db.refresh(c)
        return c
    return _make
