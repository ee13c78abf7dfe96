"""
Shared fixtures: an in-memory SQLite database per test and a TestClient bound to it.
The app's startup hook is not run (no `with TestClient(...)`), so the dev database is never touched.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import learnhub.models  # noqa: F401  registers tables on Base.metadata
from learnhub.database import Base, get_db


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    """TestClient with get_db overridden: one session per request, like the app."""
    pytest.importorskip("httpx")
    from fastapi.testclient import TestClient
    from learnhub.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)
