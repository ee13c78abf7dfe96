"""
SQLAlchemy engine and session. Supports PostgreSQL and SQLite (for local runs without Docker).
Sync usage; one session per request via get_db.
"""
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from learnhub.config import settings

logger = logging.getLogger(__name__)

_is_sqlite = "sqlite" in settings.database_url
_connect_args = {"check_same_thread": False} if _is_sqlite else {}
engine = create_engine(
    settings.database_url,
    pool_pre_ping=not _is_sqlite,
    connect_args=_connect_args,
    echo=False,  # Set True for SQL logging during development
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# Collections every fresh install starts with (page route, display type, criteria).
SAMPLE_COLLECTIONS = [
    {
        "id": "bowl-challenge-topics",
        "name": "Bowl & Challenge Topics",
        "description": "Main topic collection similar to current Topics page layout",
        "page_route": "/topics",
        "display_type": "alphabetical",
        "filter_criteria": {"showstudent": True, "parentid": None},
        "sort_field": "topic",
        "sort_order": "asc",
    },
    {
        "id": "writing-topics",
        "name": "Writing Topics",
        "description": "Writing prompts and exercises organized by subject",
        "page_route": "/writing",
        "display_type": "by_subject",
        "filter_criteria": {"challengesubject": "Writing", "showstudent": True},
        "sort_field": "topic",
        "sort_order": "asc",
    },
    {
        "id": "math-content",
        "name": "Math Content Collection",
        "description": "Mathematics topics and content organized for easy access",
        "page_route": "/math",
        "display_type": "grid",
        "filter_criteria": {"challengesubject": "Math"},
        "sort_field": "topic",
        "sort_order": "asc",
    },
]


def seed_sample_collections(db) -> int:
    """Insert SAMPLE_COLLECTIONS that are missing; return how many were added."""
    from learnhub.models.collection import Collection

    added = 0
    for data in SAMPLE_COLLECTIONS:
        if db.get(Collection, data["id"]) is None:
            db.add(Collection(**data))
            added += 1
    if added:
        db.commit()
    return added


def init_sqlite_db():
    """When using SQLite: create tables and seed sample collections. Call once at app startup."""
    if not _is_sqlite:
        return
    # Import all models so they register with Base before create_all
    from learnhub.models import topic, content, collection, filter_rule  # noqa: F401
    Base.metadata.create_all(bind=engine)
    if not settings.seed_sample_data or settings.is_production:
        return
    db = SessionLocal()
    try:
        added = seed_sample_collections(db)
        if added:
            logger.info("SQLite init: seeded %s sample collection(s)", added)
    except Exception as e:
        logger.warning("SQLite init: seeding sample collections failed: %s", e)
        db.rollback()
    finally:
        db.close()


def get_db():
    """Dependency: yield a DB session, close after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
