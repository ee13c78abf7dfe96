#!/usr/bin/env python3
"""
Pre-push / production readiness checks.
Run from backend dir with project venv active: python scripts/pre_push_checks.py
"""
import sys
from pathlib import Path

BACKEND = Path(__file__).resolve().parent.parent
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))


def check_imports():
    from learnhub.main import app  # noqa: F401
    from learnhub.services import hierarchy
    assert hierarchy.CONTENT_LEVEL == 4
    return "imports"


def check_init_db():
    from learnhub.database import init_sqlite_db
    init_sqlite_db()
    return "init_sqlite_db"


def check_resolve_from_db():
    """Build the level-1 hierarchy from whatever is in the configured database."""
    from learnhub.database import SessionLocal
    from learnhub.services.entity_store import fetch_content, fetch_filter_rules, fetch_topics
    from learnhub.services.hierarchy import resolve_hierarchy
    db = SessionLocal()
    try:
        result = resolve_hierarchy(
            fetch_topics(db),
            fetch_content(db),
            selected_level=1,
            filter_rules=fetch_filter_rules(db, level=1, active_only=True),
            include_unassigned=True,
        )
    finally:
        db.close()
    print(f"   roots={len(result.nodes)} unassigned={len(result.unassigned)} diagnostics={len(result.diagnostics)}")
    return "resolve_hierarchy"


def check_cycle_guard():
    from learnhub.schemas.records import TopicRecord
    from learnhub.services.hierarchy import resolve_hierarchy
    topics = [TopicRecord(id="a", title="A", parent_id="b"), TopicRecord(id="b", title="B", parent_id="a")]
    result = resolve_hierarchy(topics, [], selected_level=1)
    assert {n.id for n in result.nodes} == {"a", "b"}
    assert any(d.kind == "cycle" for d in result.diagnostics)
    return "cycle_guard"


def main():
    checks = [check_imports, check_init_db, check_resolve_from_db, check_cycle_guard]
    for fn in checks:
        try:
            name = fn()
            print(f"OK {name}")
        except Exception as e:
            print(f"FAIL {fn.__name__}: {e}")
            return 1
    print("All pre-push checks passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
