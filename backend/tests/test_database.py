"""Sample collection seeding and the entity store snapshot loaders."""
from learnhub.database import SAMPLE_COLLECTIONS, seed_sample_collections
from learnhub.models.collection import Collection, CollectionContent
from learnhub.models.topic import Topic
from learnhub.services.entity_store import fetch_collection_mappings, fetch_collections, fetch_topics


def test_seed_is_idempotent(db_session):
    assert seed_sample_collections(db_session) == len(SAMPLE_COLLECTIONS)
    assert seed_sample_collections(db_session) == 0
    routes = {c.page_route for c in fetch_collections(db_session)}
    assert routes == {"/topics", "/writing", "/math"}


def test_fetch_records_normalize_rows(db_session):
    db_session.add(Topic(id="t", title="T", parent_id=None, subject=None))
    db_session.add(Collection(id="c", name="C", is_active=False))
    db_session.add(CollectionContent(id="m", collection_id="c", topic_id="", content_id="x"))
    db_session.commit()
    topics = fetch_topics(db_session)
    assert [(t.id, t.showstudent, t.display_order) for t in topics] == [("t", True, 0)]
    assert fetch_collections(db_session) == []
    assert [c.id for c in fetch_collections(db_session, include_inactive=True)] == ["c"]
    mapping = fetch_collection_mappings(db_session, "c")[0]
    assert mapping.topic_id is None
    assert mapping.references() == ["x"]
