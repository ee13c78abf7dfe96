"""
Entity store: load flat rows and hand them to the resolver as records.
Each call returns a snapshot; the resolver never touches the session.
"""
from sqlalchemy.orm import Session

from learnhub.models.collection import Collection, CollectionContent
from learnhub.models.content import Content
from learnhub.models.filter_rule import CmsFilterConfig
from learnhub.models.topic import Topic
from learnhub.schemas.records import (
    CollectionRecord,
    ContentRecord,
    FilterRuleRecord,
    MappingRecord,
    TopicRecord,
)


def fetch_topics(db: Session) -> list[TopicRecord]:
    rows = db.query(Topic).order_by(Topic.display_order, Topic.title, Topic.id).all()
    return [TopicRecord.model_validate(r) for r in rows]


def fetch_content(db: Session, topic_id: str | None = None) -> list[ContentRecord]:
    q = db.query(Content)
    if topic_id:
        q = q.filter(Content.topic_id == topic_id)
    rows = q.order_by(Content.display_order, Content.title, Content.id).all()
    return [ContentRecord.model_validate(r) for r in rows]


def fetch_collections(db: Session, include_inactive: bool = False) -> list[CollectionRecord]:
    q = db.query(Collection)
    if not include_inactive:
        q = q.filter(Collection.is_active.is_(True))
    return [CollectionRecord.model_validate(r) for r in q.order_by(Collection.name).all()]


def fetch_collection_mappings(db: Session, collection_id: str) -> list[MappingRecord]:
    rows = (
        db.query(CollectionContent)
        .filter(CollectionContent.collection_id == collection_id)
        .order_by(CollectionContent.display_order, CollectionContent.id)
        .all()
    )
    return [MappingRecord.model_validate(r) for r in rows]


def fetch_filter_rules(db: Session, level: int | None = None, active_only: bool = False) -> list[FilterRuleRecord]:
    q = db.query(CmsFilterConfig)
    if level is not None:
        q = q.filter(CmsFilterConfig.level == level)
    if active_only:
        q = q.filter(CmsFilterConfig.is_active.is_(True))
    rows = q.order_by(CmsFilterConfig.level, CmsFilterConfig.name).all()
    return [FilterRuleRecord.model_validate(r) for r in rows]
