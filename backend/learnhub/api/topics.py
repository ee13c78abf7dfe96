"""
Topics API: list, bowl-challenge list, get, create, update, reorder.
Deleting topics is not exposed; children of a removed topic are reported as orphans by /hierarchy.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from learnhub.database import get_db
from learnhub.models.topic import Topic
from learnhub.schemas.topic import (
    ReorderRequest,
    ReorderResponse,
    TopicCreateRequest,
    TopicResponse,
    TopicUpdateRequest,
)
from learnhub.services.hierarchy import topic_level

router = APIRouter(prefix="/topics", tags=["topics"])
logger = logging.getLogger(__name__)


def _topic_to_response(t: Topic) -> TopicResponse:
    return TopicResponse(
        id=t.id,
        title=t.title,
        short_summary=t.short_summary,
        parent_id=t.parent_id,
        subject=t.subject,
        tags=list(t.tags or []),
        showstudent=bool(t.showstudent),
        display_order=t.display_order or 0,
        level=topic_level(t.parent_id),
        created_at=t.created_at,
    )


def _get_topic_or_404(db: Session, topic_id: str) -> Topic:
    topic = db.query(Topic).filter(Topic.id == topic_id).first()
    if not topic:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Topic not found")
    return topic


@router.get("", response_model=list[TopicResponse])
def list_topics(db: Session = Depends(get_db)):
    """All topics in display order."""
    topics = db.query(Topic).order_by(Topic.display_order, Topic.title).all()
    return [_topic_to_response(t) for t in topics]


@router.get("/bowl-challenge", response_model=list[TopicResponse])
def list_bowl_challenge_topics(db: Session = Depends(get_db)):
    """Main topics shown to students (showstudent, no parent), alphabetical."""
    topics = (
        db.query(Topic)
        .filter(Topic.showstudent.is_(True), Topic.parent_id.is_(None))
        .order_by(Topic.title)
        .all()
    )
    return [_topic_to_response(t) for t in topics]


@router.get("/{topic_id}", response_model=TopicResponse)
def get_topic(topic_id: str, db: Session = Depends(get_db)):
    return _topic_to_response(_get_topic_or_404(db, topic_id))


@router.post("", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
def create_topic(data: TopicCreateRequest, db: Session = Depends(get_db)):
    """Create a topic. parent_id is not checked: imports may arrive children-first."""
    fields = data.model_dump(exclude_none=True)
    if not fields.get("parent_id"):
        fields.pop("parent_id", None)
    topic = Topic(**fields)
    db.add(topic)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Create topic IntegrityError: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Topic id already exists")
    db.refresh(topic)
    logger.info("Created topic id=%s parent=%s", topic.id, topic.parent_id)
    return _topic_to_response(topic)


@router.put("/{topic_id}", response_model=TopicResponse)
def update_topic(topic_id: str, data: TopicUpdateRequest, db: Session = Depends(get_db)):
    """Partial update; fields left out are unchanged. Send parent_id "" to make a topic top-level."""
    topic = _get_topic_or_404(db, topic_id)
    updates = data.model_dump(exclude_unset=True)
    if updates.get("parent_id") == topic_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A topic cannot be its own parent")
    for field, value in updates.items():
        if field == "parent_id":
            value = value or None
        if field in ("title", "showstudent", "display_order") and value is None:
            continue
        if field == "tags" and value is None:
            value = []
        setattr(topic, field, value)
    db.commit()
    db.refresh(topic)
    return _topic_to_response(topic)


@router.post("/reorder", response_model=ReorderResponse)
def reorder_topics(data: ReorderRequest, db: Session = Depends(get_db)):
    """Write each item's position into display_order. Unknown ids are skipped."""
    ids = [item.id for item in data.items]
    topics = {t.id: t for t in db.query(Topic).filter(Topic.id.in_(ids)).all()} if ids else {}
    updated = 0
    for item in data.items:
        topic = topics.get(item.id)
        if topic is None:
            logger.info("Reorder topics: unknown id %s skipped", item.id)
            continue
        topic.display_order = item.position
        updated += 1
    db.commit()
    return ReorderResponse(success=True, message="Topics reordered successfully", updated=updated)
