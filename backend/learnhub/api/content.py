"""
Content API: list (optionally by topic), get, create, update, reorder.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from learnhub.database import get_db
from learnhub.models.content import Content
from learnhub.schemas.content import ContentCreateRequest, ContentResponse, ContentUpdateRequest
from learnhub.schemas.topic import ReorderRequest, ReorderResponse

router = APIRouter(prefix="/content", tags=["content"])
logger = logging.getLogger(__name__)


def _content_to_response(c: Content) -> ContentResponse:
    return ContentResponse(
        id=c.id,
        title=c.title,
        short_blurb=c.short_blurb,
        topic_id=c.topic_id,
        parent_id=c.parent_id,
        subjects=list(c.subjects or []),
        tags=list(c.tags or []),
        prompt=c.prompt,
        display_order=c.display_order or 0,
        created_at=c.created_at,
    )


@router.get("", response_model=list[ContentResponse])
def list_content(topic_id: str | None = None, db: Session = Depends(get_db)):
    q = db.query(Content)
    if topic_id:
        q = q.filter(Content.topic_id == topic_id)
    return [_content_to_response(c) for c in q.order_by(Content.display_order, Content.title).all()]


@router.get("/{content_id}", response_model=ContentResponse)
def get_content(content_id: str, db: Session = Depends(get_db)):
    item = db.query(Content).filter(Content.id == content_id).first()
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Content not found")
    return _content_to_response(item)


@router.post("", response_model=ContentResponse, status_code=status.HTTP_201_CREATED)
def create_content(data: ContentCreateRequest, db: Session = Depends(get_db)):
    fields = {k: v for k, v in data.model_dump(exclude_none=True).items() if v != "" or k not in ("topic_id", "parent_id")}
    item = Content(**fields)
    db.add(item)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Create content IntegrityError: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Content id already exists")
    db.refresh(item)
    logger.info("Created content id=%s topic=%s", item.id, item.topic_id)
    return _content_to_response(item)


@router.put("/{content_id}", response_model=ContentResponse)
def update_content(content_id: str, data: ContentUpdateRequest, db: Session = Depends(get_db)):
    item = db.query(Content).filter(Content.id == content_id).first()
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Content not found")
    updates = data.model_dump(exclude_unset=True)
    if updates.get("parent_id") == content_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Content cannot be its own parent")
    for field, value in updates.items():
        if field in ("topic_id", "parent_id"):
            value = value or None
        if field in ("title", "display_order") and value is None:
            continue
        if field in ("subjects", "tags") and value is None:
            value = []
        setattr(item, field, value)
    db.commit()
    db.refresh(item)
    return _content_to_response(item)


@router.post("/reorder", response_model=ReorderResponse)
def reorder_content(data: ReorderRequest, db: Session = Depends(get_db)):
    ids = [i.id for i in data.items]
    rows = {c.id: c for c in db.query(Content).filter(Content.id.in_(ids)).all()} if ids else {}
    updated = 0
    for i in data.items:
        if i.id in rows:
            rows[i.id].display_order = i.position
            updated += 1
    db.commit()
    return ReorderResponse(success=True, message="Content reordered successfully", updated=updated)
