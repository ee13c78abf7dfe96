"""
Collections API: curated sets of topics/content bound to a page route.
Collections are soft-deleted (is_active=False); mappings are deleted outright.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from learnhub import metrics
from learnhub.database import get_db
from learnhub.models.collection import Collection, CollectionContent
from learnhub.models.content import GROUPCARD_PROMPT, Content
from learnhub.models.topic import Topic
from learnhub.schemas.collection import (
    CollectionCreateRequest,
    CollectionItemResponse,
    CollectionResponse,
    CollectionUpdateRequest,
    FilteredTopicsResponse,
    MappingCreateRequest,
    MappingResponse,
)
from learnhub.schemas.records import CollectionRecord
from learnhub.schemas.topic import ReorderRequest, ReorderResponse
from learnhub.services.criteria import select_collection_topics
from learnhub.services.entity_store import fetch_collection_mappings, fetch_topics

router = APIRouter(prefix="/collections", tags=["collections"])
logger = logging.getLogger(__name__)


def _get_collection_or_404(db: Session, collection_id: str, active_only: bool = True) -> Collection:
    q = db.query(Collection).filter(Collection.id == collection_id)
    if active_only:
        q = q.filter(Collection.is_active.is_(True))
    collection = q.first()
    if not collection:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Collection not found")
    return collection


@router.get("", response_model=list[CollectionResponse])
def list_collections(include_inactive: bool = False, db: Session = Depends(get_db)):
    q = db.query(Collection)
    if not include_inactive:
        q = q.filter(Collection.is_active.is_(True))
    return q.order_by(Collection.name).all()


@router.get("/route/{page_route:path}", response_model=CollectionResponse)
def get_collection_by_route(page_route: str, db: Session = Depends(get_db)):
    """Look up the active collection bound to a page route ("bowl" and "/bowl" are the same route)."""
    route = "/" + page_route.lstrip("/")
    collection = (
        db.query(Collection)
        .filter(Collection.page_route == route, Collection.is_active.is_(True))
        .first()
    )
    if not collection:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Collection not found")
    return collection


@router.delete("/content/{mapping_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_mapping(mapping_id: str, db: Session = Depends(get_db)):
    mapping = db.query(CollectionContent).filter(CollectionContent.id == mapping_id).first()
    if not mapping:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Mapping not found")
    collection_id = mapping.collection_id
    db.delete(mapping)
    db.commit()
    logger.info("Deleted mapping id=%s from collection %s", mapping_id, collection_id)
    return None


@router.get("/{collection_id}", response_model=CollectionResponse)
def get_collection(collection_id: str, db: Session = Depends(get_db)):
    return _get_collection_or_404(db, collection_id)


@router.post("", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
def create_collection(data: CollectionCreateRequest, db: Session = Depends(get_db)):
    collection = Collection(**data.model_dump(exclude_none=True))
    db.add(collection)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Create collection IntegrityError: %s", e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Collection id already exists")
    db.refresh(collection)
    logger.info("Created collection id=%s route=%s", collection.id, collection.page_route)
    return collection


@router.put("/{collection_id}", response_model=CollectionResponse)
def update_collection(collection_id: str, data: CollectionUpdateRequest, db: Session = Depends(get_db)):
    collection = _get_collection_or_404(db, collection_id, active_only=False)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field not in ("description", "page_route", "filter_criteria"):
            continue
        setattr(collection, field, value)
    db.commit()
    db.refresh(collection)
    return collection


@router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_collection(collection_id: str, db: Session = Depends(get_db)):
    """Soft delete: the collection and its mappings stay in the table."""
    collection = _get_collection_or_404(db, collection_id)
    collection.is_active = False
    db.commit()
    logger.info("Deactivated collection id=%s", collection_id)
    return None


@router.get("/{collection_id}/content", response_model=list[CollectionItemResponse])
def get_collection_content(collection_id: str, db: Session = Depends(get_db)):
    """
    Mapped entities in mapping order. Rows that are malformed or point at nothing are
    skipped and logged; the rest of the collection is still returned.
    """
    _get_collection_or_404(db, collection_id)
    mappings = fetch_collection_mappings(db, collection_id)
    topic_ids = [m.topic_id for m in mappings if m.topic_id]
    content_ids = [r for m in mappings for r in (m.content_id, m.groupcard_id) if r]
    topics = {t.id: t for t in db.query(Topic).filter(Topic.id.in_(topic_ids)).all()} if topic_ids else {}
    content = {c.id: c for c in db.query(Content).filter(Content.id.in_(content_ids)).all()} if content_ids else {}

    items = []
    skipped = []
    for m in mappings:
        refs = m.references()
        if len(refs) != 1:
            skipped.append(m.id)
            metrics.increment_malformed_mappings_total()
            continue
        if m.topic_id:
            t = topics.get(m.topic_id)
            if t is None:
                skipped.append(m.id)
                continue
            items.append(CollectionItemResponse(
                id=t.id,
                type="topic",
                title=t.title or "",
                display_order=m.display_order,
                is_featured=m.is_featured,
                mapping_id=m.id,
                parent_id=t.parent_id,
                subject=t.subject,
            ))
            continue
        c = content.get(refs[0])
        if c is None:
            skipped.append(m.id)
            continue
        is_groupcard = bool(m.groupcard_id) or c.prompt == GROUPCARD_PROMPT
        items.append(CollectionItemResponse(
            id=c.id,
            type="groupcard" if is_groupcard else "content",
            title=c.title or "",
            display_order=m.display_order,
            is_featured=m.is_featured,
            mapping_id=m.id,
            parent_id=c.parent_id,
            topic_id=c.topic_id,
            subjects=list(c.subjects or []),
        ))
    if skipped:
        logger.warning("Collection %s: skipped %s unresolvable mapping(s): %s", collection_id, len(skipped), skipped)
    return items


@router.post("/{collection_id}/content", response_model=MappingResponse, status_code=status.HTTP_201_CREATED)
def add_collection_content(collection_id: str, data: MappingCreateRequest, db: Session = Depends(get_db)):
    """Map one topic, content item or group card into the collection."""
    _get_collection_or_404(db, collection_id)
    mapping = CollectionContent(collection_id=collection_id, **data.model_dump(exclude_none=True))
    db.add(mapping)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.exception("Collection %s: could not add mapping", collection_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Could not add mapping")
    db.refresh(mapping)
    logger.info("Collection %s: added mapping %s", collection_id, mapping.id)
    return mapping


@router.post("/{collection_id}/reorder", response_model=ReorderResponse)
def reorder_collection_content(collection_id: str, data: ReorderRequest, db: Session = Depends(get_db)):
    """Item ids are mapping ids; mappings from other collections are skipped."""
    _get_collection_or_404(db, collection_id)
    ids = [i.id for i in data.items]
    rows = {}
    if ids:
        rows = {
            m.id: m
            for m in db.query(CollectionContent)
            .filter(CollectionContent.collection_id == collection_id, CollectionContent.id.in_(ids))
            .all()
        }
    updated = 0
    for i in data.items:
        if i.id in rows:
            rows[i.id].display_order = i.position
            updated += 1
    db.commit()
    return ReorderResponse(success=True, message="Collection content reordered successfully", updated=updated)


@router.get("/{collection_id}/filtered-content", response_model=FilteredTopicsResponse)
def get_filtered_content(collection_id: str, db: Session = Depends(get_db)):
    """Topics picked by the collection's filter_criteria, sorted by its sort_field/sort_order."""
    collection = CollectionRecord.model_validate(_get_collection_or_404(db, collection_id))
    selected = select_collection_topics(collection, fetch_topics(db))
    if collection.display_type == "by_subject":
        return FilteredTopicsResponse(collection_id=collection.id, display_type=collection.display_type, groups=selected)
    return FilteredTopicsResponse(collection_id=collection.id, display_type=collection.display_type, topics=selected)
