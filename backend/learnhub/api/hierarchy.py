"""
Hierarchy API: the merged topic/content tree for the admin and browse views.
GET /hierarchy?level=1&parent=all&collection_id=all
"""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from learnhub import metrics
from learnhub.config import settings
from learnhub.database import get_db
from learnhub.schemas.hierarchy import HierarchyResponse, ParentOptionsResponse
from learnhub.services.collection_scope import is_all_collections
from learnhub.services.entity_store import (
    fetch_collection_mappings,
    fetch_content,
    fetch_filter_rules,
    fetch_topics,
)
from learnhub.services.hierarchy import available_parents, resolve_hierarchy
from learnhub.services.projection import count_nodes

router = APIRouter(prefix="/hierarchy", tags=["hierarchy"])
logger = logging.getLogger(__name__)


@router.get("", response_model=HierarchyResponse)
def get_hierarchy(
    level: int = Query(1, ge=1, le=4),
    parent: str | None = None,
    collection_id: str | None = None,
    expand: bool = False,
    include_unassigned: bool = False,
    db: Session = Depends(get_db),
):
    """
    Without a collection: the items at `level` (or the children of `parent`), filtered by
    that level's active rules. With a collection: the collection's forest, rules not applied.
    Data problems come back in `diagnostics`; they never fail the request.
    """
    topics = fetch_topics(db)
    content = fetch_content(db)
    scoped = not is_all_collections(collection_id)
    mappings = fetch_collection_mappings(db, collection_id) if scoped else []
    rules = [] if scoped else fetch_filter_rules(db, level=level, active_only=True)

    result = resolve_hierarchy(
        topics,
        content,
        selected_level=level,
        selected_parent=parent,
        selected_collection_id=collection_id,
        mappings=mappings,
        filter_rules=rules,
        include_unassigned=include_unassigned,
        expand=expand,
    )
    metrics.record_diagnostics(result.diagnostics)
    if result.diagnostics:
        logger.info(
            "Hierarchy level=%s parent=%s collection=%s: %s diagnostic(s)",
            level, parent or settings.all_sentinel, collection_id or settings.all_sentinel, len(result.diagnostics),
        )
    return HierarchyResponse(
        nodes=result.nodes,
        unassigned=result.unassigned,
        diagnostics=result.diagnostics,
        total_nodes=count_nodes(result.nodes),
        mode="collection" if scoped else "level",
    )


@router.get("/parents", response_model=ParentOptionsResponse)
def get_parent_options(level: int = Query(..., ge=1, le=4), db: Session = Depends(get_db)):
    """Candidate parents for the parent dropdown at `level` (items one level up)."""
    items = available_parents(fetch_topics(db), fetch_content(db), level)
    return ParentOptionsResponse(level=level, items=items)
