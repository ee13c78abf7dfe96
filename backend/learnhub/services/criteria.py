"""
Collection filter_criteria: the JSON blob on a collection, parsed into known typed criteria.
Unknown keys are kept aside and ignored; a malformed blob means "no criteria", never an error.
"""
import logging
from typing import Any, Iterable

from pydantic import BaseModel, ValidationError

from learnhub.schemas.records import CollectionRecord, TopicRecord, TopicSubjectGroup
from learnhub.services.hierarchy import title_collation_key
from learnhub.services.subjects import group_topics_by_subject

logger = logging.getLogger(__name__)

_UNSET = "__unset__"
KNOWN_KEYS = ("showstudent", "challengesubject", "parentid")

# sort_field values accepted from the admin panel -> TopicRecord attribute
SORT_FIELDS = {
    "topic": "title",
    "title": "title",
    "challengesubject": "subject",
    "subject": "subject",
    "display_order": "display_order",
}


class FilterCriteria(BaseModel):
    showstudent: bool | None = None
    challengesubject: str | None = None
    # _UNSET: no parent filter; None: root topics only; str: children of that topic
    parentid: str | None = _UNSET
    extras: dict[str, Any] = {}

    @property
    def filters_parent(self) -> bool:
        return self.parentid != _UNSET


def parse_filter_criteria(raw: Any) -> FilterCriteria:
    """Known keys become typed criteria; anything else lands in extras. Never raises."""
    if raw is None:
        return FilterCriteria()
    if not isinstance(raw, dict):
        logger.warning("filter_criteria is %s, not an object; ignoring", type(raw).__name__)
        return FilterCriteria()
    values = {}
    extras = {k: v for k, v in raw.items() if k not in KNOWN_KEYS}
    if extras:
        logger.debug("filter_criteria: ignoring unknown key(s) %s", sorted(extras))
    for key in KNOWN_KEYS:
        if key not in raw:
            continue
        try:
            values[key] = getattr(FilterCriteria(**{key: raw[key]}), key)
        except ValidationError:
            logger.warning("filter_criteria: invalid value for %s (%r); ignoring", key, raw[key])
            extras[key] = raw[key]
    return FilterCriteria(**values, extras=extras)


def apply_criteria(criteria: FilterCriteria, topics: Iterable[TopicRecord]) -> list[TopicRecord]:
    out = []
    for t in topics:
        if criteria.showstudent is not None and t.showstudent != criteria.showstudent:
            continue
        if criteria.challengesubject and t.subject != criteria.challengesubject:
            continue
        if criteria.filters_parent and t.parent_id != criteria.parentid:
            continue
        out.append(t)
    return out


def sort_topics(topics: Iterable[TopicRecord], sort_field: str | None, sort_order: str | None) -> list[TopicRecord]:
    """
    Sort by the collection's sort_field (unknown fields sort by title). Missing values sort
    last; strings compare ignoring case and accents.
    """
    attr = SORT_FIELDS.get((sort_field or "").strip().lower(), "title")
    reverse = (sort_order or "asc").lower() == "desc"
    topics = list(topics)
    present = [t for t in topics if getattr(t, attr) is not None]
    missing = [t for t in topics if getattr(t, attr) is None]

    def key(t: TopicRecord):
        v = getattr(t, attr)
        return title_collation_key(v) if isinstance(v, str) else v

    return sorted(present, key=key, reverse=reverse) + missing


def select_collection_topics(
    collection: CollectionRecord,
    topics: Iterable[TopicRecord],
) -> list[TopicRecord] | list[TopicSubjectGroup]:
    """
    Topics matching the collection's filter_criteria in its sort order; grouped by subject
    when display_type is by_subject.
    """
    criteria = parse_filter_criteria(collection.filter_criteria)
    selected = sort_topics(apply_criteria(criteria, topics), collection.sort_field, collection.sort_order)
    if collection.display_type == "by_subject":
        return group_topics_by_subject(selected)
    return selected
