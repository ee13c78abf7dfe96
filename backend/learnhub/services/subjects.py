"""
Subject cross-index: group content by subject tag, ignoring the topic tree
(the "virtual topics" of the Challenge Subject page).
"""
import re
from typing import Iterable

from learnhub.schemas.records import ContentRecord, SubjectGroup, TopicRecord, TopicSubjectGroup

OTHER_SUBJECT = "Other"


def subject_slug(subject: str) -> str:
    """'Science and Technology' -> 'science-and-technology'."""
    return re.sub(r"\s+", "-", subject.strip().lower())


def group_by_subject(content: Iterable[ContentRecord], known_subjects: Iterable[str]) -> list[SubjectGroup]:
    """
    One group per subject in known_subjects order; an item tagged with several subjects
    appears in each of their groups. Empty groups are dropped; items keep input order.
    """
    content = list(content)
    groups = []
    seen: set[str] = set()
    for subject in known_subjects:
        if subject in seen:
            continue
        seen.add(subject)
        items = [c for c in content if subject in c.subjects]
        if items:
            groups.append(SubjectGroup(
                subject_name=subject,
                slug=subject_slug(subject),
                items=items,
                item_count=len(items),
            ))
    return groups


def group_topics_by_subject(topics: Iterable[TopicRecord]) -> list[TopicSubjectGroup]:
    """Topics bucketed by their single subject ('Other' when unset), buckets in first-seen order."""
    buckets: dict[str, list[TopicRecord]] = {}
    for t in topics:
        buckets.setdefault(t.subject or OTHER_SUBJECT, []).append(t)
    return [TopicSubjectGroup(subject=s, items=items) for s, items in buckets.items()]
