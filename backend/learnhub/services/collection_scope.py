"""
Collection scoping: narrow flat topic/content lists to the members of one collection.
A collection can curate whole topics (pulling in their content) or single content items.
"""
import logging
from typing import Iterable, NamedTuple

from learnhub.config import settings
from learnhub.schemas.records import ContentRecord, Diagnostic, MappingRecord, TopicRecord

logger = logging.getLogger(__name__)


class ScopedEntities(NamedTuple):
    topics: list[TopicRecord]
    content: list[ContentRecord]
    # mapped entity id -> mapping display_order (position inside the collection)
    positions: dict[str, int]
    diagnostics: list[Diagnostic]


def is_all_collections(collection_id: str | None) -> bool:
    return not collection_id or collection_id == settings.all_sentinel


def collect_mapped_ids(
    collection_id: str,
    mappings: Iterable[MappingRecord],
) -> tuple[dict[str, int], list[Diagnostic]]:
    """
    Positions of the entities mapped into collection_id.
    Rows with zero or several references are skipped and reported; when an entity is
    mapped twice the smaller display_order wins.
    """
    positions: dict[str, int] = {}
    diagnostics: list[Diagnostic] = []
    for m in mappings:
        if m.collection_id != collection_id:
            continue
        refs = m.references()
        if len(refs) != 1:
            msg = (
                f"Mapping {m.id} in collection {collection_id} references "
                f"{len(refs)} entities (expected exactly one); skipped"
            )
            logger.warning(msg)
            diagnostics.append(Diagnostic(kind="malformed_mapping", entity_id=m.id, message=msg))
            continue
        ref = refs[0]
        if ref not in positions or m.display_order < positions[ref]:
            positions[ref] = m.display_order
    return positions, diagnostics


def scope_to_collection(
    collection_id: str | None,
    topics: Iterable[TopicRecord],
    content: Iterable[ContentRecord],
    mappings: Iterable[MappingRecord],
) -> ScopedEntities:
    """
    Topics mapped into the collection, plus content that is mapped directly, whose topic
    is mapped, or whose topic survived the topic filter. Inputs are not mutated; output
    keeps input order. The "all" sentinel (or empty id) passes everything through.
    """
    topics = list(topics)
    content = list(content)
    if is_all_collections(collection_id):
        return ScopedEntities(topics, content, {}, [])

    positions, diagnostics = collect_mapped_ids(collection_id, mappings)
    mapped = set(positions)

    scoped_topics = [t for t in topics if t.id in mapped]
    kept_topic_ids = {t.id for t in scoped_topics}
    scoped_content = [
        c for c in content
        if c.id in mapped or c.topic_id in mapped or c.topic_id in kept_topic_ids
    ]

    known_ids = {t.id for t in topics} | {c.id for c in content}
    for ref in sorted(mapped - known_ids):
        msg = f"Collection {collection_id} maps {ref}, which matches no topic or content"
        logger.info(msg)
        diagnostics.append(Diagnostic(kind="dangling_mapping", entity_id=ref, message=msg))

    logger.debug(
        "Collection %s scoped: %s topic(s), %s content item(s), %s mapping id(s)",
        collection_id, len(scoped_topics), len(scoped_content), len(mapped),
    )
    return ScopedEntities(scoped_topics, scoped_content, positions, diagnostics)
