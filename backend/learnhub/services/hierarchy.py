"""
Hierarchy builder: turns flat topic/content lists into ordered HierarchyNode trees.

Two modes:
  - level-based (no collection, or the "all" sentinel): one level of the tree, either the
    parentless items of selected_level or the children of selected_parent. expand=True
    attaches every descendant instead of returning a one-level slice.
  - collection tree (a specific collection): scope to the collection first; every item whose
    parent is missing from the collection becomes a root, then children attach recursively.

Parent cycles are broken before building (each member becomes a root) and reported as
diagnostics; nothing here raises on bad data.
"""
import logging
import unicodedata
from typing import Iterable, NamedTuple

from learnhub.config import settings
from learnhub.schemas.records import (
    ContentRecord,
    Diagnostic,
    FilterRuleRecord,
    HierarchyNode,
    MappingRecord,
    TopicRecord,
)
from learnhub.services.collection_scope import is_all_collections, scope_to_collection
from learnhub.services.filter_rules import CustomPredicate, active_rules_for_level, evaluate_filter_rules

logger = logging.getLogger(__name__)

# Content always sits on the deepest level in the level-based view.
CONTENT_LEVEL = 4
TOPIC_PLACEHOLDER = "Untitled Topic"
CONTENT_PLACEHOLDER = "Untitled Content"


class HierarchyItem(NamedTuple):
    """Topic or content projected to the fields the builder and filter rules need."""
    id: str
    title: str
    kind: str
    level: int
    parent_id: str | None
    subject: str | None
    subjects: tuple[str, ...]
    tags: tuple[str, ...]
    display_order: int


class HierarchyResult(NamedTuple):
    nodes: list[HierarchyNode]
    # Level-based mode only, when requested: items whose parent does not exist.
    unassigned: list[HierarchyNode]
    diagnostics: list[Diagnostic]


def topic_level(parent_id: str | None) -> int:
    return 2 if parent_id else 1


def project_topic(t: TopicRecord, display_order: int | None = None) -> HierarchyItem:
    return HierarchyItem(
        id=t.id,
        title=t.title or TOPIC_PLACEHOLDER,
        kind="topic",
        level=topic_level(t.parent_id),
        parent_id=t.parent_id,
        subject=t.subject,
        subjects=(t.subject,) if t.subject else (),
        tags=tuple(t.tags),
        display_order=t.display_order if display_order is None else display_order,
    )


def project_content(c: ContentRecord, display_order: int | None = None) -> HierarchyItem:
    return HierarchyItem(
        id=c.id,
        title=c.title or CONTENT_PLACEHOLDER,
        kind="content",
        level=CONTENT_LEVEL,
        parent_id=c.resolved_parent_id,
        subject=c.subjects[0] if c.subjects else None,
        subjects=tuple(c.subjects),
        tags=tuple(c.tags),
        display_order=c.display_order if display_order is None else display_order,
    )


def merge_items(
    topics: Iterable[TopicRecord],
    content: Iterable[ContentRecord],
    positions: dict[str, int] | None = None,
) -> list[HierarchyItem]:
    """Topics then content, in input order. positions overrides display_order (collection order)."""
    positions = positions or {}
    items = [project_topic(t, positions.get(t.id)) for t in topics]
    items.extend(project_content(c, positions.get(c.id)) for c in content)
    return items


def title_collation_key(title: str) -> str:
    """Accent- and case-insensitive form of a title: "Écologie" collates as "ecologie"."""
    decomposed = unicodedata.normalize("NFKD", title)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def sort_key(item: HierarchyItem) -> tuple[int, str, str]:
    """display_order, then collated title, then exact title. sorted() is stable for full ties."""
    return (item.display_order, title_collation_key(item.title), item.title)


def find_parent_cycles(items: Iterable[HierarchyItem]) -> list[list[str]]:
    """
    Every parent cycle among items, each as the list of ids along the cycle.
    Each id has one parent, so a single walk per unvisited id finds all cycles in O(n).
    """
    parent_of: dict[str, str | None] = {}
    for it in items:
        parent_of.setdefault(it.id, it.parent_id)
    cycles: list[list[str]] = []
    done: set[str] = set()
    for start in parent_of:
        if start in done:
            continue
        path: list[str] = []
        position: dict[str, int] = {}
        node = start
        while node is not None and node in parent_of and node not in done:
            if node in position:
                cycles.append(path[position[node]:])
                break
            position[node] = len(path)
            path.append(node)
            node = parent_of[node]
        done.update(path)
    return cycles


def break_cycles(items: list[HierarchyItem]) -> tuple[list[HierarchyItem], list[Diagnostic]]:
    """Sever the parent link of every cycle member (it becomes a root); report each cycle once."""
    cycles = find_parent_cycles(items)
    if not cycles:
        return items, []
    members = {i for cycle in cycles for i in cycle}
    diagnostics = []
    for cycle in cycles:
        chain = " -> ".join(cycle + [cycle[0]])
        msg = f"Parent cycle {chain}; members shown as roots"
        logger.warning(msg)
        diagnostics.append(Diagnostic(kind="cycle", entity_id=cycle[0], message=msg))
    repaired = []
    for it in items:
        if it.id in members and it.parent_id is not None:
            level = topic_level(None) if it.kind == "topic" else it.level
            it = it._replace(parent_id=None, level=level)
        repaired.append(it)
    return repaired, diagnostics


def index_children(items: Iterable[HierarchyItem]) -> dict[str, list[HierarchyItem]]:
    children: dict[str, list[HierarchyItem]] = {}
    for it in items:
        if it.parent_id:
            children.setdefault(it.parent_id, []).append(it)
    return children


def _node(item: HierarchyItem) -> HierarchyNode:
    return HierarchyNode(
        id=item.id,
        title=item.title,
        kind=item.kind,
        level=item.level,
        parent_id=item.parent_id,
        subject=item.subject,
        children=[],
        display_order=item.display_order,
    )


def grow_trees(
    roots: Iterable[HierarchyItem],
    children_of: dict[str, list[HierarchyItem]],
    diagnostics: list[Diagnostic],
) -> list[HierarchyNode]:
    """
    Build fully populated trees under roots (sorted). Iterative, so depth is bounded only by
    the data. A child that would re-enter one of its ancestors is kept as a leaf and reported.
    """
    out: list[HierarchyNode] = []
    stack: list[tuple[HierarchyItem, HierarchyNode, frozenset]] = []
    for item in sorted(roots, key=sort_key):
        node = _node(item)
        out.append(node)
        stack.append((item, node, frozenset((item.id,))))
    while stack:
        item, node, ancestors = stack.pop()
        for child in sorted(children_of.get(item.id, ()), key=sort_key):
            child_node = _node(child)
            node.children.append(child_node)
            if child.id in ancestors:
                msg = f"{child.id} would re-enter its ancestor chain under {item.id}; kept as leaf"
                logger.warning(msg)
                diagnostics.append(Diagnostic(kind="cycle", entity_id=child.id, message=msg))
                continue
            stack.append((child, child_node, ancestors | {child.id}))
    return out


def _is_selected(value: str | None) -> bool:
    return bool(value) and value != settings.all_sentinel


def _level_view(
    items: list[HierarchyItem],
    selected_level: int,
    selected_parent: str | None,
    filter_rules: Iterable[FilterRuleRecord],
    include_unassigned: bool,
    expand: bool,
    custom_predicate: CustomPredicate | None,
    diagnostics: list[Diagnostic],
) -> HierarchyResult:
    known = {it.id for it in items}
    orphans = [it for it in items if it.parent_id and it.parent_id not in known]
    for it in orphans:
        diagnostics.append(Diagnostic(
            kind="orphan",
            entity_id=it.id,
            message=f"{it.kind} {it.id} points at missing parent {it.parent_id}",
        ))
    if orphans:
        logger.info("Level view: %s item(s) with a missing parent", len(orphans))

    parent_filter = selected_parent if _is_selected(selected_parent) else None
    if parent_filter:
        candidates = [it for it in items if it.parent_id == parent_filter]
    else:
        candidates = [it for it in items if not it.parent_id and it.level == selected_level]

    rules = active_rules_for_level(filter_rules, selected_level)
    if not parent_filter:
        # parent_id rules narrow a selected parent's children; the root listing has none to match
        rules = [r for r in rules if r.filter_type != "parent_id"]
    if rules:
        candidates = [
            it for it in candidates
            if evaluate_filter_rules(rules, it, parent_match_value=parent_filter, custom_predicate=custom_predicate)
        ]

    full_index = index_children(items)
    children_of = full_index if expand else index_children(candidates)
    nodes = grow_trees(candidates, children_of, diagnostics)
    unassigned = grow_trees(orphans, full_index, diagnostics) if include_unassigned else []
    return HierarchyResult(nodes, unassigned, diagnostics)


def _collection_view(
    collection_id: str,
    topics: Iterable[TopicRecord],
    content: Iterable[ContentRecord],
    mappings: Iterable[MappingRecord],
) -> HierarchyResult:
    scoped = scope_to_collection(collection_id, topics, content, mappings)
    diagnostics = list(scoped.diagnostics)
    items, cycle_diags = break_cycles(merge_items(scoped.topics, scoped.content, scoped.positions))
    diagnostics.extend(cycle_diags)
    in_scope = {it.id for it in items}
    # Promote to root anything whose parent is outside the collection, even if it exists globally.
    roots = [it for it in items if not it.parent_id or it.parent_id not in in_scope]
    nodes = grow_trees(roots, index_children(items), diagnostics)
    return HierarchyResult(nodes, [], diagnostics)


def resolve_hierarchy(
    topics: Iterable[TopicRecord],
    content: Iterable[ContentRecord],
    selected_level: int = 1,
    selected_parent: str | None = None,
    selected_collection_id: str | None = None,
    mappings: Iterable[MappingRecord] = (),
    filter_rules: Iterable[FilterRuleRecord] = (),
    include_unassigned: bool = False,
    expand: bool = False,
    custom_predicate: CustomPredicate | None = None,
) -> HierarchyResult:
    """
    Build the hierarchy for one admin/browse view. Returns nodes plus diagnostics; inputs are
    never mutated and identical inputs give identical trees.
    Filter rules apply to the level-based view only (AND of the active rules for selected_level).
    """
    topics = list(topics)
    content = list(content)
    if not is_all_collections(selected_collection_id):
        return _collection_view(selected_collection_id, topics, content, mappings)
    items, diagnostics = break_cycles(merge_items(topics, content))
    return _level_view(
        items,
        selected_level,
        selected_parent,
        filter_rules,
        include_unassigned,
        expand,
        custom_predicate,
        diagnostics,
    )


def build_hierarchy(
    topics: Iterable[TopicRecord],
    content: Iterable[ContentRecord],
    selected_level: int = 1,
    selected_parent: str | None = None,
    selected_collection_id: str | None = None,
    mappings: Iterable[MappingRecord] = (),
    **kwargs,
) -> list[HierarchyNode]:
    """Nodes only; use resolve_hierarchy when the diagnostics or unassigned items are needed."""
    return resolve_hierarchy(
        topics,
        content,
        selected_level=selected_level,
        selected_parent=selected_parent,
        selected_collection_id=selected_collection_id,
        mappings=mappings,
        **kwargs,
    ).nodes


def available_parents(
    topics: Iterable[TopicRecord],
    content: Iterable[ContentRecord],
    level: int,
) -> list[HierarchyNode]:
    """Items one level above level, for a parent picker. Level 1 has no parents."""
    if level <= 1:
        return []
    parent_level = level - 1
    items = [it for it in merge_items(topics, content) if it.level == parent_level]
    return [_node(it) for it in sorted(items, key=sort_key)]
