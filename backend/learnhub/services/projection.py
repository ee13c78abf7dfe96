"""
Read-only helpers over built trees for views: counts, lookup by id, badge numbers.
Expansion/selection state belongs to the caller, keyed by node id.
"""
from typing import Iterable, Iterator

from learnhub.schemas.records import HierarchyNode


def walk(nodes: Iterable[HierarchyNode], depth: int = 0) -> Iterator[tuple[HierarchyNode, int]]:
    """Depth-first (node, depth) pairs in display order."""
    stack = [(n, depth) for n in reversed(list(nodes))]
    while stack:
        node, d = stack.pop()
        yield node, d
        stack.extend((c, d + 1) for c in reversed(node.children))


def count_nodes(nodes: Iterable[HierarchyNode]) -> int:
    return sum(1 for _ in walk(nodes))


def node_index(nodes: Iterable[HierarchyNode]) -> dict[str, HierarchyNode]:
    """id -> node; first occurrence wins."""
    index: dict[str, HierarchyNode] = {}
    for node, _ in walk(nodes):
        index.setdefault(node.id, node)
    return index


def child_counts(nodes: Iterable[HierarchyNode]) -> dict[str, int]:
    """id -> number of direct children (badge count)."""
    return {node.id: len(node.children) for node, _ in walk(nodes)}
