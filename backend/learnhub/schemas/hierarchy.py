"""
Hierarchy and subject-group responses.
"""
from pydantic import BaseModel

from learnhub.schemas.records import Diagnostic, HierarchyNode, SubjectGroup


class HierarchyResponse(BaseModel):
    nodes: list[HierarchyNode]
    unassigned: list[HierarchyNode] = []
    diagnostics: list[Diagnostic] = []
    total_nodes: int
    mode: str  # "level" | "collection"


class ParentOptionsResponse(BaseModel):
    level: int
    items: list[HierarchyNode]


class SubjectGroupsResponse(BaseModel):
    groups: list[SubjectGroup]
