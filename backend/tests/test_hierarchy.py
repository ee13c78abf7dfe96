"""Unit tests for the hierarchy builder: level view, collection view, ordering, cycles, orphans."""
import copy

from learnhub.schemas.records import ContentRecord, FilterRuleRecord, MappingRecord, TopicRecord
from learnhub.services.hierarchy import (
    CONTENT_PLACEHOLDER,
    available_parents,
    build_hierarchy,
    find_parent_cycles,
    merge_items,
    resolve_hierarchy,
)
from learnhub.services.projection import count_nodes, walk


def _bio():
    topics = [
        TopicRecord(id="bio", title="Biology", display_order=1),
        TopicRecord(id="cells", title="Cells", parent_id="bio", display_order=1),
    ]
    content = [ContentRecord(id="c1", title="Mitosis", topic_id="cells", display_order=1)]
    return topics, content


def _shape(nodes):
    return [(n.id, _shape(n.children)) for n in nodes]


def test_level_one_returns_roots_without_children():
    topics, content = _bio()
    nodes = build_hierarchy(topics, content, selected_level=1, selected_parent="all", selected_collection_id="all")
    assert _shape(nodes) == [("bio", [])]


def test_selected_parent_returns_its_children():
    topics, content = _bio()
    nodes = build_hierarchy(topics, content, selected_level=1, selected_parent="bio", selected_collection_id="all")
    assert _shape(nodes) == [("cells", [])]
    assert nodes[0].level == 2


def test_expand_returns_full_tree():
    topics, content = _bio()
    nodes = build_hierarchy(topics, content, selected_level=1, expand=True)
    assert _shape(nodes) == [("bio", [("cells", [("c1", [])])])]
    assert nodes[0].children[0].children[0].kind == "content"


def test_idempotent_and_inputs_untouched():
    topics, content = _bio()
    before = (copy.deepcopy(topics), copy.deepcopy(content))
    first = resolve_hierarchy(topics, content, expand=True)
    second = resolve_hierarchy(topics, content, expand=True)
    assert [n.model_dump() for n in first.nodes] == [n.model_dump() for n in second.nodes]
    assert (topics, content) == before


def test_siblings_sorted_by_order_then_title():
    topics = [
        TopicRecord(id="z", title="zeta", display_order=0),
        TopicRecord(id="a", title="Alpha", display_order=0),
        TopicRecord(id="m", title="mu", display_order=0),
    ]
    assert [n.id for n in build_hierarchy(topics, [])] == ["a", "m", "z"]

    mixed = [
        TopicRecord(id="late", title="Aardvark", display_order=5),
        TopicRecord(id="b", title="B", display_order=1),
        TopicRecord(id="a", title="A", display_order=1),
    ]
    assert [n.id for n in build_hierarchy(mixed, [])] == ["a", "b", "late"]


def test_expanded_tree_is_complete():
    topics = [
        TopicRecord(id="t1", title="One"),
        TopicRecord(id="t2", title="Two"),
        TopicRecord(id="t1a", title="One A", parent_id="t1"),
    ]
    content = [
        ContentRecord(id="c1", title="x", topic_id="t1a"),
        ContentRecord(id="c2", title="y", topic_id="t2"),
        ContentRecord(id="c3", title="z", topic_id="t2", parent_id="c2"),
    ]
    nodes = build_hierarchy(topics, content, expand=True)
    assert count_nodes(nodes) == len(topics) + len(content)
    ids = [n.id for n, _ in walk(nodes)]
    assert len(ids) == len(set(ids))


def test_content_parent_id_wins_over_topic():
    topics = [TopicRecord(id="t", title="T")]
    content = [
        ContentRecord(id="card", title="Card", topic_id="t"),
        ContentRecord(id="sub", title="Sub", topic_id="t", parent_id="card"),
    ]
    nodes = build_hierarchy(topics, content, expand=True)
    assert _shape(nodes) == [("t", [("card", [("sub", [])])])]


def test_two_node_cycle_terminates_with_each_node_once():
    topics = [TopicRecord(id="A", title="A", parent_id="B"), TopicRecord(id="B", title="B", parent_id="A")]
    result = resolve_hierarchy(topics, [], selected_level=1)
    assert _shape(result.nodes) == [("A", []), ("B", [])]
    assert [d.kind for d in result.diagnostics] == ["cycle"]


def test_cycle_with_tail_keeps_tail_under_member():
    topics = [
        TopicRecord(id="A", title="A", parent_id="C"),
        TopicRecord(id="B", title="B", parent_id="A"),
        TopicRecord(id="C", title="C", parent_id="B"),
        TopicRecord(id="D", title="D", parent_id="A"),
    ]
    assert sorted(find_parent_cycles(merge_items(topics, []))[0]) == ["A", "B", "C"]
    nodes = build_hierarchy(topics, [], expand=True)
    assert _shape(nodes) == [("A", [("D", [])]), ("B", []), ("C", [])]


def test_self_parent_is_a_cycle():
    result = resolve_hierarchy([TopicRecord(id="x", title="X", parent_id="x")], [])
    assert _shape(result.nodes) == [("x", [])]
    assert result.diagnostics[0].kind == "cycle"


def test_orphans_reported_and_listed_on_request():
    topics = [TopicRecord(id="t", title="T")]
    content = [ContentRecord(id="lost", title="Lost", topic_id="deleted")]
    plain = resolve_hierarchy(topics, content)
    assert _shape(plain.nodes) == [("t", [])]
    assert plain.unassigned == []
    assert [(d.kind, d.entity_id) for d in plain.diagnostics] == [("orphan", "lost")]

    with_unassigned = resolve_hierarchy(topics, content, include_unassigned=True)
    assert [n.id for n in with_unassigned.unassigned] == ["lost"]


def test_placeholder_title():
    nodes = build_hierarchy([TopicRecord(id="t", title="T")], [ContentRecord(id="c", title="", topic_id="t")], expand=True)
    assert nodes[0].children[0].title == CONTENT_PLACEHOLDER


def test_level_rules_filter_candidates():
    topics = [
        TopicRecord(id="art", title="Art", subject="Art"),
        TopicRecord(id="music", title="Music", subject="Music"),
    ]
    rules = [FilterRuleRecord(id="r", level=1, filter_type="column_value", column_name="subject", column_value="Art")]
    assert [n.id for n in build_hierarchy(topics, [], filter_rules=rules)] == ["art"]
    other_level = [r.model_copy(update={"level": 2}) for r in rules]
    assert [n.id for n in build_hierarchy(topics, [], filter_rules=other_level)] == ["art", "music"]


def test_collection_view_promotes_out_of_scope_parents():
    topics, content = _bio()
    mappings = [MappingRecord(id="m1", collection_id="col", topic_id="cells")]
    result = resolve_hierarchy(topics, content, selected_collection_id="col", mappings=mappings)
    assert _shape(result.nodes) == [("cells", [("c1", [])])]


def test_collection_view_uses_mapping_positions():
    topics = [TopicRecord(id="a", title="A", display_order=1), TopicRecord(id="b", title="B", display_order=2)]
    mappings = [
        MappingRecord(id="m1", collection_id="col", topic_id="a", display_order=9),
        MappingRecord(id="m2", collection_id="col", topic_id="b", display_order=1),
        MappingRecord(id="bad", collection_id="col"),
    ]
    result = resolve_hierarchy(topics, [], selected_collection_id="col", mappings=mappings)
    assert [n.id for n in result.nodes] == ["b", "a"]
    assert [d.kind for d in result.diagnostics] == ["malformed_mapping"]


def test_available_parents():
    topics, content = _bio()
    assert available_parents(topics, content, 1) == []
    assert [n.id for n in available_parents(topics, content, 2)] == ["bio"]
    assert [n.id for n in available_parents(topics, content, 3)] == ["cells"]


def test_accented_titles_collate_with_their_base_letters():
    topics = [
        TopicRecord(id="z", title="Zebra"),
        TopicRecord(id="e", title="Écologie"),
        TopicRecord(id="a", title="apple"),
    ]
    assert [n.id for n in build_hierarchy(topics, [])] == ["a", "e", "z"]


def test_full_ties_keep_input_order():
    topics = [
        TopicRecord(id="t2", title="Same", display_order=3),
        TopicRecord(id="t1", title="Same", display_order=3),
        TopicRecord(id="t3", title="Same", display_order=3),
    ]
    assert [n.id for n in build_hierarchy(topics, [])] == ["t2", "t1", "t3"]
    assert [n.id for n in build_hierarchy(list(reversed(topics)), [])] == ["t3", "t1", "t2"]


def test_collection_view_breaks_cycles():
    topics = [TopicRecord(id="A", title="A", parent_id="B"), TopicRecord(id="B", title="B", parent_id="A")]
    mappings = [
        MappingRecord(id="m1", collection_id="col", topic_id="A"),
        MappingRecord(id="m2", collection_id="col", topic_id="B"),
    ]
    result = resolve_hierarchy(topics, [], selected_collection_id="col", mappings=mappings)
    ids = [n.id for n, _ in walk(result.nodes)]
    assert sorted(ids) == ["A", "B"]
    assert [d.kind for d in result.diagnostics] == ["cycle"]


def test_tags_rule_filters_topics_and_content():
    topics = [
        TopicRecord(id="t", title="Tagged", tags=["x", "y"]),
        TopicRecord(id="u", title="Untagged"),
    ]
    content = [
        ContentRecord(id="c1", title="One", topic_id="t", tags=["x"]),
        ContentRecord(id="c2", title="Two", topic_id="t", tags=["z"]),
    ]
    level1 = [FilterRuleRecord(id="r1", level=1, filter_type="column_value",
                               column_name="tags", column_value="x", filter_logic="in_array")]
    assert [n.id for n in build_hierarchy(topics, content, filter_rules=level1)] == ["t"]

    level4 = [r.model_copy(update={"level": 4}) for r in level1]
    nodes = build_hierarchy(topics, content, selected_level=4, selected_parent="t", filter_rules=level4)
    assert [n.id for n in nodes] == ["c1"]


def test_parent_rule_does_not_empty_root_listing():
    topics, content = _bio()
    rules = [FilterRuleRecord(id="p", level=1, filter_type="parent_id")]
    assert [n.id for n in build_hierarchy(topics, content, filter_rules=rules)] == ["bio"]
    assert [n.id for n in build_hierarchy(topics, content, selected_parent="bio", filter_rules=rules)] == ["cells"]
