"""Unit tests for CMS filter rule evaluation (fail-closed semantics)."""
from learnhub.schemas.records import ContentRecord, FilterRuleRecord, TopicRecord
from learnhub.services.filter_rules import (
    _MISSING,
    _read_column,
    active_rules_for_level,
    evaluate_filter_rule,
    evaluate_filter_rules,
    parse_value_list,
)
from learnhub.services.hierarchy import merge_items


def _rule(**kw):
    fields = {"id": "r1", "name": "rule", "level": 1, "filter_type": "column_value", "filter_logic": "equals"}
    fields.update(kw)
    return FilterRuleRecord(**fields)


def test_missing_column_excludes():
    rule = _rule(column_name="doesNotExist", column_value="x")
    assert evaluate_filter_rule(rule, TopicRecord(id="t1", title="T")) is False
    assert evaluate_filter_rule(rule, {"id": "t1"}) is False


def test_inactive_rule_passes():
    rule = _rule(column_name="doesNotExist", column_value="x", is_active=False)
    assert evaluate_filter_rule(rule, {"id": "t1"}) is True


def test_equals_scalar_and_bool():
    assert evaluate_filter_rule(_rule(column_name="subject", column_value="Art"), {"subject": "Art"})
    assert not evaluate_filter_rule(_rule(column_name="subject", column_value="Art"), {"subject": "Music"})
    assert evaluate_filter_rule(_rule(column_name="showstudent", column_value="true"), {"showstudent": True})
    assert not evaluate_filter_rule(_rule(column_name="showstudent", column_value="true"), {"showstudent": False})


def test_equals_array_compares_whole_list():
    rule = _rule(column_name="subjects", column_value='["Math", "Science"]')
    assert evaluate_filter_rule(rule, {"subjects": ["Math", "Science"]})
    assert not evaluate_filter_rule(rule, {"subjects": ["Math"]})


def test_contains_on_array_and_string():
    rule = _rule(column_name="subjects", column_value="Math", filter_logic="contains")
    c = ContentRecord(id="c1", title="Algebra", subjects=["Math", "Science"])
    assert evaluate_filter_rule(rule, c)
    title_rule = _rule(column_name="title", column_value="lge", filter_logic="contains")
    assert evaluate_filter_rule(title_rule, c)


def test_in_array_intersection():
    rule = _rule(column_name="subject", column_value="Art, Music", filter_logic="in_array")
    assert evaluate_filter_rule(rule, {"subject": "Music"})
    assert not evaluate_filter_rule(rule, {"subject": "History"})
    arr_rule = _rule(column_name="subjects", column_value='["History", "Art"]', filter_logic="in_array")
    assert evaluate_filter_rule(arr_rule, {"subjects": ["Science", "Art"]})


def test_none_value_excludes():
    assert not evaluate_filter_rule(_rule(column_name="subject", column_value="Art"), {"subject": None})


def test_parent_rule_needs_selected_parent():
    rule = _rule(filter_type="parent_id")
    child = TopicRecord(id="cells", title="Cells", parent_id="bio")
    assert evaluate_filter_rule(rule, child, parent_match_value="bio")
    assert not evaluate_filter_rule(rule, child, parent_match_value="chem")
    assert not evaluate_filter_rule(rule, child)


def test_custom_rule_without_predicate_excludes():
    assert not evaluate_filter_rule(_rule(filter_type="custom"), {"id": "x"})


def test_custom_predicate_used_and_errors_exclude():
    rule = _rule(filter_type="custom")
    assert evaluate_filter_rule(rule, {"id": "x"}, custom_predicate=lambda r, e: e["id"] == "x")

    def boom(r, e):
        raise RuntimeError("bad predicate")

    assert evaluate_filter_rule(rule, {"id": "x"}, custom_predicate=boom) is False


def test_unknown_type_and_logic_exclude():
    assert not evaluate_filter_rule(_rule(filter_type="regex", column_name="title", column_value="a"), {"title": "a"})
    assert not evaluate_filter_rule(_rule(column_name="title", column_value="a", filter_logic="startswith"), {"title": "a"})


def test_rules_are_anded_per_level():
    rules = [
        _rule(id="a", column_name="subject", column_value="Art"),
        _rule(id="b", column_name="showstudent", column_value="true"),
        _rule(id="c", level=2, column_name="subject", column_value="Music"),
        _rule(id="d", column_name="missing", column_value="x", is_active=False),
    ]
    assert [r.id for r in active_rules_for_level(rules, 1)] == ["a", "b"]
    assert evaluate_filter_rules(rules, {"subject": "Art", "showstudent": True}, level=1)
    assert not evaluate_filter_rules(rules, {"subject": "Art", "showstudent": False}, level=1)
    assert evaluate_filter_rules([], {"anything": 1})


def test_parse_value_list():
    assert parse_value_list('["a", "b"]') == ["a", "b"]
    assert parse_value_list("a, b,,c") == ["a", "b", "c"]
    assert parse_value_list("[not json") == ["[not json"]
    assert parse_value_list(None) == []


def test_method_names_are_not_columns():
    item = merge_items([TopicRecord(id="t", title="T", tags=["count"])], [])[0]
    for column in ("count", "index", "_replace", "_fields"):
        assert _read_column(item, column) is _MISSING
    assert _read_column(item, "tags") == ("count",)
    record = TopicRecord(id="t", title="T")
    for column in ("model_dump", "model_fields", "copy"):
        assert _read_column(record, column) is _MISSING
    assert _read_column(record, "title") == "T"
    assert evaluate_filter_rule(_rule(column_name="tags", column_value="count", filter_logic="contains"), item)
    assert not evaluate_filter_rule(_rule(column_name="count", column_value="count", filter_logic="contains"), item)
