"""Unit tests for subject grouping and collection filter_criteria."""
from learnhub.schemas.records import CollectionRecord, ContentRecord, TopicRecord
from learnhub.services.criteria import (
    apply_criteria,
    parse_filter_criteria,
    select_collection_topics,
    sort_topics,
)
from learnhub.services.subjects import group_by_subject, group_topics_by_subject, subject_slug


def test_multi_subject_item_in_each_group_only():
    content = [
        ContentRecord(id="c1", title="Ratios", subjects=["Math", "Science"]),
        ContentRecord(id="c2", title="Poems", subjects=["Literature"]),
    ]
    groups = group_by_subject(content, ["Math", "Science", "Art"])
    assert [(g.subject_name, [c.id for c in g.items]) for g in groups] == [("Math", ["c1"]), ("Science", ["c1"])]
    assert groups[0].item_count == 1


def test_group_order_follows_subject_list_and_skips_duplicates():
    content = [ContentRecord(id="c", title="x", subjects=["Art", "Music"])]
    groups = group_by_subject(content, ["Music", "Art", "Music"])
    assert [g.subject_name for g in groups] == ["Music", "Art"]


def test_subject_slug():
    assert subject_slug("Science and Technology") == "science-and-technology"
    assert subject_slug(" Art ") == "art"


def test_topics_grouped_with_other_bucket():
    topics = [
        TopicRecord(id="a", title="A", subject="Art"),
        TopicRecord(id="b", title="B"),
        TopicRecord(id="c", title="C", subject="Art"),
    ]
    groups = group_topics_by_subject(topics)
    assert [(g.subject, [t.id for t in g.items]) for g in groups] == [("Art", ["a", "c"]), ("Other", ["b"])]


def test_parse_criteria_known_unknown_and_invalid():
    c = parse_filter_criteria({"showstudent": True, "parentid": None, "colour": "red", "challengesubject": ["x"]})
    assert c.showstudent is True
    assert c.filters_parent and c.parentid is None
    assert c.challengesubject is None
    assert set(c.extras) == {"colour", "challengesubject"}
    assert not parse_filter_criteria("garbage").filters_parent
    assert parse_filter_criteria(None).showstudent is None


def test_apply_criteria_root_student_topics():
    topics = [
        TopicRecord(id="root", title="Root", showstudent=True),
        TopicRecord(id="hidden", title="Hidden", showstudent=False),
        TopicRecord(id="child", title="Child", parent_id="root"),
    ]
    criteria = parse_filter_criteria({"showstudent": True, "parentid": None})
    assert [t.id for t in apply_criteria(criteria, topics)] == ["root"]


def test_sort_topics_missing_last_and_desc():
    topics = [
        TopicRecord(id="b", title="beta", subject="Music"),
        TopicRecord(id="n", title="none"),
        TopicRecord(id="a", title="Alpha", subject="Art"),
    ]
    assert [t.id for t in sort_topics(topics, "challengesubject", "asc")] == ["a", "b", "n"]
    assert [t.id for t in sort_topics(topics, "challengesubject", "desc")] == ["b", "a", "n"]
    assert [t.id for t in sort_topics(topics, "unknown", None)] == ["a", "b", "n"]


def test_sort_topics_ignores_accents():
    topics = [
        TopicRecord(id="z", title="Zebra"),
        TopicRecord(id="e", title="Écologie"),
        TopicRecord(id="a", title="apple"),
    ]
    assert [t.id for t in sort_topics(topics, "title", "asc")] == ["a", "e", "z"]


def test_select_collection_topics_by_subject():
    collection = CollectionRecord(
        id="w", name="Writing", display_type="by_subject",
        filter_criteria={"showstudent": True}, sort_field="topic",
    )
    topics = [
        TopicRecord(id="p", title="Poetry", subject="Literature"),
        TopicRecord(id="e", title="Essays", subject="Literature"),
        TopicRecord(id="s", title="Songs", subject="Music"),
    ]
    groups = select_collection_topics(collection, topics)
    assert [(g.subject, [t.id for t in g.items]) for g in groups] == [("Literature", ["e", "p"]), ("Music", ["s"])]
