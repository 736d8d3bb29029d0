from __future__ import annotations

from notesflow_api.app.schemas.student import (
    DashboardNote,
    DashboardSubject,
    DashboardTopic,
    DashboardUnit,
)
from notesflow_api.app.services.search import expanded_unit_ids, filter_hierarchy


def _tree():
    note = DashboardNote(id="n1", note_type="text", note_url="hello", created_at="2024-01-01T00:00:00+00:00")
    return [
        DashboardSubject(
            id="sub1",
            subject_name="Data Structures",
            units=[
                DashboardUnit(
                    id="u1",
                    unit_title="Arrays",
                    topics=[
                        DashboardTopic(id="t1", topic_title="Basics", notes=[note]),
                        DashboardTopic(id="t2", topic_title="Matrices"),
                    ],
                ),
                DashboardUnit(
                    id="u2",
                    unit_title="Linked Lists",
                    topics=[
                        DashboardTopic(id="t3", topic_title="Singly linked"),
                        DashboardTopic(id="t4", topic_title="Sparse matrices"),
                    ],
                ),
            ],
        ),
        DashboardSubject(id="sub2", subject_name="Operating Systems"),
    ]


def test_blank_term_returns_everything():
    tree = _tree()
    assert filter_hierarchy(tree, None) is tree
    assert filter_hierarchy(tree, "") is tree
    assert filter_hierarchy(tree, "   ") is tree


def test_subject_match_keeps_all_units():
    result = filter_hierarchy(_tree(), "structures")
    assert [s.id for s in result] == ["sub1"]
    assert [u.id for u in result[0].units] == ["u1", "u2"]


def test_unit_match_keeps_all_topics():
    result = filter_hierarchy(_tree(), "ARRAYS")
    assert [u.id for u in result[0].units] == ["u1"]
    assert [t.id for t in result[0].units[0].topics] == ["t1", "t2"]
    assert result[0].units[0].topics[0].notes[0].id == "n1"


def test_topic_match_keeps_only_matching_topics_across_units():
    result = filter_hierarchy(_tree(), " matrices ")
    units = result[0].units
    assert [u.id for u in units] == ["u1", "u2"]
    assert [t.id for t in units[0].topics] == ["t2"]
    assert [t.id for t in units[1].topics] == ["t4"]
    assert expanded_unit_ids(result) == ["u1", "u2"]


def test_no_match_returns_empty():
    assert filter_hierarchy(_tree(), "quantum") == []


def test_input_is_not_mutated():
    tree = _tree()
    filter_hierarchy(tree, "matrices")
    assert [t.id for t in tree[0].units[0].topics] == ["t1", "t2"]
    assert len(tree[0].units) == 2
