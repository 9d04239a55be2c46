"""Tests for raw tree normalization and id assignment."""

from conftest import collect_ids
from curriculum_builder.hierarchy import RawNode, build_curriculum


def test_empty_root_gets_default_module():
    curriculum = build_curriculum(RawNode(title="", description="d"))

    assert curriculum.title == "Uploaded Curriculum"
    assert len(curriculum.modules) == 1
    module = curriculum.modules[0]
    assert module.title == "Module 1 - Introduction"
    assert module.topics[0].title == "Topic 1 - Overview of Introduction"
    assert module.topics[0].lessons[0].title == "Lesson 1 - Introduction to Overview"


def test_missing_children_are_filled():
    root = RawNode(title="Course", children=[
        RawNode(title="Empty module"),
        RawNode(title="Module with empty topic", children=[RawNode(title="Lonely topic")]),
    ])
    curriculum = build_curriculum(root)

    assert curriculum.modules[0].topics[0].title == "Topic 1 - Overview of Empty module"
    assert curriculum.modules[1].topics[0].lessons[0].title == "Lesson 1 - Introduction to Lonely topic"


def test_ids_are_unique_across_tree():
    root = RawNode(title="Course", children=[
        RawNode(title=f"M{m}", children=[
            RawNode(title=f"T{t}", children=[RawNode(title=f"L{l}") for l in range(3)])
            for t in range(3)
        ])
        for m in range(3)
    ])
    ids = collect_ids(build_curriculum(root))

    assert len(ids) == 1 + 3 + 9 + 27
    assert len(set(ids)) == len(ids)


def test_rebuilding_assigns_fresh_ids():
    root = RawNode(title="Course", children=[RawNode(title="M")])
    first = build_curriculum(root)
    second = build_curriculum(root)

    assert not set(collect_ids(first)) & set(collect_ids(second))
