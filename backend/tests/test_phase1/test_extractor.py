"""Tests for the property-tree walk and the keyframe adapter."""

from motionspec.engine.extractor import (
    KeyframedProperty,
    find_animated_properties,
    find_property,
    find_selected_properties,
    iter_property_tree,
    selected_times,
)
from motionspec.models.source import PropertySource
from tests.conftest import keyframe, prop, transform, transform_prop


def _tree(*nodes: dict) -> list[PropertySource]:
    return [PropertySource.model_validate(node) for node in nodes]


def test_walk_is_depth_first_in_document_order():
    roots = _tree(
        transform(
            transform_prop("Position", [keyframe(0, [0, 0]), keyframe(1, [1, 1])]),
            transform_prop("Opacity", [keyframe(0, 0), keyframe(1, 100)]),
        ),
        prop("Corner Radius", [keyframe(0, 0), keyframe(1, 8)]),
    )
    paths = [path for _, path in iter_property_tree(roots)]
    assert paths == [
        "ADBE Transform Group",
        "ADBE Transform Group/ADBE Position",
        "ADBE Transform Group/ADBE Opacity",
        "Corner Radius",
    ]


def test_shared_subtree_visited_once():
    leaf = PropertySource.model_validate(prop("Opacity", [keyframe(0, 0), keyframe(1, 100)]))
    group_a = PropertySource(name="A", children=[leaf])
    group_b = PropertySource(name="B", children=[leaf])
    nodes = [node for node, _ in iter_property_tree([group_a, group_b])]
    assert sum(1 for node in nodes if node.name == "Opacity") == 1


def test_selected_properties_need_a_selected_keyframe():
    roots = _tree(
        transform(
            transform_prop("Position", [keyframe(0, [0, 0], False), keyframe(1, [1, 1], False)]),
            transform_prop("Opacity", [keyframe(0, 0), keyframe(1, 100, False)]),
            transform_prop("Scale", [keyframe(0, [0, 0]), keyframe(1, [100, 100])]),
        )
    )
    assert [p.name for p in find_selected_properties(roots)] == ["Opacity", "Scale"]
    assert [p.name for p in find_animated_properties(roots)] == ["Scale"]


def test_static_properties_ignored():
    static = prop("Opacity", [keyframe(0, 0), keyframe(1, 100)])
    static["canVaryOverTime"] = False
    assert find_selected_properties(_tree(static)) == []


def test_find_property_by_name_or_match_name():
    roots = _tree(transform(transform_prop("Rotation", [keyframe(0, 0), keyframe(1, 90)])))
    assert find_property(roots, ("ADBE Rotate Z",)).name == "Rotation"
    assert find_property(roots, ("Rotation",)).path == "ADBE Transform Group/ADBE Rotate Z"
    assert find_property(roots, ("Scale",)) is None


def test_keyframed_property_adapter():
    node = PropertySource.model_validate(
        prop(
            "Opacity",
            [
                keyframe(0.1, 0, interpolation="bezier", out_ease=(40, 0)),
                keyframe(0.5, 100, selected=False, interpolation="bezier", in_ease=(60, 0)),
            ],
            "ADBE Opacity",
        )
    )
    p = KeyframedProperty(node, "ADBE Opacity")
    assert p.keyframe_count == 2
    assert p.keyframe_value(1) == 100
    assert p.interpolation_kind(0) == ("bezier", "bezier")
    assert p.temporal_ease(0, "out").influence == 40
    assert p.temporal_ease(1, "in").influence == 60
    assert p.temporal_ease(0, "in") is None
    assert selected_times(p) == [0.1]
