"""Property extraction contract + property-tree walk.

Classification code only ever talks to a ``PropertyExtractor``; the JSON
payload sent by the host-tool script is adapted once, by ``KeyframedProperty``.
Keyframe indices are 0-based.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Literal, Protocol

from motionspec.models.source import PropertySource, TemporalEase

EaseSide = Literal["in", "out"]


class PropertyExtractor(Protocol):
    """Read-only view of one keyframed property."""

    name: str
    match_name: str
    path: str

    @property
    def can_vary_over_time(self) -> bool: ...

    @property
    def keyframe_count(self) -> int: ...

    def keyframe_time(self, i: int) -> float: ...

    def keyframe_value(self, i: int) -> Any: ...

    def keyframe_selected(self, i: int) -> bool: ...

    def interpolation_kind(self, i: int) -> tuple[str, str]:
        """(incoming, outgoing) interpolation: 'linear' | 'bezier' | 'hold'."""
        ...

    def temporal_ease(self, i: int, side: EaseSide) -> TemporalEase | None: ...


class KeyframedProperty:
    """``PropertyExtractor`` over a ``PropertySource`` node."""

    def __init__(self, node: PropertySource, path: str) -> None:
        self.node = node
        self.name = node.name
        self.match_name = node.match_name or node.name
        self.path = path

    def __repr__(self) -> str:
        return f"KeyframedProperty({self.path!r}, keys={self.keyframe_count})"

    @property
    def can_vary_over_time(self) -> bool:
        return self.node.can_vary_over_time

    @property
    def keyframe_count(self) -> int:
        return len(self.node.keyframes)

    def keyframe_time(self, i: int) -> float:
        return self.node.keyframes[i].time

    def keyframe_value(self, i: int) -> Any:
        return self.node.keyframes[i].value

    def keyframe_selected(self, i: int) -> bool:
        return self.node.keyframes[i].selected

    def interpolation_kind(self, i: int) -> tuple[str, str]:
        key = self.node.keyframes[i]
        return (key.in_interpolation, key.out_interpolation)

    def temporal_ease(self, i: int, side: EaseSide) -> TemporalEase | None:
        key = self.node.keyframes[i]
        eases = key.in_ease if side == "in" else key.out_ease
        return eases[0] if eases else None


def selected_indices(prop: PropertyExtractor) -> list[int]:
    return [i for i in range(prop.keyframe_count) if prop.keyframe_selected(i)]


def selected_times(prop: PropertyExtractor) -> list[float]:
    return [prop.keyframe_time(i) for i in selected_indices(prop)]


def is_animated(prop: PropertyExtractor) -> bool:
    return prop.can_vary_over_time and prop.keyframe_count > 0


def iter_property_tree(roots: list[PropertySource]) -> Iterator[tuple[PropertySource, str]]:
    """Depth-first walk in document order, yielding ``(node, path)``.

    Iterative, with a visited set keyed on node identity: a sub-tree shared by
    two groups is yielded once.
    """
    visited: set[int] = set()
    stack: list[tuple[PropertySource, str]] = [
        (node, node.match_name or node.name) for node in reversed(roots)
    ]
    while stack:
        node, path = stack.pop()
        if id(node) in visited:
            continue
        visited.add(id(node))
        yield node, path
        for child in reversed(node.children):
            stack.append((child, f"{path}/{child.match_name or child.name}"))


def find_selected_properties(roots: list[PropertySource]) -> list[KeyframedProperty]:
    """All properties with at least one selected keyframe, in document order."""
    found: list[KeyframedProperty] = []
    for node, path in iter_property_tree(roots):
        prop = KeyframedProperty(node, path)
        if is_animated(prop) and selected_indices(prop):
            found.append(prop)
    return found


def find_property(
    roots: list[PropertySource], names: tuple[str, ...]
) -> KeyframedProperty | None:
    """First property whose name or match name is in ``names``."""
    for node, path in iter_property_tree(roots):
        if node.name in names or node.match_name in names:
            return KeyframedProperty(node, path)
    return None


def find_animated_properties(
    roots: list[PropertySource], min_selected: int = 2
) -> list[KeyframedProperty]:
    """Properties with enough selected keyframes to describe a start and an end."""
    return [
        prop
        for prop in find_selected_properties(roots)
        if len(selected_indices(prop)) >= min_selected
    ]
