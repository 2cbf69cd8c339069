"""Shared test fixtures and payload builders.

Payloads mirror what the host-tool script sends: camelCase keys, times in
seconds, values in composition units.
"""

from __future__ import annotations

import pytest

from motionspec.engine.config import PipelineConfig
from motionspec.engine.pipeline import register_stages

register_stages()


# ── Builders ──


def keyframe(
    time: float,
    value,
    selected: bool = True,
    interpolation: str = "linear",
    in_ease: tuple[float, float] | None = None,
    out_ease: tuple[float, float] | None = None,
) -> dict:
    key = {
        "time": time,
        "value": value,
        "selected": selected,
        "inInterpolation": interpolation,
        "outInterpolation": interpolation,
    }
    if in_ease is not None:
        key["inEase"] = [{"influence": in_ease[0], "speed": in_ease[1]}]
    if out_ease is not None:
        key["outEase"] = [{"influence": out_ease[0], "speed": out_ease[1]}]
    return key


def bezier_pair(
    t0: float,
    v0,
    t1: float,
    v1,
    out_ease: tuple[float, float],
    in_ease: tuple[float, float],
) -> list[dict]:
    """Two selected bezier keyframes; ``out_ease`` leaves the first, ``in_ease`` enters the second."""
    return [
        keyframe(t0, v0, interpolation="bezier", out_ease=out_ease, in_ease=(33.33, 0)),
        keyframe(t1, v1, interpolation="bezier", in_ease=in_ease, out_ease=(33.33, 0)),
    ]


def prop(
    name: str,
    keyframes: list[dict],
    match_name: str | None = None,
    expression: str | None = None,
) -> dict:
    node = {
        "name": name,
        "matchName": match_name or name,
        "canVaryOverTime": True,
        "keyframes": keyframes,
    }
    if expression is not None:
        node["expression"] = expression
    return node


_TRANSFORM_MATCH_NAMES = {
    "Position": "ADBE Position",
    "Scale": "ADBE Scale",
    "Rotation": "ADBE Rotate Z",
    "Opacity": "ADBE Opacity",
    "X Position": "ADBE Position_0",
    "Y Position": "ADBE Position_1",
}


def transform_prop(name: str, keyframes: list[dict], expression: str | None = None) -> dict:
    return prop(name, keyframes, _TRANSFORM_MATCH_NAMES.get(name, name), expression)


def transform(*props: dict) -> dict:
    return {"name": "Transform", "matchName": "ADBE Transform Group", "children": list(props)}


def layer(
    index: int,
    name: str,
    *properties: dict,
    parent: int | None = None,
    markers: list[dict] | None = None,
    effects: list[dict] | None = None,
    layer_type: str = "shape",
    selected: bool = True,
) -> dict:
    return {
        "index": index,
        "name": name,
        "layerType": layer_type,
        "selected": selected,
        "parent": parent,
        "properties": list(properties),
        "markers": markers or [],
        "effects": effects or [],
    }


def composition(
    *layers: dict,
    width: int = 375,
    height: int = 812,
    frame_rate: float = 60,
    work_area_start: float = 0.0,
    work_area_duration: float = 2.0,
    selection_order: list[int] | None = None,
) -> dict:
    comp = {
        "name": "Main",
        "width": width,
        "height": height,
        "frameRate": frame_rate,
        "duration": 4.0,
        "workAreaStart": work_area_start,
        "workAreaDuration": work_area_duration,
        "layers": list(layers),
    }
    if selection_order is not None:
        comp["selectionOrder"] = selection_order
    return comp


def marker(time: float, comment: str, duration: float = 0.0) -> dict:
    return {"time": time, "duration": duration, "comment": comment}


def card(index: int, name: str, delay: float, parent: int | None = None) -> dict:
    """Card that fades in and slides up 100px over 300ms, starting at ``delay`` seconds."""
    return layer(
        index,
        name,
        transform(
            transform_prop(
                "Position",
                [keyframe(delay, [187, 500]), keyframe(delay + 0.3, [187, 400])],
            ),
            transform_prop("Opacity", [keyframe(delay, 0), keyframe(delay + 0.3, 100)]),
        ),
        parent=parent,
    )


# ── Sample payloads ──

# Slides 100px right, Y untouched.
SLIDE_RIGHT_COMP = composition(
    layer(
        1,
        "Button",
        transform(
            transform_prop("Position", [keyframe(0.0, [0, 0]), keyframe(0.5, [100, 0])]),
        ),
    )
)

FADE_IN_COMP = composition(
    layer(1, "Toast", transform(transform_prop("Opacity", [keyframe(0.1, 0), keyframe(0.4, 100)]))),
)

# Three matching cards 50ms apart plus a differently animated sibling.
STAGGER_COMP = composition(
    card(1, "Card 1", 0.0),
    card(2, "Card 2", 0.05),
    card(3, "Card 3", 0.1),
    layer(
        4,
        "Header",
        transform(
            transform_prop("Scale", [keyframe(0.0, [80, 80]), keyframe(0.2, [100, 100])]),
            transform_prop("Opacity", [keyframe(0.0, 0), keyframe(0.2, 100)]),
        ),
    ),
)

NO_SELECTION_COMP = composition(
    layer(
        1,
        "Idle",
        transform(transform_prop("Opacity", [keyframe(0.0, 0, False), keyframe(0.4, 100, False)])),
    )
)

# 1170x2532 is an iPhone 12/13/14 capture at 3x.
RETINA_COMP = composition(
    layer(
        1,
        "Sheet",
        transform(transform_prop("Position", [keyframe(0.0, [585, 2532]), keyframe(0.4, [585, 1932])])),
        prop("Corner Radius", [keyframe(0.0, 0), keyframe(0.4, 48)], "ADBE Vector RoundRect Roundness"),
    ),
    width=1170,
    height=2532,
)


@pytest.fixture
def slide_right_comp() -> dict:
    return SLIDE_RIGHT_COMP


@pytest.fixture
def stagger_comp() -> dict:
    return STAGGER_COMP


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig()
