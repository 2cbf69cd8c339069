"""P3.01 — Natural-language descriptions.

An ordered list of (predicate, generator) templates; the first predicate that
claims an animation writes its description. Templates read only the
animation they are given. An entry without both endpoints gets no
description, and one that fails to describe does not stop the rest.
"""

from __future__ import annotations

import re
from typing import Callable

from motionspec.engine.context import AnimationProperty, FitToShapeInfo, PipelineContext
from motionspec.engine.phase2.p2_02_axis_regroup import join_descriptions
from motionspec.engine.registry import Phase, stage
from motionspec.utils.math_helpers import format_number, round_half_up

Predicate = Callable[[AnimationProperty, "FitToShapeInfo | None"], bool]
Generator = Callable[[AnimationProperty, "FitToShapeInfo | None"], str]

# ── Fit to shape lookup tables ──
SCALE_MODES: dict[int, str] = {
    1: "Scales to fit width of",
    2: "Scales to fit height of",
    3: "Stretches to fill",
    4: "Positioned within",
}
ALIGNMENTS: dict[int, str] = {
    1: "center",
    2: "top left",
    3: "top center",
    4: "top right",
    5: "center left",
    6: "center right",
    7: "bottom left",
    8: "bottom center",
    9: "bottom right",
    10: "fill width",
    11: "fill height",
}

_ROTATION_AXIS_RE = re.compile(r"\b([XYZ])\b")


def _num(value, unit: str = "") -> str:
    if isinstance(value, tuple):
        return "(" + ", ".join(format_number(v) + unit for v in value) + ")"
    return format_number(value) + unit


def _has_values(anim, kind: str | None = None) -> bool:
    """Both endpoints present and of the same shape."""
    values = anim.values
    if values is None or values.change is None:
        return False
    return kind is None or values.kind == kind


# ── Fit to shape ──


def _is_fit_to_shape(anim, fit) -> bool:
    return fit is not None


def _fit_to_shape(anim, fit) -> str:
    mode = SCALE_MODES.get(fit.scale_to, SCALE_MODES[4])
    alignment = ALIGNMENTS.get(fit.alignment, ALIGNMENTS[1])
    return f'{mode} "{fit.container}" — aligned {alignment}'


# ── Corner radius ──


def _is_corner_radius(anim, fit) -> bool:
    return _has_values(anim, "corner-radius")


def _corner_radius(anim, fit) -> str:
    start, end = anim.values.start, anim.values.end
    if start == 0 and not isinstance(end, tuple) and end > 0:
        return f"sharp (0px) – rounded ({_num(end)}px)"
    if end == 0 and not isinstance(start, tuple) and start > 0:
        return f"rounded ({_num(start)}px) – sharp (0px)"
    return f"{_num(start)}px – {_num(end)}px"


# ── Opacity ──


def _is_opacity(anim, fit) -> bool:
    return _has_values(anim, "opacity")


def _opacity(anim, fit) -> str:
    start, end = anim.values.start, anim.values.end
    if start == 0 and end == 100:
        return "Alpha animates from 0% – 100%"
    if start == 0:
        return f"Fades in to {_num(end)}%"
    if end == 0:
        return f"Fades out from {_num(start)}%"
    return f"Alpha animates from {_num(start)}% – {_num(end)}%"


# ── Scale ──


def _is_scale(anim, fit) -> bool:
    return _has_values(anim, "scale")


def _scale(anim, fit) -> str:
    start, end = anim.values.start, anim.values.end
    if not anim.values.is_pair:
        return f"Scales from {_num(start)}% – {_num(end)}%"
    if start[0] == start[1] and end[0] == end[1]:
        return f"Scales from {_num(start[0])}% – {_num(end[0])}%"
    return (
        f"Scales from ({_num(start[0])}%, {_num(start[1])}%)"
        f" – ({_num(end[0])}%, {_num(end[1])}%)"
    )


# ── Position ──


def describe_x(start, change) -> str:
    if change > 0:
        return f"Moves {_num(change)}px from the left"
    if change < 0:
        return f"Moves {_num(abs(change))}px from the right"
    return f"Stays at {_num(start)}px"


def describe_y(start, change) -> str:
    if change < 0:
        return f"Moves up {_num(abs(change))}px"
    if change > 0:
        return f"Moves down {_num(change)}px"
    return f"Stays at {_num(start)}px"


def describe_z(start, change) -> str:
    if change < 0:
        return f"Moves {_num(abs(change))}px toward the viewer"
    if change > 0:
        return f"Moves {_num(change)}px away from the viewer"
    return f"Stays at {_num(start)}px"


def _is_position(anim, fit) -> bool:
    return _has_values(anim, "position")


def _position(anim, fit) -> str:
    values = anim.values
    change = values.change
    if values.is_pair:
        return join_descriptions(
            describe_x(values.start[0], change[0]), describe_y(values.start[1], change[1])
        )
    if anim.name.endswith("Y"):
        return describe_y(values.start, change)
    if anim.name.endswith("Z"):
        return describe_z(values.start, change)
    return describe_x(values.start, change)


# ── Rotation ──


def _is_rotation(anim, fit) -> bool:
    return _has_values(anim, "rotation")


def _rotation(anim, fit) -> str:
    change = anim.values.change
    if isinstance(change, tuple):
        change = change[0]
    degrees = abs(round_half_up(change))
    direction = "clockwise" if change > 0 else "counterclockwise"
    match = _ROTATION_AXIS_RE.search(anim.name)
    axis = f"{match.group(1)} " if match else ""
    return f"Rotates {axis}{degrees}° {direction}"


# ── Dimensional / generic ──


def _is_dimensional(anim, fit) -> bool:
    return _has_values(anim, "dimensional")


def _dimensional(anim, fit) -> str:
    start = _num(anim.values.start, "px")
    end = _num(anim.values.end, "px")
    return f"{anim.name} animates from {start} – {end}"


def _is_generic(anim, fit) -> bool:
    return _has_values(anim)


def _generic(anim, fit) -> str:
    values = anim.values
    return f"{anim.name} animates from {_num(values.start)} – {_num(values.end)}"


TEMPLATES: list[tuple[Predicate, Generator]] = [
    (_is_fit_to_shape, _fit_to_shape),
    (_is_corner_radius, _corner_radius),
    (_is_opacity, _opacity),
    (_is_scale, _scale),
    (_is_position, _position),
    (_is_rotation, _rotation),
    (_is_dimensional, _dimensional),
    (_is_generic, _generic),
]


def describe(
    anim: AnimationProperty,
    fit: FitToShapeInfo | None = None,
    templates: list[tuple[Predicate, Generator]] | None = None,
) -> str:
    """Description from the first template that claims ``anim``; '' when none does."""
    if fit is None:
        fit = anim.fit_to_shape
    for predicate, generator in templates or TEMPLATES:
        if predicate(anim, fit):
            return generator(anim, fit)
    return ""


@stage(
    id="P3.01",
    phase=Phase.DESCRIPTION,
    dependencies=["P2.02"],
    description="Generate a plain-language description per animation",
)
def descriptions(ctx: PipelineContext) -> None:
    for layer in ctx.layers:
        for anim in layer.animations:
            try:
                anim.description = describe(anim)
            except Exception as e:
                anim.description = ""
                ctx.errors[f"P3.01:{layer.name}/{anim.name}"] = str(e)
                ctx.logger.warning("Cannot describe %s on %s: %s", anim.name, layer.name, e)
