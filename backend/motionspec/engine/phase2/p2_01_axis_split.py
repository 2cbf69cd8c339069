"""P2.01 — Position axis split.

A two-axis Position becomes independent ``Position X`` / ``Position Y``
entries. Axes that move no more than the threshold (post-scaling px) are
dropped outright.
"""

from __future__ import annotations

from dataclasses import replace

from motionspec.engine.context import (
    AnimationProperty,
    LayerSpec,
    LinearEasing,
    PipelineContext,
    PropertyValues,
)
from motionspec.engine.phase1.p1_02_property_extraction import (
    PLACEHOLDER_FIT_TO_SHAPE,
    format_values,
)
from motionspec.engine.registry import Phase, stage

POSITION = "Position"
AXES = ("X", "Y")


def split_position(
    anim: AnimationProperty, threshold: float = 0.5
) -> list[AnimationProperty]:
    """Axis entries for a combined position; empty when neither axis moves."""
    values = anim.values
    exact = values.exact_change if values.exact_change is not None else values.change
    axes: list[AnimationProperty] = []
    for i, axis in enumerate(AXES):
        if abs(exact[i]) <= threshold:
            continue
        start, end = values.start[i], values.end[i]
        axis_values = PropertyValues(start=start, end=end, kind="position", exact_change=exact[i])
        axis_values.formatted = format_values("position", start, end, axis_values.change, axis)
        axes.append(
            AnimationProperty(
                name=f"{POSITION} {axis}",
                values=axis_values,
                easing=anim.easing,
                timing=replace(anim.timing),
                match_name=anim.match_name,
                expression_link=anim.expression_link,
            )
        )
    return axes


def _is_combined_position(anim: AnimationProperty) -> bool:
    return anim.name == POSITION and anim.values is not None and anim.values.is_pair


def split_layer(layer: LayerSpec, threshold: float = 0.5) -> None:
    animations: list[AnimationProperty] = []
    for anim in layer.animations:
        if _is_combined_position(anim):
            animations.extend(split_position(anim, threshold))
        else:
            animations.append(anim)

    # Keep fit-to-shape metadata when the entry that carried it was dropped.
    if layer.fit_to_shape is not None and not any(a.fit_to_shape for a in animations):
        if animations:
            animations[0].fit_to_shape = layer.fit_to_shape
        else:
            animations.append(
                AnimationProperty(
                    name=PLACEHOLDER_FIT_TO_SHAPE,
                    values=None,
                    easing=LinearEasing(),
                    has_keyframes=False,
                    fit_to_shape=layer.fit_to_shape,
                )
            )
    layer.animations = animations


@stage(
    id="P2.01",
    phase=Phase.STRUCTURE,
    dependencies=["P1.02"],
    description="Split two-axis position into per-axis animations",
)
def axis_split(ctx: PipelineContext) -> None:
    threshold = ctx.config.axis_change_threshold
    for layer in ctx.layers:
        split_layer(layer, threshold)
