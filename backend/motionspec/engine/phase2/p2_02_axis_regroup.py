"""P2.02 — Position axis regroup.

``Position X`` and ``Position Y`` on the same layer merge back into one
``Position X & Y`` entry when they start together and ease the same way.
"""

from __future__ import annotations

from motionspec.engine.context import (
    AnimationProperty,
    LayerSpec,
    PipelineContext,
    PropertyValues,
    TimingInfo,
)
from motionspec.engine.easing import easings_equal
from motionspec.engine.phase1.p1_02_property_extraction import format_values
from motionspec.engine.registry import Phase, stage

POSITION_X = "Position X"
POSITION_Y = "Position Y"
POSITION_XY = "Position X & Y"


def can_merge(a: AnimationProperty, b: AnimationProperty, spring_tolerance: float = 0.01) -> bool:
    if a.values is None or b.values is None:
        return False
    return a.timing.delay == b.timing.delay and easings_equal(
        a.easing, b.easing, spring_tolerance
    )


def join_descriptions(first: str, second: str) -> str:
    if not first:
        return second
    if not second:
        return first
    return f"{first} and {second[:1].lower()}{second[1:]}"


def merge_axes(a: AnimationProperty, b: AnimationProperty) -> AnimationProperty:
    """Merged entry; argument order does not matter."""
    x, y = (a, b) if a.name == POSITION_X else (b, a)
    xv, yv = x.values, y.values
    x_exact = xv.exact_change if xv.exact_change is not None else xv.change
    y_exact = yv.exact_change if yv.exact_change is not None else yv.change

    values = PropertyValues(
        start=(xv.start, yv.start),
        end=(xv.end, yv.end),
        kind="position",
        exact_change=(x_exact, y_exact),
    )
    values.formatted = format_values("position", values.start, values.end, values.change)
    return AnimationProperty(
        name=POSITION_XY,
        values=values,
        easing=x.easing,
        timing=TimingInfo(
            delay=x.timing.delay, duration=max(x.timing.duration, y.timing.duration)
        ),
        description=join_descriptions(x.description, y.description),
        match_name=x.match_name or y.match_name,
        fit_to_shape=x.fit_to_shape or y.fit_to_shape,
        expression_link=x.expression_link or y.expression_link,
    )


def regroup_layer(layer: LayerSpec, spring_tolerance: float = 0.01) -> bool:
    """Merge the layer's axis pair in place. Returns True when merged."""
    x = layer.get_animation(POSITION_X)
    y = layer.get_animation(POSITION_Y)
    if x is None or y is None or not can_merge(x, y, spring_tolerance):
        return False

    merged = merge_axes(x, y)
    first = min(layer.animations.index(x), layer.animations.index(y))
    remaining = [anim for anim in layer.animations if anim is not x and anim is not y]
    remaining.insert(first, merged)
    layer.animations = remaining
    return True


@stage(
    id="P2.02",
    phase=Phase.STRUCTURE,
    dependencies=["P2.01"],
    description="Merge axis pairs that share delay and easing",
)
def axis_regroup(ctx: PipelineContext) -> None:
    merged = 0
    for layer in ctx.layers:
        if regroup_layer(layer, ctx.config.spring_param_tolerance):
            merged += 1
    ctx.logger.debug("Axis regroup: %d layer(s) merged", merged)
