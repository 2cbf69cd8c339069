"""P4.01 — Stagger group detection.

Sibling layers that repeat the same animations with a uniform delay step
collapse into one note in the rendered spec. Layers themselves are left
untouched; a group only references its members by name.
"""

from __future__ import annotations

from collections import OrderedDict

from motionspec.engine.config import PipelineConfig
from motionspec.engine.context import AnimationProperty, LayerSpec, PipelineContext, StaggerGroup
from motionspec.engine.easing import easings_equal
from motionspec.engine.registry import Phase, stage
from motionspec.utils.naming import group_name


def stagger_note(name: str, offset: int) -> str:
    return f"Subsequent {name} follow the above specs + a {offset}ms delay per item."


def sibling_sets(layers: list[LayerSpec]) -> list[list[LayerSpec]]:
    """Layers bucketed by parent name (top level = no parent), output order kept."""
    buckets: OrderedDict[str | None, list[LayerSpec]] = OrderedDict()
    for layer in layers:
        parent = layer.parenting.parent_name if layer.parenting else None
        buckets.setdefault(parent, []).append(layer)
    return list(buckets.values())


def _close(a, b, px_tolerance: float, pct_tolerance: float) -> bool:
    diff = abs(a - b)
    return diff <= px_tolerance or diff <= pct_tolerance * max(abs(a), abs(b))


def changes_match(a, b, config: PipelineConfig) -> bool:
    if a is None or b is None:
        return a is None and b is None
    if isinstance(a, tuple) != isinstance(b, tuple):
        return False
    if isinstance(a, tuple):
        return len(a) == len(b) and all(
            _close(x, y, config.stagger_value_tolerance_px, config.stagger_value_tolerance_pct)
            for x, y in zip(a, b)
        )
    return _close(a, b, config.stagger_value_tolerance_px, config.stagger_value_tolerance_pct)


def animations_match(a: AnimationProperty, b: AnimationProperty, config: PipelineConfig) -> bool:
    if a.name != b.name:
        return False
    if not easings_equal(a.easing, b.easing, config.spring_param_tolerance):
        return False
    if abs(a.timing.duration - b.timing.duration) > config.stagger_duration_tolerance_ms:
        return False
    a_change = a.values.change if a.values else None
    b_change = b.values.change if b.values else None
    return changes_match(a_change, b_change, config)


def layers_match(seed: LayerSpec, other: LayerSpec, config: PipelineConfig) -> bool:
    if len(seed.animations) != len(other.animations):
        return False
    return all(
        animations_match(a, b, config) for a, b in zip(seed.animations, other.animations)
    )


def uniform_offset(candidates: list[LayerSpec], tolerance: int) -> int | None:
    """Delay step between consecutive candidates, or None when it is not uniform."""
    delays = [layer.animations[0].timing.delay for layer in candidates]
    offset = delays[1] - delays[0]
    # Delays must grow in output order; a cascade running backwards is not grouped.
    if offset <= 0:
        return None
    for i, delay in enumerate(delays):
        if abs(delay - delays[0] - offset * i) > tolerance:
            return None
    return offset


def detect_groups(layers: list[LayerSpec], config: PipelineConfig) -> list[StaggerGroup]:
    positions = {id(layer): i for i, layer in enumerate(layers)}
    groups: list[StaggerGroup] = []

    for siblings in sibling_sets(layers):
        grouped: set[int] = set()
        for seed in siblings:
            if id(seed) in grouped or len(seed.animations) < config.stagger_min_animations:
                continue
            candidates = [seed] + [
                other
                for other in siblings
                if other is not seed
                and id(other) not in grouped
                and positions[id(other)] > positions[id(seed)]
                and layers_match(seed, other, config)
            ]
            if len(candidates) < config.stagger_min_members:
                continue
            offset = uniform_offset(candidates, config.stagger_delay_tolerance_ms)
            if offset is None:
                continue

            names = [layer.name for layer in candidates]
            name = group_name(names)
            groups.append(
                StaggerGroup(
                    members=names,
                    delay_offset=offset,
                    name=name,
                    note=stagger_note(name, offset),
                    position=positions[id(seed)],
                )
            )
            grouped.update(id(layer) for layer in candidates)

    return sorted(groups, key=lambda g: g.position)


@stage(
    id="P4.01",
    phase=Phase.GROUPING,
    dependencies=["P3.01"],
    description="Detect staggered animation groups across sibling layers",
)
def stagger_groups(ctx: PipelineContext) -> None:
    ctx.stagger_groups = detect_groups(ctx.layers, ctx.config)
    for group in ctx.stagger_groups:
        ctx.logger.info(
            "Stagger group %r: %d members, %dms offset",
            group.name,
            len(group.members),
            group.delay_offset,
        )
