"""Easing classification — spring markers, baked springs, cubic-bezier, linear.

Priority is strict and evaluated top-down; the first rule that produces an
easing wins:

    1. spring marker on the layer, overlapping the selected keyframes
    2. baked-spring keyframe density (feature-flagged, off by default)
    3. cubic-bezier from the first two selected bezier keyframes
    4. linear
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import numpy as np

from motionspec.engine.config import PipelineConfig
from motionspec.engine.context import (
    CubicBezierEasing,
    Easing,
    LinearEasing,
    SpringEasing,
    SpringParams,
)
from motionspec.engine.extractor import PropertyExtractor, selected_indices
from motionspec.models.source import MarkerSource
from motionspec.utils.math_helpers import clamp, round_to

logger = logging.getLogger(__name__)

# ── Named spring presets (shared motion library) ──
SPRING_PRESETS: dict[str, SpringParams] = {
    "Standard Spring": SpringParams(stiffness=175, damping=26.46, damping_ratio=1, mass=1),
    "Fast Spring": SpringParams(stiffness=300, damping=34.64, damping_ratio=1, mass=1),
    "Slow Spring": SpringParams(stiffness=100, damping=20, damping_ratio=1, mass=1),
    "Gentle Spring": SpringParams(stiffness=120, damping=18, damping_ratio=0.8, mass=1),
    "Snappy Spring": SpringParams(stiffness=400, damping=40, damping_ratio=1, mass=1),
    "Bouncy Spring": SpringParams(stiffness=200, damping=12, damping_ratio=0.6, mass=1),
}

# ── Named cubic-bezier presets (x1, y1, x2, y2) ──
# Table order breaks ties between equally close presets.
BEZIER_PRESETS: dict[str, tuple[float, float, float, float]] = {
    "Standard Curve": (0.2, 0.0, 0.0, 1.0),
    "Emphasized Decelerate": (0.05, 0.7, 0.1, 1.0),
    "Emphasized Accelerate": (0.3, 0.0, 0.8, 0.15),
    "Standard Decelerate": (0.0, 0.0, 0.0, 1.0),
    "Standard Accelerate": (0.3, 0.0, 1.0, 1.0),
    "Ease": (0.25, 0.1, 0.25, 1.0),
    "Ease In": (0.42, 0.0, 1.0, 1.0),
    "Ease Out": (0.0, 0.0, 0.58, 1.0),
    "Ease In Out": (0.42, 0.0, 0.58, 1.0),
}
_PRESET_NAMES = list(BEZIER_PRESETS)
_PRESET_MATRIX = np.array(list(BEZIER_PRESETS.values()), dtype=np.float64)

# Deviations are compared after rounding so 0.35 - 0.2 counts as exactly 0.15.
_DEVIATION_DECIMALS = 6

# ── Marker comment grammar ──
#   Bouncy Spring
#   Stiffness: 200, Damping: 12, Damping Ratio: 0.6, Mass: 1
#   | Property: ADBE Transform Group/ADBE Position
_STIFFNESS_RE = re.compile(r"Stiffness:\s*([0-9.]+)")
_DAMPING_RE = re.compile(r"Damping:\s*([0-9.]+)")
_DAMPING_RATIO_RE = re.compile(r"Damping Ratio:\s*([0-9.]+)")
_MASS_RE = re.compile(r"Mass:\s*([0-9.]+)")


@dataclass(frozen=True)
class MarkerSpring:
    """One spring definition parsed out of a marker comment."""

    preset: str
    params: SpringParams | None = None
    target: str | None = None


# ── 1. Spring markers ──


def parse_marker_springs(comment: str) -> list[MarkerSpring]:
    """Parse every spring definition in a marker comment."""
    lines = [
        line.strip()
        for line in comment.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        if line.strip()
    ]
    springs: list[MarkerSpring] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if "Spring" not in line and "Custom" not in line:
            i += 1
            continue

        params: SpringParams | None = None
        target: str | None = None
        if i + 1 < len(lines) and "Stiffness:" in lines[i + 1]:
            params = _parse_spring_params(lines[i + 1])
            i += 1
        if i + 1 < len(lines) and "Property:" in lines[i + 1]:
            target = lines[i + 1].replace("Property:", "").replace("|", "").strip() or None
            i += 1

        springs.append(MarkerSpring(preset=line, params=params, target=target))
        i += 1

    logger.debug("Parsed %d spring(s) from marker", len(springs))
    return springs


def _parse_spring_params(line: str) -> SpringParams | None:
    stiffness = _STIFFNESS_RE.search(line)
    damping = _DAMPING_RE.search(line)
    if not (stiffness and damping):
        logger.debug("Could not extract spring parameters from %r", line)
        return None
    ratio = _DAMPING_RATIO_RE.search(line)
    mass = _MASS_RE.search(line)
    return SpringParams(
        stiffness=float(stiffness.group(1)),
        damping=float(damping.group(1)),
        damping_ratio=float(ratio.group(1)) if ratio else None,
        mass=float(mass.group(1)) if mass else None,
    )


def find_spring_for_property(
    springs: list[MarkerSpring], prop: PropertyExtractor
) -> MarkerSpring | None:
    """Exact path, then path suffix, then the first untargeted spring."""
    for spring in springs:
        if spring.target and spring.target in (prop.path, prop.match_name):
            return spring

    for spring in springs:
        if spring.target and spring.target.endswith(prop.match_name):
            logger.debug("Spring target %r matched %r by suffix", spring.target, prop.match_name)
            return spring

    for spring in springs:
        if not spring.target:
            return spring

    return None


def resolve_spring_params(preset: str, params: SpringParams | None) -> SpringParams:
    """Fill parameters missing from the marker with the named preset's values."""
    base = SPRING_PRESETS.get(preset)
    if base is None:
        return params or SpringParams()
    if params is None:
        return base
    return SpringParams(
        stiffness=params.stiffness or base.stiffness,
        damping=params.damping or base.damping,
        damping_ratio=params.damping_ratio or base.damping_ratio,
        mass=params.mass or base.mass,
    )


def spring_from_markers(
    prop: PropertyExtractor, markers: list[MarkerSource], start: float, end: float
) -> SpringEasing | None:
    for marker in markers:
        # Marker span [time, time + duration] must overlap the selected range.
        if marker.time > end or marker.time + marker.duration < start:
            continue
        if not marker.comment:
            continue
        matched = find_spring_for_property(parse_marker_springs(marker.comment), prop)
        if matched is None:
            continue
        return SpringEasing(
            preset=matched.preset,
            params=resolve_spring_params(matched.preset, matched.params),
            source="marker",
        )
    return None


# ── 2. Baked springs ──


def detect_baked_spring(
    prop: PropertyExtractor, start: float, end: float, config: PipelineConfig
) -> SpringEasing | None:
    """Classify densely baked keyframes inside [start, end] as a spring."""
    if not prop.can_vary_over_time or prop.keyframe_count < 2 or end <= start:
        return None

    times = np.array([prop.keyframe_time(i) for i in range(prop.keyframe_count)])
    keys_in_range = int(np.count_nonzero((times >= start) & (times <= end)))
    density = keys_in_range / (end - start)

    if keys_in_range < config.baked_min_keys or density < config.baked_min_density:
        return None

    if density > config.baked_fast_density:
        preset = "Fast Spring"
    elif density > config.baked_standard_density:
        preset = "Standard Spring"
    else:
        preset = "Gentle Spring"
    return SpringEasing(preset=preset, params=SPRING_PRESETS[preset], source="baked")


# ── 3. Cubic bezier ──


def bezier_from_keyframes(prop: PropertyExtractor) -> tuple[float, float, float, float] | None:
    """CSS control points from the first two selected bezier keyframes."""
    bezier_keys = [
        i for i in selected_indices(prop) if "bezier" in prop.interpolation_kind(i)
    ]
    if len(bezier_keys) < 2:
        return None

    out_ease = prop.temporal_ease(bezier_keys[0], "out")
    in_ease = prop.temporal_ease(bezier_keys[1], "in")
    if out_ease is None or in_ease is None:
        return None

    x1 = clamp(out_ease.influence / 100)
    y1 = clamp(out_ease.speed / 100)
    x2 = clamp(1 - in_ease.influence / 100)
    y2 = clamp(1 - in_ease.speed / 100)
    return (round_to(x1), round_to(y1), round_to(x2), round_to(y2))


def match_bezier_preset(
    points: tuple[float, float, float, float], tolerance: float = 0.15
) -> str | None:
    """Closest named preset with every coordinate strictly within ``tolerance``."""
    deviation = np.round(
        np.abs(_PRESET_MATRIX - np.asarray(points, dtype=np.float64)), _DEVIATION_DECIMALS
    )
    within = (deviation < tolerance).all(axis=1)
    if not within.any():
        return None
    worst = np.where(within, deviation.max(axis=1), np.inf)
    return _PRESET_NAMES[int(np.argmin(worst))]


# ── Classifier ──


def classify_easing(
    prop: PropertyExtractor,
    markers: list[MarkerSource],
    config: PipelineConfig,
) -> Easing:
    indices = selected_indices(prop)
    if len(indices) >= 2:
        start = prop.keyframe_time(indices[0])
        end = prop.keyframe_time(indices[-1])

        spring = spring_from_markers(prop, markers, start, end)
        if spring is not None:
            return spring

        if config.detect_baked_springs:
            baked = detect_baked_spring(prop, start, end, config)
            if baked is not None:
                return baked

    points = bezier_from_keyframes(prop)
    if points is not None:
        return CubicBezierEasing(
            *points,
            preset=match_bezier_preset(points, config.bezier_preset_tolerance),
            source="keyframes",
        )

    return LinearEasing()


def easings_equal(a: Easing, b: Easing, spring_tolerance: float = 0.01) -> bool:
    """Same variant and same parameters (springs within ``spring_tolerance``)."""
    if a.type != b.type:
        return False
    if isinstance(a, SpringEasing) and isinstance(b, SpringEasing):
        for pa, pb in zip(a.params.as_tuple(), b.params.as_tuple()):
            if pa is None and pb is None:
                continue
            if pa is None or pb is None or abs(pa - pb) >= spring_tolerance:
                return False
        return True
    if isinstance(a, CubicBezierEasing) and isinstance(b, CubicBezierEasing):
        return a.css == b.css
    return True
