"""P1.02 — Property Extractor & Easing Classifier.

Per selected property: timing relative to the work area, start/end values
(scaled to logical pixels where the kind is resolution dependent) and the
easing classification. A failing property is skipped; a failing layer is
skipped. Neither aborts the run.
"""

from __future__ import annotations

import re
from numbers import Real

from motionspec.engine.context import (
    SCALED_KINDS,
    AnimationProperty,
    LayerSpec,
    LinearEasing,
    PipelineContext,
    PropertyValues,
    TimingInfo,
    ValueKind,
)
from motionspec.engine.easing import classify_easing
from motionspec.engine.errors import ExtractionFailure
from motionspec.engine.extractor import PropertyExtractor, find_animated_properties, selected_indices
from motionspec.engine.registry import Phase, stage
from motionspec.models.source import LayerSource
from motionspec.utils.math_helpers import (
    format_number,
    round_half_up,
    round_ms,
    round_px,
    round_to,
    signed,
)

# ── Kind detection ──
_CORNER_TOKEN_RE = re.compile(r"\b(tl|tr|bl|br)\b", re.IGNORECASE)
_CORNER_PHRASES = (
    "unified radius",
    "unified corners",
    "top left",
    "top right",
    "bottom left",
    "bottom right",
    "corner",
    "radius",
    "smoothing",
)
_DIMENSIONAL_PHRASES = ("width", "height", "size", "distance", "softness")

# ── Canonical corner names ──
CORNER_RADIUS = "Corner Radius"
_CORNERS: tuple[tuple[str, str, str], ...] = (
    ("top left", "tl", "Top Left"),
    ("top right", "tr", "Top Right"),
    ("bottom left", "bl", "Bottom Left"),
    ("bottom right", "br", "Bottom Right"),
)
_SEPARATED_POSITION_RE = re.compile(r"^([XYZ]) Position$")

PLACEHOLDER_FIT_TO_SHAPE = "Fit to Shape"

_UNITS: dict[str, str] = {
    "position": "px",
    "corner-radius": "px",
    "dimensional": "px",
    "scale": "%",
    "opacity": "%",
    "rotation": "°",
    "generic": "",
}


def detect_kind(name: str) -> ValueKind:
    lower = name.lower()
    if "Position" in name:
        return "position"
    if "Scale" in name:
        return "scale"
    if "opacity" in lower:
        return "opacity"
    if "rotation" in lower:
        return "rotation"
    if _CORNER_TOKEN_RE.search(name) or any(p in lower for p in _CORNER_PHRASES):
        return "corner-radius"
    if any(p in lower for p in _DIMENSIONAL_PHRASES):
        return "dimensional"
    return "generic"


def canonical_name(name: str) -> str:
    """Collapse host-tool aliases: 'Unified Radius' -> 'Corner Radius', 'X Position' -> 'Position X'."""
    separated = _SEPARATED_POSITION_RE.match(name)
    if separated:
        return f"Position {separated.group(1)}"
    if detect_kind(name) != "corner-radius":
        return name
    lower = name.lower()
    if "smoothing" in lower:
        return name
    for phrase, token, label in _CORNERS:
        if phrase in lower or re.search(rf"\b{token}\b", lower):
            return f"{CORNER_RADIUS} ({label})"
    return CORNER_RADIUS


# ── Values ──


def _numbers(raw, where: str) -> float | tuple[float, ...]:
    if isinstance(raw, bool):
        raise ExtractionFailure(where, f"non-numeric keyframe value {raw!r}")
    if isinstance(raw, Real):
        return float(raw)
    if isinstance(raw, (list, tuple)) and raw and all(
        isinstance(v, Real) and not isinstance(v, bool) for v in raw
    ):
        return tuple(float(v) for v in raw)
    raise ExtractionFailure(where, f"non-numeric keyframe value {raw!r}")


def _round_for(kind: str, value: float):
    if kind in SCALED_KINDS:
        return round_px(value)
    if kind == "generic":
        rounded = round_to(value, 2)
        return int(rounded) if float(rounded).is_integer() else rounded
    return round_half_up(value)


def _fmt(value, unit: str) -> str:
    if isinstance(value, tuple):
        return "(" + ", ".join(f"{format_number(v)}{unit}" for v in value) + ")"
    return f"{format_number(value)}{unit}"


def format_values(kind: str, start, end, change, axis: str | None = None) -> dict[str, str]:
    unit = _UNITS[kind]
    suffix = f" ({axis})" if axis else ""
    if isinstance(change, tuple):
        if kind == "scale":
            change_text = f"{signed(change[0], '%')} scale"
            start_text = ", ".join(f"{format_number(v)}%" for v in start)
            end_text = ", ".join(f"{format_number(v)}%" for v in end)
            return {"startValue": start_text, "endValue": end_text, "change": change_text}
        change_text = ", ".join(signed(c, unit) for c in change)
    else:
        change_text = signed(change, unit) + suffix
    return {
        "startValue": _fmt(start, unit) + suffix,
        "endValue": _fmt(end, unit) + suffix,
        "change": change_text,
    }


def extract_values(prop: PropertyExtractor, multiplier: int = 1) -> PropertyValues | None:
    """Start/end of the selected keyframes, scaled and rounded for the property's kind."""
    indices = selected_indices(prop)
    if len(indices) < 2:
        return None

    kind = detect_kind(prop.name)
    start_raw = _numbers(prop.keyframe_value(indices[0]), prop.path)
    end_raw = _numbers(prop.keyframe_value(indices[-1]), prop.path)
    if isinstance(start_raw, tuple) != isinstance(end_raw, tuple):
        raise ExtractionFailure(prop.path, "start and end values differ in dimension")

    # 3-D position / scale: only the screen-plane axes are described.
    if isinstance(start_raw, tuple) and kind in ("position", "scale"):
        if len(start_raw) < 2 or len(end_raw) < 2:
            raise ExtractionFailure(prop.path, "expected at least two axes")
        start_raw, end_raw = start_raw[:2], end_raw[:2]

    divisor = multiplier if kind in SCALED_KINDS else 1
    exact_change = None
    if isinstance(start_raw, tuple):
        start_scaled = tuple(v / divisor for v in start_raw)
        end_scaled = tuple(v / divisor for v in end_raw)
        start = tuple(_round_for(kind, v) for v in start_scaled)
        end = tuple(_round_for(kind, v) for v in end_scaled)
        if kind in SCALED_KINDS:
            exact_change = tuple(e - s for s, e in zip(start_scaled, end_scaled))
    else:
        start_scaled = start_raw / divisor
        end_scaled = end_raw / divisor
        start = _round_for(kind, start_scaled)
        end = _round_for(kind, end_scaled)
        if kind in SCALED_KINDS:
            exact_change = end_scaled - start_scaled

    axis = None
    separated = _SEPARATED_POSITION_RE.match(prop.name)
    if separated:
        axis = separated.group(1)

    values = PropertyValues(start=start, end=end, kind=kind, exact_change=exact_change)
    values.formatted = format_values(kind, start, end, values.change, axis)
    return values


def extract_timing(prop: PropertyExtractor, work_area_start: float = 0.0) -> TimingInfo:
    indices = selected_indices(prop)
    if len(indices) < 2:
        return TimingInfo()
    first = prop.keyframe_time(indices[0])
    last = prop.keyframe_time(indices[-1])
    return TimingInfo(delay=round_ms(first - work_area_start), duration=round_ms(last - first))


def extract_animation(
    prop: PropertyExtractor, layer: LayerSource, ctx: PipelineContext
) -> AnimationProperty:
    work_area_start = ctx.composition.work_area_start if ctx.composition else 0.0
    return AnimationProperty(
        name=canonical_name(prop.name),
        values=extract_values(prop, ctx.multiplier),
        easing=classify_easing(prop, layer.markers, ctx.config),
        timing=extract_timing(prop, work_area_start),
        match_name=prop.match_name,
    )


def extract_layer(spec: LayerSpec, layer: LayerSource, ctx: PipelineContext) -> list[str]:
    """Fill ``spec.animations`` from the layer's selected properties.

    Returns the reasons for every property that was skipped.
    """
    animations: list[AnimationProperty] = []
    failures: list[str] = []
    for prop in find_animated_properties(layer.properties):
        try:
            animations.append(extract_animation(prop, layer, ctx))
        except ExtractionFailure as e:
            ctx.logger.warning("Skipping property %s on %s: %s", prop.name, spec.name, e.reason)
            failures.append(f"{prop.name}: {e.reason}")

    if spec.fit_to_shape is not None:
        if animations:
            animations[0].fit_to_shape = spec.fit_to_shape
        else:
            animations.append(
                AnimationProperty(
                    name=PLACEHOLDER_FIT_TO_SHAPE,
                    values=None,
                    easing=LinearEasing(),
                    has_keyframes=False,
                    fit_to_shape=spec.fit_to_shape,
                )
            )

    for link in spec.expression_links:
        target = canonical_name(link.target_property)
        for anim in animations:
            if anim.name == target and anim.expression_link is None:
                anim.expression_link = link

    spec.animations = animations
    return failures


@stage(
    id="P1.02",
    phase=Phase.EXTRACTION,
    dependencies=["P1.01"],
    description="Extract timing and values and classify easing per selected property",
)
def property_extraction(ctx: PipelineContext) -> None:
    kept: list[LayerSpec] = []
    for spec in ctx.layers:
        layer = ctx.source_layer(spec.index) if spec.index is not None else None
        if layer is None:
            kept.append(spec)
            continue
        try:
            failures = extract_layer(spec, layer, ctx)
        except Exception as e:
            ctx.skipped_layers[spec.name] = str(e)
            ctx.errors[f"P1.02:{spec.name}"] = str(e)
            ctx.logger.warning("Skipping layer %s: %s", spec.name, e)
            continue
        if not spec.animations and spec.layer_type != "parented":
            if failures:
                ctx.skipped_layers[spec.name] = "; ".join(failures)
            ctx.logger.debug("No animations extracted for %s", spec.name)
            continue
        kept.append(spec)

    ctx.layers = kept
    ctx.logger.info(
        "Extracted %d animations across %d layers (%d skipped)",
        ctx.num_animations,
        len(kept),
        len(ctx.skipped_layers),
    )
