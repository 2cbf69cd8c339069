"""PipelineContext — the single mutable state object flowing through all stages.

Per-layer results → LayerSpec.animations
Cross-layer results → PipelineContext.stagger_groups
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Union

if TYPE_CHECKING:
    from motionspec.engine.config import PipelineConfig
    from motionspec.models.source import CompositionSource, LayerSource

ValueKind = Literal[
    "position", "scale", "opacity", "rotation", "corner-radius", "dimensional", "generic"
]
EasingSource = Literal["marker", "baked", "keyframes"]

# Value kinds measured in composition pixels, divided by the resolution multiplier.
SCALED_KINDS: frozenset[str] = frozenset({"position", "corner-radius", "dimensional"})

Scalar = Union[int, float]
Value = Union[Scalar, tuple[Scalar, ...]]


@dataclass(frozen=True)
class CompositionMetadata:
    name: str
    width: int
    height: int
    frame_rate: float
    multiplier: int = 1
    detection_mode: Literal["auto", "manual"] = "auto"
    work_area_start: float = 0.0
    work_area_duration: float = 0.0

    @property
    def scale_factor(self) -> str:
        return f"{self.multiplier}x"


# ── Easing (tagged union) ──


@dataclass(frozen=True)
class SpringParams:
    stiffness: float | None = None
    damping: float | None = None
    damping_ratio: float | None = None
    mass: float | None = None

    def as_tuple(self) -> tuple[float | None, float | None, float | None, float | None]:
        return (self.stiffness, self.damping, self.damping_ratio, self.mass)


@dataclass(frozen=True)
class LinearEasing:
    source: EasingSource | None = None
    type: str = field(default="linear", init=False)


@dataclass(frozen=True)
class SpringEasing:
    preset: str
    params: SpringParams = field(default_factory=SpringParams)
    source: EasingSource | None = "marker"
    type: str = field(default="spring", init=False)


@dataclass(frozen=True)
class CubicBezierEasing:
    x1: float
    y1: float
    x2: float
    y2: float
    preset: str | None = None
    source: EasingSource | None = "keyframes"
    type: str = field(default="cubic-bezier", init=False)

    @property
    def control_points(self) -> tuple[float, float, float, float]:
        return (self.x1, self.y1, self.x2, self.y2)

    @property
    def css(self) -> str:
        return "cubic-bezier({:.2f}, {:.2f}, {:.2f}, {:.2f})".format(*self.control_points)


Easing = Union[LinearEasing, SpringEasing, CubicBezierEasing]


# ── Values / timing ──


@dataclass
class PropertyValues:
    start: Value | None
    end: Value | None
    kind: ValueKind = "generic"
    # Post-scaling change before integer rounding. Only the extractor sets it;
    # the axis splitter uses it for the sub-pixel threshold.
    exact_change: Value | None = None
    formatted: dict[str, str] = field(default_factory=dict)

    @property
    def change(self) -> Value | None:
        if self.start is None or self.end is None:
            return None
        if isinstance(self.start, tuple) and isinstance(self.end, tuple):
            return tuple(_tidy(e - s) for s, e in zip(self.start, self.end))
        if isinstance(self.start, tuple) or isinstance(self.end, tuple):
            return None
        return _tidy(self.end - self.start)

    @property
    def is_pair(self) -> bool:
        return isinstance(self.start, tuple) and isinstance(self.end, tuple)


def _tidy(value: Scalar) -> Scalar:
    if isinstance(value, float):
        rounded = round(value, 4)
        return int(rounded) if rounded.is_integer() else rounded
    return value


@dataclass
class TimingInfo:
    delay: int = 0
    duration: int = 0


# ── Layer relations ──


@dataclass(frozen=True)
class ParentingInfo:
    parent_name: str
    inherited: tuple[str, ...] = ()
    via: str | None = None
    is_fit_to_shape_container: bool = False


@dataclass(frozen=True)
class FitToShapeInfo:
    container: str
    alignment: int = 1
    scale_to: int = 1


@dataclass(frozen=True)
class ExpressionLink:
    target_property: str
    source_layer: str
    source_property: str
    source_comp: str | None = None


@dataclass
class AnimationProperty:
    name: str
    values: PropertyValues | None
    easing: Easing = field(default_factory=LinearEasing)
    timing: TimingInfo = field(default_factory=TimingInfo)
    description: str = ""
    match_name: str = ""
    has_keyframes: bool = True
    fit_to_shape: FitToShapeInfo | None = None
    expression_link: ExpressionLink | None = None


@dataclass
class LayerSpec:
    name: str
    layer_type: str = "unknown"
    animations: list[AnimationProperty] = field(default_factory=list)
    parenting: ParentingInfo | None = None
    fit_to_shape: FitToShapeInfo | None = None
    expression_links: list[ExpressionLink] = field(default_factory=list)
    # Source-side identity; not serialized.
    index: int | None = None

    def get_animation(self, name: str) -> AnimationProperty | None:
        for anim in self.animations:
            if anim.name == name:
                return anim
        return None


@dataclass
class StaggerGroup:
    members: list[str]
    delay_offset: int
    name: str
    note: str = ""
    # Index in ``PipelineContext.layers`` of the first member.
    position: int = 0


@dataclass
class PipelineContext:
    """Shared state flowing through the entire pipeline."""

    # Raw extracted composition (None when the context was rebuilt from a spec document)
    source: CompositionSource | None = None
    composition: CompositionMetadata | None = None
    config: PipelineConfig | None = None
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("motionspec.pipeline")
    )

    # Selected source layers in selection order, filled by P1.01.
    selected_layers: list[LayerSource] = field(default_factory=list)
    layers: list[LayerSpec] = field(default_factory=list)
    stagger_groups: list[StaggerGroup] = field(default_factory=list)

    # Layers skipped because extraction failed, keyed by layer name.
    skipped_layers: dict[str, str] = field(default_factory=dict)

    # --- Pipeline metadata ---
    completed_stages: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def multiplier(self) -> int:
        return self.composition.multiplier if self.composition else 1

    @property
    def num_layers(self) -> int:
        return len(self.layers)

    @property
    def num_animations(self) -> int:
        return sum(len(layer.animations) for layer in self.layers)

    def get_layer(self, name: str) -> LayerSpec | None:
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def source_layer(self, index: int) -> LayerSource | None:
        if self.source is None:
            return None
        for layer in self.source.layers:
            if layer.index == index:
                return layer
        return None
