"""Extracted composition payload — the raw keyframe dump sent by the host-tool script.

Times are in seconds, values in the host tool's native units (composition
pixels, percent, degrees). Field names follow the exporter's camelCase JSON.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

InterpolationKind = Literal["linear", "bezier", "hold"]


class _SourceModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TemporalEase(_SourceModel):
    influence: float = Field(..., description="Ease influence, percent 0-100")
    speed: float = Field(..., description="Ease speed at the keyframe")


class KeyframeSource(_SourceModel):
    time: float
    value: Any
    selected: bool = False
    in_interpolation: InterpolationKind = Field(default="linear", alias="inInterpolation")
    out_interpolation: InterpolationKind = Field(default="linear", alias="outInterpolation")
    in_ease: list[TemporalEase] = Field(default_factory=list, alias="inEase")
    out_ease: list[TemporalEase] = Field(default_factory=list, alias="outEase")


class PropertySource(_SourceModel):
    """One node of a layer's property tree — either a group or a leaf property."""

    name: str
    match_name: str = Field(default="", alias="matchName")
    can_vary_over_time: bool = Field(default=False, alias="canVaryOverTime")
    keyframes: list[KeyframeSource] = Field(default_factory=list)
    expression: str | None = None
    expression_enabled: bool = Field(default=True, alias="expressionEnabled")
    value: Any = None
    children: list[PropertySource] = Field(default_factory=list)


class MarkerSource(_SourceModel):
    time: float
    duration: float = 0.0
    comment: str = ""


class EffectSource(_SourceModel):
    name: str
    match_name: str = Field(default="", alias="matchName")
    # Static effect parameter values keyed by parameter name ("Alignment", "Scale To", …)
    parameters: dict[str, Any] = Field(default_factory=dict)


LayerKind = Literal["shape", "precomp", "text", "null", "footage", "unknown"]


class LayerSource(_SourceModel):
    index: int = Field(..., description="1-based layer index in the composition")
    name: str
    layer_type: LayerKind = Field(default="unknown", alias="layerType")
    selected: bool = True
    parent: int | None = Field(default=None, description="Index of the parent layer")
    is_guide: bool = Field(default=False, alias="isGuideLayer")
    properties: list[PropertySource] = Field(default_factory=list)
    markers: list[MarkerSource] = Field(default_factory=list)
    effects: list[EffectSource] = Field(default_factory=list)


class CompositionSource(_SourceModel):
    name: str = "Composition"
    width: int
    height: int
    frame_rate: float = Field(default=60.0, alias="frameRate", gt=0)
    duration: float = 0.0
    work_area_start: float = Field(default=0.0, alias="workAreaStart")
    work_area_duration: float = Field(default=0.0, alias="workAreaDuration")
    layers: list[LayerSource] = Field(default_factory=list)
    # Order in which the user selected layers (layer indices). Defaults to
    # composition order of the layers flagged as selected.
    selection_order: list[int] | None = Field(default=None, alias="selectionOrder")
