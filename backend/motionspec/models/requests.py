"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from motionspec.models.motion_spec import MotionSpecDocument
from motionspec.models.source import CompositionSource


class BuildSpecRequest(BaseModel):
    composition: CompositionSource = Field(..., description="Extracted composition payload")
    scale_override: int | None = Field(
        default=None, ge=0, le=4, description="0 = auto-detect, 1-4 = forced multiplier"
    )
    detect_baked_springs: bool | None = Field(
        default=None, description="Classify dense keyframes as springs"
    )


class PreviewRequest(BaseModel):
    composition: CompositionSource = Field(..., description="Extracted composition payload")


class RefreshSpecRequest(BaseModel):
    spec: MotionSpecDocument = Field(..., description="Edited motion spec document")
