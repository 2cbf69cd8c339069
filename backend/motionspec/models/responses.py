"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from motionspec.models.motion_spec import MotionSpecDocument


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "2.0.0"
    stages_registered: int = 0


class SpecResponse(BaseModel):
    spec: MotionSpecDocument
    processing_time_ms: float = 0.0
    stages_completed: int = 0
    stages_failed: int = 0
    errors: dict[str, str] = Field(default_factory=dict)
    skipped_layers: dict[str, str] = Field(default_factory=dict)
