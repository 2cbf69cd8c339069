"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from motionspec.engine.config import PipelineConfig


class Settings(BaseSettings):
    motionspec_env: str = "development"
    motionspec_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Engine defaults (requests may override scale and baked springs)
    scale_override: int = Field(default=0, ge=0, le=4)
    detect_baked_springs: bool = False
    max_layers: int = Field(default=500, gt=0)

    # Document metadata
    spec_version: str = "2.0.0"
    exported_by: str = "Motion Spec Exporter"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def pipeline_config(
        self,
        scale_override: int | None = None,
        detect_baked_springs: bool | None = None,
    ) -> PipelineConfig:
        return PipelineConfig(
            scale_override=self.scale_override if scale_override is None else scale_override,
            detect_baked_springs=(
                self.detect_baked_springs if detect_baked_springs is None else detect_baked_springs
            ),
            max_layers=self.max_layers,
        )


settings = Settings()
