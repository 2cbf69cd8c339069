"""Motion spec engine — staged keyframe-to-spec pipeline."""

from motionspec.engine.registry import stage, Phase, get_registry
from motionspec.engine.context import PipelineContext, LayerSpec, AnimationProperty
from motionspec.engine.pipeline import Pipeline, create_pipeline

__all__ = [
    "stage",
    "Phase",
    "get_registry",
    "PipelineContext",
    "LayerSpec",
    "AnimationProperty",
    "Pipeline",
    "create_pipeline",
]
