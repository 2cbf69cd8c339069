"""Composition loader — validated payload -> PipelineContext."""

from __future__ import annotations

import logging
from typing import Any

from motionspec.engine.config import PipelineConfig
from motionspec.engine.context import PipelineContext
from motionspec.models.source import CompositionSource

logger = logging.getLogger(__name__)


def load_composition(
    payload: CompositionSource | dict[str, Any],
    config: PipelineConfig | None = None,
) -> PipelineContext:
    """Wrap an extracted composition in a fresh pipeline context."""
    if isinstance(payload, CompositionSource):
        source = payload
    else:
        source = CompositionSource.model_validate(payload)

    logger.debug(
        "Loaded composition %r: %dx%d @ %sfps, %d layers",
        source.name,
        source.width,
        source.height,
        source.frame_rate,
        len(source.layers),
    )
    return PipelineContext(source=source, config=config)
