"""P0.01 — Resolution Scaling Detector.

Classify the composition's pixel size against known device resolutions and
pick the multiplier that maps it back to logical (1x) pixels.
"""

from __future__ import annotations

from motionspec.engine.context import CompositionMetadata, PipelineContext
from motionspec.engine.registry import Phase, stage

# ── Device buckets, iOS + Android merged per multiplier ──
# Widths and heights are matched independently; a 1170-wide, 2556-tall
# composition is still a 3x capture.
DEVICE_BUCKETS: dict[int, tuple[tuple[int, ...], tuple[int, ...]]] = {
    1: (
        (375, 390, 414, 428, 393, 360, 411, 412),
        (667, 844, 896, 926, 852, 640, 731, 786, 915),
    ),
    2: (
        (750, 780, 828, 856, 786, 720, 822, 824),
        (1334, 1688, 1792, 1852, 1704, 1280, 1462, 1572, 1830),
    ),
    3: (
        (1125, 1170, 1242, 1284, 1179, 1080, 1233, 1236),
        (2001, 2532, 2688, 2778, 2556, 1920, 2193, 2358, 2745),
    ),
}

_DEFAULT_MULTIPLIER = 1
_TOLERANCE = 5


def _near_any(value: float, candidates: tuple[int, ...], tolerance: float) -> bool:
    return any(abs(value - c) <= tolerance for c in candidates)


def detect_multiplier(
    width: float, height: float, override: int = 0, tolerance: float = _TOLERANCE
) -> int:
    """Resolution multiplier in {1, 2, 3, 4}; ``override`` > 0 always wins."""
    if override > 0:
        return override
    for multiplier in sorted(DEVICE_BUCKETS):
        widths, heights = DEVICE_BUCKETS[multiplier]
        if _near_any(width, widths, tolerance) and _near_any(height, heights, tolerance):
            return multiplier
    return _DEFAULT_MULTIPLIER


@stage(
    id="P0.01",
    phase=Phase.SCALING,
    description="Detect the resolution multiplier from composition size",
)
def resolution_scaling(ctx: PipelineContext) -> None:
    if ctx.source is None:
        return
    src = ctx.source
    override = ctx.config.scale_override
    multiplier = detect_multiplier(
        src.width, src.height, override, ctx.config.resolution_tolerance
    )

    ctx.composition = CompositionMetadata(
        name=src.name,
        width=src.width,
        height=src.height,
        frame_rate=src.frame_rate,
        multiplier=multiplier,
        detection_mode="manual" if override > 0 else "auto",
        work_area_start=src.work_area_start,
        work_area_duration=src.work_area_duration,
    )
    ctx.logger.info(
        "Composition %dx%d -> %s (%s)",
        src.width,
        src.height,
        ctx.composition.scale_factor,
        ctx.composition.detection_mode,
    )
