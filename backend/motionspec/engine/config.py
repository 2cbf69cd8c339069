"""Pipeline configuration — thresholds and feature flags for every stage."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PipelineConfig:
    """Controls scaling, classification tolerances and grouping."""

    # Resolution scaling: 0 = auto-detect, 1-4 = forced multiplier
    scale_override: int = 0
    # Device bucket match window (composition px)
    resolution_tolerance: int = 5

    # Baked-spring heuristic. Off: dense hand-made keyframes read as springs.
    detect_baked_springs: bool = False
    baked_min_keys: int = 20
    baked_min_density: float = 20.0  # keyframes per second
    baked_fast_density: float = 30.0
    baked_standard_density: float = 25.0

    # Cubic-bezier preset match, per control coordinate (strict <)
    bezier_preset_tolerance: float = 0.15

    # Axis split: axes moving ≤ this many px (after scaling) are dropped
    axis_change_threshold: float = 0.5
    # Spring equality for regroup/stagger, per parameter (strict <)
    spring_param_tolerance: float = 0.01

    # Stagger detection
    stagger_min_members: int = 3
    stagger_min_animations: int = 2
    stagger_duration_tolerance_ms: int = 10
    stagger_value_tolerance_px: float = 5.0
    stagger_value_tolerance_pct: float = 0.05
    stagger_delay_tolerance_ms: int = 5

    # Safety bound on work per run
    max_layers: int = 500

    def __post_init__(self) -> None:
        if not 0 <= self.scale_override <= 4:
            raise ValueError(f"scale_override must be 0-4, got {self.scale_override}")
