"""Tests for P0.01 — resolution multiplier detection."""

import pytest

from motionspec.engine.config import PipelineConfig
from motionspec.engine.phase0.p0_01_resolution_scaling import detect_multiplier, resolution_scaling
from motionspec.source.loader import load_composition
from tests.conftest import RETINA_COMP, composition


@pytest.mark.parametrize(
    "width,height,expected",
    [
        (375, 667, 1),
        (390, 844, 1),
        (360, 640, 1),
        (750, 1334, 2),
        (828, 1792, 2),
        (1170, 2532, 3),
        (1080, 1920, 3),
    ],
)
def test_known_device_sizes(width, height, expected):
    assert detect_multiplier(width, height) == expected


def test_tolerance_is_five_units():
    assert detect_multiplier(1175, 2537) == 3
    assert detect_multiplier(1160, 2532) == 1


def test_width_and_height_match_independently():
    # 1170 is an iPhone 12 width, 2556 an iPhone 14 Pro height.
    assert detect_multiplier(1170, 2556) == 3


def test_unknown_size_defaults_to_one():
    assert detect_multiplier(1920, 1080) == 1
    assert detect_multiplier(0, 0) == 1


def test_override_wins():
    assert detect_multiplier(1170, 2532, override=2) == 2
    assert detect_multiplier(1920, 1080, override=4) == 4


def test_multiplier_always_in_range():
    for width in range(300, 1400, 37):
        for height in range(600, 2800, 91):
            assert detect_multiplier(width, height) in {1, 2, 3, 4}


def test_override_out_of_range_rejected():
    with pytest.raises(ValueError):
        PipelineConfig(scale_override=5)


def test_stage_builds_composition_metadata(config):
    ctx = load_composition(RETINA_COMP, config)
    resolution_scaling(ctx)
    assert ctx.composition.multiplier == 3
    assert ctx.composition.scale_factor == "3x"
    assert ctx.composition.detection_mode == "auto"


def test_stage_manual_mode():
    ctx = load_composition(composition(), PipelineConfig(scale_override=2))
    resolution_scaling(ctx)
    assert ctx.composition.multiplier == 2
    assert ctx.composition.detection_mode == "manual"
