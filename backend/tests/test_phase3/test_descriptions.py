"""Tests for P3.01 — plain-language description templates."""

import pytest

from motionspec.engine.context import (
    AnimationProperty,
    FitToShapeInfo,
    LayerSpec,
    PipelineContext,
    PropertyValues,
)
from motionspec.engine.phase3 import p3_01_descriptions
from motionspec.engine.phase3.p3_01_descriptions import TEMPLATES, describe, descriptions
from motionspec.spec.builder import build_motion_spec
from tests.conftest import FADE_IN_COMP


def _anim(name: str, start, end, kind: str) -> AnimationProperty:
    return AnimationProperty(name=name, values=PropertyValues(start=start, end=end, kind=kind))


# ── Opacity ──


@pytest.mark.parametrize(
    "start,end,text",
    [
        (0, 100, "Alpha animates from 0% – 100%"),
        (0, 60, "Fades in to 60%"),
        (100, 0, "Fades out from 100%"),
        (30, 80, "Alpha animates from 30% – 80%"),
    ],
)
def test_opacity(start, end, text):
    assert describe(_anim("Opacity", start, end, "opacity")) == text


def test_fade_in_end_to_end():
    doc, _ = build_motion_spec(FADE_IN_COMP)
    anim = doc.layers[0].animations[0]
    assert anim.description == "Alpha animates from 0% – 100%"
    assert anim.timing.delay == 100
    assert anim.timing.duration == 300


# ── Rotation ──


def test_rotation_counterclockwise():
    assert describe(_anim("Rotation", 0, -90, "rotation")) == "Rotates 90° counterclockwise"


def test_rotation_clockwise_with_axis():
    assert describe(_anim("Rotation", 0, 45, "rotation")) == "Rotates 45° clockwise"
    assert describe(_anim("X Rotation", 10, 55, "rotation")) == "Rotates X 45° clockwise"


# ── Scale ──


def test_uniform_scale():
    assert describe(_anim("Scale", (80, 80), (100, 100), "scale")) == "Scales from 80% – 100%"


def test_non_uniform_scale():
    text = describe(_anim("Scale", (80, 90), (100, 100), "scale"))
    assert text == "Scales from (80%, 90%) – (100%, 100%)"


# ── Position ──


@pytest.mark.parametrize(
    "name,start,end,text",
    [
        ("Position X", 0, 100, "Moves 100px from the left"),
        ("Position X", 100, 60, "Moves 40px from the right"),
        ("Position Y", 500, 400, "Moves up 100px"),
        ("Position Y", 400, 420, "Moves down 20px"),
        ("Position Y", 12, 12, "Stays at 12px"),
    ],
)
def test_single_axis_position(name, start, end, text):
    assert describe(_anim(name, start, end, "position")) == text


def test_pair_position():
    anim = _anim("Position X & Y", (0, 0), (-30, 24), "position")
    assert describe(anim) == "Moves 30px from the right and moves down 24px"


@pytest.mark.parametrize(
    "start,end,text",
    [
        (0, -200, "Moves 200px toward the viewer"),
        (-200, 0, "Moves 200px away from the viewer"),
        (-50, -50, "Stays at -50px"),
    ],
)
def test_z_position(start, end, text):
    assert describe(_anim("Position Z", start, end, "position")) == text


# ── Corner radius / dimensional / generic ──


@pytest.mark.parametrize(
    "start,end,text",
    [
        (0, 16, "sharp (0px) – rounded (16px)"),
        (16, 0, "rounded (16px) – sharp (0px)"),
        (8, 16, "8px – 16px"),
    ],
)
def test_corner_radius(start, end, text):
    assert describe(_anim("Corner Radius", start, end, "corner-radius")) == text


def test_dimensional():
    assert describe(_anim("Width", 100, 200, "dimensional")) == "Width animates from 100px – 200px"


def test_dimensional_pair_units_per_component():
    text = describe(_anim("Size", (100, 50), (200, 100), "dimensional"))
    assert text == "Size animates from (100px, 50px) – (200px, 100px)"


def test_generic():
    assert describe(_anim("Trim End", 0, 62.5, "generic")) == "Trim End animates from 0 – 62.5"


def test_no_values_no_description():
    assert describe(AnimationProperty(name="Opacity", values=None)) == ""


@pytest.mark.parametrize(
    "name,kind",
    [
        ("Position X", "position"),
        ("Position Y", "position"),
        ("Rotation", "rotation"),
        ("Corner Radius", "corner-radius"),
        ("Opacity", "opacity"),
        ("Scale", "scale"),
        ("Width", "dimensional"),
        ("Trim End", "generic"),
    ],
)
def test_missing_endpoint_no_description(name, kind):
    assert describe(_anim(name, None, None, kind)) == ""
    assert describe(_anim(name, 10, None, kind)) == ""


def test_mismatched_shapes_no_description():
    assert describe(_anim("Position", (0, 0), 10, "position")) == ""


def test_failing_animation_does_not_stop_the_rest(monkeypatch):
    def explode(anim, fit):
        raise ValueError("cannot describe")

    broken = (lambda anim, fit: anim.name == "Broken", explode)
    monkeypatch.setattr(p3_01_descriptions, "TEMPLATES", [broken] + TEMPLATES)

    ctx = PipelineContext(
        layers=[
            LayerSpec(
                name="Card",
                animations=[
                    _anim("Broken", 0, 1, "generic"),
                    _anim("Opacity", 0, 50, "opacity"),
                ],
            )
        ]
    )
    ctx.layers[0].animations[0].description = "stale"
    descriptions(ctx)

    assert [a.description for a in ctx.layers[0].animations] == ["", "Fades in to 50%"]
    assert ctx.errors == {"P3.01:Card/Broken": "cannot describe"}


# ── Fit to shape ──


def test_fit_to_shape_wins_over_values():
    anim = _anim("Position", (0, 0), (10, 10), "position")
    anim.fit_to_shape = FitToShapeInfo(container="Card", alignment=2, scale_to=2)
    assert describe(anim) == 'Scales to fit height of "Card" — aligned top left'


def test_fit_to_shape_unknown_codes():
    anim = AnimationProperty(name="Fit to Shape", values=None, has_keyframes=False)
    fit = FitToShapeInfo(container="Frame", alignment=99, scale_to=9)
    assert describe(anim, fit) == 'Positioned within "Frame" — aligned center'


# ── Template table ──


def test_custom_template_order():
    shout = (lambda anim, fit: anim.values is not None, lambda anim, fit: anim.name.upper())
    anim = _anim("Opacity", 0, 100, "opacity")
    assert describe(anim, templates=[shout] + TEMPLATES) == "OPACITY"
    assert describe(anim, templates=TEMPLATES + [shout]) == "Alpha animates from 0% – 100%"


def test_description_depends_only_on_the_animation():
    anim = _anim("Position Y", 500, 400, "position")
    assert describe(anim) == describe(anim) == "Moves up 100px"
    assert anim.description == ""
