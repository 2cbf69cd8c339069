"""P1.01 — Layer structure: selection order, parenting, fit-to-shape, expression links.

Builds the ordered ``LayerSpec`` skeletons that P1.02 fills with animations.
Output order is the selection order, with selected children of an animating
parent emitted right after it as ``parented`` layers.
"""

from __future__ import annotations

import re

from motionspec.engine.context import (
    ExpressionLink,
    FitToShapeInfo,
    LayerSpec,
    ParentingInfo,
    PipelineContext,
)
from motionspec.engine.extractor import (
    find_animated_properties,
    find_property,
    find_selected_properties,
    is_animated,
)
from motionspec.engine.registry import Phase, stage
from motionspec.models.source import LayerSource, PropertySource
from motionspec.utils.naming import sanitize_layer_name

# ── Inheritable transforms (opacity is not inherited through parenting) ──
_INHERITABLE: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("position", ("ADBE Position", "Position")),
    ("rotation", ("ADBE Rotate Z", "Rotation", "Z Rotation")),
    ("scale", ("ADBE Scale", "Scale")),
)
_TRANSFORM_GROUP = ("ADBE Transform Group", "Transform")

# ── Fit to shape ──
_FIT_TO_SHAPE_EFFECTS = frozenset({"Fit to shape", "Fit to shape - v3"})
_DEFAULT_ALIGNMENT = 1
_DEFAULT_SCALE_TO = 1

_MASK_TOKEN = "mask"

# ── Expression links on transform properties ──
_LINKABLE: tuple[tuple[str, str], ...] = (
    ("Position", "ADBE Position"),
    ("X Position", "ADBE Position_0"),
    ("Y Position", "ADBE Position_1"),
    ("Scale", "ADBE Scale"),
    ("Rotation", "ADBE Rotate Z"),
    ("Opacity", "ADBE Opacity"),
)
_THIS_COMP_NAME_RE = re.compile(
    r"thisComp\.layer\([\"']([^\"']+)[\"']\)\.(?:transform\.)?(\w+)", re.IGNORECASE
)
_THIS_COMP_INDEX_RE = re.compile(r"thisComp\.layer\((\d+)\)\.(?:transform\.)?(\w+)", re.IGNORECASE)
_OTHER_COMP_RE = re.compile(
    r"comp\([\"']([^\"']+)[\"']\)\.layer\([\"']([^\"']+)[\"']\)\.(?:transform\.)?(\w+)",
    re.IGNORECASE,
)


# ── Selection ──


def selected_in_order(ctx: PipelineContext) -> list[LayerSource]:
    """Selected layers in the order the user picked them."""
    src = ctx.source
    by_index = {layer.index: layer for layer in src.layers}
    if src.selection_order is not None:
        ordered = []
        for index in src.selection_order:
            layer = by_index.get(index)
            if layer is None:
                ctx.logger.warning("Selection references missing layer index %d", index)
                continue
            ordered.append(layer)
    else:
        ordered = [layer for layer in src.layers if layer.selected]

    limit = ctx.config.max_layers
    if len(ordered) > limit:
        ctx.logger.warning("Selection capped at %d of %d layers", limit, len(ordered))
        ordered = ordered[:limit]
    return ordered


# ── Parenting ──


def transform_properties(layer: LayerSource) -> list[PropertySource]:
    for node in layer.properties:
        if node.match_name in _TRANSFORM_GROUP or node.name in _TRANSFORM_GROUP:
            return node.children
    return layer.properties


def inherited_kinds(layer: LayerSource) -> tuple[str, ...]:
    """Transform kinds that carry keyframes on ``layer`` (position, rotation, scale)."""
    roots = transform_properties(layer)
    kinds = []
    for kind, names in _INHERITABLE:
        prop = find_property(roots, names)
        if prop is not None and is_animated(prop):
            kinds.append(kind)
    return tuple(kinds)


def find_animating_ancestor(
    layer: LayerSource, by_index: dict[int, LayerSource]
) -> ParentingInfo | None:
    """Walk up the parent chain to the nearest ancestor with animated transforms."""
    if layer.parent is None:
        return None
    direct = by_index.get(layer.parent)
    current = direct
    seen: set[int] = {layer.index}
    while current is not None and current.index not in seen:
        seen.add(current.index)
        kinds = inherited_kinds(current)
        if kinds:
            via = None
            if current is not direct:
                via = sanitize_layer_name(direct.name)
            return ParentingInfo(
                parent_name=sanitize_layer_name(current.name), inherited=kinds, via=via
            )
        current = by_index.get(current.parent) if current.parent is not None else None
    return None


def is_mask_layer(layer: LayerSource) -> bool:
    return layer.parent is not None and _MASK_TOKEN in layer.name.lower()


# ── Fit to shape ──


def detect_fit_to_shape(
    layer: LayerSource, by_index: dict[int, LayerSource]
) -> FitToShapeInfo | None:
    if layer.parent is None:
        return None
    container = by_index.get(layer.parent)
    if container is None:
        return None
    for effect in layer.effects:
        if effect.name in _FIT_TO_SHAPE_EFFECTS:
            return FitToShapeInfo(
                container=sanitize_layer_name(container.name),
                alignment=_int_param(effect.parameters.get("Alignment"), _DEFAULT_ALIGNMENT),
                scale_to=_int_param(effect.parameters.get("Scale To"), _DEFAULT_SCALE_TO),
            )
    return None


def _int_param(value, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def container_parenting(
    fit: FitToShapeInfo, layers: list[LayerSource]
) -> ParentingInfo | None:
    """Parenting fallback for fit-to-shape layers: whatever the container animates."""
    for candidate in layers:
        if fit.container not in (candidate.name, sanitize_layer_name(candidate.name)):
            continue
        kinds = [p.name.lower() for p in find_selected_properties(candidate.properties)]
        if "scale" not in kinds and "scale" in inherited_kinds(candidate):
            kinds.append("scale")
        if not kinds:
            return None
        return ParentingInfo(
            parent_name=fit.container, inherited=tuple(kinds), is_fit_to_shape_container=True
        )
    return None


# ── Expression links ──


def parse_expression(expression: str | None) -> tuple[str | None, str, str] | None:
    """``(source_comp, source_layer, source_property)`` for a layer-reference expression."""
    if not expression:
        return None
    match = _THIS_COMP_NAME_RE.search(expression)
    if match:
        return None, match.group(1), match.group(2)
    match = _THIS_COMP_INDEX_RE.search(expression)
    if match:
        return None, match.group(1), match.group(2)
    match = _OTHER_COMP_RE.search(expression)
    if match:
        return match.group(1), match.group(2), match.group(3)
    return None


def _resolve_layer(identifier: str, layers: list[LayerSource]) -> LayerSource | None:
    if identifier.isdigit():
        for layer in layers:
            if layer.index == int(identifier):
                return layer
    for layer in layers:
        if layer.name == identifier:
            return layer
    return None


def find_expression_links(layer: LayerSource, layers: list[LayerSource]) -> list[ExpressionLink]:
    links: list[ExpressionLink] = []
    roots = transform_properties(layer)
    for name, match_name in _LINKABLE:
        prop = find_property(roots, (match_name, name))
        if prop is None or not prop.node.expression_enabled:
            continue
        parsed = parse_expression(prop.node.expression)
        if parsed is None:
            continue
        source_comp, identifier, source_prop = parsed
        source = _resolve_layer(identifier, layers)
        if source is None:
            continue
        wanted = source_prop.lower()
        for candidate in find_selected_properties(source.properties):
            if wanted in candidate.match_name.lower() or candidate.name.lower() in wanted:
                links.append(
                    ExpressionLink(
                        target_property=name,
                        source_layer=sanitize_layer_name(source.name),
                        source_property=candidate.name,
                        source_comp=source_comp,
                    )
                )
                break
    return links


# ── Stage ──


def _layer_spec(
    layer: LayerSource,
    layer_type: str,
    parenting: ParentingInfo | None,
    fit: FitToShapeInfo | None,
    layers: list[LayerSource],
) -> LayerSpec:
    return LayerSpec(
        name=sanitize_layer_name(layer.name),
        layer_type=layer_type,
        parenting=parenting,
        fit_to_shape=fit,
        expression_links=find_expression_links(layer, layers),
        index=layer.index,
    )


@stage(
    id="P1.01",
    phase=Phase.EXTRACTION,
    dependencies=["P0.01"],
    description="Order selected layers and resolve parenting, fit-to-shape and expression links",
)
def layer_structure(ctx: PipelineContext) -> None:
    if ctx.source is None:
        return
    all_layers = ctx.source.layers
    by_index = {layer.index: layer for layer in all_layers}
    selected = selected_in_order(ctx)
    ctx.selected_layers = selected

    handled: set[int] = set()
    specs: list[LayerSpec] = []

    for layer in selected:
        if layer.index in handled:
            continue
        if layer.parent is not None and layer.parent not in by_index:
            ctx.logger.warning(
                "Layer %s references missing parent %d; rendering standalone",
                layer.name,
                layer.parent,
            )

        fit = detect_fit_to_shape(layer, by_index)
        if not find_animated_properties(layer.properties) and fit is None:
            continue

        parenting = find_animating_ancestor(layer, by_index)
        if parenting is None and fit is not None:
            parenting = container_parenting(fit, all_layers)

        handled.add(layer.index)
        if is_mask_layer(layer):
            ctx.logger.debug("Hiding mask layer %s", layer.name)
        else:
            specs.append(_layer_spec(layer, layer.layer_type, parenting, fit, all_layers))

        inherited = inherited_kinds(layer)
        if not inherited:
            continue
        for child in selected:
            if child.parent != layer.index or child.index in handled:
                continue
            if _MASK_TOKEN in child.name.lower() or detect_fit_to_shape(child, by_index):
                continue
            handled.add(child.index)
            child_parenting = ParentingInfo(
                parent_name=sanitize_layer_name(layer.name), inherited=inherited
            )
            specs.append(_layer_spec(child, "parented", child_parenting, None, all_layers))
            ctx.logger.debug("Added parented child %s of %s", child.name, layer.name)

    # Selected children whose own keyframes are unselected still show what they inherit.
    for layer in selected:
        if layer.index in handled or layer.parent is None or is_mask_layer(layer):
            continue
        parent = by_index.get(layer.parent)
        if parent is None:
            continue
        inherited = inherited_kinds(parent)
        if not inherited:
            continue
        handled.add(layer.index)
        parenting = ParentingInfo(parent_name=sanitize_layer_name(parent.name), inherited=inherited)
        specs.append(_layer_spec(layer, "parented", parenting, None, all_layers))

    ctx.layers = specs
    ctx.logger.info("Layer structure: %d of %d selected layers emitted", len(specs), len(selected))
