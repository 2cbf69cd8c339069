"""Pipeline orchestrator — runs stages in dependency order with adaptive gating."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import time

from motionspec.engine.config import PipelineConfig
from motionspec.engine.context import PipelineContext
from motionspec.engine.registry import Phase, StageRegistry, get_registry

logger = logging.getLogger(__name__)

_PHASE_PACKAGES = ["phase0", "phase1", "phase2", "phase3", "phase4"]


class Pipeline:
    """Orchestrates the stage pipeline."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config or PipelineConfig()

    def run(self, ctx: PipelineContext) -> PipelineContext:
        """Run the full pipeline on the given context."""
        start = time.perf_counter()
        if ctx.config is None:
            ctx.config = self.config

        skip_ids = self._adaptive_gate(ctx)

        all_specs = self.registry.all()
        requested = {s.id for s in all_specs} - skip_ids
        ordered = self.registry.resolve_order(requested)

        ctx.logger.info(
            "Pipeline: %d stages queued (%d skipped)",
            len(ordered),
            len(skip_ids),
        )

        for spec in ordered:
            self._run_stage(ctx, spec)

        total = (time.perf_counter() - start) * 1000
        ctx.logger.info(
            "Pipeline complete: %d/%d stages, %d layers, %d animations in %.0fms",
            len(ctx.completed_stages),
            len(ordered),
            ctx.num_layers,
            ctx.num_animations,
            total,
        )
        return ctx

    def run_phases(self, ctx: PipelineContext, phases: list[Phase]) -> PipelineContext:
        """Run only the stages of the given phases; earlier phases are assumed done."""
        if ctx.config is None:
            ctx.config = self.config
        requested = self.registry.ids_in_phases(phases)
        for spec in self.registry.resolve_order(requested, include_dependencies=False):
            self._run_stage(ctx, spec)
        return ctx

    def _run_stage(self, ctx: PipelineContext, spec) -> None:
        t0 = time.perf_counter()
        try:
            spec.fn(ctx)
            ctx.completed_stages.add(spec.id)
            elapsed = (time.perf_counter() - t0) * 1000
            ctx.logger.debug("  %s completed in %.1fms", spec.id, elapsed)
        except Exception as e:
            ctx.errors[spec.id] = str(e)
            ctx.logger.warning("  %s FAILED: %s", spec.id, e)

    def _adaptive_gate(self, ctx: PipelineContext) -> set[str]:
        """Determine which stages to skip based on the selection.

        - Fewer selected layers than a stagger group needs: skip grouping
        """
        skip: set[str] = set()
        config = ctx.config or self.config

        if ctx.source is not None:
            selected = sum(1 for layer in ctx.source.layers if layer.selected)
            if selected < config.stagger_min_members:
                skip.add("P4.01")

        return skip


def register_stages() -> None:
    """Import all phase modules so @stage decorators fire."""
    for phase_name in _PHASE_PACKAGES:
        package_name = f"motionspec.engine.{phase_name}"
        try:
            package = importlib.import_module(package_name)
            for _, module_name, _ in pkgutil.iter_modules(package.__path__):
                importlib.import_module(f"{package_name}.{module_name}")
        except ModuleNotFoundError:
            logger.warning("Stage package %s not found", package_name)


def create_pipeline(config: PipelineConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline instance."""
    register_stages()
    return Pipeline(config=config)
