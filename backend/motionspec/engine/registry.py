"""Stage registry — every stage is a standalone function registered via decorator.

Usage:
    @stage(id="P2.01", phase=Phase.STRUCTURE, dependencies=["P1.02"])
    def axis_split(ctx: PipelineContext) -> None:
        for layer in ctx.layers:
            layer.animations = split(layer.animations)

Adding a new stage = creating one file with the decorator. Nothing else changes.
"""

from __future__ import annotations

import enum
import heapq
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from motionspec.engine.context import PipelineContext

logger = logging.getLogger(__name__)


class Phase(enum.IntEnum):
    SCALING = 0
    EXTRACTION = 1
    STRUCTURE = 2
    DESCRIPTION = 3
    GROUPING = 4


@dataclass
class StageSpec:
    id: str
    phase: Phase
    fn: Callable[["PipelineContext"], None]
    dependencies: list[str] = field(default_factory=list)
    description: str = ""


class StageRegistry:
    """Registry of pipeline stages."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.phase.name)

    def get(self, stage_id: str) -> StageSpec:
        return self._stages[stage_id]

    def get_phase(self, phase: Phase) -> list[StageSpec]:
        specs = [s for s in self._stages.values() if s.phase == phase]
        return sorted(specs, key=lambda s: s.id)

    def all(self) -> list[StageSpec]:
        return sorted(self._stages.values(), key=lambda s: (s.phase, s.id))

    def ids_in_phases(self, phases: list[Phase]) -> set[str]:
        wanted = set(phases)
        return {sid for sid, s in self._stages.items() if s.phase in wanted}

    def resolve_order(
        self,
        requested_ids: set[str] | None = None,
        include_dependencies: bool = True,
    ) -> list[StageSpec]:
        """Stages in dependency order; ties break by (phase, id).

        ``requested_ids=None`` means every stage. With ``include_dependencies``
        off, dependencies outside the request are assumed to have run already.
        """
        pool = self._stages
        if requested_ids is not None:
            wanted = set(requested_ids)
            if include_dependencies:
                stack = list(wanted)
                while stack:
                    spec = pool.get(stack.pop())
                    if spec is None:
                        continue
                    for dep in spec.dependencies:
                        if dep not in wanted:
                            wanted.add(dep)
                            stack.append(dep)
            pool = {sid: s for sid, s in pool.items() if sid in wanted}

        # Kahn's algorithm over a (phase, id) heap
        in_degree: dict[str, int] = {sid: 0 for sid in pool}
        dependents: dict[str, list[str]] = {sid: [] for sid in pool}
        for sid, spec in pool.items():
            for dep in spec.dependencies:
                if dep in pool:
                    in_degree[sid] += 1
                    dependents[dep].append(sid)

        heap = [(pool[sid].phase, sid) for sid, d in in_degree.items() if d == 0]
        heapq.heapify(heap)
        ordered: list[StageSpec] = []

        while heap:
            _, sid = heapq.heappop(heap)
            ordered.append(pool[sid])
            for other_id in dependents[sid]:
                in_degree[other_id] -= 1
                if in_degree[other_id] == 0:
                    heapq.heappush(heap, (pool[other_id].phase, other_id))

        if len(ordered) != len(pool):
            missing = set(pool) - {s.id for s in ordered}
            raise ValueError(f"Circular dependency detected among: {sorted(missing)}")

        return ordered

    @property
    def count(self) -> int:
        return len(self._stages)


# Module-level singleton
_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    phase: Phase,
    dependencies: list[str] | None = None,
    description: str = "",
):
    """Decorator to register a stage function."""

    def decorator(fn: Callable[["PipelineContext"], None]):
        spec = StageSpec(
            id=id,
            phase=phase,
            fn=fn,
            dependencies=dependencies or [],
            description=description,
        )
        _registry.register(spec)
        return fn

    return decorator
