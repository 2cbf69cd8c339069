"""POST /api/spec — build, preview and refresh motion specs."""

from __future__ import annotations

import time

from fastapi import APIRouter, HTTPException

from motionspec.config import settings
from motionspec.engine.errors import NothingToProcessError
from motionspec.models.motion_spec import MotionSpecDocument, SelectionSummary
from motionspec.models.requests import BuildSpecRequest, PreviewRequest, RefreshSpecRequest
from motionspec.models.responses import SpecResponse
from motionspec.spec.builder import build_motion_spec, refresh_motion_spec, summarize_selection

router = APIRouter()


@router.post("/spec", response_model=SpecResponse, response_model_exclude_none=True)
async def build_spec(req: BuildSpecRequest) -> SpecResponse:
    start = time.perf_counter()
    config = settings.pipeline_config(req.scale_override, req.detect_baked_springs)

    try:
        doc, ctx = build_motion_spec(
            req.composition,
            config,
            version=settings.spec_version,
            exported_by=settings.exported_by,
        )
    except NothingToProcessError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    elapsed = (time.perf_counter() - start) * 1000

    return SpecResponse(
        spec=doc,
        processing_time_ms=round(elapsed, 1),
        stages_completed=len(ctx.completed_stages),
        stages_failed=len(ctx.errors),
        errors=ctx.errors,
        skipped_layers=ctx.skipped_layers,
    )


@router.post("/spec/preview", response_model=SelectionSummary)
async def preview_spec(req: PreviewRequest) -> SelectionSummary:
    return summarize_selection(req.composition)


@router.post("/spec/refresh", response_model=MotionSpecDocument, response_model_exclude_none=True)
async def refresh_spec(req: RefreshSpecRequest) -> MotionSpecDocument:
    return refresh_motion_spec(req.spec, settings.pipeline_config())
