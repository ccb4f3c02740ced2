"""FastAPI route definitions."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from plankernel.core.errors import KernelError
from plankernel.models import PerimeterGeometry, SnapResult
from plankernel.services.kernel_service import KernelService
from plankernel.api.schemas import (
    PartsRequest, PartsResponse, PerimeterRequest, PlanRequest, PlanResponse,
    RuleInfo, SegmentRequest, SegmentResponse, SnapRequest,
)

router = APIRouter()

# Shared service instance
_service = KernelService()


@router.post("/perimeter/resolve", response_model=PerimeterGeometry)
async def resolve_perimeter(request: PerimeterRequest) -> PerimeterGeometry:
    """Resolve wall faces and corners of a perimeter."""
    try:
        return _service.resolve_perimeter(
            request.boundary_points, request.walls, request.reference_side,
        )
    except KernelError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/walls/segment", response_model=SegmentResponse)
async def segment_wall(request: SegmentRequest) -> SegmentResponse:
    """Split a wall into wall and opening segments."""
    try:
        segments = _service.segment_wall(
            request.wall_length, request.openings, request.construction_type,
        )
    except KernelError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return SegmentResponse(segments=segments)


@router.post("/snap", response_model=SnapResult)
async def snap(request: SnapRequest) -> SnapResult:
    return _service.snap(request.cursor, request.context, request.config)


@router.post("/construction/plan", response_model=PlanResponse)
async def plan_construction(request: PlanRequest) -> PlanResponse:
    """Resolve the perimeter and plan the construction of every wall."""
    try:
        geometry, construction = _service.plan_construction(
            request.boundary_points, request.walls,
            request.params, request.config, request.reference_side,
        )
    except KernelError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return PlanResponse(
        geometry=geometry,
        construction=construction,
        rule_count=len(_service.list_rules()),
        wall_count=len(geometry.walls),
    )


@router.post("/parts", response_model=PartsResponse)
async def parts_list(request: PartsRequest) -> PartsResponse:
    """Bill of materials for a construction model."""
    materials, virtual_parts = _service.parts_list(request.model, request.exclude_types)
    return PartsResponse(materials=materials, virtual_parts=virtual_parts)


@router.get("/rules", response_model=list[RuleInfo])
async def list_rules() -> list[RuleInfo]:
    """List all available construction rules."""
    return [RuleInfo(**r) for r in _service.list_rules()]


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
