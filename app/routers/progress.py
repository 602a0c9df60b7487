"""
Progress Router

Exposes the shared progress scoring used by goals, competency gaps and
review scores.
"""
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from app.core.progress import (
    scale_to_percent,
    validate_score_inputs,
    validate_weights,
    weighted_aggregate,
)
from app.core.schemas import ApiResponse

router = APIRouter(prefix="/progress", tags=["progress"])


class ScaleRequest(BaseModel):
    start: float
    current: float
    target: float

class WeightedItem(BaseModel):
    progress: float
    weight: Optional[float] = None

class AggregateRequest(BaseModel):
    items: List[WeightedItem] = []

class ScoreResponse(BaseModel):
    progress: float


@router.post("/scale", response_model=ApiResponse[ScoreResponse])
def scale(request: ScaleRequest):
    """Percentage of the way from start to target, clamped to 0-100."""
    validate_score_inputs(start=request.start, current=request.current, target=request.target)
    return ApiResponse.ok(ScoreResponse(progress=scale_to_percent(request.start, request.current, request.target)))


@router.post("/aggregate", response_model=ApiResponse[ScoreResponse])
def aggregate(request: AggregateRequest):
    """Weighted mean of child progress values; 0 when empty or weightless."""
    validate_weights(request.items)
    return ApiResponse.ok(ScoreResponse(progress=weighted_aggregate(request.items)))
