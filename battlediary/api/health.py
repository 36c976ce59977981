"""
Health check endpoints.

Provides a liveness probe and a readiness probe that verifies the
capture engine can render.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from battlediary.api.export import get_engine
from battlediary.capture.engine import SnapshotEngine
from battlediary.layout.nodes import Box, LayoutVariant, Text, VisualTree

router = APIRouter(tags=["health"])

_PROBE_TREE = VisualTree(
    root=Box((Text("ok"),)),
    width=40,
    variant=LayoutVariant.DETAIL,
)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    renderer: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    engine: Annotated[SnapshotEngine, Depends(get_engine)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns ready if a tiny tree can be measured. Returns 503 otherwise.
    """
    try:
        engine.measure(_PROBE_TREE)
        return HealthResponse(status="ready", renderer="available")
    except Exception:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", renderer="unavailable")
