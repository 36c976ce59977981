"""
Export API endpoints.

Lets a browser host render the result image for records and ask which
share/download affordances to offer.
"""

from functools import lru_cache
from typing import Annotated, Any
from urllib.parse import quote

from fastapi import APIRouter, Depends, Header, Response
from pydantic import BaseModel, Field

from battlediary.capture.engine import SnapshotEngine
from battlediary.capture.surface import RenderSurface
from battlediary.config import MANUAL_POST_HINT
from battlediary.export.capability import (
    capability_from_user_agent,
    decide_actions,
    mode_for_count,
)
from battlediary.export.naming import export_filename, share_caption
from battlediary.layout.composer import compose
from battlediary.models.export import ExportAction, ExportMode
from battlediary.models.failure import ApiResponse, create_success
from battlediary.parsers.records import parse_export_input

router = APIRouter(prefix="/export", tags=["export"])


@lru_cache(maxsize=1)
def get_engine() -> SnapshotEngine:
    """Shared capture engine (fonts are cached per engine)."""
    return SnapshotEngine()


class ExportRequest(BaseModel):
    """Request model for an export."""

    records: list[dict[str, Any]] = Field(
        ...,
        min_length=1,
        description="Records as stored in the match history (camelCase keys)",
        examples=[
            [
                {
                    "date": "2024-05-01",
                    "deckName": "Burn",
                    "format": "Modern",
                    "eventWins": 2,
                    "eventLosses": 1,
                    "matches": [],
                }
            ]
        ],
    )


class ExportPlanResponse(BaseModel):
    """Which affordances to offer for an export."""

    mode: ExportMode
    action: ExportAction
    share_available: bool = Field(
        ...,
        description="Show the native share button (absent otherwise, never disabled)",
    )
    hint: str | None = Field(
        default=None,
        description="Manual-posting hint for single exports without native sharing",
    )
    filename: str
    caption: str | None = Field(
        default=None,
        description="Share caption (single exports only)",
    )
    record_count: int


def content_disposition(filename: str) -> str:
    """Attachment header that survives non-ASCII deck names."""
    fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.post(
    "/image",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
)
async def export_image(
    request: ExportRequest,
    engine: Annotated[SnapshotEngine, Depends(get_engine)],
) -> Response:
    """
    Render records to a PNG.

    One record renders the detail layout; several render the summary.
    """
    records = parse_export_input(request.records)
    surface = RenderSurface()
    surface.mount(compose(records))

    bitmap = await engine.capture(surface)

    return Response(
        content=bitmap.to_png_bytes(),
        media_type=bitmap.media_type,
        headers={"Content-Disposition": content_disposition(export_filename(records))},
    )


@router.post("/plan", response_model=ApiResponse[ExportPlanResponse])
async def export_plan(
    request: ExportRequest,
    user_agent: Annotated[str | None, Header()] = None,
) -> ApiResponse[ExportPlanResponse]:
    """
    Decide share/download affordances for the requesting browser.

    Capability is estimated from the User-Agent header.
    """
    records = parse_export_input(request.records)
    mode = mode_for_count(len(records))
    plan = decide_actions(mode, capability_from_user_agent(user_agent))

    return create_success(
        ExportPlanResponse(
            mode=mode,
            action=plan.action,
            share_available=plan.allows_share,
            hint=MANUAL_POST_HINT if plan.shows_hint else None,
            filename=export_filename(records),
            caption=share_caption(records[0]) if mode is ExportMode.SINGLE else None,
            record_count=len(records),
        )
    )
