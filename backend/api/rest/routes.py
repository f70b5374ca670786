"""REST API routes for win-condition analysis."""

from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from wincon.config import DEFAULT_WINDOW

from ..transformers.report_transformer import transform_report_to_frontend
from ...application.use_cases.generate_report import (
    GenerateReportRequest,
    GenerateReportResult,
    GenerateReportUseCase,
)
from ...infrastructure.adapters import (
    InlineMatchDataAdapter,
    JsonFileMatchDataAdapter,
    WinconReportBuilderAdapter,
)

router = APIRouter(prefix="/api", tags=["analysis"])

_STATUS_BY_CODE = {
    "INVALID_REQUEST": 400,
    "NO_DATA": 404,
    "INTERNAL_ERROR": 500,
}


class WinconGenerateRequest(BaseModel):
    """Request body for an inline win-condition analysis."""

    team_id: str = Field(
        ...,
        alias="teamId",
        description="Team id to analyze",
        min_length=1,
    )
    team_name: Optional[str] = Field(
        default=None,
        alias="teamName",
        description="Display name for the team",
    )
    matches: List[Dict[str, Any]] = Field(
        ...,
        description="Normalized matches, most recent first",
    )
    window: int = Field(
        default=DEFAULT_WINDOW,
        ge=1,
        le=50,
        description="Number of most recent matches to analyze",
    )
    map: Optional[str] = Field(default=None, description="Optional map filter")
    side: Optional[Literal["attack", "defense", "both"]] = Field(
        default=None,
        description="Side filter for identity analysis",
    )

    class Config:
        populate_by_name = True


class ErrorResponse(BaseModel):
    """Error response model."""

    code: str
    message: str
    details: dict = {}


def _raise_for_result(result: GenerateReportResult, details: Dict[str, Any]) -> None:
    code = result.error_code or "INTERNAL_ERROR"
    raise HTTPException(
        status_code=_STATUS_BY_CODE.get(code, 500),
        detail={
            "error": {
                "code": code,
                "message": result.error or "No data available for analysis",
                "details": details,
            }
        },
    )


@router.get("/teams/{team_id}/wincon")
async def get_team_wincon(
    team_id: str,
    window: int = Query(DEFAULT_WINDOW, ge=1, le=50, description="Most recent matches to include"),
    map_name: Optional[str] = Query(None, alias="map"),
    side: Optional[Literal["attack", "defense", "both"]] = Query(None),
):
    """Get the win-condition report for a team from the configured match data.

    Args:
        team_id: Team identifier to analyze
        window: Number of most recent matches
        map_name: Optional map filter
        side: Optional side filter (attack, defense, both)

    Returns:
        Win-condition report in frontend format
    """
    use_case = GenerateReportUseCase(JsonFileMatchDataAdapter(), WinconReportBuilderAdapter())
    result = await use_case.execute(
        GenerateReportRequest(team_id=team_id, window=window, map_name=map_name, side=side)
    )
    if not result.success:
        _raise_for_result(result, {"teamId": team_id})
    return transform_report_to_frontend(result.report or {}, result.metadata or {})


@router.post("/wincon/generate")
async def generate_wincon(request: WinconGenerateRequest):
    """Generate a win-condition report from matches posted in the request.

    Args:
        request: Team, matches and filters

    Returns:
        Win-condition report in frontend format
    """
    try:
        match_data = InlineMatchDataAdapter(request.matches, team_name=request.team_name)
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"error": {"code": "INVALID_REQUEST", "message": str(e), "details": {}}},
        )

    use_case = GenerateReportUseCase(match_data, WinconReportBuilderAdapter())
    result = await use_case.execute(
        GenerateReportRequest(
            team_id=request.team_id,
            window=request.window,
            map_name=request.map,
            side=request.side,
        )
    )
    if not result.success:
        _raise_for_result(result, {"teamId": request.team_id})
    return transform_report_to_frontend(result.report or {}, result.metadata or {})
