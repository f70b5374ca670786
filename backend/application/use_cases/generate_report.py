"""Use case for generating team win-condition reports."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict

from wincon.config import DEFAULT_WINDOW
from wincon.report import ReportFilters

from ..ports.match_data import MatchDataPort
from ..ports.report_builder import ReportBuilderPort

logger = logging.getLogger(__name__)

# Thread pool for the blocking Monte-Carlo / model fitting work
_executor = ThreadPoolExecutor(max_workers=4)


@dataclass
class GenerateReportRequest:
    """Request to generate a report."""

    team_id: str
    window: int = DEFAULT_WINDOW
    map_name: str | None = None
    side: str | None = None


@dataclass
class GenerateReportResult:
    """Result of report generation."""

    success: bool
    report: Dict[str, Any] | None = None
    error: str | None = None
    error_code: str | None = None
    metadata: Dict[str, Any] | None = None


class GenerateReportUseCase:
    """Use case for generating team win-condition reports.

    This orchestrates the process of:
    1. Loading the team's match records
    2. Applying the report filters
    3. Running the inference engine to build the report
    """

    def __init__(
        self,
        match_data: MatchDataPort,
        report_builder: ReportBuilderPort,
    ):
        self._match_data = match_data
        self._report_builder = report_builder

    async def execute(self, request: GenerateReportRequest) -> GenerateReportResult:
        """Execute the report generation use case.

        Args:
            request: Report generation request

        Returns:
            Report generation result
        """
        loop = asyncio.get_running_loop()

        try:
            filters = ReportFilters(
                window=request.window,
                map=request.map_name,
                side=request.side,
            )
        except ValueError as e:
            return GenerateReportResult(success=False, error=str(e), error_code="INVALID_REQUEST")

        try:
            team, matches = await loop.run_in_executor(
                _executor, partial(self._match_data.load_team_matches, request.team_id)
            )
        except (LookupError, FileNotFoundError) as e:
            logger.warning("No match data for team %s: %s", request.team_id, e)
            return GenerateReportResult(success=False, error=str(e), error_code="NO_DATA")
        except ValueError as e:
            return GenerateReportResult(success=False, error=str(e), error_code="INVALID_REQUEST")

        if not matches:
            return GenerateReportResult(
                success=False,
                error=f"No matches found for team '{request.team_id}'.",
                error_code="NO_DATA",
            )

        try:
            build_func = partial(self._report_builder.build_raw_report, matches, team, filters)
            report = await loop.run_in_executor(_executor, build_func)
        except Exception as e:
            logger.exception("Report build failed for team %s", request.team_id)
            return GenerateReportResult(success=False, error=str(e), error_code="INTERNAL_ERROR")

        metadata = {
            "team_id": team.id,
            "team_name": team.name,
            "window": filters.window,
            "map": filters.map,
            "side": filters.side,
            "matches_available": len(matches),
        }
        return GenerateReportResult(success=True, report=report, metadata=metadata)
