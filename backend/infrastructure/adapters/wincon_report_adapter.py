"""Adapter wrapping the wincon inference engine."""

from typing import Any, Dict, List

from wincon.normalize import MatchRecord, TeamRef
from wincon.report import ReportFilters, build_report

from ...application.ports.report_builder import ReportBuilderPort


class WinconReportBuilderAdapter(ReportBuilderPort):
    """Adapter for building reports using the wincon module."""

    def build_raw_report(
        self,
        matches: List[MatchRecord],
        team: TeamRef,
        filters: ReportFilters,
    ) -> Dict[str, Any]:
        return build_report(matches, team, filters)
