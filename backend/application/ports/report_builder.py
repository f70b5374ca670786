"""Port (interface) for building win-condition reports."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from wincon.normalize import MatchRecord, TeamRef
from wincon.report import ReportFilters


class ReportBuilderPort(ABC):
    """Port for building analysis reports from match records."""

    @abstractmethod
    def build_raw_report(
        self,
        matches: List[MatchRecord],
        team: TeamRef,
        filters: ReportFilters,
    ) -> Dict[str, Any]:
        """Build a raw win-condition report.

        This returns the internal report format from the wincon module.

        Args:
            matches: Match records, most recent first
            team: Team being analyzed
            filters: Window / map / side filters

        Returns:
            Raw report dictionary in internal format
        """
        ...
