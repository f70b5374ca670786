"""Application ports (interfaces)."""

from .match_data import MatchDataPort
from .report_builder import ReportBuilderPort

__all__ = [
    "MatchDataPort",
    "ReportBuilderPort",
]
