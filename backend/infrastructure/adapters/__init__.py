"""Infrastructure adapters."""

from .json_match_adapter import InlineMatchDataAdapter, JsonFileMatchDataAdapter
from .wincon_report_adapter import WinconReportBuilderAdapter

__all__ = [
    "InlineMatchDataAdapter",
    "JsonFileMatchDataAdapter",
    "WinconReportBuilderAdapter",
]
