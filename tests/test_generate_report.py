import asyncio
from typing import Any, Dict, List, Tuple

from backend.application.ports import MatchDataPort, ReportBuilderPort
from backend.application.use_cases import GenerateReportRequest, GenerateReportUseCase
from wincon.normalize import MatchRecord, TeamRef
from wincon.report import ReportFilters


class _StaticMatches(MatchDataPort):
    def __init__(self, matches: List[MatchRecord]):
        self.matches = matches

    def load_team_matches(self, team_id: str) -> Tuple[TeamRef, List[MatchRecord]]:
        return TeamRef(team_id, "Team"), self.matches


class _Recorder(ReportBuilderPort):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.filters = None

    def build_raw_report(self, matches, team, filters: ReportFilters) -> Dict[str, Any]:
        if self.fail:
            raise RuntimeError("boom")
        self.filters = filters
        return {"meta": {"team_id": team.id}}


_MATCH = MatchRecord(match_id="m1", series_id="s1", started_at="", maps=())


def _run(use_case: GenerateReportUseCase, request: GenerateReportRequest):
    return asyncio.run(use_case.execute(request))


def test_success_passes_filters_and_metadata() -> None:
    builder = _Recorder()
    result = _run(
        GenerateReportUseCase(_StaticMatches([_MATCH]), builder),
        GenerateReportRequest(team_id="t1", window=3, map_name="Bind", side="defense"),
    )
    assert result.success
    assert builder.filters == ReportFilters(window=3, map="Bind", side="defense")
    assert result.metadata["matches_available"] == 1
    assert result.metadata["side"] == "defense"


def test_bad_filters_are_invalid_request() -> None:
    result = _run(
        GenerateReportUseCase(_StaticMatches([_MATCH]), _Recorder()),
        GenerateReportRequest(team_id="t1", side="mid"),
    )
    assert not result.success
    assert result.error_code == "INVALID_REQUEST"


def test_no_matches_is_no_data() -> None:
    result = _run(
        GenerateReportUseCase(_StaticMatches([]), _Recorder()),
        GenerateReportRequest(team_id="t1"),
    )
    assert result.error_code == "NO_DATA"


def test_builder_failure_is_internal_error() -> None:
    result = _run(
        GenerateReportUseCase(_StaticMatches([_MATCH]), _Recorder(fail=True)),
        GenerateReportRequest(team_id="t1"),
    )
    assert result.error_code == "INTERNAL_ERROR"
    assert result.error == "boom"
