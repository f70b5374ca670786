"""Adapters serving normalized match JSON to the report use case."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from wincon.config import data_config_from_env
from wincon.normalize import MatchRecord, TeamRef, load_matches_json, normalize_matches

from ...application.ports.match_data import MatchDataPort


def _resolve_team(
    team_id: str,
    file_team: Optional[TeamRef],
    matches: List[MatchRecord],
    team_name: Optional[str] = None,
) -> TeamRef:
    if file_team and file_team.id == team_id:
        return TeamRef(id=team_id, name=team_name or file_team.name)
    if any(mp.has_team(team_id) for match in matches for mp in match.maps):
        return TeamRef(id=team_id, name=team_name or team_id)
    raise LookupError(f"Team '{team_id}' not found in match data")


def _team_matches(team_id: str, matches: List[MatchRecord]) -> List[MatchRecord]:
    return [m for m in matches if any(mp.has_team(team_id) for mp in m.maps)]


class JsonFileMatchDataAdapter(MatchDataPort):
    """Adapter reading the upstream match export from a JSON file."""

    def __init__(self, path: Path | None = None):
        """Initialize with the data file path.

        Args:
            path: JSON file path. If None, uses WINCON_DATA_PATH.
        """
        self._path = path or data_config_from_env().data_path

    def load_team_matches(self, team_id: str) -> Tuple[TeamRef, List[MatchRecord]]:
        """Load the file and keep matches in which the team played.

        Args:
            team_id: Team identifier to analyze

        Returns:
            Tuple of (team reference, match records)
        """
        file_team, matches = load_matches_json(self._path)
        team = _resolve_team(team_id, file_team, matches)
        return team, _team_matches(team_id, matches)


class InlineMatchDataAdapter(MatchDataPort):
    """Adapter for matches posted directly in a request body."""

    def __init__(self, raw_matches: List[Dict[str, Any]], team_name: str | None = None):
        self._matches = normalize_matches(raw_matches)
        self._team_name = team_name

    def load_team_matches(self, team_id: str) -> Tuple[TeamRef, List[MatchRecord]]:
        team = _resolve_team(team_id, None, self._matches, self._team_name)
        return team, _team_matches(team_id, self._matches)
