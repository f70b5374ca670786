from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


class Side(str, Enum):
    ATTACK = "attack"
    DEFENSE = "defense"


_SIDE_ALIASES = {
    "attack": Side.ATTACK,
    "attacker": Side.ATTACK,
    "atk": Side.ATTACK,
    "defense": Side.DEFENSE,
    "defender": Side.DEFENSE,
    "def": Side.DEFENSE,
}


@dataclass(frozen=True)
class TeamRef:
    id: str
    name: str


@dataclass(frozen=True)
class PlayerRoundStats:
    player_id: str
    player_name: Optional[str]
    team_id: str
    kills: int
    deaths: int


@dataclass(frozen=True)
class RoundRecord:
    round_number: int
    map_name: str
    winner_id: Optional[str]
    sides: Dict[str, Side]
    player_stats: Tuple[PlayerRoundStats, ...] = ()

    def side_of(self, team_id: str) -> Optional[Side]:
        return self.sides.get(team_id)


@dataclass(frozen=True)
class TeamMapScore:
    team_id: str
    score: int


@dataclass(frozen=True)
class MapSeriesRecord:
    match_id: str
    map_name: str
    map_number: int
    team_scores: Tuple[TeamMapScore, ...]
    rounds: Tuple[RoundRecord, ...]

    def has_team(self, team_id: str) -> bool:
        return any(s.team_id == team_id for s in self.team_scores)

    def team_score(self, team_id: str) -> Optional[int]:
        entry = next((s for s in self.team_scores if s.team_id == team_id), None)
        return entry.score if entry else None

    def opponent_score(self, team_id: str) -> Optional[int]:
        entry = next((s for s in self.team_scores if s.team_id != team_id), None)
        return entry.score if entry else None

    def team_won(self, team_id: str) -> bool:
        ours = self.team_score(team_id)
        theirs = self.opponent_score(team_id)
        if ours is None or theirs is None:
            return False
        return ours > theirs


@dataclass(frozen=True)
class MatchRecord:
    match_id: str
    series_id: str
    started_at: str
    maps: Tuple[MapSeriesRecord, ...]


def _safe_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _safe_str(value: Any) -> str:
    return str(value) if value is not None else ""


def parse_side(value: Any) -> Optional[Side]:
    if value is None:
        return None
    if isinstance(value, Side):
        return value
    return _SIDE_ALIASES.get(str(value).strip().lower())


def _as_dict(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{where} must be a JSON object, got {type(value).__name__}")
    return value


def _as_list(value: Any, where: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{where} must be a JSON list, got {type(value).__name__}")
    return value


def _normalize_player_stats(entries: List[Any], where: str) -> Tuple[PlayerRoundStats, ...]:
    out: List[PlayerRoundStats] = []
    for i, raw in enumerate(entries):
        p = _as_dict(raw, f"{where}.playerStats[{i}]")
        player_id = _safe_str(p.get("playerId") or p.get("id"))
        if not player_id:
            continue
        out.append(
            PlayerRoundStats(
                player_id=player_id,
                player_name=p.get("playerNickname") or p.get("name"),
                team_id=_safe_str(p.get("teamId")),
                kills=_safe_int(p.get("kills")),
                deaths=_safe_int(p.get("deaths")),
            )
        )
    return tuple(out)


def _normalize_round(entry: Dict[str, Any], map_name: str, idx: int, where: str) -> RoundRecord:
    sides: Dict[str, Side] = {}
    for team_id, raw_side in _as_dict(entry.get("side") or {}, f"{where}.side").items():
        side = parse_side(raw_side)
        if side is not None:
            sides[str(team_id)] = side
    winner = entry.get("winnerId")
    return RoundRecord(
        round_number=_safe_int(entry.get("roundNumber")) or idx + 1,
        map_name=map_name,
        winner_id=str(winner) if winner else None,
        sides=sides,
        player_stats=_normalize_player_stats(_as_list(entry.get("playerStats"), f"{where}.playerStats"), where),
    )


def _normalize_map(entry: Dict[str, Any], match_id: str, idx: int, where: str) -> MapSeriesRecord:
    map_name = _safe_str(entry.get("mapName")).strip() or "Unknown"
    scores = tuple(
        TeamMapScore(team_id=_safe_str(s.get("teamId")), score=_safe_int(s.get("score")))
        for s in (
            _as_dict(raw, f"{where}.teamStats[{i}]")
            for i, raw in enumerate(_as_list(entry.get("teamStats"), f"{where}.teamStats"))
        )
        if s.get("teamId") is not None
    )
    rounds = tuple(
        _normalize_round(_as_dict(r, f"{where}.rounds[{i}]"), map_name, i, f"{where}.rounds[{i}]")
        for i, r in enumerate(_as_list(entry.get("rounds"), f"{where}.rounds"))
    )
    return MapSeriesRecord(
        match_id=match_id,
        map_name=map_name,
        map_number=_safe_int(entry.get("mapNumber")) or idx + 1,
        team_scores=scores,
        rounds=rounds,
    )


def normalize_matches(raw_matches: List[Any]) -> List[MatchRecord]:
    """Normalize raw match dicts.

    Missing or unparsable scalar fields fall back to defaults; an entry of the
    wrong JSON type (a string where a map object belongs, say) raises ValueError.
    """
    matches: List[MatchRecord] = []
    for mi, raw in enumerate(raw_matches):
        m = _as_dict(raw, f"matches[{mi}]")
        match_id = _safe_str(m.get("id"))
        maps = tuple(
            _normalize_map(_as_dict(mp, f"matches[{mi}].maps[{i}]"), match_id, i, f"matches[{mi}].maps[{i}]")
            for i, mp in enumerate(_as_list(m.get("maps"), f"matches[{mi}].maps"))
        )
        matches.append(
            MatchRecord(
                match_id=match_id,
                series_id=_safe_str(m.get("seriesId")) or match_id,
                started_at=_safe_str(m.get("startedAt")),
                maps=maps,
            )
        )
    return matches


def parse_payload(raw: Any) -> Tuple[Optional[TeamRef], List[MatchRecord]]:
    """Accept either ``{"team": {...}, "matches": [...]}`` or a bare list of matches."""
    if isinstance(raw, list):
        return None, normalize_matches(raw)
    if not isinstance(raw, dict):
        raise ValueError("match payload must be a JSON object or list")
    team_entry = _as_dict(raw.get("team") or {}, "team")
    team = None
    if team_entry.get("id"):
        team = TeamRef(id=str(team_entry["id"]), name=team_entry.get("name") or str(team_entry["id"]))
    return team, normalize_matches(_as_list(raw.get("matches"), "matches"))


def load_matches_json(path: Path) -> Tuple[Optional[TeamRef], List[MatchRecord]]:
    if not path.exists():
        raise FileNotFoundError(f"Match data file not found: {path}")
    return parse_payload(json.loads(path.read_text(encoding="utf-8")))


def iter_maps(matches: List[MatchRecord]) -> List[MapSeriesRecord]:
    return [mp for match in matches for mp in match.maps]
