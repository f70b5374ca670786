from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .closing import ClosingAbilityResult, compute_closing_ability
from .config import DEFAULT_WINDOW, DELTA_THRESHOLD
from .dependence import PlayerDependenceRow, compute_player_dependence
from .identity import SideIdentityRow, compute_side_identity
from .normalize import MatchRecord, TeamRef, iter_maps

logger = logging.getLogger(__name__)

SIDE_FILTERS = ("attack", "defense", "both")


@dataclass(frozen=True)
class ReportFilters:
    window: int = DEFAULT_WINDOW
    map: Optional[str] = None
    side: Optional[str] = None

    def __post_init__(self) -> None:
        if self.window < 1:
            raise ValueError(f"window must be at least 1, got {self.window}")
        if self.side is not None and self.side not in SIDE_FILTERS:
            raise ValueError(f"side must be one of {', '.join(SIDE_FILTERS)}, got {self.side!r}")


def format_pct(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"{value * 100:.1f}%"


def format_ci(low: Optional[float], high: Optional[float]) -> str:
    if low is None or high is None:
        return "N/A"
    return f"{format_pct(low)}-{format_pct(high)}"


def apply_filters(matches: List[MatchRecord], filters: ReportFilters) -> List[MatchRecord]:
    """Keep the most recent ``window`` matches, then narrow to one map if requested."""
    windowed = matches[: filters.window]
    if not filters.map:
        return windowed
    wanted = filters.map.lower()
    out: List[MatchRecord] = []
    for match in windowed:
        maps = tuple(mp for mp in match.maps if mp.map_name.lower() == wanted)
        if maps:
            out.append(replace(match, maps=maps))
    return out


def _identity_insights(rows: List[SideIdentityRow]) -> List[str]:
    if not rows:
        return ["No side data available for current window."]
    items = []
    for row in rows:
        if row.prob_delta_gt is not None and row.prob_delta_lt is not None:
            prob_text = (
                f"P(Δ>{DELTA_THRESHOLD})={format_pct(row.prob_delta_gt)}, "
                f"P(Δ<-{DELTA_THRESHOLD})={format_pct(row.prob_delta_lt)}"
            )
        else:
            prob_text = "Insufficient side data"
        items.append(f"{row.map_name}: {row.identity.value} ({prob_text})")
    return items


def _closing_text(closing: ClosingAbilityResult) -> str:
    conversion = format_pct(closing.conversion_rate) if closing.opportunities > 0 else "N/A"
    tail = f"Match-point conversion: {conversion} ({closing.converted}/{closing.opportunities})."
    if closing.model is None:
        return f"Insufficient data for logistic model. {tail}"
    coef = f"{closing.closing_coefficient:.3f}" if closing.closing_coefficient is not None else "N/A"
    return (
        f"Model trained on {closing.sample_count} maps. "
        f"Lead coefficient (log-odds per round) = {coef}. {tail}"
    )


def _dependence_text(rows: List[PlayerDependenceRow]) -> str:
    top = rows[0] if rows else None
    if top is None or top.dependence_index is None:
        return "Not enough player data to estimate dependence."
    return (
        f"Most dependent on {top.player_name} "
        f"(lift {format_pct(top.dependence_index)} when above median impact)."
    )


def build_report(
    matches: List[MatchRecord],
    team: TeamRef,
    filters: Optional[ReportFilters] = None,
) -> Dict[str, Any]:
    filters = filters or ReportFilters()
    windowed = apply_filters(matches, filters)
    maps = iter_maps(windowed)
    logger.debug(
        "building wincon report for %s: %d matches, %d maps", team.id, len(windowed), len(maps)
    )

    side_rows = compute_side_identity(maps, team.id, filters.side)
    closing = compute_closing_ability(maps, team.id)
    dependence = compute_player_dependence(maps, team.id)

    return {
        "meta": {
            "team_id": team.id,
            "team_name": team.name,
            "title": f"Win Conditions - {team.name}",
            "generated_at": datetime.now(timezone.utc).replace(microsecond=0).isoformat(),
            "matches_analyzed": len(windowed),
            "maps_analyzed": len(maps),
        },
        "filters": asdict(filters),
        "side_identity": [{**asdict(r), "identity": r.identity.value} for r in side_rows],
        "closing_ability": asdict(closing),
        "player_dependence": [asdict(r) for r in dependence],
        "insights": {
            "side_identity": _identity_insights(side_rows),
            "closing_ability": _closing_text(closing),
            "player_dependence": _dependence_text(dependence),
        },
    }
