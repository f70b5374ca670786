from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .config import CRED_LEVEL, RIDGE_ITERATIONS, RIDGE_LAMBDA, RIDGE_LEARNING_RATE
from .logistic import coefficient_per_unit, fit_logistic_ridge
from .normalize import MapSeriesRecord
from .posterior import WinCount, posterior_summary

logger = logging.getLogger(__name__)


@dataclass
class PlayerDependenceRow:
    player_id: str
    player_name: str
    good_win_rate: Optional[float]
    good_ci_low: Optional[float]
    good_ci_high: Optional[float]
    bad_win_rate: Optional[float]
    bad_ci_low: Optional[float]
    bad_ci_high: Optional[float]
    lift: Optional[float]
    dependence_index: Optional[float]
    good_samples: int
    bad_samples: int
    impact_coef: Optional[float] = None


@dataclass(frozen=True)
class _MapEntry:
    map_name: str
    team_won: bool
    kd_diffs: Dict[str, int]


def median(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def _collect_map_entries(
    maps: List[MapSeriesRecord], team_id: str, names: Dict[str, str]
) -> List[_MapEntry]:
    entries: List[_MapEntry] = []
    for mp in maps:
        if mp.team_score(team_id) is None or mp.opponent_score(team_id) is None:
            continue
        kills: Dict[str, int] = {}
        deaths: Dict[str, int] = {}
        for rnd in mp.rounds:
            for ps in rnd.player_stats:
                if ps.team_id != team_id:
                    continue
                kills[ps.player_id] = kills.get(ps.player_id, 0) + ps.kills
                deaths[ps.player_id] = deaths.get(ps.player_id, 0) + ps.deaths
                if ps.player_id not in names:
                    names[ps.player_id] = ps.player_name or ps.player_id
        if not kills:
            continue
        entries.append(
            _MapEntry(
                map_name=mp.map_name or "Unknown",
                team_won=mp.team_won(team_id),
                kd_diffs={pid: kills[pid] - deaths[pid] for pid in kills},
            )
        )
    return entries


def _bucket_row(player_id: str, name: str, entries: List[_MapEntry]) -> PlayerDependenceRow:
    diffs = [e.kd_diffs[player_id] for e in entries if player_id in e.kd_diffs]
    med = median(diffs) or 0.0
    good = WinCount()
    bad = WinCount()
    for e in entries:
        kd = e.kd_diffs.get(player_id)
        if kd is None:
            continue
        # median itself lands in the good bucket
        (good if kd >= med else bad).add(e.team_won)

    good_summary = posterior_summary(
        good.wins, good.rounds, CRED_LEVEL, f"{player_id}-good-{good.wins}-{good.rounds}"
    )
    bad_summary = posterior_summary(
        bad.wins, bad.rounds, CRED_LEVEL, f"{player_id}-bad-{bad.wins}-{bad.rounds}"
    )
    good_rate = good_summary.mean if good.rounds > 0 else None
    bad_rate = bad_summary.mean if bad.rounds > 0 else None
    lift = good_rate - bad_rate if good_rate is not None and bad_rate is not None else None
    return PlayerDependenceRow(
        player_id=player_id,
        player_name=name,
        good_win_rate=good_rate,
        good_ci_low=good_summary.ci_low,
        good_ci_high=good_summary.ci_high,
        bad_win_rate=bad_rate,
        bad_ci_low=bad_summary.ci_low,
        bad_ci_high=bad_summary.ci_high,
        lift=lift,
        dependence_index=lift,
        good_samples=good.rounds,
        bad_samples=bad.rounds,
    )


def compute_player_dependence(maps: List[MapSeriesRecord], team_id: str) -> List[PlayerDependenceRow]:
    names: Dict[str, str] = {}
    entries = _collect_map_entries(maps, team_id, names)
    player_ids = list(names.keys())
    rows = [_bucket_row(pid, names[pid], entries) for pid in player_ids]

    map_names = list(dict.fromkeys(e.map_name for e in entries))
    map_controls = map_names[1:] if len(map_names) > 1 else []
    feature_names = [f"impact:{pid}" for pid in player_ids] + [f"map:{name}" for name in map_controls]

    feature_rows: List[List[float]] = []
    targets: List[float] = []
    for e in entries:
        row = [float(e.kd_diffs.get(pid, 0)) for pid in player_ids]
        row.extend(1.0 if e.map_name == name else 0.0 for name in map_controls)
        feature_rows.append(row)
        targets.append(1.0 if e.team_won else 0.0)

    if len(feature_rows) >= len(player_ids) + 2:
        model = fit_logistic_ridge(
            feature_rows, targets, feature_names, RIDGE_LAMBDA, RIDGE_ITERATIONS, RIDGE_LEARNING_RATE
        )
        if model:
            for row in rows:
                row.impact_coef = coefficient_per_unit(model, f"impact:{row.player_id}")
    else:
        logger.debug(
            "player dependence: %d maps for %d players, skipping impact model",
            len(feature_rows), len(player_ids),
        )

    with_index = [r for r in rows if r.dependence_index is not None]
    without_index = [r for r in rows if r.dependence_index is None]
    with_index.sort(key=lambda r: r.dependence_index, reverse=True)
    return with_index + without_index
