from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Tuple

from .config import (
    CLOSING_MIN_MAPS,
    MATCH_POINT_SCORE,
    MOMENTUM_WINDOW,
    RIDGE_ITERATIONS,
    RIDGE_LAMBDA,
    RIDGE_LEARNING_RATE,
    SNAPSHOT_ROUND_INDEX,
)
from .logistic import RidgeLogisticModel, coefficient_per_unit, fit_logistic_ridge, predict_logistic
from .normalize import MapSeriesRecord

logger = logging.getLogger(__name__)

CLOSING_FEATURES = ("leadSize", "roundAtOrAbove10", "recentMomentum", "mapPointStatus")

# Canonical late-map score states scored through the fitted model.
SCORE_STATES: Tuple[Tuple[str, Tuple[float, float, float, float]], ...] = (
    ("11-11", (0.0, 1.0, 0.5, 0.0)),
    ("12-10", (2.0, 1.0, 0.5, 1.0)),
    ("12-11", (1.0, 1.0, 0.5, 1.0)),
    ("10-12", (-2.0, 1.0, 0.5, 0.0)),
)


@dataclass(frozen=True)
class PredictedState:
    label: str
    win_prob: Optional[float]


@dataclass
class ClosingAbilityResult:
    opportunities: int
    converted: int
    failed: int
    conversion_rate: Optional[float]
    model: Optional[RidgeLogisticModel]
    closing_coefficient: Optional[float]
    predicted_states: List[PredictedState] = field(default_factory=list)
    sample_count: int = 0


@dataclass(frozen=True)
class _MapReplay:
    features: Tuple[float, float, float, float]
    won: bool
    reached_match_point: bool


def _momentum(recent: Deque[bool]) -> float:
    return sum(1 for w in recent if w) / len(recent)


def _replay_map(mp: MapSeriesRecord, team_id: str) -> _MapReplay:
    team_score = 0
    opp_score = 0
    reached_match_point = False
    lead_at_snapshot: Optional[int] = None
    momentum_at_snapshot: Optional[float] = None
    recent: Deque[bool] = deque(maxlen=MOMENTUM_WINDOW)

    for idx, rnd in enumerate(mp.rounds):
        won = rnd.winner_id == team_id
        if rnd.winner_id:
            if won:
                team_score += 1
            else:
                opp_score += 1
        recent.append(won)

        if not reached_match_point and team_score >= MATCH_POINT_SCORE and team_score - opp_score == 1:
            reached_match_point = True

        if idx == SNAPSHOT_ROUND_INDEX:
            lead_at_snapshot = team_score - opp_score
            momentum_at_snapshot = _momentum(recent)

    lead = lead_at_snapshot if lead_at_snapshot is not None else team_score - opp_score
    if momentum_at_snapshot is not None:
        momentum = momentum_at_snapshot
    else:
        momentum = _momentum(recent) if recent else 0.5

    features = (
        float(lead),
        1.0 if len(mp.rounds) >= SNAPSHOT_ROUND_INDEX + 1 else 0.0,
        momentum,
        1.0 if reached_match_point else 0.0,
    )
    return _MapReplay(features=features, won=mp.team_won(team_id), reached_match_point=reached_match_point)


def compute_closing_ability(maps: List[MapSeriesRecord], team_id: str) -> ClosingAbilityResult:
    opportunities = 0
    converted = 0
    feature_rows: List[List[float]] = []
    targets: List[float] = []

    for mp in maps:
        if mp.team_score(team_id) is None or mp.opponent_score(team_id) is None:
            continue
        replay = _replay_map(mp, team_id)
        if replay.reached_match_point:
            opportunities += 1
            if replay.won:
                converted += 1
        feature_rows.append(list(replay.features))
        targets.append(1.0 if replay.won else 0.0)

    model: Optional[RidgeLogisticModel] = None
    if len(feature_rows) >= CLOSING_MIN_MAPS:
        model = fit_logistic_ridge(
            feature_rows,
            targets,
            CLOSING_FEATURES,
            RIDGE_LAMBDA,
            RIDGE_ITERATIONS,
            RIDGE_LEARNING_RATE,
        )
    else:
        logger.debug("closing ability: %d maps, need %d for a model", len(feature_rows), CLOSING_MIN_MAPS)

    predicted = [
        PredictedState(label=label, win_prob=predict_logistic(model, features) if model else None)
        for label, features in SCORE_STATES
    ]

    return ClosingAbilityResult(
        opportunities=opportunities,
        converted=converted,
        failed=opportunities - converted,
        conversion_rate=converted / opportunities if opportunities > 0 else None,
        model=model,
        closing_coefficient=coefficient_per_unit(model, "leadSize") if model else None,
        predicted_states=predicted,
        sample_count=len(feature_rows),
    )
