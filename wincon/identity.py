from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .config import CRED_LEVEL, DELTA_THRESHOLD, IDENTITY_PROB_CUTOFF
from .normalize import MapSeriesRecord, Side, parse_side
from .posterior import PosteriorSummary, WinCount, estimate_delta_probabilities, posterior_summary

logger = logging.getLogger(__name__)


class SideIdentity(str, Enum):
    ATTACK_SIDED = "Attack-Sided"
    DEFENSE_SIDED = "Defense-Sided"
    BALANCED = "Balanced"
    NOT_APPLICABLE = "N/A"


@dataclass(frozen=True)
class SideIdentityRow:
    map_name: str
    attack: PosteriorSummary
    defense: PosteriorSummary
    prob_delta_gt: Optional[float]
    prob_delta_lt: Optional[float]
    identity: SideIdentity


def _filter_active(side_filter: Optional[str]) -> bool:
    return bool(side_filter) and side_filter != "both"


def _classify(prob_gt: Optional[float], prob_lt: Optional[float]) -> SideIdentity:
    identity = SideIdentity.BALANCED
    if prob_gt is not None and prob_gt > IDENTITY_PROB_CUTOFF:
        identity = SideIdentity.ATTACK_SIDED
    # evaluated second so it wins if both clear the cutoff
    if prob_lt is not None and prob_lt > IDENTITY_PROB_CUTOFF:
        identity = SideIdentity.DEFENSE_SIDED
    return identity


def compute_side_identity(
    maps: List[MapSeriesRecord],
    team_id: str,
    side_filter: Optional[str] = None,
) -> List[SideIdentityRow]:
    wanted: Optional[Side] = parse_side(side_filter) if _filter_active(side_filter) else None
    per_map: Dict[str, Dict[Side, WinCount]] = defaultdict(
        lambda: {Side.ATTACK: WinCount(), Side.DEFENSE: WinCount()}
    )

    for mp in maps:
        for rnd in mp.rounds:
            side = rnd.side_of(team_id)
            if side is None:
                continue
            if wanted is not None and side != wanted:
                continue
            per_map[mp.map_name or "Unknown"][side].add(rnd.winner_id == team_id)

    rows: List[SideIdentityRow] = []
    for map_name, counts in per_map.items():
        atk = counts[Side.ATTACK]
        dfn = counts[Side.DEFENSE]
        attack = posterior_summary(
            atk.wins, atk.rounds, CRED_LEVEL, f"{map_name}-attack-{atk.wins}-{atk.rounds}"
        )
        defense = posterior_summary(
            dfn.wins, dfn.rounds, CRED_LEVEL, f"{map_name}-defense-{dfn.wins}-{dfn.rounds}"
        )

        prob_gt: Optional[float] = None
        prob_lt: Optional[float] = None
        if attack.rounds == 0 or defense.rounds == 0 or _filter_active(side_filter):
            identity = SideIdentity.NOT_APPLICABLE
        else:
            probs = estimate_delta_probabilities(attack, defense, DELTA_THRESHOLD, f"{map_name}-delta")
            prob_gt, prob_lt = probs.prob_gt, probs.prob_lt
            identity = _classify(prob_gt, prob_lt)

        logger.debug(
            "side identity %s: attack %d/%d defense %d/%d -> %s",
            map_name, atk.wins, atk.rounds, dfn.wins, dfn.rounds, identity.value,
        )
        rows.append(
            SideIdentityRow(
                map_name=map_name,
                attack=attack,
                defense=defense,
                prob_delta_gt=prob_gt,
                prob_delta_lt=prob_lt,
                identity=identity,
            )
        )

    rows.sort(key=lambda r: (r.map_name.lower(), r.map_name))
    return rows
