from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Protocol

from .config import BETA_SAMPLES, CRED_LEVEL
from .sampling import beta_sample, rng_from_key


class _Counts(Protocol):
    wins: int
    rounds: int


@dataclass
class WinCount:
    wins: int = 0
    rounds: int = 0

    def add(self, won: bool) -> None:
        self.rounds += 1
        if won:
            self.wins += 1


@dataclass(frozen=True)
class PosteriorSummary:
    wins: int
    rounds: int
    mean: float
    ci_low: Optional[float]
    ci_high: Optional[float]


@dataclass(frozen=True)
class DeltaProbabilities:
    prob_gt: Optional[float]
    prob_lt: Optional[float]


def _check_counts(wins: int, rounds: int) -> None:
    if rounds < 0 or wins < 0 or wins > rounds:
        raise ValueError(f"invalid win/round counts: {wins}/{rounds}")


def posterior_summary(
    wins: int,
    rounds: int,
    cred_level: float = CRED_LEVEL,
    seed_label: str = "",
) -> PosteriorSummary:
    """Beta-Binomial posterior (flat prior) mean and Monte-Carlo credible interval.

    The interval is skipped entirely when there are no observations.
    """
    _check_counts(wins, rounds)
    if not 0.0 < cred_level < 1.0:
        raise ValueError(f"cred_level must be in (0, 1), got {cred_level}")

    alpha = wins + 1
    beta = rounds - wins + 1
    mean = (wins + 1) / (rounds + 2)
    if rounds == 0:
        return PosteriorSummary(wins=wins, rounds=rounds, mean=mean, ci_low=None, ci_high=None)

    rng = rng_from_key(seed_label)
    samples = sorted(beta_sample(alpha, beta, rng) for _ in range(BETA_SAMPLES))
    tail = (1.0 - cred_level) / 2.0
    lo_idx = max(0, math.floor(tail * BETA_SAMPLES))
    hi_idx = min(BETA_SAMPLES - 1, math.ceil((1.0 - tail) * BETA_SAMPLES) - 1)
    return PosteriorSummary(
        wins=wins,
        rounds=rounds,
        mean=mean,
        ci_low=samples[lo_idx],
        ci_high=samples[hi_idx],
    )


def estimate_delta_probabilities(
    a: _Counts,
    b: _Counts,
    threshold: float,
    seed_label: str,
) -> DeltaProbabilities:
    """P(A - B > threshold) and P(A - B < -threshold) from paired posterior draws."""
    if a.rounds == 0 or b.rounds == 0:
        return DeltaProbabilities(prob_gt=None, prob_lt=None)

    rng = rng_from_key(seed_label)
    gt = 0
    lt = 0
    for _ in range(BETA_SAMPLES):
        sa = beta_sample(a.wins + 1, a.rounds - a.wins + 1, rng)
        sb = beta_sample(b.wins + 1, b.rounds - b.wins + 1, rng)
        delta = sa - sb
        if delta > threshold:
            gt += 1
        if delta < -threshold:
            lt += 1
    return DeltaProbabilities(prob_gt=gt / BETA_SAMPLES, prob_lt=lt / BETA_SAMPLES)
