from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


# Monte-Carlo / posterior settings shared by every estimator call.
CRED_LEVEL = 0.8
BETA_SAMPLES = 4000

# Side/half identity
DELTA_THRESHOLD = 0.05
IDENTITY_PROB_CUTOFF = 0.8

# Closing ability
MATCH_POINT_SCORE = 12
SNAPSHOT_ROUND_INDEX = 9
MOMENTUM_WINDOW = 3
CLOSING_MIN_MAPS = 6

# Ridge logistic defaults
RIDGE_LAMBDA = 1.0
RIDGE_ITERATIONS = 4000
RIDGE_LEARNING_RATE = 0.1

DEFAULT_WINDOW = 5


@dataclass(frozen=True)
class DataConfig:
    data_path: Path
    default_window: int


def data_config_from_env() -> DataConfig:
    data_path = Path(os.environ.get("WINCON_DATA_PATH", "data/matches.json"))
    try:
        window = int(os.environ.get("WINCON_WINDOW", str(DEFAULT_WINDOW)))
    except ValueError:
        window = DEFAULT_WINDOW
    return DataConfig(data_path=data_path, default_window=max(1, window))
