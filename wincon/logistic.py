from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import RIDGE_ITERATIONS, RIDGE_LAMBDA, RIDGE_LEARNING_RATE

logger = logging.getLogger(__name__)

_EPS = 1e-9
_TOLERANCE = 1e-6


@dataclass(frozen=True)
class RidgeLogisticModel:
    coefficients: Tuple[float, ...]
    means: Tuple[float, ...]
    stds: Tuple[float, ...]
    feature_names: Tuple[str, ...]
    lam: float
    iterations: int
    converged: bool


def sigmoid(z: float) -> float:
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    ez = math.exp(z)
    return ez / (1.0 + ez)


def _column_stats(X: Sequence[Sequence[float]], m: int) -> Tuple[List[float], List[float]]:
    n = len(X)
    means: List[float] = []
    stds: List[float] = []
    for j in range(m):
        col = [float(row[j]) for row in X]
        mu = sum(col) / n
        variance = sum((v - mu) ** 2 for v in col) / n
        std = math.sqrt(variance)
        means.append(mu)
        stds.append(std if std != 0 else 1.0)
    return means, stds


def fit_logistic_ridge(
    X: Sequence[Sequence[float]],
    y: Sequence[float],
    feature_names: Sequence[str],
    lam: float = RIDGE_LAMBDA,
    iterations: int = RIDGE_ITERATIONS,
    lr: float = RIDGE_LEARNING_RATE,
) -> Optional[RidgeLogisticModel]:
    """Full-batch gradient descent on L2-penalised cross-entropy.

    Features are standardised per column first; the intercept is not penalised.
    Returns None for empty or inconsistent inputs.
    """
    n = len(X)
    if n == 0 or len(y) != n:
        return None
    m = len(X[0])

    means, stds = _column_stats(X, m)
    xs = [[(float(row[j]) - means[j]) / stds[j] for j in range(m)] for row in X]

    weights = [0.0] * (m + 1)
    prev_loss = math.inf
    converged = False
    for iteration in range(iterations):
        grads = [0.0] * (m + 1)
        loss = 0.0
        for i in range(n):
            z = weights[0]
            for j in range(m):
                z += weights[j + 1] * xs[i][j]
            p = sigmoid(z)
            err = p - y[i]
            grads[0] += err
            for j in range(m):
                grads[j + 1] += err * xs[i][j]
            p_clamped = min(max(p, _EPS), 1.0 - _EPS)
            loss += -y[i] * math.log(p_clamped) - (1.0 - y[i]) * math.log(1.0 - p_clamped)

        for j in range(1, m + 1):
            grads[j] += lam * weights[j]
            loss += 0.5 * lam * weights[j] * weights[j]

        for j in range(m + 1):
            weights[j] -= lr * grads[j] / n

        avg_loss = loss / n
        if abs(prev_loss - avg_loss) < _TOLERANCE:
            converged = True
            logger.debug("ridge logistic converged after %d iterations (loss %.6f)", iteration + 1, avg_loss)
            break
        prev_loss = avg_loss

    return RidgeLogisticModel(
        coefficients=tuple(weights),
        means=tuple(means),
        stds=tuple(stds),
        feature_names=tuple(feature_names),
        lam=lam,
        iterations=iterations,
        converged=converged,
    )


def predict_logistic(model: RidgeLogisticModel, features: Sequence[float]) -> float:
    z = model.coefficients[0]
    for j, value in enumerate(features):
        z += model.coefficients[j + 1] * (value - model.means[j]) / model.stds[j]
    return sigmoid(z)


def coefficient_per_unit(model: RidgeLogisticModel, feature_name: str) -> Optional[float]:
    """Log-odds change per raw unit of a feature (undoes standardisation)."""
    try:
        idx = model.feature_names.index(feature_name)
    except ValueError:
        return None
    return model.coefficients[idx + 1] / model.stds[idx]
