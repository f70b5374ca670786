"""Seeded random variates used by the Monte-Carlo estimators.

Nothing here touches system entropy: every stream is derived from a string
key, so identical inputs always reproduce identical samples.
"""

from __future__ import annotations

import math

_MASK32 = 0xFFFFFFFF
_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619
_MULBERRY_INCREMENT = 0x6D2B79F5
_TWO_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def seed_from_key(key: str) -> int:
    """32-bit FNV-1a hash of the UTF-8 bytes of ``key``."""
    h = _FNV_OFFSET
    for byte in key.encode("utf-8"):
        h ^= byte
        h = _imul(h, _FNV_PRIME)
    return h


class Mulberry32:
    """Small 32-bit generator; one instance is one reproducible stream."""

    def __init__(self, seed: int) -> None:
        self.state = seed & _MASK32

    def next_uint32(self) -> int:
        self.state = (self.state + _MULBERRY_INCREMENT) & _MASK32
        t = self.state
        r = _imul(t ^ (t >> 15), t | 1)
        r ^= (r + _imul(r ^ (r >> 7), r | 61)) & _MASK32
        return (r ^ (r >> 14)) & _MASK32

    def random(self) -> float:
        return self.next_uint32() / _TWO_32


def rng_from_key(key: str) -> Mulberry32:
    return Mulberry32(seed_from_key(key))


def standard_normal(rng: Mulberry32) -> float:
    u1 = max(rng.random(), 1e-12)
    u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def gamma_sample(shape: float, rng: Mulberry32) -> float:
    """Marsaglia-Tsang sampler for Gamma(shape, 1)."""
    if shape <= 0:
        raise ValueError(f"gamma shape must be positive, got {shape}")
    if shape < 1:
        u = max(rng.random(), 1e-12)
        return gamma_sample(shape + 1.0, rng) * u ** (1.0 / shape)

    d = shape - 1.0 / 3.0
    c = 1.0 / math.sqrt(9.0 * d)
    while True:
        x = standard_normal(rng)
        v = (1.0 + c * x) ** 3
        if v <= 0:
            continue
        u = rng.random()
        if u < 1.0 - 0.0331 * x ** 4:
            return d * v
        # u can be exactly 0.0 from the generator; log(0) would raise
        if u > 0 and math.log(u) < 0.5 * x * x + d * (1.0 - v + math.log(v)):
            return d * v


def beta_sample(alpha: float, beta: float, rng: Mulberry32) -> float:
    x = gamma_sample(alpha, rng)
    y = gamma_sample(beta, rng)
    return x / (x + y)
