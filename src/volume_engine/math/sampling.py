"""Random variate sampling: standard normal, Gamma and Beta draws.

The whole stochastic core of the bandit is these three functions; no numeric
framework is needed for three Beta draws per decision.

References:
    - Box & Muller (1958). A Note on the Generation of Random Normal
      Deviates. Ann Math Stat 29(2):610-611.
    - Marsaglia & Tsang (2000). A Simple Method for Generating Gamma
      Variables. ACM Trans Math Softw 26(3):363-372.
"""

from __future__ import annotations

import math
import random

_DEFAULT_RNG = random.Random()


def standard_normal(rng: random.Random | None = None) -> float:
    """Draw one N(0, 1) sample via the Box-Muller transform.

    The transform yields two independent normals; the sine branch is
    discarded.

    Args:
        rng: Random source. Defaults to a module-level generator.
    """
    rng = rng or _DEFAULT_RNG
    # 1 - random() lies in (0, 1], keeping log() finite
    u1 = 1.0 - rng.random()
    u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def sample_gamma(shape: float, rng: random.Random | None = None) -> float:
    """Draw from Gamma(shape, 1).

    Uses Marsaglia-Tsang rejection for shape >= 1. For shape < 1 the draw is
    boosted through Gamma(shape) = Gamma(shape + 1) * U^(1/shape).

    Args:
        shape: Shape parameter, must be > 0.
        rng: Random source. Defaults to a module-level generator.

    Returns:
        A positive real.
    """
    rng = rng or _DEFAULT_RNG
    if shape < 1.0:
        u = 1.0 - rng.random()
        return sample_gamma(shape + 1.0, rng) * math.pow(u, 1.0 / shape)

    d = shape - 1.0 / 3.0
    c = 1.0 / math.sqrt(9.0 * d)

    while True:
        x = standard_normal(rng)
        v = 1.0 + c * x
        while v <= 0.0:
            x = standard_normal(rng)
            v = 1.0 + c * x

        v = v * v * v
        u = 1.0 - rng.random()

        # Squeeze test accepts ~98% of draws without a log
        if u < 1.0 - 0.0331 * (x * x) * (x * x):
            return d * v
        if math.log(u) < 0.5 * x * x + d * (1.0 - v + math.log(v)):
            return d * v


def sample_beta(alpha: float, beta: float, rng: random.Random | None = None) -> float:
    """Draw from Beta(alpha, beta) as X / (X + Y) with X~Gamma(alpha), Y~Gamma(beta).

    Callers are expected to floor both parameters at 1 beforehand; no
    clamping happens here.
    """
    x = sample_gamma(alpha, rng)
    y = sample_gamma(beta, rng)
    return x / (x + y)
