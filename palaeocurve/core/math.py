from enum import Enum
from typing import Literal

import numpy as np

Point = tuple[float, float]
Op = tuple[Literal["M", "C"], tuple]


class SamplingMode(str, Enum):
    LEGACY = "legacy"
    UNIFORM = "uniform"


def reflect(anchor: Point, handle: Point) -> Point:
    """Point reflection of `handle` through `anchor`."""
    return anchor[0] + anchor[0] - handle[0], anchor[1] + anchor[1] - handle[1]


def sample_parameters(n: int, mode: SamplingMode = SamplingMode.LEGACY) -> np.ndarray:
    """
    Parameter values at which every per-curve quantity is evaluated.

    LEGACY keeps the spacing of the original curve tool: t(0) = 1/n, then
    t(i) = ((1 - 1/n) / n) * i. The sequence is not monotonic (t(1) < t(0)).
    UNIFORM spreads n values evenly over [0, 1], both ends included.
    """
    if n < 1:
        raise ValueError(f"sample count must be >= 1, got {n}")
    if SamplingMode(mode) is SamplingMode.UNIFORM:
        return np.linspace(0.0, 1.0, n)
    ts = ((1.0 - 1.0 / n) / n) * np.arange(n, dtype=float)
    ts[0] = 1.0 / n
    return ts
