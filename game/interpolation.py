"""
Visual interpolation of segment positions.
"""

from typing import Dict, Tuple

import numpy as np

from .segment import Chain


MIN_RATE = 0.0
MAX_RATE = 1000.0


def clamp_rate(rate: float) -> float:
    return min(max(float(rate), MIN_RATE), MAX_RATE)


def approach(rendered: np.ndarray, target, rate: float, delta_seconds: float) -> np.ndarray:
    """
    Moves *rendered* toward *target* by ``delta * rate * dt``.

    The factor is capped at 1 so the result never passes the target.
    """
    factor = min(max(rate * delta_seconds, 0.0), 1.0)
    delta = np.asarray(target, dtype=np.float64) - rendered
    return rendered + delta * factor


def interpolate(chain: Chain, rate: float, delta_seconds: float) -> None:
    """Eases every segment's rendered position toward its grid cell."""
    for segment in chain:
        segment.rendered = approach(segment.rendered, segment.position, rate, delta_seconds)


def to_world(rendered: np.ndarray, level: float = 0.0) -> Tuple[float, float, float]:
    """Planar (x, y) -> 3-D (x, level, z)."""
    return (float(rendered[0]), float(level), float(rendered[1]))


def world_positions(chain: Chain, level: float = 0.0) -> Dict[int, Tuple[float, float, float]]:
    return {s.id: to_world(s.rendered, level) for s in chain}
