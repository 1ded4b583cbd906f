"""
Three-phase to two-axis transforms.

The projection is the amplitude-invariant Clarke transform applied in a
fixed frame (no rotor-angle tracking):

    x_q = 2/3 * (x_a - (x_b + x_c) / 2)
    x_d = (x_b - x_c) / √3
"""

from typing import Sequence, Tuple
import math

SQRT3 = math.sqrt(3.0)
TWO_PI_OVER_3 = 2.0 * math.pi / 3.0


def clarke_projection(phases: Sequence[float]) -> Tuple[float, float]:
    """
    Project three phase quantities onto two orthogonal axes.

    Returns:
        (first_axis, second_axis). The motor reads these as (q, d); the
        space-vector modulator reads them as (α, β).
    """
    a, b, c = phases
    first = (2.0 / 3.0) * (a - 0.5 * (b + c))
    second = (b - c) / SQRT3
    return first, second


def inverse_park(v_d: float, v_q: float, theta: float) -> Tuple[float, float, float]:
    """
    Rotating-frame d/q quantities back to three phases at angle ``theta``.

    v_k = v_d cos(θ - φ_k) - v_q sin(θ - φ_k),  φ = 0, 2π/3, -2π/3
    """
    return (
        v_d * math.cos(theta) - v_q * math.sin(theta),
        v_d * math.cos(theta - TWO_PI_OVER_3) - v_q * math.sin(theta - TWO_PI_OVER_3),
        v_d * math.cos(theta + TWO_PI_OVER_3) - v_q * math.sin(theta + TWO_PI_OVER_3),
    )


def balanced_set(amplitude: float, theta: float, offset: float = 0.0) -> Tuple[float, float, float]:
    """Balanced three-phase cosine set around ``offset``."""
    return (
        offset + amplitude * math.cos(theta),
        offset + amplitude * math.cos(theta - TWO_PI_OVER_3),
        offset + amplitude * math.cos(theta + TWO_PI_OVER_3),
    )
