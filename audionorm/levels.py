"""Conversions between linear amplitude and decibels, and gain computation.

Every level the tool reports or targets crosses the linear/log boundary
through exactly one of these functions.
"""

import math

MEASUREMENT_FAILED = -999.0


def linear_to_db(linear: float) -> float:
    """Convert a linear amplitude ratio to dB; silence maps to -inf."""
    if linear <= 0.0:
        return -math.inf
    return 20.0 * math.log10(linear)


def db_to_linear(db: float) -> float:
    """Convert dB to a linear factor; -inf maps to 0.0 and huge values to +inf."""
    try:
        return 10.0 ** (db / 20.0)
    except OverflowError:
        return math.inf


def gain_db(current_level: float, target_level: float) -> float:
    """Gain in dB that moves ``current_level`` to ``target_level`` (same unit)."""
    return target_level - current_level


def compute_gain(current_level: float, target_level: float) -> float:
    """Linear gain factor that moves ``current_level`` to ``target_level``.

    Both levels share a unit (dBFS or LUFS). A silent measurement
    (``current_level == -inf``) yields an infinite gain.
    """
    return db_to_linear(gain_db(current_level, target_level))
