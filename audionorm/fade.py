"""Fade-in and fade-out envelopes applied to sample buffers in place."""

import logging

import numpy as np

from audionorm.models import FadeCurve

logger = logging.getLogger(__name__)

_LOG_FLOOR = 0.1


def fade_in_gain(curve: FadeCurve, t: np.ndarray) -> np.ndarray:
    """Envelope rising from 0 at ``t=0`` to 1 at ``t=1``."""
    if curve is FadeCurve.EXPONENTIAL:
        return t ** 2
    if curve is FadeCurve.LOGARITHMIC:
        return 1.0 - np.log(_LOG_FLOOR + (1.0 - _LOG_FLOOR) * t) / np.log(_LOG_FLOOR)
    return t


def fade_out_gain(curve: FadeCurve, t: np.ndarray) -> np.ndarray:
    """Mirror of ``fade_in_gain``: 1 at ``t=0`` falling to 0 at ``t=1``."""
    return fade_in_gain(curve, 1.0 - t)


def apply_fades(
    samples: np.ndarray,
    sample_rate: int,
    fade_in: float = 0.0,
    fade_out: float = 0.0,
    curve: FadeCurve = FadeCurve.LINEAR,
) -> np.ndarray:
    """Apply fades of ``fade_in``/``fade_out`` seconds to a (frames, channels) buffer."""
    total_frames = samples.shape[0]
    in_frames = min(int(round(fade_in * sample_rate)), total_frames)
    out_frames = min(int(round(fade_out * sample_rate)), total_frames)

    if in_frames > 0:
        t = np.arange(in_frames, dtype=np.float64) / in_frames
        samples[:in_frames] *= fade_in_gain(curve, t)[:, np.newaxis]

    if out_frames > 0:
        t = np.arange(out_frames, dtype=np.float64) / out_frames
        samples[total_frames - out_frames:] *= fade_out_gain(curve, t)[:, np.newaxis]

    if in_frames or out_frames:
        logger.debug(
            "Applied %s fades: in=%d frames, out=%d frames", curve.value, in_frames, out_frames,
        )
    return samples
