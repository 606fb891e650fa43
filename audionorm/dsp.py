"""Peak detection and clip-safe gain application on interleaved sample buffers."""

import numpy as np

CLIP_LIMIT = 1.0


def find_peak(samples: np.ndarray) -> float:
    """Return the maximum absolute sample value, 0.0 for an empty buffer."""
    if samples.size == 0:
        return 0.0
    return float(np.max(np.abs(samples)))


def running_peak(blocks) -> float:
    """Fold ``find_peak`` over an iterable of blocks."""
    peak = 0.0
    for block in blocks:
        peak = max(peak, find_peak(block))
    return peak


def apply_gain(samples: np.ndarray, gain: float) -> np.ndarray:
    """Scale ``samples`` in place by ``gain`` and hard-clip to [-1.0, 1.0].

    Zero samples are never multiplied, so an infinite gain saturates every
    non-zero sample to the clip bound and leaves digital silence untouched.
    """
    with np.errstate(over='ignore', invalid='ignore'):
        np.multiply(samples, gain, out=samples, where=samples != 0.0)
    np.clip(samples, -CLIP_LIMIT, CLIP_LIMIT, out=samples)
    return samples
