"""Streamed peak and EBU R128 integrated-loudness measurement of audio files.

``LoudnessMeter`` is the measurement state: created per call, fed every
decoded block in order, queried once and then released. The gating and
K-weighting maths are delegated to pyloudnorm.
"""

import logging
import math
from pathlib import Path
from typing import List, Union

import numpy as np
import pyloudnorm as pyln

from audionorm.codec import iter_blocks, open_for_read
from audionorm.dsp import running_peak
from audionorm.error_codes import ErrorCode
from audionorm.exceptions import MeasurementError
from audionorm.models import DEFAULT_BLOCK_SIZE

logger = logging.getLogger(__name__)

# Default channel map: 0=L, 1=R, 2=C, 3=LFE (unused), 4=Ls, 5=Rs, 6+ unused.
# Kept channels are passed on in L, R, C, Ls, Rs order, matching pyloudnorm's weights.
MEASURED_CHANNELS = (0, 1, 2, 4, 5)
GATING_BLOCK_SECONDS = 0.400


class LoudnessMeter:
    """Integrated loudness (mode I) accumulator for one measurement."""

    def __init__(self, channels: int, sample_rate: int) -> None:
        if channels < 1:
            raise MeasurementError(
                f"Cannot initialize loudness meter for {channels} channels",
                error_code=str(ErrorCode.MEASUREMENT_INIT_ERROR.value),
            )
        if sample_rate <= 0:
            raise MeasurementError(
                f"Cannot initialize loudness meter at {sample_rate} Hz",
                error_code=str(ErrorCode.MEASUREMENT_INIT_ERROR.value),
            )
        try:
            self._meter = pyln.Meter(sample_rate, block_size=GATING_BLOCK_SECONDS)
        except (ValueError, ZeroDivisionError) as e:
            raise MeasurementError(
                "Cannot initialize loudness meter",
                error_code=str(ErrorCode.MEASUREMENT_INIT_ERROR.value),
                original_error=e,
            )
        self.channels = channels
        self.measured_channels = [c for c in MEASURED_CHANNELS if c < channels]
        self.sample_rate = sample_rate
        self.frames_fed = 0
        self._blocks: List[np.ndarray] = []
        self._closed = False

    def __enter__(self) -> 'LoudnessMeter':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise MeasurementError(
                "Loudness meter has already been released",
                error_code=str(ErrorCode.MEASUREMENT_CLOSED.value),
            )

    def add_frames(self, frames: np.ndarray) -> None:
        """Feed a ``(frames, channels)`` block, or a flat block for mono input."""
        self._check_open()
        block = np.array(frames, dtype=np.float64, copy=True)
        if block.ndim == 1 and self.channels == 1:
            block = block.reshape(-1, 1)
        if block.ndim != 2 or block.shape[1] != self.channels:
            raise MeasurementError(
                f"Failed to add frames to loudness meter: expected {self.channels} "
                f"channels, got block of shape {block.shape}",
                error_code=str(ErrorCode.MEASUREMENT_FEED_ERROR.value),
            )
        if block.shape[0] == 0:
            return
        self._blocks.append(block[:, self.measured_channels])
        self.frames_fed += block.shape[0]

    def integrated_loudness(self) -> float:
        """Integrated loudness in LUFS of everything fed so far.

        Digital silence (every gating block below the absolute gate) is -inf.
        So is audio shorter than one gating block, which no block can pass.
        """
        self._check_open()
        if self.frames_fed < GATING_BLOCK_SECONDS * self.sample_rate:
            return -math.inf
        data = np.concatenate(self._blocks, axis=0)
        try:
            with np.errstate(divide='ignore', invalid='ignore'):
                lufs = float(self._meter.integrated_loudness(data))
        except ValueError as e:
            raise MeasurementError(
                f"Failed to calculate LUFS loudness: {e}",
                error_code=str(ErrorCode.MEASUREMENT_QUERY_ERROR.value),
                details={'frames': self.frames_fed, 'sample_rate': self.sample_rate},
                original_error=e,
            )
        if math.isnan(lufs):
            return -math.inf
        return lufs

    def close(self) -> None:
        """Release the accumulated audio; the meter cannot be used afterwards."""
        self._blocks.clear()
        self._closed = True


def measure_peak(path: Union[str, Path], block_size: int = DEFAULT_BLOCK_SIZE) -> float:
    """Stream ``path`` and return its sample peak as a linear amplitude."""
    with open_for_read(path) as handle:
        return running_peak(iter_blocks(handle, block_size))


def measure_lufs(path: Union[str, Path], block_size: int = DEFAULT_BLOCK_SIZE) -> float:
    """Stream ``path`` through a fresh ``LoudnessMeter`` and return its LUFS."""
    with open_for_read(path) as handle:
        with LoudnessMeter(handle.channels, handle.samplerate) as meter:
            for block in iter_blocks(handle, block_size):
                meter.add_frames(block)
            if meter.frames_fed != handle.frames:
                logger.warning(
                    "Measured %d frames, expected %d", meter.frames_fed, handle.frames,
                )
            return meter.integrated_loudness()
