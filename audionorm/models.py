"""Data models for audionorm: stream info, sample buffers and configuration."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from audionorm.dsp import apply_gain, find_peak
from audionorm.error_codes import ErrorCode
from audionorm.exceptions import ConfigError

DEFAULT_BLOCK_SIZE = 4096
DEFAULT_PEAK_DB = -12.0
DEFAULT_LUFS = -23.0


class FadeCurve(Enum):
    """Fade envelope shapes."""
    LINEAR = 'linear'
    EXPONENTIAL = 'exponential'
    LOGARITHMIC = 'logarithmic'

    @classmethod
    def from_name(cls, name: str) -> 'FadeCurve':
        """Parse a curve name; accepts 'exp'/'log' and falls back to linear."""
        aliases = {'exp': cls.EXPONENTIAL, 'log': cls.LOGARITHMIC}
        key = (name or '').strip().lower()
        if key in aliases:
            return aliases[key]
        for curve in cls:
            if curve.value == key:
                return curve
        return cls.LINEAR


@dataclass(frozen=True)
class AudioStreamInfo:
    """Immutable description of a decoded audio stream."""
    sample_rate: int
    channel_count: int
    frame_count: int
    format: str
    subtype: str
    endian: str = 'FILE'

    @classmethod
    def from_soundfile(cls, sf_file) -> 'AudioStreamInfo':
        """Build from an open ``soundfile.SoundFile`` (or ``soundfile.info`` result)."""
        return cls(
            sample_rate=int(sf_file.samplerate),
            channel_count=int(sf_file.channels),
            frame_count=int(sf_file.frames),
            format=sf_file.format,
            subtype=sf_file.subtype,
            endian=getattr(sf_file, 'endian', 'FILE'),
        )

    @property
    def format_tag(self) -> str:
        return f"{self.format}/{self.subtype}"

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        if self.sample_rate <= 0:
            return 0.0
        return self.frame_count / self.sample_rate


@dataclass
class SampleBuffer:
    """Owned float64 samples in frame-major (interleaved) layout.

    ``samples`` has shape ``(frame_count, channel_count)``; its C-ordered
    memory is exactly the interleaved sequence ``sample[frame * channels + channel]``.
    """
    samples: np.ndarray

    def __post_init__(self):
        data = np.ascontiguousarray(self.samples, dtype=np.float64)
        if data.ndim == 1:
            data = data.reshape(-1, 1)
        if data.ndim != 2:
            raise ValueError(f"Sample buffer must be 1-D or 2-D, got {data.ndim} dimensions")
        if not data.flags.writeable:
            data = data.copy()
        self.samples = data

    @classmethod
    def from_interleaved(cls, values: Sequence[float], channels: int) -> 'SampleBuffer':
        """Build a buffer from a flat interleaved sequence."""
        flat = np.asarray(values, dtype=np.float64)
        if channels < 1 or flat.size % channels:
            raise ValueError(
                f"{flat.size} samples cannot be split into frames of {channels} channels"
            )
        return cls(flat.reshape(-1, channels))

    @property
    def frame_count(self) -> int:
        return self.samples.shape[0]

    @property
    def channel_count(self) -> int:
        return self.samples.shape[1]

    def interleaved(self) -> np.ndarray:
        """Flat view of the samples in interleaved order."""
        return self.samples.reshape(-1)

    def peak(self) -> float:
        """Maximum absolute sample value (linear)."""
        return find_peak(self.samples)

    def apply_gain(self, gain: float) -> None:
        """Multiply every sample by ``gain`` in place, hard-clipped to [-1, 1]."""
        apply_gain(self.samples, gain)


@dataclass
class NormalizeConfig:
    """Options for one normalization request."""
    target_peak_db: float = DEFAULT_PEAK_DB
    target_lufs: Optional[float] = None
    block_size: int = DEFAULT_BLOCK_SIZE
    fade_in: float = 0.0
    fade_out: float = 0.0
    fade_curve: FadeCurve = field(default=FadeCurve.LINEAR)
    verify_output: bool = True

    def __post_init__(self):
        if isinstance(self.fade_curve, str):
            self.fade_curve = FadeCurve.from_name(self.fade_curve)
        if self.block_size < 1:
            raise ConfigError(
                f"block_size must be positive, got {self.block_size}",
                error_code=str(ErrorCode.INVALID_CONFIGURATION.value),
            )
        for name in ('fade_in', 'fade_out'):
            if getattr(self, name) < 0:
                raise ConfigError(
                    f"{name} must not be negative, got {getattr(self, name)}",
                    error_code=str(ErrorCode.INVALID_CONFIGURATION.value),
                )

    @property
    def use_lufs(self) -> bool:
        """Loudness mode is selected by setting ``target_lufs``."""
        return self.target_lufs is not None

    @property
    def has_fades(self) -> bool:
        return self.fade_in > 0 or self.fade_out > 0
