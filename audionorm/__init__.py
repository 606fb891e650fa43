"""audionorm: peak and EBU R128 loudness normalization for audio files."""

__version__ = "1.0.0"

__all__ = [
    "audio_normalizer",
    "cli",
    "codec",
    "dsp",
    "error_codes",
    "exceptions",
    "fade",
    "levels",
    "log",
    "loudness",
    "metrics",
    "models",
]
