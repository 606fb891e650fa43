"""Step timing for a single normalization request."""

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict

logger = logging.getLogger(__name__)


class MetricsCollector:
    """Collects per-step durations and frame counts for one normalization."""

    def __init__(self) -> None:
        self.steps: Dict[str, float] = {}
        self.frames_processed: int = 0
        self.sample_rate: int = 0

    @contextmanager
    def timer(self, name: str):
        """Context manager to time a named operation."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.steps[name] = time.perf_counter() - start

    def record_step(self, name: str, duration: float) -> None:
        """Manually record a step duration in seconds."""
        self.steps[name] = duration

    def set_frames(self, frames: int, sample_rate: int) -> None:
        self.frames_processed = frames
        self.sample_rate = sample_rate

    def get_summary(self) -> Dict[str, Any]:
        """Return aggregated metrics; ``realtime_factor`` is audio seconds per wall second."""
        total_time = sum(self.steps.values())
        audio_seconds = self.frames_processed / self.sample_rate if self.sample_rate else 0.0
        return {
            "steps": dict(self.steps),
            "frames_processed": self.frames_processed,
            "audio_seconds": audio_seconds,
            "realtime_factor": audio_seconds / total_time if total_time > 0 else 0.0,
            "total_time": total_time,
        }

    def log_summary(self) -> None:
        summary = self.get_summary()
        steps = ", ".join(f"{name}={secs * 1000:.1f}ms" for name, secs in summary["steps"].items())
        logger.debug(
            "Processed %d frames (%.2fs audio) in %.3fs [%s]",
            summary["frames_processed"], summary["audio_seconds"], summary["total_time"], steps,
        )

    def reset(self) -> None:
        """Clear all collected metrics."""
        self.steps.clear()
        self.frames_processed = 0
        self.sample_rate = 0
