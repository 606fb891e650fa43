"""Peak and LUFS normalization of audio files.

Both modes share one shape: decode the whole input, measure it, turn the
distance to the target into a linear gain, apply it with hard clipping,
re-encode and finally re-measure the output for reporting.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from audionorm.codec import decode, encode, resolve_output_info
from audionorm.exceptions import AudioNormError
from audionorm.fade import apply_fades
from audionorm.levels import MEASUREMENT_FAILED, compute_gain, gain_db, linear_to_db
from audionorm.loudness import measure_lufs, measure_peak
from audionorm.metrics import MetricsCollector
from audionorm.models import NormalizeConfig, SampleBuffer

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class AudioNormalizer:
    """Peak- or loudness-based normalizer for single audio files."""

    def __init__(self, config: Optional[NormalizeConfig] = None) -> None:
        self.config = config or NormalizeConfig()
        self.metrics = MetricsCollector()
        self.last_output_level: Optional[float] = None

    def get_peak_level(self, path: PathLike) -> float:
        """Peak level of ``path`` in dBFS, -inf for digital silence.

        Raises ``AudioFileError`` if the file cannot be opened or decoded.
        """
        return linear_to_db(measure_peak(path, self.config.block_size))

    def get_lufs_level(self, path: PathLike) -> float:
        """Integrated loudness of ``path`` in LUFS.

        Raises ``AudioFileError`` or ``MeasurementError``.
        """
        return measure_lufs(path, self.config.block_size)

    def get_peak_level_or_sentinel(self, path: PathLike) -> float:
        """Like ``get_peak_level`` but returns ``MEASUREMENT_FAILED`` on error."""
        try:
            return self.get_peak_level(path)
        except AudioNormError as e:
            logger.error("Cannot analyze file %s: %s", path, e.message)
            return MEASUREMENT_FAILED

    def get_lufs_level_or_sentinel(self, path: PathLike) -> float:
        """Like ``get_lufs_level`` but returns ``MEASUREMENT_FAILED`` on error."""
        try:
            return self.get_lufs_level(path)
        except AudioNormError as e:
            logger.error("Cannot analyze LUFS level of file %s: %s", path, e.message)
            return MEASUREMENT_FAILED

    def normalize(self, input_path: PathLike, output_path: PathLike) -> bool:
        """Normalize using the mode and target selected by the config."""
        if self.config.use_lufs:
            return self.normalize_by_lufs(input_path, output_path, self.config.target_lufs)
        return self.normalize_by_peak(input_path, output_path, self.config.target_peak_db)

    def normalize_by_peak(
        self, input_path: PathLike, output_path: PathLike, target_peak_db: float,
    ) -> bool:
        """Scale ``input_path`` so its sample peak reaches ``target_peak_db``."""
        def measure(path: PathLike, buffer: SampleBuffer) -> float:
            return linear_to_db(buffer.peak())

        return self._process(
            input_path, output_path, target_peak_db,
            measure=measure, verify=self.get_peak_level, label='peak level', unit='dB',
        )

    def normalize_by_lufs(
        self, input_path: PathLike, output_path: PathLike, target_lufs: float,
    ) -> bool:
        """Scale ``input_path`` so its integrated loudness reaches ``target_lufs``.

        Loudness is measured on a second, streamed decode of the input.
        """
        def measure(path: PathLike, buffer: SampleBuffer) -> float:
            return self.get_lufs_level(path)

        return self._process(
            input_path, output_path, target_lufs,
            measure=measure, verify=self.get_lufs_level, label='LUFS level', unit='LUFS',
        )

    def _process(
        self,
        input_path: PathLike,
        output_path: PathLike,
        target: float,
        measure: Callable[[PathLike, SampleBuffer], float],
        verify: Callable[[PathLike], float],
        label: str,
        unit: str,
    ) -> bool:
        self.metrics.reset()
        self.last_output_level = None

        try:
            with self.metrics.timer('decode'):
                info, buffer = decode(input_path)
            self.metrics.set_frames(buffer.frame_count, info.sample_rate)

            with self.metrics.timer('analyze'):
                current = measure(input_path, buffer)
        except AudioNormError as e:
            logger.error("Failed to measure current %s of %s: %s", label, input_path, e.message)
            return False

        gain = compute_gain(current, target)
        logger.debug("Current %s: %.2f %s", label, current, unit)
        logger.debug("Target %s: %.2f %s", label, target, unit)
        logger.debug("Required gain: %.2f dB (%.3fx)", gain_db(current, target), gain)

        with self.metrics.timer('apply_gain'):
            buffer.apply_gain(gain)
            if self.config.has_fades:
                apply_fades(
                    buffer.samples, info.sample_rate,
                    self.config.fade_in, self.config.fade_out, self.config.fade_curve,
                )

        out_info = resolve_output_info(input_path, output_path, info)
        try:
            with self.metrics.timer('encode'):
                encode(output_path, buffer, out_info)
        except AudioNormError as e:
            logger.error("Failed to write %s: %s", output_path, e.message)
            return False

        if self.config.verify_output:
            self._verify_output(output_path, verify, label, unit)

        self.metrics.log_summary()
        logger.debug("Normalization completed successfully!")
        return True

    def _verify_output(
        self, output_path: PathLike, verify: Callable[[PathLike], float], label: str, unit: str,
    ) -> None:
        try:
            with self.metrics.timer('verify'):
                self.last_output_level = verify(output_path)
        except AudioNormError as e:
            logger.warning("Could not verify output %s of %s: %s", label, output_path, e.message)
            return
        logger.debug("Output %s: %.2f %s", label, self.last_output_level, unit)
