"""Tests for audionorm.loudness module."""

import math
from unittest.mock import patch

import numpy as np
import pytest

from audionorm.error_codes import ErrorCode
from audionorm.exceptions import AudioFileError, MeasurementError
from audionorm.loudness import LoudnessMeter, measure_lufs, measure_peak
SAMPLE_RATE = 48000


def feed_in_blocks(data, block_size):
    with LoudnessMeter(data.shape[1], SAMPLE_RATE) as meter:
        for start in range(0, len(data), block_size):
            meter.add_frames(data[start:start + block_size])
        return meter.integrated_loudness()


class TestLoudnessMeter:
    def test_no_channels(self):
        with pytest.raises(MeasurementError) as exc:
            LoudnessMeter(0, SAMPLE_RATE)
        assert exc.value.error_code == str(ErrorCode.MEASUREMENT_INIT_ERROR.value)

    def test_invalid_sample_rate(self):
        with pytest.raises(MeasurementError):
            LoudnessMeter(2, 0)

    def test_wrong_block_shape(self):
        with LoudnessMeter(2, SAMPLE_RATE) as meter:
            with pytest.raises(MeasurementError) as exc:
                meter.add_frames(np.zeros((100, 1)))
        assert exc.value.error_code == str(ErrorCode.MEASUREMENT_FEED_ERROR.value)

    def test_mono_flat_block_accepted(self):
        with LoudnessMeter(1, SAMPLE_RATE) as meter:
            meter.add_frames(np.zeros(128))
            assert meter.frames_fed == 128

    def test_shorter_than_gating_block_is_minus_infinity(self):
        with LoudnessMeter(1, SAMPLE_RATE) as meter:
            meter.add_frames(np.full((1000, 1), 0.1))
            assert meter.integrated_loudness() == -math.inf

    def test_exactly_one_gating_block_is_measured(self, sine):
        with LoudnessMeter(2, SAMPLE_RATE) as meter:
            meter.add_frames(sine(0.1, seconds=0.4))
            assert math.isfinite(meter.integrated_loudness())

    def test_nothing_fed(self):
        with LoudnessMeter(2, SAMPLE_RATE) as meter:
            assert meter.integrated_loudness() == -math.inf

    @pytest.mark.parametrize('channels, expected', [
        (1, [0]), (2, [0, 1]), (4, [0, 1, 2]), (6, [0, 1, 2, 4, 5]), (8, [0, 1, 2, 4, 5]),
    ])
    def test_measured_channels(self, channels, expected):
        with LoudnessMeter(channels, SAMPLE_RATE) as meter:
            assert meter.measured_channels == expected

    def test_lfe_is_ignored(self, sine):
        front = sine(0.1, seconds=1.0)
        quad = np.column_stack([front, np.zeros(len(front)), np.full(len(front), 0.9)])
        quiet_lfe = quad.copy()
        quiet_lfe[:, 3] = 0.0
        assert feed_in_blocks(quad, 4096) == pytest.approx(feed_in_blocks(quiet_lfe, 4096))

    def test_unusable_after_close(self):
        meter = LoudnessMeter(2, SAMPLE_RATE)
        meter.close()
        with pytest.raises(MeasurementError) as exc:
            meter.add_frames(np.zeros((10, 2)))
        assert exc.value.error_code == str(ErrorCode.MEASUREMENT_CLOSED.value)

    def test_context_manager_releases(self):
        with LoudnessMeter(2, SAMPLE_RATE) as meter:
            meter.add_frames(np.zeros((10, 2)))
        with pytest.raises(MeasurementError):
            meter.integrated_loudness()

    def test_block_size_invariance(self, sine):
        data = sine(0.1, seconds=2.0)
        small = feed_in_blocks(data, 1024)
        large = feed_in_blocks(data, 4096)
        assert small == pytest.approx(large, abs=1e-9)

    def test_louder_signal_measures_louder(self, sine):
        quiet = feed_in_blocks(sine(0.05), 4096)
        loud = feed_in_blocks(sine(0.1), 4096)
        assert loud - quiet == pytest.approx(20 * math.log10(2), abs=0.01)

    def test_silence_is_minus_infinity(self):
        assert feed_in_blocks(np.zeros((SAMPLE_RATE, 2)), 4096) == -math.inf

    def test_caller_buffer_can_be_reused(self, sine):
        data = sine(0.1, seconds=1.0)
        with LoudnessMeter(2, SAMPLE_RATE) as meter:
            block = data.copy()
            meter.add_frames(block)
            block[:] = 0.0
            assert meter.integrated_loudness() == pytest.approx(feed_in_blocks(data, 4096))


class TestMeasureFile:
    def test_peak(self, mixed_wav):
        assert measure_peak(mixed_wav) == 0.5

    def test_peak_block_size_does_not_matter(self, mixed_wav):
        assert measure_peak(mixed_wav, block_size=7) == measure_peak(mixed_wav, block_size=4096)

    def test_peak_of_silence(self, silent_wav):
        assert measure_peak(silent_wav) == 0.0

    def test_peak_in_last_block_of_second_channel(self, write_wav):
        data = np.full((10001, 2), 0.125)
        data[-1, 1] = -0.75
        path = write_wav('late_peak.wav', data)
        assert measure_peak(path, block_size=1000) == 0.75

    def test_lufs_block_size_invariance(self, sine_wav):
        assert measure_lufs(sine_wav, block_size=1024) == pytest.approx(
            measure_lufs(sine_wav, block_size=4096), abs=1e-9)

    def test_lufs_range(self, sine_wav):
        lufs = measure_lufs(sine_wav)
        assert -40.0 < lufs < -20.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(AudioFileError):
            measure_lufs(tmp_path / 'missing.wav')
        with pytest.raises(AudioFileError):
            measure_peak(tmp_path / 'missing.wav')

    def test_meter_failure_is_measurement_error(self, sine_wav):
        with patch('audionorm.loudness.pyln.Meter') as meter_cls:
            meter_cls.return_value.integrated_loudness.side_effect = ValueError('bad audio')
            with pytest.raises(MeasurementError) as exc:
                measure_lufs(sine_wav)
        assert 'bad audio' in str(exc.value)

    def test_six_channels_measure_like_five_without_lfe(self, write_wav, sine):
        tone = sine(0.1, seconds=2.0)[:, 0]
        rng = np.random.default_rng(7)
        surround = np.column_stack([tone, tone * 0.5, tone * 0.25,
                                    rng.uniform(-0.9, 0.9, len(tone)),
                                    tone * 0.3, tone * 0.2])
        six = write_wav('six.wav', surround)
        five = write_wav('five.wav', surround[:, [0, 1, 2, 4, 5]])
        lufs = measure_lufs(six)
        assert math.isfinite(lufs)
        assert lufs == pytest.approx(measure_lufs(five), abs=1e-6)

    def test_short_clip_is_minus_infinity(self, write_wav, sine):
        path = write_wav('blip.wav', sine(0.5, seconds=0.2))
        assert measure_lufs(path) == -math.inf

    def test_empty_file_is_minus_infinity(self, write_wav):
        path = write_wav('empty.wav', np.zeros((0, 2)))
        assert measure_lufs(path) == -math.inf
