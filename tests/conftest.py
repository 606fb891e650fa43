"""Shared test fixtures for audionorm."""

import logging

import numpy as np
import pytest
import soundfile as sf


SAMPLE_RATE = 48000


def pytest_collection_modifyitems(items):
    """Auto-mark tests without integration or slow markers as unit tests."""
    for item in items:
        markers = {marker.name for marker in item.iter_markers()}
        if 'integration' not in markers and 'slow' not in markers:
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def reset_audionorm_logger():
    """Drop handlers added by setup_logging so CliRunner streams are not reused."""
    yield
    logger = logging.getLogger('audionorm')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def write_wav(tmp_path):
    """Factory writing a (frames, channels) or mono array to a WAV file in tmp_path."""
    def _write(name, data, sample_rate=SAMPLE_RATE, subtype='FLOAT'):
        path = tmp_path / name
        sf.write(str(path), np.asarray(data, dtype=np.float64), sample_rate, subtype=subtype)
        return path
    return _write


def make_sine(amplitude, seconds=3.0, channels=2, freq=997.0, sample_rate=SAMPLE_RATE):
    t = np.arange(int(seconds * sample_rate)) / sample_rate
    tone = amplitude * np.sin(2 * np.pi * freq * t)
    return np.column_stack([tone] * channels)


@pytest.fixture
def constant_wav(write_wav):
    """Mono file whose samples are all 0.5."""
    return write_wav('constant.wav', np.full(SAMPLE_RATE, 0.5))


@pytest.fixture
def silent_wav(write_wav):
    """Mono file of one second of digital silence."""
    return write_wav('silent.wav', np.zeros(SAMPLE_RATE))


@pytest.fixture
def sine_wav(write_wav):
    """Quiet stereo tone, three seconds long."""
    return write_wav('sine.wav', make_sine(0.05))


@pytest.fixture
def mixed_wav(write_wav):
    """Mono file with a known 0.5 peak on a negative sample."""
    data = np.tile([0.1, -0.5, 0.25, -0.05], SAMPLE_RATE // 4)
    return write_wav('mixed.wav', data)


@pytest.fixture
def sine():
    """Factory for (frames, channels) sine-tone arrays at SAMPLE_RATE."""
    return make_sine
