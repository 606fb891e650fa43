"""Audio file decode/encode through soundfile (libsndfile).

Every handle opened here is closed on every exit path; libsndfile failures
surface as ``AudioFileError`` carrying the library's diagnostic.
"""

import logging
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Iterator, Tuple, Union

import numpy as np
import soundfile as sf

from audionorm.error_codes import ErrorCode
from audionorm.exceptions import AudioFileError
from audionorm.models import AudioStreamInfo, SampleBuffer

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Decoded MP3 written to a .wav path is stored as plain 16-bit PCM.
LEGACY_LOSSY_SUFFIX = '.mp3'
LOSSLESS_CONTAINER_SUFFIX = '.wav'
LOSSLESS_FORMAT = 'WAV'
LOSSLESS_SUBTYPE = 'PCM_16'

# libsndfile SF_ERR_UNRECOGNISED_FORMAT
SF_ERR_UNRECOGNISED_FORMAT = 1


def _read_error(path: PathLike, exc: Exception) -> AudioFileError:
    if not Path(path).exists():
        code = ErrorCode.FILE_NOT_FOUND
    elif getattr(exc, 'code', None) == SF_ERR_UNRECOGNISED_FORMAT:
        code = ErrorCode.INVALID_FILE_FORMAT
    else:
        code = ErrorCode.FILE_READ_ERROR
    return AudioFileError(
        f"Cannot open input file: {path}",
        error_code=str(code.value),
        details={'path': str(path)},
        original_error=exc,
    )


@contextmanager
def open_for_read(path: PathLike) -> Iterator[sf.SoundFile]:
    """Open ``path`` for decoding and close it when the block exits."""
    try:
        handle = sf.SoundFile(str(path))
    except (sf.SoundFileError, OSError) as e:
        logger.error("Cannot open input file: %s (%s)", path, e)
        raise _read_error(path, e)
    try:
        yield handle
    finally:
        handle.close()


def read_info(path: PathLike) -> AudioStreamInfo:
    """Return the stream info of ``path`` without decoding samples."""
    with open_for_read(path) as handle:
        return AudioStreamInfo.from_soundfile(handle)


def iter_blocks(handle: sf.SoundFile, block_size: int) -> Iterator[np.ndarray]:
    """Yield ``(frames, channels)`` float64 blocks of at most ``block_size`` frames."""
    try:
        for block in handle.blocks(blocksize=block_size, dtype='float64', always_2d=True):
            yield block
    except sf.SoundFileError as e:
        raise AudioFileError(
            f"Failed to decode {handle.name}: {e}",
            error_code=str(ErrorCode.FILE_READ_ERROR.value),
            original_error=e,
        )


def decode(path: PathLike) -> Tuple[AudioStreamInfo, SampleBuffer]:
    """Decode the whole file into memory.

    A short read is logged and tolerated; the returned buffer holds what was
    actually decoded.
    """
    with open_for_read(path) as handle:
        info = AudioStreamInfo.from_soundfile(handle)
        logger.debug("Input file info:")
        logger.debug("  Sample rate: %d Hz", info.sample_rate)
        logger.debug("  Channels: %d", info.channel_count)
        logger.debug("  Frames: %d", info.frame_count)
        logger.debug("  Duration: %.2f seconds", info.duration)
        logger.debug("  Format: %s", info.format_tag)
        try:
            data = handle.read(frames=info.frame_count, dtype='float64', always_2d=True)
        except sf.SoundFileError as e:
            raise AudioFileError(
                f"Failed to decode {path}: {e}",
                error_code=str(ErrorCode.FILE_READ_ERROR.value),
                original_error=e,
            )

    if len(data) != info.frame_count:
        logger.warning("Read %d frames, expected %d", len(data), info.frame_count)
    return info, SampleBuffer(data)


def resolve_output_info(
    input_path: PathLike, output_path: PathLike, info: AudioStreamInfo,
) -> AudioStreamInfo:
    """Pick the encoding for the output file.

    The input's format is kept as-is, except that an MP3 input written to a
    ``.wav`` output becomes 16-bit PCM WAV.
    """
    is_mp3_input = Path(input_path).suffix.lower() == LEGACY_LOSSY_SUFFIX
    is_wav_output = Path(output_path).suffix.lower() == LOSSLESS_CONTAINER_SUFFIX
    if is_mp3_input and is_wav_output:
        logger.debug("Converting MP3 to standard 16-bit WAV")
        return replace(info, format=LOSSLESS_FORMAT, subtype=LOSSLESS_SUBTYPE, endian='FILE')
    return info


def encode(path: PathLike, buffer: SampleBuffer, info: AudioStreamInfo) -> int:
    """Write ``buffer`` to ``path`` using ``info``'s format; return frames written.

    A partially written file is left in place on failure.
    """
    try:
        with sf.SoundFile(
            str(path), 'w',
            samplerate=info.sample_rate,
            channels=buffer.channel_count,
            format=info.format,
            subtype=info.subtype,
            endian=info.endian,
        ) as handle:
            handle.write(buffer.samples)
            written = handle.frames
    except (sf.SoundFileError, OSError, ValueError, TypeError) as e:
        logger.error("Cannot create output file: %s (%s)", path, e)
        raise AudioFileError(
            f"Cannot create output file: {path}",
            error_code=str(ErrorCode.FILE_WRITE_ERROR.value),
            details={'path': str(path), 'format': info.format_tag},
            original_error=e,
        )

    if written != buffer.frame_count:
        logger.warning("Wrote %d frames, expected %d", written, buffer.frame_count)
    return written
