from __future__ import annotations

import logging
import struct
import wave
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from audio_sweep_toolbox.sweep import SampleBuffer

logger = logging.getLogger(__name__)

DEFAULT_BITS_PER_SAMPLE = 16
DEFAULT_CHANNEL_COUNT = 1
HEADER_SIZE = 44
PCM_FORMAT = 1
FMT_CHUNK_SIZE = 16

_HEADER_STRUCT = struct.Struct("<4sI8sIHHIIHH4sI")
_INT16_MIN = -32768
_INT16_MAX = 32767
_UINT16_MAX = 0xFFFF
_UINT32_MAX = 0xFFFFFFFF


class WavWriteError(OSError):
    """The destination file could not be opened or written."""


@dataclass(frozen=True)
class AudioFormat:
    sample_rate: int
    bits_per_sample: int = DEFAULT_BITS_PER_SAMPLE
    channel_count: int = DEFAULT_CHANNEL_COUNT

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be > 0, got {self.sample_rate}.")
        if self.bits_per_sample <= 0 or self.bits_per_sample % 8:
            raise ValueError(f"bits_per_sample must be a positive multiple of 8, got {self.bits_per_sample}.")
        if self.channel_count <= 0:
            raise ValueError(f"channel_count must be > 0, got {self.channel_count}.")
        for name, value, limit in (
            ("sample_rate", self.sample_rate, _UINT32_MAX),
            ("byte_rate", self.byte_rate, _UINT32_MAX),
            ("channel_count", self.channel_count, _UINT16_MAX),
            ("bits_per_sample", self.bits_per_sample, _UINT16_MAX),
            ("block_align", self.block_align, _UINT16_MAX),
        ):
            if value > limit:
                raise ValueError(f"{name} {value} does not fit in its {limit.bit_length()}-bit header field.")

    @property
    def block_align(self) -> int:
        return self.channel_count * self.bits_per_sample // 8

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align


@dataclass(frozen=True)
class WavHeader:
    riff_size: int
    fmt_chunk_size: int
    audio_format: int
    channel_count: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int

    @property
    def file_size(self) -> int:
        return HEADER_SIZE + self.data_size


def build_header(audio_format: AudioFormat, frame_count: int) -> bytes:
    if frame_count < 0:
        raise ValueError(f"frame_count must be >= 0, got {frame_count}.")
    data_size = frame_count * audio_format.block_align
    if 36 + data_size > _UINT32_MAX:
        raise ValueError(f"data_size {data_size} does not fit in the 32-bit RIFF size field.")
    return _HEADER_STRUCT.pack(
        b"RIFF",
        36 + data_size,
        b"WAVEfmt ",
        FMT_CHUNK_SIZE,
        PCM_FORMAT,
        audio_format.channel_count,
        audio_format.sample_rate,
        audio_format.byte_rate,
        audio_format.block_align,
        audio_format.bits_per_sample,
        b"data",
        data_size,
    )


def encode_samples(samples: Sequence[int]) -> bytes:
    for index, value in enumerate(samples):
        if not _INT16_MIN <= value <= _INT16_MAX:
            raise ValueError(f"Sample {index} ({value}) does not fit in signed 16 bits.")
    return struct.pack(f"<{len(samples)}h", *samples)


def write_wav(
    destination: Path | str,
    sample_rate: int,
    bits_per_sample: int,
    channel_count: int,
    samples: Sequence[int] | SampleBuffer,
) -> Path:
    audio_format = AudioFormat(
        sample_rate=sample_rate,
        bits_per_sample=bits_per_sample,
        channel_count=channel_count,
    )
    if audio_format.bits_per_sample != DEFAULT_BITS_PER_SAMPLE:
        raise ValueError(f"Only 16-bit PCM payloads are supported, got {bits_per_sample} bits.")

    if isinstance(samples, SampleBuffer) and samples.sample_rate != audio_format.sample_rate:
        raise ValueError(
            f"Buffer sample rate {samples.sample_rate} Hz does not match "
            f"requested sample_rate {audio_format.sample_rate} Hz."
        )
    values = samples.samples if isinstance(samples, SampleBuffer) else tuple(samples)
    if len(values) % audio_format.channel_count:
        raise ValueError(
            f"Sample count {len(values)} is not a whole number of "
            f"{audio_format.channel_count}-channel frames."
        )
    frame_count = len(values) // audio_format.channel_count
    header = build_header(audio_format, frame_count)
    payload = encode_samples(values)

    path = Path(destination)
    try:
        with path.open("wb") as handle:
            handle.write(header)
            handle.write(payload)
    except OSError as exc:
        logger.error("Failed to write WAV file %s: %s", path, exc)
        raise WavWriteError(exc.errno, f"Cannot write WAV file {path}: {exc.strerror or exc}") from exc

    logger.info(
        "Wrote %s (%d frames, %d Hz, %d-bit, %d channel(s), %d bytes)",
        path,
        frame_count,
        audio_format.sample_rate,
        audio_format.bits_per_sample,
        audio_format.channel_count,
        len(header) + len(payload),
    )
    return path.resolve()


def write_sweep_wav(destination: Path | str, buffer: SampleBuffer) -> Path:
    return write_wav(
        destination,
        sample_rate=buffer.sample_rate,
        bits_per_sample=DEFAULT_BITS_PER_SAMPLE,
        channel_count=DEFAULT_CHANNEL_COUNT,
        samples=buffer,
    )


def read_wav_header(path: Path | str) -> WavHeader:
    path = Path(path)
    with path.open("rb") as handle:
        raw = handle.read(HEADER_SIZE)
    if len(raw) < HEADER_SIZE:
        raise ValueError(f"File too short for a WAV header ({len(raw)} bytes): {path}")

    (
        riff_tag,
        riff_size,
        wave_tag,
        fmt_chunk_size,
        audio_format,
        channel_count,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        data_tag,
        data_size,
    ) = _HEADER_STRUCT.unpack(raw)
    if riff_tag != b"RIFF" or wave_tag != b"WAVEfmt " or data_tag != b"data":
        raise ValueError(f"Not a canonical PCM WAV file: {path}")

    return WavHeader(
        riff_size=riff_size,
        fmt_chunk_size=fmt_chunk_size,
        audio_format=audio_format,
        channel_count=channel_count,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
        data_size=data_size,
    )


def read_wav_samples(path: Path | str) -> tuple[list[int], int]:
    with wave.open(str(path), "rb") as wave_file:
        sample_width = wave_file.getsampwidth()
        sample_rate = wave_file.getframerate()
        frame_count = wave_file.getnframes()
        frames = wave_file.readframes(frame_count)

    if sample_width != 2:
        raise ValueError(f"Unsupported WAV sample width: {sample_width} bytes.")

    values = [
        int.from_bytes(frames[index : index + 2], byteorder="little", signed=True)
        for index in range(0, len(frames), 2)
    ]
    return values, sample_rate
