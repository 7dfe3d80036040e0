from __future__ import annotations

import logging
import math
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 44_100
FULL_SCALE = 32767


class Waveform(Enum):
    SINE = "sine"
    SQUARE = "square"


class SweepModel(Enum):
    """How the phase of a linear sweep is derived from elapsed time.

    DIRECT multiplies the instantaneous frequency by the elapsed time, which
    makes the audible frequency rise twice as fast as the nominal ramp.
    INTEGRATED uses the exact quadratic phase of a linear chirp.
    """

    DIRECT = "direct"
    INTEGRATED = "integrated"


def _is_integer(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class SweepParameters:
    start_frequency: int
    end_frequency: int
    duration: float
    waveform: Waveform = Waveform.SINE
    sample_rate: int = DEFAULT_SAMPLE_RATE
    model: SweepModel = SweepModel.DIRECT
    level_db: float = 0.0

    def __post_init__(self) -> None:
        for name in ("start_frequency", "end_frequency"):
            value = getattr(self, name)
            if not _is_integer(value) or value <= 0:
                raise ValueError(f"{name} must be a positive integer (Hz), got {value!r}.")
        if not math.isfinite(self.duration) or self.duration <= 0:
            raise ValueError(f"duration must be a positive finite number of seconds, got {self.duration!r}.")
        if not _is_integer(self.sample_rate) or self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be a positive integer (Hz), got {self.sample_rate!r}.")
        if not math.isfinite(self.level_db) or self.level_db > 0:
            raise ValueError(f"level_db must be <= 0 dB, got {self.level_db!r}.")
        if not isinstance(self.waveform, Waveform):
            raise ValueError(f"Unsupported waveform: {self.waveform!r}")
        if not isinstance(self.model, SweepModel):
            raise ValueError(f"Unsupported sweep model: {self.model!r}")

    @property
    def total_samples(self) -> int:
        return int(self.sample_rate * self.duration)

    @property
    def frequency_step(self) -> float:
        """Frequency change per second of the linear ramp."""
        return (self.end_frequency - self.start_frequency) / self.duration


@dataclass(frozen=True)
class SampleBuffer:
    """Immutable run of signed 16-bit samples at a known sample rate."""

    samples: tuple[int, ...]
    sample_rate: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples", tuple(self.samples))

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[int]:
        return iter(self.samples)

    def __getitem__(self, index: int) -> int:
        if not _is_integer(index):
            raise TypeError(f"Sample index must be an integer, got {type(index).__name__}.")
        if index < 0 or index >= len(self.samples):
            raise IndexError(f"Sample index {index} out of range for buffer of {len(self.samples)} samples.")
        return self.samples[index]

    @property
    def duration(self) -> float:
        return len(self.samples) / self.sample_rate

    @property
    def size_bytes(self) -> int:
        return len(self.samples) * 2

    def to_bytes(self) -> bytes:
        return struct.pack(f"<{len(self.samples)}h", *self.samples)


def instantaneous_frequency(params: SweepParameters, t: float) -> float:
    return params.start_frequency + params.frequency_step * t


def phase_angle(params: SweepParameters, t: float) -> float:
    if params.model is SweepModel.INTEGRATED:
        return 2.0 * math.pi * (params.start_frequency * t + 0.5 * params.frequency_step * t * t)
    return 2.0 * math.pi * (instantaneous_frequency(params, t) * t)


def normalize(waveform: Waveform, angle: float) -> float:
    value = math.sin(angle)
    if waveform is Waveform.SQUARE:
        # Zero crossings map to the negative rail.
        return 1.0 if value > 0 else -1.0
    return value


def quantize(normalized: float) -> int:
    # int() truncates toward zero.
    return int(normalized * FULL_SCALE)


def _level_gain(level_db: float) -> float:
    if level_db < 0:
        return math.pow(10.0, 0.05 * level_db)
    return 1.0


def generate_sweep(params: SweepParameters) -> SampleBuffer:
    total_samples = params.total_samples
    gain = _level_gain(params.level_db)
    samples: list[int] = []
    for index in range(total_samples):
        t = index / params.sample_rate
        normalized = normalize(params.waveform, phase_angle(params, t))
        samples.append(quantize(normalized * gain))

    logger.debug(
        "Generated %s %s sweep %d Hz -> %d Hz over %.3fs at %d Hz: %d samples",
        params.model.value,
        params.waveform.value,
        params.start_frequency,
        params.end_frequency,
        params.duration,
        params.sample_rate,
        total_samples,
    )
    return SampleBuffer(samples=tuple(samples), sample_rate=params.sample_rate)


def generate_sweep_samples(
    start_frequency: int,
    end_frequency: int,
    duration: float,
    waveform: Waveform = Waveform.SINE,
    *,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    model: SweepModel = SweepModel.DIRECT,
    level_db: float = 0.0,
) -> SampleBuffer:
    params = SweepParameters(
        start_frequency=start_frequency,
        end_frequency=end_frequency,
        duration=duration,
        waveform=waveform,
        sample_rate=sample_rate,
        model=model,
        level_db=level_db,
    )
    return generate_sweep(params)


def generate_tone(
    frequency: int,
    *,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    level_db: float = 0.0,
    waveform: Waveform = Waveform.SINE,
) -> SampleBuffer:
    """Render a single period of a steady tone.

    The period length is ``sample_rate // frequency`` samples, so the
    rendered pitch is rounded to the nearest whole-sample period. A square
    period sits on the positive rail for its first half.
    """
    if not _is_integer(frequency) or frequency <= 0:
        raise ValueError(f"frequency must be a positive integer (Hz), got {frequency!r}.")
    if not _is_integer(sample_rate) or sample_rate <= 0:
        raise ValueError(f"sample_rate must be a positive integer (Hz), got {sample_rate!r}.")
    if not math.isfinite(level_db) or level_db > 0:
        raise ValueError(f"level_db must be <= 0 dB, got {level_db!r}.")

    length = sample_rate // frequency
    if length < 2:
        raise ValueError(
            f"Tone of {frequency} Hz is too high for sample rate {sample_rate} Hz "
            f"(period of {length} samples)."
        )

    gain = _level_gain(level_db)
    samples: list[int] = []
    for index in range(length):
        if waveform is Waveform.SQUARE:
            normalized = 1.0 if index < length / 2 else -1.0
        else:
            normalized = math.sin(2.0 * math.pi * index / length)
        samples.append(quantize(normalized * gain))
    return SampleBuffer(samples=tuple(samples), sample_rate=sample_rate)
