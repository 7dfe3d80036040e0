from __future__ import annotations

import logging
from pathlib import Path

from audio_sweep_toolbox.sweep import SweepParameters, Waveform, generate_sweep
from audio_sweep_toolbox.wav import (
    DEFAULT_BITS_PER_SAMPLE,
    DEFAULT_CHANNEL_COUNT,
    HEADER_SIZE,
    WavWriteError,
    write_wav,
)

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = Path("sweep.wav")
DURATION_SECONDS = 10.0
START_FREQUENCY = 20
END_FREQUENCY = 20_000
SAMPLE_RATE = 44_100


def run_default_sweep(output_path: Path = DEFAULT_OUTPUT_PATH) -> dict[str, object]:
    params = SweepParameters(
        start_frequency=START_FREQUENCY,
        end_frequency=END_FREQUENCY,
        duration=DURATION_SECONDS,
        waveform=Waveform.SINE,
        sample_rate=SAMPLE_RATE,
    )
    sweep = generate_sweep(params)
    written = write_wav(
        output_path,
        sample_rate=SAMPLE_RATE,
        bits_per_sample=DEFAULT_BITS_PER_SAMPLE,
        channel_count=DEFAULT_CHANNEL_COUNT,
        samples=sweep,
    )
    return {
        "command": "sweep",
        "path": str(written),
        "sample_count": len(sweep),
        "sample_rate": SAMPLE_RATE,
        "data_size": sweep.size_bytes,
        "file_size": HEADER_SIZE + sweep.size_bytes,
    }


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        payload = run_default_sweep()
    except WavWriteError:
        logger.exception("Sweep generation aborted")
        raise

    logger.debug("Sweep summary: %s", payload)
    print("Sweep WAV file has been written.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
