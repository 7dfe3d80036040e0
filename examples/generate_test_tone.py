from __future__ import annotations

from pathlib import Path

from audio_sweep_toolbox.sweep import SweepModel, SweepParameters, Waveform, generate_sweep
from audio_sweep_toolbox.wav import write_sweep_wav


def main() -> None:
    output_dir = Path(__file__).parent
    for model in SweepModel:
        params = SweepParameters(
            start_frequency=220,
            end_frequency=880,
            duration=3.0,
            waveform=Waveform.SINE,
            sample_rate=16_000,
            model=model,
            level_db=-7.0,
        )
        output_path = write_sweep_wav(output_dir / f"test_tone_{model.value}.wav", generate_sweep(params))
        print(f"Wrote {output_path}")


if __name__ == "__main__":
    main()
