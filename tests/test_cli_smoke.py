from __future__ import annotations

import json
from pathlib import Path

import pytest

from audio_sweep_toolbox.cli import main, run_default_sweep
from audio_sweep_toolbox.wav import read_wav_header, read_wav_samples


def test_default_sweep_produces_expected_container(tmp_path: Path) -> None:
    output = tmp_path / "sweep.wav"
    payload = run_default_sweep(output)

    assert payload["command"] == "sweep"
    assert payload["sample_count"] == 441000
    assert payload["data_size"] == 882000
    assert json.loads(json.dumps(payload)) == payload

    header = read_wav_header(output)
    assert header.data_size == 882000
    assert header.riff_size == 882036
    assert header.sample_rate == 44100
    assert header.channel_count == 1
    assert header.bits_per_sample == 16
    assert output.stat().st_size == payload["file_size"] == 882044

    samples, _ = read_wav_samples(output)
    assert samples[0] == 0


def test_main_writes_sweep_in_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    assert main() == 0
    assert (tmp_path / "sweep.wav").exists()
    assert "Sweep WAV file has been written." in capsys.readouterr().out
