"""
Tests for loudness sources and the source factory
"""

from pathlib import Path

import pytest

from hardware.loudness.loudness_factory import create_loudness_source
from hardware.loudness.scripted_loudness import ScriptedLoudnessSource
from models.config import RuntimeConfig
from runtime.runtime_info import RuntimeInfo
from utils.errors import ConfigError

TRACES_DIR = Path(__file__).parent.parent / "src" / "traces"


def test_scripted_source_replays_trace():
    source = ScriptedLoudnessSource([0.1, 0.2, -0.5])

    assert [source.sample() for _ in range(3)] == [0.1, 0.2, 0.0]
    assert source.exhausted


def test_exhausted_trace_holds_last_value():
    source = ScriptedLoudnessSource([0.1, 0.3])
    samples = [source.sample() for _ in range(4)]

    assert samples == [0.1, 0.3, 0.3, 0.3]


def test_exhausted_trace_uses_tail():
    source = ScriptedLoudnessSource([0.4], tail=0.0)
    source.sample()

    assert source.sample() == 0.0


def test_empty_trace_is_silence():
    assert ScriptedLoudnessSource([]).sample() == 0.0


def test_trace_file_skips_comments(tmp_path):
    trace = tmp_path / "trace.txt"
    trace.write_text("# header\n0.1\n\n0.2  # loud\n", encoding="utf-8")

    source = ScriptedLoudnessSource.from_file(trace)

    assert len(source) == 2
    assert [source.sample() for _ in range(3)] == [0.1, 0.2, 0.0]


def test_trace_file_with_garbage(tmp_path):
    trace = tmp_path / "trace.txt"
    trace.write_text("0.1\nloud\n", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        ScriptedLoudnessSource.from_file(trace)
    assert ":2:" in str(excinfo.value)


def test_missing_trace_file(tmp_path):
    with pytest.raises(ConfigError):
        ScriptedLoudnessSource.from_file(tmp_path / "missing.txt")


def test_bundled_trace_loads():
    source = ScriptedLoudnessSource.from_file(TRACES_DIR / "short_recital.txt")
    assert len(source) > 0


def test_factory_defaults_to_silence():
    source = create_loudness_source(RuntimeConfig())

    assert isinstance(source, ScriptedLoudnessSource)
    assert source.sample() == 0.0


def test_factory_loads_trace(tmp_path):
    trace = tmp_path / "trace.txt"
    trace.write_text("0.5\n", encoding="utf-8")

    source = create_loudness_source(RuntimeConfig(), trace_path=trace)

    assert source.sample() == 0.5
    assert source.sample() == 0.0


def test_factory_requires_audio_backend_for_microphone(monkeypatch):
    monkeypatch.setattr(RuntimeInfo, "has_sounddevice", staticmethod(lambda: False))

    with pytest.raises(ConfigError):
        create_loudness_source(RuntimeConfig(loudness_source="microphone"))
