from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Union

from hardware.loudness.loudness_interface import ILoudnessSource
from utils.errors import ConfigError


class ScriptedLoudnessSource(ILoudnessSource):
    """
    Replays a recorded loudness trace, one value per sample() call

    Once the trace is exhausted the last value is held (or `tail` if given).
    """

    def __init__(self, trace: Iterable[float], tail: Union[float, None] = None):
        self._trace: List[float] = [max(0.0, float(v)) for v in trace]
        self._tail = tail
        self._index = 0

    @classmethod
    def from_file(cls, path: Union[str, Path], tail: Union[float, None] = 0.0) -> "ScriptedLoudnessSource":
        """
        Load a trace file: one float per line, blank lines and '#' comments ignored
        """
        values = []
        try:
            with open(path, "r", encoding="utf-8") as f:
                for lineno, line in enumerate(f, start=1):
                    line = line.split("#", 1)[0].strip()
                    if not line:
                        continue
                    try:
                        values.append(float(line))
                    except ValueError:
                        raise ConfigError(f"{path}:{lineno}: not a number: {line!r}")
        except OSError as ex:
            raise ConfigError(f"Cannot read loudness trace {path}: {ex}")
        return cls(values, tail=tail)

    @property
    def exhausted(self) -> bool:
        return self._index >= len(self._trace)

    def __len__(self) -> int:
        return len(self._trace)

    def sample(self) -> float:
        if self._index < len(self._trace):
            value = self._trace[self._index]
            self._index += 1
            return value
        if self._tail is not None:
            return self._tail
        return self._trace[-1] if self._trace else 0.0

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass
