# hardware/loudness/loudness_interface.py
"""
ILoudnessSource Protocol
========================
Produces one non-negative loudness scalar per sampling tick
(roughly [0, 1] before sensitivity scaling).
"""

from __future__ import annotations
from typing import Protocol


class ILoudnessSource(Protocol):

    def sample(self) -> float:
        """Latest loudness value (never negative)."""
        ...

    def start(self) -> None:
        """Open the underlying device/stream, if any."""
        ...

    def stop(self) -> None:
        """Release the underlying device/stream, if any."""
        ...
