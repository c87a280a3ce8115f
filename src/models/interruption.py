"""
Interruption Models

Immutable interruption/clap definitions and the catalog they are drawn from.
The catalog is built once at startup and shared read-only by every audience member.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Tuple

from models.enums import CatalogBucket
from utils.errors import ConfigError

# Animation id meaning "no interruption animation" (back to idle)
NO_ANIMATION = 0


@dataclass(frozen=True)
class InterruptionDefinition:
    """
    One interruption or clap variant

    Attributes:
        animation_id: Animation variant to trigger (0 = none/idle)
        sound: Opaque audio clip handle, or None for a silent interruption
    """
    animation_id: int = NO_ANIMATION
    sound: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.animation_id, bool) or not isinstance(self.animation_id, int):
            raise ConfigError(f"animation_id must be an integer, got {self.animation_id!r}")
        if self.animation_id < 0:
            raise ConfigError(f"animation_id must be >= 0, got {self.animation_id}")

    @property
    def has_sound(self) -> bool:
        return self.sound is not None


@dataclass(frozen=True)
class InterruptionCatalog:
    """
    Two-bucket catalog of interruption definitions

    An empty bucket is a valid (quiet) configuration: nothing is ever
    drawn from it.
    """
    general_interruptions: Tuple[InterruptionDefinition, ...] = field(default_factory=tuple)
    claps: Tuple[InterruptionDefinition, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept lists from loaders but always store tuples
        object.__setattr__(self, "general_interruptions", tuple(self.general_interruptions))
        object.__setattr__(self, "claps", tuple(self.claps))

    def bucket(self, bucket: CatalogBucket) -> Tuple[InterruptionDefinition, ...]:
        if bucket == CatalogBucket.GENERAL:
            return self.general_interruptions
        return self.claps

    def is_empty(self, bucket: CatalogBucket) -> bool:
        return len(self.bucket(bucket)) == 0

    def pick(self, bucket: CatalogBucket, rng: random.Random) -> Optional[InterruptionDefinition]:
        """
        Draw one definition uniformly at random from a bucket.

        Returns:
            The chosen definition, or None when the bucket is empty
        """
        entries = self.bucket(bucket)
        if not entries:
            return None
        return entries[rng.randrange(len(entries))]

    def __len__(self) -> int:
        return len(self.general_interruptions) + len(self.claps)
