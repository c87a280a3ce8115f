"""
Audience

Creates and owns the AudienceMembers of one stage. Members share the
catalog, EventBus and TaskScheduler; each gets its own collaborators and its
own random stream.
"""

from __future__ import annotations

import random
from collections import Counter
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from engine.audience_member import AudienceMember
from engine.task_scheduler import TaskScheduler
from hardware.animation.animator_interface import IAnimationSink
from hardware.audio.audio_interface import IAudioSink
from models.config import AudienceConfig
from models.enums import BehaviorState
from models.interruption import InterruptionCatalog
from services.event_bus import EventBus
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.AUDIENCE)

# name -> (audio sink, animator) for one member
CollaboratorFactory = Callable[[str], Tuple[IAudioSink, IAnimationSink]]


class Audience:
    """
    Collection of audience members

    Example:
        audience = Audience(config, catalog, bus, scheduler, collaborators)
        audience.populate(12)
        audience.behavior_counts()   # {IDLE: 12}
    """

    def __init__(
        self,
        config: AudienceConfig,
        catalog: InterruptionCatalog,
        event_bus: EventBus,
        scheduler: TaskScheduler,
        collaborators: CollaboratorFactory,
        seed: Optional[int] = None,
    ):
        self.config = config
        self.catalog = catalog
        self.event_bus = event_bus
        self.scheduler = scheduler
        self.collaborators = collaborators
        self._seed_source = random.Random(seed)
        self._members: List[AudienceMember] = []
        self._created = 0

    def populate(self, count: int) -> List[AudienceMember]:
        """Create, attach and return `count` new members"""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")

        added = []
        for _ in range(count):
            self._created += 1
            name = f"member-{self._created}"
            audio, animator = self.collaborators(name)
            member = AudienceMember(
                name,
                self.config,
                self.catalog,
                self.event_bus,
                self.scheduler,
                audio=audio,
                animator=animator,
                rng=random.Random(self._seed_source.getrandbits(32)),
            )
            member.attach()
            added.append(member)

        self._members.extend(added)
        log.info(f"Audience populated with {len(added)} members", total=len(self._members))
        return added

    def remove(self, member: AudienceMember) -> None:
        member.detach()
        self._members.remove(member)

    def clear(self) -> None:
        for member in list(self._members):
            self.remove(member)

    @property
    def members(self) -> List[AudienceMember]:
        return list(self._members)

    def behavior_counts(self) -> Dict[BehaviorState, int]:
        counts = Counter(m.behavior for m in self._members)
        return {state: counts.get(state, 0) for state in BehaviorState}

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[AudienceMember]:
        return iter(list(self._members))
