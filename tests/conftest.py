import random
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from engine.audience_member import AudienceMember
from engine.task_scheduler import TaskScheduler
from hardware.animation.virtual_animator import VirtualAnimator
from hardware.audio.virtual_audio import VirtualAudioSink
from hardware.lighting.virtual_light import VirtualStageLight
from models.config import AudienceConfig, StageConfig
from models.interruption import InterruptionCatalog, InterruptionDefinition
from services.event_bus import EventBus
from engine.stage_controller import StageController


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def scheduler():
    return TaskScheduler()


@pytest.fixture
def light():
    return VirtualStageLight()


@pytest.fixture
def catalog():
    return InterruptionCatalog(
        general_interruptions=[
            InterruptionDefinition(animation_id=1, sound="cough.wav"),
            InterruptionDefinition(animation_id=2, sound="sneeze.wav"),
            InterruptionDefinition(animation_id=3, sound=None),
        ],
        claps=[
            InterruptionDefinition(animation_id=4, sound="clap_light.wav"),
            InterruptionDefinition(animation_id=5, sound="clap_loud.wav"),
        ],
    )


@pytest.fixture
def stage_config():
    """Thresholds matching the reference scenario: threshold 0.2, no scaling"""
    return StageConfig(
        loudness_threshold=0.2,
        loudness_sensitivity=1.0,
        end_performance_time=10.0,
        continue_performance_time=2.0,
        dim_time=2.0,
        brighten_time=2.0,
    )


@pytest.fixture
def stage(stage_config, bus, scheduler, light):
    return StageController(stage_config, bus, scheduler, light)


@pytest.fixture
def recorder(bus):
    """Records every published event type in order"""
    from models.events import EventType

    events = []
    for event_type in EventType:
        bus.subscribe(event_type, events.append, priority=100)
    return events


@pytest.fixture
def audience_config():
    return AudienceConfig(
        interruption_delay_time=5.0,
        interruption_variability=0.0,
        clap_ramp_duration=5.0,
    )


@pytest.fixture
def make_member(audience_config, catalog, bus, scheduler):
    """Factory: build and attach a member with virtual collaborators"""

    def build(name="member-1", config=None, member_catalog=None, seed=1, clip_length=2.0):
        member = AudienceMember(
            name,
            config or audience_config,
            member_catalog if member_catalog is not None else catalog,
            bus,
            scheduler,
            audio=VirtualAudioSink(name),
            animator=VirtualAnimator(scheduler, clip_length=clip_length),
            rng=random.Random(seed),
        )
        member.attach()
        return member

    return build
