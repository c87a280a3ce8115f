"""
End-to-end tests: scripted loudness through stage, event bus and audience
"""

import pytest

from hardware.lighting.virtual_light import VirtualStageLight
from hardware.loudness.scripted_loudness import ScriptedLoudnessSource
from models.config import AppConfig, AudienceConfig, RuntimeConfig, StageConfig
from models.enums import BehaviorState, LightRamp, PerformancePhase
from models.events import EventType
from runtime.performance_engine import PerformanceEngine
from runtime.runtime_loop import RuntimeLoop
from utils.errors import MissingCollaboratorError

DT = 0.1


@pytest.fixture
def app_config():
    return AppConfig(
        stage=StageConfig(),
        audience=AudienceConfig(
            interruption_delay_time=1.0,
            interruption_variability=0.5,
            clap_ramp_duration=1.0,
        ),
        runtime=RuntimeConfig(audience_size=4, animation_clip_length=0.5, seed=5),
    )


def recital_trace():
    """Quiet room, 3s of playing, then a long silence"""
    return [0.0] * 5 + [0.05] * 30 + [0.0] * 150


def build_engine(app_config, catalog, trace):
    engine = PerformanceEngine(app_config, catalog, ScriptedLoudnessSource(trace), VirtualStageLight())
    engine.populate()
    return engine


def record(engine):
    events = []
    for event_type in EventType:
        engine.event_bus.subscribe(event_type, events.append, priority=100)
    return events


def test_scripted_recital(app_config, catalog):
    engine = build_engine(app_config, catalog, recital_trace())
    events = record(engine)
    assert len(engine.audience) == 4

    snapshot = engine.run_ticks(35, DT)
    assert snapshot.phase == PerformancePhase.PERFORMING
    assert snapshot.light_intensity == 0.5
    assert all(m.follows_performance for m in engine.audience)

    engine.step(DT)
    assert engine.audience.behavior_counts()[BehaviorState.CLAPPING] == 4

    snapshot = engine.run_ticks(150, DT)
    assert snapshot.tick == 186
    assert snapshot.phase == PerformancePhase.IDLE
    assert snapshot.light_intensity == 1.0
    assert snapshot.behaviors[BehaviorState.IDLE] == 4
    assert snapshot.pending_tasks == 0

    assert [e.type for e in events] == [
        EventType.PERFORMANCE_STARTED,
        EventType.CLAPPING_STARTED,
        EventType.PERFORMANCE_ENDED,
    ]
    assert events[0].tick == 6
    assert events[1].tick == 36
    # 100 silent ticks of 0.1s end the performance at exactly 10s
    assert events[2].tick == 135
    assert events[2].silence == pytest.approx(10.0)


def test_members_clap_in_step_with_stage(app_config, catalog):
    engine = build_engine(app_config, catalog, recital_trace())
    engine.run_ticks(36, DT)

    # Envelope starts from zero on the tick clapping begins
    for member in engine.audience:
        assert member.audio.volume_trace[-1] == 0.0

    engine.run_ticks(10, DT)
    for member in engine.audience:
        assert member.audio.volume == pytest.approx(1.0)
        assert member.behavior == BehaviorState.CLAPPING


def test_interruptions_happen_while_playing(app_config, catalog):
    trace = [0.05] * 100
    engine = build_engine(app_config, catalog, trace)

    engine.run_ticks(100, DT)

    fired = sum(m.state.interruptions_fired for m in engine.audience)
    assert fired > 0
    assert engine.stage.is_performing


def test_same_seed_same_audience(app_config, catalog):
    first = build_engine(app_config, catalog, [0.05] * 80)
    second = build_engine(app_config, catalog, [0.05] * 80)

    first.run_ticks(80, DT)
    second.run_ticks(80, DT)

    assert [m.animator.triggered for m in first.audience] == [m.animator.triggered for m in second.audience]


def test_manual_start_then_silence(app_config, catalog):
    engine = build_engine(app_config, catalog, [])
    events = record(engine)

    assert engine.start_performance() is True
    assert engine.start_performance() is False
    engine.run_ticks(10, 1.0)

    assert [e.type for e in events] == [
        EventType.PERFORMANCE_STARTED,
        EventType.CLAPPING_STARTED,
        EventType.PERFORMANCE_ENDED,
    ]
    assert engine.stage.state.light_ramp == LightRamp.BRIGHTENING


def test_manual_ending_mode(app_config, catalog):
    engine = build_engine(app_config, catalog, [])
    engine.toggle_automatic_ending()
    engine.start_performance()

    engine.run_ticks(100, 1.0)
    assert engine.stage.is_performing

    assert engine.end_performance() is True
    assert not engine.stage.is_performing


def test_shutdown_detaches_audience(app_config, catalog):
    engine = build_engine(app_config, catalog, [0.05] * 10)
    engine.run_ticks(10, DT)

    engine.shutdown()

    assert len(engine.audience) == 0
    for event_type in EventType:
        assert engine.event_bus.subscriber_count(event_type) == 0
    assert not engine.stage.is_performing


def test_missing_loudness_source(app_config, catalog):
    with pytest.raises(MissingCollaboratorError):
        PerformanceEngine(app_config, catalog, None, VirtualStageLight())


@pytest.mark.asyncio
async def test_runtime_loop_runs_fixed_number_of_ticks(app_config, catalog):
    engine = build_engine(app_config, catalog, [0.05] * 10)

    loop = RuntimeLoop(engine, tick_rate=200.0, max_ticks=5)
    ticks = await loop.run()

    assert ticks == 5
    assert engine.tick_count == 5
    assert engine.stage.is_performing
    assert loop.running is False


def test_runtime_loop_rejects_bad_rate(app_config, catalog):
    engine = build_engine(app_config, catalog, [])
    with pytest.raises(ValueError):
        RuntimeLoop(engine, tick_rate=0)
