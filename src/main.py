"""
main.py - Application entry point for the audience simulation
--------------------------------------------------------------

Responsible for:
- loading configuration and the interruption catalog
- wiring the engine (stage, event bus, scheduler, audience)
- running either a fixed-step simulation (scripted trace) or the real-time
  asyncio loop (microphone or --realtime)
"""

import sys

# Set UTF-8 encoding for output BEFORE logging (log symbols are non-ASCII)
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore
if hasattr(sys.stderr, 'reconfigure') and sys.stderr.encoding != 'UTF-8':
    sys.stderr.reconfigure(encoding='utf-8')  # type: ignore

import argparse
import asyncio
import signal
from pathlib import Path
from typing import List, Optional

from hardware.lighting.virtual_light import VirtualStageLight
from hardware.loudness.loudness_factory import create_loudness_source
from hardware.loudness.scripted_loudness import ScriptedLoudnessSource
from managers import ConfigManager
from models.enums import LogCategory, LogLevel
from runtime.performance_engine import PerformanceEngine
from runtime.runtime_loop import RuntimeLoop
from services import log_middleware
from utils.errors import ConfigError
from utils.logger import get_logger, configure_logger

log = get_logger().for_category(LogCategory.SYSTEM)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulated audience reacting to a performer's loudness")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--members", type=int, default=None, help="Audience size (overrides runtime.audience_size)")
    parser.add_argument("--trace", type=Path, default=None, help="Loudness trace file (one float per line)")
    parser.add_argument("--ticks", type=int, default=None, help="Number of ticks to run (default: trace length)")
    parser.add_argument("--tick-rate", type=float, default=None, help="Ticks per second (overrides runtime.tick_rate)")
    parser.add_argument("--start", action="store_true", help="Start a performance manually before the first tick")
    parser.add_argument("--manual-ending", action="store_true", help="Disable silence-triggered ending")
    parser.add_argument("--realtime", action="store_true", help="Pace ticks in real time with asyncio")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    return parser.parse_args(argv)


def build_engine(args: argparse.Namespace) -> PerformanceEngine:
    """Load configuration and wire every component. Raises ConfigError on bad setup."""
    config = ConfigManager(args.config) if args.config else ConfigManager()
    app_config = config.load()
    if args.tick_rate is not None:
        if args.tick_rate <= 0:
            raise ConfigError(f"--tick-rate must be > 0, got {args.tick_rate}")
        app_config.runtime.tick_rate = args.tick_rate

    loudness = create_loudness_source(app_config.runtime, trace_path=args.trace)
    engine = PerformanceEngine(app_config, config.catalog, loudness, VirtualStageLight())
    engine.event_bus.add_middleware(log_middleware)
    engine.populate(args.members)

    if args.manual_ending:
        engine.toggle_automatic_ending()
    if args.start:
        engine.start_performance()
    return engine


def _default_ticks(engine: PerformanceEngine) -> int:
    """Whole trace for scripted sources, one second of ticks otherwise"""
    if isinstance(engine.loudness, ScriptedLoudnessSource) and len(engine.loudness):
        return len(engine.loudness)
    return max(1, int(engine.config.runtime.tick_rate))


async def run_realtime(engine: PerformanceEngine, ticks: Optional[int]) -> int:
    loop_runner = RuntimeLoop(engine, engine.config.runtime.tick_rate, max_ticks=ticks)

    loop = asyncio.get_running_loop()
    if not sys.platform.startswith("win"):
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, loop_runner.stop)

    return await loop_runner.run()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logger(LogLevel.DEBUG if args.debug else LogLevel.INFO, use_colors=not args.no_color)

    log.info("Starting audience simulation...")
    try:
        engine = build_engine(args)
    except ConfigError as e:
        log.error(f"Configuration error: {e}")
        return 2

    realtime = args.realtime or engine.config.runtime.loudness_source == "microphone"
    if realtime:
        ticks = asyncio.run(run_realtime(engine, args.ticks))
    else:
        ticks = args.ticks if args.ticks is not None else _default_ticks(engine)
        engine.run_ticks(ticks, dt=1.0 / engine.config.runtime.tick_rate)

    snapshot = engine.snapshot()
    log.info(
        "Simulation finished",
        ticks=ticks,
        phase=snapshot.phase.name,
        light=f"{snapshot.light_intensity:.2f}",
        behaviors={state.name: count for state, count in snapshot.behaviors.items()},
        tasks=engine.scheduler.summary(),
    )
    engine.shutdown()
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
