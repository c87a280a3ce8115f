"""
Runtime Loop

Real-time asyncio driver for the PerformanceEngine. Measures the wall-clock
time between iterations and feeds it to the engine as dt, sleeping to hold
the configured tick rate.
"""

import asyncio
import time
from typing import Optional

from runtime.performance_engine import PerformanceEngine
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RUNTIME)


class RuntimeLoop:

    def __init__(self, engine: PerformanceEngine, tick_rate: float, max_ticks: Optional[int] = None):
        if tick_rate <= 0:
            raise ValueError(f"tick_rate must be > 0, got {tick_rate}")
        self.engine = engine
        self.tick_rate = tick_rate
        self.max_ticks = max_ticks
        self.running = False
        self.ticks = 0

    def stop(self) -> None:
        if self.running:
            log.info("Runtime loop stop requested")
        self.running = False

    async def run(self) -> int:
        """
        Tick until stop() is called, max_ticks is reached or the task is cancelled

        Returns:
            Number of ticks executed
        """
        frame_delay = 1.0 / self.tick_rate
        self.running = True
        self.engine.loudness.start()
        log.info(f"Runtime loop @ {self.tick_rate:g} Hz (delay={frame_delay * 1000:.2f}ms)")

        last = time.perf_counter() - frame_delay
        try:
            while self.running:
                now = time.perf_counter()
                dt = now - last
                last = now

                if dt > 0:
                    try:
                        self.engine.step(dt)
                    except Exception as e:
                        log.error(f"Tick failed: {e!r}", tick=self.ticks)
                    self.ticks += 1

                if self.max_ticks is not None and self.ticks >= self.max_ticks:
                    break

                spent = time.perf_counter() - now
                await asyncio.sleep(max(0.0, frame_delay - spent))

        except asyncio.CancelledError:
            log.debug("Runtime loop cancelled")
            raise
        finally:
            self.running = False
            self.engine.loudness.stop()
            log.info("Runtime loop finished", ticks=self.ticks)

        return self.ticks
