import asyncio
import logging
from typing import List
from arena.engine import Engine, Snapshot
from arena.model import Event
from .eventlog import EventLog

log = logging.getLogger("runner")

# Turn pacing in ms, cycled in this order by cycle_speed()
SPEED_PRESETS = {"NORMAL": 700, "FAST": 350, "ULTRA": 150, "SLOW": 1200}
SPEED_CYCLE = ["NORMAL", "FAST", "ULTRA", "SLOW"]
MAX_SPEED_MS = 5000


class TurnRunner:
    """Async driver that plays the engine one turn at a time with pacing delays.

    Each turn waits speed_ms * 0.4 before the decision and speed_ms * 0.6
    after it. Pausing only takes effect between turns.
    """

    def __init__(self, engine: Engine, speed_ms: int = SPEED_PRESETS["NORMAL"],
                 start_delay_ms: int = 1500):
        self.engine = engine
        self.speed_ms = speed_ms
        self.start_delay_ms = start_delay_ms
        self.events = EventLog()
        self._task: asyncio.Task | None = None
        self._lock = asyncio.Lock()
        self._running = asyncio.Event()
        self._running.set()

    @property
    def paused(self) -> bool:
        return not self._running.is_set()

    @property
    def speed_name(self) -> str:
        for name, ms in SPEED_PRESETS.items():
            if ms == self.speed_ms:
                return name
        return "CUSTOM"

    async def start(self):
        """Start the turn loop."""
        if self._task:
            return
        self.engine.start()
        self._task = asyncio.create_task(self._loop())

    async def stop(self):
        """Stop the turn loop gracefully."""
        if not self._task:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def wait_finished(self):
        """Block until the match is over."""
        if self._task:
            await self._task

    async def _loop(self):
        """Main turn loop - pace, decide and execute, log events."""
        await asyncio.sleep(self.start_delay_ms / 1000.0)
        while not self.engine.finished:
            await self._running.wait()
            await asyncio.sleep(self.speed_ms * 0.4 / 1000.0)
            await self._running.wait()

            async with self._lock:
                evts: List[Event] = self.engine.step()

            if evts:
                log.debug(f"Turn {self.engine.state.turn} produced {len(evts)} events")
            self.events.append_many(evts)
            if self.engine.finished:
                break
            await asyncio.sleep(self.speed_ms * 0.6 / 1000.0)
        log.info(f"Match finished after {self.engine.state.turn} turns, {len(self.events)} events")

    async def pause(self):
        """Suspend the loop at the next turn boundary."""
        async with self._lock:
            self._running.clear()
            self.engine.pause()
        log.info("Paused")

    async def resume(self):
        async with self._lock:
            self.engine.resume()
            self._running.set()
        log.info("Resumed")

    async def snapshot(self) -> Snapshot:
        """Get current board view (consistent between turns)."""
        async with self._lock:
            return self.engine.snapshot()

    def set_speed(self, speed_ms: int):
        """Update turn pacing in milliseconds."""
        self.speed_ms = max(0, min(MAX_SPEED_MS, int(speed_ms)))
        log.info(f"Speed set to {self.speed_ms}ms ({self.speed_name})")

    def cycle_speed(self) -> str:
        """Advance NORMAL -> FAST -> ULTRA -> SLOW -> NORMAL."""
        name = self.speed_name
        nxt = SPEED_CYCLE[(SPEED_CYCLE.index(name) + 1) % len(SPEED_CYCLE)] if name in SPEED_CYCLE else "NORMAL"
        self.set_speed(SPEED_PRESETS[nxt])
        return nxt
