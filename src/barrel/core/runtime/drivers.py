"""Periodic drivers for a StressSession.

Two drivers advance a session: a continuous frame driver that smooths the
displayed level, and a discrete tick driver (nominally 1 Hz) that draws
jitter, prunes events and samples the meltdown window. They share the
session but never call each other.

``step_simulation`` runs both on a virtual clock and is fully
deterministic for a seeded ``random.Random``. ``run_simulation`` runs them
as two asyncio tasks against wall-clock time.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

from barrel.domains.stress.connectors.event_presets import ScheduledEvent
from barrel.domains.stress.domain_logic.meltdown import StressPhase
from barrel.domains.stress.session import StressSession

logger = logging.getLogger(__name__)


class EventSchedule:
    """Releases scheduled events once their offset has passed."""

    def __init__(self, events: Iterable[ScheduledEvent], start: datetime) -> None:
        self._pending = sorted(events, key=lambda e: e.offset_s)
        self._start = start

    def __len__(self) -> int:
        return len(self._pending)

    def release_due(self, session: StressSession, elapsed_s: float) -> int:
        """Add every event with ``offset_s <= elapsed_s`` to the session."""
        released = 0
        while self._pending and self._pending[0].offset_s <= elapsed_s:
            scheduled = self._pending.pop(0)
            session.add_event(scheduled.materialize(self._start))
            released += 1
        return released


def _summary(
    session: StressSession,
    *,
    ticks: int,
    frames: int,
    peak_level: float,
    meltdown_tick: int | None,
    elapsed_s: float,
) -> dict[str, Any]:
    return {
        "ticks": ticks,
        "frames": frames,
        "elapsed_s": round(elapsed_s, 3),
        "final_level": round(session.level, 4),
        "peak_level": round(peak_level, 4),
        "window": [round(v, 4) for v in session.window],
        "phase": session.phase.value,
        "meltdown": session.meltdown,
        "meltdown_tick": meltdown_tick,
        "active_events": len(session.events),
    }


# ---------------------------------------------------------------------------
# Virtual clock
# ---------------------------------------------------------------------------

def step_simulation(
    session: StressSession,
    *,
    ticks: int,
    frames_per_tick: int = 60,
    tick_period_s: float = 1.0,
    rng: random.Random | None = None,
    start: datetime | None = None,
    scheduled_events: Iterable[ScheduledEvent] = (),
) -> dict[str, Any]:
    """Run ``ticks`` tick periods, each with ``frames_per_tick`` frames.

    Scheduled events are released at the start of the period in which
    their offset falls. Stops early on meltdown.
    """
    if session.meltdown:
        logger.warning("Session is already in meltdown; nothing to simulate")
        return _summary(session, ticks=0, frames=0, peak_level=session.level, meltdown_tick=None, elapsed_s=0.0)

    rng = rng or random.Random()
    start = start or datetime.now(timezone.utc)
    schedule = EventSchedule(scheduled_events, start)
    frame_s = tick_period_s / frames_per_tick

    frames = 0
    peak = session.level
    meltdown_tick: int | None = None
    completed = 0

    for tick in range(ticks):
        period_start = tick * tick_period_s
        schedule.release_due(session, period_start)
        for frame in range(1, frames_per_tick + 1):
            now = start + timedelta(seconds=period_start + frame * frame_s)
            peak = max(peak, session.advance_frame(now))
            frames += 1
        completed += 1
        phase = session.tick(rng, start + timedelta(seconds=period_start + tick_period_s))
        if phase is StressPhase.MELTDOWN:
            meltdown_tick = tick + 1
            break

    return _summary(
        session,
        ticks=completed,
        frames=frames,
        peak_level=peak,
        meltdown_tick=meltdown_tick,
        elapsed_s=completed * tick_period_s,
    )


# ---------------------------------------------------------------------------
# Wall clock (asyncio)
# ---------------------------------------------------------------------------

async def _frame_driver(
    session: StressSession,
    interval_s: float,
    stop: asyncio.Event,
    counters: dict[str, Any],
) -> None:
    try:
        while not stop.is_set():
            level = session.advance_frame()
            counters["frames"] += 1
            counters["peak"] = max(counters["peak"], level)
            await asyncio.sleep(interval_s)
    finally:
        # A failed driver ends the run instead of idling until the timeout
        stop.set()


async def _tick_driver(
    session: StressSession,
    period_s: float,
    rng: random.Random,
    schedule: EventSchedule,
    stop: asyncio.Event,
    counters: dict[str, Any],
) -> None:
    started = time.monotonic()
    try:
        while not stop.is_set():
            await asyncio.sleep(period_s)
            schedule.release_due(session, time.monotonic() - started)
            phase = session.tick(rng)
            counters["ticks"] += 1
            if phase is StressPhase.MELTDOWN:
                counters["meltdown_tick"] = counters["ticks"]
                break
    finally:
        stop.set()


async def run_simulation(
    session: StressSession,
    *,
    duration_s: float,
    frame_rate_hz: float = 60.0,
    tick_period_s: float = 1.0,
    rng: random.Random | None = None,
    scheduled_events: Iterable[ScheduledEvent] = (),
) -> dict[str, Any]:
    """Drive ``session`` in real time until ``duration_s`` or meltdown."""
    rng = rng or random.Random()
    schedule = EventSchedule(scheduled_events, datetime.now(timezone.utc))
    schedule.release_due(session, 0.0)

    stop = asyncio.Event()
    counters: dict[str, Any] = {"frames": 0, "ticks": 0, "peak": session.level, "meltdown_tick": None}
    started = time.monotonic()

    tasks = [
        asyncio.create_task(_frame_driver(session, 1.0 / frame_rate_hz, stop, counters)),
        asyncio.create_task(_tick_driver(session, tick_period_s, rng, schedule, stop, counters)),
    ]
    try:
        await asyncio.wait_for(stop.wait(), timeout=duration_s)
    except asyncio.TimeoutError:
        pass
    finally:
        stop.set()
        for task in tasks:
            task.cancel()
        results = await asyncio.gather(*tasks, return_exceptions=True)

    for result in results:
        if isinstance(result, Exception):
            raise result

    if session.meltdown:
        logger.info("Simulation stopped on meltdown after %d ticks", counters["ticks"])

    return _summary(
        session,
        ticks=counters["ticks"],
        frames=counters["frames"],
        peak_level=counters["peak"],
        meltdown_tick=counters["meltdown_tick"],
        elapsed_s=time.monotonic() - started,
    )
