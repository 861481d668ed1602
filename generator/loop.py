"""
Timer loop that drives the emitter.

The loop alternates between waiting for the next tick and emitting.
Emission is synchronous; the only suspension point is the wait, which a
stop event interrupts.
"""

import asyncio
import logging
from typing import Optional

from generator.emitter import TelemetryEmitter

logger = logging.getLogger(__name__)


async def run_emission_loop(
    emitter: TelemetryEmitter,
    interval: float,
    stop_event: Optional[asyncio.Event] = None,
    max_ticks: Optional[int] = None,
) -> int:
    """
    Emit one tick every ``interval`` seconds until stopped.

    The first tick is emitted one full interval after the loop starts.
    Ticks are scheduled on a fixed period measured from that start, so
    the time spent emitting does not push later ticks back.

    Args:
        emitter: The emitter called on each tick
        interval: Seconds between ticks
        stop_event: Ends the loop as soon as it is set, including mid-wait
        max_ticks: Optional number of ticks after which the loop returns

    Returns:
        The number of ticks emitted by this call
    """
    if interval <= 0:
        raise ValueError("interval must be positive")
    if stop_event is None:
        stop_event = asyncio.Event()

    logger.info("Emission loop started", extra={
        "extra_data": {"interval_seconds": interval, "max_ticks": max_ticks}
    })

    loop = asyncio.get_running_loop()
    next_tick = loop.time()
    ticks = 0
    while (max_ticks is None or ticks < max_ticks) and not stop_event.is_set():
        next_tick += interval
        delay = next_tick - loop.time()
        if delay < 0:
            # ticks missed during a slow emission are dropped, not replayed
            next_tick -= delay
            delay = 0
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            emitter.emit()
            ticks += 1
        else:
            break

    logger.info("Emission loop stopped", extra={"extra_data": {"ticks": ticks}})
    return ticks
