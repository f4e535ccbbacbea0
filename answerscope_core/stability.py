"""
Stability Monitor

Waits for a streaming region to stop changing.

States:
    POLLING   -> content changed, keep sampling
    STABLE    -> unchanged for the quiet period and longer than the floor
    TIMED_OUT -> deadline reached; the caller proceeds with what is there

The monitor never raises. Clock and sleep are injectable so tests can drive
simulated time.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Optional

from .models import StabilitySample
from .page_utils import read_region_text

logger = logging.getLogger(__name__)


class StabilityState(Enum):
    POLLING = "polling"
    STABLE = "stable"
    TIMED_OUT = "timed_out"


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


async def _sleep_ms(ms: float) -> None:
    await asyncio.sleep(ms / 1000)


class StabilityMonitor:

    def __init__(
        self,
        substance_floor: int = 100,
        clock: Callable[[], float] = _monotonic_ms,
        sleep: Callable[[float], Awaitable[None]] = _sleep_ms,
        reader: Optional[Callable[..., Awaitable[str]]] = None,
    ):
        self.substance_floor = substance_floor
        self.clock = clock
        self.sleep = sleep
        self.reader = reader or read_region_text
        self.last_sample: Optional[StabilitySample] = None
        self.polls = 0

    async def await_stable(
        self,
        page,
        selector: str,
        quiet_period_ms: float,
        poll_interval_ms: float,
        deadline_ms: float,
    ) -> StabilityState:
        start = self.clock()
        last_change = start
        previous: Optional[str] = None
        self.last_sample = None
        self.polls = 0
        state = StabilityState.POLLING

        while state is StabilityState.POLLING:
            if self.clock() - start >= deadline_ms:
                state = StabilityState.TIMED_OUT
                break

            try:
                text = (await self.reader(page, selector) or "").strip()
            except Exception as e:
                logger.debug(f"Stability poll failed, continuing: {e}")
            else:
                self.polls += 1
                now = self.clock()
                if text != previous:
                    previous = text
                    last_change = now
                self.last_sample = StabilitySample(timestamp_ms=now, normalized_text=text)
                if now - last_change >= quiet_period_ms and len(text) > self.substance_floor:
                    state = StabilityState.STABLE
                    break

            remaining = deadline_ms - (self.clock() - start)
            if remaining <= 0:
                continue
            await self.sleep(min(poll_interval_ms, remaining))

        elapsed = self.clock() - start
        size = len(self.last_sample.normalized_text) if self.last_sample else 0
        if state is StabilityState.STABLE:
            logger.info(f"Region {selector} stable after {elapsed:.0f}ms ({size} chars, {self.polls} polls)")
        else:
            logger.info(f"Region {selector} not stable after {elapsed:.0f}ms ({size} chars), proceeding")
        return state


async def await_stable(
    page,
    selector: str,
    quiet_period_ms: float = 2000,
    poll_interval_ms: float = 500,
    deadline_ms: float = 30000,
    substance_floor: int = 100,
) -> StabilityState:
    monitor = StabilityMonitor(substance_floor=substance_floor)
    return await monitor.await_stable(page, selector, quiet_period_ms, poll_interval_ms, deadline_ms)
