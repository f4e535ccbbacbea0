"""Tests for the stability monitor, driven by a simulated clock."""

import pytest

from answerscope_core.stability import StabilityMonitor, StabilityState

from mocks.fake_browser import FakeClock, FakePage, FakeSite, MAIN_COL, make_text


class ScriptedReader:
    """Returns one scripted text per read; the last entry repeats"""

    def __init__(self, texts):
        self.texts = list(texts)
        self.reads = 0

    async def __call__(self, page, selector):
        index = min(self.reads, len(self.texts) - 1)
        self.reads += 1
        value = self.texts[index]
        if isinstance(value, Exception):
            raise value
        return value


def monitor_for(reader, clock):
    return StabilityMonitor(substance_floor=100, clock=clock, sleep=clock.sleep, reader=reader)


class TestAwaitStable:

    @pytest.mark.asyncio
    async def test_streaming_then_settled(self):
        """Text that stops growing settles after the quiet period."""
        clock = FakeClock()
        reader = ScriptedReader(["Loading..."] * 5 + [make_text("Tides are caused by the moon. ", 600)])
        monitor = monitor_for(reader, clock)

        state = await monitor.await_stable(None, MAIN_COL, 1000, 500, 30000)

        assert state is StabilityState.STABLE
        assert clock.now == 3500
        assert reader.reads == 8
        assert len(monitor.last_sample.normalized_text) == 600

    @pytest.mark.asyncio
    async def test_never_stable_before_quiet_period(self):
        """Test that a change restarts the quiet period."""
        clock = FakeClock()
        reader = ScriptedReader([make_text("Settled answer. ", 600)])
        monitor = monitor_for(reader, clock)

        state = await monitor.await_stable(None, MAIN_COL, 2000, 500, 30000)

        assert state is StabilityState.STABLE
        assert clock.now == 2000

    @pytest.mark.asyncio
    async def test_times_out_exactly_at_deadline(self):
        """Text that keeps changing stops at the deadline exactly."""
        clock = FakeClock()
        reader = ScriptedReader([f"chunk {i} " * 40 for i in range(100)])
        monitor = monitor_for(reader, clock)

        state = await monitor.await_stable(None, MAIN_COL, 1000, 500, 1200)

        assert state is StabilityState.TIMED_OUT
        assert clock.now == 1200
        assert monitor.polls == 3

    @pytest.mark.asyncio
    async def test_empty_region_times_out(self):
        clock = FakeClock()
        reader = ScriptedReader([""])
        monitor = monitor_for(reader, clock)

        state = await monitor.await_stable(None, MAIN_COL, 500, 250, 2000)

        assert state is StabilityState.TIMED_OUT
        assert clock.now == 2000

    @pytest.mark.asyncio
    async def test_short_stable_text_is_not_enough(self):
        """Settled text below the floor does not count."""
        clock = FakeClock()
        reader = ScriptedReader(["x" * 100])
        monitor = monitor_for(reader, clock)

        state = await monitor.await_stable(None, MAIN_COL, 500, 500, 3000)

        assert state is StabilityState.TIMED_OUT

    @pytest.mark.asyncio
    async def test_read_errors_are_tolerated(self):
        """A failed read counts as no text, not an error."""
        clock = FakeClock()
        error = RuntimeError("Execution context was destroyed")
        reader = ScriptedReader([error, error, make_text("Answer text. ", 300)])
        monitor = monitor_for(reader, clock)

        state = await monitor.await_stable(None, MAIN_COL, 1000, 500, 30000)

        assert state is StabilityState.STABLE
        assert clock.now == 2000
        assert monitor.polls == 3

    @pytest.mark.asyncio
    async def test_zero_deadline_returns_immediately(self):
        clock = FakeClock()
        reader = ScriptedReader([make_text("Answer text. ", 300)])
        monitor = monitor_for(reader, clock)

        state = await monitor.await_stable(None, MAIN_COL, 1000, 500, 0)

        assert state is StabilityState.TIMED_OUT
        assert reader.reads == 0

    @pytest.mark.asyncio
    async def test_default_reader_uses_page(self):
        """Test default region reader."""
        clock = FakeClock()
        page = FakePage(site=FakeSite(elements={MAIN_COL: make_text("Answer text. ", 300)}))
        monitor = StabilityMonitor(clock=clock, sleep=clock.sleep)

        state = await monitor.await_stable(page, MAIN_COL, 0, 100, 1000)

        assert state is StabilityState.STABLE
        assert clock.now == 0
