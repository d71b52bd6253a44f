"""Tests for the QoE timer."""

from __future__ import annotations

from playerhub.timer import Timer


def _clock(*readings: float):
    values = iter(readings)
    return lambda: next(values)


class TestTicks:
    def test_between(self):
        timer = Timer(clock=_clock(100.0, 250.0))
        timer.tick("setup")
        timer.tick("ready")
        assert timer.between("setup", "ready") == 150.0

    def test_between_missing_tick(self):
        timer = Timer(clock=_clock(100.0))
        timer.tick("setup")
        assert timer.between("setup", "ready") is None
        assert timer.between("ready", "setup") is None

    def test_retick_overwrites(self):
        timer = Timer(clock=_clock(100.0, 200.0, 500.0))
        timer.tick("setup")
        timer.tick("ready")
        timer.tick("setup")
        assert timer.between("setup", "ready") == -300.0

    def test_clear(self):
        timer = Timer(clock=_clock(1.0))
        timer.tick("setup")
        timer.clear("setup")
        timer.clear("never-ticked")
        assert timer.dump()["events"] == {}

    def test_default_clock_is_wall_time_ms(self):
        timer = Timer()
        timer.tick("a")
        timer.tick("b")
        assert timer.between("a", "b") >= 0
        assert timer.dump()["events"]["a"] > 1e12


class TestDurations:
    def test_start_end_accumulates(self):
        timer = Timer(clock=_clock(0.0, 10.0, 20.0, 25.0))
        timer.start("buffer")
        timer.end("buffer")
        timer.start("buffer")
        timer.end("buffer")
        dump = timer.dump()
        assert dump["counts"] == {"buffer": 2}
        assert dump["sums"] == {"buffer": 15.0}

    def test_end_without_start_is_noop(self):
        timer = Timer(clock=_clock())
        timer.end("buffer")
        assert timer.dump()["sums"] == {}

    def test_dump_is_a_copy(self):
        timer = Timer(clock=_clock(1.0))
        timer.tick("setup")
        timer.dump()["events"].clear()
        assert "setup" in timer.dump()["events"]
