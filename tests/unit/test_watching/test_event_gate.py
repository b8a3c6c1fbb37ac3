"""
Unit tests for the debounce gate.

The gate advances its timestamp before looking at paths, so an irrelevant
notification can swallow a relevant one that follows within the window.
"""

import logging
from pathlib import Path

import pytest

from hotrebuild.models.runtime import ChangeEvent
from hotrebuild.watching import EventGate, PathFilter
from hotrebuild.watching.filters import compile_ignore_spec


def change(*names: str) -> ChangeEvent:
    return ChangeEvent(paths=tuple(Path(n) for n in names))


@pytest.fixture
def path_filter(temp_dir):
    return PathFilter(compile_ignore_spec(["**/target/**"]), frozenset({"rs", "toml"}),
                      frozenset(), base_dir=temp_dir)


@pytest.fixture
def gate(path_filter, fake_clock):
    return EventGate(0.25, path_filter, clock=fake_clock)


@pytest.mark.unit
class TestEventGate:

    def test_first_event_is_admitted(self, gate):
        assert gate.should_trigger(change("src/main.rs"))

    def test_burst_yields_one_trigger(self, gate, fake_clock):
        results = []
        for _ in range(10):
            results.append(gate.should_trigger(change("src/main.rs")))
            fake_clock.advance(0.01)

        assert results.count(True) == 1
        assert results[0] is True

    def test_triggers_are_at_least_one_window_apart(self, gate, fake_clock):
        trigger_times = []
        for _ in range(100):
            if gate.should_trigger(change("src/lib.rs")):
                trigger_times.append(fake_clock())
            fake_clock.advance(0.07)

        gaps = [b - a for a, b in zip(trigger_times, trigger_times[1:])]
        assert len(trigger_times) > 1
        assert all(gap >= 0.25 for gap in gaps)

    def test_event_after_window_is_admitted(self, gate, fake_clock):
        assert gate.should_trigger(change("src/main.rs"))
        fake_clock.advance(0.25)
        assert gate.should_trigger(change("src/main.rs"))

    def test_irrelevant_event_consumes_window(self, gate, fake_clock):
        assert not gate.should_trigger(change("README.md"))
        fake_clock.advance(0.1)

        assert not gate.should_trigger(change("src/main.rs"))

    def test_dropped_event_does_not_extend_window(self, gate, fake_clock):
        assert gate.should_trigger(change("src/main.rs"))
        fake_clock.advance(0.2)
        assert not gate.should_trigger(change("src/main.rs"))
        fake_clock.advance(0.06)

        assert gate.should_trigger(change("src/main.rs"))

    def test_ignored_path_does_not_trigger(self, gate):
        assert not gate.should_trigger(change("target/debug/build.rs"))

    def test_error_event_is_logged_and_dropped(self, gate, caplog):
        event = ChangeEvent(error=OSError("inotify queue overflow"))

        with caplog.at_level(logging.WARNING):
            assert not gate.should_trigger(event)

        assert "inotify queue overflow" in caplog.text

    def test_error_event_consumes_window(self, gate, fake_clock):
        gate.should_trigger(ChangeEvent(error=OSError("boom")))
        fake_clock.advance(0.1)

        assert not gate.should_trigger(change("src/main.rs"))

    def test_zero_debounce_admits_everything(self, path_filter, fake_clock):
        gate = EventGate(0.0, path_filter, clock=fake_clock)

        assert gate.should_trigger(change("a.rs"))
        assert gate.should_trigger(change("b.rs"))

    def test_passes_time_gate_with_explicit_now(self, gate, fake_clock):
        assert gate.passes_time_gate(now=fake_clock())
        assert not gate.passes_time_gate(now=fake_clock() + 0.1)
        assert gate.last_trigger == fake_clock()

    def test_relevant_event_ten_ms_later_is_dropped(self, gate, fake_clock):
        assert gate.should_trigger(change("src/main.rs"))
        fake_clock.advance(0.010)

        assert not gate.should_trigger(change("src/lib.rs"))

    def test_first_event_admitted_with_frozen_clock(self, path_filter):
        gate = EventGate(0.3, path_filter, clock=lambda: 1000.3)

        assert gate.should_trigger(change("src/main.rs"))
        assert not gate.should_trigger(change("src/main.rs"))
