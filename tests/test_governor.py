import pytest

from driver.backtracking import solve_backtracking
from driver.governor import ResourceGovernor, current_rss_bytes, MEM_LIMIT_BYTES, TIME_LIMIT_SEC
from graph.model import AdjacencyGraph


class FakeClock:
    def __init__(self):
        self.t = 100.0

    def __call__(self):
        return self.t


def test_defaults():
    gov = ResourceGovernor()
    assert gov.time_limit_sec == TIME_LIMIT_SEC == 1800
    assert gov.mem_limit_bytes == MEM_LIMIT_BYTES == 1024 ** 3


def test_time_ceiling_is_sticky():
    clock = FakeClock()
    gov = ResourceGovernor(time_limit_sec=5, memory_probe=lambda: 0, clock=clock).start()
    assert not gov.check()
    clock.t += 5
    assert gov.check()
    assert gov.stopped
    # going back under the ceiling does not clear the flag
    clock.t -= 5
    assert gov.check()


def test_start_resets():
    clock = FakeClock()
    gov = ResourceGovernor(time_limit_sec=1, memory_probe=lambda: 0, clock=clock).start()
    clock.t += 2
    assert gov.check()
    gov.start()
    assert not gov.stopped
    assert gov.elapsed_sec == 0
    assert not gov.check()


def test_zero_time_limit_trips_on_first_check():
    gov = ResourceGovernor(time_limit_sec=0, memory_probe=lambda: 0, clock=FakeClock()).start()
    assert gov.check()


def test_memory_ceiling():
    usage = {"bytes": 10}
    gov = ResourceGovernor(time_limit_sec=60, mem_limit_bytes=100, memory_probe=lambda: usage["bytes"]).start()
    assert not gov.check()
    usage["bytes"] = 101
    assert gov.check()


def test_memory_ceiling_disabled():
    gov = ResourceGovernor(time_limit_sec=60, mem_limit_bytes=None, memory_probe=lambda: 10 ** 12).start()
    assert not gov.check()


def test_negative_limits_rejected():
    with pytest.raises(ValueError):
        ResourceGovernor(time_limit_sec=-1)
    with pytest.raises(ValueError):
        ResourceGovernor(mem_limit_bytes=-1)


def test_current_rss_is_positive():
    assert current_rss_bytes() > 0


def test_earlier_peak_does_not_trip_later_runs():
    baseline = current_rss_bytes()
    blob = b"\x01" * (300 * 1024 * 1024)  # touched pages, so RSS really grows
    assert current_rss_bytes() > baseline + 200 * 1024 * 1024
    del blob

    cycle4 = AdjacencyGraph.from_edges(4, [(0, 1), (1, 2), (2, 3), (3, 0)])
    res = solve_backtracking(cycle4, colors=2, mem_limit_bytes=baseline + 150 * 1024 * 1024)
    assert res.found
    assert not res.stopped
