# driver/governor.py
import time
from typing import Callable, Optional

import psutil

TIME_LIMIT_SEC = 30 * 60  # 30 minutes
MEM_LIMIT_BYTES = 1 * 1024 * 1024 * 1024  # 1 GB

_PROC = psutil.Process()


def current_rss_bytes() -> int:
    """Resident set size of this process right now (not the lifetime peak)."""
    return _PROC.memory_info().rss


class ResourceGovernor:
    """
    Wall-clock and memory ceilings for one search invocation.

    The engines call check() at fixed points (after every color trial in
    backtracking, once per beam iteration). Once a ceiling is hit the stopped
    flag stays set until the next start().
    """

    def __init__(
        self,
        time_limit_sec: float = TIME_LIMIT_SEC,
        mem_limit_bytes: Optional[int] = MEM_LIMIT_BYTES,
        memory_probe: Callable[[], int] = current_rss_bytes,
        clock: Callable[[], float] = time.perf_counter,
    ):
        if time_limit_sec is None or time_limit_sec < 0:
            raise ValueError(f"time_limit_sec must be >= 0, got {time_limit_sec}")
        if mem_limit_bytes is not None and mem_limit_bytes < 0:
            raise ValueError(f"mem_limit_bytes must be >= 0, got {mem_limit_bytes}")
        self.time_limit_sec = time_limit_sec
        self.mem_limit_bytes = mem_limit_bytes
        self._probe = memory_probe
        self._clock = clock
        self._t0 = clock()
        self._stopped = False

    def start(self) -> "ResourceGovernor":
        self._t0 = self._clock()
        self._stopped = False
        return self

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def elapsed_sec(self) -> float:
        return self._clock() - self._t0

    def check(self) -> bool:
        """True when the search must stop now."""
        if self._stopped:
            return True
        if self.elapsed_sec >= self.time_limit_sec:
            self._stopped = True
        elif self.mem_limit_bytes is not None and self._probe() > self.mem_limit_bytes:
            self._stopped = True
        return self._stopped
