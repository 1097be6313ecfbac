# driver/result.py
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one engine run, consumed by the experiment harness."""

    algo: str  # "BCTR" | "BEAM"
    heuristic: str  # "DGR" | "MY"
    found: bool
    assignment: Optional[Tuple[int, ...]]
    generated_states: int
    dead_ends: int
    steps: int
    memory_states: int  # max depth (BCTR) or frontier size (BEAM)
    runtime_sec: float
    stopped: bool

    @property
    def stop_reason(self) -> str:
        if self.found:
            return "found"
        if self.stopped:
            return "stopped"
        return "exhausted"

    def as_row(self) -> Dict[str, Any]:
        return {
            "algo": self.algo,
            "heuristic": self.heuristic,
            "found": self.found,
            "stopped": self.stopped,
            "stop_reason": self.stop_reason,
            "steps": self.steps,
            "dead_ends": self.dead_ends,
            "generated_states": self.generated_states,
            "memory_states": self.memory_states,
            "runtime_sec": self.runtime_sec,
        }
