# experiments/harness.py
import random
import sys
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import numpy as np

from graph.model import AdjacencyGraph
from heuristics.conflict import Heuristic
from driver.backtracking import BacktrackingSolver
from driver.beam import BeamSearchSolver, BEAM_K, MAX_ITER_BEAM
from driver.governor import TIME_LIMIT_SEC, MEM_LIMIT_BYTES
from driver.result import SearchResult

COLORS = 4
NODES = 20
RUNS = 20
ALGOS = ("BCTR", "BEAM")


@dataclass(frozen=True)
class TrialRecord:
    graph: AdjacencyGraph
    result: SearchResult


def run_single(
    graph: AdjacencyGraph,
    algo: str,
    *,
    colors: int = COLORS,
    heuristic: Union[str, Heuristic] = Heuristic.DGR,
    beam_width: int = BEAM_K,
    max_iter: int = MAX_ITER_BEAM,
    time_limit_sec: float = TIME_LIMIT_SEC,
    mem_limit_bytes: Optional[int] = MEM_LIMIT_BYTES,
    initial: Optional[Sequence[int]] = None,
    rng: Optional[random.Random] = None,
) -> SearchResult:
    kind = str(algo).strip().upper()
    if kind == "BCTR":
        if initial is not None:
            raise ValueError("An initial assignment is only supported for BEAM")
        return BacktrackingSolver(
            colors=colors,
            heuristic=heuristic,
            time_limit_sec=time_limit_sec,
            mem_limit_bytes=mem_limit_bytes,
        ).solve(graph)
    if kind == "BEAM":
        return BeamSearchSolver(
            beam_width=beam_width,
            colors=colors,
            heuristic=heuristic,
            max_iter=max_iter,
            time_limit_sec=time_limit_sec,
            mem_limit_bytes=mem_limit_bytes,
            rng=rng,
        ).solve(graph, initial=initial)
    raise ValueError(f"Unknown algo: {algo!r} (expected one of {', '.join(ALGOS)})")


def run_series(
    algo: str,
    graph_factory: Callable[[], AdjacencyGraph],
    runs: int = RUNS,
    verbose: bool = True,
    **opts: Any,
) -> List[TrialRecord]:
    """Run `runs` trials, each on a freshly built graph."""
    records: List[TrialRecord] = []
    for i in range(runs):
        graph = graph_factory()
        res = run_single(graph, algo, **opts)
        records.append(TrialRecord(graph=graph, result=res))
        if res.stopped and verbose:
            print(f"[WARN] Run {i} for {algo} was stopped due to time/mem limits.", file=sys.stderr)
    return records


def summarize_results(records: Sequence[TrialRecord]) -> Dict[str, Any]:
    n = len(records)
    if n == 0:
        return {"runs": 0, "found_count": 0, "found_pct": 0.0, "avg_steps": 0.0,
                "avg_dead_ends": 0.0, "avg_generated": 0.0, "avg_memory_states": 0.0,
                "avg_time_sec": 0.0, "stopped_count": 0}

    res = [r.result for r in records]
    found = sum(1 for r in res if r.found)

    def _mean(vals: List[float]) -> float:
        return float(np.mean(vals))

    return {
        "runs": n,
        "found_count": found,
        "found_pct": 100.0 * found / n,
        "avg_steps": _mean([r.steps for r in res]),
        "avg_dead_ends": _mean([r.dead_ends for r in res]),
        "avg_generated": _mean([r.generated_states for r in res]),
        "avg_memory_states": _mean([r.memory_states for r in res]),
        "avg_time_sec": _mean([r.runtime_sec for r in res]),
        "stopped_count": sum(1 for r in res if r.stopped),
    }


def format_summary(summary: Dict[str, Any]) -> str:
    return (f"runs={summary['runs']} | found={summary['found_count']} ({summary['found_pct']:.1f}%) | "
            f"steps={summary['avg_steps']:.2f} | dead_ends={summary['avg_dead_ends']:.2f} | "
            f"generated={summary['avg_generated']:.2f} | mem_states={summary['avg_memory_states']:.2f} | "
            f"time={summary['avg_time_sec'] * 1000:.0f}ms | stopped={summary['stopped_count']}")
