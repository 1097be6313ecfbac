# driver/beam.py
"""
Beam search (BEAM) over complete colorings.

The frontier holds up to k assignments. Each iteration expands every beam into
all one-flip neighbours (one vertex recolored), ranks them by the conflict
heuristic and keeps the k best whose fingerprint has not been seen earlier in
this run. States may be conflicting; a beam scoring 0 is a solution.

When every neighbour of an iteration is a duplicate the frontier is re-seeded
with k fresh random assignments (random restart) instead of being left empty.
"""
import random
from typing import List, Optional, Sequence, Set, Tuple, Union

from graph.model import AdjacencyGraph
from heuristics.conflict import Heuristic, scorer_for
from driver.governor import ResourceGovernor, TIME_LIMIT_SEC, MEM_LIMIT_BYTES
from driver.result import SearchResult

BEAM_K = 10
MAX_ITER_BEAM = 5000
COLORS = 4

Beam = Tuple[List[int], float]


def fingerprint(assignment: Sequence[int]) -> str:
    return ",".join(str(c) for c in assignment)


class BeamSearchSolver:
    def __init__(
        self,
        beam_width: int = BEAM_K,
        colors: int = COLORS,
        heuristic: Union[str, Heuristic] = Heuristic.DGR,
        max_iter: int = MAX_ITER_BEAM,
        time_limit_sec: float = TIME_LIMIT_SEC,
        mem_limit_bytes: Optional[int] = MEM_LIMIT_BYTES,
        rng: Optional[random.Random] = None,
        governor: Optional[ResourceGovernor] = None,
    ):
        if beam_width < 1:
            raise ValueError(f"beam_width must be >= 1, got {beam_width}")
        if colors < 1:
            raise ValueError(f"colors must be >= 1, got {colors}")
        if max_iter < 0:
            raise ValueError(f"max_iter must be >= 0, got {max_iter}")
        self.beam_width = beam_width
        self.colors = colors
        self.heuristic = Heuristic.parse(heuristic)
        self.max_iter = max_iter
        self.rng = rng or random.Random()
        self.governor = governor or ResourceGovernor(time_limit_sec, mem_limit_bytes)

    def _random_assignment(self, n: int) -> List[int]:
        return [self.rng.randint(0, self.colors - 1) for _ in range(n)]

    def _check_initial(self, graph: AdjacencyGraph, initial: Sequence[int]) -> List[int]:
        s = list(initial)
        if len(s) != graph.num_vertices:
            raise ValueError(
                f"Initial assignment has length {len(s)}, graph has {graph.num_vertices} vertices"
            )
        for v, c in enumerate(s):
            if not (0 <= c < self.colors):
                raise ValueError(f"Initial color {c} of vertex {v} outside 0..{self.colors - 1}")
        return s

    def solve(self, graph: AdjacencyGraph, initial: Optional[Sequence[int]] = None) -> SearchResult:
        n = graph.num_vertices
        score = scorer_for(self.heuristic)
        seed_state = self._check_initial(graph, initial) if initial is not None else None
        gov = self.governor.start()

        if seed_state is not None:
            beams: List[Beam] = [(seed_state, score(seed_state, graph))]
        else:
            beams = []
            for _ in range(self.beam_width):
                s = self._random_assignment(n)
                beams.append((s, score(s, graph)))

        seen: Set[str] = set()
        generated = 0
        iters = 0

        def result(found: bool, assignment: Optional[List[int]], memory_states: int) -> SearchResult:
            return SearchResult(
                algo="BEAM",
                heuristic=self.heuristic.value,
                found=found,
                assignment=tuple(assignment) if assignment is not None else None,
                generated_states=generated,
                dead_ends=0,
                steps=iters,
                memory_states=memory_states,
                runtime_sec=gov.elapsed_sec,
                stopped=gov.stopped,
            )

        while iters < self.max_iter:
            if gov.check():
                break
            iters += 1

            for s, h in beams:
                if h == 0:
                    return result(True, s, len(beams))

            # one-flip neighbours of every beam
            neighbors: List[Beam] = []
            for s, _h in beams:
                for v in range(n):
                    original = s[v]
                    for c in range(self.colors):
                        if c == original:
                            continue
                        ns = s.copy()
                        ns[v] = c
                        generated += 1
                        neighbors.append((ns, score(ns, graph)))
            if not neighbors:
                break

            # stable sort keeps generation order among equal scores
            neighbors.sort(key=lambda b: b[1])
            new_beams: List[Beam] = []
            for ns, h in neighbors:
                if len(new_beams) >= self.beam_width:
                    break
                key = fingerprint(ns)
                if key not in seen:
                    seen.add(key)
                    new_beams.append((ns, h))

            if not new_beams:
                # all candidates already visited: random restart
                for _ in range(self.beam_width):
                    s = self._random_assignment(n)
                    new_beams.append((s, score(s, graph)))
            beams = new_beams

        return result(False, None, self.beam_width)


def solve_beam(
    graph: AdjacencyGraph,
    beam_width: int = BEAM_K,
    colors: int = COLORS,
    heuristic: Union[str, Heuristic] = Heuristic.DGR,
    max_iter: int = MAX_ITER_BEAM,
    time_limit_sec: float = TIME_LIMIT_SEC,
    mem_limit_bytes: Optional[int] = MEM_LIMIT_BYTES,
    initial: Optional[Sequence[int]] = None,
    rng: Optional[random.Random] = None,
    governor: Optional[ResourceGovernor] = None,
) -> SearchResult:
    return BeamSearchSolver(
        beam_width=beam_width,
        colors=colors,
        heuristic=heuristic,
        max_iter=max_iter,
        time_limit_sec=time_limit_sec,
        mem_limit_bytes=mem_limit_bytes,
        rng=rng,
        governor=governor,
    ).solve(graph, initial=initial)
