# driver/backtracking.py
"""
Exhaustive backtracking (BCTR) with dynamic vertex ordering.

At every level the unassigned vertex with the highest urgency is chosen
(recomputed from scratch, ties to the lowest index), then colors 0..C-1 are
tried in order. Partial validity is enforced eagerly: a color is only placed
if no assigned neighbour already holds it.

The recursion is unrolled into an explicit stack of (vertex, next_color)
frames, so graph size is not bounded by the interpreter's recursion limit.
"""
from dataclasses import dataclass
from typing import List, Optional, Union

from graph.model import AdjacencyGraph, UNASSIGNED
from heuristics.conflict import Heuristic, vertex_urgency
from driver.governor import ResourceGovernor, TIME_LIMIT_SEC, MEM_LIMIT_BYTES
from driver.result import SearchResult

COLORS = 4


@dataclass
class _Frame:
    vertex: int
    next_color: int = 0


@dataclass
class SearchContext:
    """Counters and state owned by one backtracking run."""

    graph: AdjacencyGraph
    colors: int
    heuristic: Heuristic
    governor: ResourceGovernor
    assignment: List[int]
    generated_states: int = 0
    dead_ends: int = 0
    steps: int = 0
    max_depth: int = 0

    def select_next_vertex(self) -> Optional[int]:
        best = None
        best_score = None
        for v, c in enumerate(self.assignment):
            if c != UNASSIGNED:
                continue
            s = vertex_urgency(self.heuristic, v, self.assignment, self.graph)
            if best_score is None or s > best_score:
                best, best_score = v, s
        return best

    def is_valid(self, v: int, c: int) -> bool:
        return all(self.assignment[u] != c for u in self.graph.neighbors(v))


class BacktrackingSolver:
    def __init__(
        self,
        colors: int = COLORS,
        heuristic: Union[str, Heuristic] = Heuristic.DGR,
        time_limit_sec: float = TIME_LIMIT_SEC,
        mem_limit_bytes: Optional[int] = MEM_LIMIT_BYTES,
        governor: Optional[ResourceGovernor] = None,
    ):
        if colors < 1:
            raise ValueError(f"colors must be >= 1, got {colors}")
        self.colors = colors
        self.heuristic = Heuristic.parse(heuristic)
        self.governor = governor or ResourceGovernor(time_limit_sec, mem_limit_bytes)

    def solve(self, graph: AdjacencyGraph) -> SearchResult:
        gov = self.governor.start()
        ctx = SearchContext(
            graph=graph,
            colors=self.colors,
            heuristic=self.heuristic,
            governor=gov,
            assignment=[UNASSIGNED] * graph.num_vertices,
        )
        found = self._search(ctx)
        return SearchResult(
            algo="BCTR",
            heuristic=self.heuristic.value,
            found=found,
            assignment=tuple(ctx.assignment) if found else None,
            generated_states=ctx.generated_states,
            dead_ends=ctx.dead_ends,
            steps=ctx.steps,
            memory_states=ctx.max_depth,
            runtime_sec=gov.elapsed_sec,
            stopped=gov.stopped,
        )

    def _enter(self, ctx: SearchContext, stack: List[_Frame]) -> bool:
        """Open a new level; True when no unassigned vertex is left."""
        v = ctx.select_next_vertex()
        if v is None:
            return True
        # every frame below the new one holds an assigned vertex
        ctx.max_depth = max(ctx.max_depth, len(stack) + 1)
        ctx.steps += 1
        stack.append(_Frame(v))
        return False

    def _search(self, ctx: SearchContext) -> bool:
        stack: List[_Frame] = []
        if self._enter(ctx, stack):
            return True

        while stack:
            frame = stack[-1]
            v = frame.vertex

            if frame.next_color >= ctx.colors:
                # every color failed: dead end, the parent moves on to its next color
                ctx.dead_ends += 1
                stack.pop()
                if stack:
                    ctx.assignment[stack[-1].vertex] = UNASSIGNED
                continue

            c = frame.next_color
            frame.next_color += 1
            ctx.generated_states += 1
            valid = ctx.is_valid(v, c)
            if valid:
                ctx.assignment[v] = c
            if ctx.governor.check():
                return False
            if valid and self._enter(ctx, stack):
                return True

        return False


def solve_backtracking(
    graph: AdjacencyGraph,
    colors: int = COLORS,
    heuristic: Union[str, Heuristic] = Heuristic.DGR,
    time_limit_sec: float = TIME_LIMIT_SEC,
    mem_limit_bytes: Optional[int] = MEM_LIMIT_BYTES,
    governor: Optional[ResourceGovernor] = None,
) -> SearchResult:
    return BacktrackingSolver(
        colors=colors,
        heuristic=heuristic,
        time_limit_sec=time_limit_sec,
        mem_limit_bytes=mem_limit_bytes,
        governor=governor,
    ).solve(graph)
