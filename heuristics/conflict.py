# heuristics/conflict.py
"""
Conflict-cost heuristics for complete colorings.

Both scores are pure O(E) functions of (assignment, graph): lower is better and
0 means no edge has equal-colored endpoints.
  - DGR: every conflicting edge (u,v) costs deg(u)+deg(v), so conflicts around
    hubs dominate the score.
  - MY:  number of conflicting edges plus 0.5*(c-1) for every vertex that sits
    in c>1 conflicts at once.
"""
from enum import Enum
from typing import Callable, Sequence, Union

from graph.model import AdjacencyGraph, UNASSIGNED

Scorer = Callable[[Sequence[int], AdjacencyGraph], float]


def score_dgr(assignment: Sequence[int], graph: AdjacencyGraph) -> int:
    deg = graph.degrees
    score = 0
    for u, v in graph.edges():
        if assignment[u] == assignment[v]:
            score += deg[u] + deg[v]
    return score


def score_my(assignment: Sequence[int], graph: AdjacencyGraph) -> float:
    conflicts = 0
    per_node = [0] * graph.num_vertices
    for u, v in graph.edges():
        if assignment[u] == assignment[v]:
            conflicts += 1
            per_node[u] += 1
            per_node[v] += 1
    penalty = 0.0
    for c in per_node:
        if c > 1:
            penalty += (c - 1) * 0.5
    return conflicts + penalty


class Heuristic(Enum):
    DGR = "DGR"
    MY = "MY"

    @classmethod
    def parse(cls, value: Union[str, "Heuristic"]) -> "Heuristic":
        if isinstance(value, Heuristic):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown heuristic: {value!r} (expected one of DGR, MY)") from None


_SCORERS = {
    Heuristic.DGR: score_dgr,
    Heuristic.MY: score_my,
}


def scorer_for(kind: Union[str, Heuristic]) -> Scorer:
    return _SCORERS[Heuristic.parse(kind)]


def vertex_urgency(kind: Heuristic, v: int, assignment: Sequence[int], graph: AdjacencyGraph) -> int:
    """
    Selection score of an unassigned vertex for backtracking (higher goes first).

    DGR: static degree.
    MY:  colored neighbours whose color equals assignment[v]. The candidate is
         always unassigned here, so the count compares against UNASSIGNED and
         is 0; selection then falls back to lowest vertex index.
    """
    if kind is Heuristic.DGR:
        return graph.degree(v)
    own = assignment[v]
    return sum(1 for u in graph.neighbors(v) if assignment[u] != UNASSIGNED and assignment[u] == own)
