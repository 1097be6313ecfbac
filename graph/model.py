# graph/model.py
from __future__ import annotations
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

import networkx as nx

UNASSIGNED = -1


class AdjacencyGraph:
    """
    Read-only undirected graph on vertices 0..n-1, stored as adjacency lists.
    Built once per trial; the search engines never mutate it.
    """

    __slots__ = ("_adj", "_deg", "_m")

    def __init__(self, adjacency: Sequence[Iterable[int]]):
        adj = tuple(tuple(nei) for nei in adjacency)
        self._validate(adj)
        self._adj = adj
        self._deg = tuple(len(nei) for nei in adj)
        self._m = sum(self._deg) // 2

    @staticmethod
    def _validate(adj: Tuple[Tuple[int, ...], ...]) -> None:
        n = len(adj)
        sets = [set(nei) for nei in adj]
        for v, nei in enumerate(adj):
            if len(sets[v]) != len(nei):
                raise ValueError(f"Duplicate neighbour in adjacency of vertex {v}")
            for u in nei:
                if not (0 <= u < n):
                    raise ValueError(f"Invalid vertex {u} in adjacency of vertex {v}")
                if u == v:
                    raise ValueError(f"Self-loop on vertex {v}")
                if v not in sets[u]:
                    raise ValueError(f"Edge ({v}, {u}) is not symmetric")

    @classmethod
    def from_edges(cls, n: int, edges: Iterable[Tuple[int, int]]) -> "AdjacencyGraph":
        if n < 0:
            raise ValueError(f"Vertex count must be non-negative, got {n}")
        adj: List[List[int]] = [[] for _ in range(n)]
        seen = set()
        for u, v in edges:
            if not (0 <= u < n and 0 <= v < n):
                raise ValueError(f"Invalid vertex in edge ({u}, {v})")
            if u == v:
                raise ValueError(f"Self-loop on vertex {u}")
            key = (min(u, v), max(u, v))
            if key in seen:
                continue
            seen.add(key)
            adj[u].append(v)
            adj[v].append(u)
        return cls(adj)

    @classmethod
    def from_networkx(cls, G: nx.Graph) -> "AdjacencyGraph":
        # relabel to 0..n-1 in sorted order so every loader yields the same ids
        if G.is_directed():
            raise ValueError("Directed graphs are not supported")
        H = nx.convert_node_labels_to_integers(G, first_label=0, ordering="sorted")
        H.remove_edges_from(nx.selfloop_edges(H))
        return cls([sorted(H.neighbors(v)) for v in range(H.number_of_nodes())])

    def to_networkx(self) -> nx.Graph:
        G = nx.Graph()
        G.add_nodes_from(range(len(self._adj)))
        G.add_edges_from(self.edges())
        return G

    @property
    def num_vertices(self) -> int:
        return len(self._adj)

    @property
    def num_edges(self) -> int:
        return self._m

    @property
    def adjacency(self) -> Tuple[Tuple[int, ...], ...]:
        return self._adj

    @property
    def degrees(self) -> Tuple[int, ...]:
        return self._deg

    def neighbors(self, v: int) -> Tuple[int, ...]:
        return self._adj[v]

    def degree(self, v: int) -> int:
        return self._deg[v]

    def edges(self) -> Iterator[Tuple[int, int]]:
        """Each undirected edge once, as (u, v) with u < v."""
        for u, nei in enumerate(self._adj):
            for v in nei:
                if v > u:
                    yield u, v

    def stats(self) -> Dict[str, float]:
        n, m = self.num_vertices, self.num_edges
        dens = (2.0 * m / (n * (n - 1))) if n >= 2 else 0.0
        avg_deg = (2.0 * m / n) if n >= 1 else 0.0
        return {"n": n, "m": m, "density": dens, "avg_deg": avg_deg}

    def __len__(self) -> int:
        return len(self._adj)

    def __iter__(self) -> Iterator[int]:
        return iter(range(len(self._adj)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AdjacencyGraph):
            return NotImplemented
        return [sorted(a) for a in self._adj] == [sorted(b) for b in other._adj]

    def __hash__(self) -> int:
        return hash(tuple(tuple(sorted(a)) for a in self._adj))

    def __repr__(self) -> str:
        return f"AdjacencyGraph(n={self.num_vertices}, m={self.num_edges})"
