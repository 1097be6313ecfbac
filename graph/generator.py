# graph/generator.py
import random
from typing import Callable, Optional, Union

import networkx as nx

from graph.model import AdjacencyGraph

RandomLike = Union[int, random.Random, None]


def _as_rng(seed: RandomLike) -> random.Random:
    if isinstance(seed, random.Random):
        return seed
    return random.Random(seed)


def generate_map(n: int, extra_edge_prob: float = 0.12, seed: RandomLike = None) -> nx.Graph:
    """
    Connected random "map": a random spanning tree (vertex v hangs off a uniformly
    chosen earlier vertex) plus an extra edge on every pair u<v with probability
    extra_edge_prob. Average degree lands around 3-4 for n=20 and the default prob.
    """
    if n < 1:
        raise ValueError(f"Map needs at least one vertex, got n={n}")
    if not (0.0 <= extra_edge_prob <= 1.0):
        raise ValueError(f"extra_edge_prob must be in [0, 1], got {extra_edge_prob}")
    rng = _as_rng(seed)

    G = nx.Graph()
    G.add_nodes_from(range(n))
    for v in range(1, n):
        G.add_edge(rng.randint(0, v - 1), v)
    for u in range(n):
        for v in range(u + 1, n):
            if rng.random() < extra_edge_prob:
                G.add_edge(u, v)
    return G


def map_factory(
    n: int,
    extra_edge_prob: float = 0.12,
    seed: RandomLike = None,
) -> Callable[[], AdjacencyGraph]:
    """Zero-arg builder handing out a fresh graph per trial from one RNG stream."""
    rng = _as_rng(seed)

    def build() -> AdjacencyGraph:
        return AdjacencyGraph.from_networkx(generate_map(n, extra_edge_prob, seed=rng))

    return build
