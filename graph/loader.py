# graph/loader.py
import re
from pathlib import Path
from typing import List, Tuple

import networkx as nx

from graph.model import AdjacencyGraph


def load_demo_graph(n: int = 20, p: float = 0.15, seed: int = 0) -> AdjacencyGraph:
    # small random graph for quick tests
    return AdjacencyGraph.from_networkx(nx.erdos_renyi_graph(n=n, p=p, seed=seed))


_DIMACS_P_LINE = re.compile(r"^\s*p\s+(\w+)\s+(\d+)\s+(\d+)\s*$", re.IGNORECASE)
_DIMACS_E_LINE = re.compile(r"^\s*e\s+(\d+)\s+(\d+)\s*$", re.IGNORECASE)


def load_dimacs_col(path: Path) -> AdjacencyGraph:
    """
    DIMACS .col format (typical):
      c comment
      p edge <n> <m>
      e u v
    Nodes are 1-based in the file; we convert to 0-based and drop self-loops.
    """
    path = Path(path)
    n_decl = None
    edges: List[Tuple[int, int]] = []
    with path.open("r", encoding="utf-8", errors="ignore") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("c"):
                continue
            mp = _DIMACS_P_LINE.match(line)
            if mp:
                _ptype, n_s, _m_s = mp.groups()
                n_decl = int(n_s)
                continue
            me = _DIMACS_E_LINE.match(line)
            if me:
                u = int(me.group(1)) - 1
                v = int(me.group(2)) - 1
                if u != v:
                    edges.append((u, v))

    if n_decl is None:
        # infer n from the largest vertex id
        n_decl = max((max(u, v) for u, v in edges), default=-1) + 1

    G = nx.Graph()
    G.add_nodes_from(range(n_decl))
    G.add_edges_from(edges)
    return AdjacencyGraph.from_networkx(G)
