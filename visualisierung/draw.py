# visualisierung/draw.py
from __future__ import annotations
import os, re
from pathlib import Path
from typing import Dict, Tuple, List, Optional, Sequence, Union
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import networkx as nx

from graph.model import AdjacencyGraph, UNASSIGNED

# Zähler für Schnappschüsse je (Schritt, Runde) → int
_SHOT_COUNTER: Dict[Tuple[str, int], int] = {}

PALETTE = [
    "#E63946", "#457B9D", "#2A9D8F", "#F4A261", "#8E44AD", "#F1C40F",
    "#7F8C8D", "#1ABC9C", "#D35400", "#27AE60", "#C2185B", "#5D6D7E",
]

# DOT-Export: kurze Fünf-Farben-Palette, alles darüber hinaus wird grau
DOT_PALETTE = ["#e6194b", "#3cb44b", "#ffe119", "#4363d8", "#f58231"]
DOT_FALLBACK = "#aaaaaa"

# Layout-Cache pro Graph-Signatur
_POS_CACHE: Dict[int, Dict] = {}


def _sanitize_step(step: str) -> str:
    """Schrittname bereinigen: Kleinbuchstaben, [a-z0-9-_], Mehrfach-Bindestriche zusammenfassen."""
    s = step.strip().lower()
    s = re.sub(r"[^a-z0-9\-_]+", "-", s)
    s = re.sub(r"-+", "-", s).strip("-")
    return s or "step"


def ensure_outdir(out_dir: str) -> None:
    """Ausgabeverzeichnis sicherstellen (rekursiv anlegen)."""
    os.makedirs(out_dir, exist_ok=True)


def color_for_index(idx: int) -> str:
    """Farbwert aus Palette anhand des Farbindizes zurückgeben (zyklisch)."""
    return PALETTE[idx % len(PALETTE)]


def _get_layout(graph: AdjacencyGraph, G: nx.Graph, seed: int = 42) -> Dict:
    """Spring-Layout je Graph-Signatur cachen, damit aufeinanderfolgende Bilder konsistent sind."""
    sig = hash(graph)
    if sig in _POS_CACHE:
        return _POS_CACHE[sig]
    pos = nx.spring_layout(G, seed=seed)
    _POS_CACHE[sig] = pos
    return pos


def to_dot(graph: AdjacencyGraph, assignment: Sequence[int]) -> str:
    """Graphviz-DOT (neato) der Färbung: ein Knoten je Ecke, jede Kante genau einmal."""
    if len(assignment) != graph.num_vertices:
        raise ValueError(
            f"Assignment length {len(assignment)} does not match vertex count {graph.num_vertices}"
        )
    lines = [
        "graph G {",
        "  layout=neato;",
        "  overlap=false;",
        "  node [shape=circle style=filled fontsize=10];",
    ]
    for v in graph:
        c = assignment[v]
        fill = DOT_PALETTE[c] if 0 <= c < len(DOT_PALETTE) else DOT_FALLBACK
        lines.append(f'  {v} [label="{v}", fillcolor="{fill}"];')
    for u, v in graph.edges():
        lines.append(f"  {u} -- {v};")
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_dot(graph: AdjacencyGraph, assignment: Sequence[int], path: Union[str, Path]) -> Path:
    path = Path(path)
    if path.parent != Path(""):
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_dot(graph, assignment), encoding="utf-8")
    return path


def visualize_coloring(
    graph: AdjacencyGraph,
    assignment: Sequence[int],
    step: str,
    round_id: int = 0,
    out_dir: str = "visualisierung/picture",
    layout_seed: int = 42,
    pos: Optional[Dict] = None,
    show_labels: bool = True,
    figure_size: Tuple[float, float] = (8.0, 6.0),
    dpi: int = 220,
) -> str:
    """
    Visualisiert die Färbung als PNG und hebt Unzulässigkeiten hervor:
      - Kanten zwischen gleichfarbigen Nachbarn → schwarz; deren Endknoten → schwarze Füllung
      - Ungefärbte Knoten → hellgrau
      - Alle anderen Knoten → Palettenfarben
    Gibt den Pfad der geschriebenen Datei zurück.
    """
    ensure_outdir(out_dir)
    step_clean = _sanitize_step(step)
    G = graph.to_networkx()

    # Konfliktkanten: beide Endpunkte gefärbt und gleichfarbig
    conflict_edges: List[Tuple[int, int]] = [
        (u, v) for (u, v) in graph.edges()
        if assignment[u] != UNASSIGNED and assignment[u] == assignment[v]
    ]
    conflict_nodes = {x for e in conflict_edges for x in e}

    if pos is None:
        pos = _get_layout(graph, G, seed=layout_seed)

    plt.figure(figsize=figure_size, dpi=dpi)

    conflict_set = set(conflict_edges)
    non_conflict_edges = [e for e in graph.edges() if e not in conflict_set]
    if non_conflict_edges:
        nx.draw_networkx_edges(G, pos, edgelist=non_conflict_edges, width=0.6, alpha=0.25, edge_color="#CCCCCC")
    if conflict_edges:
        nx.draw_networkx_edges(G, pos, edgelist=conflict_edges, width=1.6, alpha=0.95, edge_color="black")

    node_colors = []
    node_edge_colors = []
    nodes_sorted = list(graph)
    for v in nodes_sorted:
        c = assignment[v]
        if v in conflict_nodes:
            node_colors.append("black")
            node_edge_colors.append("black")
        else:
            node_colors.append(color_for_index(c) if c != UNASSIGNED else "#DDDDDD")
            node_edge_colors.append("#555555")
    if nodes_sorted:
        nx.draw_networkx_nodes(
            G, pos,
            nodelist=nodes_sorted,
            node_color=node_colors,
            edgecolors=node_edge_colors,
            linewidths=0.8,
            node_size=260,
        )
    if show_labels:
        labels = {v: str(assignment[v]) for v in nodes_sorted if assignment[v] != UNASSIGNED}
        nx.draw_networkx_labels(G, pos, labels=labels, font_size=7)

    conflicts_cnt = len(conflict_edges)
    # Schnappschuss-Zähler je (Schritt, Runde) erhöhen
    key = (step_clean, int(round_id))
    cnt = _SHOT_COUNTER.get(key, 0) + 1
    _SHOT_COUNTER[key] = cnt
    colored = sum(1 for c in assignment if c != UNASSIGNED)
    plt.title(f"{step} | Round {round_id} | try={cnt:03d} | "
              f"conflicts={conflicts_cnt} (colored {colored}/{graph.num_vertices})")
    plt.axis("off")
    plt.tight_layout()

    fname = f"step-{step_clean}_round-{round_id:03d}_try-{cnt:03d}_conflicts-{conflicts_cnt:03d}.png"
    fpath = os.path.join(out_dir, fname)
    plt.savefig(fpath, bbox_inches="tight")
    plt.close()
    return fpath
