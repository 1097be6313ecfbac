import random

import networkx as nx
import pytest

from graph.generator import generate_map, map_factory
from graph.loader import load_demo_graph, load_dimacs_col
from graph.model import AdjacencyGraph, UNASSIGNED
from graph.verify import verify_coloring


def test_from_edges_builds_symmetric_lists():
    g = AdjacencyGraph.from_edges(4, [(0, 1), (1, 2), (2, 3), (3, 0), (1, 0)])
    assert g.num_vertices == 4
    assert g.num_edges == 4
    assert sorted(g.neighbors(0)) == [1, 3]
    assert g.degrees == (2, 2, 2, 2)
    assert list(g.edges()) == [(0, 1), (0, 3), (1, 2), (2, 3)]
    assert list(g) == [0, 1, 2, 3]


@pytest.mark.parametrize("adj", [
    [[0]],             # self-loop
    [[1], []],         # not symmetric
    [[2], [0]],        # out of range
    [[1, 1], [0, 0]],  # duplicate neighbour
])
def test_invalid_adjacency_rejected(adj):
    with pytest.raises(ValueError):
        AdjacencyGraph(adj)


def test_from_edges_rejects_self_loop():
    with pytest.raises(ValueError):
        AdjacencyGraph.from_edges(2, [(1, 1)])


def test_networkx_round_trip_relabels():
    G = nx.Graph()
    G.add_edges_from([("b", "c"), ("a", "b")])
    g = AdjacencyGraph.from_networkx(G)
    # sorted labels: a->0, b->1, c->2
    assert list(g.edges()) == [(0, 1), (1, 2)]
    H = g.to_networkx()
    assert nx.is_isomorphic(G, H)
    assert AdjacencyGraph.from_networkx(H) == g


def test_directed_graphs_rejected():
    with pytest.raises(ValueError):
        AdjacencyGraph.from_networkx(nx.DiGraph([(0, 1)]))


def test_generate_map_is_connected_and_seedable():
    G1 = generate_map(30, 0.12, seed=4)
    G2 = generate_map(30, 0.12, seed=4)
    assert nx.is_connected(G1)
    assert G1.number_of_nodes() == 30
    assert sorted(G1.edges()) == sorted(G2.edges())
    assert nx.number_of_selfloops(G1) == 0


def test_generate_map_tree_only():
    G = generate_map(15, 0.0, seed=0)
    assert nx.is_tree(G)


def test_generate_map_rejects_bad_args():
    with pytest.raises(ValueError):
        generate_map(0)
    with pytest.raises(ValueError):
        generate_map(5, 1.5)


def test_map_factory_gives_fresh_graphs():
    build = map_factory(12, 0.3, seed=random.Random(9))
    a, b = build(), build()
    assert a is not b
    assert a.num_vertices == b.num_vertices == 12
    again = map_factory(12, 0.3, seed=9)
    assert again() == a


def test_load_demo_graph():
    g = load_demo_graph(n=20, p=0.2, seed=1)
    assert g.num_vertices == 20


def test_load_dimacs(tmp_path):
    p = tmp_path / "tri.col"
    p.write_text("c triangle plus isolated vertex\np edge 4 3\ne 1 2\ne 2 3\ne 1 3\ne 2 2\n")
    g = load_dimacs_col(p)
    assert g.num_vertices == 4
    assert g.num_edges == 3
    assert g.degree(3) == 0


def test_verify_coloring_reports():
    g = AdjacencyGraph.from_edges(3, [(0, 1), (1, 2)])
    ok = verify_coloring(g, [0, 1, 0], allowed_colors=range(2))
    assert ok["feasible"] and ok["num_used_colors"] == 2

    bad = verify_coloring(g, [0, 0, UNASSIGNED], allowed_colors=range(2))
    assert not bad["feasible"]
    assert bad["missing_nodes"] == [2]
    assert bad["num_conflicts"] == 2

    oor = verify_coloring(g, [0, 5, 0], allowed_colors=range(2))
    assert oor["out_of_range_nodes"] == [1]

    with pytest.raises(ValueError):
        verify_coloring(g, [0, 1])
