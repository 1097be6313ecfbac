# tests/smoke_tests.py
import os, sys, random

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import networkx as nx
from graph.model import AdjacencyGraph
from driver.backtracking import solve_backtracking
from driver.beam import solve_beam
from graph.verify import verify_coloring

def run_and_check(G, chi, name="Graph"):
    g = AdjacencyGraph.from_networkx(G)

    # chi colors must succeed, chi-1 must be exhausted
    for h in ("DGR", "MY"):
        res = solve_backtracking(g, colors=chi, heuristic=h, time_limit_sec=30)
        assert res.found, f"{name}: BCTR/{h} found nothing with {chi} colors"
        rep = verify_coloring(g, res.assignment, allowed_colors=range(chi))
        assert rep["feasible"], f"{name}: verify_coloring says infeasible"
        if chi > 1:
            below = solve_backtracking(g, colors=chi - 1, heuristic=h, time_limit_sec=30)
            assert below.stop_reason == "exhausted", f"{name}: {chi - 1} colors should be exhausted"

    beam = solve_beam(g, colors=chi, max_iter=500, rng=random.Random(0))
    if beam.found:
        assert verify_coloring(g, beam.assignment, allowed_colors=range(chi))["feasible"]
    print(f"[PASS] {name:20s}  chi={chi}  bctr_steps={res.steps}  beam_found={beam.found}")
    return res

if __name__ == "__main__":

    run_and_check(nx.complete_graph(3), chi=3, name="K3")
    run_and_check(nx.complete_graph(4), chi=4, name="K4")
    run_and_check(nx.cycle_graph(4),    chi=2, name="C4 (even cycle)")
    run_and_check(nx.cycle_graph(5),    chi=3, name="C5 (odd cycle)")
    run_and_check(nx.complete_bipartite_graph(3,4), chi=2, name="K3,4")
    run_and_check(nx.grid_2d_graph(5,5), chi=2, name="Grid 5x5")
    run_and_check(nx.petersen_graph(),   chi=3, name="Petersen")

    print("All smoke tests passed.")
