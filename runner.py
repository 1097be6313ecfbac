# runner.py
# Batch experiment runner: BCTR / BEAM x DGR / MY over random maps and DIMACS files.
#
# Supports:
#   - Random connected maps (spanning tree + extra edges) for every n in --ns
#   - DIMACS .col parsing (optional --dimacs-dir)
#   - Several color counts per instance (--colors)
#
# Outputs:
#   - A raw per-run CSV (one row per trial), rewritten atomically after every run
#   - A summary CSV (aggregate per instance family + algo + heuristic + colors)

from __future__ import annotations

import argparse
import csv
import os
import random
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List

from graph.generator import map_factory
from graph.loader import load_dimacs_col
from graph.model import AdjacencyGraph
from graph.verify import verify_coloring
from heuristics.conflict import Heuristic
from driver.beam import BEAM_K, MAX_ITER_BEAM
from driver.governor import TIME_LIMIT_SEC
from experiments.harness import TrialRecord, run_series, summarize_results


# --------------------------
# Data structures
# --------------------------

@dataclass(frozen=True)
class Instance:
    name: str
    family: str
    n: int
    factory: Callable[[], AdjacencyGraph]


# --------------------------
# Utilities
# --------------------------

def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def atomic_write_csv(path: Path, fieldnames: List[str], rows: List[Dict[str, Any]]) -> None:
    """
    Rewrite the CSV atomically: write .tmp -> flush+fsync -> os.replace,
    so a killed run still leaves a complete, readable file on disk.
    """
    tmp = path.with_suffix(path.suffix + ".tmp")
    ensure_dir(path.parent)

    with tmp.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
        w.writeheader()
        for r in rows:
            w.writerow({k: r.get(k, "") for k in fieldnames})
        f.flush()
        os.fsync(f.fileno())

    os.replace(tmp, path)


def parse_int_list(s: str) -> List[int]:
    s = (s or "").strip()
    if not s:
        return []
    return [int(x.strip()) for x in s.split(",") if x.strip()]


def parse_str_list(s: str) -> List[str]:
    return [x.strip().upper() for x in (s or "").split(",") if x.strip()]


# --------------------------
# Instances
# --------------------------

def build_instances(args: argparse.Namespace, rng: random.Random) -> List[Instance]:
    inst: List[Instance] = []
    for n in parse_int_list(args.ns):
        inst.append(Instance(
            name=f"MAP_n{n}_p{args.extra_edge_prob:g}",
            family="random_map",
            n=n,
            factory=map_factory(n, args.extra_edge_prob, seed=rng),
        ))

    if args.dimacs_dir:
        ddir = Path(args.dimacs_dir)
        if ddir.exists():
            for p in sorted(ddir.glob("*.col")):
                G = load_dimacs_col(p)
                inst.append(Instance(name=p.stem, family="dimacs", n=G.num_vertices, factory=lambda G=G: G))
        else:
            print(f"[WARN] DIMACS dir not found: {ddir}", file=sys.stderr)

    if args.max_instances > 0:
        inst = inst[: args.max_instances]
    return inst


def trial_row(inst: Instance, rec: TrialRecord, run_id: int, colors: int, args: argparse.Namespace) -> Dict[str, Any]:
    res = rec.result
    rep = verify_coloring(rec.graph, res.assignment, allowed_colors=range(colors)) if res.found else None
    row = {
        "instance": inst.name,
        "family": inst.family,
        "run": run_id,
        "colors": colors,
        "beam_k": args.beam_k if res.algo == "BEAM" else "",
        "max_iter": args.max_iter_beam if res.algo == "BEAM" else "",
        "time_limit_sec": args.time_limit,
        "verified": rep["feasible"] if rep is not None else "",
    }
    row.update(rec.graph.stats())
    row.update(res.as_row())
    return row


RUN_FIELDS = [
    "instance", "family", "n", "m", "density", "avg_deg",
    "algo", "heuristic", "colors", "beam_k", "max_iter", "time_limit_sec", "run",
    "found", "stopped", "stop_reason", "verified",
    "steps", "dead_ends", "generated_states", "memory_states", "runtime_sec",
]
SUM_FIELDS = [
    "instance", "algo", "heuristic", "colors", "runs", "found_count", "found_pct",
    "avg_steps", "avg_dead_ends", "avg_generated", "avg_memory_states", "avg_time_sec", "stopped_count",
]


# --------------------------
# Main
# --------------------------

def main(argv=None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--out-dir", default="results")
    ap.add_argument("--out-csv", default="results_runs.csv")
    ap.add_argument("--summary-csv", default="results_summary.csv")
    ap.add_argument("--ns", default="10,15,20")
    ap.add_argument("--extra-edge-prob", type=float, default=0.12)
    ap.add_argument("--colors", default="3,4")
    ap.add_argument("--algos", default="BCTR,BEAM")
    ap.add_argument("--heuristics", default="DGR,MY")
    ap.add_argument("--runs", type=int, default=10)
    ap.add_argument("--beam-k", type=int, default=BEAM_K)
    ap.add_argument("--max-iter-beam", type=int, default=MAX_ITER_BEAM)
    ap.add_argument("--time-limit", type=float, default=TIME_LIMIT_SEC)
    ap.add_argument("--mem-limit-mb", type=int, default=1024)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--dimacs-dir", default="")
    ap.add_argument("--max-instances", type=int, default=0)  # 0 = no cap
    ap.add_argument("--quiet", action="store_true")
    args = ap.parse_args(argv)

    rng = random.Random(args.seed)
    out_dir = Path(args.out_dir)
    ensure_dir(out_dir)
    out_csv_path = out_dir / args.out_csv
    out_sum_path = out_dir / args.summary_csv

    instances = build_instances(args, rng)
    algos = parse_str_list(args.algos)
    heuristics = [Heuristic.parse(h) for h in parse_str_list(args.heuristics)]
    color_counts = parse_int_list(args.colors)

    print(f"[Runner] instances={len(instances)} algos={algos} heuristics={[h.value for h in heuristics]} "
          f"colors={color_counts} runs={args.runs} time_limit={args.time_limit}s")

    run_rows: List[Dict[str, Any]] = []
    sum_rows: List[Dict[str, Any]] = []
    t_start = time.perf_counter()

    for inst in instances:
        for algo in algos:
            for h in heuristics:
                for colors in color_counts:
                    records = run_series(
                        algo, inst.factory, runs=args.runs, verbose=not args.quiet,
                        colors=colors, heuristic=h,
                        beam_width=args.beam_k, max_iter=args.max_iter_beam,
                        time_limit_sec=args.time_limit,
                        mem_limit_bytes=args.mem_limit_mb * 1024 * 1024,
                        rng=rng,
                    )
                    for i, rec in enumerate(records):
                        run_rows.append(trial_row(inst, rec, i, colors, args))
                    summary = summarize_results(records)
                    summary.update({"instance": inst.name, "algo": algo, "heuristic": h.value, "colors": colors})
                    sum_rows.append(summary)

                    atomic_write_csv(out_csv_path, RUN_FIELDS, run_rows)
                    if not args.quiet:
                        print(f"[Runner] {inst.name} {algo}/{h.value} C={colors}: "
                              f"found {summary['found_count']}/{summary['runs']} "
                              f"avg_time={summary['avg_time_sec']:.3f}s")

    atomic_write_csv(out_sum_path, SUM_FIELDS, sum_rows)
    print(f"[Runner] wrote {len(run_rows)} rows -> {out_csv_path}")
    print(f"[Runner] wrote {len(sum_rows)} rows -> {out_sum_path} (total {time.perf_counter() - t_start:.1f}s)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
