# main.py
import argparse, random
from graph.generator import map_factory
from graph.verify import verify_coloring, print_check_summary
from heuristics.conflict import Heuristic
from driver.governor import TIME_LIMIT_SEC
from driver.beam import BEAM_K, MAX_ITER_BEAM
from experiments.harness import COLORS, NODES, RUNS, run_series, summarize_results, format_summary
from visualisierung.draw import write_dot, visualize_coloring


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Graph coloring: backtracking (BCTR) vs beam search (BEAM)")
    ap.add_argument("--nodes", type=int, default=NODES)
    ap.add_argument("--runs", type=int, default=RUNS)
    ap.add_argument("--colors", type=int, default=COLORS)
    ap.add_argument("--beam-k", type=int, default=BEAM_K)
    ap.add_argument("--max-iter-beam", type=int, default=MAX_ITER_BEAM)
    ap.add_argument("--extra-edge-prob", type=float, default=0.12)
    ap.add_argument("--time-limit", type=float, default=TIME_LIMIT_SEC)
    ap.add_argument("--mem-limit-mb", type=int, default=1024)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--algos", default="BCTR,BEAM")
    ap.add_argument("--heuristics", default="DGR,MY")
    ap.add_argument("--dot-out", default="graph.dot")
    ap.add_argument("--png-out", default="")  # directory; empty = no PNG
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    rng = random.Random(args.seed)
    algos = [a.strip().upper() for a in args.algos.split(",") if a.strip()]
    heuristics = [Heuristic.parse(h) for h in args.heuristics.split(",") if h.strip()]

    print(f"[Main] nodes={args.nodes} runs={args.runs} colors={args.colors} beam_k={args.beam_k} "
          f"max_iter_beam={args.max_iter_beam} seed={args.seed}")

    all_records = []
    for algo in algos:
        for h in heuristics:
            print(f"\n[Main] running {algo} with {h.value}")
            records = run_series(
                algo,
                map_factory(args.nodes, args.extra_edge_prob, seed=rng),
                runs=args.runs,
                colors=args.colors,
                heuristic=h,
                beam_width=args.beam_k,
                max_iter=args.max_iter_beam,
                time_limit_sec=args.time_limit,
                mem_limit_bytes=args.mem_limit_mb * 1024 * 1024,
                rng=rng,
            )
            print(f"[{algo}/{h.value}] {format_summary(summarize_results(records))}")
            all_records.extend(records)

    sample = next((r for r in all_records if r.result.found), None)
    if sample is not None:
        G, res = sample.graph, sample.result
        print(f"\n[Sample] {res.algo}/{res.heuristic} solution")
        print(f"[Sample] degrees: {list(G.degrees)}")
        print(f"[Sample] assignment: {' '.join(str(c) for c in res.assignment)}")
        rep = verify_coloring(G, res.assignment, allowed_colors=range(args.colors))
        print_check_summary(rep, prefix="[Sample] ")
        if args.dot_out:
            path = write_dot(G, res.assignment, args.dot_out)
            print(f"[Sample] DOT written to {path}")
        if args.png_out:
            fpath = visualize_coloring(G, res.assignment, step=f"{res.algo}-{res.heuristic}",
                                       out_dir=args.png_out)
            print(f"[Sample] PNG written to {fpath}")
    else:
        print("\n[Sample] no run found a coloring")

    print("\n[Main] Done.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
