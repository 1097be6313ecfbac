#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Experiment analysis for BCTR / BEAM coloring runs.

Input:
  results/results_runs.csv   (written by runner.py)

Outputs:
  results/_analysis_out/tables/*.tex        LaTeX tables (booktabs)
  results/_analysis_out/figures/*.(png|pdf) figures
  results/_analysis_out/data/*.csv          derived tidy tables

Run:
  python3 results/analysis/analyze_experiments.py [--input PATH] [--out-dir PATH]
"""

from __future__ import annotations
import argparse
import math
from pathlib import Path

import pandas as pd
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


# ------------------------- Config -------------------------
SCRIPT_DIR = Path(__file__).resolve().parent
RESULTS_DIR = SCRIPT_DIR.parent
INPUT_CSV = RESULTS_DIR / "results_runs.csv"
OUT_DIR = RESULTS_DIR / "_analysis_out"

GROUP_COLS = ["algo", "heuristic", "n", "colors"]

EXPECTED_COLS = [
    "instance", "family", "n", "m", "density", "avg_deg",
    "algo", "heuristic", "colors", "beam_k", "max_iter", "time_limit_sec", "run",
    "found", "stopped", "stop_reason", "verified",
    "steps", "dead_ends", "generated_states", "memory_states", "runtime_sec",
]

NUMERIC_COLS = [
    "n", "m", "density", "avg_deg", "colors", "beam_k", "max_iter", "time_limit_sec", "run",
    "steps", "dead_ends", "generated_states", "memory_states", "runtime_sec",
]

BOOL_COLS = ["found", "stopped", "verified"]

FIG_FORMATS = ["png", "pdf"]

# ----------------------------------------------------------


def ensure_dirs(out_dir: Path) -> None:
    for sub in ("tables", "figures", "data"):
        (out_dir / sub).mkdir(parents=True, exist_ok=True)


def to_bool_series(s: pd.Series) -> pd.Series:
    def conv(x):
        if pd.isna(x):
            return pd.NA
        t = str(x).strip().lower()
        if t in ("true", "1", "t", "yes", "y"):
            return True
        if t in ("false", "0", "f", "no", "n"):
            return False
        return pd.NA
    return s.apply(conv)


def load_runs(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Missing input: {path.resolve()}")

    df = pd.read_csv(path, dtype="string", low_memory=False)

    for c in EXPECTED_COLS:
        if c not in df.columns:
            df[c] = pd.NA

    for c in BOOL_COLS:
        df[c] = to_bool_series(df[c])
    for c in NUMERIC_COLS:
        df[c] = pd.to_numeric(df[c], errors="coerce")
    return df


def agg_runs(df: pd.DataFrame, group_cols: list[str] = GROUP_COLS) -> pd.DataFrame:
    def rate(x: pd.Series):
        x = x.dropna()
        if len(x) == 0:
            return np.nan
        return float((x == True).mean())

    agg = (df.groupby(group_cols, dropna=False)
             .agg(
                 runs=("algo", "size"),
                 found_rate=("found", rate),
                 stopped_rate=("stopped", rate),
                 steps_mean=("steps", "mean"),
                 dead_ends_mean=("dead_ends", "mean"),
                 generated_mean=("generated_states", "mean"),
                 memory_states_mean=("memory_states", "mean"),
                 runtime_mean_sec=("runtime_sec", "mean"),
                 runtime_std_sec=("runtime_sec", "std"),
             )
             .reset_index())
    return agg.sort_values(group_cols)


def stop_reason_dist(df: pd.DataFrame) -> pd.DataFrame:
    tmp = (df.groupby(["algo", "heuristic", "stop_reason"], dropna=False)
             .size().reset_index(name="count"))
    tmp["share"] = tmp.groupby(["algo", "heuristic"], dropna=False)["count"].transform(lambda x: x / x.sum())
    return tmp.sort_values(["algo", "heuristic", "count"], ascending=[True, True, False])


def latex_table(df: pd.DataFrame, out_tex: Path, caption: str = "", label: str = "") -> None:
    latex = df.to_latex(
        index=False,
        escape=True,
        caption=caption if caption else None,
        label=label if label else None,
        na_rep="",
        float_format=lambda x: f"{x:.3f}" if isinstance(x, float) and not math.isnan(x) else str(x),
    )
    out_tex.write_text(latex, encoding="utf-8")


def save_fig(out_dir: Path, name: str) -> None:
    for ext in FIG_FORMATS:
        plt.savefig(out_dir / "figures" / f"{name}.{ext}", bbox_inches="tight", dpi=200)


def plot_found_rate(summary: pd.DataFrame, out_dir: Path) -> None:
    """Grouped bars: found rate per algo|heuristic, one bar per color count."""
    piv = summary.pivot_table(index=["algo", "heuristic"], columns="colors", values="found_rate", aggfunc="mean")
    if piv.empty:
        return
    x = np.arange(len(piv.index))
    width = 0.8 / max(1, len(piv.columns))

    plt.figure(figsize=(8, 4))
    for i, col in enumerate(piv.columns):
        plt.bar(x + i * width, piv[col].fillna(0.0).values.astype(float), width=width, label=f"C={col:g}")
    plt.xticks(x + width * (len(piv.columns) - 1) / 2, [f"{a}|{h}" for a, h in piv.index])
    plt.ylabel("found rate")
    plt.ylim(0, 1.05)
    plt.title("Share of runs that found a coloring")
    plt.legend(fontsize=8)
    save_fig(out_dir, "found_rate")
    plt.close()


def plot_runtime_vs_n(summary: pd.DataFrame, out_dir: Path) -> None:
    tmp = summary.dropna(subset=["runtime_mean_sec", "n"])
    if len(tmp) == 0:
        return
    plt.figure(figsize=(8, 4))
    for (a, h), sub in tmp.groupby(["algo", "heuristic"]):
        sub = sub.groupby("n", as_index=False)["runtime_mean_sec"].mean()
        plt.plot(sub["n"].astype(float), sub["runtime_mean_sec"].astype(float), marker="o", label=f"{a}|{h}")
    plt.xlabel("n (num vertices)")
    plt.ylabel("runtime_mean_sec")
    plt.yscale("log")
    plt.title("Runtime vs graph size")
    plt.legend(fontsize=8)
    save_fig(out_dir, "runtime_vs_n")
    plt.close()


def run_analysis(input_csv: Path, out_dir: Path) -> pd.DataFrame:
    ensure_dirs(out_dir)
    df = load_runs(input_csv)

    summary = agg_runs(df)
    summary.to_csv(out_dir / "data" / "summary_long.csv", index=False, encoding="utf-8-sig")
    latex_table(
        summary,
        out_dir / "tables" / "summary_long.tex",
        caption="BCTR vs BEAM under DGR and MY (means over runs).",
        label="tab:summary_long",
    )

    stopdist = stop_reason_dist(df)
    stopdist.to_csv(out_dir / "data" / "stop_reason_dist.csv", index=False, encoding="utf-8-sig")

    plot_found_rate(summary, out_dir)
    plot_runtime_vs_n(summary, out_dir)
    return summary


def main(argv=None) -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--input", default=str(INPUT_CSV))
    ap.add_argument("--out-dir", default=str(OUT_DIR))
    args = ap.parse_args(argv)

    print("[Path] INPUT_CSV =", args.input)
    print("[Path] OUT_DIR   =", args.out_dir)
    run_analysis(Path(args.input), Path(args.out_dir))
    print("[OK] Analysis outputs written to:", Path(args.out_dir).resolve())


if __name__ == "__main__":
    main()
