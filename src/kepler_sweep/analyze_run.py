"""Analyze a recorded orbit run and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
import math
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
NUMERIC_COLUMNS = ("tick", "t", "x", "y", "vx", "vy", "r", "energy", "h", "angle_acc")


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, List[object]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(float(value) if key in NUMERIC_COLUMNS else value)
    return {key: np.asarray(values) for key, values in columns.items()}


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row:
                continue
            event = {
                "tick": int(float(row["tick"])),
                "type": row["type"],
                "x": float(row["x"]),
                "y": float(row["y"]),
                "details": {},
            }
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def live_rows(ts: Dict[str, np.ndarray]) -> np.ndarray:
    """Boolean mask of rows logged while the orbit was still being integrated."""

    mode = ts.get("mode")
    if mode is None:
        return np.ones(len(ts.get("tick", [])), dtype=bool)
    return mode == "live"


def relative_drift(values: np.ndarray) -> float:
    if values.size < 2:
        return 0.0
    denom = values[0] if abs(values[0]) > 1e-12 else 1.0
    return float((values[-1] - values[0]) / denom)


def sweep_rates(events: List[dict]) -> List[dict]:
    return [event["details"] for event in events if event["type"] == "sweep_end"]


def rate_spread(rates: List[float]) -> float:
    """(max - min) / mean of the sweep area rates; 0 for fewer than two sweeps."""

    if len(rates) < 2:
        return 0.0
    mean = sum(rates) / len(rates)
    if mean <= 0.0:
        return 0.0
    return (max(rates) - min(rates)) / mean


def plot_orbit(fig_dir: Path, ts: Dict[str, np.ndarray], events: List[dict]) -> None:
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.plot(ts["x"], ts["y"], color="#ffd43b", lw=1.2, label="Planet")
    ax.scatter([0.0], [0.0], color="#fab005", s=80, label="Sun")
    theta = np.linspace(0, 2 * np.pi, 256)
    ax.plot(np.cos(theta), np.sin(theta), color="#adb5bd", alpha=0.3, label="1 AU")
    for event in events:
        if event["type"] == "closure":
            ax.scatter([event["x"]], [event["y"]], color="#f03e3e", s=30, label="Closure")
    ax.set_aspect("equal", "box")
    ax.invert_yaxis()
    ax.set_xlabel("x [AU]")
    ax.set_ylabel("y [AU]")
    ax.set_title("Path (x-y)")
    ax.legend()
    fig.tight_layout()
    fig.savefig(fig_dir / "orbit_xy.png", dpi=150)
    plt.close(fig)


def plot_invariants(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    mask = live_rows(ts)
    fig, (ax_h, ax_e) = plt.subplots(2, 1, figsize=(7, 6), sharex=True)
    ax_h.plot(ts["tick"][mask], ts["h"][mask], color="#94d82d")
    ax_h.set_ylabel("h [AU²/unit]")
    ax_h.set_title(f"Angular momentum, drift {relative_drift(ts['h'][mask]):.2e}")
    ax_h.grid(True, alpha=0.3)
    ax_e.plot(ts["tick"][mask], ts["energy"][mask], color="#ffa94d")
    ax_e.set_xlabel("tick")
    ax_e.set_ylabel("energy")
    ax_e.set_title(f"Specific energy, drift {relative_drift(ts['energy'][mask]):.2e}")
    ax_e.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "invariants.png", dpi=150)
    plt.close(fig)


def plot_sweep_rates(fig_dir: Path, sweeps: List[dict]) -> None:
    if not sweeps:
        return
    rates = [float(sweep.get("rate", 0.0)) for sweep in sweeps]
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.bar(range(1, len(rates) + 1), rates, color="#4dabf7")
    mean = sum(rates) / len(rates)
    ax.axhline(mean, color="#d9480f", linestyle="--", alpha=0.7, label="Mean")
    ax.set_xlabel("sweep")
    ax.set_ylabel("area / day [AU²/d]")
    ax.set_title(f"Sweep area rate, spread {rate_spread(rates):.2%}")
    ax.legend()
    ax.grid(True, axis="y", alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "sweep_rates.png", dpi=150)
    plt.close(fig)


def print_summary(
    run_dir: Path,
    meta: dict,
    ts: Dict[str, np.ndarray],
    events: List[dict],
) -> None:
    mask = live_rows(ts)
    print(f"Run: {run_dir.name}")
    print(f" Launch: speed {meta.get('speed_input')}, angle {meta.get('angle_deg')} deg")
    closures = [event for event in events if event["type"] == "closure"]
    if closures:
        closure = closures[0]
        details = closure["details"] if isinstance(closure["details"], dict) else {}
        print(
            f" Closure at tick {closure['tick']},"
            f" path {details.get('path_length')} points,"
            f" carry-over {details.get('index_carry_over', math.nan):.4f}"
        )
    else:
        print(" Orbit did not close")
    if mask.any():
        print(f" Relative drift h: {relative_drift(ts['h'][mask]):.3e}")
        print(f" Relative drift energy: {relative_drift(ts['energy'][mask]):.3e}")
    sweeps = sweep_rates(events)
    for idx, sweep in enumerate(sweeps):
        print(
            f" Sweep {idx + 1}: area {float(sweep.get('area', 0.0)):.6f} AU^2,"
            f" {float(sweep.get('days', 0.0)):.2f} d"
        )
    if sweeps:
        spread = rate_spread([float(sweep.get("rate", 0.0)) for sweep in sweeps])
        print(f" Area rate spread: {spread:.3%}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Analyze a recorded run and create figures.")
    parser.add_argument("run_dir", nargs="?", help="Path to a specific run folder")
    parser.add_argument("--runs-dir", type=Path, default=Path("data") / "runs")
    args = parser.parse_args(argv)

    base_runs_dir = args.runs_dir
    if args.run_dir:
        run_path = Path(args.run_dir)
        if not run_path.is_dir():
            run_path = base_runs_dir / args.run_dir
    else:
        last_run_file = base_runs_dir / "last_run.txt"
        if not last_run_file.exists():
            parser.error("No run given and last_run.txt is missing.")
        run_id = last_run_file.read_text(encoding="utf-8").strip()
        run_path = base_runs_dir / run_id

    if not run_path.is_dir():
        parser.error(f"Run folder not found: {run_path}")

    meta_path = run_path / META_FILENAME
    ts_path = run_path / TIMESERIES_FILENAME
    ev_path = run_path / EVENTS_FILENAME

    if not meta_path.exists() or not ts_path.exists() or not ev_path.exists():
        parser.error("Run folder is missing meta/timeseries/events files.")

    with meta_path.open("r", encoding="utf-8") as fh:
        meta = json.load(fh)

    ts = load_timeseries(ts_path)
    events = load_events(ev_path)

    if not ts or ts["tick"].size == 0:
        parser.error("timeseries.csv is empty, nothing to analyze.")

    fig_dir = ensure_fig_dir(run_path)
    plot_orbit(fig_dir, ts, events)
    plot_invariants(fig_dir, ts)
    plot_sweep_rates(fig_dir, sweep_rates(events))

    print_summary(run_path, meta, ts, events)


if __name__ == "__main__":
    main()
