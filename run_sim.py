import argparse
import json
import os
import sys
from dataclasses import asdict
from typing import Optional

import matplotlib

from double_slit.analysis import summarize
from double_slit.config import SimulationConfig, ViewerConfig
from double_slit.modes import Mode
from double_slit.simulation import Simulation


MODE_CHOICES = [m.value for m in Mode]


def _configure_matplotlib(headless: bool) -> None:
    """
    Select a non-interactive backend before pyplot is imported when no window is wanted.
    """
    if headless:
        matplotlib.use("Agg")


def _seed_from_env() -> Optional[int]:
    raw = os.environ.get("DOUBLE_SLIT_SEED")
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        print(f"[warn] Ignoring non-integer DOUBLE_SLIT_SEED={raw!r}")
        return None


def build_config(args):
    cfg = SimulationConfig()
    if args.seed is not None:
        cfg.seed = int(args.seed)
    else:
        cfg.seed = _seed_from_env()
    if args.speed is not None:
        cfg.default_speed = float(args.speed)
    if args.recent_hits is not None:
        cfg.recent_hits = max(0, int(args.recent_hits))
    if args.bin_size is not None:
        cfg.bin_size = max(0.5, float(args.bin_size))

    vcfg = ViewerConfig()
    if args.target_fps is not None:
        vcfg.target_fps = max(1.0, float(args.target_fps))
    if args.show_histogram:
        vcfg.show_histogram = True
    return cfg, vcfg


def build_simulation(cfg: SimulationConfig, args) -> Simulation:
    sim = Simulation(cfg)
    if args.mode:
        sim.set_mode(args.mode)
    if args.observer:
        sim.set_observer(True)
    if args.show_histogram:
        sim.toggle_histogram_view(True)
    return sim


def run_headless(sim: Simulation, ticks: int) -> dict:
    sim.start()
    ran = sim.run_ticks(ticks)
    sim.pause()
    print(f"[info] Ran {ran} ticks in {sim.mode.value} mode")
    return summarize(sim)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Double-slit wave/particle duality simulation.")

    parser.add_argument('--mode', choices=MODE_CHOICES, help='Initial experiment mode')
    parser.add_argument('--speed', type=float, help='Speed multiplier (0.5 - 3.0, steps of 0.5)')
    parser.add_argument('--observer', dest='observer', action='store_true', help='Start with the which-slit observer on')
    parser.add_argument('--no-observer', dest='observer', action='store_false', help='Start with the observer off')
    parser.add_argument('--seed', type=int, help='Seed for the random source (falls back to DOUBLE_SLIT_SEED)')
    parser.add_argument('--show-histogram', action='store_true', help='Open with the distribution panel visible')
    parser.add_argument('--recent-hits', type=int, help='Number of recent hits drawn on the screen')
    parser.add_argument('--bin-size', type=float, help='Histogram bin size in screen units')

    parser.add_argument('--headless', action='store_true', help='Run without a window and print a report')
    parser.add_argument('--ticks', type=int, default=5000, help='Ticks to simulate in headless mode')
    parser.add_argument('--target-fps', type=float, help='Viewer redraw rate (frames per second)')
    parser.add_argument('--dump-config', action='store_true', help='Print the resolved configuration before launching')

    parser.set_defaults(observer=False)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    cfg, vcfg = build_config(args)

    if args.dump_config:
        snapshot = json.dumps({"simulation": asdict(cfg), "viewer": asdict(vcfg)}, indent=2, default=str)
        print(snapshot)

    try:
        sim = build_simulation(cfg, args)
    except ValueError as exc:
        print(f"[error] {exc}")
        return 2

    if args.headless:
        _configure_matplotlib(True)
        report = run_headless(sim, args.ticks)
        print(json.dumps(report, indent=2))
        return 0

    _configure_matplotlib(False)
    from double_slit.app import launch

    print("[info] Press h in the window for the hotkey list.")
    launch(sim, vcfg)
    return 0


if __name__ == "__main__":
    sys.exit(main())
