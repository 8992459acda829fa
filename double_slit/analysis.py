from __future__ import annotations
from typing import Mapping

import numpy as np
from scipy.signal import find_peaks

from .config import SimulationConfig
from .modes import Regime
from .physics import bin_of, intensity_for
from .screen import HitAccumulator


def dense_histogram(histogram: Mapping[float, int], bin_size: float, cfg: SimulationConfig,
                    merge: int = 1) -> tuple[np.ndarray, np.ndarray]:
    """
    Dense histogram over the sampling band: (bin centres, counts), with empty
    bins filled in. ``merge`` groups neighbouring bins to reduce shot noise.
    """
    size = bin_size * max(1, int(merge))
    start = bin_of(cfg.sample_y_min, size)
    edges = np.arange(start, cfg.sample_y_max, size, dtype=np.float64)
    counts = np.zeros(len(edges), dtype=np.float64)
    for y, n in histogram.items():
        idx = int((bin_of(y, size) - start) // size)
        if 0 <= idx < len(counts):
            counts[idx] += n
    return edges + 0.5 * size, counts


def histogram_density(acc: HitAccumulator, cfg: SimulationConfig,
                      merge: int = 1) -> tuple[np.ndarray, np.ndarray]:
    return dense_histogram(acc.histogram(), acc.bin_size, cfg, merge)


def pattern_correlation(acc: HitAccumulator, regime: Regime, cfg: SimulationConfig,
                        merge: int = 1) -> float:
    centres, counts = histogram_density(acc, cfg, merge)
    theory = intensity_for(regime)(centres, cfg)
    if counts.std() == 0.0 or theory.std() == 0.0:
        return 0.0
    return float(np.corrcoef(counts, theory)[0, 1])


def classify_pattern(acc: HitAccumulator, cfg: SimulationConfig, merge: int = 2) -> Regime:
    scores = {r: pattern_correlation(acc, r, cfg, merge) for r in Regime}
    return max(scores, key=scores.get)


def find_histogram_peaks(acc: HitAccumulator, cfg: SimulationConfig,
                         merge: int = 1,
                         min_prominence: float = 0.1,
                         min_separation: float = 20.0) -> list[float]:
    """Peak positions (bin centres), most prominent first."""
    centres, counts = histogram_density(acc, cfg, merge)
    top = counts.max() if counts.size else 0.0
    if top <= 0.0:
        return []
    spacing = acc.bin_size * max(1, int(merge))
    distance = max(1, int(round(min_separation / spacing)))
    # zero padding lets a peak sit on the first or last bin
    padded = np.concatenate(([0.0], counts, [0.0]))
    idx, props = find_peaks(padded, prominence=min_prominence * top, distance=distance)
    idx = idx - 1
    order = np.argsort(props["prominences"])[::-1]
    return [float(centres[i]) for i in idx[order]]


def summarize(sim) -> dict:
    acc = sim.screen
    cfg = sim.cfg
    summary = {
        "mode": sim.mode.value,
        "observer": sim.session.observer_active,
        "ticks": sim.tick_count,
        "total_hits": acc.total,
        "live_particles": len(sim.particles),
        "phase_clock": round(sim.session.phase_clock, 4),
    }
    if acc.total:
        summary["peaks"] = find_histogram_peaks(acc, cfg, merge=2)
        summary["correlation"] = {
            r.value: round(pattern_correlation(acc, r, cfg, merge=2), 4) for r in Regime
        }
        summary["best_match"] = classify_pattern(acc, cfg).value
    return summary
