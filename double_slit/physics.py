from __future__ import annotations
import math
import numpy as np

from .config import SimulationConfig
from .modes import Regime


def _as_result(values, scalar_input):
    if scalar_input:
        return float(values)
    return values


def interference_intensity(y, cfg: SimulationConfig):
    """
    Relative two-slit intensity at screen height ``y`` (float or array).
    cos^2 fringes under a sinc^2 envelope, clipped into [0, 1]. Not normalised.
    """
    scalar_input = np.ndim(y) == 0
    y = np.asarray(y, dtype=np.float64)
    dy = y - cfg.center_y
    path_diff = cfg.slit_separation * dy / cfg.slit_to_screen
    phase = 2.0 * np.pi * path_diff / cfg.wavelength

    # epsilon offset keeps the centre finite; an exact zero or NaN envelope counts as 1
    u = dy / cfg.envelope_scale + cfg.envelope_epsilon
    with np.errstate(divide='ignore', invalid='ignore'):
        envelope = (np.sin(u) / u) ** 2
    envelope = np.where(np.isfinite(envelope) & (envelope != 0.0), envelope, 1.0)

    fringe = np.cos(phase / 2.0) ** 2
    out = np.maximum(0.0, fringe * np.minimum(envelope * cfg.envelope_cap, 1.0))
    return _as_result(out, scalar_input)


def classical_intensity(y, cfg: SimulationConfig):
    """Two Gaussian bumps centred on the slits, peak slightly above the scale factor."""
    scalar_input = np.ndim(y) == 0
    y = np.asarray(y, dtype=np.float64)
    two_s2 = 2.0 * cfg.classical_sigma * cfg.classical_sigma
    peak1 = np.exp(-((y - cfg.slit_y1) ** 2) / two_s2)
    peak2 = np.exp(-((y - cfg.slit_y2) ** 2) / two_s2)
    out = (peak1 + peak2) * cfg.classical_scale
    return _as_result(out, scalar_input)


def intensity_for(regime: Regime):
    if regime is Regime.CLASSICAL:
        return classical_intensity
    return interference_intensity


def theory_curve(regime: Regime, cfg: SimulationConfig,
                 y_min: float | None = None,
                 y_max: float | None = None,
                 step: float | None = None) -> tuple[np.ndarray, np.ndarray]:
    y_min = cfg.theory_y_min if y_min is None else float(y_min)
    y_max = cfg.theory_y_max if y_max is None else float(y_max)
    step = cfg.theory_step if step is None else float(step)
    if step <= 0.0:
        raise ValueError(f"theory step must be positive, got {step}")
    ys = np.arange(y_min, y_max + 1e-9, step, dtype=np.float64)
    return ys, intensity_for(regime)(ys, cfg)


def sample_landing_y(regime: Regime,
                     cfg: SimulationConfig,
                     rng: np.random.Generator | None = None) -> float:
    """
    Rejection-sample a landing height against the regime's intensity.

    Candidates are drawn uniformly from ``center_y +- sample_half_width``; those
    outside ``[sample_y_min, sample_y_max]`` are discarded. After
    ``sample_max_attempts`` tries the classical regime falls back to one of the
    slits (coin flip) and the interference regime to the centre line.
    """
    if rng is None:
        rng = np.random.default_rng()
    fn = intensity_for(regime)
    span = 2.0 * cfg.sample_half_width
    for _ in range(int(cfg.sample_max_attempts)):
        y = cfg.center_y + (rng.random() - 0.5) * span
        if y < cfg.sample_y_min or y > cfg.sample_y_max:
            continue
        if rng.random() < fn(y, cfg):
            return float(y)
    if regime is Regime.CLASSICAL:
        return float(cfg.slit_y1 if rng.random() > 0.5 else cfg.slit_y2)
    return float(cfg.center_y)


def bin_of(y: float, bin_size: float) -> float:
    return math.floor(y / bin_size) * bin_size
