from __future__ import annotations

import dataclasses

import numpy as np

from double_slit.config import SimulationConfig
from double_slit.modes import Regime
from double_slit.physics import (
    bin_of,
    classical_intensity,
    interference_intensity,
    sample_landing_y,
    theory_curve,
)

CFG = SimulationConfig()
BAND = np.linspace(CFG.sample_y_min, CFG.sample_y_max, 2001)


def test_interference_in_unit_range() -> None:
    values = interference_intensity(BAND, CFG)
    assert values.min() >= 0.0
    assert values.max() <= 1.0


def test_interference_peaks_at_centre() -> None:
    assert interference_intensity(CFG.center_y, CFG) == 1.0


def test_interference_scalar_returns_float() -> None:
    assert isinstance(interference_intensity(120.0, CFG), float)
    assert isinstance(classical_intensity(120.0, CFG), float)


def test_interference_symmetric_about_centre() -> None:
    offsets = np.linspace(0.0, 115.0, 500)
    above = interference_intensity(CFG.center_y - offsets, CFG)
    below = interference_intensity(CFG.center_y + offsets, CFG)
    assert np.max(np.abs(above - below)) < 5e-3


def test_interference_has_dark_fringes() -> None:
    # first dark fringe where the path difference is half a wavelength
    half_fringe = CFG.wavelength * CFG.slit_to_screen / CFG.slit_separation / 2.0
    assert interference_intensity(CFG.center_y + half_fringe, CFG) < 1e-6


def test_interference_is_finite_where_envelope_argument_vanishes() -> None:
    y = CFG.center_y - CFG.envelope_epsilon * CFG.envelope_scale
    value = interference_intensity(y, CFG)
    assert np.isfinite(value)
    assert 0.0 <= value <= 1.0


def test_classical_range() -> None:
    values = classical_intensity(BAND, CFG)
    assert values.min() >= 0.0
    assert values.max() <= 0.95


def test_classical_maxima_at_slits() -> None:
    sigma = CFG.classical_sigma
    fine = np.linspace(CFG.slit_y1 - 20, CFG.slit_y1 + 20, 4001)
    # the neighbouring bump pulls each maximum slightly toward the centre line
    assert abs(fine[np.argmax(classical_intensity(fine, CFG))] - CFG.slit_y1) < 2.0
    fine = np.linspace(CFG.slit_y2 - 20, CFG.slit_y2 + 20, 4001)
    assert abs(fine[np.argmax(classical_intensity(fine, CFG))] - CFG.slit_y2) < 2.0
    # moving a few sigma outward, away from the other slit
    for slit, direction in ((CFG.slit_y1, -1.0), (CFG.slit_y2, 1.0)):
        peak = classical_intensity(slit, CFG)
        assert classical_intensity(slit + direction * 3 * sigma, CFG) < 0.5 * peak
    # local maxima: the midpoint between the slits is a dip
    mid = 0.5 * (CFG.slit_y1 + CFG.slit_y2)
    assert classical_intensity(mid, CFG) < classical_intensity(CFG.slit_y1, CFG)


def test_theory_curve_grid() -> None:
    ys, values = theory_curve(Regime.INTERFERENCE, CFG)
    assert ys[0] == CFG.theory_y_min
    assert ys[-1] == 288.0
    assert len(ys) == len(values) == 77
    np.testing.assert_allclose(values, interference_intensity(ys, CFG))


def test_sampler_stays_in_range_for_both_regimes() -> None:
    rng = np.random.default_rng(1234)
    for regime in Regime:
        draws = np.array([sample_landing_y(regime, CFG, rng) for _ in range(10_000)])
        assert np.all(np.isfinite(draws))
        assert draws.min() >= CFG.sample_y_min
        assert draws.max() <= CFG.sample_y_max


def test_sampler_classical_modes_near_slits() -> None:
    rng = np.random.default_rng(7)
    draws = np.array([sample_landing_y(Regime.CLASSICAL, CFG, rng) for _ in range(10_000)])
    size = CFG.bin_size
    edges = np.arange(CFG.sample_y_min, CFG.sample_y_max + size, size)
    counts, _ = np.histogram(draws, bins=edges)
    smoothed = np.convolve(counts, np.ones(5) / 5.0, mode="same")
    centres = edges[:-1] + size / 2.0

    upper = centres < CFG.center_y
    lower = ~upper
    mode1 = centres[upper][np.argmax(smoothed[upper])]
    mode2 = centres[lower][np.argmax(smoothed[lower])]
    assert abs(mode1 - CFG.slit_y1) <= 1.5 * size
    assert abs(mode2 - CFG.slit_y2) <= 1.5 * size


def test_sampler_fallback_interference_is_centre_line() -> None:
    cfg = dataclasses.replace(CFG, sample_max_attempts=0)
    rng = np.random.default_rng(0)
    assert sample_landing_y(Regime.INTERFERENCE, cfg, rng) == cfg.center_y


def test_sampler_fallback_classical_picks_a_slit() -> None:
    # zero intensity everywhere: every attempt is rejected
    cfg = dataclasses.replace(CFG, classical_scale=0.0)
    rng = np.random.default_rng(3)
    draws = {sample_landing_y(Regime.CLASSICAL, cfg, rng) for _ in range(200)}
    assert draws == {cfg.slit_y1, cfg.slit_y2}


def test_sampler_is_deterministic_under_seed() -> None:
    a = [sample_landing_y(Regime.INTERFERENCE, CFG, np.random.default_rng(99)) for _ in range(3)]
    b = [sample_landing_y(Regime.INTERFERENCE, CFG, np.random.default_rng(99)) for _ in range(3)]
    assert a == b


def test_bin_of_floors() -> None:
    assert bin_of(151.9, 4.0) == 148.0
    assert bin_of(152.0, 4.0) == 152.0
    assert bin_of(-1.0, 4.0) == -4.0
