from __future__ import annotations

from types import SimpleNamespace

import matplotlib.pyplot as plt
import numpy as np
import pytest

from double_slit.app import DoubleSlitApp
from double_slit.config import SimulationConfig, ViewerConfig
from double_slit.modes import Mode
from double_slit.simulation import Simulation


@pytest.fixture
def app():
    sim = Simulation(SimulationConfig(), rng=np.random.default_rng(0))
    instance = DoubleSlitApp(sim, ViewerConfig(show_histogram=True))
    yield instance
    plt.close(instance.viz.fig)


def _press(app: DoubleSlitApp, key: str) -> None:
    app._on_key(SimpleNamespace(key=key))


def test_keys_drive_control_surface(app, capsys) -> None:
    _press(app, '3')
    assert app.sim.mode is Mode.ELECTRON_BEAM
    _press(app, ' ')
    assert app.sim.running
    _press(app, 'o')
    assert app.sim.session.observer
    assert not app.sim.running
    _press(app, '+')
    assert app.sim.session.speed == 2.0
    _press(app, '-')
    _press(app, '-')
    assert app.sim.session.speed == 1.0
    _press(app, 'd')
    assert app.sim.session.show_histogram
    _press(app, 'c')
    assert app.sim.mode is Mode.SINGLE_ELECTRON
    _press(app, 'h')
    out = capsys.readouterr().out
    assert "Hotkeys:" in out
    assert "[mode]" in out


def test_observer_key_is_refused_in_wave_mode(app, capsys) -> None:
    _press(app, '1')
    _press(app, 'o')
    assert not app.sim.session.observer
    assert "not available" in capsys.readouterr().out


def test_timer_redraws_particles_and_histogram(app) -> None:
    _press(app, '3')
    _press(app, 'd')
    app.sim.set_speed(3.0)
    app.sim.start()
    app.sim.run_ticks(400)
    app._on_timer()
    snap = app.sim.snapshot()
    assert len(app.viz.dots.get_offsets()) == snap.live_count
    assert len(app.viz.hits.get_offsets()) == len(snap.recent_hits)
    assert app.viz.ax_dist.get_visible()
    assert max(bar.get_width() for bar in app.viz.bars) == pytest.approx(1.0)


def test_wave_mode_shows_fronts_only_while_running(app) -> None:
    _press(app, '1')
    app.sim.start()
    app.sim.run_ticks(30)
    app.redraw()
    assert app.viz.screen_glow.get_visible()
    assert any(ring.get_visible() for ring, _ in app.viz.rings)
    _press(app, 'r')
    assert not app.viz.screen_glow.get_visible()
    assert not any(ring.get_visible() for ring, _ in app.viz.rings)
