from __future__ import annotations
import math
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from .config import SimulationConfig
from .modes import Mode, Regime
from .particles import Emitter, Hit, Particle, ParticleView, advance_all
from .physics import theory_curve
from .screen import HitAccumulator


@dataclass
class Session:
    mode: Mode = Mode.WAVE
    running: bool = False
    speed: float = 1.5
    observer: bool = False
    phase_clock: float = 0.0
    show_histogram: bool = False

    @property
    def observer_active(self) -> bool:
        return self.observer and self.mode.has_observer


@dataclass(frozen=True)
class SimulationSnapshot:
    mode: Mode
    running: bool
    observer: bool
    speed: float
    phase_clock: float
    show_histogram: bool
    regime: Regime
    particles: Tuple[ParticleView, ...]
    total_count: int
    recent_hits: Tuple[Hit, ...]
    histogram: Dict[float, int] = field(default_factory=dict)
    tick_count: int = 0

    @property
    def live_count(self) -> int:
        return len(self.particles)

    @property
    def is_interference(self) -> bool:
        return self.regime is Regime.INTERFERENCE


class Simulation:
    """
    Single-writer simulation state plus the tick driver.

    All mutation goes through the control methods and ``tick``; renderers call
    ``snapshot`` between ticks and never touch the live collections.
    """

    def __init__(self, cfg: SimulationConfig | None = None,
                 rng: np.random.Generator | None = None,
                 mode: Mode | str = Mode.WAVE):
        self.cfg = cfg if cfg is not None else SimulationConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.cfg.seed)
        self.session = Session(mode=Mode.parse(mode), speed=self.clamp_speed(self.cfg.default_speed))
        self.particles: List[Particle] = []
        self.emitter = Emitter(self.cfg)
        self.screen = HitAccumulator(self.cfg.bin_size, self.cfg.recent_hits)
        self.tick_count = 0
        self._last_tick_time: Optional[float] = None
        self._tick_listeners: list[Callable[["Simulation"], None]] = []

    # ----- control surface
    def reset(self) -> None:
        s = self.session
        s.running = False
        s.phase_clock = 0.0
        self.particles.clear()
        self.screen.clear()
        self.emitter.reset_ids()
        self.tick_count = 0
        self._last_tick_time = None

    def set_mode(self, mode: Mode | str) -> Mode:
        new_mode = Mode.parse(mode)
        self.reset()
        self.session.mode = new_mode
        self.session.observer = False
        self.session.show_histogram = False
        return new_mode

    def set_observer(self, enabled: bool) -> bool:
        self.reset()
        enabled = bool(enabled)
        if enabled and not self.session.mode.has_observer:
            print(f"[observer] No observer in {self.session.mode.value} mode; ignoring.")
            enabled = False
        self.session.observer = enabled
        return enabled

    def toggle_observer(self) -> bool:
        return self.set_observer(not self.session.observer)

    def set_running(self, running: bool) -> None:
        self.session.running = bool(running)

    def start(self) -> None:
        self.set_running(True)

    def pause(self) -> None:
        self.set_running(False)

    def toggle_running(self) -> bool:
        self.set_running(not self.session.running)
        return self.session.running

    def set_speed(self, value: float) -> float:
        self.session.speed = self.clamp_speed(value)
        return self.session.speed

    def toggle_histogram_view(self, show: Optional[bool] = None) -> bool:
        if show is None:
            show = not self.session.show_histogram
        self.session.show_histogram = bool(show)
        return self.session.show_histogram

    def clamp_speed(self, value: float) -> float:
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"speed must be finite, got {value}")
        cfg = self.cfg
        clamped = min(max(value, cfg.speed_min), cfg.speed_max)
        if cfg.speed_step > 0:
            clamped = round(clamped / cfg.speed_step) * cfg.speed_step
            clamped = min(max(clamped, cfg.speed_min), cfg.speed_max)
        return float(clamped)

    # ----- clock
    def tick(self) -> bool:
        """Run one logical update. Does nothing while paused."""
        s = self.session
        if not s.running:
            return False
        s.phase_clock += self.cfg.clock_step * s.speed
        if s.mode.has_particles:
            for p in advance_all(self.particles, self.cfg, s.speed):
                # the pre-sampled target is recorded, not the eased final y
                self.screen.record(p.target_y)
            p = self.emitter.maybe_spawn(len(self.particles), s.mode,
                                         s.observer_active, s.speed, self.rng)
            if p is not None:
                self.particles.append(p)
        self.tick_count += 1
        self._notify_tick_listeners()
        return True

    def poll(self, now: Optional[float] = None) -> bool:
        """
        Fire at most one tick if the minimum tick interval has passed since
        the previous one. Time spent paused is dropped, never caught up.
        """
        if not self.session.running:
            return False
        if now is None:
            now = time.perf_counter()
        last = self._last_tick_time
        if last is not None and (now - last) * 1000.0 <= self.cfg.tick_interval_ms:
            return False
        self._last_tick_time = now
        return self.tick()

    def run_ticks(self, n: int) -> int:
        ran = 0
        for _ in range(max(0, int(n))):
            if not self.tick():
                break
            ran += 1
        return ran

    # ----- listeners
    def add_tick_listener(self, callback: Callable[["Simulation"], None]):
        if callback in self._tick_listeners:
            return
        self._tick_listeners.append(callback)

    def remove_tick_listener(self, callback: Callable[["Simulation"], None]):
        try:
            self._tick_listeners.remove(callback)
        except ValueError:
            pass

    def _notify_tick_listeners(self):
        if not self._tick_listeners:
            return
        for cb in tuple(self._tick_listeners):
            try:
                cb(self)
            except Exception as exc:
                print(f"[tick-listener] callback error: {exc}")

    # ----- reads
    @property
    def mode(self) -> Mode:
        return self.session.mode

    @property
    def running(self) -> bool:
        return self.session.running

    @property
    def total_count(self) -> int:
        return self.screen.total

    @property
    def current_regime(self) -> Regime:
        s = self.session
        if s.mode is Mode.CLASSICAL_PARTICLE or s.observer_active:
            return Regime.CLASSICAL
        return Regime.INTERFERENCE

    def theory_curves(self) -> Dict[Regime, Tuple[np.ndarray, np.ndarray]]:
        return {regime: theory_curve(regime, self.cfg) for regime in Regime}

    def snapshot(self) -> SimulationSnapshot:
        s = self.session
        return SimulationSnapshot(
            mode=s.mode,
            running=s.running,
            observer=s.observer_active,
            speed=s.speed,
            phase_clock=s.phase_clock,
            show_histogram=s.show_histogram,
            regime=self.current_regime,
            particles=tuple(p.view() for p in self.particles),
            total_count=self.screen.total,
            recent_hits=self.screen.recent(),
            histogram=self.screen.histogram(),
            tick_count=self.tick_count,
        )
