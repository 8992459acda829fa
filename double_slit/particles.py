from __future__ import annotations
import itertools
import math
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .config import SimulationConfig
from .modes import Mode, Regime
from .physics import sample_landing_y


@dataclass
class Particle:
    id: int
    x: float
    y: float
    target_y: float
    assigned_slit: int
    internal_phase: float
    is_observed: bool

    def slit_y(self, cfg: SimulationConfig) -> float:
        return cfg.slit_y1 if self.assigned_slit == 1 else cfg.slit_y2

    def view(self) -> "ParticleView":
        return ParticleView(self.id, self.x, self.y, self.assigned_slit,
                            self.is_observed, self.internal_phase)


@dataclass(frozen=True)
class ParticleView:
    id: int
    x: float
    y: float
    assigned_slit: int
    is_observed: bool
    internal_phase: float


@dataclass(frozen=True)
class Hit:
    y: float


def advance_particle(p: Particle, cfg: SimulationConfig, speed: float) -> bool:
    """Move one particle by one tick. Returns True once it has reached the screen."""
    p.x += cfg.step_x * speed
    near = cfg.slit_x - cfg.slit_band
    far = cfg.slit_x + cfg.slit_band
    if near < p.x < far:
        p.y += (p.slit_y(cfg) - p.y) * cfg.slit_easing
    elif p.x >= far:
        p.y += (p.target_y - p.y) * cfg.target_easing
    p.internal_phase += cfg.phase_step * speed
    return p.x >= cfg.screen_x


def advance_all(particles: List[Particle], cfg: SimulationConfig, speed: float) -> List[Particle]:
    """
    Advance every live particle in place and swap-remove the ones that hit the
    screen. Retired particles come back in the order they were advanced.
    """
    arrived = [advance_particle(p, cfg, speed) for p in particles]
    retired = [p for p, done in zip(particles, arrived) if done]
    i = 0
    while i < len(particles):
        if particles[i].x >= cfg.screen_x:
            particles[i] = particles[-1]
            particles.pop()
        else:
            i += 1
    return retired


class Emitter:
    """Per-tick spawn decision plus construction of new particles."""

    def __init__(self, cfg: SimulationConfig):
        self.cfg = cfg
        self._ids = itertools.count(1)

    def capacity(self, mode: Mode) -> int:
        if mode is Mode.WAVE:
            return 0
        if mode is Mode.SINGLE_ELECTRON:
            return int(self.cfg.single_capacity)
        return int(self.cfg.beam_capacity)

    def spawn_rate(self, mode: Mode) -> float:
        if mode is Mode.WAVE:
            return 0.0
        if mode is Mode.SINGLE_ELECTRON:
            return float(self.cfg.single_spawn_rate)
        return float(self.cfg.beam_spawn_rate)

    def maybe_spawn(self, live_count: int, mode: Mode, observer: bool, speed: float,
                    rng: np.random.Generator) -> Optional[Particle]:
        if live_count >= self.capacity(mode):
            return None
        if not rng.random() < self.spawn_rate(mode) * speed:
            return None
        return self.spawn(mode, observer, rng)

    def spawn(self, mode: Mode, observer: bool, rng: np.random.Generator) -> Particle:
        cfg = self.cfg
        observed = mode is Mode.CLASSICAL_PARTICLE or (observer and mode.has_observer)
        y = cfg.center_y + (rng.random() - 0.5) * cfg.emitter_jitter
        regime = Regime.CLASSICAL if observed else Regime.INTERFERENCE
        target_y = sample_landing_y(regime, cfg, rng)
        slit = 1 if rng.random() > 0.5 else 2
        phase = rng.random() * 2.0 * math.pi
        return Particle(
            id=next(self._ids),
            x=float(cfg.emitter_x),
            y=float(y),
            target_y=target_y,
            assigned_slit=slit,
            internal_phase=float(phase),
            is_observed=observed,
        )

    def reset_ids(self) -> None:
        self._ids = itertools.count(1)
