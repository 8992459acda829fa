from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Regime(Enum):
    INTERFERENCE = "interference"
    CLASSICAL = "classical"


class Mode(Enum):
    WAVE = "wave"
    CLASSICAL_PARTICLE = "classical_particle"
    ELECTRON_BEAM = "electron_beam"
    SINGLE_ELECTRON = "single_electron"

    @property
    def info(self) -> "ModeInfo":
        return MODE_INFO[self]

    @property
    def has_particles(self) -> bool:
        return self is not Mode.WAVE

    @property
    def has_observer(self) -> bool:
        return MODE_INFO[self].observer_capable

    @classmethod
    def parse(cls, value) -> "Mode":
        """Resolve a mode from an enum member, its value, or a legacy alias."""
        if isinstance(value, cls):
            return value
        key = str(value).strip()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls(key.lower())
        except ValueError:
            raise ValueError(
                f"unknown mode {value!r}; expected one of {[m.value for m in cls]}"
            ) from None


@dataclass(frozen=True)
class ModeInfo:
    title: str
    color: str
    observer_capable: bool
    particle_label: str


MODE_INFO = {
    Mode.WAVE: ModeInfo("Demo 1: Light (wave)", "#ff4444", False, ""),
    Mode.CLASSICAL_PARTICLE: ModeInfo("Demo 2: Ball (particle)", "#ffaa00", False, "Balls"),
    Mode.ELECTRON_BEAM: ModeInfo("Demo 3: Electron beam", "#00aaff", True, "Electrons"),
    Mode.SINGLE_ELECTRON: ModeInfo("Demo 4: Single electron", "#00ff88", True, "Electrons"),
}

MODE_CYCLE = [Mode.WAVE, Mode.CLASSICAL_PARTICLE, Mode.ELECTRON_BEAM, Mode.SINGLE_ELECTRON]

_ALIASES = {
    "light": Mode.WAVE,
    "particle": Mode.CLASSICAL_PARTICLE,
    "ball": Mode.CLASSICAL_PARTICLE,
    "electron": Mode.ELECTRON_BEAM,
    "single": Mode.SINGLE_ELECTRON,
    "classicalParticle": Mode.CLASSICAL_PARTICLE,
    "electronBeam": Mode.ELECTRON_BEAM,
    "singleElectron": Mode.SINGLE_ELECTRON,
}
