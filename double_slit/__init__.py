from .config import SimulationConfig, ViewerConfig
from .modes import Mode, Regime
from .physics import classical_intensity, interference_intensity, sample_landing_y, theory_curve
from .simulation import Simulation, SimulationSnapshot

__all__ = [
    "Simulation",
    "SimulationSnapshot",
    "SimulationConfig",
    "ViewerConfig",
    "Mode",
    "Regime",
    "interference_intensity",
    "classical_intensity",
    "sample_landing_y",
    "theory_curve",
]
