from dataclasses import dataclass
from typing import Optional


@dataclass
class SimulationConfig:
    # Geometry (screen coordinates, y grows downward)
    slit_y1: float = 150.0
    slit_y2: float = 200.0
    slit_width: float = 10.0
    slit_x: float = 180.0
    screen_x: float = 340.0
    center_y: float = 175.0
    screen_top: float = 35.0
    screen_bottom: float = 315.0

    # Interference model
    wavelength: float = 22.0
    envelope_scale: float = 40.0
    envelope_epsilon: float = 0.001
    envelope_cap: float = 1.5

    # Classical model
    classical_sigma: float = 18.0
    classical_scale: float = 0.9

    # Rejection sampler
    sample_half_width: float = 100.0
    sample_y_min: float = 60.0
    sample_y_max: float = 290.0
    sample_max_attempts: int = 150

    # Emitter
    emitter_x: float = 25.0
    emitter_jitter: float = 30.0  # full width of the uniform y jitter
    beam_spawn_rate: float = 0.15
    single_spawn_rate: float = 0.025
    beam_capacity: int = 12
    single_capacity: int = 1

    # Kinematics (per tick at speed 1.0)
    step_x: float = 3.0
    slit_band: float = 25.0
    slit_easing: float = 0.1
    target_easing: float = 0.05
    phase_step: float = 0.25

    # Clock
    clock_step: float = 0.12
    tick_interval_ms: float = 16.0

    # Screen accumulation
    bin_size: float = 4.0
    recent_hits: int = 200

    # Speed control
    speed_min: float = 0.5
    speed_max: float = 3.0
    speed_step: float = 0.5
    default_speed: float = 1.5

    # Theory curve sampling
    theory_y_min: float = 60.0
    theory_y_max: float = 290.0
    theory_step: float = 3.0

    seed: Optional[int] = None

    @property
    def slit_separation(self) -> float:
        return self.slit_y2 - self.slit_y1

    @property
    def slit_to_screen(self) -> float:
        return self.screen_x - self.slit_x


@dataclass
class ViewerConfig:
    target_fps: float = 60.0
    figure_width: float = 11.0
    figure_height: float = 5.5
    blitting: bool = False
    show_histogram: bool = False
    wave_rings: int = 10
    incident_fronts: int = 6
