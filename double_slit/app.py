from __future__ import annotations
import matplotlib.pyplot as plt
from matplotlib.widgets import Button, Slider

from .config import SimulationConfig, ViewerConfig
from .modes import MODE_CYCLE
from .simulation import Simulation
from .visuals import Visuals


class DoubleSlitApp:
    """
    Interactive front end: keys and widgets call the simulation's control
    surface, a canvas timer polls the clock and redraws from a snapshot.
    """

    def __init__(self, sim: Simulation, vcfg: ViewerConfig | None = None):
        self.sim = sim
        self.cfg: SimulationConfig = sim.cfg
        self.vcfg = vcfg if vcfg is not None else ViewerConfig()
        if self.vcfg.show_histogram:
            self.sim.toggle_histogram_view(True)

        self.viz = Visuals(self.cfg, self.vcfg, sim.theory_curves())
        self._build_controls()
        self.viz.fig.canvas.mpl_connect('key_press_event', self._on_key)
        self.viz.fig.canvas.mpl_connect('close_event', self._on_close)

        interval = max(1, int(round(1000.0 / max(1.0, self.vcfg.target_fps))))
        self._timer = self.viz.fig.canvas.new_timer(interval=interval)
        self._timer.add_callback(self._on_timer)
        self._timer.start()
        self.redraw()

    # ----- widgets
    def _build_controls(self):
        fig = self.viz.fig
        cfg = self.cfg
        self._run_btn = Button(fig.add_axes([0.05, 0.05, 0.12, 0.07]), 'Start')
        self._run_btn.on_clicked(lambda _e: self._toggle_running())
        self._reset_btn = Button(fig.add_axes([0.19, 0.05, 0.1, 0.07]), 'Reset')
        self._reset_btn.on_clicked(lambda _e: self._reset())
        self._observer_btn = Button(fig.add_axes([0.31, 0.05, 0.14, 0.07]), 'Observer: OFF')
        self._observer_btn.on_clicked(lambda _e: self._toggle_observer())
        self._dist_btn = Button(fig.add_axes([0.47, 0.05, 0.14, 0.07]), 'Distribution')
        self._dist_btn.on_clicked(lambda _e: self._toggle_distribution())
        self._speed_slider = Slider(
            fig.add_axes([0.7, 0.07, 0.2, 0.03]), 'Speed',
            cfg.speed_min, cfg.speed_max, valinit=self.sim.session.speed, valstep=cfg.speed_step,
        )
        self._speed_slider.on_changed(self._on_speed_change)
        for widget in (self._run_btn, self._reset_btn, self._observer_btn, self._dist_btn):
            widget.label.set_fontsize(9)

    def _sync_controls(self):
        s = self.sim.session
        self._run_btn.label.set_text('Pause' if s.running else 'Start')
        if s.mode.has_observer:
            self._observer_btn.ax.set_visible(True)
            self._observer_btn.label.set_text('Observer: ON' if s.observer else 'Observer: OFF')
        else:
            self._observer_btn.ax.set_visible(False)

    # ----- actions
    def _toggle_running(self):
        running = self.sim.toggle_running()
        print(f"[sim] {'running' if running else 'paused'}")
        self.redraw()

    def _reset(self):
        self.sim.reset()
        print("[sim] reset")
        self.redraw()

    def _toggle_observer(self):
        if not self.sim.mode.has_observer:
            print(f"[observer] Observer is not available in {self.sim.mode.value} mode.")
            return
        enabled = self.sim.toggle_observer()
        print(f"[observer] {'ON' if enabled else 'OFF'} (screen cleared)")
        self.redraw()

    def _toggle_distribution(self):
        shown = self.sim.toggle_histogram_view()
        print(f"[view] distribution {'shown' if shown else 'hidden'}")
        self.redraw()

    def _set_mode(self, mode):
        try:
            new_mode = self.sim.set_mode(mode)
        except ValueError as exc:
            print(f"[warn] {exc}")
            return
        print(f"[mode] {new_mode.info.title}")
        self.redraw()

    def _cycle_mode(self):
        idx = MODE_CYCLE.index(self.sim.mode)
        self._set_mode(MODE_CYCLE[(idx + 1) % len(MODE_CYCLE)])

    def _step_speed(self, direction: int):
        target = self.sim.session.speed + direction * self.cfg.speed_step
        self._speed_slider.set_val(self.sim.clamp_speed(target))

    def _on_speed_change(self, val):
        try:
            speed = self.sim.set_speed(val)
        except ValueError as exc:
            print(f"[warn] {exc}")
            return
        print(f"[speed] {speed:g}x")

    # ----- events
    def _on_key(self, e):
        key = (e.key or "").lower()
        if key == 'q':
            plt.close(self.viz.fig)
        elif key in (' ', 'space'):
            self._toggle_running()
        elif key == 'r':
            self._reset()
        elif key in ('1', '2', '3', '4'):
            self._set_mode(MODE_CYCLE[int(key) - 1])
        elif key == 'c':
            self._cycle_mode()
        elif key == 'o':
            self._toggle_observer()
        elif key in ('+', '='):
            self._step_speed(+1)
        elif key == '-':
            self._step_speed(-1)
        elif key == 'd':
            self._toggle_distribution()
        elif key == 'h':
            self._print_hotkey_help()

    def _on_timer(self):
        self.sim.poll()
        self.redraw()

    def _on_close(self, _event):
        try:
            self._timer.stop()
        except Exception:
            pass

    def redraw(self):
        self._sync_controls()
        self.viz.update(self.sim.snapshot())

    def _print_hotkey_help(self):
        BLUE = "\033[34m\033[4m"
        RESET = "\033[0m"

        def fmt_state(value):
            return f"{BLUE}{value}{RESET}"

        s = self.sim.session
        entries = [
            ("q", "Quit", None),
            ("spc", "Start / pause", 'running' if s.running else 'paused'),
            ("r", "Reset screen and particles", None),
            ("1-4", "Select mode", s.mode.value),
            ("c", "Cycle mode", None),
            ("o", "Toggle observer (electron modes)", 'on' if s.observer_active else 'off'),
            ("+/-", "Change speed", f"{s.speed:g}x"),
            ("d", "Toggle distribution view", 'shown' if s.show_histogram else 'hidden'),
            ("h", "Show this hotkey list", None),
        ]
        lines = []
        for key, desc, state in entries:
            if state is not None:
                lines.append(f"  {key:<3} - {desc} (current: {fmt_state(state)})")
            else:
                lines.append(f"  {key:<3} - {desc}")
        print("\nHotkeys:\n" + "\n".join(lines) + "\n")


def launch(sim: Simulation, vcfg: ViewerConfig | None = None, block: bool = True) -> DoubleSlitApp:
    app = DoubleSlitApp(sim, vcfg)
    if block:
        plt.show()
    return app


