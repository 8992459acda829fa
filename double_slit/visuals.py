from __future__ import annotations
import math
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgba
from matplotlib.patches import Rectangle, Circle

from .analysis import dense_histogram
from .config import SimulationConfig, ViewerConfig
from .modes import Mode, Regime
from .simulation import SimulationSnapshot

BG = '#080815'
BARRIER = '#3a4055'
INTERFERENCE_THEORY = '#00aaff'
CLASSICAL_THEORY = '#ffaa00'


class Visuals:
    """
    Owns the Matplotlib figure and all artists. Reads a SimulationSnapshot per
    frame and never writes back into the simulation.
    """

    def __init__(self, cfg: SimulationConfig, vcfg: ViewerConfig, theory: dict):
        self.cfg = cfg
        self.vcfg = vcfg
        self.theory = theory

        self.fig, (self.ax, self.ax_dist) = plt.subplots(
            1, 2, figsize=(vcfg.figure_width, vcfg.figure_height),
            gridspec_kw={'width_ratios': [1.35, 1.0]},
        )
        self.fig.patch.set_facecolor('#1a1a2e')
        self.fig.subplots_adjust(left=0.02, right=0.98, top=0.92, bottom=0.2, wspace=0.08)
        self._setup_experiment_axes()
        self._setup_distribution_axes()

    # ------------------------------------------------------------------ setup
    def _setup_experiment_axes(self):
        cfg = self.cfg
        ax = self.ax
        ax.set_facecolor(BG)
        ax.set_xlim(0, 380)
        ax.set_ylim(350, 0)  # y grows downward like the screen coordinates
        ax.set_aspect('equal')
        ax.set_xticks([]); ax.set_yticks([])

        for x, label in ((40, 'Source'), (cfg.slit_x - 5, 'Double slit'), (cfg.screen_x + 5, 'Screen')):
            ax.text(x, 22, label, color='#555555', fontsize=8)

        cy = cfg.center_y
        ax.add_patch(Rectangle((15, cy - 25), 40, 50, facecolor='#1a1a2a', edgecolor='#333333'))
        self.source_glow = Circle((35, cy), 10, alpha=0.7)
        ax.add_patch(self.source_glow)
        ax.add_patch(Circle((35, cy), 4, facecolor='white'))

        half = cfg.slit_width / 2.0
        for y0, y1 in ((cfg.screen_top, cfg.slit_y1 - half),
                       (cfg.slit_y1 + half, cfg.slit_y2 - half),
                       (cfg.slit_y2 + half, cfg.screen_bottom)):
            ax.add_patch(Rectangle((cfg.slit_x, y0), cfg.slit_width, y1 - y0,
                                   facecolor=BARRIER, edgecolor='#4a5065'))

        self.observer_marks = [
            Circle((cfg.slit_x - 8, sy), 8, facecolor='#ff4444', alpha=0.4, visible=False)
            for sy in (cfg.slit_y1, cfg.slit_y2)
        ]
        for mark in self.observer_marks:
            ax.add_patch(mark)

        ax.add_patch(Rectangle((cfg.screen_x, cfg.screen_top), 10,
                               cfg.screen_bottom - cfg.screen_top,
                               facecolor='#1a1a2a', edgecolor='#333333'))

        # wave-front rings, clipped to the region right of the barrier
        clip = Rectangle((cfg.slit_x + 5, 0), 400, 400, transform=ax.transData)
        self.rings = []
        for _ in range(self.vcfg.wave_rings):
            for sy in (cfg.slit_y1, cfg.slit_y2):
                ring = Circle((cfg.slit_x + 5, sy), 1.0, fill=False, linewidth=1.8, visible=False)
                ax.add_patch(ring)
                ring.set_clip_path(clip)
                self.rings.append((ring, sy))
        self.fronts = [
            ax.plot([], [], linewidth=2.0, alpha=0.35)[0] for _ in range(self.vcfg.incident_fronts)
        ]

        ys, intensity = self.theory[Regime.INTERFERENCE]
        self.screen_glow = ax.scatter(np.full_like(ys, cfg.screen_x + 5), ys, s=14, marker='s',
                                      linewidths=0, visible=False)
        self._glow_alpha = np.clip(intensity * 0.95, 0.0, 1.0)

        self.trails = ax.scatter([], [], s=60, marker='_', alpha=0.25)
        self.dots = ax.scatter([], [], s=30, zorder=6)
        self.rings_dots = ax.scatter([], [], facecolors='none', linewidths=1.0, alpha=0.35, zorder=5)
        self.hits = ax.scatter([], [], s=5, alpha=0.7, zorder=4)
        self.counter = ax.text(360, 340, '', color='#888888', fontsize=9, ha='right')
        self.title = ax.set_title('', color='white', fontsize=11)

    def _setup_distribution_axes(self):
        cfg = self.cfg
        ax = self.ax_dist
        ax.set_facecolor('#0a0a18')
        ax.set_ylim(cfg.theory_y_max, cfg.theory_y_min)
        ax.set_xlim(0, 1.25)
        ax.set_xticks([])
        ax.tick_params(colors='#666666', labelsize=7)
        ax.set_title('Distribution on the screen', color='#aaaaaa', fontsize=10)
        for label, sy in (('S1', cfg.slit_y1), ('S2', cfg.slit_y2)):
            ax.axhline(sy, color='#444444', linewidth=0.8, linestyle=':')
            ax.text(1.2, sy, label, color='#666666', fontsize=7, va='center')

        centres, _ = dense_histogram({}, cfg.bin_size, cfg)
        self.bars = ax.barh(centres, np.zeros_like(centres), height=cfg.bin_size * 0.9, alpha=0.9)
        self.theory_line, = ax.plot([], [], linewidth=1.5, alpha=0.6)
        self.dist_label = ax.text(0.02, cfg.theory_y_min + 6, '', color='#888888', fontsize=8)

    # ------------------------------------------------------------------ per-frame
    def update(self, snap: SimulationSnapshot):
        cfg = self.cfg
        info = snap.mode.info
        color = info.color
        self.title.set_text(info.title + ('  [observer ON]' if snap.observer else ''))
        self.source_glow.set_facecolor(color)
        for mark in self.observer_marks:
            mark.set_visible(snap.observer)

        wave_on = snap.mode is Mode.WAVE and snap.running
        self._update_waves(snap.phase_clock, color, wave_on)
        self.screen_glow.set_visible(wave_on)
        if wave_on:
            rgba = np.tile(to_rgba(color), (len(self._glow_alpha), 1))
            rgba[:, 3] = self._glow_alpha
            self.screen_glow.set_facecolors(rgba)

        if snap.mode.has_particles and snap.particles:
            xy = np.array([(p.x, p.y) for p in snap.particles], dtype=float)
            size = 90 if snap.mode is Mode.CLASSICAL_PARTICLE else 30
            self.dots.set_offsets(xy)
            self.dots.set_sizes(np.full(len(xy), size))
            self.dots.set_color(color)
            self.trails.set_offsets(xy - np.array([8.0, 0.0]))
            self.trails.set_color(color)
            waves = [p for p in snap.particles if not p.is_observed and snap.mode.has_observer]
            if waves:
                self.rings_dots.set_offsets([(p.x, p.y) for p in waves])
                self.rings_dots.set_sizes([(8 + math.sin(p.internal_phase) * 4) ** 2 * 2 for p in waves])
                self.rings_dots.set_edgecolor(color)
            else:
                self.rings_dots.set_offsets(np.empty((0, 2)))
        else:
            for artist in (self.dots, self.trails, self.rings_dots):
                artist.set_offsets(np.empty((0, 2)))

        if snap.mode.has_particles and snap.recent_hits:
            self.hits.set_offsets([(cfg.screen_x + 5, h.y) for h in snap.recent_hits])
            self.hits.set_color(color)
        else:
            self.hits.set_offsets(np.empty((0, 2)))

        if snap.mode.has_particles:
            self.counter.set_text(f"{info.particle_label}: {snap.total_count}")
        else:
            self.counter.set_text('')

        self.ax_dist.set_visible(snap.show_histogram)
        if snap.show_histogram:
            self._update_distribution(snap, color)
        self.fig.canvas.draw_idle()

    def _update_waves(self, phase_clock, color, visible):
        for i, (ring, _sy) in enumerate(self.rings):
            k = i // 2
            radius = (phase_clock * 35 + k * 28) % 250
            show = visible and radius > 8
            ring.set_visible(show)
            if show:
                ring.set_radius(radius)
                ring.set_edgecolor(color)
                ring.set_alpha(max(0.0, 0.7 - radius / 300))
        cy = self.cfg.center_y
        for i, line in enumerate(self.fronts):
            if visible:
                x = 55 + (phase_clock * 35 + i * 22) % 120
                line.set_data([x, x], [cy - 50, cy + 50])
                line.set_color(color)
            else:
                line.set_data([], [])

    def _update_distribution(self, snap: SimulationSnapshot, color):
        regime = Regime.INTERFERENCE if snap.is_interference else Regime.CLASSICAL
        ys, intensity = self.theory[regime]
        if snap.mode is Mode.WAVE:
            self.theory_line.set_data(intensity if snap.running else [], ys if snap.running else [])
            self.theory_line.set_color(color)
            self.theory_line.set_alpha(0.9)
            self.dist_label.set_text('')
            for bar in self.bars:
                bar.set_width(0.0)
            return

        theory_color = INTERFERENCE_THEORY if snap.is_interference else CLASSICAL_THEORY
        self.theory_line.set_data(intensity, ys)
        self.theory_line.set_color(theory_color)
        self.theory_line.set_alpha(0.5)
        self.dist_label.set_text('experiment vs theory')
        _, counts = dense_histogram(snap.histogram, self.cfg.bin_size, self.cfg)
        top = max(float(counts.max()) if counts.size else 0.0, 1.0)
        for bar, n in zip(self.bars, counts):
            bar.set_width(n / top)
            bar.set_color(color)
