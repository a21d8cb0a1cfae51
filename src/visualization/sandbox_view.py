"""
Fenetre interactive du sandbox (matplotlib).

Affiche en temps reel:
- Grille d'occupation
- Depart (vert) / arrivee (rouge)
- Chemin lisse (orange) et chemin brut (bleu, optionnel)
- Robot + cap, point de visee pure pursuit

Souris:
    clic gauche         -> depart
    shift + clic gauche -> bascule obstacle
    clic droit          -> arrivee

Clavier:
    r       replanifier + reset      espace  pause
    [ / ]   lookahead -/+            haut/bas vitesse +/-
    ; / '   lissage -/+              c       PID <-> pure pursuit
    p       chemin brut              v       point de visee
    n       carte aleatoire          t       graine deterministe on/off
    1/2/3   carte ouverte/demo/aleatoire
    o       sauver la carte          s / g   depart / arrivee sous le curseur
    q       quitter
"""

import math
import time
from typing import Optional, Tuple

import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Rectangle

from simulation.sandbox import Sandbox


SAVED_MAP_PATH = "assets/maps/saved.png"


class SandboxView:
    """
    Vue matplotlib pilotee par le temps reel.

    Usage:
        view = SandboxView(sandbox)
        view.run()
    """

    FRAME_PERIOD = 1.0 / 60.0
    LOOKAHEAD_STEP = 0.25
    SPEED_STEP = 0.25

    def __init__(self, sandbox: Sandbox):
        self.sandbox = sandbox
        self.running = True
        self.show_raw_path = False
        self.show_lookahead = True
        self._cursor: Optional[Tuple[float, float]] = None

        self._setup_plot()

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _setup_plot(self):
        """Configure le graphique matplotlib."""
        # Les raccourcis par defaut (s, g, p, o, q...) entrent en conflit
        for key in list(plt.rcParams.keys()):
            if key.startswith('keymap.'):
                plt.rcParams[key] = []

        plt.ion()

        grid = self.sandbox.state.grid
        scale = self.sandbox.config.cell_scale
        self.fig, self.ax = plt.subplots(
            1, 1, figsize=(max(4.0, grid.width * scale / 100.0),
                           max(3.0, grid.height * scale / 100.0))
        )
        self.fig.canvas.manager.set_window_title('Path Planning & Control Sandbox')

        self.grid_image = self.ax.imshow(
            grid.get_map_image(), origin='upper', interpolation='nearest',
            extent=(0, grid.width, grid.height, 0), zorder=0
        )
        self.ax.set_xlim(0, grid.width)
        self.ax.set_ylim(grid.height, 0)
        self.ax.set_aspect('equal')
        self.ax.set_xticks([])
        self.ax.set_yticks([])

        self.start_patch = Rectangle((0, 0), 1, 1, facecolor=(0, 1, 0), zorder=2)
        self.goal_patch = Rectangle((0, 0), 1, 1, facecolor=(1, 0, 0), zorder=2)
        self.ax.add_patch(self.start_patch)
        self.ax.add_patch(self.goal_patch)

        self.raw_line, = self.ax.plot([], [], '-', color=(100/255, 100/255, 1.0),
                                      linewidth=1, zorder=3)
        self.smooth_line, = self.ax.plot([], [], '-', color=(1.0, 140/255, 0),
                                         linewidth=2, zorder=4)

        self.robot_patch = Circle((0, 0), 0.4, facecolor=(0, 150/255, 1.0),
                                  edgecolor='black', zorder=10)
        self.ax.add_patch(self.robot_patch)
        self.heading_line, = self.ax.plot([], [], 'k-', linewidth=2, zorder=11)

        self.lookahead_marker, = self.ax.plot([], [], 'o', color=(0, 1, 0),
                                              alpha=0.6, markersize=6, zorder=12)

        self.info_text = self.ax.text(
            0.01, 0.99, '',
            transform=self.ax.transAxes,
            verticalalignment='top',
            fontfamily='monospace',
            fontsize=8,
            bbox=dict(boxstyle='round', facecolor='white', alpha=0.8),
            zorder=20
        )

        self.fig.canvas.mpl_connect('button_press_event', self._on_click)
        self.fig.canvas.mpl_connect('motion_notify_event', self._on_motion)
        self.fig.canvas.mpl_connect('key_press_event', self._on_key)
        self.fig.canvas.mpl_connect('close_event', self._on_close)

    # ------------------------------------------------------------------
    # Evenements
    # ------------------------------------------------------------------

    @staticmethod
    def _to_cell(x: float, y: float) -> Tuple[int, int]:
        return int(math.floor(x)), int(math.floor(y))

    def _on_motion(self, event):
        if event.inaxes is self.ax and event.xdata is not None:
            self._cursor = (event.xdata, event.ydata)

    def _on_click(self, event):
        """Gestion de la souris."""
        if event.inaxes is not self.ax or event.xdata is None:
            return
        cell = self._to_cell(event.xdata, event.ydata)
        if not self.sandbox.state.grid.in_bounds(*cell):
            return

        if event.button == 1:
            if event.key == 'shift':
                self.sandbox.toggle_obstacle(cell)
            else:
                self.sandbox.set_start(cell)
        elif event.button == 3:
            self.sandbox.set_goal(cell)

    def _on_key(self, event):
        """Gestion des touches clavier."""
        sb = self.sandbox
        key = event.key

        if key == 'r':
            sb.replan(reset_pose=True)
        elif key == ' ':
            sb.toggle_pause()
        elif key == '[':
            sb.adjust_lookahead(-self.LOOKAHEAD_STEP)
        elif key == ']':
            sb.adjust_lookahead(self.LOOKAHEAD_STEP)
        elif key == 'up':
            sb.adjust_speed(self.SPEED_STEP)
        elif key == 'down':
            sb.adjust_speed(-self.SPEED_STEP)
        elif key == ';':
            sb.set_smoothing(sb.state.smoothing_iterations - 1)
        elif key == "'":
            sb.set_smoothing(sb.state.smoothing_iterations + 1)
        elif key == 'c':
            sb.toggle_controller()
        elif key == 'p':
            self.show_raw_path = not self.show_raw_path
        elif key == 'v':
            self.show_lookahead = not self.show_lookahead
        elif key == 'n':
            sb.new_random_map()
        elif key == 't':
            sb.toggle_deterministic()
        elif key == '1':
            sb.load_preset('open')
        elif key == '2':
            sb.load_preset('demo')
        elif key == '3':
            sb.load_preset('random')
        elif key == 'o':
            if sb.state.grid.save(SAVED_MAP_PATH):
                print(f"[Sandbox] Carte sauvee: {SAVED_MAP_PATH}")
        elif key in ('s', 'g') and self._cursor is not None:
            cell = self._to_cell(*self._cursor)
            if key == 's':
                sb.set_start(cell)
            else:
                sb.set_goal(cell)
        elif key == 'q':
            self.running = False
            plt.close(self.fig)

    def _on_close(self, event):
        """Fermeture de la fenetre."""
        self.running = False

    # ------------------------------------------------------------------
    # Affichage
    # ------------------------------------------------------------------

    def update_display(self):
        """Met a jour l'affichage."""
        s = self.sandbox.state

        self.grid_image.set_data(s.grid.get_map_image())
        self.start_patch.set_xy(s.start)
        self.goal_patch.set_xy(s.goal)

        if self.show_raw_path and len(s.raw_path) >= 2:
            xs = [x + 0.5 for x, _ in s.raw_path]
            ys = [y + 0.5 for _, y in s.raw_path]
            self.raw_line.set_data(xs, ys)
        else:
            self.raw_line.set_data([], [])

        if len(s.smooth_path) >= 2:
            self.smooth_line.set_data([p[0] for p in s.smooth_path],
                                      [p[1] for p in s.smooth_path])
        else:
            self.smooth_line.set_data([], [])

        pose = s.pose
        self.robot_patch.center = (pose.x, pose.y)
        self.heading_line.set_data(
            [pose.x, pose.x + 0.6 * math.cos(pose.theta)],
            [pose.y, pose.y + 0.6 * math.sin(pose.theta)]
        )

        target = self.sandbox.lookahead_target() if self.show_lookahead else None
        if target is not None:
            self.lookahead_marker.set_data([target[0]], [target[1]])
        else:
            self.lookahead_marker.set_data([], [])

        self.info_text.set_text(self._info())

        self.fig.canvas.draw_idle()
        self.fig.canvas.flush_events()

    def _info(self) -> str:
        sb = self.sandbox
        s = sb.state
        f = sb.config.follower
        status = "PAUSE" if s.paused else ("NO PATH" if not s.has_path else "RUN")
        return (
            f"{status}  ctrl={s.controller}\n"
            f"v={f.target_speed:.2f}  Ld={f.lookahead_distance:.2f}  smooth={s.smoothing_iterations}\n"
            f"cmd=({s.command.velocity:.2f}, {s.command.omega:.2f})\n"
            f"err={s.last_error:+.3f}  rms={s.rms_error:.3f}\n"
            f"path={s.path_length:.1f}  plan={s.last_plan_ms:.2f}ms"
        )

    # ------------------------------------------------------------------

    def run(self):
        """Boucle principale (temps reel, physique a pas fixe)."""
        print("=" * 50)
        print("   PATH PLANNING & CONTROL SANDBOX")
        print("=" * 50)
        print(__doc__.split("Souris:")[1].rstrip())
        print("=" * 50)

        last = time.perf_counter()
        try:
            while self.running and plt.fignum_exists(self.fig.number):
                now = time.perf_counter()
                self.sandbox.advance(now - last)
                last = now

                self.update_display()
                plt.pause(self.FRAME_PERIOD)

        except KeyboardInterrupt:
            print("\nArret par l'utilisateur")

        finally:
            s = self.sandbox.state
            print(f"\n=== RESUME ===")
            print(f"Temps simule: {s.sim_time:.1f}s")
            print(f"Erreur laterale RMS: {s.rms_error:.3f}")
            plt.ioff()
