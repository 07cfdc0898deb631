"""
Plotting and data dumps for hydrocode runs.

Provides:
- Primitive variable profiles against an exact Riemann solution
- Pointwise error profiles
- Colour maps of 2D fields
- Animated GIF of the solution history (moving grid aware)
"""

import os

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

# (key, axis label) of the three panels, in plotting order
PANELS = (('rho', 'Density (ρ)'), ('u', 'Velocity (u)'), ('p', 'Pressure (p)'))

NUMERICAL = dict(marker='o', markersize=1.5, linewidth=0.8, color='#2196F3')
EXACT = dict(linestyle='-', linewidth=1.6, color='#F44336')


class Visualizer:
    """
    Writes figures and data of hydrocode solutions to one directory.

    Parameters
    ----------
    output_dir : str
        Directory for saving output files (created if needed)
    """

    def __init__(self, output_dir='output/results'):
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)
        plt.style.use('seaborn-v0_8-whitegrid')

    def _save(self, fig, filename):
        filepath = os.path.join(self.output_dir, filename)
        fig.savefig(filepath, dpi=150, bbox_inches='tight')
        plt.close(fig)
        print(f"Saved: {filepath}")
        return filepath

    @staticmethod
    def _panels(x, xlabel='x'):
        fig, axes = plt.subplots(1, len(PANELS), figsize=(14, 4))
        for ax, (_, label) in zip(axes, PANELS):
            ax.set_xlabel(xlabel)
            ax.set_ylabel(label)
            ax.set_xlim(np.min(x), np.max(x))
        return fig, axes

    def plot_comparison(self, x, rho_num, u_num, p_num,
                        rho_exact=None, u_exact=None, p_exact=None,
                        t=None, title=None, filename='final_solution.png',
                        x_faces=None):
        """
        Profiles of rho, u and p, optionally over the exact solution.

        Parameters
        ----------
        x : ndarray
            Cell centres
        rho_num, u_num, p_num : ndarrays
            Numerical solution
        rho_exact, u_exact, p_exact : ndarrays, optional
            Exact solution at the same points
        t : float, optional
            Time shown in the default title
        title : str, optional
            Custom title
        filename : str
            Output filename
        x_faces : ndarray, optional
            Cell interfaces of a Lagrangian grid, drawn as a rug under
            the density profile to show where the mesh has compressed
        """
        fig, axes = self._panels(x)
        numerical = (rho_num, u_num, p_num)
        exact = (rho_exact, u_exact, p_exact)

        for ax, num, ref in zip(axes, numerical, exact):
            if ref is not None:
                ax.plot(x, ref, label='Exact', **EXACT)
            ax.plot(x, num, label='Numerical', **NUMERICAL)
            ax.legend(loc='best')

        if x_faces is not None:
            axes[0].plot(x_faces, np.full_like(x_faces, np.min(rho_num)), '|',
                         color='0.4', markersize=6)

        if title is None and t is not None:
            title = f'Solution at t = {t:.4f}'
        if title:
            fig.suptitle(title, fontsize=14)
        fig.tight_layout()
        return self._save(fig, filename)

    def plot_errors(self, x, rho_num, u_num, p_num,
                    rho_exact, u_exact, p_exact,
                    filename='errors.png'):
        """Pointwise error (numerical minus exact) of rho, u and p."""
        fig, axes = self._panels(x)
        pairs = ((rho_num, rho_exact), (u_num, u_exact), (p_num, p_exact))
        for ax, (num, ref), (_, label) in zip(axes, pairs, PANELS):
            ax.plot(x, num - ref, color='#9C27B0', linewidth=1)
            ax.axhline(0.0, color='k', linestyle='--', linewidth=0.5)
            ax.set_ylabel(f'{label} error')
        fig.suptitle('Numerical Error Distribution', fontsize=14)
        fig.tight_layout()
        return self._save(fig, filename)

    def plot_field_2d(self, field, h_x, h_y, name='Density (ρ)', t=None,
                      filename='field_2d.png'):
        """Colour map of a 2D cell field of shape (n_y, n_x)."""
        n_y, n_x = field.shape
        fig, ax = plt.subplots(figsize=(6, 5))
        mesh = ax.pcolormesh(np.arange(n_x + 1) * h_x, np.arange(n_y + 1) * h_y,
                             field, shading='flat', cmap='viridis')
        fig.colorbar(mesh, ax=ax, label=name)
        ax.set_xlabel('x')
        ax.set_ylabel('y')
        ax.set_aspect('equal')
        if t is not None:
            ax.set_title(f't = {t:.4f}')
        return self._save(fig, filename)

    def create_animation(self, frames, time_history, exact_solver=None,
                         filename='animation.gif', fps=10, x_0=0.5):
        """
        Animated GIF of the stored time levels.

        Parameters
        ----------
        frames : list of (x, rho, u, p)
            Cell centres and primitive variables per stored time level
        time_history : list of floats
            Time stamps
        exact_solver : ExactRiemannSolution, optional
            Exact solution for comparison
        filename : str
            Output filename
        fps : int
            Frames per second
        x_0 : float
            Initial discontinuity position
        """
        # Limits cover every frame, since Lagrangian grids move
        x_all = np.concatenate([frame[0] for frame in frames])
        fig, axes = self._panels(x_all)

        lines_num, lines_exact = [], []
        for i, ax in enumerate(axes):
            if exact_solver:
                lines_exact.extend(ax.plot([], [], label='Exact', **EXACT))
            lines_num.extend(ax.plot([], [], label='Numerical', **NUMERICAL))
            low = min(np.min(frame[i + 1]) for frame in frames)
            high = max(np.max(frame[i + 1]) for frame in frames)
            pad = 0.05 * (high - low) or 0.1
            ax.set_ylim(low - pad, high + pad)
            ax.legend(loc='best')

        title = fig.suptitle('', fontsize=14)
        fig.tight_layout()

        def init():
            for line in lines_num + lines_exact:
                line.set_data([], [])
            return lines_num + lines_exact

        def animate(k):
            x, rho, u, p = frames[k]
            t = time_history[k]

            for line, values in zip(lines_num, (rho, u, p)):
                line.set_data(x, values)

            if exact_solver and t > 0:
                for line, values in zip(lines_exact, exact_solver.sample(x, t, x_0)):
                    line.set_data(x, values)

            title.set_text(f't = {t:.4f}')
            return lines_num + lines_exact

        anim = FuncAnimation(fig, animate, init_func=init,
                             frames=len(frames), interval=1000 / fps, blit=True)

        filepath = os.path.join(self.output_dir, filename)
        anim.save(filepath, writer='pillow', fps=fps)
        plt.close(fig)
        print(f"Saved: {filepath}")
        return filepath

    def save_data(self, x, rho, u, p, t, filename='solution_data.npz', **extra):
        """Save solution data to NumPy archive."""
        filepath = os.path.join(self.output_dir, filename)
        np.savez(filepath, x=x, rho=rho, u=u, p=p, t=t, **extra)
        print(f"Saved: {filepath}")
        return filepath

    def print_error_summary(self, errors):
        """Print the L1, L2 and max norm errors of each variable."""
        rule = "=" * 56
        print("\n" + rule)
        print("Error against the exact solution")
        print(rule)
        print(f"{'':<6}{'L1':>16}{'L2':>16}{'Linf':>16}")
        for key, _ in PANELS:
            norms = (errors[f'{key}_{norm}'] for norm in ('L1', 'L2', 'Linf'))
            print(f"{key:<6}" + "".join(f"{value:>16.6e}" for value in norms))
        print(rule)
