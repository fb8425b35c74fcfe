"""
Beam trajectory visualization module.

This module draws a ``Projection`` with matplotlib: a 3D scene with the beam
paths, vector glyphs, source/image markers and the coil ring, and three
orthographic 2D views drawn on pixel surfaces.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from matplotlib.lines import Line2D
from mpl_toolkits.mplot3d import Axes3D

from .. import config
from ..core.projection import Projection, projection_limits


def _finish_figure(fig, save_path: Optional[str], suffix: str, dpi: int, show: bool):
    """Save, show or return a figure, following the package convention."""
    if save_path:
        output_path = Path(save_path).parent
        output_path.mkdir(parents=True, exist_ok=True)
        fig.savefig(f'{save_path}_{suffix}.png', dpi=dpi, bbox_inches='tight')
        print(f"[info] Saved {suffix} plot to {save_path}_{suffix}.png")
        plt.close(fig)
        return None
    elif show:
        plt.show()
        return None
    else:
        return fig


def render_beam_3d(
    projection: Projection,
    ax=None,
    save_path: Optional[str] = None,
    elev: float = config.CAMERA_ELEVATION_DEG,
    azim: float = config.CAMERA_AZIMUTH_DEG,
    show_arrows: bool = True,
    show_coil: bool = True,
    background_color: Optional[tuple] = None,
    figsize: tuple = config.BEAM_3D_FIGSIZE,
    dpi: int = config.PLOT_DPI,
    show: bool = False,
) -> Optional[plt.Figure]:
    """Draw the beam in 3D.

    Parameters
    ----------
    projection : Projection
        Output of ``project_beam``.
    ax : Axes3D, optional
        Existing 3D axis to draw into. A new figure is created if None.
    save_path : str, optional
        Base path for saving; '_3d.png' is appended.
    elev, azim : float
        Camera orbit angles in degrees.
    show_arrows : bool
        Whether to draw velocity/force/field glyphs.
    show_coil : bool
        Whether to draw the coil ring hint.
    background_color : tuple
        RGB background in 0-255. Defaults to ``projection.background_color``.
    figsize : tuple
        Figure size (width, height) in inches.
    dpi : int
        Resolution for saved figure.
    show : bool
        Whether to display the figure interactively.

    Returns
    -------
    fig : matplotlib.figure.Figure or None
        The figure object if save_path is None and show is False.
    """
    if ax is None:
        fig = plt.figure(figsize=figsize)
        ax = fig.add_subplot(111, projection='3d')
    else:
        fig = ax.figure

    if background_color is None:
        background_color = projection.background_color
    background = tuple(c / 255.0 for c in background_color)
    ax.set_facecolor(background)

    # y is "up" in the simulation; matplotlib's vertical axis is z, so plot (x, z, y)
    for curve in projection.curves3d:
        if len(curve.points) < 2:
            continue
        pts = curve.points
        ax.plot(pts[:, 0], pts[:, 2], pts[:, 1],
                color=curve.color, alpha=curve.opacity, linewidth=1.5)

    if show_arrows:
        for arrow in projection.arrows3d:
            o = arrow.origin
            d = arrow.direction * arrow.length
            ax.quiver(o[0], o[2], o[1], d[0], d[2], d[1],
                      color=arrow.color, linewidth=0.8, arrow_length_ratio=0.3)

    if len(projection.source_points):
        sp = projection.source_points
        ax.scatter(sp[:, 0], sp[:, 2], sp[:, 1],
                   c=config.SOURCE_MARKER_COLOR, marker='s', s=25, alpha=0.9)
    if len(projection.image_points):
        ip = projection.image_points
        ax.scatter(ip[:, 0], ip[:, 2], ip[:, 1],
                   c=config.IMAGE_MARKER_COLOR, marker='*', s=50, alpha=0.9)

    if show_coil and projection.coil is not None:
        theta = np.linspace(0, 2*np.pi, 100)
        c = projection.coil.center
        r = projection.coil.radius
        ax.plot(c[0] + r*np.cos(theta), c[2] + r*np.sin(theta), np.full_like(theta, c[1]),
                color=config.COIL_COLOR, alpha=config.COIL_ALPHA, linewidth=6)

    lower, upper = projection_limits(projection)
    ax.set_xlim(lower[0], upper[0])
    ax.set_ylim(lower[2], upper[2])
    ax.set_zlim(lower[1], upper[1])
    ax.set_box_aspect([1, 1, 1])
    ax.view_init(elev=elev, azim=azim)

    ax.set_xlabel('x (m)', fontsize=11)
    ax.set_ylabel('z (m)', fontsize=11)
    ax.set_zlabel('y (m)', fontsize=11)
    ax.set_title(f'Lens Beam (n={len(projection.curves3d)})', fontsize=13, fontweight='bold')

    legend_elements = [
        Line2D([0], [0], marker='s', color='w', markerfacecolor=config.SOURCE_MARKER_COLOR,
               markersize=8, label='Source'),
        Line2D([0], [0], marker='*', color='w', markerfacecolor=config.IMAGE_MARKER_COLOR,
               markersize=10, label='Image point'),
    ]
    if show_arrows:
        for channel, color in config.ARROW_COLORS.items():
            legend_elements.append(Line2D([0], [0], color=color, linewidth=2, label=channel.capitalize()))
    ax.legend(handles=legend_elements, loc='upper left', fontsize=9, frameon=True)

    return _finish_figure(fig, save_path, '3d', dpi, show)


def render_views_2d(
    projection: Projection,
    save_path: Optional[str] = None,
    background_color: Optional[tuple] = None,
    figsize: tuple = config.VIEWS_2D_FIGSIZE,
    dpi: int = config.PLOT_DPI,
    show: bool = False,
) -> Optional[plt.Figure]:
    """Draw the three orthographic views side by side.

    Each panel is a raster surface in pixel coordinates with its own scale,
    so the panels are not comparable in size with each other.

    Returns
    -------
    fig : matplotlib.figure.Figure or None
        The figure object if save_path is None and show is False.
    """
    views = list(projection.views2d.values())
    fig, axes = plt.subplots(1, len(views), figsize=figsize)
    axes = np.atleast_1d(axes)

    if background_color is None:
        background_color = projection.background_color
    background = tuple(c / 255.0 for c in background_color)

    for ax, view in zip(axes, views):
        ax.set_facecolor(background)

        segments = []
        colors = []
        for line in view.polylines:
            if len(line.points) < 2:
                continue
            segments.append(line.points)
            colors.append((*line.color, line.opacity))
        if segments:
            ax.add_collection(LineCollection(segments, colors=colors, linewidths=1.0))

        width, height = view.size
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        ax.set_aspect('equal')
        ax.set_xticks([])
        ax.set_yticks([])
        ax.set_title(f'{view.name.upper()} ({view.labels[0]} vs {view.labels[1]})',
                     fontsize=11, fontweight='bold')
        ax.set_xlabel(f'{view.labels[0]}, scale {view.scale:.3g} px/m', fontsize=9)

    fig.tight_layout()

    return _finish_figure(fig, save_path, '2d_views', dpi, show)
