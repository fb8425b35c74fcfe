"""
Beam results visualization.

This module provides the detector image-point plot and a printed statistical
summary of a beam.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import matplotlib.pyplot as plt

from .. import config
from ..core.data_classes import Beam
from ..core.simulation import beam_statistics


def plot_image_points(
    beam: Beam,
    save_path: Optional[str] = None,
    dpi: int = config.QUICK_PLOT_DPI,
    show: bool = False,
) -> Optional[plt.Figure]:
    """Scatter the image points on the detector plane, next to the source points.

    Parameters
    ----------
    beam : Beam
        Beam to visualize.
    save_path : str, optional
        Base path for saving the figure; '_image_points.png' is appended.
    dpi : int
        Resolution for saved figure.
    show : bool
        Whether to display the figure interactively.
    """
    if not len(beam.image_points):
        print("[warning] No image points to visualize.")
        return None

    fig, ax = plt.subplots(figsize=(7, 6))

    sp = beam.source_points
    ax.scatter(sp[:, 0], sp[:, 2], marker='s', s=30, facecolors='none',
               edgecolors=config.SOURCE_MARKER_COLOR, label='Source points')

    hit_paths = [p for p in beam.paths if p.reached_detector]
    ip = beam.image_points
    colors = [p.color for p in hit_paths]
    ax.scatter(ip[:, 0], ip[:, 2], c=colors, marker='*', s=80, alpha=0.8, label='Image points')

    stats = beam_statistics(beam)
    centroid = stats['image_centroid']
    ax.axvline(centroid[0], color='gray', linestyle=':', linewidth=1)
    ax.axhline(centroid[2], color='gray', linestyle=':', linewidth=1)

    ax.set_xlabel('x (m)')
    ax.set_ylabel('z (m)')
    ax.set_title(f'Image Points at y = {beam.detector_height:.3g} m '
                 f'(RMS radius {stats["image_rms_radius"]:.3g} m)')
    ax.axis('equal')
    ax.grid(True, alpha=0.3)
    ax.legend()

    fig.tight_layout()

    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(f"{save_path}_image_points.png", dpi=dpi, bbox_inches='tight')
        print(f"[info] Saved image point plot to {save_path}_image_points.png")
        plt.close(fig)
        return None
    elif show:
        plt.show()
        return None
    return fig


def print_statistics(beam: Beam):
    """Print statistical summary of a beam.

    Parameters
    ----------
    beam : Beam
        Beam to summarise.
    """
    if not beam.paths:
        print(f"\n[Statistics] No paths to display.")
        return

    stats = beam_statistics(beam)
    n = stats['n_paths']

    print("\n" + "="*60)
    print("BEAM STATISTICS")
    print("="*60)
    print(f"Rays simulated: {n}")
    print(f"Reached detector: {stats['detector_hit']} ({100*stats['detector_hit']/n:.2f}%)")
    print(f"Diverged: {stats['diverged']} ({100*stats['diverged']/n:.2f}%)")
    print(f"Ran out of steps: {stats['max_steps']} ({100*stats['max_steps']/n:.2f}%)")
    print(f"Mean points per path: {stats['mean_points']:.1f}")
    print()

    times = np.array([p.elapsed_time for p in beam.paths])
    print("Elapsed time (s):")
    print(f"  Mean: {np.mean(times):.4f}, Range: [{np.min(times):.4f}, {np.max(times):.4f}]")

    if stats['image_centroid'] is not None:
        cx, cy, cz = stats['image_centroid']
        print()
        print(f"Detector plane: y = {beam.detector_height:.4f} m")
        print(f"Image centroid: ({cx:.4f}, {cy:.4f}, {cz:.4f}) m")
        print(f"Image RMS radius: {stats['image_rms_radius']:.6f} m")
    print("="*60 + "\n")
