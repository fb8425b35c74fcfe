"""
Plotting subpackage for magnetic lens beam visualization.

This subpackage draws the renderable primitives produced by
``magnetic_lens.core.projection``:
- 3D beam scene (paths, vector glyphs, markers, coil ring)
- Three orthographic 2D views on pixel surfaces
- Detector image points and printed beam statistics

Example usage:
    from magnetic_lens.core import generate_beam, project_beam
    from magnetic_lens.plotting import render_beam_3d, render_views_2d

    projection = project_beam(beam)
    render_beam_3d(projection, save_path='Figures/lens_beam')
    render_views_2d(projection, save_path='Figures/lens_beam')
"""

from .trajectories import (
    render_beam_3d,
    render_views_2d,
)

from .results import (
    plot_image_points,
    print_statistics,
)

__all__ = [
    # Beam rendering
    "render_beam_3d",
    "render_views_2d",
    # Results
    "plot_image_points",
    "print_statistics",
]
