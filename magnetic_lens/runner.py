"""
Magnetic Lens Simulation Runner Module

This module provides the main simulation runner function that can be called
from scripts or imported directly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from . import config
from .core.constants import PARTICLE_PRESETS, print_diagnostic_stats, reset_diagnostic_stats
from .core.data_classes import Beam
from .session import LensSession
from .plotting import render_beam_3d, render_views_2d, plot_image_points, print_statistics


def print_configuration(session: LensSession) -> None:
    """Print the parameter snapshot a run is about to use."""
    field_params = session.field_parameters()
    particle = session.particle_spec()
    sampling = session.sampling_config()
    source = session.source_geometry()

    print("\n" + "="*70)
    print("LENS CONFIGURATION")
    print("="*70)
    print(f"Field profile set: {field_params.profile_set}, strength 10^{field_params.strength_exp:g}")
    print(f"Down lobe: offset {field_params.down_offset:g} m, spread {field_params.down_spread:g} m")
    print(f"Radial lobe: offset {field_params.radial_offset:g} m, spread {field_params.radial_spread:g} m, "
          f"reverse {field_params.reverse_offset}")
    print(f"Particle: mass {particle.mass:.4e} kg, charge {particle.charge:.4e} C")
    print(f"Source: {source.layout} x{source.density}, separation {source.separation:g} m, "
          f"height {source.height:g} m, speed {source.speed:g} m/s")
    print(f"Detector plane: y = {source.detector_height:g} m")
    print(f"Integration: {sampling.steps} steps of {sampling.dt:g} s, "
          f"force policy '{sampling.force_policy}'")
    print("="*70 + "\n")


def run_full_simulation(
    output_dir: Optional[Path] = None,
    overrides: Optional[Dict[str, object]] = None,
    preset: Optional[str] = None,
    generate_plots: bool = True,
    show: bool = False,
) -> Beam:
    """Run one lens beam simulation.

    This is the main entry point for running simulations. It handles:
    1. Building the parameter session from defaults plus overrides
    2. Applying a particle preset
    3. Generating and projecting the beam
    4. Printing statistics and diagnostics
    5. Generating visualization plots

    Parameters
    ----------
    output_dir : Path, optional
        Directory for figures (Figures/). If None, uses current working directory.
    overrides : dict, optional
        Parameter values to apply on top of the defaults (clamped like edits).
    preset : str, optional
        Particle preset name, e.g. 'electron' or 'proton'.
    generate_plots : bool
        Whether to generate visualization plots.
    show : bool
        Display figures interactively instead of saving them.

    Returns
    -------
    Beam
        The generated beam.
    """
    if output_dir is None:
        output_dir = Path.cwd()
    else:
        output_dir = Path(output_dir)

    reset_diagnostic_stats()
    session = LensSession(auto_recompute=False, show_progress=True, **(overrides or {}))
    if preset is not None:
        session.select_preset(preset)
    else:
        session.recompute()

    print_configuration(session)
    print_statistics(session.beam)
    print_diagnostic_stats()

    if generate_plots:
        print("[info] Generating visualizations...")
        if show:
            render_beam_3d(session.projection, show=True)
            render_views_2d(session.projection, show=True)
            plot_image_points(session.beam, show=True)
        else:
            figures = output_dir / config.FIGURES_OUTPUT_DIR
            render_beam_3d(session.projection, save_path=str(figures / config.BEAM_3D_FIGURE_BASE))
            render_views_2d(session.projection, save_path=str(figures / config.BEAM_3D_FIGURE_BASE))
            plot_image_points(session.beam, save_path=str(figures / config.IMAGE_POINTS_FIGURE_BASE))
        print("[info] Visualization complete!")

    return session.beam


def main():
    """Command-line entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Simulate a beam through a magnetic lens")
    parser.add_argument("--steps", type=int, default=None,
                        help="Integration step budget per ray")
    parser.add_argument("--dt", type=float, default=None,
                        help="Time step (s)")
    parser.add_argument("--strength", type=float, default=None,
                        help="Base-10 exponent of the field strength")
    parser.add_argument("--preset", choices=sorted(PARTICLE_PRESETS), default=None,
                        help="Particle preset")
    parser.add_argument("--density", type=int, default=None,
                        help="Rays per source lattice side")
    parser.add_argument("--layout", choices=("line", "grid"), default=None,
                        help="Source lattice layout")
    parser.add_argument("--profile", default=None,
                        help="Field profile set (bipolar, mirrored, unipolar)")
    parser.add_argument("--force-policy", default=None,
                        help="Force convention (field_cross_velocity, velocity_cross_field, radial_boost)")
    parser.add_argument("--output-dir", type=Path, default=None,
                        help="Output directory for figures")
    parser.add_argument("--no-plot", action="store_true",
                        help="Don't generate visualization plots")
    parser.add_argument("--show", action="store_true",
                        help="Show figures interactively instead of saving them")

    args = parser.parse_args()

    overrides = {
        "steps": args.steps,
        "dt": args.dt,
        "strength_exp": args.strength,
        "density": args.density,
        "layout": args.layout,
        "profile_set": args.profile,
        "force_policy": args.force_policy,
    }
    overrides = {name: value for name, value in overrides.items() if value is not None}

    run_full_simulation(
        output_dir=args.output_dir,
        overrides=overrides,
        preset=args.preset,
        generate_plots=not args.no_plot,
        show=args.show,
    )


if __name__ == "__main__":
    main()
