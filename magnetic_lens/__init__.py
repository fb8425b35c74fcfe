"""
Magnetic Lens Beam Simulation Package
=====================================

This package simulates charged particles travelling through a parametric,
axially symmetric magnetic lens and turns the resulting beam into renderable
3D primitives and three orthographic 2D views.

Modules:
--------
- config: Configurable defaults, parameter ranges and presets
- constants: Physical constants and numeric diagnostics
- data_classes: Parameter snapshots and trajectory records
- field: Closed-form lens field model
- kinematics: Explicit integrator and Lorentz-force conventions
- transport: Single-particle path sampler
- simulation: Beam generation over a source lattice
- projection: Beam to renderable primitives
- plotting: matplotlib rendering of projections
- session: Editable parameter session with recompute entry points
- runner: Command-line runner
"""

from . import config
from .core.constants import (
    ELECTRON_MASS_KG,
    PROTON_MASS_KG,
    ELEMENTARY_CHARGE_C,
    DEBUG,
    reset_diagnostic_stats,
    print_diagnostic_stats,
)
from .core.data_classes import (
    FieldParameters,
    ParticleSpec,
    SamplingConfig,
    SourceGeometry,
    Body,
    PathPoint,
    Path,
    Beam,
)
from .core.field import gaussian, radial_envelope, field_at, PROFILE_SETS
from .core.kinematics import (
    integrate_step,
    ForcePolicy,
    FORCE_POLICIES,
    make_field_update,
)
from .core.transport import generate_path
from .core.simulation import (
    build_source_lattice,
    generate_beam,
    beam_statistics,
)
from .core.projection import DisplayConfig, Projection, project_beam
from .session import LensSession
from .plotting import (
    render_beam_3d,
    render_views_2d,
    plot_image_points,
    print_statistics,
)

__version__ = "1.0.0"
__all__ = [
    # Config module
    "config",
    # Constants
    "ELECTRON_MASS_KG",
    "PROTON_MASS_KG",
    "ELEMENTARY_CHARGE_C",
    "DEBUG",
    "reset_diagnostic_stats",
    "print_diagnostic_stats",
    # Data classes
    "FieldParameters",
    "ParticleSpec",
    "SamplingConfig",
    "SourceGeometry",
    "Body",
    "PathPoint",
    "Path",
    "Beam",
    # Field
    "gaussian",
    "radial_envelope",
    "field_at",
    "PROFILE_SETS",
    # Kinematics
    "integrate_step",
    "ForcePolicy",
    "FORCE_POLICIES",
    "make_field_update",
    # Transport
    "generate_path",
    # Simulation
    "build_source_lattice",
    "generate_beam",
    "beam_statistics",
    # Projection
    "DisplayConfig",
    "Projection",
    "project_beam",
    # Session
    "LensSession",
    # Plotting
    "render_beam_3d",
    "render_views_2d",
    "plot_image_points",
    "print_statistics",
]
