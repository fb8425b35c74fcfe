"""
Data classes for the magnetic lens simulation.

Parameter snapshots (``FieldParameters``, ``ParticleSpec``, ``SamplingConfig``,
``SourceGeometry``) are frozen: one snapshot is built per recompute and threaded
through the whole pipeline. ``Body`` is the only mutable record and is owned by
a single ``generate_path`` call.
"""

from __future__ import annotations
from dataclasses import dataclass, field as dataclass_field
from typing import List, Optional, Tuple

import numpy as np

from .. import config
from .kinematics import integrate_step


@dataclass(frozen=True)
class FieldParameters:
    """Shape and strength of the lens field.

    Attributes
    ----------
    down_offset, down_spread : float
        Centre and spread of the axial ("down") Gaussian lobe, in the
        profile coordinate s = axial_origin - y (m).
    radial_offset, radial_spread : float
        Centre and spread of the radial Gaussian lobe (m).
    reverse_offset : float or None
        Centre of the subtracted reverse radial lobe. None disables it.
    strength_exp : float
        Base-10 exponent of the overall field scale.
    axial_origin : float
        Height where s = 0 (m).
    envelope_offset, envelope_spread : float
        Annular envelope in horizontal distance from the axis (m).
    profile_set : str
        Name of the profile-function set used to evaluate the lobes.
    """

    down_offset: float = config.DEFAULT_DOWN_OFFSET
    down_spread: float = config.DEFAULT_DOWN_SPREAD
    radial_offset: float = config.DEFAULT_RADIAL_OFFSET
    radial_spread: float = config.DEFAULT_RADIAL_SPREAD
    reverse_offset: Optional[float] = config.DEFAULT_REVERSE_OFFSET
    strength_exp: float = config.DEFAULT_STRENGTH_EXP
    axial_origin: float = config.DEFAULT_AXIAL_ORIGIN
    envelope_offset: float = config.DEFAULT_ENVELOPE_OFFSET
    envelope_spread: float = config.DEFAULT_ENVELOPE_SPREAD
    profile_set: str = config.DEFAULT_PROFILE_SET

    @property
    def strength(self) -> float:
        """Linear field scale, 10**strength_exp."""
        return 10.0 ** self.strength_exp


@dataclass(frozen=True)
class ParticleSpec:
    """Particle mass and charge as base-10 exponents plus sign flags."""

    mass_exp: float = config.DEFAULT_MASS_EXP
    mass_negative: bool = config.DEFAULT_MASS_NEGATIVE
    charge_exp: float = config.DEFAULT_CHARGE_EXP
    charge_negative: bool = config.DEFAULT_CHARGE_NEGATIVE

    @property
    def mass(self) -> float:
        magnitude = 10.0 ** self.mass_exp
        return -magnitude if self.mass_negative else magnitude

    @property
    def charge(self) -> float:
        magnitude = 10.0 ** self.charge_exp
        return -magnitude if self.charge_negative else magnitude


@dataclass(frozen=True)
class SamplingConfig:
    """Integration budget and auxiliary-vector sampling cadence."""

    steps: int = config.DEFAULT_STEPS
    dt: float = config.DEFAULT_TIME_STEP
    sample_every: int = config.DEFAULT_SAMPLE_EVERY
    force_policy: str = config.DEFAULT_FORCE_POLICY


@dataclass(frozen=True)
class SourceGeometry:
    """Source lattice, launch speed and detector placement.

    The source edges sit at x = +separation/2 and x = -separation/2 at
    ``height``. The detector plane is horizontal at ``height - vertical_gap``.
    Colours are RGB triples in 0-255.
    """

    separation: float = config.DEFAULT_SEPARATION
    height: float = config.DEFAULT_SOURCE_HEIGHT
    vertical_gap: float = config.DEFAULT_VERTICAL_GAP
    speed: float = config.DEFAULT_SPEED
    density: int = config.DEFAULT_DENSITY
    layout: str = config.DEFAULT_LAYOUT
    color_a: Tuple[int, int, int] = config.DEFAULT_COLOR_A
    color_b: Tuple[int, int, int] = config.DEFAULT_COLOR_B

    @property
    def detector_height(self) -> float:
        return self.height - self.vertical_gap


@dataclass
class Body:
    """Kinematic state of one simulated particle."""

    position: np.ndarray
    velocity: np.ndarray
    mass: float
    charge: float
    force: np.ndarray = dataclass_field(default_factory=lambda: np.zeros(3))
    field: np.ndarray = dataclass_field(default_factory=lambda: np.zeros(3))
    time: float = 0.0

    def step(self, dt: float) -> None:
        """Advance one explicit step using the force already stored on the body."""
        self.position, self.velocity = integrate_step(
            self.position, self.velocity, self.force, self.mass, dt
        )
        self.time += dt


@dataclass
class PathPoint:
    """A recorded position, optionally with co-located vectors."""

    position: np.ndarray
    velocity: Optional[np.ndarray] = None
    force: Optional[np.ndarray] = None
    field: Optional[np.ndarray] = None

    @property
    def has_vectors(self) -> bool:
        return self.velocity is not None


@dataclass
class Path:
    """Trajectory of one particle.

    Attributes
    ----------
    points : list of PathPoint
        Recorded points, starting with the initial position.
    status : str
        'detector_hit', 'diverged' or 'max_steps'.
    elapsed_time : float
        Simulated time at termination (s).
    color : tuple of float
        RGB in 0-1, blended across the source lattice.
    opacity : float
        1.0 for edge rays, reduced for interior rays.
    fraction : float
        Position of the ray's source point across the lattice (0-1).
    """

    points: List[PathPoint] = dataclass_field(default_factory=list)
    status: str = "max_steps"
    elapsed_time: float = 0.0
    color: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    opacity: float = 1.0
    fraction: float = 0.5

    def __len__(self) -> int:
        return len(self.points)

    @property
    def positions(self) -> np.ndarray:
        """All recorded positions as an (n, 3) array."""
        if not self.points:
            return np.zeros((0, 3))
        return np.array([point.position for point in self.points], dtype=float)

    @property
    def initial_position(self) -> np.ndarray:
        return self.points[0].position

    @property
    def final_position(self) -> np.ndarray:
        return self.points[-1].position

    @property
    def reached_detector(self) -> bool:
        return self.status == "detector_hit"


@dataclass
class Beam:
    """All paths from one sweep plus the point sets derived from them."""

    paths: List[Path]
    image_points: np.ndarray
    source_points: np.ndarray
    field_params: FieldParameters
    particle: ParticleSpec
    sampling: SamplingConfig
    source: SourceGeometry

    @property
    def detector_height(self) -> float:
        return self.source.detector_height
