"""
High-level beam generation.

A beam is one sweep over a lattice of source points. Every ray in a beam is
integrated against the same parameter snapshots, and a recompute always
rebuilds the whole beam.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import numpy as np
from tqdm import tqdm

from .. import config
from .data_classes import (
    Beam,
    Body,
    FieldParameters,
    ParticleSpec,
    Path,
    SamplingConfig,
    SourceGeometry,
)
from .field import get_profile_set
from .kinematics import get_force_policy, make_field_update
from .transport import generate_path


# (position, colour fraction, lies on the lattice boundary)
LatticePoint = Tuple[np.ndarray, float, bool]


def build_source_lattice(source: SourceGeometry) -> List[LatticePoint]:
    """Lay out the starting positions of a beam.

    'line' interpolates ``density`` points from the +x edge to the -x edge.
    'grid' spans a ``density`` x ``density`` lattice over the square
    [-sep/2, sep/2]^2 in the x-z plane. A lattice thinner than
    ``MIN_LATTICE_DENSITY`` or narrower than ``MIN_SEPARATION`` collapses to
    a single on-axis point, so a beam never has zero rays.
    """
    density = int(source.density)
    half = 0.5 * source.separation
    height = source.height

    if density < config.MIN_LATTICE_DENSITY or abs(source.separation) < config.MIN_SEPARATION:
        return [(np.array([0.0, height, 0.0]), 0.5, True)]

    fractions = np.linspace(0.0, 1.0, density)
    edge_a = np.array([half, height, 0.0])
    edge_b = np.array([-half, height, 0.0])

    if source.layout == "line":
        return [
            (edge_a + (edge_b - edge_a) * t, float(t), i in (0, density - 1))
            for i, t in enumerate(fractions)
        ]

    if source.layout == "grid":
        lattice = []
        for i, u in enumerate(fractions):
            for j, v in enumerate(fractions):
                position = np.array([half - 2.0 * half * u, height, half - 2.0 * half * v])
                is_edge = i in (0, density - 1) or j in (0, density - 1)
                lattice.append((position, float(0.5 * (u + v)), is_edge))
        return lattice

    raise ValueError(f"Unknown source layout: {source.layout!r}")


def lerp_color(
    color_a: Tuple[float, float, float],
    color_b: Tuple[float, float, float],
    fraction: float,
) -> Tuple[float, float, float]:
    """Blend two 0-255 RGB colours and return an RGB triple in 0-1."""
    a = np.asarray(color_a, dtype=float)
    b = np.asarray(color_b, dtype=float)
    blended = (a + (b - a) * fraction) / 255.0
    return tuple(float(c) for c in np.clip(blended, 0.0, 1.0))


def lattice_opacity(is_edge: bool) -> float:
    """Edge rays are drawn opaque, interior rays faded."""
    return 1.0 if is_edge else config.INTERIOR_OPACITY


def generate_beam(
    source: SourceGeometry,
    field_params: FieldParameters,
    particle: ParticleSpec,
    sampling: SamplingConfig,
    show_progress: bool = False,
) -> Beam:
    """Simulate every ray of the source lattice and aggregate the results.

    Parameters
    ----------
    source : SourceGeometry
        Lattice, launch speed, detector gap and edge colours.
    field_params : FieldParameters
        Field snapshot shared by every ray.
    particle : ParticleSpec
        Mass and charge, resolved to signed values once per beam.
    sampling : SamplingConfig
        Step budget, step size, vector sampling cadence and force policy.
    show_progress : bool
        Show a tqdm progress bar over the rays.

    Returns
    -------
    Beam
        All paths, the detector image points and the source points.
    """
    # Resolve named policies before integrating anything
    get_profile_set(field_params.profile_set)
    policy = get_force_policy(sampling.force_policy)
    field_update = make_field_update(field_params, policy)

    mass = particle.mass
    charge = particle.charge
    detector_height = source.detector_height
    launch_velocity = np.array([0.0, -source.speed, 0.0])

    paths: List[Path] = []
    lattice = build_source_lattice(source)
    for position, fraction, is_edge in tqdm(lattice, desc="Simulating Rays", disable=not show_progress):
        body = Body(
            position=position.copy(),
            velocity=launch_velocity.copy(),
            mass=mass,
            charge=charge,
        )
        path = generate_path(
            body,
            field_update,
            max_steps=sampling.steps,
            dt=sampling.dt,
            detector_height=detector_height,
            sample_every=sampling.sample_every,
        )
        path.color = lerp_color(source.color_a, source.color_b, fraction)
        path.opacity = lattice_opacity(is_edge)
        path.fraction = fraction
        paths.append(path)

    image_points = [p.final_position for p in paths if p.reached_detector]
    source_points = [p.initial_position for p in paths]

    return Beam(
        paths=paths,
        image_points=np.array(image_points, dtype=float).reshape(-1, 3),
        source_points=np.array(source_points, dtype=float).reshape(-1, 3),
        field_params=field_params,
        particle=particle,
        sampling=sampling,
        source=source,
    )


def beam_statistics(beam: Beam) -> Dict[str, object]:
    """Summarise a beam: path outcomes plus image-point centroid and spread."""
    n_paths = len(beam.paths)
    stats: Dict[str, object] = {
        'n_paths': n_paths,
        'detector_hit': sum(1 for p in beam.paths if p.status == "detector_hit"),
        'diverged': sum(1 for p in beam.paths if p.status == "diverged"),
        'max_steps': sum(1 for p in beam.paths if p.status == "max_steps"),
        'mean_points': float(np.mean([len(p) for p in beam.paths])) if n_paths else 0.0,
        'image_centroid': None,
        'image_rms_radius': None,
    }

    if len(beam.image_points):
        centroid = beam.image_points.mean(axis=0)
        offsets = beam.image_points[:, [0, 2]] - centroid[[0, 2]]
        stats['image_centroid'] = centroid
        stats['image_rms_radius'] = float(np.sqrt(np.mean(np.sum(offsets**2, axis=1))))

    return stats
