"""
Particle transport through the lens field.

This module contains the path sampler: it steps one body through the field
for a bounded number of steps and records its trajectory, stopping early when
the body diverges or reaches the detector plane.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from . import constants
from .data_classes import Body, Path, PathPoint


def _crossed_plane(y: float, detector_height: float, side: float) -> bool:
    """True once ``y`` is on or past the plane, seen from the starting side."""
    return (y - detector_height) * side <= 0.0


def generate_path(
    body: Body,
    field_update: Callable[[Body], None],
    max_steps: int,
    dt: float,
    detector_height: Optional[float] = None,
    sample_every: int = 1,
) -> Path:
    """Integrate one body and record its trajectory.

    For each step the sampler checks for divergence, then for a detector
    crossing, then records the current position. ``field_update`` refreshes
    the body's field and force before the integrator advances it, so every
    ``sample_every``-th point also carries the velocity, force and field at
    that position.

    Parameters
    ----------
    body : Body
        Initial state. Mutated in place and owned by this call.
    field_update : callable
        ``field_update(body)`` sets ``body.field`` and ``body.force``.
    max_steps : int
        Step budget. The returned path has at most ``max_steps + 1`` points.
    dt : float
        Time step (s).
    detector_height : float, optional
        Height of the horizontal detector plane. None disables the detector.
    sample_every : int
        Auxiliary-vector sampling cadence.

    Returns
    -------
    Path
        The recorded path with ``status`` set to 'detector_hit', 'diverged'
        or 'max_steps'. It always contains at least the initial position.
    """
    sample_every = max(1, int(sample_every))
    initial_position = np.array(body.position, dtype=float)
    path = Path()

    side = 0.0
    if detector_height is not None:
        side = 1.0 if initial_position[1] >= detector_height else -1.0

    def finish(status: str) -> Path:
        if not path.points:
            path.points.append(PathPoint(position=initial_position.copy()))
        path.status = status
        path.elapsed_time = body.time
        if constants.DEBUG:
            print(f"[debug] Path finished: {status}, {len(path)} points, t = {body.time:.4g} s")
        return path

    def check_terminal(step_index: int) -> Optional[str]:
        if not np.all(np.isfinite(body.position)):
            constants.DIAGNOSTIC_STATS['diverged_paths'] += 1
            print(f"[warning] Path diverged at step {step_index}")
            return "diverged"
        if detector_height is not None and _crossed_plane(body.position[1], detector_height, side):
            hit = np.array(body.position, dtype=float)
            hit[1] = detector_height
            path.points.append(PathPoint(position=hit))
            return "detector_hit"
        return None

    for i in range(max_steps):
        status = check_terminal(i)
        if status is not None:
            return finish(status)

        point = PathPoint(position=np.array(body.position, dtype=float))
        path.points.append(point)

        field_update(body)
        if i % sample_every == 0:
            point.velocity = np.array(body.velocity, dtype=float)
            point.force = np.array(body.force, dtype=float)
            point.field = np.array(body.field, dtype=float)

        body.step(dt)

    # Budget exhausted: record where the body ended up
    status = check_terminal(max_steps)
    if status is not None:
        return finish(status)
    path.points.append(PathPoint(position=np.array(body.position, dtype=float)))
    return finish("max_steps")
