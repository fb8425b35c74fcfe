"""
Kinematics utilities: explicit integration and Lorentz-force conventions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

import numpy as np

from .field import field_at


def integrate_step(
    position: np.ndarray,
    velocity: np.ndarray,
    force: np.ndarray,
    mass: float,
    dt: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """Advance a particle state by one explicit time step.

    The position moves with the velocity from the start of the step, then the
    velocity picks up the acceleration from the supplied force::

        x' = x + v dt
        v' = v + (F / m) dt

    The step is not adaptive. Accuracy is controlled by the caller through
    the step size and step count.

    Parameters
    ----------
    position, velocity, force : np.ndarray, shape (3,)
        Current state and the force acting on the particle.
    mass : float
        Signed particle mass (kg).
    dt : float
        Time step (s).

    Returns
    -------
    tuple : (position, velocity)
        New arrays; the inputs are not modified.
    """
    new_position = position + velocity * dt
    acceleration = force / mass
    new_velocity = velocity + acceleration * dt
    return new_position, new_velocity


@dataclass(frozen=True)
class ForcePolicy:
    """Sign and scale convention for the magnetic force.

    Attributes
    ----------
    cross_order : str
        'field_cross_velocity' for F = q (B x v), or
        'velocity_cross_field' for F = q (v x B).
    velocity_scale : tuple of float
        Per-component factors applied to the velocity before the cross product.
    """

    cross_order: str = "field_cross_velocity"
    velocity_scale: Tuple[float, float, float] = (1.0, 1.0, 1.0)

    def force(self, charge: float, field: np.ndarray, velocity: np.ndarray) -> np.ndarray:
        scaled = velocity * np.asarray(self.velocity_scale, dtype=float)
        if self.cross_order == "field_cross_velocity":
            return charge * np.cross(field, scaled)
        if self.cross_order == "velocity_cross_field":
            return charge * np.cross(scaled, field)
        raise ValueError(f"Unknown cross order: {self.cross_order!r}")


FORCE_POLICIES: Dict[str, ForcePolicy] = {
    # F = q (B x v), the default convention
    "field_cross_velocity": ForcePolicy("field_cross_velocity"),
    # Textbook Lorentz force, F = q (v x B)
    "velocity_cross_field": ForcePolicy("velocity_cross_field"),
    # Horizontal velocity exaggerated before the cross product
    "radial_boost": ForcePolicy("field_cross_velocity", (10.0, 1.0, 10.0)),
}


def get_force_policy(name: str) -> ForcePolicy:
    """Look up a named force policy."""
    try:
        return FORCE_POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown force policy {name!r}; choose from {sorted(FORCE_POLICIES)}"
        ) from None


def make_field_update(params, policy: ForcePolicy) -> Callable:
    """Build the per-step callback that refreshes a body's field and force.

    Parameters
    ----------
    params : FieldParameters
        Field snapshot shared by the whole beam.
    policy : ForcePolicy
        Force convention to apply.

    Returns
    -------
    callable
        ``field_update(body)`` that sets ``body.field`` and ``body.force``
        from the body's current position and velocity.
    """
    def field_update(body) -> None:
        body.field = field_at(body.position, params)
        body.force = policy.force(body.charge, body.field, body.velocity)

    return field_update
