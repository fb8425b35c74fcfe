"""
Closed-form lens field model.

The field is a hand-tuned approximation, not a Maxwell solution. Two Gaussian
lobes along the profile coordinate s = axial_origin - y shape the axial
("down") and radial components; an annular envelope in the horizontal distance
from the axis confines the field to a ring around the lens axis.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Tuple

import numpy as np

from .constants import ENVELOPE_CUTOFF, warn_once


def gaussian(x: float, offset: float, spread: float) -> float:
    """Unit-peak Gaussian bump exp(-0.5 ((x - offset) / spread)^2).

    A zero or non-finite spread, or any non-finite result, evaluates to 0.0.
    Each kind of failure is reported once.
    """
    if spread == 0.0 or not math.isfinite(spread):
        warn_once(
            'degenerate_gaussian',
            f"Gaussian with degenerate spread {spread!r} evaluated as 0",
        )
        return 0.0
    k = (x - offset) / spread
    value = math.exp(-0.5 * k * k)
    if not math.isfinite(value):
        warn_once(
            'nonfinite_gaussian',
            f"Gaussian at x={x!r}, offset={offset!r}, spread={spread!r} gave {value!r}",
        )
        return 0.0
    return value


def _down_profile(s: float, params) -> float:
    return gaussian(s, params.down_offset, params.down_spread)


def _bipolar_radial(s: float, params) -> float:
    radial = gaussian(s, params.radial_offset, params.radial_spread)
    if params.reverse_offset is not None:
        radial -= gaussian(s, params.reverse_offset, params.radial_spread)
    return radial


def _mirrored_radial(s: float, params) -> float:
    reverse = params.radial_offset + 3.0 * params.radial_spread
    return (gaussian(s, params.radial_offset, params.radial_spread)
            - gaussian(s, reverse, params.radial_spread))


def _unipolar_radial(s: float, params) -> float:
    return gaussian(s, params.radial_offset, params.radial_spread)


# name -> (down profile, radial profile)
ProfileSet = Tuple[Callable[[float, object], float], Callable[[float, object], float]]

PROFILE_SETS: Dict[str, ProfileSet] = {
    "bipolar": (_down_profile, _bipolar_radial),
    "mirrored": (_down_profile, _mirrored_radial),
    "unipolar": (_down_profile, _unipolar_radial),
}


def get_profile_set(name: str) -> ProfileSet:
    """Look up a named profile-function set."""
    try:
        return PROFILE_SETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown profile set {name!r}; choose from {sorted(PROFILE_SETS)}"
        ) from None


def radial_envelope(r: float, params) -> float:
    """Annular envelope: the sum of two Gaussians mirrored about the axis."""
    return (gaussian(r, params.envelope_offset, params.envelope_spread)
            + gaussian(r, -params.envelope_offset, params.envelope_spread))


def field_at(position: np.ndarray, params) -> np.ndarray:
    """Evaluate the lens field at a point.

    Parameters
    ----------
    position : np.ndarray, shape (3,)
        Point in metres, with y vertical.
    params : FieldParameters
        Field snapshot.

    Returns
    -------
    np.ndarray, shape (3,)
        Field vector. The exact zero vector where the envelope is below
        ``ENVELOPE_CUTOFF``.
    """
    x, y, z = float(position[0]), float(position[1]), float(position[2])
    r = math.hypot(x, z)

    envelope = radial_envelope(r, params)
    if not envelope >= ENVELOPE_CUTOFF:
        return np.zeros(3)

    down_profile, radial_profile = get_profile_set(params.profile_set)
    s = params.axial_origin - y
    down = down_profile(s, params)
    radial = radial_profile(s, params)

    # On the axis the radial direction is undefined and contributes nothing
    if r > 0.0:
        r_hat_x, r_hat_z = x / r, z / r
    else:
        r_hat_x = r_hat_z = 0.0

    scale = envelope * params.strength
    return np.array([r_hat_x * radial, -down, r_hat_z * radial], dtype=float) * scale
