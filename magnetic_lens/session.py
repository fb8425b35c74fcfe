"""
Interactive parameter session.

``LensSession`` is the core-side half of a parameter panel: it holds the
editable values, clamps edits to ``config.PARAMETER_RANGES`` and routes each
edit to the right recompute entry point. Every recompute builds fresh frozen
snapshots and publishes a new ``(beam, projection)`` pair as a whole.
"""

from __future__ import annotations

import dataclasses
import math
from typing import Callable, Dict, List, Optional

import numpy as np

from . import config
from .core.constants import PARTICLE_PRESETS
from .core.data_classes import (
    Beam,
    FieldParameters,
    ParticleSpec,
    SamplingConfig,
    SourceGeometry,
)
from .core.field import PROFILE_SETS
from .core.kinematics import FORCE_POLICIES
from .core.projection import DisplayConfig, Projection, project_beam
from .core.simulation import generate_beam, lerp_color


FIELD_KEYS = (
    "down_offset", "down_spread", "radial_offset", "radial_spread",
    "reverse_offset", "strength_exp", "axial_origin", "envelope_offset",
    "envelope_spread", "profile_set",
)
PARTICLE_KEYS = ("mass_exp", "mass_negative", "charge_exp", "charge_negative")
SAMPLING_KEYS = ("steps", "dt", "sample_every", "force_policy")
SOURCE_KEYS = ("separation", "source_height", "vertical_gap", "speed", "density", "layout")
COLOR_KEYS = ("color_a", "color_b")
DISPLAY_KEYS = (
    "arrow_length", "length_mode", "min_relative_length",
    "show_velocity", "show_force", "show_field", "background_color",
)

INTEGER_KEYS = ("steps", "density", "sample_every")
BOOLEAN_KEYS = ("mass_negative", "charge_negative", "show_velocity", "show_force", "show_field")
CHOICES = {
    "profile_set": tuple(PROFILE_SETS),
    "force_policy": tuple(FORCE_POLICIES),
    "layout": ("line", "grid"),
    "length_mode": ("linear", "log"),
}

Listener = Callable[[Beam, Projection], None]


def default_values() -> Dict[str, object]:
    """Compiled-in defaults for every editable parameter."""
    return {
        # Field
        "down_offset": config.DEFAULT_DOWN_OFFSET,
        "down_spread": config.DEFAULT_DOWN_SPREAD,
        "radial_offset": config.DEFAULT_RADIAL_OFFSET,
        "radial_spread": config.DEFAULT_RADIAL_SPREAD,
        "reverse_offset": config.DEFAULT_REVERSE_OFFSET,
        "strength_exp": config.DEFAULT_STRENGTH_EXP,
        "axial_origin": config.DEFAULT_AXIAL_ORIGIN,
        "envelope_offset": config.DEFAULT_ENVELOPE_OFFSET,
        "envelope_spread": config.DEFAULT_ENVELOPE_SPREAD,
        "profile_set": config.DEFAULT_PROFILE_SET,
        # Particles
        "mass_exp": config.DEFAULT_MASS_EXP,
        "mass_negative": config.DEFAULT_MASS_NEGATIVE,
        "charge_exp": config.DEFAULT_CHARGE_EXP,
        "charge_negative": config.DEFAULT_CHARGE_NEGATIVE,
        # Simulation
        "steps": config.DEFAULT_STEPS,
        "dt": config.DEFAULT_TIME_STEP,
        "sample_every": config.DEFAULT_SAMPLE_EVERY,
        "force_policy": config.DEFAULT_FORCE_POLICY,
        # Source
        "separation": config.DEFAULT_SEPARATION,
        "source_height": config.DEFAULT_SOURCE_HEIGHT,
        "vertical_gap": config.DEFAULT_VERTICAL_GAP,
        "speed": config.DEFAULT_SPEED,
        "density": config.DEFAULT_DENSITY,
        "layout": config.DEFAULT_LAYOUT,
        # Looks
        "color_a": config.DEFAULT_COLOR_A,
        "color_b": config.DEFAULT_COLOR_B,
        "arrow_length": config.ARROW_LENGTH,
        "length_mode": config.ARROW_LENGTH_MODE,
        "min_relative_length": config.MIN_RELATIVE_ARROW_LENGTH,
        "show_velocity": config.SHOW_VELOCITY_ARROWS,
        "show_force": config.SHOW_FORCE_ARROWS,
        "show_field": config.SHOW_FIELD_ARROWS,
        "background_color": config.DEFAULT_BACKGROUND_COLOR,
    }


def clamp_value(name: str, value):
    """Coerce an edited value into the valid range for ``name``.

    Numbers are clamped to ``PARAMETER_RANGES``, integer fields are rounded,
    colours must be RGB triples and are clipped to 0-255. NaN falls back to
    the lower bound. Unknown choice values raise ``ValueError``.
    """
    if name in CHOICES:
        if value not in CHOICES[name]:
            raise ValueError(f"{name} must be one of {CHOICES[name]}, got {value!r}")
        return value
    if name in BOOLEAN_KEYS:
        return bool(value)
    if name in COLOR_KEYS or name == "background_color":
        rgb = np.asarray(value, dtype=float).reshape(-1)
        if rgb.shape != (3,):
            raise ValueError(f"{name} must be an RGB triple, got {value!r}")
        rgb = np.clip(np.nan_to_num(rgb), 0, 255)
        return tuple(int(round(c)) for c in rgb)
    if name == "reverse_offset" and value is None:
        return None

    lower, upper = config.PARAMETER_RANGES[name]
    value = float(value)
    if math.isnan(value):
        value = lower
    value = min(max(value, lower), upper)
    if name in INTEGER_KEYS:
        return int(round(value))
    return value


class LensSession:
    """Editable parameter set with recompute entry points.

    Example
    -------
    >>> session = LensSession()
    >>> session.set("strength_exp", -10.5)
    >>> session.select_preset("proton")
    >>> session.beam.image_points
    """

    def __init__(self, auto_recompute: bool = True, show_progress: bool = False, **overrides):
        self.show_progress = show_progress
        self.values: Dict[str, object] = default_values()
        for name, value in overrides.items():
            self._store(name, value)
        self.beam: Optional[Beam] = None
        self.projection: Optional[Projection] = None
        self._listeners: List[Listener] = []
        if auto_recompute:
            self.recompute()

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def field_parameters(self) -> FieldParameters:
        return FieldParameters(**{key: self.values[key] for key in FIELD_KEYS})

    def particle_spec(self) -> ParticleSpec:
        return ParticleSpec(**{key: self.values[key] for key in PARTICLE_KEYS})

    def sampling_config(self) -> SamplingConfig:
        return SamplingConfig(**{key: self.values[key] for key in SAMPLING_KEYS})

    def source_geometry(self) -> SourceGeometry:
        v = self.values
        return SourceGeometry(
            separation=v["separation"],
            height=v["source_height"],
            vertical_gap=v["vertical_gap"],
            speed=v["speed"],
            density=v["density"],
            layout=v["layout"],
            color_a=v["color_a"],
            color_b=v["color_b"],
        )

    def display_config(self) -> DisplayConfig:
        v = self.values
        return DisplayConfig(
            arrow_length=v["arrow_length"],
            length_mode=v["length_mode"],
            min_relative_length=v["min_relative_length"],
            show_velocity=v["show_velocity"],
            show_force=v["show_force"],
            show_field=v["show_field"],
            background_color=v["background_color"],
        )

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def _store(self, name: str, value) -> None:
        if name not in self.values:
            raise KeyError(f"Unknown parameter: {name!r}")
        self.values[name] = clamp_value(name, value)

    def set(self, name: str, value) -> Beam:
        """Edit one parameter and run the entry point bound to it."""
        self._store(name, value)
        return self._dispatch({name})

    def update(self, **values) -> Beam:
        """Edit several parameters and recompute once."""
        for name, value in values.items():
            self._store(name, value)
        return self._dispatch(set(values))

    def select_preset(self, name: str) -> Beam:
        """Overwrite mass and charge from a named preset, then recompute."""
        try:
            preset = PARTICLE_PRESETS[name]
        except KeyError:
            raise ValueError(
                f"Unknown preset {name!r}; choose from {sorted(PARTICLE_PRESETS)}"
            ) from None
        for key, value in preset.items():
            self._store(key, value)
        print(f"[info] Selected particle preset '{name}'")
        return self.recompute()

    def reset(self) -> Beam:
        """Restore every parameter to its compiled-in default."""
        self.values = default_values()
        return self.recompute()

    def subscribe(self, listener: Listener) -> None:
        """Register a callback that receives each published (beam, projection)."""
        self._listeners.append(listener)

    def _dispatch(self, names) -> Beam:
        if names & set(FIELD_KEYS + PARTICLE_KEYS + SAMPLING_KEYS + SOURCE_KEYS):
            return self.recompute()
        if names & set(COLOR_KEYS):
            return self.refresh_colors()
        return self.reproject()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def recompute(self) -> Beam:
        """Regenerate the whole beam from the current values."""
        beam = generate_beam(
            self.source_geometry(),
            self.field_parameters(),
            self.particle_spec(),
            self.sampling_config(),
            show_progress=self.show_progress,
        )
        self._publish(beam)
        return beam

    def refresh_colors(self) -> Beam:
        """Recolour the current beam without integrating it again."""
        if self.beam is None:
            return self.recompute()
        source = self.source_geometry()
        paths = [
            dataclasses.replace(
                path, color=lerp_color(source.color_a, source.color_b, path.fraction)
            )
            for path in self.beam.paths
        ]
        beam = dataclasses.replace(
            self.beam,
            paths=paths,
            source=dataclasses.replace(self.beam.source, color_a=source.color_a, color_b=source.color_b),
        )
        self._publish(beam)
        return beam

    def reproject(self) -> Beam:
        """Rebuild renderables for the current beam with the current display options."""
        if self.beam is None:
            return self.recompute()
        self._publish(self.beam)
        return self.beam

    def _publish(self, beam: Beam) -> None:
        projection = project_beam(beam, self.display_config())
        # Beam and projection are replaced together
        self.beam, self.projection = beam, projection
        for listener in self._listeners:
            listener(beam, projection)
