"""
Beam projection into renderable primitives.

``project_beam`` is a pure data transform: it turns a Beam into 3D polylines,
arrow glyphs, point markers and three auto-scaled orthographic 2D views. It
never touches a rendering surface; ``magnetic_lens.plotting`` draws the result.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from .. import config
from .data_classes import Beam


CHANNELS = ("velocity", "force", "field")

# name, (horizontal axis index, vertical axis index), axis labels
VIEW_PLANES = (
    ("xy", (0, 1), ("x (m)", "y (m)")),
    ("zy", (2, 1), ("z (m)", "y (m)")),
    ("xz", (0, 2), ("x (m)", "z (m)")),
)


@dataclass(frozen=True)
class DisplayConfig:
    """Display options for arrow glyphs and 2D views."""

    arrow_length: float = config.ARROW_LENGTH
    length_mode: str = config.ARROW_LENGTH_MODE
    min_relative_length: float = config.MIN_RELATIVE_ARROW_LENGTH
    show_velocity: bool = config.SHOW_VELOCITY_ARROWS
    show_force: bool = config.SHOW_FORCE_ARROWS
    show_field: bool = config.SHOW_FIELD_ARROWS
    surface_size: Tuple[int, int] = config.VIEW_SURFACE_SIZE
    margin_px: float = config.VIEW_MARGIN_PX
    min_extent: float = config.MIN_VIEW_EXTENT
    background_color: Tuple[int, int, int] = config.DEFAULT_BACKGROUND_COLOR

    def channel_enabled(self, channel: str) -> bool:
        return {
            "velocity": self.show_velocity,
            "force": self.show_force,
            "field": self.show_field,
        }[channel]


@dataclass
class Curve3D:
    points: np.ndarray  # (n, 3)
    color: Tuple[float, float, float]
    opacity: float


@dataclass
class Arrow3D:
    origin: np.ndarray
    direction: np.ndarray  # unit vector
    length: float
    channel: str
    color: str


@dataclass
class CoilRing:
    """Ring hint drawn around the lens axis at the down-lobe height."""

    center: np.ndarray
    radius: float


@dataclass
class Polyline2D:
    points: np.ndarray  # (n, 2) surface pixels
    color: Tuple[float, float, float]
    opacity: float


@dataclass
class View2D:
    """One orthographic projection fitted to a raster surface.

    ``to_surface`` maps world coordinates of the plane to pixels, with the
    vertical axis flipped so that up in the world is up on the surface.
    """

    name: str
    axes: Tuple[int, int]
    labels: Tuple[str, str]
    scale: float
    center: np.ndarray
    size: Tuple[int, int]
    polylines: List[Polyline2D] = field(default_factory=list)

    def to_surface(self, points: np.ndarray) -> np.ndarray:
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        width, height = self.size
        u = 0.5 * width + (points[:, 0] - self.center[0]) * self.scale
        v = 0.5 * height - (points[:, 1] - self.center[1]) * self.scale
        return np.column_stack([u, v])


@dataclass
class Projection:
    """Everything a renderer needs to draw one beam."""

    curves3d: List[Curve3D]
    arrows3d: List[Arrow3D]
    views2d: Dict[str, View2D]
    source_points: np.ndarray
    image_points: np.ndarray
    coil: Optional[CoilRing]
    detector_height: float
    background_color: Tuple[int, int, int] = config.DEFAULT_BACKGROUND_COLOR


def arrow_fraction(relative: float, mode: str) -> float:
    """Map a magnitude relative to the channel maximum onto [0, 1]."""
    if mode == "linear":
        return relative
    if mode == "log":
        return math.log10(1.0 + 9.0 * relative)
    raise ValueError(f"Unknown arrow length mode: {mode!r}")


def build_arrows(beam: Beam, display: DisplayConfig) -> List[Arrow3D]:
    """Arrow glyphs for the sampled points, normalised per channel.

    Each channel is scaled against its own maximum magnitude across the beam.
    Glyphs shorter than ``min_relative_length`` of the full arrow are dropped.
    """
    arrows: List[Arrow3D] = []

    for channel in CHANNELS:
        if not display.channel_enabled(channel):
            continue

        samples = []
        for path in beam.paths:
            for point in path.points:
                vector = getattr(point, channel)
                if vector is None or not np.all(np.isfinite(vector)):
                    continue
                samples.append((point.position, vector, float(np.linalg.norm(vector))))

        if not samples:
            continue
        max_magnitude = max(magnitude for _, _, magnitude in samples)
        if not (max_magnitude > 0.0 and math.isfinite(max_magnitude)):
            continue

        color = config.ARROW_COLORS.get(channel, "black")
        for origin, vector, magnitude in samples:
            fraction = arrow_fraction(magnitude / max_magnitude, display.length_mode)
            if fraction < display.min_relative_length or magnitude == 0.0:
                continue
            arrows.append(Arrow3D(
                origin=np.array(origin, dtype=float),
                direction=vector / magnitude,
                length=fraction * display.arrow_length,
                channel=channel,
                color=color,
            ))

    return arrows


def fit_view(
    beam: Beam,
    name: str,
    axes: Tuple[int, int],
    labels: Tuple[str, str],
    display: DisplayConfig,
) -> View2D:
    """Fit one coordinate-pair projection of the beam to its raster surface.

    The scale is chosen so the bounding box of all paths, and therefore the
    busiest path, fits inside the surface minus the margin. Extents are
    clamped to ``min_extent`` so a single-point path still gets a finite,
    positive scale.
    """
    width, height = display.surface_size
    usable_w = max(width - 2.0 * display.margin_px, 1.0)
    usable_h = max(height - 2.0 * display.margin_px, 1.0)

    planar = []
    for path in beam.paths:
        positions = path.positions[:, list(axes)]
        positions = positions[np.all(np.isfinite(positions), axis=1)]
        planar.append(positions)

    finite = [p for p in planar if len(p)]
    if finite:
        stacked = np.vstack(finite)
        lower = stacked.min(axis=0)
        upper = stacked.max(axis=0)
    else:
        lower = upper = np.zeros(2)

    extent = np.maximum(upper - lower, display.min_extent)
    scale = float(min(usable_w / extent[0], usable_h / extent[1]))
    view = View2D(
        name=name,
        axes=axes,
        labels=labels,
        scale=scale,
        center=0.5 * (lower + upper),
        size=(width, height),
    )

    for path, positions in zip(beam.paths, planar):
        if not len(positions):
            continue
        view.polylines.append(Polyline2D(
            points=view.to_surface(positions),
            color=path.color,
            opacity=path.opacity,
        ))

    return view


def project_beam(beam: Beam, display: Optional[DisplayConfig] = None) -> Projection:
    """Turn a beam into 3D curves, arrow glyphs, markers and three 2D views."""
    display = display or DisplayConfig()

    curves = [
        Curve3D(points=path.positions, color=path.color, opacity=path.opacity)
        for path in beam.paths
    ]

    views = {
        name: fit_view(beam, name, axes, labels, display)
        for name, axes, labels in VIEW_PLANES
    }

    coil = None
    radius = config.COIL_RADIUS_FACTOR * beam.source.separation
    if radius > 0.0:
        params = beam.field_params
        coil = CoilRing(
            center=np.array([0.0, params.axial_origin - params.down_offset, 0.0]),
            radius=radius,
        )

    return Projection(
        curves3d=curves,
        arrows3d=build_arrows(beam, display),
        views2d=views,
        source_points=beam.source_points.copy(),
        image_points=beam.image_points.copy(),
        coil=coil,
        detector_height=beam.detector_height,
        background_color=tuple(display.background_color),
    )


def projection_limits(projection: Projection, pad: float = 0.1) -> Tuple[np.ndarray, np.ndarray]:
    """Cubic axis limits enclosing every curve of a projection."""
    clouds = [c.points for c in projection.curves3d if len(c.points)]
    if not clouds:
        return np.full(3, -1.0), np.full(3, 1.0)

    points = np.vstack(clouds)
    points = points[np.all(np.isfinite(points), axis=1)]
    if not len(points):
        return np.full(3, -1.0), np.full(3, 1.0)

    center = 0.5 * (points.min(axis=0) + points.max(axis=0))
    half = 0.5 * float(np.max(points.max(axis=0) - points.min(axis=0)))
    half = max(half, 1.0) * (1.0 + pad)
    return center - half, center + half
