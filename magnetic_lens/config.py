"""
Configuration settings for the magnetic lens beam simulator.

This module contains every default the simulator starts from. Nothing is
persisted: a fresh process always starts from these values, and the
interactive session resets to them on ``reset()``.

Users can modify these values to customize the simulation without changing
the core code.
"""

from __future__ import annotations

import math

# =============================================================================
# Output (figures only, no simulation state is written)
# =============================================================================

FIGURES_OUTPUT_DIR = "Figures"
BEAM_3D_FIGURE_BASE = "lens_beam"
IMAGE_POINTS_FIGURE_BASE = "lens_image_points"

# =============================================================================
# Field Shape
# =============================================================================

# Down (axial) lobe, measured along s = axial_origin - y (m)
DEFAULT_DOWN_OFFSET = 4.49
DEFAULT_DOWN_SPREAD = 0.135

# Radial lobe and its reverse lobe (m)
DEFAULT_RADIAL_OFFSET = 3.355
DEFAULT_RADIAL_SPREAD = 0.16
DEFAULT_REVERSE_OFFSET = 13.7

# Base-10 exponent of the overall field strength
DEFAULT_STRENGTH_EXP = -11.0

# Height at which the profile coordinate s is zero (m)
DEFAULT_AXIAL_ORIGIN = 3.0

# Annular envelope in horizontal distance from the axis (m)
DEFAULT_ENVELOPE_OFFSET = 1.2
DEFAULT_ENVELOPE_SPREAD = 0.3

# Profile set: 'bipolar', 'mirrored' or 'unipolar'
DEFAULT_PROFILE_SET = "bipolar"

# =============================================================================
# Particles
# =============================================================================

DEFAULT_MASS_EXP = math.log10(9.1e-31)
DEFAULT_MASS_NEGATIVE = False
DEFAULT_CHARGE_EXP = math.log10(1.6e-19)
DEFAULT_CHARGE_NEGATIVE = True

# =============================================================================
# Source & Detector
# =============================================================================

# Separation between the two source edges (m)
DEFAULT_SEPARATION = 1.0

# Source height and vertical gap down to the detector plane (m)
DEFAULT_SOURCE_HEIGHT = 3.0
DEFAULT_VERTICAL_GAP = 13.0

# Initial downward speed (m/s)
DEFAULT_SPEED = 10.0

# Rays per lattice side, and lattice layout: 'line' or 'grid'
DEFAULT_DENSITY = 2
DEFAULT_LAYOUT = "line"

# Lattices thinner than this collapse to a single on-axis ray
MIN_LATTICE_DENSITY = 2
MIN_SEPARATION = 1e-9

# Edge colours (RGB, 0-255) and interior ray opacity
DEFAULT_COLOR_A = (255, 0, 0)
DEFAULT_COLOR_B = (0, 0, 255)
DEFAULT_BACKGROUND_COLOR = (255, 255, 255)
INTERIOR_OPACITY = 0.35

# =============================================================================
# Simulation Parameters
# =============================================================================

DEFAULT_STEPS = 1000
DEFAULT_TIME_STEP = 0.01

# Every k-th path point carries velocity/force/field vectors
DEFAULT_SAMPLE_EVERY = 25

# Force policy: 'field_cross_velocity', 'velocity_cross_field' or 'radial_boost'
DEFAULT_FORCE_POLICY = "field_cross_velocity"

# =============================================================================
# Parameter Ranges (edits are clamped, never rejected)
# =============================================================================

PARAMETER_RANGES = {
    "down_offset": (0.0, 20.0),
    "down_spread": (1e-3, 10.0),
    "radial_offset": (0.0, 20.0),
    "radial_spread": (1e-3, 10.0),
    "reverse_offset": (0.0, 20.0),
    "strength_exp": (-20.0, 0.0),
    "axial_origin": (-20.0, 20.0),
    "envelope_offset": (0.0, 10.0),
    "envelope_spread": (1e-3, 10.0),
    "mass_exp": (-40.0, -10.0),
    "charge_exp": (-40.0, -10.0),
    "separation": (0.0, 10.0),
    "source_height": (-20.0, 20.0),
    "vertical_gap": (0.1, 50.0),
    "speed": (0.1, 50.0),
    "density": (1, 50),
    "steps": (1, 10000),
    "dt": (1e-6, 1.0),
    "sample_every": (1, 1000),
    "arrow_length": (0.0, 5.0),
    "min_relative_length": (0.0, 1.0),
}

# =============================================================================
# Visualization Settings
# =============================================================================

# Arrow glyphs: longest arrow per channel (m), length mode and declutter cutoff
ARROW_LENGTH = 0.5
ARROW_LENGTH_MODE = "linear"  # 'linear' or 'log'
MIN_RELATIVE_ARROW_LENGTH = 0.05
SHOW_VELOCITY_ARROWS = True
SHOW_FORCE_ARROWS = True
SHOW_FIELD_ARROWS = True
ARROW_COLORS = {
    "velocity": "tab:green",
    "force": "tab:orange",
    "field": "tab:purple",
}

# 2D raster surfaces (pixels), margin (pixels) and minimum world extent (m)
VIEW_SURFACE_SIZE = (300, 300)
VIEW_MARGIN_PX = 15.0
MIN_VIEW_EXTENT = 1e-6

# Coil ring hint, radius relative to the source separation
COIL_RADIUS_FACTOR = 1.2
COIL_COLOR = "#888888"
COIL_ALPHA = 0.2

# Marker colours for source and image points
SOURCE_MARKER_COLOR = "green"
IMAGE_MARKER_COLOR = "black"

# Camera defaults (degrees)
CAMERA_ELEVATION_DEG = 20.0
CAMERA_AZIMUTH_DEG = 45.0

# Plot DPI settings and figure sizes
PLOT_DPI = 300
QUICK_PLOT_DPI = 150
BEAM_3D_FIGSIZE = (10, 12)
VIEWS_2D_FIGSIZE = (15, 5)
