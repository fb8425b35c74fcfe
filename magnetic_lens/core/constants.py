"""
Physical constants and diagnostic bookkeeping.
"""

import math

from scipy.constants import e, m_e, m_p

# Physical constants
ELECTRON_MASS_KG = m_e  # kg
PROTON_MASS_KG = m_p  # kg
ELEMENTARY_CHARGE_C = e  # C

# Particle presets: each overwrites exactly these four session fields
PARTICLE_PRESETS = {
    "electron": {
        "mass_exp": math.log10(ELECTRON_MASS_KG),
        "mass_negative": False,
        "charge_exp": math.log10(ELEMENTARY_CHARGE_C),
        "charge_negative": True,
    },
    "positron": {
        "mass_exp": math.log10(ELECTRON_MASS_KG),
        "mass_negative": False,
        "charge_exp": math.log10(ELEMENTARY_CHARGE_C),
        "charge_negative": False,
    },
    "proton": {
        "mass_exp": math.log10(PROTON_MASS_KG),
        "mass_negative": False,
        "charge_exp": math.log10(ELEMENTARY_CHARGE_C),
        "charge_negative": False,
    },
    "antiproton": {
        "mass_exp": math.log10(PROTON_MASS_KG),
        "mass_negative": False,
        "charge_exp": math.log10(ELEMENTARY_CHARGE_C),
        "charge_negative": True,
    },
}

# Debug flag
DEBUG = False

# Envelope values below this are treated as "no field"
ENVELOPE_CUTOFF = 1e-20

# Global statistics for numeric diagnostics
DIAGNOSTIC_STATS = {
    'degenerate_gaussian': 0,
    'nonfinite_gaussian': 0,
    'diverged_paths': 0,
}

# Diagnostic classes that have already been reported
_REPORTED = set()


def warn_once(key: str, message: str) -> None:
    """Count a diagnostic and print it the first time its class occurs."""
    DIAGNOSTIC_STATS[key] = DIAGNOSTIC_STATS.get(key, 0) + 1
    if key in _REPORTED:
        return
    _REPORTED.add(key)
    print(f"[warning] {message} (further occurrences suppressed)")


def reset_diagnostic_stats():
    """Reset diagnostic counters and re-arm once-only warnings."""
    for key in DIAGNOSTIC_STATS:
        DIAGNOSTIC_STATS[key] = 0
    _REPORTED.clear()


def print_diagnostic_stats():
    """Print a summary of numeric diagnostics collected so far.

    Degenerate Gaussians usually mean a spread was edited down to zero.
    Diverged paths point at a step size that is too large for the
    chosen field strength and charge/mass ratio.
    """
    stats = DIAGNOSTIC_STATS
    total = sum(stats.values())

    if total == 0:
        print("No numeric diagnostics recorded.")
        return

    print("\n" + "="*60)
    print("NUMERIC DIAGNOSTICS")
    print("="*60)
    print(f"Degenerate Gaussian spreads:  {stats['degenerate_gaussian']:,}")
    print(f"Non-finite Gaussian values:   {stats['nonfinite_gaussian']:,}")
    print(f"Diverged paths:               {stats['diverged_paths']:,}")
    print("="*60)

    if stats['diverged_paths'] > 0:
        print("⚠️  WARNING: some paths diverged")
        print("   - Reduce the time step")
        print("   - Lower the field strength exponent")
    print()
