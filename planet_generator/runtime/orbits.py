# planet_generator/runtime/orbits.py

"""
================================================================================
BINARY STAR ORBITS
================================================================================
This module computes where the two suns of the planet are at any moment. The
planet stays at the origin and the universe moves around it, which is
mathematically identical to the planet orbiting its primary star.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Optional overrides for orbit radii and periods.
- Public Methods:
    - state(t): Returns the OrbitalState for elapsed time t.
- Side Effects: None.
- Invariants: The output is a pure function of t. There is no accumulator, so
  replaying the same t reproduces the same positions regardless of how often
  or in which order state() is called.
================================================================================
"""
import math
from typing import NamedTuple

from .. import config as DEFAULTS
from ..settings import resolve_settings


class OrbitalState(NamedTuple):
    """Snapshot of the star system at one instant."""
    elapsed_time: float
    primary_star_position: tuple
    secondary_star_position: tuple
    background_rotation: tuple   # (y, z) radians
    planet_rotation: float       # spin about the tilted axis, radians
    cloud_rotation: tuple        # (x, y) radians
    axial_tilt: float            # radians


class OrbitalSimulator:
    """Evaluates the simplified circular orbits of the binary star system."""

    def __init__(self, config: dict = None):
        settings = resolve_settings(config)
        self.primary_radius = settings['primary_orbit_radius']
        self.primary_period = settings['primary_orbit_period']
        self.secondary_radius = settings['secondary_orbit_radius']
        self.secondary_period = settings['secondary_orbit_period']

        # Angular speeds are pre-calculated once; they never change afterwards.
        self._primary_speed = 2.0 * math.pi / self.primary_period
        self._secondary_speed = 2.0 * math.pi / self.secondary_period
        self._axial_tilt = math.radians(DEFAULTS.AXIAL_TILT_DEGREES)

    def primary_position(self, t: float) -> tuple:
        angle = t * self._primary_speed
        return (
            math.sin(angle) * self.primary_radius,
            DEFAULTS.PRIMARY_ORBIT_HEIGHT,
            math.cos(angle) * self.primary_radius,
        )

    def secondary_position(self, t: float, primary: tuple = None) -> tuple:
        """The companion star orbits the primary's current position, not the origin."""
        if primary is None:
            primary = self.primary_position(t)
        angle = t * self._secondary_speed
        return (
            primary[0] + math.sin(angle) * self.secondary_radius,
            DEFAULTS.SECONDARY_BASE_HEIGHT + math.sin(t * DEFAULTS.SECONDARY_BOB_RATE) * DEFAULTS.SECONDARY_BOB_AMPLITUDE,
            primary[2] + math.cos(angle) * self.secondary_radius,
        )

    def state(self, t: float) -> OrbitalState:
        """Returns the full star system state for elapsed time t."""
        t = float(t)
        primary = self.primary_position(t)
        secondary = self.secondary_position(t, primary)
        return OrbitalState(
            elapsed_time=t,
            primary_star_position=primary,
            secondary_star_position=secondary,
            background_rotation=(t * DEFAULTS.BACKGROUND_ROTATION_RATE_Y, t * DEFAULTS.BACKGROUND_ROTATION_RATE_Z),
            planet_rotation=t * DEFAULTS.PLANET_SPIN_RATE,
            cloud_rotation=(
                math.sin(t * DEFAULTS.CLOUD_WOBBLE_RATE) * DEFAULTS.CLOUD_WOBBLE_AMPLITUDE,
                t * DEFAULTS.CLOUD_SPIN_RATE,
            ),
            axial_tilt=self._axial_tilt,
        )
