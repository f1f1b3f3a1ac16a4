# planet_generator/runtime/illumination.py

"""
================================================================================
DAY/NIGHT EMISSIVE BOOST
================================================================================
This module decides, per fragment, how strongly the self-luminous features of
the surface (lava, crystal plains, bioluminescent jungle) glow. Fragments that
face away from the primary star get a smooth boost across the terminator.

Data Contract:
---------------
- Inputs:
    - IlluminationState: the frozen star position snapshot of the frame.
    - view_matrix (4x4), view-space fragment positions and normals.
- Outputs:
    - IlluminationResult with dot_nl, night_mask in [0, 1] and the emissive
      multiplier (day floor .. day floor + night boost).
- Side Effects: None.
- Invariants: No state persists between calls. All fragments of one frame
  read the same IlluminationState snapshot.
================================================================================
"""
from typing import NamedTuple

import numpy as np

from .. import config as DEFAULTS
from ..settings import resolve_settings


def smoothstep(edge0: float, edge1: float, x):
    """Clamped cubic Hermite ease, identical to the shading-language builtin."""
    t = np.clip((np.asarray(x, dtype=np.float64) - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


class IlluminationState(NamedTuple):
    """
    The uniform input of the shading stage for one frame. Immutable, so a
    frame can never observe a star position that changes halfway through.
    """
    star_position: tuple
    elapsed_time: float = 0.0

    def for_frame(self, star_position, elapsed_time: float = None) -> "IlluminationState":
        """
        Returns the snapshot for the next frame; this one is left untouched.
        Fields that are not supplied carry over from the current snapshot.
        """
        if elapsed_time is None:
            elapsed_time = self.elapsed_time
        return self._replace(star_position=tuple(float(c) for c in star_position),
                             elapsed_time=float(elapsed_time))


class IlluminationResult(NamedTuple):
    dot_nl: np.ndarray
    night_mask: np.ndarray
    emissive_multiplier: np.ndarray


class IlluminationModel:
    """Terminator-based emissive multiplier."""

    def __init__(self, config: dict = None):
        settings = resolve_settings(config)
        self.day_threshold = settings['terminator_day_threshold']
        self.night_threshold = settings['terminator_night_threshold']
        self.day_floor = settings['emissive_day_floor']
        self.night_boost = settings['emissive_night_boost']

    def initialize(self, star_position=DEFAULTS.INITIAL_STAR_POSITION) -> IlluminationState:
        """Creates the state object the renderer threads through its frame updates."""
        return IlluminationState(tuple(float(c) for c in star_position))

    def night_mask(self, dot_nl):
        """0 on the day side (dot_nl >= day threshold), 1 deep in the night."""
        return smoothstep(self.day_threshold, self.night_threshold, dot_nl)

    def emissive_multiplier(self, night_mask):
        return self.day_floor + self.night_boost * np.asarray(night_mask, dtype=np.float64)

    @staticmethod
    def light_direction(star_position, view_matrix: np.ndarray, view_position: np.ndarray) -> np.ndarray:
        """Unit vectors from each view-space fragment towards the star."""
        star_world = np.append(np.asarray(star_position, dtype=np.float64), 1.0)
        star_view = (np.asarray(view_matrix, dtype=np.float64) @ star_world)[:3]
        to_star = star_view - np.asarray(view_position, dtype=np.float64)
        length = np.linalg.norm(to_star, axis=-1, keepdims=True)
        # A fragment sitting exactly on the star has no direction; treat it as the terminator.
        return np.divide(to_star, length, out=np.zeros_like(to_star), where=length > 0)

    def evaluate(self, state: IlluminationState, view_matrix: np.ndarray,
                 view_position: np.ndarray, normal: np.ndarray) -> IlluminationResult:
        """
        Computes the night mask and emissive multiplier for one fragment or an
        array of fragments (trailing axis of size 3).
        """
        light_dir = self.light_direction(state.star_position, view_matrix, view_position)
        dot_nl = np.sum(np.asarray(normal, dtype=np.float64) * light_dir, axis=-1)
        mask = self.night_mask(dot_nl)
        return IlluminationResult(dot_nl, mask, self.emissive_multiplier(mask))

    def apply(self, base_emissive: np.ndarray, night_mask) -> np.ndarray:
        """The default emissive post-process: scales the base glow by the multiplier."""
        multiplier = self.emissive_multiplier(night_mask)
        return np.asarray(base_emissive, dtype=np.float64) * np.asarray(multiplier)[..., np.newaxis]
