# planet_generator/runtime/planet.py

"""
================================================================================
PLANET RUNTIME
================================================================================
This module provides the user-facing `Planet` class, the primary interface for
animating a generated texture set. It wires the orbital model, the
illumination state and the preview renderer into a single object.
================================================================================
"""
import logging

import numpy as np

from ..synthesizer import TextureSet, TextureSynthesizer
from .illumination import IlluminationModel, IlluminationState
from .orbits import OrbitalSimulator, OrbitalState
from .renderer import PreviewRenderer


class Planet:
    """
    The main runtime class for a generated planet. Handles star motion,
    the day/night emissive boost and preview rendering.
    """
    def __init__(self, texture_set: TextureSet, config: dict = None, resolution: int = 256):
        """
        Args:
            texture_set (TextureSet): A complete, generated or loaded texture set.
            config (dict): Orbit and illumination overrides.
            resolution (int): Side of the rendered preview in pixels.
        """
        self.logger = logging.getLogger(__name__)
        self.texture_set = texture_set
        self.orbits = OrbitalSimulator(config)
        self.illumination = IlluminationModel(config)
        self.renderer = PreviewRenderer(texture_set, self.illumination, resolution=resolution)
        self.logger.info(f"Planet runtime ready (seed {texture_set.seed}, preview {resolution}px).")

    @classmethod
    def generate(cls, config: dict = None, seed: float = None, logger: logging.Logger = None, **kwargs) -> "Planet":
        """Synthesizes a fresh texture set and wraps it. Blocks until textures are complete."""
        config = dict(config or {})
        synthesizer = TextureSynthesizer(config, logger or logging.getLogger(__name__))
        texture_set = synthesizer.generate(seed=seed)
        return cls(texture_set, config=config, **kwargs)

    @classmethod
    def from_package(cls, package_path: str, config: dict = None, **kwargs) -> "Planet":
        """Loads a texture set previously written by the bake script."""
        return cls(TextureSet.load(package_path), config=config, **kwargs)

    def start(self) -> IlluminationState:
        """Returns the initial illumination state; the caller threads it through update()."""
        return self.illumination.initialize()

    def update(self, t: float, illumination_state: IlluminationState) -> tuple:
        """
        Advances to elapsed time t. Returns the new OrbitalState and the frozen
        IlluminationState snapshot for this frame.
        """
        orbital_state = self.orbits.state(t)
        frame_state = illumination_state.for_frame(orbital_state.primary_star_position, t)
        return orbital_state, frame_state

    def draw(self, orbital_state: OrbitalState, illumination_state: IlluminationState) -> np.ndarray:
        """Renders the frame described by the two states."""
        return self.renderer.render(orbital_state, illumination_state)
