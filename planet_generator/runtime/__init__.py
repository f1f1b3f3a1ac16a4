# planet_generator/runtime/__init__.py

# This file makes the 'runtime' directory a Python package.
# We can also use it to define the public API of the package.

from .orbits import OrbitalSimulator, OrbitalState
from .illumination import IlluminationModel, IlluminationState, IlluminationResult
from .renderer import PreviewRenderer
from .planet import Planet

__all__ = [
    "OrbitalSimulator", "OrbitalState",
    "IlluminationModel", "IlluminationState", "IlluminationResult",
    "PreviewRenderer", "Planet",
]
