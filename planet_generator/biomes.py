# planet_generator/biomes.py

"""
================================================================================
BIOME CLASSIFICATION AND SURFACE ATTRIBUTES
================================================================================
This module turns normalized surface coordinates into biome IDs and the
per-texel attributes the material needs: color, bump height, roughness and
emissive color.

It is designed to be a pure, stateless utility with no dependencies on
Pygame, allowing it to be used by both the texture synthesizer and tests.

Data Contract:
---------------
- Inputs:
    - u, v: Normalized coordinates in [0, 1). v=0 is the north pole.
    - seed: The master seed of the planet.
    - settings: A dictionary produced by settings.resolve_settings().
- Outputs:
    - SurfaceLayers of NumPy arrays (vectorised) or a TexelRecord (scalar).
- Side Effects: None.
- Invariants: Every (u, v, seed) yields exactly one biome. The polar override
  always wins inside the configured polar bounds.
================================================================================
"""
from typing import NamedTuple

import numpy as np

from . import config as DEFAULTS
from . import noise

# --- Biome ID Constants ---
BIOME_ID_OCEAN = 0
BIOME_ID_BEACH = 1
BIOME_ID_FOREST = 2
BIOME_ID_JUNGLE = 3
BIOME_ID_MOUNTAIN = 4
BIOME_ID_VOLCANIC_ROCK = 5
BIOME_ID_SNOW = 6
BIOME_ID_POLAR_ICE = 7

BIOME_NAMES = {
    BIOME_ID_OCEAN: "ocean",
    BIOME_ID_BEACH: "beach",
    BIOME_ID_FOREST: "forest",
    BIOME_ID_JUNGLE: "jungle",
    BIOME_ID_MOUNTAIN: "mountain",
    BIOME_ID_VOLCANIC_ROCK: "volcanic_rock",
    BIOME_ID_SNOW: "snow",
    BIOME_ID_POLAR_ICE: "polar_ice",
}

# --- Default Color Mappings ---
COLOR_MAP_SURFACE = {
    "deep_ocean": (10, 10, 60),      # Dark indigo
    "shallow_ocean": (30, 50, 120),
    "beach": (194, 178, 128),
    "forest": (10, 80, 20),          # Emerald horizon
    "jungle": (5, 50, 10),           # Wild heart, darker green
    "mountain": (80, 70, 60),
    "volcanic_rock": (20, 5, 5),     # Dark rock around lava
    "snow": (240, 250, 255),
}

COLOR_MAP_EMISSIVE = {
    "none": (0, 0, 0),
    "crystal": (0, 60, 100),         # Cyan reflection on crystal plains
    "bioluminescence": (20, 240, 160),
    "lava": (255, 80, 10),
}


class TexelRecord(NamedTuple):
    """The resolved surface of one texel."""
    biome: int
    color: tuple
    bump: float
    roughness: float
    emissive: tuple


class SurfaceLayers(NamedTuple):
    """Vectorised surface attributes; every array shares the input shape."""
    biome: np.ndarray       # uint8 biome IDs
    height: np.ndarray      # height after archipelago/polar adjustments
    altitude: np.ndarray    # (height - water_level) / (1 - water_level)
    color: np.ndarray       # float RGB, shape + (3,)
    bump: np.ndarray        # 0-255 scale, unclamped
    roughness: np.ndarray   # 0-1
    emissive: np.ndarray    # float RGB, shape + (3,)


# --- Lookup Table (LUT) Generation ---
def create_biome_color_lut() -> np.ndarray:
    """Creates a LUT where the index is the Biome ID and the value is the RGB color."""
    return np.array([
        COLOR_MAP_SURFACE["deep_ocean"],  # Replaced by the depth gradient
        COLOR_MAP_SURFACE["beach"],
        COLOR_MAP_SURFACE["forest"],
        COLOR_MAP_SURFACE["jungle"],
        COLOR_MAP_SURFACE["mountain"],
        COLOR_MAP_SURFACE["volcanic_rock"],
        COLOR_MAP_SURFACE["snow"],
        COLOR_MAP_SURFACE["snow"],
    ], dtype=np.float64)


def create_roughness_lut() -> np.ndarray:
    """Creates a LUT of roughness values indexed by Biome ID."""
    return np.array([
        DEFAULTS.OCEAN_ROUGHNESS,
        DEFAULTS.LAND_ROUGHNESS,
        DEFAULTS.LAND_ROUGHNESS,
        DEFAULTS.LAND_ROUGHNESS,
        DEFAULTS.LAND_ROUGHNESS,
        DEFAULTS.LAND_ROUGHNESS,
        DEFAULTS.SNOW_ROUGHNESS,
        DEFAULTS.POLAR_ROUGHNESS,
    ], dtype=np.float64)


_COLOR_LUT = create_biome_color_lut()
_ROUGHNESS_LUT = create_roughness_lut()


def _shape_height(u: np.ndarray, v: np.ndarray, seed: float, settings: dict) -> np.ndarray:
    """Continent fBm plus the archipelago injection and the polar height boost."""
    octaves = settings['octaves']
    height = noise.fractal_noise_2d(
        u * DEFAULTS.CONTINENT_FREQUENCY, v * DEFAULTS.CONTINENT_FREQUENCY, seed, octaves
    )

    # --- 1. Archipelagos near the equator ---
    equator_distance = np.abs(v - 0.5) * 2.0
    archipelago_mask = 1.0 - equator_distance ** 2
    archipelago_noise = noise.fractal_noise_2d(
        u * DEFAULTS.ARCHIPELAGO_FREQUENCY, v * DEFAULTS.ARCHIPELAGO_FREQUENCY,
        seed + DEFAULTS.ARCHIPELAGO_SEED_OFFSET, octaves
    )
    island_mask = ((archipelago_mask > DEFAULTS.ARCHIPELAGO_MASK_THRESHOLD)
                   & (archipelago_noise > DEFAULTS.ARCHIPELAGO_NOISE_THRESHOLD))
    height = np.where(
        island_mask,
        np.maximum(height, archipelago_noise * DEFAULTS.ARCHIPELAGO_HEIGHT_SCALE),
        height
    )

    # --- 2. Polar caps steepen the land towards the poles ---
    boost_mask = (v < DEFAULTS.POLAR_BOOST_BOUNDS["north"]) | (v > DEFAULTS.POLAR_BOOST_BOUNDS["south"])
    pole_distance = np.where(v < 0.5, v, 1.0 - v)
    boost = DEFAULTS.POLAR_BOOST_STRENGTH * (pole_distance * DEFAULTS.POLAR_BOOST_SCALE) ** 2
    height = np.where(boost_mask, height + boost, height)

    if settings['clamp_height']:
        height = np.clip(height, 0.0, 1.0)
    return height


def calculate_surface(u, v, seed: float, settings: dict) -> SurfaceLayers:
    """
    Classifies every (u, v) sample and returns the full set of surface layers.
    """
    u, v = np.broadcast_arrays(np.asarray(u, dtype=np.float64), np.asarray(v, dtype=np.float64))
    water_level = settings['water_level']
    levels = settings['altitude_thresholds']
    bounds = settings['polar_bounds']

    height = _shape_height(u, v, seed, settings)
    altitude = (height - water_level) / (1.0 - water_level)
    ocean_mask = height < water_level

    # --- 3. Secondary noise for the land sub-biomes ---
    biome_noise = noise.hash_noise_2d(
        u * DEFAULTS.BIOME_FREQUENCY, v * DEFAULTS.BIOME_FREQUENCY,
        seed + DEFAULTS.BIOME_SEED_OFFSET
    )
    crystal_noise = noise.hash_noise_2d(
        u * DEFAULTS.CRYSTAL_FREQUENCY, v * DEFAULTS.CRYSTAL_FREQUENCY,
        seed + DEFAULTS.CRYSTAL_SEED_OFFSET
    )
    bio_noise = noise.hash_noise_2d(
        u * DEFAULTS.BIOLUMINESCENCE_FREQUENCY, v * DEFAULTS.BIOLUMINESCENCE_FREQUENCY,
        seed + DEFAULTS.BIOLUMINESCENCE_SEED_OFFSET
    )
    lava_noise = noise.hash_noise_2d(
        u * DEFAULTS.LAVA_FREQUENCY, v * DEFAULTS.LAVA_FREQUENCY,
        seed + DEFAULTS.LAVA_SEED_OFFSET
    )

    vegetation = np.where(biome_noise > DEFAULTS.FOREST_SPLIT_THRESHOLD, BIOME_ID_FOREST, BIOME_ID_JUNGLE)
    lava_mask = (lava_noise > DEFAULTS.LAVA_THRESHOLD) & (altitude > DEFAULTS.LAVA_MIN_ALTITUDE)
    highlands = np.where(lava_mask, BIOME_ID_VOLCANIC_ROCK, BIOME_ID_MOUNTAIN)

    conditions = [
        ocean_mask,
        altitude < levels["beach"],
        altitude < levels["vegetation"],
        altitude < levels["mountain"],
    ]
    choices = [BIOME_ID_OCEAN, BIOME_ID_BEACH, vegetation, highlands]
    biome = np.select(conditions, choices, default=BIOME_ID_SNOW).astype(np.uint8)

    # --- 4. Polar override (wins over everything else) ---
    polar_mask = (v < bounds["north"]) | (v > bounds["south"])
    biome[polar_mask] = BIOME_ID_POLAR_ICE

    # --- 5. Material attributes ---
    color = _COLOR_LUT[biome]
    ocean_texels = biome == BIOME_ID_OCEAN
    if np.any(ocean_texels):
        depth = (height[ocean_texels] / water_level)[..., np.newaxis]
        color[ocean_texels] = (np.array(COLOR_MAP_SURFACE["deep_ocean"]) * (1.0 - depth)
                               + np.array(COLOR_MAP_SURFACE["shallow_ocean"]) * depth)

    roughness = _ROUGHNESS_LUT[biome]

    bump = np.where(ocean_mask, height * DEFAULTS.OCEAN_BUMP_SCALE, height * DEFAULTS.LAND_BUMP_SCALE)
    bump[polar_mask] = DEFAULTS.POLAR_BUMP

    emissive = np.zeros(biome.shape + (3,), dtype=np.float64)
    glow_masks = (
        ((biome == BIOME_ID_FOREST) & (crystal_noise > DEFAULTS.CRYSTAL_THRESHOLD), "crystal"),
        ((biome == BIOME_ID_JUNGLE) & (bio_noise > DEFAULTS.BIOLUMINESCENCE_THRESHOLD), "bioluminescence"),
        (biome == BIOME_ID_VOLCANIC_ROCK, "lava"),
    )
    for mask, name in glow_masks:
        emissive[mask] = COLOR_MAP_EMISSIVE[name]

    return SurfaceLayers(biome, height, altitude, color, bump, roughness, emissive)


def classify_texel(u: float, v: float, seed: float, settings: dict) -> TexelRecord:
    """Classifies a single texel. Uses the same decisions as calculate_surface."""
    layers = calculate_surface(np.array([u]), np.array([v]), seed, settings)
    return TexelRecord(
        biome=int(layers.biome[0]),
        color=tuple(float(c) for c in layers.color[0]),
        bump=float(layers.bump[0]),
        roughness=float(layers.roughness[0]),
        emissive=tuple(float(c) for c in layers.emissive[0]),
    )


def calculate_cloud_alpha(u, v, seed: float, settings: dict) -> np.ndarray:
    """
    Returns cloud opacity on a 0-255 scale from an fBm layer that is
    independent of the surface.
    """
    u, v = np.broadcast_arrays(np.asarray(u, dtype=np.float64), np.asarray(v, dtype=np.float64))
    cloud_noise = noise.fractal_noise_2d(
        u * DEFAULTS.CLOUD_FREQUENCY + seed, v * DEFAULTS.CLOUD_FREQUENCY,
        seed + DEFAULTS.CLOUD_SEED_OFFSET, settings['octaves']
    )
    return np.where(
        cloud_noise > DEFAULTS.CLOUD_THRESHOLD,
        (cloud_noise - DEFAULTS.CLOUD_THRESHOLD) * DEFAULTS.CLOUD_ALPHA_GAIN * 255.0,
        0.0
    )


def biome_fractions(biome_map: np.ndarray) -> dict:
    """Returns the share of texels that belong to each biome."""
    counts = np.bincount(biome_map.ravel(), minlength=len(BIOME_NAMES))
    total = max(int(biome_map.size), 1)
    return {BIOME_NAMES[biome_id]: counts[biome_id] / total for biome_id in BIOME_NAMES}
