# planet_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the planet
generator and its runtime. These values are used if they are not explicitly
provided by the user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC PLANET.
Instead, pass a configuration dictionary to the TextureSynthesizer or the
OrbitalSimulator.
================================================================================
"""

# --- Noise Generation ---
# The seed is drawn at random for every session unless one is given.
SEED_RANGE = 100.0
NOISE_OCTAVES = 6

# Offsets added to the master seed so that every layer samples a different,
# but still deterministic, region of the hash noise.
ARCHIPELAGO_SEED_OFFSET = 20.0
BIOME_SEED_OFFSET = 50.0
CRYSTAL_SEED_OFFSET = 80.0
BIOLUMINESCENCE_SEED_OFFSET = 90.0
LAVA_SEED_OFFSET = 10.0
CLOUD_SEED_OFFSET = 100.0

# --- Sampling Frequencies (multiples of the normalized u,v coordinate) ---
CONTINENT_FREQUENCY = 4.0
ARCHIPELAGO_FREQUENCY = 15.0
BIOME_FREQUENCY = 5.0
CRYSTAL_FREQUENCY = 50.0
BIOLUMINESCENCE_FREQUENCY = 60.0
LAVA_FREQUENCY = 40.0
CLOUD_FREQUENCY = 8.0

# --- Texture Layout ---
TEXTURE_WIDTH = 1024
TEXTURE_HEIGHT = 512
TEXTURE_CHANNELS = ("color", "bump", "roughness", "emissive", "cloud")
# Number of texel rows classified per step of the synthesis loop.
SYNTHESIS_BAND_ROWS = 32

# --- Terrain & Biome Levels (Normalized 0.0 to 1.0) ---
# About 70% of the surface ends up below this level.
WATER_LEVEL = 0.60

# Altitude above the water level, normalized so 1.0 is the theoretical peak.
ALTITUDE_THRESHOLDS = {
    "beach": 0.05,
    "vegetation": 0.45,
    "mountain": 0.75,
    # Snow is everything above the mountain band
}

# Latitude (v) bounds beyond which the ice caps override every other biome.
POLAR_BOUNDS = {
    "north": 0.08,
    "south": 0.92,
}

# Latitude (v) bounds beyond which the terrain is pushed upwards.
POLAR_BOOST_BOUNDS = {
    "north": 0.1,
    "south": 0.9,
}
POLAR_BOOST_STRENGTH = 0.4
POLAR_BOOST_SCALE = 10.0

# Archipelagos only grow where 1 - equator_distance^2 exceeds the mask threshold.
ARCHIPELAGO_MASK_THRESHOLD = 0.6
ARCHIPELAGO_NOISE_THRESHOLD = 0.6
ARCHIPELAGO_HEIGHT_SCALE = 0.9

# The 50/50 split between the two vegetation biomes.
FOREST_SPLIT_THRESHOLD = 0.5
CRYSTAL_THRESHOLD = 0.85
BIOLUMINESCENCE_THRESHOLD = 0.65
LAVA_THRESHOLD = 0.7
LAVA_MIN_ALTITUDE = 0.6

# Boosted heights may exceed 1.0 unless this is enabled.
CLAMP_HEIGHT = False

# --- Surface Attributes ---
OCEAN_ROUGHNESS = 0.2
LAND_ROUGHNESS = 0.8
SNOW_ROUGHNESS = 0.3
POLAR_ROUGHNESS = 0.1
OCEAN_BUMP_SCALE = 0.5
LAND_BUMP_SCALE = 255.0
POLAR_BUMP = 150.0

# --- Clouds ---
CLOUD_THRESHOLD = 0.55
CLOUD_ALPHA_GAIN = 2.5

# --- Binary Star Orbits ---
# The planet stays at the origin and the universe moves around it.
PRIMARY_ORBIT_RADIUS = 12.0
PRIMARY_ORBIT_PERIOD = 60.0
PRIMARY_ORBIT_HEIGHT = 5.0
SECONDARY_ORBIT_RADIUS = 4.0
SECONDARY_ORBIT_PERIOD = 20.0
SECONDARY_BASE_HEIGHT = 2.0
SECONDARY_BOB_AMPLITUDE = 2.0
SECONDARY_BOB_RATE = 0.5

# Galactic background parallax, in radians per time unit.
BACKGROUND_ROTATION_RATE_Y = 0.005
BACKGROUND_ROTATION_RATE_Z = 0.002

# Planet body and cloud shell.
AXIAL_TILT_DEGREES = 23.5
PLANET_SPIN_RATE = 0.03
CLOUD_SPIN_RATE = 0.045
CLOUD_WOBBLE_RATE = 0.05
CLOUD_WOBBLE_AMPLITUDE = 0.002

# --- Day/Night Emissive Boost ---
TERMINATOR_DAY_THRESHOLD = 0.15
TERMINATOR_NIGHT_THRESHOLD = -0.25
EMISSIVE_DAY_FLOOR = 0.5
EMISSIVE_NIGHT_BOOST = 4.5
# Used before the first frame supplies a real star position.
INITIAL_STAR_POSITION = (10.0, 5.0, 10.0)

# --- Preview Rendering ---
CAMERA_DISTANCE = 4.0
PRIMARY_STAR_COLOR = (255, 248, 231)
PRIMARY_STAR_INTENSITY = 3.5
SECONDARY_STAR_COLOR = (255, 136, 68)
SECONDARY_STAR_INTENSITY = 1.0
AMBIENT_COLOR = (26, 16, 60)
AMBIENT_INTENSITY = 0.02
CLOUD_OPACITY = 0.9
CLOUD_TINT = (221, 238, 255)
SPACE_COLOR = (2, 2, 5)

# Background star field, rotated by the galactic parallax.
STAR_FIELD_COUNT = 10000
STAR_FIELD_SEED = 7
STAR_BRIGHTNESS_RANGE = (0.25, 1.0)

# Atmosphere halo: a back-facing shell 1.2x the planet radius, blended additively.
ATMOSPHERE_SCALE = 1.2
ATMOSPHERE_INNER_COLOR = (0.2, 0.1, 0.7)
ATMOSPHERE_RIM_COLOR = (0.4, 0.7, 1.0)
ATMOSPHERE_FRESNEL_BIAS = 0.75
ATMOSPHERE_FRESNEL_POWER = 3.5
ATMOSPHERE_INTENSITY = 3.5
