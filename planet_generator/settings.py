# planet_generator/settings.py

"""
================================================================================
CONFIGURATION CONSOLIDATION
================================================================================
Merges a user configuration dictionary over the defaults in `config.py` and
validates the result. Invalid configuration fails fast with a descriptive
ConfigurationError instead of producing a silently malformed planet.

Data Contract:
---------------
- Inputs:
    - config (dict | None): User overrides. Keys are the lower-case names
      listed in DEFAULT_SETTINGS.
- Outputs:
    - A new, fully populated settings dictionary.
- Side Effects: None.
- Invariants: Altitude thresholds are strictly increasing and inside (0, 1),
  with the mountain level above the lava altitude;
  polar bounds satisfy 0 <= north < south <= 1.
================================================================================
"""
import math

from . import config as DEFAULTS


class ConfigurationError(ValueError):
    """Raised when a planet configuration cannot produce a valid texture set."""


DEFAULT_SETTINGS = {
    'seed': None,
    'water_level': DEFAULTS.WATER_LEVEL,
    'octaves': DEFAULTS.NOISE_OCTAVES,
    'altitude_thresholds': DEFAULTS.ALTITUDE_THRESHOLDS,
    'polar_bounds': DEFAULTS.POLAR_BOUNDS,
    'clamp_height': DEFAULTS.CLAMP_HEIGHT,
    'primary_orbit_radius': DEFAULTS.PRIMARY_ORBIT_RADIUS,
    'primary_orbit_period': DEFAULTS.PRIMARY_ORBIT_PERIOD,
    'secondary_orbit_radius': DEFAULTS.SECONDARY_ORBIT_RADIUS,
    'secondary_orbit_period': DEFAULTS.SECONDARY_ORBIT_PERIOD,
    'emissive_day_floor': DEFAULTS.EMISSIVE_DAY_FLOOR,
    'emissive_night_boost': DEFAULTS.EMISSIVE_NIGHT_BOOST,
    'terminator_day_threshold': DEFAULTS.TERMINATOR_DAY_THRESHOLD,
    'terminator_night_threshold': DEFAULTS.TERMINATOR_NIGHT_THRESHOLD,
}

_ALTITUDE_KEYS = ("beach", "vegetation", "mountain")
_POLAR_KEYS = ("north", "south")


def _require_number(settings: dict, key: str, positive: bool = False) -> float:
    value = settings[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ConfigurationError(f"'{key}' must be a finite number, got {value!r}")
    if positive and value <= 0:
        raise ConfigurationError(f"'{key}' must be greater than zero, got {value!r}")
    return float(value)


def _merge_levels(user_levels, defaults: dict, keys: tuple, name: str) -> dict:
    """Fills a partial threshold dictionary from the defaults."""
    if user_levels is None:
        return dict(defaults)
    if not isinstance(user_levels, dict):
        raise ConfigurationError(f"'{name}' must be a mapping with keys {list(keys)}")
    unknown = set(user_levels) - set(keys)
    if unknown:
        raise ConfigurationError(f"Unknown keys in '{name}': {sorted(unknown)}")
    merged = dict(defaults)
    merged.update(user_levels)
    for key in keys:
        value = merged[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ConfigurationError(f"'{name}.{key}' must be a finite number, got {value!r}")
        merged[key] = float(value)
    return merged


def resolve_settings(config: dict = None) -> dict:
    """
    Returns the defaults overridden by `config`, raising ConfigurationError
    on unknown keys, out-of-range values or non-monotonic thresholds.
    """
    config = dict(config or {})
    unknown = set(config) - set(DEFAULT_SETTINGS)
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {sorted(unknown)}. "
            f"Recognized keys are: {sorted(DEFAULT_SETTINGS)}"
        )

    settings = {key: config.get(key, default) for key, default in DEFAULT_SETTINGS.items()}

    # --- 1. Seed ---
    if settings['seed'] is not None:
        settings['seed'] = _require_number(settings, 'seed')

    # --- 2. Terrain levels ---
    water_level = _require_number(settings, 'water_level')
    if not 0.0 < water_level < 1.0:
        raise ConfigurationError(f"'water_level' must lie strictly between 0 and 1, got {water_level}")
    settings['water_level'] = water_level

    octaves = settings['octaves']
    if isinstance(octaves, bool) or not isinstance(octaves, int) or octaves < 1:
        raise ConfigurationError(f"'octaves' must be a positive integer, got {octaves!r}")

    levels = _merge_levels(config.get('altitude_thresholds'), DEFAULTS.ALTITUDE_THRESHOLDS,
                           _ALTITUDE_KEYS, 'altitude_thresholds')
    ordered = [levels[key] for key in _ALTITUDE_KEYS]
    if not 0.0 < ordered[0] < ordered[1] < ordered[2] < 1.0:
        raise ConfigurationError(
            "'altitude_thresholds' must satisfy 0 < beach < vegetation < mountain < 1, "
            f"got beach={ordered[0]}, vegetation={ordered[1]}, mountain={ordered[2]}"
        )
    # Lava only forms on highlands above LAVA_MIN_ALTITUDE.
    if levels["mountain"] <= DEFAULTS.LAVA_MIN_ALTITUDE:
        raise ConfigurationError(
            f"'altitude_thresholds.mountain' must exceed {DEFAULTS.LAVA_MIN_ALTITUDE} "
            f"or volcanic rock can never form, got {levels['mountain']}"
        )
    settings['altitude_thresholds'] = levels

    bounds = _merge_levels(config.get('polar_bounds'), DEFAULTS.POLAR_BOUNDS,
                           _POLAR_KEYS, 'polar_bounds')
    if not 0.0 <= bounds['north'] < bounds['south'] <= 1.0:
        raise ConfigurationError(
            "'polar_bounds' must satisfy 0 <= north < south <= 1, "
            f"got north={bounds['north']}, south={bounds['south']}"
        )
    settings['polar_bounds'] = bounds

    if not isinstance(settings['clamp_height'], bool):
        raise ConfigurationError(f"'clamp_height' must be true or false, got {settings['clamp_height']!r}")

    # --- 3. Orbits ---
    for key in ('primary_orbit_radius', 'primary_orbit_period',
                'secondary_orbit_radius', 'secondary_orbit_period'):
        settings[key] = _require_number(settings, key, positive=True)

    # --- 4. Emissive boost and terminator ---
    settings['emissive_day_floor'] = _require_number(settings, 'emissive_day_floor')
    settings['emissive_night_boost'] = _require_number(settings, 'emissive_night_boost')
    if settings['emissive_day_floor'] < 0 or settings['emissive_night_boost'] < 0:
        raise ConfigurationError("Emissive day floor and night boost must not be negative")

    day = _require_number(settings, 'terminator_day_threshold')
    night = _require_number(settings, 'terminator_night_threshold')
    if not -1.0 <= night < day <= 1.0:
        raise ConfigurationError(
            "Terminator thresholds must satisfy -1 <= night < day <= 1, "
            f"got day={day}, night={night}"
        )
    settings['terminator_day_threshold'] = day
    settings['terminator_night_threshold'] = night

    return settings
