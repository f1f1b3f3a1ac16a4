# bake_planet.py

"""
================================================================================
OFFLINE PLANET BAKER SCRIPT
================================================================================
This script is a command-line tool for generating the planet's texture set
once and saving it to a directory of PNG images ("baking"), together with a
manifest and an optional lit preview frame. The viewer can then load the
package instead of regenerating the textures.

Usage:
    python bake_planet.py --config path/to/your/config.json --seed 42
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import time

from PIL import Image

from planet_generator import ConfigurationError, TextureSynthesizer
from planet_generator.runtime import Planet

CONFIG_SECTION = "planet_generation_parameters"
PREVIEW_FILENAME = "preview.png"


def load_config(config_path: str, logger: logging.Logger) -> dict:
    """Reads the generation parameters from a JSON configuration file."""
    logger.info(f"Loading configuration from: {config_path}")
    with open(config_path, 'r') as f:
        config = json.load(f)
    return config.get(CONFIG_SECTION, {})


def bake_planet(config: dict, logger: logging.Logger, output_dir: str = None,
                seed: float = None, preview_time: float = None, preview_resolution: int = 512) -> str:
    """
    Generates the texture set, saves it to `output_dir` (baked_planets/seed_<seed>
    by default) and optionally renders a preview at elapsed time `preview_time`.
    Returns the output directory.
    """
    start_time = time.perf_counter()

    synthesizer = TextureSynthesizer(config=config, logger=logger)
    seed = synthesizer.resolve_seed(seed)
    output_dir = output_dir or os.path.join("baked_planets", f"seed_{seed:g}")
    texture_set = synthesizer.generate(seed=seed)

    manifest_path = texture_set.save(output_dir)
    logger.info(f"Texture set and manifest saved to: {manifest_path}")

    if preview_time is not None:
        planet = Planet(texture_set, config=config, resolution=preview_resolution)
        orbital_state, illumination_state = planet.update(preview_time, planet.start())
        frame = planet.draw(orbital_state, illumination_state)
        preview_path = os.path.join(output_dir, PREVIEW_FILENAME)
        Image.fromarray(frame).save(preview_path, 'PNG')
        logger.info(f"Preview at t={preview_time} saved to: {preview_path}")

    end_time = time.perf_counter()
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    return output_dir


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Offline texture baker for the procedural planet.")
    parser.add_argument("--config", type=str, default=None,
                        help="Path to a JSON configuration file with a 'planet_generation_parameters' section.")
    parser.add_argument("--seed", type=float, default=None,
                        help="Seed for the noise. Overrides the configuration; random if omitted everywhere.")
    parser.add_argument("--output", type=str, default=None,
                        help="Output directory. Defaults to baked_planets/seed_<seed>.")
    parser.add_argument("--preview-time", type=float, default=None,
                        help="Also render a lit preview frame at this elapsed time.")
    parser.add_argument("--preview-resolution", type=int, default=512)
    args = parser.parse_args(argv)

    # 1. --- Setup Logging ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("Baker")

    # 2. --- Load Configuration ---
    config = {}
    if args.config:
        try:
            config = load_config(args.config, logger)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            logger.critical(f"Failed to load or parse config file: {e}")
            return 1

    # 3. --- Bake ---
    try:
        bake_planet(config, logger, output_dir=args.output, seed=args.seed,
                    preview_time=args.preview_time, preview_resolution=args.preview_resolution)
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        return 1
    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
