# viewer.py

"""
================================================================================
PLANET VIEWER
================================================================================
Opens a window that animates the planet: the binary suns circle it and the
night side lights up with lava, crystal plains and bioluminescent jungle.

Usage:
    python viewer.py                          # generate a new random planet
    python viewer.py --seed 42                # generate a reproducible planet
    python viewer.py --package baked_planets/seed_42

Controls:
- Pause / Resume: SPACE
- Quit: ESC or close window
================================================================================
"""
import sys
import logging
import argparse

import numpy as np
import pygame

from planet_generator.runtime import Planet

# --- Application Constants ---
SCREEN_SIZE = 640
PREVIEW_RESOLUTION = 320
CLOCK_TICK_RATE = 30


class ViewerApp:
    """The main application class for the planet viewer."""
    def __init__(self, planet: Planet):
        self.logger = logging.getLogger(__name__)
        self.planet = planet

        self.logger.info("Initializing Pygame...")
        pygame.init()
        self.screen = pygame.display.set_mode((SCREEN_SIZE, SCREEN_SIZE))
        pygame.display.set_caption("Planet Viewer")

        self.clock = pygame.time.Clock()
        self.is_running = True
        self.is_paused = False
        self.elapsed_time = 0.0

        # The illumination state is owned here and handed to the planet every frame.
        self.illumination_state = self.planet.start()

    def run(self):
        """The main application loop."""
        while self.is_running:
            real_delta_time = self.clock.tick(CLOCK_TICK_RATE) / 1000.0
            self.handle_events()
            if not self.is_paused:
                self.elapsed_time += real_delta_time
            self.draw()

        self.logger.info("Exiting viewer.")
        pygame.quit()

    def handle_events(self):
        """Processes user input and other events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.is_running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.is_running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE:
                self.is_paused = not self.is_paused

    def draw(self):
        """Renders the current frame and presents it."""
        orbital_state, self.illumination_state = self.planet.update(self.elapsed_time, self.illumination_state)
        frame = self.planet.draw(orbital_state, self.illumination_state)

        # pygame surfaces are indexed (x, y); the frame is (row, column).
        surface = pygame.surfarray.make_surface(np.transpose(frame, (1, 0, 2)))
        self.screen.blit(pygame.transform.smoothscale(surface, (SCREEN_SIZE, SCREEN_SIZE)), (0, 0))

        state = "paused" if self.is_paused else "running"
        pygame.display.set_caption(
            f"Planet Viewer | t={self.elapsed_time:.1f} ({state}) | FPS: {self.clock.get_fps():.0f}"
        )
        pygame.display.flip()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Animated viewer for the procedural planet.")
    parser.add_argument("--package", type=str, default=None, help="Directory written by bake_planet.py.")
    parser.add_argument("--seed", type=float, default=None, help="Seed used when generating a new planet.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    logger = logging.getLogger("Viewer")

    try:
        if args.package:
            planet = Planet.from_package(args.package, resolution=PREVIEW_RESOLUTION)
        else:
            planet = Planet.generate(seed=args.seed, logger=logger, resolution=PREVIEW_RESOLUTION)
    except FileNotFoundError as e:
        logger.critical(f"Could not load planet package: {e}")
        return 1

    ViewerApp(planet).run()
    return 0


if __name__ == '__main__':
    sys.exit(main())
