# viewer.py

"""
================================================================================
TERRAIN MAP VIEWER
================================================================================
A small Pygame window for inspecting a generated terrain from above. It runs
the generator once, then shows the biome, height, river and material maps
with pan and zoom, and marks the spawn point the host would use.

Controls:
    WASD        pan
    Mouse wheel zoom
    TAB         cycle view mode
    ESC         quit

Usage:
    python viewer.py --config terrain_config.json
================================================================================
"""

import argparse
import json
import logging
import sys

import pygame

from terrain_generator.generator import TerrainGenerator
from bake_terrain import VIEW_MODES, preview_color_arrays

# --- Application Constants ---
SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720
PAN_SPEED_PIXELS = 15
ZOOM_SPEED = 0.1
MAX_ZOOM = 32.0
MIN_ZOOM = 0.1
BACKGROUND_COLOR = (10, 10, 20)
SPAWN_MARKER_COLOR = (255, 40, 40)


class Camera:
    """A simple camera for the viewer to handle pan and zoom."""
    def __init__(self, screen_width, screen_height, map_width, map_depth):
        self.screen_width = screen_width
        self.screen_height = screen_height

        zoom_x = self.screen_width / map_width
        zoom_y = self.screen_height / map_depth
        self.zoom = min(max(min(zoom_x, zoom_y), MIN_ZOOM), MAX_ZOOM)

        self.x = map_width / 2
        self.y = map_depth / 2

    def world_to_screen(self, map_x, map_y):
        screen_x = (map_x - self.x) * self.zoom + self.screen_width / 2
        screen_y = (map_y - self.y) * self.zoom + self.screen_height / 2
        return screen_x, screen_y

    def pan(self, dx, dy):
        # Panning speed should be independent of zoom level
        self.x += dx / self.zoom
        self.y += dy / self.zoom

    def zoom_in(self):
        self.zoom = min(MAX_ZOOM, self.zoom * (1 + ZOOM_SPEED))

    def zoom_out(self):
        self.zoom = max(MIN_ZOOM, self.zoom * (1 - ZOOM_SPEED))


class ViewerApp:
    """The main application class for the terrain viewer."""
    def __init__(self, terrain_params: dict, logger: logging.Logger):
        self.logger = logger

        generator = TerrainGenerator(config=terrain_params, logger=self.logger)
        self.terrain = generator.generate()
        self.spawn = generator.find_spawn_point()

        self.logger.info("Initializing Pygame...")
        pygame.init()
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        self.clock = pygame.time.Clock()
        self.is_running = True

        # Preview arrays are already (width, depth, 3), the layout surfarray expects.
        self.surfaces = {
            mode: pygame.surfarray.make_surface(colors)
            for mode, colors in preview_color_arrays(self.terrain).items()
        }
        self.view_index = 0
        self.camera = Camera(SCREEN_WIDTH, SCREEN_HEIGHT, self.terrain.params.width, self.terrain.params.depth)

    @property
    def view_mode(self) -> str:
        return VIEW_MODES[self.view_index]

    def run(self):
        """The main application loop."""
        while self.is_running:
            self.handle_events()
            self.update()
            self.draw()
            self.clock.tick(60)

        self.logger.info("Exiting viewer.")
        pygame.quit()

    def handle_events(self):
        """Processes user input and other events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.is_running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.is_running = False
                elif event.key == pygame.K_TAB:
                    self.view_index = (self.view_index + 1) % len(VIEW_MODES)
                    self.logger.info(f"View mode: {self.view_mode}")
            elif event.type == pygame.MOUSEWHEEL:
                if event.y > 0:
                    self.camera.zoom_in()
                elif event.y < 0:
                    self.camera.zoom_out()

    def update(self):
        """Handles continuous input like key presses for panning."""
        keys = pygame.key.get_pressed()
        if keys[pygame.K_w]:
            self.camera.pan(0, -PAN_SPEED_PIXELS)
        if keys[pygame.K_s]:
            self.camera.pan(0, PAN_SPEED_PIXELS)
        if keys[pygame.K_a]:
            self.camera.pan(-PAN_SPEED_PIXELS, 0)
        if keys[pygame.K_d]:
            self.camera.pan(PAN_SPEED_PIXELS, 0)

    def draw(self):
        """Handles all rendering for the application."""
        self.screen.fill(BACKGROUND_COLOR)

        map_surface = self.surfaces[self.view_mode]
        scaled_size = (
            max(1, round(map_surface.get_width() * self.camera.zoom)),
            max(1, round(map_surface.get_height() * self.camera.zoom)),
        )
        scaled_surface = pygame.transform.scale(map_surface, scaled_size)
        self.screen.blit(scaled_surface, self.camera.world_to_screen(0, 0))

        # Spawn marker at the centre of its cell.
        marker = self.camera.world_to_screen(self.spawn.grid_x + 0.5, self.spawn.grid_z + 0.5)
        radius = max(3, int(self.camera.zoom))
        pygame.draw.circle(self.screen, SPAWN_MARKER_COLOR, (int(marker[0]), int(marker[1])), radius, 2)

        pygame.display.set_caption(
            f"Terrain Viewer | {self.view_mode} | Seed: {self.terrain.params.seed} | Zoom: {self.camera.zoom:.2f}"
        )
        pygame.display.flip()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Interactive map viewer for generated terrain.")
    parser.add_argument("--config", type=str, default=None,
                        help="Path to a JSON configuration file. Defaults are used when omitted.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    logger = logging.getLogger("Viewer")

    terrain_params = {}
    if args.config:
        logger.info(f"Loading configuration from: {args.config}")
        try:
            with open(args.config, 'r') as f:
                terrain_params = json.load(f).get('terrain_generation_parameters', {})
        except (FileNotFoundError, json.JSONDecodeError) as e:
            logger.critical(f"Failed to load or parse config file: {e}")
            return 1

    ViewerApp(terrain_params, logger).run()
    return 0


if __name__ == '__main__':
    sys.exit(main())
