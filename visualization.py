# visualization.py
"""
Handles the drawing of the particle network using Pygame.

Renderer draws one frame of the network onto any surface. Visualizer is the
windowed host: it opens the Pygame display, turns Pygame events into host
events and drives the frame loop.
"""
import logging
import pygame
import numpy as np
from typing import Any, Dict, Optional, Tuple

from constants import (
    CONNECTION_LINE_WIDTH, DEFAULT_WINDOW_SIZE, FPS, FULLSCREEN, GLOW_ALPHA_STOPS,
    WINDOW_BACKGROUND_COLOR, WINDOW_CAPTION
)
from host import Host
from particle import ParticleSystem
from settings import NetworkSettings
from simulation import find_connections

# --- Data Contracts ---
#
# class Renderer:
#   - __init__(self, settings: NetworkSettings)
#   - clear(self, surface) -> None:
#     - Fills the surface with the background color, or fully transparent.
#   - draw_connections(self, surface, positions: np.ndarray) -> int:
#     - Outputs: number of lines drawn.
#     - Side Effects: Strokes one line per connected pair, alpha scaled by
#       the pair's opacity and clamped to fully opaque.
#   - draw_particles(self, surface, particles: ParticleSystem) -> None:
#     - Side Effects: Blits a cached radial glow, then an opaque core, per
#       particle.
#
# class Visualizer(Host):
#   - __init__(self, display_params: Optional[Dict[str, Any]] = None)
#     - Inputs: the "display" config section.
#       - "fullscreen": bool, "width"/"height": int, "fps": int,
#         "background_color": RGB list, "caption": str
#     - Side Effects: Initializes Pygame and opens the display. On failure
#       the error is logged and self.screen stays None.
#   - run(self, max_frames=None, log_throttle=100, on_throttle=None) -> int:
#     - Outputs: number of frames presented.


class Renderer:
    """
    Draws connections and glowing particles.
    """
    def __init__(self, settings: NetworkSettings):
        self.line_color = settings.line_color
        self.background_color = settings.background_color
        self.max_distance = settings.max_distance
        self.line_opacity = settings.line_opacity
        self.glow_size = settings.glow_size
        self.palette = [pygame.Color(*rgb) for rgb in settings.node_colors]

        # Glow sprites keyed by (palette index, pixel radius).
        self._glow_cache: Dict[Tuple[int, int], pygame.Surface] = {}
        self._line_layer: Optional[pygame.Surface] = None

    def clear(self, surface: pygame.Surface) -> None:
        if self.background_color is None:
            surface.fill((0, 0, 0, 0))
        else:
            surface.fill(self.background_color)

    def draw_connections(self, surface: pygame.Surface, positions: np.ndarray) -> int:
        """
        Draws a line between every pair of particles closer than max_distance.
        """
        pairs, opacities = find_connections(positions, self.max_distance, self.line_opacity)
        if len(pairs) == 0:
            return 0

        # pygame.draw writes alpha without blending, so lines go to their
        # own layer which is then blended onto the target in one blit.
        layer = self._get_line_layer(surface.get_size())
        layer.fill((0, 0, 0, 0))

        r, g, b = self.line_color
        alphas = (np.minimum(opacities, 1.0) * 255).astype(np.int32)
        for (i, j), alpha in zip(pairs, alphas):
            pygame.draw.line(
                layer,
                (r, g, b, int(alpha)),
                (positions[i, 0], positions[i, 1]),
                (positions[j, 0], positions[j, 1]),
                CONNECTION_LINE_WIDTH
            )

        surface.blit(layer, (0, 0))
        return len(pairs)

    def draw_particles(self, surface: pygame.Surface, particles: ParticleSystem) -> None:
        """
        Draws each particle as a soft glow with a solid core on top.
        """
        positions = particles.positions
        for i in range(particles.particle_count):
            x, y = positions[i]
            radius = particles.radii[i]
            color_index = int(particles.color_indices[i])

            glow_radius = int(round(radius * self.glow_size))
            if glow_radius > 0:
                glow = self._get_glow(color_index, glow_radius)
                surface.blit(glow, (int(round(x)) - glow_radius, int(round(y)) - glow_radius))

            pygame.draw.circle(
                surface,
                self.palette[color_index],
                (int(round(x)), int(round(y))),
                max(1, int(round(radius)))
            )

    def _get_line_layer(self, size: Tuple[int, int]) -> pygame.Surface:
        if self._line_layer is None or self._line_layer.get_size() != size:
            self._line_layer = pygame.Surface(size, pygame.SRCALPHA)
        return self._line_layer

    def _get_glow(self, color_index: int, glow_radius: int) -> pygame.Surface:
        key = (color_index, glow_radius)
        glow = self._glow_cache.get(key)
        if glow is None:
            glow = self._render_glow(self.palette[color_index], glow_radius)
            self._glow_cache[key] = glow
            logging.debug(
                f"Rendered glow sprite for color {color_index} at radius {glow_radius}px "
                f"({len(self._glow_cache)} cached)."
            )
        return glow

    @staticmethod
    def _render_glow(color: pygame.Color, glow_radius: int) -> pygame.Surface:
        """
        Pre-renders a radial gradient following GLOW_ALPHA_STOPS.
        """
        diameter = glow_radius * 2 + 1
        glow = pygame.Surface((diameter, diameter), pygame.SRCALPHA)
        glow.fill((color.r, color.g, color.b, 0))

        # Distance of each pixel centre from the sprite centre, in radii.
        offsets = np.arange(diameter) - glow_radius
        distance = np.hypot(offsets[:, np.newaxis], offsets[np.newaxis, :]) / glow_radius

        stop_offsets = [offset for offset, _ in GLOW_ALPHA_STOPS]
        stop_alphas = [alpha for _, alpha in GLOW_ALPHA_STOPS]
        alpha = np.interp(distance, stop_offsets, stop_alphas, right=0.0)

        pixels = pygame.surfarray.pixels_alpha(glow)
        pixels[:] = (alpha * 255).astype(np.uint8)
        # Release the surface lock held by the pixel view.
        del pixels
        return glow

    def clear_cache(self) -> None:
        self._glow_cache.clear()
        self._line_layer = None


class Visualizer(Host):
    """
    Windowed Pygame host for the network background.
    """
    def __init__(self, display_params: Optional[Dict[str, Any]] = None):
        params = display_params if display_params is not None else {}
        self.fps = params.get('fps', FPS)
        self.background_color = tuple(params.get('background_color') or WINDOW_BACKGROUND_COLOR)
        fullscreen = params.get('fullscreen', FULLSCREEN)

        pygame.init()
        self.screen: Optional[pygame.Surface] = None
        width, height = 0, 0
        try:
            if fullscreen:
                display_info = pygame.display.Info()
                width, height = display_info.current_w, display_info.current_h
                self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
            else:
                width = params.get('width', DEFAULT_WINDOW_SIZE[0])
                height = params.get('height', DEFAULT_WINDOW_SIZE[1])
                self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        except pygame.error as e:
            logging.error(f"Could not open the Pygame display: {e}")
            width, height = 0, 0

        super().__init__(width, height)

        if self.screen is not None:
            pygame.display.set_caption(params.get('caption', WINDOW_CAPTION))
            logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")
        self.clock = pygame.time.Clock()

    def handle_events(self) -> bool:
        """
        Translates pending Pygame events into host events.

        Returns:
            bool: False if the user asked to quit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False

            if event.type == pygame.VIDEORESIZE:
                if (event.w, event.h) != self.size:
                    self._set_size(event.w, event.h)

            if event.type == pygame.MOUSEMOTION:
                self.dispatch("pointer_move", event.pos[0], event.pos[1])
        return True

    def composite(self, target: Optional[pygame.Surface] = None) -> pygame.Surface:
        target = target if target is not None else self.screen
        target.fill(self.background_color)
        for layer in self.layers:
            target.blit(layer, (0, 0))
        return target

    def run(self, max_frames: Optional[int] = None, log_throttle: int = 100,
            on_throttle=None) -> int:
        """
        Runs the frame loop until quit, or until max_frames frames are shown.

        Args:
            max_frames (Optional[int]): Stop after this many frames.
            log_throttle (int): Log progress every this many frames.
            on_throttle (Callable[[int], None]): Extra hook run at each
                progress log, given the frame number.
        """
        if self.screen is None:
            logging.error("No display available. Nothing to run.")
            return 0

        frame = 0
        while max_frames is None or frame < max_frames:
            if not self.handle_events():
                break

            self.run_pending_frame()
            self.composite()
            pygame.display.flip()
            self.clock.tick(self.fps)
            frame += 1

            # Hot loops must throttle logs
            if log_throttle and frame % log_throttle == 0:
                logging.info(f"Frame {frame} ({self.clock.get_fps():.1f} FPS)")
                if on_throttle is not None:
                    on_throttle(frame)

        if max_frames is not None and frame >= max_frames:
            logging.info(f"Reached max_frames ({max_frames}). Stopping visualizer.")
        return frame

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
