# network.py
"""
The network background effect.

NetworkBackground ties the particle system, the simulation and the
renderer to a host. It is created stopped; the caller decides when to
start it, can stop and restart it, and disposes of it to release its
drawing layer and host listeners.
"""
import logging
import pygame

from host import Host
from particle import ParticleSystem
from settings import NetworkSettings
from simulation import Simulation
from visualization import Renderer

# --- Data Contracts ---
#
# class NetworkBackground:
#   - __init__(self, host: Host, settings: NetworkSettings)
#     - Side Effects: Seeds particles for the host's current size.
#       Nothing is attached to the host yet. State is STOPPED.
#
#   - start(self) -> bool:
#     - Outputs: True if the effect is running afterwards.
#     - Side Effects: On first start, attaches a drawing layer at the back
#       of the host and registers "resize" and "pointer_move" listeners.
#       Requests a frame. Never raises for a missing drawing surface.
#
#   - stop(self) -> None / dispose(self) -> None
#
#   - tick(self) -> int:
#     - Outputs: number of connection lines drawn.
#     - Side Effects: clear -> integrate -> connections -> particles.
#
#   - run_frames(self, count: int) -> int:
#     - Runs `count` ticks without the host's frame scheduling.

STOPPED = "stopped"
RUNNING = "running"


class NetworkBackground:
    """
    Animated particle network drawn behind everything else on a host.
    """
    def __init__(self, host: Host, settings: NetworkSettings):
        self.host = host
        self.settings = settings
        width, height = host.size

        self.particles = ParticleSystem(settings, width, height)
        self.simulation = Simulation(self.particles, settings, width, height)
        self.renderer = Renderer(settings)

        self.surface = None
        self.state = STOPPED
        self.frame_count = 0
        self._attached = False
        self._disposed = False

    @property
    def running(self) -> bool:
        return self.state == RUNNING

    def start(self) -> bool:
        if self._disposed:
            logging.warning("Cannot start a disposed network background.")
            return False
        if self.running:
            return True

        if not self._attached:
            self.surface = self._create_surface(*self.host.size)
            if self.surface is None:
                logging.warning("Network background has no drawing surface. Not starting.")
                return False
            self.host.attach_layer(self.surface, 0)
            self.host.add_listener("resize", self.resize)
            self.host.add_listener("pointer_move", self.on_pointer_move)
            self._attached = True

        self.state = RUNNING
        self.host.request_frame(self._on_frame)
        logging.info("Network background started.")
        return True

    def stop(self) -> None:
        if not self.running:
            return
        self.state = STOPPED
        self.host.cancel_frame(self._on_frame)
        logging.info(f"Network background stopped after {self.frame_count} frames.")

    def dispose(self) -> None:
        """Stops the effect and releases everything it holds on the host."""
        if self._disposed:
            return
        self.stop()
        if self._attached:
            self.host.remove_listener("resize", self.resize)
            self.host.remove_listener("pointer_move", self.on_pointer_move)
            self.host.detach_layer(self.surface)
            self._attached = False
        self.surface = None
        self.renderer.clear_cache()
        self._disposed = True
        logging.info("Network background disposed.")

    # --- Host events ---

    def resize(self, width: int, height: int) -> None:
        self.simulation.resize(width, height)
        if not self._attached:
            return
        surface = self._create_surface(width, height)
        if surface is None:
            # Keep running without drawing; the next usable size brings the
            # layer back.
            logging.warning(f"No drawing surface at {width}x{height}. Drawing is paused.")
            if self.surface is not None:
                self.host.detach_layer(self.surface)
            self.surface = None
            return
        if self.surface is None:
            self.host.attach_layer(surface, 0)
        else:
            self.host.replace_layer(self.surface, surface)
        self.surface = surface

    def on_pointer_move(self, x: float, y: float) -> None:
        self.simulation.set_mouse(x, y)

    # --- Frames ---

    def tick(self) -> int:
        """
        Renders one frame onto the drawing surface.
        """
        if self.surface is not None:
            self.renderer.clear(self.surface)
        self.simulation.step()
        lines = 0
        if self.surface is not None:
            lines = self.renderer.draw_connections(self.surface, self.particles.positions)
            self.renderer.draw_particles(self.surface, self.particles)
        self.frame_count += 1
        return lines

    def run_frames(self, count: int) -> int:
        for _ in range(count):
            self.tick()
        return count

    def _on_frame(self) -> None:
        if not self.running:
            return
        try:
            self.tick()
        except Exception:
            logging.exception("Drawing the network background failed. Stopping the effect.")
            self.stop()
            return
        self.host.request_frame(self._on_frame)

    @staticmethod
    def _create_surface(width: int, height: int):
        if width <= 0 or height <= 0:
            logging.error(f"Cannot create a {width}x{height} drawing surface.")
            return None
        try:
            return pygame.Surface((width, height), pygame.SRCALPHA)
        except pygame.error as e:
            logging.error(f"Could not create the drawing surface: {e}")
            return None
