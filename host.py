# host.py
"""
The environment an effect runs in.

A host owns the viewport, delivers resize and pointer events, stacks
drawing layers back-to-front and runs one-shot "next frame" callbacks.
The pygame window host lives in visualization.py; HeadlessHost renders
into an offscreen surface and is driven by hand.
"""
import logging
import pygame
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Tuple

# --- Data Contracts ---
#
# class Host(ABC):
#   - size -> Tuple[int, int]: current viewport dimensions.
#   - add_listener(kind: str, callback) / remove_listener(kind, callback):
#     - kind is one of EVENT_KINDS:
#       - "resize": callback(width, height)
#       - "pointer_move": callback(x, y)
#     - Raises ValueError for unknown kinds.
#   - request_frame(callback) / cancel_frame(callback):
#     - At most one pending callback; it runs once, on the next
#       run_pending_frame().
#   - attach_layer(surface, index=0) / replace_layer(old, new) /
#     detach_layer(surface):
#     - Layers are composited in list order, index 0 at the back.
#   - composite(target=None) -> pygame.Surface:
#     - Draws all layers, back to front, onto the target (or canvas).

EVENT_KINDS = ("resize", "pointer_move")


class Host(ABC):
    """
    Listener registry, frame scheduling and layer stack shared by all hosts.
    """
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.layers: List[pygame.Surface] = []
        self._listeners: Dict[str, List[Callable]] = {kind: [] for kind in EVENT_KINDS}
        self._frame_callback: Optional[Callable[[], None]] = None

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    # --- Events ---

    def add_listener(self, kind: str, callback: Callable) -> None:
        self._check_kind(kind)
        self._listeners[kind].append(callback)

    def remove_listener(self, kind: str, callback: Callable) -> None:
        self._check_kind(kind)
        if callback in self._listeners[kind]:
            self._listeners[kind].remove(callback)

    def listener_count(self, kind: str) -> int:
        self._check_kind(kind)
        return len(self._listeners[kind])

    def _check_kind(self, kind: str) -> None:
        if kind not in self._listeners:
            raise ValueError(f"Unknown host event '{kind}'. Expected one of {EVENT_KINDS}.")

    def dispatch(self, kind: str, *args) -> None:
        self._check_kind(kind)
        # Listeners may deregister themselves while handling the event.
        for callback in list(self._listeners[kind]):
            callback(*args)

    def _set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.dispatch("resize", width, height)

    # --- Frame scheduling ---

    def request_frame(self, callback: Callable[[], None]) -> None:
        self._frame_callback = callback

    def cancel_frame(self, callback: Callable[[], None]) -> None:
        if self._frame_callback == callback:
            self._frame_callback = None

    @property
    def frame_pending(self) -> bool:
        return self._frame_callback is not None

    def run_pending_frame(self) -> bool:
        """Runs the requested frame callback. Returns False if none was pending."""
        callback = self._frame_callback
        if callback is None:
            return False
        self._frame_callback = None
        callback()
        return True

    # --- Layers ---

    def attach_layer(self, surface: pygame.Surface, index: int = 0) -> None:
        self.layers.insert(index, surface)

    def replace_layer(self, old: pygame.Surface, new: pygame.Surface) -> None:
        try:
            self.layers[self.layers.index(old)] = new
        except ValueError:
            self.attach_layer(new)

    def detach_layer(self, surface: pygame.Surface) -> None:
        if surface in self.layers:
            self.layers.remove(surface)

    @abstractmethod
    def composite(self, target: Optional[pygame.Surface] = None) -> pygame.Surface:
        """Draws all layers, back to front, onto the target."""


class HeadlessHost(Host):
    """
    A host without a window, composing frames on an offscreen canvas.
    """
    def __init__(self, width: int, height: int, background_color=(0, 0, 0, 0)):
        super().__init__(width, height)
        self.background_color = background_color
        self.canvas = pygame.Surface((max(width, 1), max(height, 1)), pygame.SRCALPHA)
        logging.debug(f"HeadlessHost created ({width}x{height}).")

    def resize(self, width: int, height: int) -> None:
        """Simulates a window resize."""
        self.canvas = pygame.Surface((max(width, 1), max(height, 1)), pygame.SRCALPHA)
        self._set_size(width, height)

    def move_pointer(self, x: float, y: float) -> None:
        """Simulates the pointer moving over the viewport."""
        self.dispatch("pointer_move", x, y)

    def composite(self, target: Optional[pygame.Surface] = None) -> pygame.Surface:
        target = target if target is not None else self.canvas
        target.fill(self.background_color)
        for layer in self.layers:
            target.blit(layer, (0, 0))
        return target
