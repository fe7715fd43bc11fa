"""Windowed host on the SDL dummy video driver."""

from __future__ import annotations

import pygame
import pytest

from conftest import make_settings
from network import NetworkBackground
from visualization import Visualizer


@pytest.fixture
def visualizer():
    vis = Visualizer({"fullscreen": False, "width": 320, "height": 240, "fps": 0})
    yield vis
    vis.close()


def test_visualizer_opens_window_of_configured_size(visualizer) -> None:
    assert visualizer.screen is not None
    assert visualizer.size == (320, 240)


def test_run_drives_effect_frames(visualizer) -> None:
    effect = NetworkBackground(visualizer, make_settings())
    effect.start()

    frames = visualizer.run(max_frames=3, log_throttle=0)

    assert frames == 3
    assert effect.frame_count == 3


def test_mouse_motion_reaches_effect(visualizer) -> None:
    effect = NetworkBackground(visualizer, make_settings())
    effect.start()
    pygame.event.post(pygame.event.Event(pygame.MOUSEMOTION, pos=(10, 20), rel=(0, 0), buttons=(0, 0, 0)))

    visualizer.run(max_frames=1, log_throttle=0)

    assert effect.simulation.mouse == (10.0, 20.0)


def test_quit_event_ends_loop(visualizer) -> None:
    pygame.event.post(pygame.event.Event(pygame.QUIT))

    assert visualizer.run(max_frames=10, log_throttle=0) == 0


def test_resize_event_reaches_effect(visualizer) -> None:
    effect = NetworkBackground(visualizer, make_settings())
    effect.start()
    pygame.event.post(pygame.event.Event(pygame.VIDEORESIZE, w=200, h=100, size=(200, 100)))

    visualizer.run(max_frames=1, log_throttle=0)

    assert (effect.simulation.width, effect.simulation.height) == (200, 100)
    assert effect.surface.get_size() == (200, 100)
