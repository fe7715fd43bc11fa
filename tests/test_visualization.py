"""Renderer output on offscreen surfaces."""

from __future__ import annotations

import numpy as np
import pygame
import pytest

from conftest import make_settings
from particle import ParticleSystem
from visualization import Renderer


@pytest.fixture
def surface() -> pygame.Surface:
    return pygame.Surface((200, 200), pygame.SRCALPHA)


def test_clear_is_transparent_without_background(surface) -> None:
    surface.fill((255, 0, 0, 255))
    Renderer(make_settings()).clear(surface)

    assert surface.get_at((10, 10)).a == 0


def test_clear_uses_background_color(surface) -> None:
    Renderer(make_settings(background_color=[10, 20, 30])).clear(surface)

    assert tuple(surface.get_at((10, 10))) == (10, 20, 30, 255)


def test_draw_connections_strokes_close_pairs(surface) -> None:
    renderer = Renderer(make_settings(max_distance=150, line_opacity=2.0, line_color=[0, 255, 0]))
    positions = np.array([[10.0, 100.0], [60.0, 100.0], [190.0, 10.0]])

    drawn = renderer.draw_connections(surface, positions)

    assert drawn == 1
    pixel = surface.get_at((35, 100))
    assert pixel.g == 255
    assert pixel.a == 255
    # Nothing between the far particle and the others.
    assert surface.get_at((100, 55)).a == 0


def test_connection_alpha_tracks_distance() -> None:
    renderer = Renderer(make_settings(max_distance=100, line_opacity=1.0))
    near = pygame.Surface((200, 50), pygame.SRCALPHA)
    far = pygame.Surface((200, 50), pygame.SRCALPHA)

    renderer.draw_connections(near, np.array([[10.0, 20.0], [30.0, 20.0]]))
    renderer.draw_connections(far, np.array([[10.0, 20.0], [90.0, 20.0]]))

    assert near.get_at((20, 20)).a > far.get_at((20, 20)).a > 0


def test_draw_particles_draws_glow_and_core(surface) -> None:
    settings = make_settings(particle_count=1, node_colors=[[59, 130, 246]], glow_size=10)
    particles = ParticleSystem(settings, 200, 200)
    particles.positions[:] = [[100.0, 100.0]]
    particles.radii[:] = [2.0]
    renderer = Renderer(settings)

    renderer.draw_particles(surface, particles)

    assert tuple(surface.get_at((100, 100))) == (59, 130, 246, 255)
    halo = surface.get_at((110, 100))
    assert 0 < halo.a < 255
    assert surface.get_at((125, 100)).a == 0


def test_glow_sprites_are_cached() -> None:
    settings = make_settings(particle_count=5, node_colors=["white"])
    particles = ParticleSystem(settings, 100, 100)
    particles.radii[:] = 1.0
    renderer = Renderer(settings)
    target = pygame.Surface((100, 100), pygame.SRCALPHA)

    renderer.draw_particles(target, particles)
    renderer.draw_particles(target, particles)

    assert list(renderer._glow_cache) == [(0, 10)]


def test_glow_alpha_fades_to_edge() -> None:
    glow = Renderer._render_glow(pygame.Color(255, 255, 255), 20)

    alphas = [glow.get_at((20 + dx, 20)).a for dx in (0, 4, 10, 20)]

    assert alphas[0] == int(0.8 * 255)
    assert alphas[0] > alphas[1] > alphas[2] > alphas[3]
    assert alphas[3] == 0
