"""Effect lifecycle and end-to-end frames on a headless host."""

from __future__ import annotations

import numpy as np
import pygame
import pytest

from conftest import make_settings
from host import HeadlessHost
from network import RUNNING, STOPPED, NetworkBackground


def test_constructed_effect_is_stopped_and_detached(host, settings) -> None:
    effect = NetworkBackground(host, settings)

    assert effect.state == STOPPED
    assert host.layers == []
    assert not host.frame_pending


def test_start_attaches_layer_listeners_and_requests_frame(host, settings) -> None:
    host.attach_layer(pygame.Surface((400, 300), pygame.SRCALPHA))
    effect = NetworkBackground(host, settings)

    assert effect.start()

    assert effect.state == RUNNING
    assert host.layers[0] is effect.surface
    assert effect.surface.get_size() == (400, 300)
    assert host.listener_count("resize") == 1
    assert host.listener_count("pointer_move") == 1
    assert host.frame_pending


def test_frames_reschedule_while_running(host, settings) -> None:
    effect = NetworkBackground(host, settings)
    effect.start()

    for _ in range(5):
        assert host.run_pending_frame()

    assert effect.frame_count == 5
    assert host.frame_pending


def test_stop_cancels_and_start_resumes(host, settings) -> None:
    effect = NetworkBackground(host, settings)
    effect.start()
    host.run_pending_frame()

    effect.stop()

    assert effect.state == STOPPED
    assert not host.run_pending_frame()
    assert effect.frame_count == 1

    effect.start()
    host.run_pending_frame()
    assert effect.frame_count == 2
    assert len(host.layers) == 1


def test_dispose_releases_host_resources(host, settings) -> None:
    effect = NetworkBackground(host, settings)
    effect.start()

    effect.dispose()
    effect.dispose()

    assert host.layers == []
    assert host.listener_count("resize") == 0
    assert host.listener_count("pointer_move") == 0
    assert not host.frame_pending
    assert effect.surface is None
    assert not effect.start()


def test_start_without_surface_does_not_raise(settings) -> None:
    host = HeadlessHost(0, 0)
    effect = NetworkBackground(host, settings)

    assert not effect.start()
    assert effect.state == STOPPED
    assert host.layers == []


def test_drawing_failure_stops_effect(host, settings, monkeypatch) -> None:
    effect = NetworkBackground(host, settings)
    effect.start()

    def broken(*args):
        raise pygame.error("surface lost")

    monkeypatch.setattr(effect.renderer, "draw_particles", broken)

    host.run_pending_frame()

    assert effect.state == STOPPED
    assert not host.frame_pending


@pytest.mark.parametrize("error", [OverflowError("cannot convert float infinity"), ValueError("bad")])
def test_any_frame_error_stops_effect_without_escaping(host, settings, monkeypatch, error) -> None:
    effect = NetworkBackground(host, settings)
    effect.start()

    def broken(*args):
        raise error

    monkeypatch.setattr(effect.renderer, "draw_connections", broken)

    assert host.run_pending_frame()

    assert effect.state == STOPPED
    assert not host.frame_pending


def test_pointer_events_set_mouse(host, settings) -> None:
    effect = NetworkBackground(host, settings)
    effect.start()

    host.move_pointer(12, 34)

    assert effect.simulation.mouse == (12.0, 34.0)


def test_three_particles_draw_exactly_one_connection(host) -> None:
    settings = make_settings(particle_count=3, max_distance=150, particle_speed=0.0)
    effect = NetworkBackground(host, settings)
    effect.start()
    effect.particles.positions[:] = [[0.0, 0.0], [50.0, 0.0], [1000.0, 1000.0]]

    lines = effect.tick()

    assert lines == 1
    # The line runs along the top edge between the first two particles.
    assert effect.surface.get_at((25, 0)).a == 255
    assert effect.surface.get_at((200, 200)).a == 0


def test_resize_updates_viewport_with_particles_outside(host) -> None:
    settings = make_settings(particle_count=10)
    effect = NetworkBackground(host, settings)
    effect.start()
    effect.particles.positions[:] = np.array([[390.0, 290.0]] * 10)

    host.resize(100, 80)
    effect.run_frames(3)
    host.run_pending_frame()

    assert (effect.simulation.width, effect.simulation.height) == (100, 80)
    assert effect.surface.get_size() == (100, 80)
    assert host.layers == [effect.surface]
    assert effect.state == RUNNING


def test_composited_frame_shows_particles(host) -> None:
    settings = make_settings(particle_count=1, particle_speed=0.0, node_colors=["red"])
    effect = NetworkBackground(host, settings)
    effect.start()
    effect.particles.positions[:] = [[200.0, 150.0]]

    host.run_pending_frame()
    frame = host.composite()

    assert tuple(frame.get_at((200, 150))) == (239, 68, 68, 255)


def test_run_frames_is_host_independent(settings) -> None:
    effect = NetworkBackground(HeadlessHost(300, 200), settings)

    assert effect.run_frames(4) == 4
    assert effect.frame_count == 4
    assert effect.surface is None


@pytest.mark.parametrize("count", [0, 1])
def test_tiny_particle_sets_draw_no_connections(host, count) -> None:
    effect = NetworkBackground(host, make_settings(particle_count=count))
    effect.start()

    assert effect.tick() == 0


def test_zero_size_resize_pauses_drawing_and_recovers(host, settings) -> None:
    effect = NetworkBackground(host, settings)
    effect.start()

    host.resize(0, 0)
    host.run_pending_frame()

    assert effect.state == RUNNING
    assert effect.surface is None
    assert host.layers == []
    assert host.frame_pending

    host.resize(400, 300)
    host.run_pending_frame()

    assert effect.state == RUNNING
    assert effect.surface.get_size() == (400, 300)
    assert host.layers == [effect.surface]
    assert host.frame_pending
    assert effect.frame_count == 2
