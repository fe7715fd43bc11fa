"""Shared fixtures: headless Pygame and small, seeded settings."""

from __future__ import annotations

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from host import HeadlessHost
from settings import NetworkSettings


def make_settings(**overrides) -> NetworkSettings:
    params = {"particle_count": 20, "seed": 1234}
    params.update(overrides)
    return NetworkSettings.from_config(params)


@pytest.fixture
def settings() -> NetworkSettings:
    return make_settings()


@pytest.fixture
def host() -> HeadlessHost:
    return HeadlessHost(400, 300)
