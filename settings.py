# settings.py
"""
Immutable tunables of the network background.

The "network" section of config.json is parsed and validated once into a
NetworkSettings instance, which is then shared read-only by the particle
system, the simulation and the renderer for the lifetime of the effect.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import pygame

from constants import (
    COLOR_PRESETS, DEFAULT_NETWORK_SETTINGS, MAX_PARTICLE_COUNT, RESIZE_POLICIES
)

RGB = Tuple[int, int, int]

# --- Data Contracts ---
#
# parse_color(value: Any, field: str) -> Tuple[int, int, int]:
#   - Inputs:
#     - value: [r, g, b] list, {"r", "g", "b"} mapping, "#rrggbb" string
#       or a COLOR_PRESETS name.
#     - field: config key, used in error messages.
#   - Outputs: an RGB triple with every component in [0, 255].
#   - Side Effects: Logs critical and raises ValueError on bad input.
#
# class NetworkSettings (frozen):
#   - from_config(params: Dict[str, Any]) -> NetworkSettings
#     - Missing keys fall back to DEFAULT_NETWORK_SETTINGS.
#     - Invariants: node_colors is non-empty, particle_count >= 0,
#       particle_count <= MAX_PARTICLE_COUNT, max_distance >= 0, all other
#       tunables finite and >= 0,
#       resize_policy in RESIZE_POLICIES.


def _config_error(msg: str) -> ValueError:
    logging.critical(f"Configuration error: {msg}")
    return ValueError(msg)


def parse_color(value: Any, field: str) -> RGB:
    """Converts one config color entry into an RGB triple."""
    if isinstance(value, str):
        preset = COLOR_PRESETS.get(value.strip().lower())
        if preset is not None:
            return preset
        try:
            color = pygame.Color(value)
        except ValueError:
            raise _config_error(f"'{field}' has unknown color name {value!r}.")
        return (color.r, color.g, color.b)

    if isinstance(value, dict):
        try:
            components = (value['r'], value['g'], value['b'])
        except KeyError as e:
            raise _config_error(f"'{field}' color is missing component {e}.")
    elif isinstance(value, (list, tuple)) and len(value) in (3, 4):
        components = tuple(value[:3])
    else:
        raise _config_error(f"'{field}' must be an RGB triple, got {value!r}.")

    for component in components:
        if isinstance(component, bool) or not isinstance(component, (int, float)):
            raise _config_error(f"'{field}' has a non-numeric component {component!r}.")
        if not 0 <= component <= 255:
            raise _config_error(
                f"'{field}' component {component} is outside the range [0, 255]."
            )
    return tuple(int(c) for c in components)


def _non_negative(params: Dict[str, Any], key: str) -> float:
    value = params[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _config_error(f"'{key}' must be a number, got {value!r}.")
    if not math.isfinite(value):
        raise _config_error(f"'{key}' must be finite, got {value}.")
    if value < 0:
        raise _config_error(f"'{key}' must be >= 0, got {value}.")
    return float(value)


@dataclass(frozen=True)
class NetworkSettings:
    """
    Read-only configuration of one network background.
    """
    node_colors: Tuple[RGB, ...]
    line_color: RGB
    background_color: Optional[RGB] = None
    particle_count: int = 100
    max_distance: float = 150.0
    particle_speed: float = 0.8
    line_opacity: float = 2.0
    glow_size: float = 10.0
    mouse_repel_distance: float = 100.0
    resize_policy: str = "keep"
    seed: Optional[int] = None

    @classmethod
    def from_config(cls, params: Optional[Dict[str, Any]] = None) -> "NetworkSettings":
        """
        Builds validated settings from the "network" config section.

        Args:
            params (Dict[str, Any]): The section as loaded from JSON. Keys
                that are absent take their DEFAULT_NETWORK_SETTINGS value.

        Raises:
            ValueError: If any value breaks the settings invariants.
        """
        merged = dict(DEFAULT_NETWORK_SETTINGS)
        merged.update(params or {})

        unknown = set(merged) - set(DEFAULT_NETWORK_SETTINGS)
        if unknown:
            logging.warning(f"Ignoring unknown network settings: {sorted(unknown)}")

        line_color = parse_color(merged['line_color'], 'line_color')

        raw_nodes = merged['node_colors']
        if not isinstance(raw_nodes, (list, tuple)):
            raise _config_error(f"'node_colors' must be a list, got {raw_nodes!r}.")
        node_colors = tuple(
            parse_color(c, f"node_colors[{i}]") for i, c in enumerate(raw_nodes)
        )
        if not node_colors:
            logging.warning(
                "'node_colors' is empty. Falling back to the line color for all particles."
            )
            node_colors = (line_color,)

        background_color = None
        if merged['background_color'] is not None:
            background_color = parse_color(merged['background_color'], 'background_color')

        count = merged['particle_count']
        if isinstance(count, bool) or not isinstance(count, int):
            raise _config_error(f"'particle_count' must be an integer, got {count!r}.")
        if count < 0:
            raise _config_error(f"'particle_count' must be >= 0, got {count}.")
        if count > MAX_PARTICLE_COUNT:
            raise _config_error(
                f"'particle_count' must be <= {MAX_PARTICLE_COUNT}, got {count}."
            )

        policy = merged['resize_policy']
        if policy not in RESIZE_POLICIES:
            raise _config_error(
                f"'resize_policy' must be one of {RESIZE_POLICIES}, got {policy!r}."
            )

        seed = merged['seed']
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise _config_error(f"'seed' must be an integer or null, got {seed!r}.")

        settings = cls(
            node_colors=node_colors,
            line_color=line_color,
            background_color=background_color,
            particle_count=count,
            max_distance=_non_negative(merged, 'max_distance'),
            particle_speed=_non_negative(merged, 'particle_speed'),
            line_opacity=_non_negative(merged, 'line_opacity'),
            glow_size=_non_negative(merged, 'glow_size'),
            mouse_repel_distance=_non_negative(merged, 'mouse_repel_distance'),
            resize_policy=policy,
            seed=seed,
        )
        logging.debug(f"Network settings: {settings}")
        return settings
