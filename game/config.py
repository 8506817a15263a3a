"""
Default configuration and YAML loading.
"""

import copy
from pathlib import Path
from typing import Optional, Union

import yaml


DEFAULT_CONFIG = {
    "game": {
        "grid_half_extent": 9,
        "start_position": [0, 0],
        "start_direction": [0, 0],
        "seed_length": 1,
        "tick_interval_ms": 250,
        "lerp_rate": 10.0,
        "segment_level": 0.0,
        "max_treats": 1,
        "event_capacity": 64,
        "seed": None,
    },
    "display": {
        "cell_size": 28,
        "fps": 60,
        "render_mode": "human",
    },
}


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def validate(config: dict) -> dict:
    """Checks shapes of the values the simulation relies on."""
    game = config["game"]
    for key in ("start_position", "start_direction"):
        if len(game[key]) != 2:
            raise ValueError(f"game.{key} must have 2 components, got {game[key]}")
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in game[key]):
            raise ValueError(f"game.{key} must be integer grid cells, got {game[key]}")
    dx, dy = game["start_direction"]
    if abs(dx) + abs(dy) > 1:
        raise ValueError(
            f"game.start_direction must be zero or a unit axis step, got {game['start_direction']}"
        )
    if game["seed_length"] < 1:
        raise ValueError("game.seed_length must be >= 1")
    if game["grid_half_extent"] < 0:
        raise ValueError("game.grid_half_extent must be >= 0")
    return config


def load_config(path: Optional[Union[str, Path]] = None, overrides: Optional[dict] = None) -> dict:
    """
    Builds a config dict.

    Args:
        path: YAML file merged over the defaults (None = defaults only)
        overrides: dict merged last (used by tests and the CLI)
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is not None:
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
        _merge(config, loaded)
    if overrides:
        _merge(config, overrides)
    return validate(config)
