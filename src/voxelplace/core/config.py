"""
Configuration management for voxelplace.

This module handles loading and validation of YAML configuration files and
provides typed configuration objects for the world, the interaction layer,
procedural generation and the spawner.
"""

import os
import warnings
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml


DEFAULT_SIZE_WEIGHTS = [
    0,   # unused
    1,   # 1 cube
    1,   # 2 cubes
    1,   # 3 cubes
    2,   # 4 cubes
    7,   # 5 cubes
    9,   # 6 cubes
    10,  # 7 cubes
    12,  # 8 cubes
    12,  # 9 cubes
]


class SpawnMode(Enum):
    """Which shape source the spawner draws from."""
    PREDEFINED = "predefined"
    PROCEDURAL = "procedural"


@dataclass
class WorldConfig:
    """World extents and save-slot layout."""
    size: Tuple[int, int, int] = (32, 16, 32)
    save_dir: str = "saves"
    save_prefix: str = "save_slot_"
    save_extension: str = ".json"

    def __post_init__(self):
        if not isinstance(self.size, (tuple, list)) or len(self.size) != 3:
            raise ValueError("size must be a tuple of 3 integers")
        if not all(isinstance(v, int) and v > 0 for v in self.size):
            raise ValueError("size must contain positive integers")
        self.size = tuple(self.size)
        if not self.save_prefix:
            raise ValueError("save_prefix must be a non-empty string")
        if not self.save_extension.startswith("."):
            raise ValueError("save_extension must start with '.'")

        volume = self.size[0] * self.size[1] * self.size[2]
        if volume > 1_000_000:
            warnings.warn(
                f"World volume {volume} is very large. "
                f"Occupancy stays sparse but spawning may need many attempts."
            )


@dataclass
class InteractionConfig:
    """Ray, follow-motion and rotation tuning for held shapes."""
    ray_distance: float = 200.0
    fallback_depth: float = 7.0
    base_follow_speed: float = 20.0
    catch_up_multiplier: float = 12.0
    snap_epsilon: float = 0.02
    rotate_duration: float = 0.12

    def __post_init__(self):
        if not isinstance(self.ray_distance, (float, int)) or self.ray_distance <= 0:
            raise ValueError("ray_distance must be a positive number")
        if not isinstance(self.fallback_depth, (float, int)) or self.fallback_depth < 0:
            raise ValueError("fallback_depth must be a non-negative number")
        if not isinstance(self.base_follow_speed, (float, int)) or self.base_follow_speed <= 0:
            raise ValueError("base_follow_speed must be a positive number")
        if not isinstance(self.catch_up_multiplier, (float, int)) or self.catch_up_multiplier < 0:
            raise ValueError("catch_up_multiplier must be a non-negative number")
        if not isinstance(self.snap_epsilon, (float, int)) or self.snap_epsilon < 0:
            raise ValueError("snap_epsilon must be a non-negative number")
        if not isinstance(self.rotate_duration, (float, int)) or self.rotate_duration < 0:
            raise ValueError("rotate_duration must be a non-negative number")

        if self.rotate_duration > 2.0:
            warnings.warn(
                f"rotate_duration={self.rotate_duration}s is long. "
                f"Place and cancel are blocked while a turn is in progress."
            )


@dataclass
class GeneratorConfig:
    """Procedural shape generation."""
    min_cubes: int = 1
    max_cubes: int = 9
    max_build_attempts: int = 200
    candidates_per_shape: int = 20
    verticality_weight: float = 4.0
    size_weights: Optional[List[int]] = field(default_factory=lambda: list(DEFAULT_SIZE_WEIGHTS))

    def __post_init__(self):
        if not isinstance(self.min_cubes, int) or self.min_cubes < 1:
            raise ValueError("min_cubes must be a positive integer")
        if not isinstance(self.max_cubes, int) or self.max_cubes < 1:
            raise ValueError("max_cubes must be a positive integer")
        if not isinstance(self.max_build_attempts, int) or self.max_build_attempts < 1:
            raise ValueError("max_build_attempts must be a positive integer")
        if not isinstance(self.candidates_per_shape, int) or self.candidates_per_shape < 1:
            raise ValueError("candidates_per_shape must be a positive integer")
        if not isinstance(self.verticality_weight, (float, int)) or self.verticality_weight < 0:
            raise ValueError("verticality_weight must be a non-negative number")

        if self.max_cubes < self.min_cubes:
            warnings.warn(
                f"max_cubes ({self.max_cubes}) is below min_cubes ({self.min_cubes}); "
                f"using min_cubes for both."
            )
            self.max_cubes = self.min_cubes

        if self.candidates_per_shape > 200:
            warnings.warn(
                f"candidates_per_shape={self.candidates_per_shape} is very large. "
                f"Each spawned shape grows this many clusters."
            )


@dataclass
class SpawnerConfig:
    """Initial world population."""
    mode: SpawnMode = SpawnMode.PREDEFINED
    min_spawn_count: int = 5
    max_spawn_count: int = 10
    spawn_on_ground_only: bool = True
    max_attempts_per_shape: int = 500
    weight_by_size: bool = True
    weight_exponent: float = 2.0
    library_path: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.mode, str):
            self.mode = SpawnMode(self.mode)
        if not isinstance(self.min_spawn_count, int) or self.min_spawn_count < 0:
            raise ValueError("min_spawn_count must be a non-negative integer")
        if not isinstance(self.max_spawn_count, int) or self.max_spawn_count < self.min_spawn_count:
            raise ValueError("max_spawn_count must be an integer >= min_spawn_count")
        if not isinstance(self.max_attempts_per_shape, int) or self.max_attempts_per_shape < 1:
            raise ValueError("max_attempts_per_shape must be a positive integer")
        if not isinstance(self.weight_exponent, (float, int)) or self.weight_exponent <= 0:
            raise ValueError("weight_exponent must be a positive number")
        if self.library_path is not None and not os.path.isabs(self.library_path):
            self.library_path = os.path.abspath(self.library_path)


@dataclass
class Config:
    """Main configuration object."""
    world: WorldConfig = field(default_factory=WorldConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    spawner: SpawnerConfig = field(default_factory=SpawnerConfig)
    seed: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        world_data = dict(data.get("world", {}) or {})
        if "size" in world_data:
            world_data["size"] = tuple(world_data["size"])

        return cls(
            world=WorldConfig(**world_data),
            interaction=InteractionConfig(**(data.get("interaction", {}) or {})),
            generator=GeneratorConfig(**(data.get("generator", {}) or {})),
            spawner=SpawnerConfig(**(data.get("spawner", {}) or {})),
            seed=data.get("seed"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Config to a plain dictionary (YAML friendly)."""
        spawner = {k: v for k, v in self.spawner.__dict__.items()}
        spawner["mode"] = self.spawner.mode.value
        return {
            "world": {
                **{k: v for k, v in self.world.__dict__.items()},
                "size": list(self.world.size),
            },
            "interaction": {
                **{k: v for k, v in self.interaction.__dict__.items()}
            },
            "generator": {
                **{k: v for k, v in self.generator.__dict__.items()}
            },
            "spawner": spawner,
            "seed": self.seed,
        }


def load_config(config_path: str) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is empty, malformed or has invalid values
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML config: {e}")

    if not data:
        raise ValueError("Configuration file is empty")
    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping at the top level")

    try:
        return Config.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Error creating config from data: {e}")


def create_default_config(output_path: str = "voxelplace.yaml") -> Config:
    """
    Create a default configuration file.

    Args:
        output_path: Path where to save the default config

    Returns:
        Default Config object
    """
    config = Config()

    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, indent=2, sort_keys=False)

    return config


def validate_config(config: Config) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration to validate

    Returns:
        List of validation messages
    """
    issues = []

    sx, sy, sz = config.world.size
    if config.spawner.spawn_on_ground_only and sx * sz < config.spawner.max_spawn_count:
        issues.append("WARNING: Ground area is smaller than max_spawn_count; spawning will fall short")

    if config.generator.max_cubes > sx * sy * sz:
        issues.append("ERROR: max_cubes cannot fit inside the world")

    weights = config.generator.size_weights
    if weights is not None:
        if len(weights) <= config.generator.max_cubes:
            issues.append("WARNING: size_weights does not cover max_cubes; sizes will be drawn uniformly")
        elif sum(max(0, w) for w in weights[config.generator.min_cubes:config.generator.max_cubes + 1]) <= 0:
            issues.append("WARNING: size_weights are all zero in range; sizes will be drawn uniformly")

    if config.spawner.mode is SpawnMode.PREDEFINED and config.spawner.library_path:
        if not os.path.exists(config.spawner.library_path):
            issues.append(f"ERROR: Shape library not found: {config.spawner.library_path}")

    if config.interaction.fallback_depth > config.interaction.ray_distance:
        issues.append("WARNING: fallback_depth exceeds ray_distance")

    return issues
