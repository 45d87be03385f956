"""
Configuration management for VisionFlow.

Engine constants, tracker policy and the user-facing tracking parameters
are plain dataclasses that load from and save to JSON, with environment
variable overrides for the tracking parameters.
"""

import json
import os
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any

from visionflow.core.errors import ConfigError


@dataclass
class EngineConfig:
    """Analysis resolution and fixed thresholds for the feature engine."""
    width: int = 480
    height: int = 270
    max_features: int = 200
    min_features: int = 50
    grid_stride: int = 15
    exclusion_radius: int = 10
    patch_size: int = 7
    search_window: int = 15
    max_sad: int = 5000
    motion_threshold: float = 0.2
    cluster_radius: float = 60.0
    velocity_tolerance: float = 2.0
    min_cluster_size: int = 3
    blob_padding: int = 10

    @property
    def frame_bytes(self) -> int:
        """Size of an RGBA frame buffer at the analysis resolution."""
        return self.width * self.height * 4

    def validate(self) -> "EngineConfig":
        """
        Check value ranges.

        Raises:
            ConfigError: If any value is out of range
        """
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(
                f"Analysis resolution must be positive, got {self.width}x{self.height}"
            )
        for name in ("patch_size", "search_window"):
            value = getattr(self, name)
            if value <= 0 or value % 2 == 0:
                raise ConfigError(f"{name} must be a positive odd number, got {value}")
        if self.grid_stride <= 0:
            raise ConfigError(f"grid_stride must be positive, got {self.grid_stride}")
        if self.max_features < 0 or self.min_features < 0:
            raise ConfigError("Feature limits must not be negative")
        if self.min_cluster_size < 1:
            raise ConfigError(
                f"min_cluster_size must be at least 1, got {self.min_cluster_size}"
            )
        return self


@dataclass
class TrackerConfig:
    """
    Trajectory policy.

    max_inactive_frames is None by default: inactive trajectories are kept
    for the life of the tracker. Set it to purge a trajectory once it has
    been inactive for more than that many updates.
    """
    gate_scale: float = 50.0
    max_history: int = 50
    max_inactive_frames: int | None = None

    def validate(self) -> "TrackerConfig":
        if self.max_history < 1:
            raise ConfigError(f"max_history must be at least 1, got {self.max_history}")
        if self.max_inactive_frames is not None and self.max_inactive_frames < 0:
            raise ConfigError(
                f"max_inactive_frames must not be negative, got {self.max_inactive_frames}"
            )
        return self


@dataclass
class TrackingParams:
    """
    User-facing tracking parameters.

    persistence is a distance-gate multiplier (gate = persistence *
    gate_scale pixels). Despite the name it does not delay deactivation.
    min_area, max_area and blur are carried for callers and are not applied
    by the engine. The show_* flags are read by renderers only.
    """
    threshold: float = 40.0
    min_area: float = 50.0
    max_area: float = 20000.0
    persistence: float = 10.0
    blur: float = 3.0
    show_boxes: bool = True
    show_centroids: bool = True
    show_trajectories: bool = True
    sensitivity: float = 30.0


@dataclass
class Config:
    """
    Main configuration container.

    Example:
        config = Config.load("visionflow.json")
        engine = FeatureEngine(config.engine)
        tracker = TrajectoryTracker(config.tracker)
    """
    engine: EngineConfig = field(default_factory=EngineConfig)
    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    params: TrackingParams = field(default_factory=TrackingParams)

    @classmethod
    def load(cls, path: str | Path) -> "Config":
        """Load configuration from a JSON file."""
        return load_config(path)

    def save(self, path: str | Path) -> None:
        """Save configuration to a JSON file."""
        save_config(self, path)

    def to_dict(self) -> dict:
        return {
            "engine": asdict(self.engine),
            "tracker": asdict(self.tracker),
            "params": asdict(self.params),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """
        Build a Config from a dictionary, ignoring unknown keys.

        Raises:
            ConfigError: If a section holds out-of-range values
        """
        return cls(
            engine=_build(EngineConfig, data.get("engine", {})).validate(),
            tracker=_build(TrackerConfig, data.get("tracker", {})).validate(),
            params=_build(TrackingParams, data.get("params", {})),
        )


def _build(cls, data: dict):
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


def load_config(path: str | Path) -> Config:
    """
    Load configuration from a JSON file.

    Args:
        path: Path to the JSON configuration file

    Returns:
        Parsed Config object

    Raises:
        FileNotFoundError: If the config file doesn't exist
        json.JSONDecodeError: If the JSON is invalid
        ConfigError: If a value is out of range
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    return Config.from_dict(data)


def save_config(config: Config, path: str | Path) -> None:
    """Save configuration to a JSON file."""
    path = Path(path)
    with open(path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)


def create_example_config(path: str | Path = "visionflow.json") -> Config:
    """Write a configuration file holding the defaults and return it."""
    config = Config()
    config.save(path)
    return config


def get_env_config(prefix: str = "VISIONFLOW_") -> dict[str, Any]:
    """
    Get configuration from environment variables.

    Variable names are lowercased with the prefix removed.

    Example:
        VISIONFLOW_PERSISTENCE=4 -> {"persistence": "4"}
    """
    config = {}
    for key, value in os.environ.items():
        if key.startswith(prefix):
            config[key[len(prefix):].lower()] = value
    return config


def apply_env_overrides(config: Config, prefix: str = "VISIONFLOW_") -> Config:
    """
    Apply environment overrides to the tracking parameters in place.

    Raises:
        ConfigError: If a value cannot be converted to the field's type
    """
    env = get_env_config(prefix)
    for f in fields(TrackingParams):
        if f.name not in env:
            continue
        raw = env[f.name]
        current = getattr(config.params, f.name)
        if isinstance(current, bool):
            value = raw.lower() in ("true", "yes", "1", "on")
        else:
            try:
                value = type(current)(raw)
            except ValueError:
                raise ConfigError(f"Invalid value for {prefix}{f.name.upper()}: {raw!r}")
        setattr(config.params, f.name, value)
    return config
