"""
Core module - Data model, protocols, configuration and video input.
"""

from visionflow.core.base import Detector, Matcher, Clusterer
from visionflow.core.config import (
    Config,
    EngineConfig,
    TrackerConfig,
    TrackingParams,
    load_config,
    save_config,
)
from visionflow.core.errors import VisionFlowError, InvalidFrameSize, ConfigError
from visionflow.core.types import (
    FeaturePoint,
    RawBlob,
    BlobPoint,
    TrajectoryPoint,
    Trajectory,
    EngineStats,
    FrameResult,
)
from visionflow.core.video import VideoReader, VideoProperties

__all__ = [
    "Detector",
    "Matcher",
    "Clusterer",
    "Config",
    "EngineConfig",
    "TrackerConfig",
    "TrackingParams",
    "load_config",
    "save_config",
    "VisionFlowError",
    "InvalidFrameSize",
    "ConfigError",
    "FeaturePoint",
    "RawBlob",
    "BlobPoint",
    "TrajectoryPoint",
    "Trajectory",
    "EngineStats",
    "FrameResult",
    "VideoReader",
    "VideoProperties",
]
