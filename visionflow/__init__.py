"""
VisionFlow - Sparse Feature and Blob Tracking
=============================================

A Python engine that detects corner-like features in video frames, tracks
them by SAD patch matching, groups co-moving features into blobs and keeps
stable ids for those blobs across frames.

Main modules:
- visionflow.vision: Grayscale, detection, matching and clustering
- visionflow.tracking: Per-frame engine and trajectory tracker
- visionflow.outputs: CSV output handlers
- visionflow.core: Data model, configuration and video input

Quick start:
    >>> from visionflow import FeatureEngine, TrajectoryTracker, TrackingParams
    >>> engine = FeatureEngine()
    >>> tracker = TrajectoryTracker()
    >>> result = engine.process(rgba_frame, sensitivity=30)
    >>> trajectories = tracker.update(
    ...     [b.to_point() for b in result.blobs], timestamp, TrackingParams()
    ... )
"""

__version__ = "0.1.0"

# Convenience imports
from visionflow.core.config import Config, EngineConfig, TrackerConfig, TrackingParams
from visionflow.core.errors import VisionFlowError, InvalidFrameSize, ConfigError
from visionflow.tracking import FeatureEngine, TrajectoryTracker

__all__ = [
    "__version__",
    "Config",
    "EngineConfig",
    "TrackerConfig",
    "TrackingParams",
    "VisionFlowError",
    "InvalidFrameSize",
    "ConfigError",
    "FeatureEngine",
    "TrajectoryTracker",
]
