"""
Tracking module - Feature pipeline and blob trajectories.

This module provides:
- FeatureEngine: Grayscale, detection, SAD tracking and clustering per frame
- TrajectoryTracker: Stable ids for blobs across frames

Example:
    >>> from visionflow.tracking import FeatureEngine, TrajectoryTracker
    >>> engine = FeatureEngine()
    >>> tracker = TrajectoryTracker()
    >>> for timestamp, frame in frames:
    ...     result = engine.process(frame, sensitivity=30)
    ...     blobs = [b.to_point() for b in result.blobs]
    ...     trajectories = tracker.update(blobs, timestamp, params)
"""

from visionflow.tracking.engine import FeatureEngine, EngineState, process_frame
from visionflow.tracking.trajectory import (
    TrajectoryTracker,
    TrackerState,
    update_trajectories,
    PALETTE,
)

__all__ = [
    "FeatureEngine",
    "EngineState",
    "process_frame",
    "TrajectoryTracker",
    "TrackerState",
    "update_trajectories",
    "PALETTE",
]
