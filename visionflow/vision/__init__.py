"""
Vision module - Per-pixel stages of the feature pipeline.

This module provides:
- to_grayscale: RGBA to luma conversion
- GridCornerDetector: Grid-sampled corner detection
- SADMatcher: Patch-based sparse optical flow
- SeedClusterer: Grouping of co-moving features into blobs
"""

from visionflow.vision.grayscale import to_grayscale, as_rgba
from visionflow.vision.detector import GridCornerDetector, detect_features
from visionflow.vision.matcher import SADMatcher, track_features
from visionflow.vision.clusterer import SeedClusterer, moving_features, bounding_blob

__all__ = [
    "to_grayscale",
    "as_rgba",
    "GridCornerDetector",
    "detect_features",
    "SADMatcher",
    "track_features",
    "SeedClusterer",
    "moving_features",
    "bounding_blob",
]
