"""
Strategy protocols for the VisionFlow pipeline.

The engine depends only on these interfaces, so a spatial-hash clusterer or
a pyramidal matcher can replace the defaults without changing what callers
observe.
"""

from typing import Protocol, Sequence, runtime_checkable

import numpy as np

from visionflow.core.types import FeaturePoint, RawBlob


@runtime_checkable
class Detector(Protocol):
    """Protocol for detectors that top up the active feature set."""

    def detect(
        self,
        gray: np.ndarray,
        threshold: float,
        features: Sequence[FeaturePoint],
        next_id: int,
    ) -> tuple[list[FeaturePoint], int]:
        """
        Find new features on a grayscale frame.

        Returns:
            Tuple of (newly created features, next unused feature id)
        """
        ...


@runtime_checkable
class Matcher(Protocol):
    """Protocol for frame-to-frame feature matchers."""

    def match(
        self,
        feature: FeaturePoint,
        prev_gray: np.ndarray,
        curr_gray: np.ndarray,
    ) -> tuple[int, int] | None:
        """Return the feature's new position, or None if the match is rejected."""
        ...


@runtime_checkable
class Clusterer(Protocol):
    """Protocol for grouping moving features into blobs."""

    def cluster(self, features: Sequence[FeaturePoint]) -> list[RawBlob]:
        """Group features into bounding regions."""
        ...
