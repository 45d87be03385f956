"""
Per-frame feature pipeline.

This module provides the FeatureEngine, which turns a stream of RGBA frames
into tracked features and moving blobs, replenishing features whenever too
few survive tracking.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from visionflow.core.base import Clusterer, Detector, Matcher
from visionflow.core.config import EngineConfig
from visionflow.core.types import EngineStats, FeaturePoint, FrameResult
from visionflow.vision.clusterer import SeedClusterer
from visionflow.vision.detector import GridCornerDetector
from visionflow.vision.grayscale import to_grayscale
from visionflow.vision.matcher import SADMatcher, track_features

logger = logging.getLogger(__name__)


@dataclass
class EngineState:
    """All mutable state of the feature pipeline."""
    prev_gray: np.ndarray | None = None
    features: list[FeaturePoint] = field(default_factory=list)
    next_feature_id: int = 0
    frame_count: int = 0

    def reset(self) -> None:
        self.prev_gray = None
        self.features = []
        self.next_feature_id = 0
        self.frame_count = 0


def process_frame(
    state: EngineState,
    frame,
    sensitivity: float,
    config: EngineConfig,
    detector: Detector,
    matcher: Matcher,
    clusterer: Clusterer,
) -> FrameResult:
    """
    Run one frame through the pipeline, updating state in place.

    On the first frame after a reset, features are only detected. On later
    frames existing features are tracked, the set is replenished if it
    fell below min_features, and moving features are clustered.

    Args:
        state: Pipeline state, owned by a single caller
        frame: RGBA buffer of exactly width * height * 4 bytes
        sensitivity: Detector threshold
        config: Engine configuration
        detector: Detector strategy
        matcher: Matcher strategy
        clusterer: Clusterer strategy

    Returns:
        FrameResult with blobs, the active features and counters

    Raises:
        InvalidFrameSize: If the buffer does not match the resolution;
            state is left untouched
    """
    gray = to_grayscale(frame, config.width, config.height)
    state.frame_count += 1
    stats = EngineStats(frame=state.frame_count)

    if state.prev_gray is None:
        new_features, state.next_feature_id = detector.detect(
            gray, sensitivity, state.features, state.next_feature_id
        )
        state.features = state.features + new_features
        state.prev_gray = gray
        stats.added = len(new_features)
        stats.total = len(state.features)
        return FrameResult(blobs=[], features=list(state.features), stats=stats)

    tracked, lost = track_features(state.features, state.prev_gray, gray, matcher)
    stats.tracked = len(tracked)
    stats.lost = lost
    state.features = tracked

    if len(state.features) < config.min_features:
        new_features, state.next_feature_id = detector.detect(
            gray, sensitivity, state.features, state.next_feature_id
        )
        state.features = state.features + new_features
        stats.added = len(new_features)

    blobs = clusterer.cluster(state.features)
    state.prev_gray = gray

    stats.total = len(state.features)
    stats.blobs = len(blobs)
    return FrameResult(blobs=blobs, features=list(state.features), stats=stats)


class FeatureEngine:
    """
    Sparse feature engine with automatic replenishment.

    Not safe for concurrent use: one engine serves one frame stream, and
    reset() must not overlap a process() call.

    Example:
        >>> engine = FeatureEngine()
        >>> for frame in frames:
        ...     result = engine.process(frame, sensitivity=30)
        ...     print(len(result.features), len(result.blobs))
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        detector: Detector | None = None,
        matcher: Matcher | None = None,
        clusterer: Clusterer | None = None,
    ):
        """
        Args:
            config: Engine configuration (defaults: 480x270 analysis)
            detector: Detector strategy (default: GridCornerDetector)
            matcher: Matcher strategy (default: SADMatcher)
            clusterer: Clusterer strategy (default: SeedClusterer)
        """
        self.config = (config or EngineConfig()).validate()
        self.detector = detector or GridCornerDetector(self.config)
        self.matcher = matcher or SADMatcher.from_config(self.config)
        self.clusterer = clusterer or SeedClusterer(self.config)
        self.state = EngineState()

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def features(self) -> list[FeaturePoint]:
        """Currently active features."""
        return list(self.state.features)

    @property
    def frame_count(self) -> int:
        return self.state.frame_count

    def process(self, frame, sensitivity: float) -> FrameResult:
        """
        Process one frame.

        Args:
            frame: RGBA buffer of exactly width * height * 4 bytes
            sensitivity: Detector threshold (acceptance score is twice this)

        Returns:
            FrameResult with blobs and active features

        Raises:
            InvalidFrameSize: If the buffer size does not match
        """
        result = process_frame(
            self.state,
            frame,
            sensitivity,
            self.config,
            self.detector,
            self.matcher,
            self.clusterer,
        )
        stats = result.stats
        logger.debug(
            "Frame %d: %d tracked, %d lost, %d added, %d total, %d blobs",
            stats.frame, stats.tracked, stats.lost, stats.added,
            stats.total, stats.blobs,
        )
        return result

    def reset(self) -> None:
        """Clear the previous frame, all features and the id counter."""
        self.state.reset()
