"""
Grid-sampled corner detection.

Candidates sit on a fixed grid. Each is scored by the sum of absolute
differences to its four axis neighbours, a cheap stand-in for a
Harris/Shi-Tomasi response.
"""

import logging
from typing import Sequence

import numpy as np

from visionflow.core.config import EngineConfig
from visionflow.core.types import FeaturePoint

logger = logging.getLogger(__name__)


def grid_positions(width: int, height: int, stride: int) -> tuple[np.ndarray, np.ndarray]:
    """Return the (ys, xs) grid coordinates, excluding a stride-wide border."""
    ys = np.arange(stride, height - stride, stride)
    xs = np.arange(stride, width - stride, stride)
    return ys, xs


def corner_scores(gray: np.ndarray, ys: np.ndarray, xs: np.ndarray) -> np.ndarray:
    """
    Corner response at every grid position.

    Returns:
        int array of shape (len(ys), len(xs))
    """
    g = gray.astype(np.int32)
    center = g[np.ix_(ys, xs)]
    return (
        np.abs(center - g[np.ix_(ys, xs - 1)])
        + np.abs(center - g[np.ix_(ys, xs + 1)])
        + np.abs(center - g[np.ix_(ys - 1, xs)])
        + np.abs(center - g[np.ix_(ys + 1, xs)])
    )


def detect_features(
    gray: np.ndarray,
    threshold: float,
    features: Sequence[FeaturePoint],
    next_id: int,
    config: EngineConfig | None = None,
) -> tuple[list[FeaturePoint], int]:
    """
    Scan the grid for new features.

    Grid positions closer than exclusion_radius (on both axes) to an active
    or newly accepted feature are skipped. A candidate is accepted when its
    score exceeds 2 * threshold. Scanning stops as soon as the active set
    reaches max_features.

    Args:
        gray: Grayscale frame (height, width)
        threshold: Sensitivity; the acceptance score is twice this value
        features: Currently active features
        next_id: First unused feature id
        config: Engine configuration (defaults if None)

    Returns:
        Tuple of (new features in scan order, next unused feature id)
    """
    config = config or EngineConfig()
    height, width = gray.shape
    ys, xs = grid_positions(width, height, config.grid_stride)
    if len(ys) == 0 or len(xs) == 0:
        return [], next_id

    scores = corner_scores(gray, ys, xs)
    radius = config.exclusion_radius
    occupied = [(f.x, f.y) for f in features]
    total = len(occupied)
    accepted: list[FeaturePoint] = []

    for i, y in enumerate(ys.tolist()):
        for j, x in enumerate(xs.tolist()):
            if total >= config.max_features:
                return accepted, next_id

            if any(abs(fx - x) < radius and abs(fy - y) < radius for fx, fy in occupied):
                continue

            score = int(scores[i, j])
            if score > threshold * 2:
                accepted.append(FeaturePoint(id=next_id, x=x, y=y, score=score))
                occupied.append((x, y))
                next_id += 1
                total += 1

    return accepted, next_id


class GridCornerDetector:
    """Default Detector strategy backed by detect_features()."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def detect(
        self,
        gray: np.ndarray,
        threshold: float,
        features: Sequence[FeaturePoint],
        next_id: int,
    ) -> tuple[list[FeaturePoint], int]:
        new_features, next_id = detect_features(
            gray, threshold, features, next_id, self.config
        )
        logger.debug(
            "Detected %d new features (%d active)",
            len(new_features), len(features) + len(new_features),
        )
        return new_features, next_id
