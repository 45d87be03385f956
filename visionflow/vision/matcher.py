"""
Sparse optical flow by brute-force patch matching.

For each feature, the patch around its old position in the previous frame
is compared, by sum of absolute differences (SAD), against every patch
centred in a square search window around the same position in the current
frame. The lowest SAD wins. Ties go to the first candidate in raster order
(dy outer, dx inner), which np.argmin over a C-ordered surface reproduces.
"""

import logging
from dataclasses import replace
from typing import Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from visionflow.core.base import Matcher
from visionflow.core.config import EngineConfig
from visionflow.core.types import FeaturePoint

logger = logging.getLogger(__name__)


class SADMatcher:
    """
    Default Matcher strategy.

    Attributes:
        patch_size: Side of the square comparison patch (odd)
        search_window: Side of the square search window (odd)
        max_sad: A match is accepted only if its SAD is strictly below this
    """

    def __init__(
        self,
        patch_size: int = 7,
        search_window: int = 15,
        max_sad: int = 5000,
    ):
        self.patch_size = patch_size
        self.search_window = search_window
        self.max_sad = max_sad

    @classmethod
    def from_config(cls, config: EngineConfig) -> "SADMatcher":
        return cls(
            patch_size=config.patch_size,
            search_window=config.search_window,
            max_sad=config.max_sad,
        )

    def sad_surface(
        self,
        feature: FeaturePoint,
        prev_gray: np.ndarray,
        curr_gray: np.ndarray,
    ) -> tuple[np.ndarray, int, int] | None:
        """
        SAD for every in-bounds candidate position.

        Candidates whose patch would leave the frame are excluded, which
        leaves a contiguous rectangle of positions.

        Returns:
            Tuple of (surface indexed [dy, dx], x of column 0, y of row 0),
            or None if no candidate fits in the frame
        """
        height, width = curr_gray.shape
        hp = self.patch_size // 2
        hs = self.search_window // 2
        x, y = feature.x, feature.y

        if not (hp <= x < width - hp and hp <= y < height - hp):
            return None

        x_lo, x_hi = max(x - hs, hp), min(x + hs, width - hp - 1)
        y_lo, y_hi = max(y - hs, hp), min(y + hs, height - hp - 1)
        if x_lo > x_hi or y_lo > y_hi:
            return None

        template = prev_gray[y - hp:y + hp + 1, x - hp:x + hp + 1].astype(np.int32)
        region = curr_gray[
            y_lo - hp:y_hi + hp + 1,
            x_lo - hp:x_hi + hp + 1,
        ].astype(np.int32)

        windows = sliding_window_view(region, (self.patch_size, self.patch_size))
        surface = np.abs(windows - template).sum(axis=(2, 3))
        return surface, x_lo, y_lo

    def match(
        self,
        feature: FeaturePoint,
        prev_gray: np.ndarray,
        curr_gray: np.ndarray,
    ) -> tuple[int, int] | None:
        """Return the best-matching position, or None if rejected."""
        found = self.sad_surface(feature, prev_gray, curr_gray)
        if found is None:
            return None

        surface, x0, y0 = found
        row, col = divmod(int(np.argmin(surface)), surface.shape[1])
        if surface[row, col] >= self.max_sad:
            return None
        return x0 + col, y0 + row


def track_features(
    features: Sequence[FeaturePoint],
    prev_gray: np.ndarray,
    curr_gray: np.ndarray,
    matcher: Matcher | None = None,
) -> tuple[list[FeaturePoint], int]:
    """
    Carry features from the previous frame into the current one.

    Matched features come back as updated copies with the new position,
    their displacement as velocity, and age incremented. Rejected features
    are dropped.

    Returns:
        Tuple of (tracked features in input order, number lost)
    """
    matcher = matcher or SADMatcher()
    tracked: list[FeaturePoint] = []
    lost = 0

    for f in features:
        position = matcher.match(f, prev_gray, curr_gray)
        if position is None:
            lost += 1
            continue
        nx, ny = position
        tracked.append(replace(
            f,
            x=nx,
            y=ny,
            vx=nx - f.x,
            vy=ny - f.y,
            age=f.age + 1,
        ))

    return tracked, lost
