"""
Grouping of co-moving features into blobs.

Grouping is single-seed and greedy: each unvisited moving feature seeds a
group and collects the unvisited features close to the seed in both
position and velocity. Membership is never chained through other members,
so a feature near a member but far from the seed is left for a later seed.
"""

import math
from typing import Sequence

from visionflow.core.config import EngineConfig
from visionflow.core.types import FeaturePoint, RawBlob


def moving_features(
    features: Sequence[FeaturePoint],
    motion_threshold: float = 0.2,
) -> list[FeaturePoint]:
    """Features whose L1 displacement exceeds motion_threshold."""
    return [f for f in features if f.speed > motion_threshold]


def bounding_blob(group: Sequence[FeaturePoint], padding: int = 10) -> RawBlob:
    """
    Padded bounding box of a group.

    area is measured on the unpadded extents.
    """
    min_x = min(f.x for f in group)
    max_x = max(f.x for f in group)
    min_y = min(f.y for f in group)
    max_y = max(f.y for f in group)
    return RawBlob(
        x=min_x - padding,
        y=min_y - padding,
        w=(max_x - min_x) + 2 * padding,
        h=(max_y - min_y) + 2 * padding,
        area=(max_x - min_x) * (max_y - min_y),
        point_count=len(group),
    )


class SeedClusterer:
    """Default Clusterer strategy."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def group(self, features: Sequence[FeaturePoint]) -> list[list[FeaturePoint]]:
        """Seed groups of moving features, including undersized ones."""
        cfg = self.config
        moving = moving_features(features, cfg.motion_threshold)
        visited: set[int] = set()
        groups = []

        for seed in moving:
            if seed.id in visited:
                continue
            visited.add(seed.id)
            group = [seed]

            for other in moving:
                if other.id in visited:
                    continue
                dist = math.hypot(seed.x - other.x, seed.y - other.y)
                v_dist = math.hypot(seed.vx - other.vx, seed.vy - other.vy)
                if dist < cfg.cluster_radius and v_dist < cfg.velocity_tolerance:
                    group.append(other)
                    visited.add(other.id)

            groups.append(group)

        return groups

    def cluster(self, features: Sequence[FeaturePoint]) -> list[RawBlob]:
        """Blobs for every group with at least min_cluster_size members."""
        return [
            bounding_blob(group, self.config.blob_padding)
            for group in self.group(features)
            if len(group) >= self.config.min_cluster_size
        ]
