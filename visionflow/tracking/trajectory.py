"""
Persistent identities for blobs.

Blobs are matched to trajectories greedily, in input order, by nearest last
point within a distance gate of persistence * gate_scale pixels. A
trajectory claimed by one blob is unavailable to later blobs in the same
frame. A trajectory that goes one update unmatched becomes inactive and
never matches again; persistence only sizes the gate.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Sequence

from visionflow.core.config import TrackerConfig, TrackingParams
from visionflow.core.types import Trajectory, TrajectoryPoint

logger = logging.getLogger(__name__)

PALETTE = (
    "#3b82f6", "#ef4444", "#10b981", "#f59e0b", "#8b5cf6",
    "#ec4899", "#06b6d4", "#f97316", "#a855f7", "#14b8a6",
)


@dataclass
class TrackerState:
    """Trajectory map in creation order, plus the id counter."""
    trajectories: dict[int, Trajectory] = field(default_factory=dict)
    next_id: int = 0

    def reset(self) -> None:
        self.trajectories.clear()
        self.next_id = 0


def _position(blob: Any) -> tuple[float, float]:
    if isinstance(blob, Mapping):
        return float(blob["x"]), float(blob["y"])
    return float(blob.x), float(blob.y)


def _persistence(params: Any) -> float:
    if isinstance(params, Mapping):
        return float(params["persistence"])
    return float(params.persistence)


def update_trajectories(
    state: TrackerState,
    blobs: Sequence[Any],
    timestamp: float,
    params: TrackingParams | Mapping,
    config: TrackerConfig,
) -> list[Trajectory]:
    """
    Assign this frame's blobs to trajectories, updating state in place.

    Args:
        state: Tracker state, owned by a single caller
        blobs: Objects with x/y attributes, or mappings with "x"/"y" keys
        timestamp: Frame time attached to each appended point
        params: Tracking parameters supplying persistence
        config: Tracker policy

    Returns:
        Every retained trajectory, active and inactive, in creation order
    """
    gate = _persistence(params) * config.gate_scale
    claimed: set[int] = set()

    for blob in blobs:
        bx, by = _position(blob)
        best: Trajectory | None = None
        best_dist = math.inf

        for traj in state.trajectories.values():
            if not traj.active or traj.id in claimed:
                continue
            last = traj.last_point
            dist = math.hypot(bx - last.x, by - last.y)
            if dist < gate and dist < best_dist:
                best_dist = dist
                best = traj

        point = TrajectoryPoint(x=bx, y=by, timestamp=timestamp)
        if best is not None:
            best.points.append(point)
            if len(best.points) > config.max_history:
                del best.points[:-config.max_history]
            claimed.add(best.id)
        else:
            traj_id = state.next_id
            state.next_id += 1
            state.trajectories[traj_id] = Trajectory(
                id=traj_id,
                points=[point],
                color=PALETTE[traj_id % len(PALETTE)],
            )
            claimed.add(traj_id)
            logger.debug("Started trajectory %d at (%.1f, %.1f)", traj_id, bx, by)

    evicted = []
    for traj in state.trajectories.values():
        if traj.id in claimed:
            continue
        traj.active = False
        traj.inactive_frames += 1
        if (
            config.max_inactive_frames is not None
            and traj.inactive_frames > config.max_inactive_frames
        ):
            evicted.append(traj.id)

    for traj_id in evicted:
        del state.trajectories[traj_id]
    if evicted:
        logger.debug("Evicted %d inactive trajectories", len(evicted))

    return list(state.trajectories.values())


class TrajectoryTracker:
    """
    Nearest-neighbour blob tracker with stable ids.

    Inactive trajectories are kept and returned on every update unless
    TrackerConfig.max_inactive_frames is set.

    Example:
        >>> tracker = TrajectoryTracker()
        >>> params = TrackingParams(persistence=10)
        >>> for timestamp, blobs in frames:
        ...     trajectories = tracker.update(blobs, timestamp, params)
    """

    def __init__(self, config: TrackerConfig | None = None):
        self.config = (config or TrackerConfig()).validate()
        self.state = TrackerState()

    def update(
        self,
        blobs: Sequence[Any],
        timestamp: float,
        params: TrackingParams | Mapping | None = None,
    ) -> list[Trajectory]:
        """
        Match blobs to trajectories.

        Args:
            blobs: Blob centres (x/y attributes or mapping keys)
            timestamp: Frame time in seconds
            params: Tracking parameters (defaults if None)

        Returns:
            Full trajectory set, active and inactive
        """
        return update_trajectories(
            self.state,
            blobs,
            timestamp,
            params if params is not None else TrackingParams(),
            self.config,
        )

    @property
    def trajectories(self) -> list[Trajectory]:
        return list(self.state.trajectories.values())

    def active_trajectories(self) -> list[Trajectory]:
        return [t for t in self.state.trajectories.values() if t.active]

    @property
    def active_count(self) -> int:
        return len(self.active_trajectories())

    def reset(self) -> None:
        """Drop every trajectory and restart ids at zero."""
        self.state.reset()
