"""
Data output handlers.

Provides output handlers that produce CSV files:
- FeatureCSVOutput: Every active feature, every frame
- TrajectoryCSVOutput: Trajectory histories, optionally smoothed
- ActivityCSVOutput: Sampled count of active trajectories over time
"""

import csv
from pathlib import Path

import numpy as np
from scipy.ndimage import gaussian_filter1d

from visionflow.core.types import FrameResult, Trajectory
from visionflow.outputs.base import BaseOutput


class FeatureCSVOutput(BaseOutput):
    """
    Outputs per-frame feature state.

    Columns: frame, timestamp, feature_id, x, y, vx, vy, score, age
    """

    HEADER = ['frame', 'timestamp', 'feature_id', 'x', 'y', 'vx', 'vy', 'score', 'age']

    def __init__(self, path: str | Path, **options):
        super().__init__(path, **options)
        self.file = None
        self.writer = None

    def initialize(self, video_props: dict) -> None:
        self.file = open(self.output_path, 'w', newline='')
        self.writer = csv.writer(self.file)
        self.writer.writerow(self.HEADER)

    def process_frame(
        self,
        frame_num: int,
        timestamp: float,
        result: FrameResult,
        trajectories: list[Trajectory],
    ) -> None:
        if self.writer is None:
            return
        for f in result.features:
            self.writer.writerow([
                frame_num, timestamp, f.id, f.x, f.y, f.vx, f.vy, f.score, f.age
            ])

    def finalize(self) -> None:
        if self.file:
            self.file.close()
            self.file = None
            self.writer = None


class TrajectoryCSVOutput(BaseOutput):
    """
    Outputs trajectory histories.

    Columns: trajectory_id, color, point_index, timestamp, x, y, active

    A trajectory is written as soon as it no longer appears in the tracker's
    list (evicted), so memory stays bounded by the tracker's eviction
    policy. Trajectories still held at the end are written by finalize in
    id order. No file is created if no trajectory was ever seen.

    Options:
        smooth: Gaussian sigma applied to x and y per trajectory (default: 0)
    """

    HEADER = ['trajectory_id', 'color', 'point_index', 'timestamp', 'x', 'y', 'active']

    def __init__(self, path: str | Path, smooth: float = 0.0, **options):
        super().__init__(path, **options)
        self.smooth = float(smooth)
        self.trajectories: dict[int, Trajectory] = {}
        self.file = None
        self.writer = None

    def initialize(self, video_props: dict) -> None:
        self.trajectories = {}

    def process_frame(
        self,
        frame_num: int,
        timestamp: float,
        result: FrameResult,
        trajectories: list[Trajectory],
    ) -> None:
        current = {traj.id: traj for traj in trajectories}
        for traj_id in sorted(self.trajectories.keys() - current.keys()):
            self._write(self.trajectories.pop(traj_id))
        self.trajectories.update(current)

    def _smoothed(self, traj: Trajectory) -> tuple[np.ndarray, np.ndarray]:
        xs = np.array([p.x for p in traj.points], dtype=float)
        ys = np.array([p.y for p in traj.points], dtype=float)
        if self.smooth > 0 and len(xs) > 1:
            xs = gaussian_filter1d(xs, sigma=self.smooth, mode='nearest')
            ys = gaussian_filter1d(ys, sigma=self.smooth, mode='nearest')
        return xs, ys

    def _write(self, traj: Trajectory) -> None:
        if self.writer is None:
            self.file = open(self.output_path, 'w', newline='')
            self.writer = csv.writer(self.file)
            self.writer.writerow(self.HEADER)
        xs, ys = self._smoothed(traj)
        for i, point in enumerate(traj.points):
            self.writer.writerow([
                traj.id, traj.color, i, point.timestamp,
                float(xs[i]), float(ys[i]), int(traj.active),
            ])

    def finalize(self) -> None:
        for traj_id in sorted(self.trajectories):
            self._write(self.trajectories[traj_id])
        self.trajectories = {}
        if self.file:
            self.file.close()
            self.file = None
            self.writer = None


class ActivityCSVOutput(BaseOutput):
    """
    Outputs a sampled series of active trajectory counts.

    Columns: timestamp, active_count

    Options:
        interval: Seconds between samples (default: 0.5)
        max_samples: Only the most recent samples are kept (default: 101)
    """

    HEADER = ['timestamp', 'active_count']

    def __init__(
        self,
        path: str | Path,
        interval: float = 0.5,
        max_samples: int = 101,
        **options,
    ):
        super().__init__(path, **options)
        self.interval = float(interval)
        self.max_samples = int(max_samples)
        self.samples: list[tuple[float, int]] = []
        self._next_sample: float | None = None

    def initialize(self, video_props: dict) -> None:
        self.samples = []
        self._next_sample = None

    def process_frame(
        self,
        frame_num: int,
        timestamp: float,
        result: FrameResult,
        trajectories: list[Trajectory],
    ) -> None:
        if self._next_sample is not None and timestamp < self._next_sample:
            return
        active = sum(1 for t in trajectories if t.active)
        self.samples.append((timestamp, active))
        if len(self.samples) > self.max_samples:
            del self.samples[:-self.max_samples]
        self._next_sample = timestamp + self.interval

    def finalize(self) -> None:
        if not self.samples:
            return
        with open(self.output_path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(self.HEADER)
            writer.writerows(self.samples)
        self.samples = []
