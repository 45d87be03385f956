#!/usr/bin/env python3
"""
Minimal Example: VisionFlow API Usage
=====================================

Runs the feature engine and trajectory tracker over a synthetic clip of a
textured square drifting across a flat background. This is the "quick
reference" version; no video file is needed.
"""

import numpy as np

from visionflow import FeatureEngine, TrajectoryTracker, TrackingParams


WIDTH, HEIGHT = 480, 270
DISPLAY_W, DISPLAY_H = 1920, 1080
FPS = 30.0

rng = np.random.default_rng(0)
square = rng.integers(0, 256, size=(40, 40), dtype=np.uint8)


def make_frame(step: int) -> np.ndarray:
    """RGBA frame with the square shifted 4 px right per step."""
    gray = np.full((HEIGHT, WIDTH), 128, dtype=np.uint8)
    left = 60 + 4 * step
    gray[100:140, left:left + 40] = square
    return np.dstack([gray, gray, gray, np.full_like(gray, 255)])


# =============================================================================
# STEP 1: FEATURES AND BLOBS
# The engine works at the analysis resolution and returns blobs in those
# coordinates.
# =============================================================================

engine = FeatureEngine()
tracker = TrajectoryTracker()
params = TrackingParams(persistence=2, sensitivity=5)

scale_x = DISPLAY_W / WIDTH
scale_y = DISPLAY_H / HEIGHT

for step in range(30):
    timestamp = step / FPS
    result = engine.process(make_frame(step), params.sensitivity)

    # =========================================================================
    # STEP 2: TRAJECTORIES
    # Blob centres are scaled to display coordinates before matching.
    # =========================================================================
    blobs = [b.to_point(scale_x, scale_y) for b in result.blobs]
    trajectories = tracker.update(blobs, timestamp, params)

    print(
        f"t={timestamp:.2f}s features={len(result.features)} "
        f"blobs={len(result.blobs)} active={tracker.active_count}"
    )

for traj in tracker.trajectories:
    first, last = traj.points[0], traj.points[-1]
    state = "active" if traj.active else "inactive"
    print(
        f"Trajectory {traj.id} ({traj.color}, {state}): "
        f"{len(traj.points)} points, ({first.x:.0f}, {first.y:.0f}) -> "
        f"({last.x:.0f}, {last.y:.0f})"
    )
