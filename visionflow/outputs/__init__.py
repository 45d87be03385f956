"""
Output handlers module.

This module provides output handlers for engine and tracker results:
- FeatureCSVOutput: Per-frame feature table
- TrajectoryCSVOutput: Trajectory histories
- ActivityCSVOutput: Active trajectory count over time

Example:
    >>> from visionflow.outputs import OutputManager
    >>> manager = OutputManager()
    >>> manager.add_output("features", "features.csv")
    >>> manager.add_output("trajectories", "tracks.csv", smooth=2)
"""

from visionflow.outputs.base import BaseOutput
from visionflow.outputs.data import FeatureCSVOutput, TrajectoryCSVOutput, ActivityCSVOutput
from visionflow.outputs.manager import OutputManager, register_output_type

__all__ = [
    "BaseOutput",
    "FeatureCSVOutput",
    "TrajectoryCSVOutput",
    "ActivityCSVOutput",
    "OutputManager",
    "register_output_type",
]
