"""
Output manager for coordinating multiple output handlers.
"""

from pathlib import Path
from typing import Type

from visionflow.core.types import FrameResult, Trajectory
from visionflow.outputs.base import BaseOutput
from visionflow.outputs.data import ActivityCSVOutput, FeatureCSVOutput, TrajectoryCSVOutput


# Registry of available output types
OUTPUT_TYPES: dict[str, Type[BaseOutput]] = {
    'features': FeatureCSVOutput,
    'trajectories': TrajectoryCSVOutput,
    'activity': ActivityCSVOutput,
}


def register_output_type(name: str, output_class: Type[BaseOutput]) -> None:
    """
    Register a new output type.

    Example:
        >>> class MyOutput(BaseOutput):
        ...     ...
        >>> register_output_type('myoutput', MyOutput)
    """
    OUTPUT_TYPES[name.lower()] = output_class


class OutputManager:
    """
    Fans engine and tracker output out to several handlers.

    Example:
        >>> manager = OutputManager()
        >>> manager.add_output("trajectories", "tracks.csv", smooth=2)
        >>> manager.initialize_all(video_props)
        >>> for frame_num, timestamp, result, trajectories in run:
        ...     manager.process_frame(frame_num, timestamp, result, trajectories)
        >>> manager.finalize_all()
    """

    def __init__(self):
        self.outputs: list[BaseOutput] = []

    def add_output(self, kind: str, path: str | Path, **options) -> BaseOutput:
        """
        Add an output handler.

        Args:
            kind: Registered output type name
            path: Output file path
            **options: Passed to the handler

        Returns:
            The created output handler

        Raises:
            ValueError: If the output type is unknown
        """
        kind = kind.lower()
        if kind not in OUTPUT_TYPES:
            raise ValueError(
                f"Unknown output type: {kind}. "
                f"Available: {list(OUTPUT_TYPES.keys())}"
            )
        output = OUTPUT_TYPES[kind](path, **options)
        self.outputs.append(output)
        return output

    def initialize_all(self, video_props: dict) -> None:
        for output in self.outputs:
            output.initialize(video_props)

    def process_frame(
        self,
        frame_num: int,
        timestamp: float,
        result: FrameResult,
        trajectories: list[Trajectory],
    ) -> None:
        for output in self.outputs:
            output.process_frame(frame_num, timestamp, result, trajectories)

    def finalize_all(self) -> None:
        for output in self.outputs:
            output.finalize()

    def get_output_paths(self) -> list[Path]:
        return [output.get_output_path() for output in self.outputs]

    def __len__(self) -> int:
        return len(self.outputs)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finalize_all()
        return False
