"""
Base class for output handlers.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from visionflow.core.types import FrameResult, Trajectory


class BaseOutput(ABC):
    """
    Abstract base class for all output handlers.

    Subclasses implement initialize(), process_frame() and finalize().
    Handlers that only need the final trajectory set can ignore
    process_frame() and do their work in finalize().

    Example:
        class CountOutput(BaseOutput):
            def initialize(self, video_props: dict) -> None:
                self.counts = []

            def process_frame(self, frame_num, timestamp, result, trajectories):
                self.counts.append(len(result.blobs))

            def finalize(self) -> None:
                self.output_path.write_text("\\n".join(map(str, self.counts)))
    """

    def __init__(self, path: str | Path, **options):
        """
        Args:
            path: Output file path
            **options: Handler-specific options
        """
        self.output_path = Path(path)
        self.options = options

    @abstractmethod
    def initialize(self, video_props: dict) -> None:
        """
        Open files and reset buffers.

        Args:
            video_props: Dictionary with 'width', 'height', 'fps'
        """
        pass

    @abstractmethod
    def process_frame(
        self,
        frame_num: int,
        timestamp: float,
        result: FrameResult,
        trajectories: list[Trajectory],
    ) -> None:
        """
        Consume one frame of engine and tracker output.

        Args:
            frame_num: Current frame number
            timestamp: Frame time in seconds
            result: Engine output for the frame
            trajectories: Tracker output for the frame
        """
        pass

    @abstractmethod
    def finalize(self) -> None:
        """Write remaining data and close files."""
        pass

    def get_output_path(self) -> Path:
        return self.output_path

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finalize()
        return False
