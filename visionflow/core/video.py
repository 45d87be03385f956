"""
Video input for VisionFlow.

Decodes a video with OpenCV and hands the engine RGBA frames already
resized to the analysis resolution, together with their timestamps.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import cv2
import numpy as np


@dataclass
class VideoProperties:
    """Properties of a video file."""
    width: int
    height: int
    fps: float
    frame_count: int

    @classmethod
    def from_capture(cls, cap: cv2.VideoCapture) -> "VideoProperties":
        """Create VideoProperties from an OpenCV VideoCapture."""
        return cls(
            width=int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            height=int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            fps=cap.get(cv2.CAP_PROP_FPS),
            frame_count=int(cap.get(cv2.CAP_PROP_FRAME_COUNT)),
        )

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "fps": self.fps,
            "frame_count": self.frame_count,
        }


def to_analysis_frame(frame: np.ndarray, size: tuple[int, int]) -> np.ndarray:
    """
    Resize a BGR frame to the analysis resolution and convert it to RGBA.

    Args:
        frame: BGR frame as decoded by OpenCV
        size: (width, height) of the analysis resolution

    Returns:
        Contiguous uint8 array of shape (height, width, 4)
    """
    if (frame.shape[1], frame.shape[0]) != size:
        frame = cv2.resize(frame, size, interpolation=cv2.INTER_AREA)
    return np.ascontiguousarray(cv2.cvtColor(frame, cv2.COLOR_BGR2RGBA))


class VideoReader:
    """
    Video reader yielding analysis-resolution RGBA frames.

    Example:
        with VideoReader("input.mp4", analysis_size=(480, 270)) as reader:
            for frame_num, timestamp, rgba in reader:
                result = engine.process(rgba, sensitivity=30)
    """

    def __init__(
        self,
        path: str | Path,
        first_frame: int = 1,
        last_frame: int | None = None,
        analysis_size: tuple[int, int] = (480, 270),
    ):
        """
        Args:
            path: Path to video file
            first_frame: First frame to read (1-indexed)
            last_frame: Last frame to read (None = end of video)
            analysis_size: (width, height) frames are resized to
        """
        self.path = Path(path)
        self.first_frame = first_frame
        self.last_frame = last_frame
        self.analysis_size = analysis_size

        self._cap: cv2.VideoCapture | None = None
        self._props: VideoProperties | None = None

    def open(self) -> "VideoReader":
        """Open the video file."""
        if not self.path.exists():
            raise FileNotFoundError(f"Video file not found: {self.path}")

        self._cap = cv2.VideoCapture(str(self.path))
        if not self._cap.isOpened():
            raise RuntimeError(f"Failed to open video: {self.path}")

        self._props = VideoProperties.from_capture(self._cap)
        count = self._props.frame_count
        if count > 0 and (self.last_frame is None or self.last_frame > count):
            self.last_frame = count

        self._cap.set(cv2.CAP_PROP_POS_FRAMES, self.first_frame - 1)
        return self

    def close(self) -> None:
        if self._cap:
            self._cap.release()
            self._cap = None

    @property
    def properties(self) -> VideoProperties:
        if self._props is None:
            raise RuntimeError("Video not opened. Call open() first.")
        return self._props

    def timestamp(self, frame_num: int) -> float:
        """Presentation time in seconds of a 1-indexed frame."""
        fps = self.properties.fps
        return (frame_num - 1) / fps if fps > 0 else 0.0

    def __iter__(self) -> Iterator[tuple[int, float, np.ndarray]]:
        if self._cap is None:
            self.open()

        current_frame = self.first_frame
        while self.last_frame is None or current_frame <= self.last_frame:
            ret, frame = self._cap.read()
            if not ret:
                break
            yield (
                current_frame,
                self.timestamp(current_frame),
                to_analysis_frame(frame, self.analysis_size),
            )
            current_frame += 1

    def __enter__(self) -> "VideoReader":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
