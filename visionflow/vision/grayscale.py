"""
Luma projection of interleaved RGBA buffers.
"""

import numpy as np

from visionflow.core.errors import InvalidFrameSize


def as_rgba(frame, width: int, height: int) -> np.ndarray:
    """
    View a frame buffer as an (height, width, 4) uint8 array.

    Accepts bytes-like objects, or uint8 numpy arrays of any shape, holding
    exactly width * height * 4 bytes.

    Raises:
        InvalidFrameSize: If the input is not an 8-bit buffer of the
            expected byte count
    """
    expected = width * height * 4
    if isinstance(frame, np.ndarray):
        if frame.dtype != np.uint8:
            raise InvalidFrameSize(
                expected, frame.nbytes, reason=f"dtype {frame.dtype} is not uint8"
            )
        data = frame.reshape(-1)
    else:
        try:
            view = memoryview(frame).cast("B")
        except TypeError as e:
            raise InvalidFrameSize(
                expected, None, reason=f"{type(frame).__name__} is not a byte buffer"
            ) from e
        data = np.frombuffer(view, dtype=np.uint8)

    if data.size != expected:
        raise InvalidFrameSize(expected, data.size)
    return data.reshape(height, width, 4)


def to_grayscale(frame, width: int, height: int) -> np.ndarray:
    """
    Convert an RGBA frame to 8-bit luma.

    luma = 0.299 R + 0.587 G + 0.114 B, rounded half to even and clamped
    to 0..255. Alpha is ignored.

    Args:
        frame: RGBA buffer of exactly width * height * 4 bytes
        width: Frame width in pixels
        height: Frame height in pixels

    Returns:
        uint8 array of shape (height, width)
    """
    rgba = as_rgba(frame, width, height)
    luma = (
        rgba[..., 0] * 0.299
        + rgba[..., 1] * 0.587
        + rgba[..., 2] * 0.114
    )
    return np.clip(np.rint(luma), 0, 255).astype(np.uint8)
