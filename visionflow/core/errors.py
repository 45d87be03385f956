"""
Exception types raised by the VisionFlow engine.

Low-confidence matches, undersized clusters and lost trajectories are
ordinary results, not errors. Only malformed input and bad configuration
raise.
"""


class VisionFlowError(Exception):
    """Base class for all VisionFlow errors."""


class InvalidFrameSize(VisionFlowError, ValueError):
    """Raised when a frame buffer does not match the analysis resolution."""

    def __init__(self, expected: int, actual: int | None, reason: str | None = None):
        self.expected = expected
        self.actual = actual
        self.reason = reason
        if reason:
            message = f"Invalid frame buffer: {reason}, expected {expected} uint8 bytes"
        else:
            message = (
                f"Frame buffer has {actual} bytes, expected {expected} "
                f"(width * height * 4)"
            )
        super().__init__(message)


class ConfigError(VisionFlowError, ValueError):
    """Raised when a configuration value is out of range."""
