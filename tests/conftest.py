"""
Shared fixtures for VisionFlow tests.

All frames are synthetic; no video files are needed except where a test
writes its own.
"""

import numpy as np
import pytest

WIDTH = 480
HEIGHT = 270


def gray_to_rgba(gray: np.ndarray) -> np.ndarray:
    """Stack a grayscale image into an opaque RGBA frame."""
    gray = gray.astype(np.uint8)
    alpha = np.full_like(gray, 255)
    return np.dstack([gray, gray, gray, alpha])


@pytest.fixture
def to_rgba():
    return gray_to_rgba


@pytest.fixture
def texture():
    """Random full-frame texture with a fixed seed."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(HEIGHT, WIDTH), dtype=np.uint8)


@pytest.fixture
def flat_gray():
    return np.full((HEIGHT, WIDTH), 128, dtype=np.uint8)


@pytest.fixture
def patch_scene():
    """
    Factory for a flat frame holding one 40x40 textured square.

    The square's top-left corner is at (left, top).
    """
    rng = np.random.default_rng(99)
    square = rng.integers(0, 256, size=(40, 40), dtype=np.uint8)

    def make(left: int = 100, top: int = 100) -> np.ndarray:
        gray = np.full((HEIGHT, WIDTH), 128, dtype=np.uint8)
        gray[top:top + 40, left:left + 40] = square
        return gray

    return make
