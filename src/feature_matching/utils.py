"""
Shared helper functions and utilities.

This module contains logging setup, image validation and the tick-based
timer used to instrument detector, descriptor and matcher calls.
"""

from __future__ import annotations

import logging
from typing import Optional

import cv2
import numpy as np


def setup_logging(level=logging.INFO):
    """Set up logging configuration.

    Args:
        level: Logging level (default: INFO)
    """
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    logger = logging.getLogger(__name__)
    logger.info("Logging initialized")


def to_grayscale(image: Optional[np.ndarray]) -> np.ndarray:
    """Validate an image and return its single-channel version.

    Args:
        image: Grayscale or BGR image

    Returns:
        np.ndarray: Grayscale image
    """
    if image is None or image.size == 0:
        raise ValueError("Image cannot be empty.")
    if image.ndim == 2:
        return image
    if image.ndim == 3 and image.shape[2] == 1:
        return image[:, :, 0]
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def has_contrib() -> bool:
    """Return True when OpenCV was built with the xfeatures2d contrib module."""
    return hasattr(cv2, "xfeatures2d")


class TickTimer:
    """Context manager measuring wall time with OpenCV's tick counter."""

    def __init__(self):
        self._start: int = 0
        self.elapsed: float = 0.0

    def __enter__(self) -> TickTimer:
        self._start = cv2.getTickCount()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = (cv2.getTickCount() - self._start) / cv2.getTickFrequency()
        return False

    @property
    def elapsed_ms(self) -> float:
        return 1000.0 * self.elapsed
