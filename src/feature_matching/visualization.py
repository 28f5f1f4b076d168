"""
Drawing helpers for keypoints and matches.

The helpers only render into image arrays; displaying or saving them is
left to the caller.
"""

from typing import Optional, Sequence, Tuple

import cv2
import numpy as np


def draw_keypoints(
    image: np.ndarray,
    keypoints: Sequence[cv2.KeyPoint],
    color: Optional[Tuple[int, int, int]] = None,
) -> np.ndarray:
    """Draw keypoints with their size and orientation onto a copy of the image."""
    if image is None or image.size == 0:
        raise ValueError("Image cannot be empty.")
    color = (-1, -1, -1, -1) if color is None else color  # all -1 = random colour per keypoint
    return cv2.drawKeypoints(
        image, list(keypoints), None,
        color=color, flags=cv2.DRAW_MATCHES_FLAGS_DRAW_RICH_KEYPOINTS)


def draw_matches(
    img_source: np.ndarray,
    kpts_source: Sequence[cv2.KeyPoint],
    img_ref: np.ndarray,
    kpts_ref: Sequence[cv2.KeyPoint],
    matches: Sequence[cv2.DMatch],
) -> np.ndarray:
    """
    Draw source and reference images side by side with match lines.

    Returns:
        Image of width ``w_source + w_ref``
    """
    return cv2.drawMatches(
        img_source, list(kpts_source), img_ref, list(kpts_ref), list(matches), None,
        flags=cv2.DRAW_MATCHES_FLAGS_NOT_DRAW_SINGLE_POINTS)
