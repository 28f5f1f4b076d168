"""
Keypoint detection.

Supports classic corner detectors and OpenCV's scale-space detectors:
- Shi-Tomasi (good features to track)
- Harris (good features to track with the Harris response)
- FAST (9/16 segment test with non-maximum suppression)
- BRISK, ORB, AKAZE, SIFT (library defaults, ORB capped at 1000 features)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

import cv2
import numpy as np

from .config import FeatureMatchingConfiguration
from .utils import TickTimer, to_grayscale

LOGGER = logging.getLogger(__name__)


class DetectorType(Enum):
    """Supported keypoint detector types."""
    SHITOMASI = "SHITOMASI"
    HARRIS = "HARRIS"
    FAST = "FAST"
    BRISK = "BRISK"
    ORB = "ORB"
    AKAZE = "AKAZE"
    SIFT = "SIFT"

    @classmethod
    def parse(cls, value: Union[str, DetectorType]) -> DetectorType:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"Unknown detector: {value}") from None


CORNER_DETECTORS = (DetectorType.SHITOMASI, DetectorType.HARRIS)


@dataclass
class DetectionResult:
    """Keypoints found in one image and the time the detector took."""

    keypoints: List[cv2.KeyPoint] = field(default_factory=list)
    detector_type: str = ""
    elapsed: float = 0.0  # seconds

    @property
    def elapsed_ms(self) -> float:
        return 1000.0 * self.elapsed

    def __len__(self) -> int:
        return len(self.keypoints)


def max_corners_for(shape: Tuple[int, ...], config: FeatureMatchingConfiguration) -> int:
    """Upper bound on corners so that non-overlapping blocks could tile the image."""
    rows, cols = shape[:2]
    return int(rows * cols / max(1.0, config.min_distance))


class FeatureDetectorFactory:
    """Factory for the scale-space keypoint detectors."""

    @staticmethod
    def create_detector(
        detector_type: Union[str, DetectorType],
        config: Optional[FeatureMatchingConfiguration] = None,
    ) -> cv2.Feature2D:
        config = config or FeatureMatchingConfiguration()
        dtype = DetectorType.parse(detector_type)

        if dtype == DetectorType.FAST:
            return cv2.FastFeatureDetector_create(
                threshold=config.fast_threshold,
                nonmaxSuppression=config.fast_nonmax_suppression,
                type=config.fast_type,
            )
        elif dtype == DetectorType.BRISK:
            return cv2.BRISK_create()
        elif dtype == DetectorType.SIFT:
            return cv2.SIFT_create()
        elif dtype == DetectorType.ORB:
            return cv2.ORB_create(nfeatures=config.orb_nfeatures)
        elif dtype == DetectorType.AKAZE:
            return cv2.AKAZE_create()

        raise ValueError(
            f"{dtype.value} is a corner detector, use detect_keypoints_shi_tomasi "
            "or detect_keypoints_harris"
        )


def _detect_corners(
    image: np.ndarray,
    config: Optional[FeatureMatchingConfiguration],
    use_harris: bool,
) -> DetectionResult:
    config = config or FeatureMatchingConfiguration()
    gray = to_grayscale(image)
    label = DetectorType.HARRIS if use_harris else DetectorType.SHITOMASI

    with TickTimer() as timer:
        corners = cv2.goodFeaturesToTrack(
            gray,
            maxCorners=max_corners_for(gray.shape, config),
            qualityLevel=config.quality_level,
            minDistance=config.min_distance,
            mask=None,
            blockSize=config.block_size,
            useHarrisDetector=use_harris,
            k=config.harris_k,
        )
        keypoints = []
        if corners is not None:
            keypoints = [
                cv2.KeyPoint(x=float(pt[0][0]), y=float(pt[0][1]), size=float(config.block_size))
                for pt in corners
            ]

    LOGGER.debug(
        "%s detection with n=%d keypoints in %.3f ms",
        label.value, len(keypoints), timer.elapsed_ms,
    )
    return DetectionResult(keypoints=keypoints, detector_type=label.value, elapsed=timer.elapsed)


def detect_keypoints_shi_tomasi(
    image: np.ndarray,
    config: Optional[FeatureMatchingConfiguration] = None,
) -> DetectionResult:
    """Detect keypoints with the Shi-Tomasi minimum-eigenvalue corner measure."""
    return _detect_corners(image, config, use_harris=False)


def detect_keypoints_harris(
    image: np.ndarray,
    config: Optional[FeatureMatchingConfiguration] = None,
) -> DetectionResult:
    """Detect keypoints with the Harris corner response."""
    return _detect_corners(image, config, use_harris=True)


def detect_keypoints_modern(
    image: np.ndarray,
    detector_type: Union[str, DetectorType],
    config: Optional[FeatureMatchingConfiguration] = None,
) -> DetectionResult:
    """Detect keypoints with FAST, BRISK, ORB, AKAZE or SIFT."""
    dtype = DetectorType.parse(detector_type)
    gray = to_grayscale(image)
    detector = FeatureDetectorFactory.create_detector(dtype, config)

    with TickTimer() as timer:
        keypoints = list(detector.detect(gray, None))

    LOGGER.debug(
        "%s detection with n=%d keypoints in %.3f ms",
        dtype.value, len(keypoints), timer.elapsed_ms,
    )
    return DetectionResult(keypoints=keypoints, detector_type=dtype.value, elapsed=timer.elapsed)


def detect_keypoints(
    image: np.ndarray,
    detector_type: Union[str, DetectorType],
    config: Optional[FeatureMatchingConfiguration] = None,
) -> DetectionResult:
    """Detect keypoints with any supported detector."""
    dtype = DetectorType.parse(detector_type)
    if dtype == DetectorType.SHITOMASI:
        return detect_keypoints_shi_tomasi(image, config)
    if dtype == DetectorType.HARRIS:
        return detect_keypoints_harris(image, config)
    return detect_keypoints_modern(image, dtype, config)
