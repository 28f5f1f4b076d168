"""
Descriptor extraction at detected keypoints.

Binary descriptors (BRISK, BRIEF, ORB, FREAK, AKAZE) are compared with the
Hamming norm; SIFT produces gradient-histogram descriptors compared with L2.
BRIEF and FREAK require the opencv-contrib xfeatures2d module.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

import cv2
import numpy as np

from .config import FeatureMatchingConfiguration
from .detection import DetectorType
from .utils import TickTimer, has_contrib, to_grayscale

LOGGER = logging.getLogger(__name__)


class DescriptorType(Enum):
    """Supported descriptor extractor types."""
    BRISK = "BRISK"
    BRIEF = "BRIEF"
    ORB = "ORB"
    FREAK = "FREAK"
    AKAZE = "AKAZE"
    SIFT = "SIFT"

    @classmethod
    def parse(cls, value: Union[str, DescriptorType]) -> DescriptorType:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"Unknown descriptor: {value}") from None


class DescriptorFamily(Enum):
    """Descriptor value families, which decide the matcher norm."""
    BINARY = "DES_BINARY"  # Hamming
    HOG = "DES_HOG"  # Histogram of gradients, L2

    @classmethod
    def parse(cls, value: Union[str, DescriptorFamily]) -> DescriptorFamily:
        if isinstance(value, cls):
            return value
        name = str(value).upper()
        for member in cls:
            if name in (member.value, member.name):
                return member
        raise ValueError(f"Unknown descriptor family: {value}")


CONTRIB_DESCRIPTORS = (DescriptorType.BRIEF, DescriptorType.FREAK)

# (detector, descriptor) pairs OpenCV cannot describe
INCOMPATIBLE_COMBINATIONS = {
    (DetectorType.SIFT, DescriptorType.ORB): "ORB cannot describe SIFT keypoints",
}


@dataclass
class DescriptionResult:
    """Descriptors computed for one image."""

    keypoints: List[cv2.KeyPoint] = field(default_factory=list)
    descriptors: Optional[np.ndarray] = None
    descriptor_type: str = ""
    family: DescriptorFamily = DescriptorFamily.BINARY
    elapsed: float = 0.0  # seconds

    @property
    def elapsed_ms(self) -> float:
        return 1000.0 * self.elapsed


def descriptor_family(descriptor_type: Union[str, DescriptorType]) -> DescriptorFamily:
    """Return the family of a descriptor: SIFT is HOG, everything else binary."""
    if DescriptorType.parse(descriptor_type) == DescriptorType.SIFT:
        return DescriptorFamily.HOG
    return DescriptorFamily.BINARY


def check_compatibility(
    detector_type: Union[str, DetectorType],
    descriptor_type: Union[str, DescriptorType],
):
    """Raise ValueError if the descriptor cannot be computed on the detector's keypoints."""
    det = DetectorType.parse(detector_type)
    desc = DescriptorType.parse(descriptor_type)

    if desc == DescriptorType.AKAZE and det != DetectorType.AKAZE:
        raise ValueError(f"AKAZE descriptors require AKAZE keypoints, got {det.value}")

    reason = INCOMPATIBLE_COMBINATIONS.get((det, desc))
    if reason:
        raise ValueError(reason)


def is_compatible(
    detector_type: Union[str, DetectorType],
    descriptor_type: Union[str, DescriptorType],
) -> bool:
    try:
        check_compatibility(detector_type, descriptor_type)
    except ValueError as e:
        LOGGER.debug("Incompatible combination: %s", e)
        return False
    return True


class FeatureDescriptorFactory:
    """Factory for descriptor extractors."""

    @staticmethod
    def create_extractor(
        descriptor_type: Union[str, DescriptorType],
        config: Optional[FeatureMatchingConfiguration] = None,
    ) -> cv2.Feature2D:
        config = config or FeatureMatchingConfiguration()
        dtype = DescriptorType.parse(descriptor_type)

        if dtype in CONTRIB_DESCRIPTORS and not has_contrib():
            LOGGER.error("%s requires cv2.xfeatures2d", dtype.value)
            raise RuntimeError(
                f"{dtype.value} descriptor needs the opencv-contrib-python distribution"
            )

        if dtype == DescriptorType.BRISK:
            return cv2.BRISK_create(
                thresh=config.brisk_threshold,
                octaves=config.brisk_octaves,
                patternScale=config.brisk_pattern_scale,
            )
        elif dtype == DescriptorType.SIFT:
            return cv2.SIFT_create()
        elif dtype == DescriptorType.ORB:
            return cv2.ORB_create(nfeatures=config.orb_nfeatures)
        elif dtype == DescriptorType.AKAZE:
            return cv2.AKAZE_create()
        elif dtype == DescriptorType.FREAK:
            return cv2.xfeatures2d.FREAK_create()
        else:
            return cv2.xfeatures2d.BriefDescriptorExtractor_create()


def describe_keypoints(
    keypoints: Sequence[cv2.KeyPoint],
    image: np.ndarray,
    descriptor_type: Union[str, DescriptorType],
    config: Optional[FeatureMatchingConfiguration] = None,
    detector_type: Optional[Union[str, DetectorType]] = None,
) -> DescriptionResult:
    """
    Compute descriptors at the given keypoints.

    The extractor may drop keypoints it cannot describe (typically near the
    border), so callers must use the returned keypoints alongside the
    descriptors. Passing ``detector_type`` rejects known-bad combinations
    before OpenCV is called.
    """
    dtype = DescriptorType.parse(descriptor_type)
    family = descriptor_family(dtype)
    gray = to_grayscale(image)

    if detector_type is not None:
        check_compatibility(detector_type, dtype)

    if not keypoints:
        return DescriptionResult(descriptor_type=dtype.value, family=family)

    extractor = FeatureDescriptorFactory.create_extractor(dtype, config)

    with TickTimer() as timer:
        described, descriptors = extractor.compute(gray, list(keypoints))

    described = list(described or [])
    LOGGER.debug(
        "%s descriptor extraction for n=%d keypoints in %.3f ms",
        dtype.value, len(described), timer.elapsed_ms,
    )
    return DescriptionResult(
        keypoints=described,
        descriptors=descriptors,
        descriptor_type=dtype.value,
        family=family,
        elapsed=timer.elapsed,
    )
