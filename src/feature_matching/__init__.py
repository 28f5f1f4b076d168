"""
feature_matching - 2D keypoint detection, description and matching.

This package provides functionality for:
- Keypoint detection (Shi-Tomasi, Harris, FAST, BRISK, ORB, AKAZE, SIFT)
- Descriptor extraction (BRISK, BRIEF, ORB, FREAK, AKAZE, SIFT)
- Descriptor matching (brute force / FLANN, NN / k-NN with ratio test)
- Timing of every library call
"""

from .config import FeatureMatchingConfiguration, get_config, save_config, validate_config
from .description import (
    DescriptionResult,
    DescriptorFamily,
    DescriptorType,
    FeatureDescriptorFactory,
    check_compatibility,
    describe_keypoints,
    descriptor_family,
    is_compatible,
)
from .detection import (
    DetectionResult,
    DetectorType,
    FeatureDetectorFactory,
    detect_keypoints,
    detect_keypoints_harris,
    detect_keypoints_modern,
    detect_keypoints_shi_tomasi,
)
from .matching import (
    FeatureMatcherFactory,
    MatcherType,
    MatchResult,
    SelectorType,
    filter_ratio_test,
    match_descriptors,
)
from .visualization import draw_keypoints, draw_matches

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "FeatureMatchingConfiguration",
    "get_config",
    "save_config",
    "validate_config",
    # Detection
    "DetectionResult",
    "DetectorType",
    "FeatureDetectorFactory",
    "detect_keypoints",
    "detect_keypoints_harris",
    "detect_keypoints_modern",
    "detect_keypoints_shi_tomasi",
    # Description
    "DescriptionResult",
    "DescriptorFamily",
    "DescriptorType",
    "FeatureDescriptorFactory",
    "check_compatibility",
    "describe_keypoints",
    "descriptor_family",
    "is_compatible",
    # Matching
    "FeatureMatcherFactory",
    "MatcherType",
    "MatchResult",
    "SelectorType",
    "filter_ratio_test",
    "match_descriptors",
    # Visualization
    "draw_keypoints",
    "draw_matches",
]
