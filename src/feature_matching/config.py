"""
Configuration for detectors, descriptor extractors and matchers.

Every tuning constant lives in :class:`FeatureMatchingConfiguration`; the
module-level helpers load, save and validate JSON configuration files.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Dict, Optional

import cv2

LOGGER = logging.getLogger(__name__)


@dataclass
class FeatureMatchingConfiguration:
    """Tuning parameters forwarded to OpenCV."""

    # Shi-Tomasi / Harris corners
    block_size: int = 4  # Neighbourhood for the derivative covariation matrix
    max_overlap: float = 0.0  # Max permissible overlap between two features
    quality_level: float = 0.01  # Minimal accepted quality of image corners
    harris_k: float = 0.04

    # FAST
    fast_threshold: int = 30
    fast_nonmax_suppression: bool = True
    fast_type: int = cv2.FAST_FEATURE_DETECTOR_TYPE_9_16

    # ORB
    orb_nfeatures: int = 1000

    # BRISK descriptor
    brisk_threshold: int = 30  # FAST/AGAST detection threshold score
    brisk_octaves: int = 3  # 0 = single scale
    brisk_pattern_scale: float = 1.0  # Scale applied to the sampling pattern

    # Matching
    match_ratio_threshold: float = 0.8  # k-NN distance ratio
    knn_k: int = 2
    cross_check: bool = False

    @property
    def min_distance(self) -> float:
        return (1.0 - self.max_overlap) * self.block_size

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> FeatureMatchingConfiguration:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in dict(data or {}).items() if k in known})

    def to_dict(self) -> Dict:
        return asdict(self)


def get_config(config_path=None):
    """Load configuration from file or return defaults.

    Args:
        config_path: Path to JSON configuration file (optional)

    Returns:
        dict: Configuration dictionary
    """
    config = FeatureMatchingConfiguration().to_dict()

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            LOGGER.warning("Failed to load config from %s: %s", config_path, e)
        else:
            if not isinstance(loaded, dict):
                LOGGER.warning("Config file %s must contain a JSON object, using defaults", config_path)
                return config
            unknown = sorted(set(loaded) - set(config))
            if unknown:
                LOGGER.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
            config.update({k: v for k, v in loaded.items() if k in config})
            LOGGER.info("Configuration loaded from %s", config_path)
    elif config_path:
        LOGGER.warning("Config file %s not found, using defaults", config_path)

    return config


def save_config(config, config_path):
    """Save configuration to file.

    Args:
        config: Configuration dictionary or FeatureMatchingConfiguration
        config_path: Path to save configuration file

    Returns:
        bool: True if save successful, False otherwise
    """
    if isinstance(config, FeatureMatchingConfiguration):
        config = config.to_dict()
    try:
        with open(config_path, 'w') as f:
            json.dump(config, f, indent=4)
    except (OSError, TypeError) as e:
        LOGGER.error("Failed to save config to %s: %s", config_path, e)
        return False
    LOGGER.info("Configuration saved to %s", config_path)
    return True


def validate_config(config):
    """Validate configuration parameters.

    Args:
        config: Configuration dictionary

    Returns:
        bool: True if valid, False otherwise
    """
    positive_keys = ['block_size', 'fast_threshold', 'orb_nfeatures', 'knn_k']
    numeric_keys = positive_keys + [
        'max_overlap', 'quality_level', 'harris_k', 'brisk_threshold',
        'brisk_octaves', 'brisk_pattern_scale', 'match_ratio_threshold',
    ]

    for key in numeric_keys:
        value = config.get(key, 0)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            LOGGER.error("Config key %s must be numeric, got %r", key, value)
            return False

    for key in positive_keys:
        if key not in config:
            LOGGER.error("Missing required config key: %s", key)
            return False
        if config[key] <= 0:
            LOGGER.error("Config key %s must be positive", key)
            return False

    if not 0.0 <= config.get('max_overlap', 0.0) < 1.0:
        LOGGER.error("max_overlap must be in [0, 1)")
        return False

    if not 0.0 < config.get('match_ratio_threshold', 0.8) <= 1.0:
        LOGGER.error("match_ratio_threshold must be in (0, 1]")
        return False

    if config['knn_k'] < 2:
        LOGGER.error("knn_k must be at least 2 for the ratio test")
        return False

    LOGGER.info("Configuration validated successfully")
    return True
