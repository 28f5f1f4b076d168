"""
Descriptor matching between a source and a reference image.

Brute-force matching uses the Hamming norm for binary descriptors and L2
for HOG descriptors. FLANN matching works on float32 data, so descriptors
are converted before the index is built. Nearest-neighbour selection keeps
the best match per source descriptor; k-nearest-neighbour selection keeps
it only when it passes the distance ratio test.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

import cv2
import numpy as np

from .config import FeatureMatchingConfiguration
from .description import DescriptorFamily
from .utils import TickTimer

LOGGER = logging.getLogger(__name__)


class MatcherType(Enum):
    """Supported descriptor matcher types."""
    BF = "MAT_BF"
    FLANN = "MAT_FLANN"

    @classmethod
    def parse(cls, value: Union[str, MatcherType]) -> MatcherType:
        if isinstance(value, cls):
            return value
        name = str(value).upper()
        for member in cls:
            if name in (member.value, member.name):
                return member
        raise ValueError(f"Unknown matcher: {value}")


class SelectorType(Enum):
    """How candidate matches are selected."""
    NN = "SEL_NN"  # Best match only
    KNN = "SEL_KNN"  # k best matches + ratio test

    @classmethod
    def parse(cls, value: Union[str, SelectorType]) -> SelectorType:
        if isinstance(value, cls):
            return value
        name = str(value).upper()
        for member in cls:
            if name in (member.value, member.name):
                return member
        raise ValueError(f"Unknown selector: {value}")


@dataclass
class MatchResult:
    """Matches between two descriptor sets."""

    matches: List[cv2.DMatch] = field(default_factory=list)
    matcher_type: str = ""
    selector_type: str = ""
    elapsed: float = 0.0  # seconds, library call only
    candidates: int = 0  # Source descriptors the library returned neighbours for

    @property
    def removed(self) -> int:
        return self.candidates - len(self.matches)

    @property
    def elapsed_ms(self) -> float:
        return 1000.0 * self.elapsed


def filter_ratio_test(
    knn_matches: Sequence[Sequence[cv2.DMatch]],
    ratio: float = 0.8,
) -> List[cv2.DMatch]:
    """Keep the best match of each k-NN list if it is clearly better than the runner-up."""
    good_matches = []
    for match_pair in knn_matches:
        if len(match_pair) < 2:
            continue
        best, second = match_pair[0], match_pair[1]
        if best.distance < ratio * second.distance:
            good_matches.append(best)
    return good_matches


class FeatureMatcherFactory:
    """Factory for descriptor matchers."""

    @staticmethod
    def create_matcher(
        matcher_type: Union[str, MatcherType],
        family: Union[str, DescriptorFamily],
        config: Optional[FeatureMatchingConfiguration] = None,
    ) -> cv2.DescriptorMatcher:
        config = config or FeatureMatchingConfiguration()
        mtype = MatcherType.parse(matcher_type)
        family = DescriptorFamily.parse(family)

        if mtype == MatcherType.FLANN:
            # Default KD-tree index; descriptors must be float32
            return cv2.FlannBasedMatcher()

        norm_type = cv2.NORM_HAMMING if family == DescriptorFamily.BINARY else cv2.NORM_L2
        return cv2.BFMatcher(norm_type, crossCheck=config.cross_check)


def _is_empty(descriptors: Optional[np.ndarray]) -> bool:
    return descriptors is None or descriptors.size == 0


def match_descriptors(
    desc_source: Optional[np.ndarray],
    desc_ref: Optional[np.ndarray],
    descriptor_family: Union[str, DescriptorFamily],
    matcher_type: Union[str, MatcherType],
    selector_type: Union[str, SelectorType],
    config: Optional[FeatureMatchingConfiguration] = None,
) -> MatchResult:
    """
    Find the best matches for source descriptors among reference descriptors.

    Args:
        desc_source: Descriptors of the source (query) image
        desc_ref: Descriptors of the reference (train) image
        descriptor_family: DES_BINARY or DES_HOG
        matcher_type: MAT_BF or MAT_FLANN
        selector_type: SEL_NN or SEL_KNN

    Returns:
        MatchResult with query indices into the source and train indices
        into the reference.
    """
    config = config or FeatureMatchingConfiguration()
    family = DescriptorFamily.parse(descriptor_family)
    mtype = MatcherType.parse(matcher_type)
    stype = SelectorType.parse(selector_type)

    if _is_empty(desc_source) or _is_empty(desc_ref):
        LOGGER.debug("Nothing to match: empty descriptor set")
        return MatchResult(matcher_type=mtype.value, selector_type=stype.value)

    matcher = FeatureMatcherFactory.create_matcher(mtype, family, config)

    if mtype == MatcherType.FLANN:
        if desc_source.dtype != np.float32:
            desc_source = desc_source.astype(np.float32)
        if desc_ref.dtype != np.float32:
            desc_ref = desc_ref.astype(np.float32)

    if stype == SelectorType.NN:
        with TickTimer() as timer:
            matches = list(matcher.match(desc_source, desc_ref))
        candidates = len(matches)
    else:
        # FLANN asserts k <= index size; short lists are dropped by the ratio test
        k = min(config.knn_k, len(desc_ref))
        with TickTimer() as timer:
            knn_matches = matcher.knnMatch(desc_source, desc_ref, k=k)
        candidates = sum(1 for pair in knn_matches if len(pair) > 0)
        matches = filter_ratio_test(knn_matches, config.match_ratio_threshold)
        LOGGER.debug("Ratio test removed %d of %d matches", candidates - len(matches), candidates)

    LOGGER.debug(
        "%s (%s) with n=%d matches in %.3f ms",
        mtype.value, stype.value, len(matches), timer.elapsed_ms,
    )
    return MatchResult(
        matches=matches,
        matcher_type=mtype.value,
        selector_type=stype.value,
        elapsed=timer.elapsed,
        candidates=candidates,
    )
