"""
Command-line entry point.

Lists the available algorithms, checks detector/descriptor combinations and
manages JSON configuration files.

Usage:
    feature-matching --list                    # Show supported algorithms
    feature-matching --check FAST BRIEF        # Validate a combination
    feature-matching --config cfg.json         # Load and validate a config
    feature-matching --save-config cfg.json    # Write the effective config
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import get_config, save_config, validate_config
from .description import CONTRIB_DESCRIPTORS, DescriptorType, is_compatible
from .detection import DetectorType
from .matching import MatcherType, SelectorType
from .utils import has_contrib, setup_logging

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Keypoint detection, description and matching with OpenCV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  feature-matching --list
  feature-matching --check AKAZE AKAZE
  feature-matching --config tuned.json --save-config effective.json
        """,
    )

    parser.add_argument(
        "--list", "-l",
        action="store_true",
        help="List supported detectors, descriptors, matchers and selectors",
    )
    parser.add_argument(
        "--check",
        nargs=2,
        metavar=("DETECTOR", "DESCRIPTOR"),
        help="Check whether a detector/descriptor combination is supported",
    )
    parser.add_argument(
        "--config", "-c",
        help="JSON configuration file to load",
    )
    parser.add_argument(
        "--save-config",
        help="Write the effective configuration to this path",
    )
    parser.add_argument(
        "--verbose", "-V",
        action="store_true",
        help="Enable verbose/debug logging",
    )

    return parser.parse_args(argv)


def list_algorithms() -> List[str]:
    """Return printable lines describing every supported algorithm."""
    contrib = has_contrib()
    descriptors = []
    for dtype in DescriptorType:
        if dtype in CONTRIB_DESCRIPTORS and not contrib:
            descriptors.append(f"{dtype.value} (unavailable, needs opencv-contrib-python)")
        else:
            descriptors.append(dtype.value)

    return [
        "Detectors:   " + ", ".join(d.value for d in DetectorType),
        "Descriptors: " + ", ".join(descriptors),
        "Matchers:    " + ", ".join(m.value for m in MatcherType),
        "Selectors:   " + ", ".join(s.value for s in SelectorType),
    ]


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logging(level=log_level)

    config = get_config(args.config)
    if not validate_config(config):
        return 1

    if args.list:
        for line in list_algorithms():
            print(line)

    status = 0
    if args.check:
        try:
            detector = DetectorType.parse(args.check[0])
            descriptor = DescriptorType.parse(args.check[1])
        except ValueError as e:
            LOGGER.error("%s", e)
            return 2
        ok = is_compatible(detector, descriptor)
        print(f"{detector.value} + {descriptor.value}: {'ok' if ok else 'incompatible'}")
        status = 0 if ok else 1

    if args.save_config and not save_config(config, args.save_config):
        return 1

    return status


if __name__ == "__main__":
    sys.exit(main())
