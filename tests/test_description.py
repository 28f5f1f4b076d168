"""
Tests for descriptor extraction.
"""

import os
import sys
import unittest
from unittest import mock

import cv2
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from feature_matching.description import (
    DescriptorFamily,
    DescriptorType,
    FeatureDescriptorFactory,
    check_compatibility,
    describe_keypoints,
    descriptor_family,
    is_compatible,
)
from feature_matching.detection import detect_keypoints
from feature_matching.utils import has_contrib

from test_detection import make_textured_image


class TestDescribeKeypoints(unittest.TestCase):
    """Descriptor sizes and types follow OpenCV's extractors."""

    @classmethod
    def setUpClass(cls):
        cls.image = make_textured_image()

    def describe(self, detector, descriptor):
        keypoints = detect_keypoints(self.image, detector).keypoints
        return describe_keypoints(keypoints, self.image, descriptor, detector_type=detector)

    def assert_descriptors(self, result, width, dtype):
        self.assertIsNotNone(result.descriptors)
        self.assertEqual(result.descriptors.shape[1], width)
        self.assertEqual(result.descriptors.dtype, dtype)
        self.assertEqual(result.descriptors.shape[0], len(result.keypoints))

    def test_orb(self):
        result = self.describe("ORB", "ORB")
        self.assert_descriptors(result, 32, np.uint8)
        self.assertEqual(result.family, DescriptorFamily.BINARY)

    def test_sift(self):
        result = self.describe("SIFT", "SIFT")
        self.assert_descriptors(result, 128, np.float32)
        self.assertEqual(result.family, DescriptorFamily.HOG)

    def test_brisk_on_fast_keypoints(self):
        result = self.describe("FAST", "BRISK")
        self.assert_descriptors(result, 64, np.uint8)

    def test_akaze(self):
        result = self.describe("AKAZE", "AKAZE")
        self.assert_descriptors(result, 61, np.uint8)

    def test_shi_tomasi_keypoints_with_sift(self):
        result = self.describe("SHITOMASI", "SIFT")
        self.assert_descriptors(result, 128, np.float32)
        self.assertGreaterEqual(result.elapsed, 0.0)

    @unittest.skipUnless(has_contrib(), "requires opencv-contrib-python")
    def test_brief(self):
        result = self.describe("FAST", "BRIEF")
        self.assert_descriptors(result, 32, np.uint8)

    @unittest.skipUnless(has_contrib(), "requires opencv-contrib-python")
    def test_freak(self):
        result = self.describe("FAST", "FREAK")
        self.assert_descriptors(result, 64, np.uint8)

    def test_empty_keypoints(self):
        result = describe_keypoints([], self.image, "ORB")
        self.assertIsNone(result.descriptors)
        self.assertEqual(result.keypoints, [])
        self.assertEqual(result.descriptor_type, "ORB")

    def test_empty_image_raises(self):
        with self.assertRaises(ValueError):
            describe_keypoints([cv2.KeyPoint(x=5.0, y=5.0, size=4.0)], None, "ORB")

    def test_rejects_incompatible_combination(self):
        keypoints = detect_keypoints(self.image, "FAST").keypoints
        with self.assertRaises(ValueError):
            describe_keypoints(keypoints, self.image, "AKAZE", detector_type="FAST")


class TestDescriptorHelpers(unittest.TestCase):

    def test_family(self):
        self.assertEqual(descriptor_family("SIFT"), DescriptorFamily.HOG)
        for name in ("BRISK", "BRIEF", "ORB", "FREAK", "AKAZE"):
            with self.subTest(descriptor=name):
                self.assertEqual(descriptor_family(name), DescriptorFamily.BINARY)

    def test_family_parse_accepts_tag(self):
        self.assertEqual(DescriptorFamily.parse("DES_BINARY"), DescriptorFamily.BINARY)
        self.assertEqual(DescriptorFamily.parse("hog"), DescriptorFamily.HOG)
        with self.assertRaises(ValueError):
            DescriptorFamily.parse("DES_FLOAT")

    def test_compatibility(self):
        self.assertTrue(is_compatible("AKAZE", "AKAZE"))
        self.assertTrue(is_compatible("FAST", "BRISK"))
        self.assertFalse(is_compatible("ORB", "AKAZE"))
        self.assertFalse(is_compatible("SIFT", "ORB"))
        with self.assertRaises(ValueError):
            check_compatibility("SHITOMASI", "AKAZE")

    def test_unknown_descriptor(self):
        with self.assertRaises(ValueError):
            DescriptorType.parse("SURF")

    def test_brisk_parameters(self):
        extractor = FeatureDescriptorFactory.create_extractor("BRISK")
        self.assertEqual(extractor.getThreshold(), 30)
        self.assertEqual(extractor.getOctaves(), 3)

    def test_missing_contrib_raises(self):
        with mock.patch("feature_matching.description.has_contrib", return_value=False):
            with self.assertRaises(RuntimeError):
                FeatureDescriptorFactory.create_extractor("FREAK")
            with self.assertRaises(RuntimeError):
                FeatureDescriptorFactory.create_extractor("BRIEF")


if __name__ == "__main__":
    unittest.main()
