"""
Tests for keypoint and match drawing.
"""

import os
import sys
import unittest

import cv2
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from feature_matching.visualization import draw_keypoints, draw_matches


class TestDrawing(unittest.TestCase):

    def setUp(self):
        self.image = np.zeros((50, 60), dtype=np.uint8)
        self.keypoints = [cv2.KeyPoint(x=20.0, y=25.0, size=8.0)]

    def test_draw_keypoints(self):
        drawn = draw_keypoints(self.image, self.keypoints)
        self.assertEqual(drawn.shape, (50, 60, 3))
        self.assertGreater(int(drawn.sum()), 0)
        self.assertEqual(int(self.image.sum()), 0)

    def test_draw_keypoints_empty_image(self):
        with self.assertRaises(ValueError):
            draw_keypoints(None, self.keypoints)

    def test_draw_matches(self):
        pair = draw_matches(self.image, self.keypoints, self.image, self.keypoints, [cv2.DMatch(0, 0, 0.0)])
        self.assertEqual(pair.shape, (50, 120, 3))


if __name__ == "__main__":
    unittest.main()
