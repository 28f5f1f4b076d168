"""
Tests for the command-line entry point.
"""

import json
import os
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from feature_matching.main import list_algorithms, main


class TestMain(unittest.TestCase):
    """Command-line flags."""

    def test_list(self):
        lines = list_algorithms()
        self.assertTrue(lines[0].startswith("Detectors:"))
        self.assertIn("SHITOMASI", lines[0])
        self.assertIn("MAT_FLANN", lines[2])
        self.assertEqual(main(["--list"]), 0)

    def test_check(self):
        self.assertEqual(main(["--check", "AKAZE", "AKAZE"]), 0)
        self.assertEqual(main(["--check", "FAST", "AKAZE"]), 1)
        self.assertEqual(main(["--check", "SURF", "ORB"]), 2)

    def test_save_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = os.path.join(tmp, "in.json")
            target = os.path.join(tmp, "out.json")
            with open(source, "w") as f:
                json.dump({"fast_threshold": 20}, f)
            self.assertEqual(main(["--config", source, "--save-config", target]), 0)
            with open(target) as f:
                self.assertEqual(json.load(f)["fast_threshold"], 20)

    def test_invalid_config_fails(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = os.path.join(tmp, "in.json")
            with open(source, "w") as f:
                json.dump({"knn_k": 1}, f)
            self.assertEqual(main(["--config", source]), 1)

    def test_wrongly_typed_config_fails(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = os.path.join(tmp, "in.json")
            with open(source, "w") as f:
                json.dump({"block_size": "x"}, f)
            self.assertEqual(main(["--config", source]), 1)


if __name__ == "__main__":
    unittest.main()
