from __future__ import annotations

import os
import unittest
from pathlib import Path
from unittest import mock

from ccd.paths import normalize_path


class NormalizePathTests(unittest.TestCase):
    def test_collapses_dots_separators_and_trailing_slash(self) -> None:
        self.assertEqual(normalize_path("/srv//app/./logs/../"), "/srv/app")
        self.assertEqual(normalize_path("/"), "/")

    def test_expands_home_and_anchors_relative_paths(self) -> None:
        with mock.patch.dict(os.environ, {"HOME": "/home/someone"}):
            self.assertEqual(normalize_path("~/work"), "/home/someone/work")
        with mock.patch("os.getcwd", return_value="/var/www"):
            self.assertEqual(normalize_path("site"), "/var/www/site")

    def test_accepts_path_objects(self) -> None:
        self.assertEqual(normalize_path(Path("/tmp/x/")), "/tmp/x")

    def test_empty_path_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            normalize_path("")


if __name__ == "__main__":
    unittest.main()
