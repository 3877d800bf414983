"""Config loader tests."""

import json
import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from deckflow.config import load_config


class TestConfig(unittest.TestCase):
    def _write_config(self, payload) -> Path:
        temp_dir = Path(tempfile.mkdtemp())
        path = temp_dir / "deckflow.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_defaults(self) -> None:
        config = load_config()
        self.assertEqual(config.max_upload_bytes, 100 * 1024 * 1024)
        self.assertEqual(config.allowed_extensions, [".pptx"])
        self.assertEqual(config.fallback_title, "Untitled Slide")
        self.assertEqual(config.autoplay_interval_seconds, 5.0)
        self.assertEqual(config.gallery_max_images, 4)
        self.assertEqual(config.parse_workers, 1)

    def test_overrides_from_file(self) -> None:
        path = self._write_config({"parse_workers": 4, "fallback_title": "Slide"})
        config = load_config(path)
        self.assertEqual(config.parse_workers, 4)
        self.assertEqual(config.fallback_title, "Slide")
        self.assertEqual(config.runs_dir, "runs")

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config(Path(tempfile.mkdtemp()) / "missing.json")

    def test_unknown_key_rejected(self) -> None:
        path = self._write_config({"not_a_setting": True})
        with self.assertRaises(ValidationError):
            load_config(path)

    def test_non_object_rejected(self) -> None:
        path = self._write_config([1, 2, 3])
        with self.assertRaises(ValueError):
            load_config(path)


if __name__ == "__main__":
    unittest.main()
