import os
import tempfile
import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.scoring import (  # noqa: E402
    clear_scoring_config_cache,
    get_scoring_config,
    get_scoring_float,
    get_scoring_int,
    get_scoring_value,
)


class ScoringConfigTests(unittest.TestCase):
    def tearDown(self):
        os.environ.pop("SCORING_CONFIG_PATH", None)
        clear_scoring_config_cache()

    def test_loader_and_value_lookup(self):
        config = get_scoring_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_scoring_value("verb_strength.base_score"), 62)
        self.assertEqual(get_scoring_int("extraction.min_length.explicit_bullet", 0), 15)
        self.assertEqual(get_scoring_float("suggestions.weak_overlap_threshold", 0.0), 0.12)

    def test_missing_paths_fall_back_to_default(self):
        self.assertEqual(get_scoring_value("verb_strength.unknown", "x"), "x")
        self.assertEqual(get_scoring_value("", 5), 5)
        self.assertEqual(get_scoring_int("verb_strength.base_score.deeper", 7), 7)

    def test_override_path(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "scoring.yaml"
            path.write_text("verb_strength:\n  base_score: 50\n", encoding="utf-8")
            os.environ["SCORING_CONFIG_PATH"] = str(path)
            clear_scoring_config_cache()
            self.assertEqual(get_scoring_int("verb_strength.base_score", 62), 50)
            self.assertEqual(get_scoring_int("verb_strength.penalties.no_verb", 4), 4)

    def test_missing_or_invalid_file_raises(self):
        with tempfile.TemporaryDirectory() as tmp:
            os.environ["SCORING_CONFIG_PATH"] = str(Path(tmp) / "missing.yaml")
            clear_scoring_config_cache()
            with self.assertRaises(RuntimeError):
                get_scoring_config()

            bad = Path(tmp) / "bad.yaml"
            bad.write_text("- just\n- a list\n", encoding="utf-8")
            os.environ["SCORING_CONFIG_PATH"] = str(bad)
            clear_scoring_config_cache()
            with self.assertRaises(RuntimeError):
                get_scoring_config()


if __name__ == "__main__":
    unittest.main()
