import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.verb_strength import VerbStrengthWeights, _label_for, compute_verb_strength, detect_verb  # noqa: E402


class VerbStrengthTests(unittest.TestCase):
    def test_strong_bullet_is_clamped_to_100(self):
        result = compute_verb_strength("Led automation of the release pipeline, reducing regression time by 40%")
        self.assertEqual(result.score, 100)
        self.assertEqual(result.label, "Strong")
        self.assertEqual(result.detected_verb, "led")
        self.assertEqual(result.reasons, ['Strong verb ("led")', "Clear scope/system", "Quantified impact"])
        self.assertIsNone(result.suggestion)

    def test_solid_verb_with_scope_and_metric(self):
        result = compute_verb_strength(
            "• Tested nightly builds across three platforms, filing 120+ defects per release."
        )
        self.assertEqual(result.detected_verb, "tested")
        self.assertEqual(result.score, 94)
        self.assertEqual(result.label, "Strong")

    def test_passive_opener_is_weak(self):
        result = compute_verb_strength("Was responsible for testing builds")
        self.assertEqual(result.score, 40)
        self.assertEqual(result.label, "Weak")
        self.assertEqual(
            result.reasons,
            ['Weak opener ("was responsible for")', "Passive/indirect ownership", "No clear action verb early"],
        )
        self.assertTrue(result.suggestion.startswith("Why: Weak opener"))

    def test_weak_opener_and_vague_wording(self):
        result = compute_verb_strength("Helped with various things as needed")
        self.assertEqual(result.score, 52)
        self.assertEqual(result.label, "OK")
        self.assertEqual(result.reasons[:2], ['Weak opener ("helped")', "Vague wording"])

    def test_empty_string(self):
        result = compute_verb_strength("")
        self.assertEqual(result.score, 58)
        self.assertEqual(result.label, "OK")
        self.assertIsNone(result.detected_verb)
        self.assertEqual(result.reasons, ["No clear action verb early"])

    def test_known_verb_beats_earlier_generic_ed_word(self):
        words = "partnered with designers and optimized load times".split()
        self.assertEqual(detect_verb(words), ("optimized", "strong"))
        self.assertEqual(detect_verb(["partnered", "with", "designers"]), ("partnered", "generic"))
        self.assertEqual(detect_verb(["the", "team"]), (None, None))

    def test_score_bounds_for_arbitrary_text(self):
        samples = ["", "   ", "\x00\x01", "%%%%", "99999 99999 $1 10x 5ms", "etc " * 200, "led " * 50]
        for text in samples:
            result = compute_verb_strength(text)
            self.assertGreaterEqual(result.score, 0)
            self.assertLessEqual(result.score, 100)
            self.assertLessEqual(len(result.reasons), 3)

    def test_label_thresholds_are_inclusive_lower_bounds(self):
        weights = VerbStrengthWeights()
        self.assertEqual(_label_for(49, weights), "Weak")
        self.assertEqual(_label_for(50, weights), "OK")
        self.assertEqual(_label_for(79, weights), "OK")
        self.assertEqual(_label_for(80, weights), "Strong")

    def test_scores_on_either_side_of_each_threshold(self):
        cases = [
            ("Responsible for nightly build checks", 48, "Weak"),
            ("The team was part of our launch", 50, "OK"),
            ("Led various playtests", 78, "OK"),
            ("Reviewed crash logs for 30 titles", 80, "Strong"),
        ]
        for text, score, label in cases:
            result = compute_verb_strength(text)
            self.assertEqual((result.score, result.label), (score, label), text)

    def test_custom_weights_change_thresholds(self):
        weights = VerbStrengthWeights(ok_threshold=10, strong_threshold=20)
        self.assertEqual(compute_verb_strength("Was responsible for testing builds", weights).label, "Strong")


if __name__ == "__main__":
    unittest.main()
