import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.keyword_fit import analyze_keyword_fit, normalize_keyword_text, score_job_terms, term_present  # noqa: E402
from app.features.meta_blocks import extract_meta_blocks  # noqa: E402

JOB_TEXT = (
    "QA Engineer. Requirements: Selenium, Jira, Python automation. "
    "Python automation experience required for regression testing."
)


class KeywordFitTests(unittest.TestCase):
    def test_found_and_missing_partition_the_job_terms(self):
        result = analyze_keyword_fit("Built Selenium suites and tracked bugs in Jira for regression testing.", JOB_TEXT)
        self.assertGreater(len(result.keywords_from_job), 0)
        self.assertEqual(
            sorted(result.keywords_found_in_resume + result.missing_keywords),
            sorted(result.keywords_from_job),
        )
        self.assertIn("python automation", result.missing_keywords)
        self.assertIn("regression testing", result.keywords_found_in_resume)
        self.assertEqual(result.high_impact_missing, result.missing_keywords[:10])
        self.assertTrue(0 < result.match_score < 100)

    def test_multi_word_terms_rank_first(self):
        terms = score_job_terms(JOB_TEXT)
        self.assertEqual(terms[0].term.count(" ") >= 1, True)
        self.assertLessEqual(len(terms), 40)

    def test_aliases_and_normalization(self):
        self.assertEqual(normalize_keyword_text("CI/CD, Node.js & C#!"), "ci/cd node js c#")
        terms = [item.term for item in score_job_terms("CI/CD pipelines. Maintain CI/CD pipelines.")]
        self.assertIn("cicd pipelines", terms)

    def test_term_presence(self):
        self.assertTrue(term_present("built selenium suites", "selenium"))
        self.assertFalse(term_present("unseleniumlike suites", "selenium"))
        self.assertTrue(term_present("python automation at scale", "python automation"))

    def test_empty_job_text(self):
        result = analyze_keyword_fit("anything", "")
        self.assertEqual(result.match_score, 0)
        self.assertEqual(result.keywords_from_job, [])


class MetaBlockTests(unittest.TestCase):
    def test_games_shipped_and_metrics(self):
        text = "\n".join(
            [
                "Games shipped: Title A, Title B",
                "Reduced crash rate by 35%",
                "Improved load time 3x",
                "Shipped 20% faster Jan 2021 release",
                "Phone 555-123-4567 | 100%",
                "Reduced crash rate by 35%",
                "Plain sentence without numbers",
            ]
        )
        blocks = extract_meta_blocks(text)
        self.assertEqual(blocks.games_shipped, ["Games shipped: Title A, Title B"])
        self.assertEqual(blocks.metrics, ["Reduced crash rate by 35%", "Improved load time 3x"])

    def test_long_lines_are_not_metrics(self):
        line = "Reduced crash rate by 35% " + "across many different platforms and titles " * 3
        self.assertEqual(extract_meta_blocks(line).metrics, [])


if __name__ == "__main__":
    unittest.main()
