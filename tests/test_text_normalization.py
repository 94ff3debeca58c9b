import time
import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.normalize.classifier import (  # noqa: E402
    MAX_CONTACT_LINE_CHARS,
    accept_bullet,
    extract_date_range,
    field_label,
    is_date_range_line,
    is_experience_heading,
    is_marked_bullet,
    is_terminal_heading,
    rejection_reason,
    strip_bullet_marker,
    strip_field_label,
)
from app.normalize.text import (  # noqa: E402
    dedupe_key,
    normalize_job_text,
    normalize_resume_text,
    normalized_lines,
)


class ResumeTextNormalizationTests(unittest.TestCase):
    def test_line_endings_and_whitespace_are_canonical(self):
        self.assertEqual(normalize_resume_text("a\r\nb\rc"), "a\nb\nc")
        self.assertEqual(normalize_resume_text("Line  with\ttabs \n\n\n\nNext"), "Line with tabs\n\nNext")
        self.assertEqual(normalize_resume_text("\ufeffHello\u00a0World"), "Hello World")

    def test_non_string_input_is_coerced(self):
        self.assertEqual(normalize_resume_text(None), "")
        self.assertEqual(normalize_resume_text(42), "42")
        self.assertEqual(normalize_job_text("  Senior\n\nQA   Engineer "), "Senior QA Engineer")

    def test_normalized_lines_skip_blank_lines_and_flag_indentation(self):
        lines = normalized_lines("First line\n\n  continued here")
        self.assertEqual([line.text for line in lines], ["First line", "continued here"])
        self.assertEqual([line.indented for line in lines], [False, True])
        self.assertEqual(lines[1].index, 2)

    def test_dedupe_key_ignores_case_and_spacing(self):
        self.assertEqual(dedupe_key("Led  the Team "), dedupe_key("led the team"))


class LineClassifierTests(unittest.TestCase):
    def test_date_ranges(self):
        self.assertTrue(is_date_range_line("Jan 2021 – Dec 2022"))
        self.assertTrue(is_date_range_line("Sept. 2019 - Present"))
        self.assertTrue(is_date_range_line("QA Tester, March 2018 — current"))
        self.assertFalse(is_date_range_line("2019 - 2022"))
        self.assertFalse(is_date_range_line("Shipped in March"))
        self.assertEqual(
            extract_date_range("ABC Studios — QA Lead (Jan 2021 – Dec 2022)"),
            "Jan 2021 – Dec 2022",
        )

    def test_bullet_markers(self):
        self.assertTrue(is_marked_bullet("• Led the team"))
        self.assertTrue(is_marked_bullet("- Built tools"))
        self.assertTrue(is_marked_bullet("1. Shipped the launcher"))
        self.assertFalse(is_marked_bullet("Led the team"))
        self.assertFalse(is_marked_bullet("•"))
        self.assertEqual(strip_bullet_marker("• Led the team"), "Led the team")
        self.assertEqual(strip_bullet_marker("2) Wrote test plans"), "Wrote test plans")

    def test_field_labels(self):
        self.assertEqual(field_label("Location: Toronto, ON"), "location")
        self.assertEqual(strip_field_label("Company: Riot Games"), "Riot Games")
        self.assertIsNone(field_label("Led QA for Riot Games"))

    def test_headings(self):
        self.assertTrue(is_experience_heading("PROFESSIONAL EXPERIENCE"))
        self.assertTrue(is_experience_heading("Work Experience:"))
        self.assertFalse(is_experience_heading("Gained experience testing consoles and handhelds"))
        self.assertTrue(is_terminal_heading("Education"))
        self.assertTrue(is_terminal_heading("Skills & Tools"))
        self.assertFalse(is_terminal_heading("Skills were used to test things."))
        self.assertFalse(is_terminal_heading("skills in python testing"))

    def test_rejection_reasons(self):
        self.assertEqual(rejection_reason("jane.doe@example.com"), "email")
        self.assertEqual(rejection_reason("linkedin.com/in/janedoe"), "url")
        self.assertEqual(rejection_reason("Phone: 555-123-4567"), "contact_label")
        self.assertEqual(rejection_reason("(555) 123-4567"), "phone")
        self.assertEqual(rejection_reason("References available upon request"), "references")
        self.assertEqual(rejection_reason("Jane Doe"), "person_name")
        self.assertEqual(rejection_reason("123 Main Street"), "address")
        self.assertEqual(rejection_reason("Toronto, ON M5V 2T6"), "address")
        self.assertIsNone(rejection_reason("Riot Games"))
        self.assertIsNone(rejection_reason("Jan 2019 - Dec 2022"))

    def test_year_ranges_are_not_phone_numbers(self):
        self.assertIsNone(rejection_reason("Regression tested every build 2019-2022 across platforms"))
        self.assertIsNone(rejection_reason("Owned certification passes 01/2020 - 03/2022 for console SKUs"))
        self.assertEqual(rejection_reason("Call the lab at 416 555 0199 for build access"), "phone")

    def test_contact_rules_skip_long_prose_lines(self):
        line = "Wrote test plans for every milestone and shared them with producers. " * 4
        self.assertGreaterEqual(len(line), MAX_CONTACT_LINE_CHARS)
        self.assertIsNone(rejection_reason(line + "qa@example.com"))

    def test_pathological_lines_are_classified_quickly(self):
        for line in ("a." * 30000, "a-" * 15000, "a." * 100 + "@", "1." * 20000):
            started = time.perf_counter()
            rejection_reason(line)
            accept_bullet(line, 15)
            self.assertLess(time.perf_counter() - started, 1.0)

    def test_accept_bullet_is_the_single_gatekeeper(self):
        self.assertFalse(accept_bullet("Helped team.", 15))
        self.assertFalse(accept_bullet("Skills", 1))
        self.assertFalse(accept_bullet("Contact me at jane.doe@example.com for details", 15))
        self.assertTrue(accept_bullet("Reduced crash rate by 30% across 4 titles", 15))


if __name__ == "__main__":
    unittest.main()
