import dataclasses
import unittest
import os
from unittest.mock import patch

# Keep API tests deterministic and offline by default.
os.environ.setdefault("TOOLS_LLM_ENABLED", "0")

from fastapi.testclient import TestClient

from app.core.config import settings
from app.main import app

RESUME_TEXT = """Jane Doe
jane.doe@example.com

PROFESSIONAL EXPERIENCE
Pixel Forge — QA Analyst (Mar 2019 – Dec 2020)
• Helped with regression testing for live titles across mobile platforms
• Executed test plans for iOS and Android releases every sprint

EDUCATION
Seneca College — Game Design (Sept 2014 – Apr 2017)
"""

JOB_TEXT = "Scopely is hiring a QA Lead for Monopoly GO. Regression testing, Jira and test automation required."
GUARDRAIL = {"target_company": "Scopely", "target_products": ["Monopoly GO"]}


class ResumeApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_analyze_contract_shape(self):
        response = self.client.post(
            "/v1/resume/analyze",
            json={
                "resume_text": RESUME_TEXT,
                "job_text": JOB_TEXT,
                "guardrail_terms": GUARDRAIL,
                "missing_keywords": ["Scopely", "regression testing", "Jira", "test automation", "Android"],
            },
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()

        self.assertEqual(len(body["experience_jobs"]), 1)
        self.assertEqual(body["experience_jobs"][0]["company"], "Pixel Forge")
        self.assertEqual(len(body["bullets"]), 2)
        self.assertEqual(len(body["bullet_job_ids"]), 2)
        self.assertIn("Scopely", body["blocked_keywords"])
        self.assertNotIn("Scopely", body["missing_keywords"])
        self.assertEqual(body["debug"]["extraction_tier"], "experience")
        self.assertEqual(body["debug"]["keyword_source"], "request")
        self.assertGreater(len(body["rewrite_plan"]), 0)
        for item in body["rewrite_plan"]:
            self.assertIn("verb_strength", item)
            for keyword in item["suggested_keywords"]:
                self.assertNotIn("scopely", keyword.lower())

    def test_analyze_rejects_missing_text(self):
        response = self.client.post("/v1/resume/analyze", json={"resume_text": "", "job_text": JOB_TEXT})
        self.assertEqual(response.status_code, 400)
        self.assertIn("Missing resume_text", response.json()["detail"])

        response = self.client.post("/v1/resume/analyze", json={"resume_text": "short", "job_text": JOB_TEXT})
        self.assertEqual(response.status_code, 400)

    def test_rewrite_unavailable_without_llm(self):
        with patch.dict(os.environ, {"TOOLS_LLM_ENABLED": "0"}):
            response = self.client.post(
                "/v1/resume/rewrite-bullet",
                json={"original_bullet": "Helped with regression testing", "job_text": JOB_TEXT},
            )
        self.assertEqual(response.status_code, 503)

    def test_rewrite_with_generator(self):
        generated = {
            "rewrittenBullet": "Led regression testing for live titles in Jira, cutting escaped defects by 30%",
            "needsMoreInfo": False,
            "notes": [],
            "keywordHits": ["regression testing", "Jira"],
            "blockedKeywords": [],
        }
        with patch("app.services.rewrite_service.generate_rewrite", return_value=generated) as mocked:
            response = self.client.post(
                "/v1/resume/rewrite-bullet",
                json={
                    "original_bullet": "Helped with regression testing for live titles",
                    "job_text": JOB_TEXT,
                    "suggested_keywords": ["regression testing", "Jira", "Monopoly GO"],
                    "guardrail_terms": GUARDRAIL,
                },
            )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["accepted"])
        self.assertEqual(body["usable_keywords"], ["regression testing", "Jira"])
        self.assertEqual(body["blocked_keywords"], ["Monopoly GO"])
        self.assertIsNotNone(body["verb_strength_after"])
        payload = mocked.call_args.args[0]
        self.assertNotIn("Monopoly GO", payload["suggested_keywords"])

    def test_rewrite_validation(self):
        response = self.client.post("/v1/resume/rewrite-bullet", json={"original_bullet": ""})
        self.assertEqual(response.status_code, 422)

    def test_verb_strength(self):
        response = self.client.post("/v1/resume/verb-strength", json={"text": "Was responsible for testing builds"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["label"], "Weak")
        self.assertEqual(body["score"], 40)

    def test_sanitize_keywords(self):
        response = self.client.post(
            "/v1/resume/sanitize-keywords",
            json={
                "keywords": ["Scopely", "Monopoly GO live-ops", "live ops", "monopoly", "Scopely Inc", "test automation"],
                "guardrail_terms": GUARDRAIL,
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "usable_keywords": ["live ops", "test automation"],
                "blocked_keywords": ["Scopely", "Monopoly GO live-ops", "monopoly", "Scopely Inc"],
            },
        )

    def test_api_key_is_enforced_when_configured(self):
        with patch("app.core.security.settings", dataclasses.replace(settings, api_key="secret")):
            denied = self.client.post("/v1/resume/verb-strength", json={"text": "Led QA"})
            allowed = self.client.post(
                "/v1/resume/verb-strength", json={"text": "Led QA"}, headers={"X-API-Key": "secret"}
            )
        self.assertEqual(denied.status_code, 401)
        self.assertEqual(allowed.status_code, 200)


if __name__ == "__main__":
    unittest.main()
