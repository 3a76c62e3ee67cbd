"""
Test the pasted job posting parser pipeline.
"""
import json

from fastapi import status

from backend.config.settings import get_settings
from backend.services.gemini_service import GenerationError

GOOGLE_POSTING = (
    "Google is hiring a Backend Engineer in Bangalore. Salary 10-15 LPA. "
    "You will build distributed systems in Go and Python. Apply at https://careers.google.com/jobs/123"
)


class TestParseJobText:
    """POST /api/parse-job-text"""

    def test_short_text_rejected_without_model_call(self, test_client, mock_gemini):
        response = test_client.post("/api/parse-job-text", json={"text": "too short"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "at least 50 characters" in response.json()["error"]
        mock_gemini.assert_not_called()

    def test_whitespace_padding_does_not_count(self, test_client, mock_gemini):
        response = test_client.post("/api/parse-job-text", json={"text": "  short  " + " " * 100})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_gemini.assert_not_called()

    def test_missing_text_rejected(self, test_client, mock_gemini):
        response = test_client.post("/api/parse-job-text", json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_extracts_form_fields(self, test_client, mock_gemini):
        reply = {
            "company_name": "Google",
            "job_title": "Backend Engineer",
            "location": "Bangalore",
            "salary_min": "10 LPA",
            "salary_max": "15 LPA",
            "job_description": "Build distributed systems.",
            "requirements": ["Go", "Python"],
            "benefits": None,
            "application_url": "https://careers.google.com/jobs/123",
        }
        mock_gemini.return_value = "```json\n" + json.dumps(reply) + "\n```"

        response = test_client.post("/api/parse-job-text", json={"text": GOOGLE_POSTING})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "company_name": "Google",
            "job_title": "Backend Engineer",
            "location": "Bangalore",
            "salary_min": 1000000,
            "salary_max": 1500000,
            "application_url": "https://careers.google.com/jobs/123",
            "notes": "Build distributed systems.\n\nRequirements:\nGo\nPython",
        }
        prompt = mock_gemini.call_args[0][0]
        assert GOOGLE_POSTING in prompt

    def test_missing_fields_come_back_null(self, test_client, mock_gemini):
        mock_gemini.return_value = '{"company_name": "Acme"}'

        response = test_client.post("/api/parse-job-text", json={"text": GOOGLE_POSTING})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["company_name"] == "Acme"
        assert data["salary_min"] is None
        assert data["notes"] is None

    def test_unparseable_reply(self, test_client, mock_gemini):
        mock_gemini.return_value = "Sorry, I cannot help with that."

        response = test_client.post("/api/parse-job-text", json={"text": GOOGLE_POSTING})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "Failed to parse AI response. Please try again."}

    def test_model_failure(self, test_client, mock_gemini):
        mock_gemini.side_effect = GenerationError("backend unavailable")

        response = test_client.post("/api/parse-job-text", json={"text": GOOGLE_POSTING})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "AI processing failed. Please try again."}

    def test_missing_api_key(self, test_client, mock_gemini, monkeypatch):
        monkeypatch.setattr(get_settings(), "gemini_api_key", None)

        response = test_client.post("/api/parse-job-text", json={"text": GOOGLE_POSTING})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "GEMINI_API_KEY is not configured"}
        mock_gemini.assert_not_called()
