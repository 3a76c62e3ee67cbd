"""
Test the application tracking pipeline.
"""
from datetime import datetime, timedelta
from unittest.mock import patch

from fastapi import status
from fastapi.testclient import TestClient

from backend.main import app


class TestApplicationTrackingPipeline:
    """Test the complete application tracking pipeline."""

    def test_create_application_success(self, test_client, auth_headers, sample_application):
        """Test successful job application creation."""
        response = test_client.post("/api/applications/", json=sample_application, headers=auth_headers)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["job_title"] == sample_application["job_title"]
        assert data["company_name"] == sample_application["company_name"]
        assert data["status"] == "applied"
        assert data["salary_min"] == 120000
        assert "id" in data
        assert "created_at" in data

    def test_status_defaults_to_applied(self, test_client, auth_headers):
        response = test_client.post(
            "/api/applications/", json={"company_name": "Acme", "job_title": "SRE"}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["status"] == "applied"

    def test_invalid_status_rejected(self, test_client, auth_headers):
        response = test_client.post(
            "/api/applications/",
            json={"company_name": "Acme", "job_title": "SRE", "status": "interviewing"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_inverted_salary_range_rejected(self, test_client, auth_headers):
        response = test_client.post(
            "/api/applications/",
            json={"company_name": "Acme", "job_title": "SRE", "salary_min": 200, "salary_max": 100},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_requires_authentication(self, test_client, sample_application):
        response = test_client.post("/api/applications/", json=sample_application)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_get_user_applications_newest_first(self, test_client, auth_headers):
        """Test retrieving user's job applications."""
        for company in ["Company A", "Company B", "Company C"]:
            response = test_client.post(
                "/api/applications/", json={"company_name": company, "job_title": "Dev"}, headers=auth_headers
            )
            assert response.status_code == status.HTTP_201_CREATED

        response = test_client.get("/api/applications/", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert [app["company_name"] for app in response.json()] == ["Company C", "Company B", "Company A"]

    def test_filter_and_search(self, test_client, auth_headers):
        apps = [
            {"company_name": "Google", "job_title": "Backend Engineer", "status": "interview"},
            {"company_name": "Stripe", "job_title": "Backend Engineer", "status": "applied"},
            {"company_name": "Netflix", "job_title": "Data Scientist", "status": "interview"},
        ]
        for app_data in apps:
            test_client.post("/api/applications/", json=app_data, headers=auth_headers)

        by_status = test_client.get("/api/applications/", params={"status": "interview"}, headers=auth_headers)
        by_search = test_client.get("/api/applications/", params={"q": "backend"}, headers=auth_headers)

        assert {app["company_name"] for app in by_status.json()} == {"Google", "Netflix"}
        assert {app["company_name"] for app in by_search.json()} == {"Google", "Stripe"}

    def test_board_groups_by_status(self, test_client, auth_headers):
        test_client.post("/api/applications/", json={"company_name": "A", "job_title": "T", "status": "offer"},
                         headers=auth_headers)
        test_client.post("/api/applications/", json={"company_name": "B", "job_title": "T"}, headers=auth_headers)

        response = test_client.get("/api/applications/board", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 2
        assert list(data["columns"]) == ["applied", "referred", "screening", "interview", "offer", "rejected"]
        assert [app["company_name"] for app in data["columns"]["offer"]] == ["A"]
        assert [app["company_name"] for app in data["columns"]["applied"]] == ["B"]
        assert data["columns"]["rejected"] == []

    def test_get_specific_application(self, test_client, auth_headers, sample_application):
        """Test retrieving a specific job application."""
        app_id = test_client.post("/api/applications/", json=sample_application, headers=auth_headers).json()["id"]

        response = test_client.get(f"/api/applications/{app_id}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == app_id

    def test_get_nonexistent_application(self, test_client, auth_headers):
        """Test retrieving a non-existent application."""
        response = test_client.get("/api/applications/99999", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "not found" in response.json()["error"].lower()

    def test_full_replace_update(self, test_client, auth_headers, sample_application):
        app_id = test_client.post("/api/applications/", json=sample_application, headers=auth_headers).json()["id"]

        response = test_client.put(
            f"/api/applications/{app_id}",
            json={"company_name": "Renamed Inc", "job_title": "Staff Engineer", "status": "screening"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["company_name"] == "Renamed Inc"
        assert data["status"] == "screening"
        # Omitted optional fields are cleared by a full replace
        assert data["location"] is None
        assert data["notes"] is None

    def test_update_application_status(self, test_client, auth_headers, sample_application):
        """Test moving an application to another column."""
        app_id = test_client.post("/api/applications/", json=sample_application, headers=auth_headers).json()["id"]

        response = test_client.patch(
            f"/api/applications/{app_id}/status", json={"status": "interview"}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "interview"
        assert data["notes"] == sample_application["notes"]

    def test_delete_application(self, test_client, auth_headers, sample_application):
        app_id = test_client.post("/api/applications/", json=sample_application, headers=auth_headers).json()["id"]

        response = test_client.delete(f"/api/applications/{app_id}", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == app_id

        response = test_client.get(f"/api/applications/{app_id}", headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_users_cannot_see_each_others_applications(self, test_client, auth_headers, other_user,
                                                        sample_application):
        app_id = test_client.post("/api/applications/", json=sample_application, headers=auth_headers).json()["id"]
        _, other_headers = other_user

        assert test_client.get(f"/api/applications/{app_id}", headers=other_headers).status_code == 404
        assert test_client.delete(f"/api/applications/{app_id}", headers=other_headers).status_code == 404
        assert test_client.patch(f"/api/applications/{app_id}/status", json={"status": "offer"},
                                 headers=other_headers).status_code == 404
        assert test_client.get("/api/applications/", headers=other_headers).json() == []


class TestInterviewReminders:
    """Reminder timers follow the application's lifecycle."""

    def interview_payload(self, when):
        return {
            "company_name": "Acme",
            "job_title": "SRE",
            "status": "interview",
            "interview_date": when.strftime("%Y-%m-%d"),
            "interview_time": when.strftime("%H:%M"),
        }

    def test_create_schedules_and_delete_cancels(self, test_client, auth_headers, reminder_scheduler):
        when = datetime.now() + timedelta(days=3)
        app_id = test_client.post(
            "/api/applications/", json=self.interview_payload(when), headers=auth_headers
        ).json()["id"]

        assert reminder_scheduler.pending(app_id) == 2

        test_client.delete(f"/api/applications/{app_id}", headers=auth_headers)

        assert reminder_scheduler.pending(app_id) == 0

    def test_update_removing_interview_cancels_reminders(self, test_client, auth_headers, reminder_scheduler):
        when = datetime.now() + timedelta(days=3)
        app_id = test_client.post(
            "/api/applications/", json=self.interview_payload(when), headers=auth_headers
        ).json()["id"]

        test_client.put(
            f"/api/applications/{app_id}", json={"company_name": "Acme", "job_title": "SRE"}, headers=auth_headers
        )

        assert reminder_scheduler.pending(app_id) == 0

    def test_status_change_rearms_reminders(self, test_client, auth_headers, reminder_scheduler):
        when = datetime.now() + timedelta(days=3)
        app_id = test_client.post(
            "/api/applications/", json=self.interview_payload(when), headers=auth_headers
        ).json()["id"]
        reminder_scheduler.cancel(app_id)

        response = test_client.patch(
            f"/api/applications/{app_id}/status", json={"status": "offer"}, headers=auth_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert reminder_scheduler.pending(app_id) == 2

    def test_notifications_endpoint(self, test_client, registered_user, reminder_scheduler):
        user_id, headers = registered_user
        notification = reminder_scheduler.feed.push(user_id, "Interview Reminder", "Soon", application_id=1)

        response = test_client.get("/api/notifications/", headers=headers)
        assert response.status_code == status.HTTP_200_OK
        assert [n["id"] for n in response.json()] == [notification.id]

        response = test_client.post(f"/api/notifications/{notification.id}/seen", headers=headers)
        assert response.json()["seen"] is True

        response = test_client.delete("/api/notifications/", headers=headers)
        assert response.json() == {"cleared": 1}
        assert test_client.get("/api/notifications/", headers=headers).json() == []

    def test_unknown_notification(self, test_client, auth_headers):
        response = test_client.post("/api/notifications/nope/seen", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestUnexpectedErrors:
    """Failures outside the HTTP layer keep the {"error", "details"} body."""

    def test_database_failure_is_reported_as_json(self, test_client, auth_headers):
        client = TestClient(app, raise_server_exceptions=False)

        with patch(
            "backend.services.application_tracker.get_applications_for_user",
            side_effect=RuntimeError("database is locked"),
        ):
            response = client.get("/api/applications/", headers=auth_headers)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "An unexpected error occurred", "details": "database is locked"}
