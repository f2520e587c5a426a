"""
Tests for the student endpoints.
"""
import pytest

from tests.conftest import auth_headers


def submit(client, headers, **fields):
    payload = {"subject": "physics", "topic": "Mechanics", "completion_percentage": 100, "score": 85}
    payload.update(fields)
    return client.post("/api/students/progress", headers=headers, json=payload)


class TestProgressSubmission:
    """POST /api/students/progress"""

    def test_first_completion(self, client, student_headers, achievements):
        response = submit(client, student_headers, time_spent=240)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Progress updated successfully"
        assert body["pointsEarned"] == 30
        assert body["progress"]["created"] is True
        assert [a["name"] for a in body["newAchievements"]] == ["First Steps"]

        points = client.get("/api/students/points", headers=student_headers).json()
        assert points["total_points"] == 30
        assert points["subject_points"]["physics"] == 30
        assert points["daily_streak"] == 1

    def test_repeat_submission_keeps_best(self, client, student_headers, achievements):
        submit(client, student_headers, completion_percentage=90, score=95)
        response = submit(client, student_headers, completion_percentage=40, score=20)

        body = response.json()
        assert body["progress"]["attempts"] == 2
        assert body["progress"]["score"] == 95
        assert body["progress"]["completion_percentage"] == 90
        assert body["pointsEarned"] == -2
        assert body["newAchievements"] == []

    def test_invalid_subject(self, client, student_headers):
        response = submit(client, student_headers, subject="history")

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "Validation failed"
        assert response.json()["detail"]["details"][0]["field"] == "subject"

    @pytest.mark.parametrize("fields", [{"completion_percentage": 120}, {"score": -5}, {"topic": ""}])
    def test_out_of_range(self, client, student_headers, fields):
        assert submit(client, student_headers, **fields).status_code == 422

    def test_teacher_forbidden(self, client, teacher_headers):
        response = submit(client, teacher_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Insufficient permissions."


class TestStudentViews:
    """Dashboard, subjects, achievements and points."""

    def test_subjects_report_zeros(self, client, student_headers):
        response = client.get("/api/students/subjects", headers=student_headers)

        subjects = response.json()["subjects"]
        assert [s["name"] for s in subjects] == ["physics", "chemistry", "math", "biology"]
        assert all(s["progress"]["total_topics"] == 0 for s in subjects)
        assert subjects[2]["displayName"] == "Math"

    def test_subject_detail_lists_catalog_topics(self, client, student_headers):
        submit(client, student_headers, subject="chemistry", topic="Periodic Table", completion_percentage=60, score=70)

        body = client.get("/api/students/subjects/chemistry", headers=student_headers).json()

        assert body["subject"] == "chemistry"
        assert len(body["topics"]) == 8
        periodic = next(topic for topic in body["topics"] if topic["name"] == "Periodic Table")
        assert periodic["completion_percentage"] == 60
        assert periodic["attempts"] == 1
        assert body["progress"]["total_topics"] == 1

    def test_subject_detail_invalid_subject(self, client, student_headers):
        response = client.get("/api/students/subjects/history", headers=student_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid subject"

    def test_dashboard(self, client, student, student_headers, achievements):
        submit(client, student_headers)

        body = client.get("/api/students/dashboard", headers=student_headers).json()

        assert body["userPoints"]["total_points"] == 30
        assert body["leaderboardPosition"] == 1
        assert body["totalStudents"] == 1
        assert body["recentActivity"][0]["topic"] == "Mechanics"
        assert body["recentAchievements"][0]["name"] == "First Steps"

    def test_achievements_catalog(self, client, student_headers, achievements):
        submit(client, student_headers)

        body = client.get("/api/students/achievements", headers=student_headers).json()

        assert body["summary"] == {"earned": 1, "total": 8, "percentage": 13}
        assert body["achievements"][0]["earned"] is True

    def test_points_default_account(self, client, student_headers):
        body = client.get("/api/students/points", headers=student_headers).json()

        assert body["total_points"] == 0
        assert body["current_level"] == 1
        assert body["next_level_points"] == 100
        assert set(body["subject_points"]) == {"physics", "chemistry", "math", "biology"}


class TestLeaderboard:
    """GET /api/students/leaderboard"""

    def test_ranked_by_points(self, client, student, other_student, teacher_headers):
        submit(client, auth_headers(student), score=10, completion_percentage=10)
        submit(client, auth_headers(other_student), score=90, completion_percentage=100)

        body = client.get("/api/students/leaderboard", headers=teacher_headers).json()

        assert [row["username"] for row in body["leaderboard"]] == ["bob", "alice"]
        assert body["leaderboard"][0]["rank"] == 1

    def test_subject_filter_and_limit(self, client, student, other_student, student_headers):
        submit(client, auth_headers(student), subject="math", topic="Algebra")
        submit(client, auth_headers(other_student), subject="biology", topic="Genetics")

        body = client.get(
            "/api/students/leaderboard", headers=student_headers, params={"subject": "math", "limit": 1}
        ).json()

        assert len(body["leaderboard"]) == 1
        assert body["leaderboard"][0]["username"] == "alice"
        assert body["leaderboard"][0]["subject_points"] == 30

    def test_limit_bounds(self, client, student_headers):
        response = client.get("/api/students/leaderboard", headers=student_headers, params={"limit": 500})

        assert response.status_code == 422

    def test_invalid_subject(self, client, student_headers):
        response = client.get("/api/students/leaderboard", headers=student_headers, params={"subject": "art"})

        assert response.status_code == 400
