"""
Tests for registration, login, profile and token validation.
"""
from datetime import timedelta

from app.core.security import create_access_token
from app.models.points import PointsAccount

from tests.conftest import TEST_PASSWORD, auth_headers

REGISTER_PAYLOAD = {
    "email": "new.student@example.com",
    "username": "new_student",
    "password": "strongpass",
    "full_name": "New Student",
    "role": "student",
    "grade_level": 7,
    "school_name": "Village School",
}


class TestRegister:
    """POST /api/auth/register"""

    def test_register_student(self, client, db):
        response = client.post("/api/auth/register", json=REGISTER_PAYLOAD)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        assert body["user"]["username"] == "new_student"
        assert body["user"]["role"] == "student"
        assert body["token"]
        account = db.query(PointsAccount).filter(PointsAccount.user_id == body["user"]["id"]).one()
        assert account.total_points == 0
        assert account.current_level == 1

    def test_register_teacher_has_no_points_account(self, client, db):
        payload = dict(REGISTER_PAYLOAD, role="teacher", grade_level=None)
        response = client.post("/api/auth/register", json=payload)

        assert response.status_code == 201
        assert db.query(PointsAccount).count() == 0

    def test_admin_cannot_self_register(self, client):
        response = client.post("/api/auth/register", json=dict(REGISTER_PAYLOAD, role="admin"))

        assert response.status_code == 422

    def test_duplicate_email(self, client, student):
        payload = dict(REGISTER_PAYLOAD, email=student.email)
        response = client.post("/api/auth/register", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "User with this email already exists"

    def test_duplicate_username(self, client, student):
        payload = dict(REGISTER_PAYLOAD, username=student.username)
        response = client.post("/api/auth/register", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "Username already taken"

    def test_invalid_fields(self, client):
        payload = dict(REGISTER_PAYLOAD, username="no spaces!", password="123", grade_level=3)
        response = client.post("/api/auth/register", json=payload)

        assert response.status_code == 422
        fields = {error["loc"][-1] for error in response.json()["detail"]}
        assert {"username", "password", "grade_level"} <= fields


class TestLogin:
    """POST /api/auth/login"""

    def test_login(self, client, student):
        response = client.post("/api/auth/login", json={"email": student.email, "password": TEST_PASSWORD})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["user"]["id"] == student.id
        assert body["token"]

    def test_wrong_password(self, client, student):
        response = client.post("/api/auth/login", json={"email": student.email, "password": "wrong-pass"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_unknown_email(self, client):
        response = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "whatever"})

        assert response.status_code == 401


class TestTokens:
    """Bearer token handling."""

    def test_missing_token(self, client):
        response = client.get("/api/auth/profile")

        assert response.status_code == 401
        assert response.json()["detail"] == "Access denied. No token provided."

    def test_expired_token(self, client, student):
        token = create_access_token(student.id, expires_delta=timedelta(minutes=-5))
        response = client.get("/api/auth/validate", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Token expired."

    def test_garbage_token(self, client):
        response = client.get("/api/auth/validate", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token."

    def test_token_for_deleted_user(self, client):
        token = create_access_token(9999)
        response = client.get("/api/auth/validate", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token. User not found."

    def test_inactive_user(self, client, make_user):
        user = make_user("student", is_active=False)
        response = client.get("/api/auth/validate", headers=auth_headers(user))

        assert response.status_code == 401

    def test_validate(self, client, student, student_headers):
        response = client.get("/api/auth/validate", headers=student_headers)

        assert response.status_code == 200
        assert response.json() == {
            "valid": True,
            "user": {"id": student.id, "username": "alice", "email": student.email, "role": "student"},
        }


class TestProfile:
    """GET and PUT /api/auth/profile"""

    def test_read_profile(self, client, student, student_headers):
        response = client.get("/api/auth/profile", headers=student_headers)

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["full_name"] == "Alice Student"
        assert user["grade_level"] == 8

    def test_update_profile(self, client, student_headers):
        response = client.put(
            "/api/auth/profile",
            headers=student_headers,
            json={"full_name": "Alice Renamed", "preferred_language": "hindi"},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Profile updated successfully"}

        user = client.get("/api/auth/profile", headers=student_headers).json()["user"]
        assert user["full_name"] == "Alice Renamed"
        assert user["preferred_language"] == "hindi"
        assert user["grade_level"] == 8

    def test_update_rejects_unknown_language(self, client, student_headers):
        response = client.put("/api/auth/profile", headers=student_headers, json={"preferred_language": "klingon"})

        assert response.status_code == 422


class TestHealth:
    """Unauthenticated health routes."""

    def test_root(self, client):
        body = client.get("/").json()

        assert body["status"] == "healthy"
        assert body["message"] == "Rural STEM Learning Platform"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
