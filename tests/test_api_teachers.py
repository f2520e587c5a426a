"""
Tests for teacher class management, analytics and admin achievements.
"""
from tests.conftest import auth_headers

CLASS_PAYLOAD = {"class_name": "Grade 8 Physics", "grade_level": 8, "subject": "physics"}


def create_class(client, headers, **fields):
    payload = dict(CLASS_PAYLOAD, **fields)
    response = client.post("/api/teachers/classes", headers=headers, json=payload)
    assert response.status_code == 201
    return response.json()["class"]


def enroll(client, headers, class_id, student_id):
    return client.post(
        f"/api/teachers/classes/{class_id}/students", headers=headers, json={"student_id": student_id}
    )


def record(client, student, **fields):
    payload = {"subject": "physics", "topic": "Light", "completion_percentage": 100, "score": 80, "time_spent": 600}
    payload.update(fields)
    return client.post("/api/students/progress", headers=auth_headers(student), json=payload)


class TestClasses:
    """Class creation, rosters and ownership."""

    def test_create_and_list(self, client, teacher_headers):
        created = create_class(client, teacher_headers, description="Morning batch")

        assert created["class_name"] == "Grade 8 Physics"
        assert created["student_count"] == 0

        classes = client.get("/api/teachers/classes", headers=teacher_headers).json()["classes"]
        assert [c["id"] for c in classes] == [created["id"]]

    def test_invalid_class_subject(self, client, teacher_headers):
        response = client.post(
            "/api/teachers/classes", headers=teacher_headers, json=dict(CLASS_PAYLOAD, subject="history")
        )

        assert response.status_code == 422

    def test_enroll_and_roster(self, client, teacher_headers, student, other_student):
        classroom = create_class(client, teacher_headers)

        assert enroll(client, teacher_headers, classroom["id"], student.id).status_code == 201
        assert enroll(client, teacher_headers, classroom["id"], other_student.id).status_code == 201
        # re-enrolling keeps a single enrollment
        assert enroll(client, teacher_headers, classroom["id"], student.id).status_code == 201

        roster = client.get(f"/api/teachers/classes/{classroom['id']}/students", headers=teacher_headers).json()
        assert [s["username"] for s in roster["students"]] == ["alice", "bob"]

        classes = client.get("/api/teachers/classes", headers=teacher_headers).json()["classes"]
        assert classes[0]["student_count"] == 2

    def test_enroll_non_student(self, client, teacher_headers, make_user):
        classroom = create_class(client, teacher_headers)
        other_teacher = make_user("teacher")

        response = enroll(client, teacher_headers, classroom["id"], other_teacher.id)

        assert response.status_code == 404
        assert response.json()["detail"] == "Student not found"

    def test_other_teachers_class_is_hidden(self, client, teacher_headers, make_user, student):
        classroom = create_class(client, teacher_headers)
        intruder = auth_headers(make_user("teacher"))

        response = client.get(f"/api/teachers/classes/{classroom['id']}/students", headers=intruder)
        assert response.status_code == 404
        assert response.json()["detail"] == "Class not found"
        assert enroll(client, intruder, classroom["id"], student.id).status_code == 404

    def test_student_forbidden(self, client, student_headers):
        response = client.get("/api/teachers/classes", headers=student_headers)

        assert response.status_code == 403


class TestAnalytics:
    """Dashboard and analytics scoped to the teacher's students."""

    def test_dashboard(self, client, teacher_headers, student, other_student, make_user):
        classroom = create_class(client, teacher_headers)
        enroll(client, teacher_headers, classroom["id"], student.id)
        outsider = make_user("student")
        record(client, student, completion_percentage=80)
        record(client, outsider)

        body = client.get("/api/teachers/dashboard", headers=teacher_headers).json()

        assert body["summary"]["totalStudents"] == 1
        assert body["summary"]["totalClasses"] == 1
        assert body["summary"]["avgCompletionBySubject"]["physics"]["avg"] == 80
        assert all(row["student_id"] == student.id for row in body["recentActivity"])

    def test_subject_analytics(self, client, teacher_headers, student, other_student):
        classroom = create_class(client, teacher_headers)
        enroll(client, teacher_headers, classroom["id"], student.id)
        enroll(client, teacher_headers, classroom["id"], other_student.id)
        record(client, student, completion_percentage=100, score=90)
        record(client, other_student, completion_percentage=50, score=70)

        analytics = client.get("/api/teachers/analytics/subjects", headers=teacher_headers).json()["analytics"]
        physics = next(row for row in analytics if row["subject"] == "physics")
        math = next(row for row in analytics if row["subject"] == "math")

        assert physics["studentCount"] == 2
        assert physics["avgCompletion"] == 75
        assert physics["avgScore"] == 80
        assert physics["completionRate"] == 50
        assert math["studentCount"] == 0

    def test_student_analytics(self, client, teacher_headers, student):
        classroom = create_class(client, teacher_headers)
        enroll(client, teacher_headers, classroom["id"], student.id)
        record(client, student, topic="Light", time_spent=100)
        record(client, student, subject="math", topic="Algebra", completion_percentage=40, time_spent=50)

        analytics = client.get(
            "/api/teachers/analytics/students", headers=teacher_headers, params={"subject": "physics"}
        ).json()["analytics"]

        assert len(analytics) == 1
        assert analytics[0]["student"]["username"] == "alice"
        assert analytics[0]["totalTopics"] == 1
        assert analytics[0]["totalTimeSpent"] == 100
        assert analytics[0]["completedTopics"] == 1
        assert analytics[0]["recentActivity"] == 2

    def test_engagement(self, client, teacher_headers, student):
        classroom = create_class(client, teacher_headers)
        enroll(client, teacher_headers, classroom["id"], student.id)
        record(client, student, time_spent=200)
        record(client, student, topic="Magnetism", time_spent=4000)

        body = client.get("/api/teachers/analytics/engagement", headers=teacher_headers, params={"days": 7}).json()

        assert body["totalStudents"] == 1
        assert len(body["dailyActivity"]) == 7
        assert {row["time_range"]: row["count"] for row in body["timeDistribution"]} == {
            "0-5 min": 1,
            "60+ min": 1,
        }

    def test_student_progress(self, client, teacher_headers, student, other_student):
        classroom = create_class(client, teacher_headers)
        enroll(client, teacher_headers, classroom["id"], student.id)
        record(client, student)

        body = client.get(f"/api/teachers/students/{student.id}/progress", headers=teacher_headers).json()
        assert body["student"]["name"] == "Alice Student"
        assert body["recentActivity"][0]["topic"] == "Light"

        response = client.get(f"/api/teachers/students/{other_student.id}/progress", headers=teacher_headers)
        assert response.status_code == 404


class TestAdminAchievements:
    """POST /api/admin/achievements"""

    PAYLOAD = {"name": "Centurion", "description": "Earn 100 points", "badge_icon": "💯", "points_required": 100}

    def test_create(self, client, admin):
        response = client.post("/api/admin/achievements", headers=auth_headers(admin), json=self.PAYLOAD)

        assert response.status_code == 201
        assert response.json()["achievement"]["name"] == "Centurion"

    def test_duplicate_name(self, client, admin):
        client.post("/api/admin/achievements", headers=auth_headers(admin), json=self.PAYLOAD)
        response = client.post("/api/admin/achievements", headers=auth_headers(admin), json=self.PAYLOAD)

        assert response.status_code == 400

    def test_teacher_forbidden(self, client, teacher_headers):
        response = client.post("/api/admin/achievements", headers=teacher_headers, json=self.PAYLOAD)

        assert response.status_code == 403

    def test_custom_achievement_unlocks_for_students(self, client, admin, student, achievements):
        client.post(
            "/api/admin/achievements",
            headers=auth_headers(admin),
            json=dict(self.PAYLOAD, points_required=25),
        )

        body = record(client, student, completion_percentage=100, score=85).json()

        assert {a["name"] for a in body["newAchievements"]} == {"First Steps", "Centurion"}
