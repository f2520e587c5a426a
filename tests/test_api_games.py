"""
Tests for the game endpoints.
"""
from tests.conftest import auth_headers


def post_score(client, headers, subject="physics", game_id="projectile-motion", **fields):
    payload = {"score": 95, "level_completed": 2, "time_taken": 120}
    payload.update(fields)
    return client.post(f"/api/games/{subject}/{game_id}/score", headers=headers, json=payload)


class TestCatalog:
    """GET /api/games and game configuration."""

    def test_all_games_by_subject(self, client, student_headers):
        games = client.get("/api/games", headers=student_headers).json()["games"]

        assert set(games) == {"physics", "chemistry", "math", "biology"}
        assert all(len(entries) == 3 for entries in games.values())

    def test_games_for_subject(self, client, student_headers):
        games = client.get("/api/games", headers=student_headers, params={"subject": "biology"}).json()["games"]

        assert [game["id"] for game in games] == ["cell-explorer", "ecosystem-simulation", "human-body-systems"]

    def test_game_config_with_previous_scores(self, client, student_headers):
        post_score(client, student_headers, score=40)
        post_score(client, student_headers, score=70)

        body = client.get("/api/games/physics/projectile-motion", headers=student_headers).json()

        assert body["gameId"] == "projectile-motion"
        assert body["highScore"] == 70
        assert len(body["previousScores"]) == 2
        assert body["config"]["levels"]

    def test_game_config_unknown_game(self, client, student_headers):
        response = client.get("/api/games/physics/warp-drive", headers=student_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Game not found"

    def test_game_config_invalid_subject(self, client, student_headers):
        response = client.get("/api/games/history/projectile-motion", headers=student_headers)

        assert response.status_code == 400

    def test_requires_authentication(self, client):
        assert client.get("/api/games").status_code == 401


class TestScoreSubmission:
    """POST /api/games/{subject}/{game_id}/score"""

    def test_student_earns_points(self, client, student_headers):
        response = post_score(client, student_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Score submitted successfully"
        assert body["pointsEarned"] == 34
        assert body["isNewRecord"] is True
        assert body["totalPlays"] == 1

        points = client.get("/api/students/points", headers=student_headers).json()
        assert points["total_points"] == 34

    def test_teacher_score_does_not_award_points(self, client, teacher_headers):
        response = post_score(client, teacher_headers)

        assert response.status_code == 200
        assert response.json()["newAchievements"] == []
        board = client.get("/api/students/leaderboard", headers=teacher_headers).json()["leaderboard"]
        assert board == []

    def test_unknown_game(self, client, student_headers):
        response = post_score(client, student_headers, subject="math", game_id="projectile-motion")

        assert response.status_code == 404
        assert response.json()["detail"] == "Game not found"

    def test_out_of_range_score(self, client, student_headers):
        assert post_score(client, student_headers, score=1500).status_code == 422
        assert post_score(client, student_headers, level_completed=11).status_code == 422

    def test_invalid_subject(self, client, student_headers):
        response = post_score(client, student_headers, subject="history")

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid subject"


class TestGameLeaderboard:
    """Game leaderboard and per-user stats."""

    def test_leaderboard(self, client, student, other_student):
        post_score(client, auth_headers(student), score=300, time_taken=200)
        post_score(client, auth_headers(other_student), score=300, time_taken=100)

        body = client.get(
            "/api/games/physics/projectile-motion/leaderboard", headers=auth_headers(student)
        ).json()

        assert [row["username"] for row in body["leaderboard"]] == ["bob", "alice"]
        assert body["leaderboard"][0]["best_time"] == 100

    def test_stats(self, client, student_headers):
        post_score(client, student_headers, score=95, time_taken=120)
        post_score(client, student_headers, subject="math", game_id="number-puzzles", score=50, time_taken=0)

        stats = client.get("/api/games/stats", headers=student_headers, params={"subject": "math"}).json()["stats"]

        assert len(stats) == 1
        assert stats[0]["game_id"] == "number-puzzles"
        assert stats[0]["total_points"] == 5
