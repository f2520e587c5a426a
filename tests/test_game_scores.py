"""
Tests for game score recording, records and game leaderboards.
"""
from datetime import date

import pytest

from app.core.gamification import GameScoreRecorder, GamificationInputError, PointsEngine, UnknownGameError
from app.models.game_score import GameScoreEntry

DAY = date(2024, 6, 3)


class TestSubmitScore:
    """Score validation, points and record tracking."""

    def test_awards_tiered_points(self, db, student):
        result = GameScoreRecorder(db).submit_score(
            student.id, "physics", "projectile-motion", 95, time_taken=120, today=DAY
        )

        assert result.points_earned == 34
        account = PointsEngine(db).get_account(student.id)
        assert account.total_points == 34
        assert account.subject_points["physics"] == 34

    def test_tracks_best_score_and_plays(self, db, student):
        recorder = GameScoreRecorder(db)
        first = recorder.submit_score(student.id, "math", "number-puzzles", 300, today=DAY)
        second = recorder.submit_score(student.id, "math", "number-puzzles", 200, today=DAY)
        third = recorder.submit_score(student.id, "math", "number-puzzles", 300, today=DAY)

        assert first.is_new_record is True
        assert second.is_new_record is False
        assert second.best_score == 300
        assert third.is_new_record is True
        assert third.total_plays == 3

    def test_every_attempt_is_kept(self, db, student):
        recorder = GameScoreRecorder(db)
        for score in (10, 20, 30):
            recorder.submit_score(student.id, "biology", "cell-explorer", score, today=DAY)

        scores = [entry.score for entry in recorder.scores_for_game(student.id, "cell-explorer")]
        assert sorted(scores) == [10, 20, 30]

    def test_without_points_award(self, db, student):
        result = GameScoreRecorder(db).submit_score(
            student.id, "physics", "circuit-builder", 80, award_points=False, today=DAY
        )

        assert result.points_earned == 18
        assert PointsEngine(db).get_account(student.id).total_points == 0

    def test_unknown_game(self, db, student):
        with pytest.raises(UnknownGameError):
            GameScoreRecorder(db).submit_score(student.id, "physics", "cell-explorer", 50, today=DAY)

        assert db.query(GameScoreEntry).count() == 0

    @pytest.mark.parametrize(
        "fields",
        [
            {"score": 1001},
            {"score": -1},
            {"score": 10, "level_completed": 0},
            {"score": 10, "level_completed": 11},
            {"score": 10, "time_taken": -3},
            {"score": 10, "game_data": ["not", "an", "object"]},
        ],
    )
    def test_invalid_input_rejected(self, db, student, fields):
        with pytest.raises(GamificationInputError):
            GameScoreRecorder(db).submit_score(student.id, "chemistry", "virtual-lab", today=DAY, **fields)

        assert db.query(GameScoreEntry).count() == 0


class TestGameLeaderboard:
    """Best score per player, fastest time breaks ties."""

    def test_ordering(self, db, make_user):
        recorder = GameScoreRecorder(db)
        slow, fast, top = (make_user("student") for _ in range(3))
        recorder.submit_score(slow.id, "physics", "wave-simulator", 500, time_taken=200, today=DAY)
        recorder.submit_score(fast.id, "physics", "wave-simulator", 500, time_taken=90, today=DAY)
        recorder.submit_score(top.id, "physics", "wave-simulator", 700, time_taken=400, today=DAY)
        recorder.submit_score(top.id, "physics", "wave-simulator", 100, time_taken=50, today=DAY)

        board = recorder.game_leaderboard("wave-simulator", "physics")

        assert [row["id"] for row in board] == [top.id, fast.id, slow.id]
        assert board[0]["best_score"] == 700
        assert board[0]["total_plays"] == 2
        assert [row["rank"] for row in board] == [1, 2, 3]

    def test_limit(self, db, make_user):
        recorder = GameScoreRecorder(db)
        for score in (10, 20, 30, 40):
            recorder.submit_score(make_user("student").id, "math", "geometry-visualizer", score, today=DAY)

        board = recorder.game_leaderboard("geometry-visualizer", "math", limit=2)

        assert [row["best_score"] for row in board] == [40, 30]

    def test_user_game_stats(self, db, student):
        recorder = GameScoreRecorder(db)
        recorder.submit_score(student.id, "physics", "projectile-motion", 95, time_taken=120, today=DAY)
        recorder.submit_score(student.id, "physics", "projectile-motion", 45, time_taken=60, today=DAY)
        recorder.submit_score(student.id, "math", "algebra-adventure", 30, today=DAY)

        stats = recorder.user_game_stats(student.id, subject="physics")

        assert len(stats) == 1
        assert stats[0]["total_plays"] == 2
        assert stats[0]["best_score"] == 95
        assert stats[0]["best_time"] == 60
        assert stats[0]["total_points"] == 34 + 9
