"""
Tests for topic progress upserts and summaries.
"""
import pytest

from app.core.gamification import ActivityService, GamificationInputError, ProgressTracker, UnknownSubjectError
from app.models.points import PointsAccount


class TestRecordProgress:
    """Create and update semantics."""

    def test_first_attempt_creates_record(self, db, student):
        result = ProgressTracker(db).record_progress(student.id, "physics", "Mechanics", 60, 70, 120)

        assert result.created is True
        assert result.updated is False
        assert result.attempts == 1
        assert result.completion_percentage == 60
        assert result.score == 70
        assert result.time_spent == 120

    def test_repeat_attempt_keeps_best_values(self, db, student):
        tracker = ProgressTracker(db)
        tracker.record_progress(student.id, "physics", "Mechanics", 80, 90, 100)
        result = tracker.record_progress(student.id, "physics", "Mechanics", 40, 50, 30)

        assert result.updated is True
        assert result.attempts == 2
        assert result.completion_percentage == 80
        assert result.score == 90
        assert result.time_spent == 130

    @pytest.mark.parametrize("first,second", [(40, 75), (75, 40)])
    def test_best_score_independent_of_order(self, db, student, first, second):
        tracker = ProgressTracker(db)
        tracker.record_progress(student.id, "math", "Algebra", 50, first)
        result = tracker.record_progress(student.id, "math", "Algebra", 50, second)

        assert result.score == 75
        assert result.attempts == 2

    def test_topics_are_tracked_separately(self, db, student):
        tracker = ProgressTracker(db)
        tracker.record_progress(student.id, "chemistry", "Periodic Table", 100, 80)
        tracker.record_progress(student.id, "chemistry", "Chemical Bonding", 20, 10)

        records = tracker.list_records(student.id, "chemistry")
        assert {record.topic for record in records} == {"Periodic Table", "Chemical Bonding"}
        assert all(record.attempts == 1 for record in records)

    def test_does_not_touch_points(self, db, student):
        ProgressTracker(db).record_progress(student.id, "physics", "Light", 100, 100)

        assert db.query(PointsAccount).filter(PointsAccount.user_id == student.id).first() is None

    @pytest.mark.parametrize(
        "subject,topic,completion,score,time_spent",
        [
            ("physics", "Light", 101, 50, 0),
            ("physics", "Light", -1, 50, 0),
            ("physics", "Light", 50, 101, 0),
            ("physics", "", 50, 50, 0),
            ("physics", "x" * 101, 50, 50, 0),
            ("physics", "Light", 50, 50, -5),
        ],
    )
    def test_invalid_input_rejected(self, db, student, subject, topic, completion, score, time_spent):
        tracker = ProgressTracker(db)
        with pytest.raises(GamificationInputError):
            tracker.record_progress(student.id, subject, topic, completion, score, time_spent)

        assert tracker.list_records(student.id) == []

    def test_unknown_subject_rejected(self, db, student):
        with pytest.raises(UnknownSubjectError):
            ProgressTracker(db).record_progress(student.id, "history", "Rome", 50, 50)


class TestSummaries:
    """Per-subject aggregates."""

    def test_subject_summary(self, db, student):
        tracker = ProgressTracker(db)
        tracker.record_progress(student.id, "biology", "Genetics", 100, 90, 60)
        tracker.record_progress(student.id, "biology", "Ecology", 50, 70, 40)

        summary = tracker.subject_summary(student.id, "biology")

        assert summary.total_topics == 2
        assert summary.completed_topics == 1
        assert summary.avg_completion == pytest.approx(75)
        assert summary.avg_score == pytest.approx(80)
        assert summary.total_time_spent == 100

    def test_untouched_subject_reports_zeros(self, db, student):
        summary = ProgressTracker(db).subject_summary(student.id, "math")

        assert summary.subject == "math"
        assert summary.total_topics == 0
        assert summary.avg_completion == 0

    def test_overall_summary_lists_touched_subjects(self, db, student):
        tracker = ProgressTracker(db)
        tracker.record_progress(student.id, "physics", "Light", 30, 30)
        tracker.record_progress(student.id, "math", "Geometry", 30, 30)

        assert [summary.subject for summary in tracker.overall_summary(student.id)] == ["math", "physics"]


class TestSubmitProgress:
    """Tracker, points and achievements run together."""

    def test_first_completion_awards_points(self, db, student, achievements):
        outcome = ActivityService(db).submit_progress(student.id, "physics", "Mechanics", 100, 85)

        assert outcome["points_earned"] == 30
        assert [a.name for a in outcome["new_achievements"]] == ["First Steps"]
        account = db.query(PointsAccount).filter(PointsAccount.user_id == student.id).one()
        assert account.total_points == 30

    def test_repeat_below_half_reports_negative_without_deducting(self, db, student, achievements):
        service = ActivityService(db)
        service.submit_progress(student.id, "math", "Algebra", 55, 65)
        outcome = service.submit_progress(student.id, "math", "Algebra", 30, 40)

        assert outcome["points_earned"] == -4
        assert outcome["progress"].attempts == 2
        assert service.points.get_account(student.id).total_points == 15

    def test_repeat_full_completion_awards_improvement_points(self, db, student, achievements):
        service = ActivityService(db)
        service.submit_progress(student.id, "math", "Algebra", 55, 65)
        outcome = service.submit_progress(student.id, "math", "Algebra", 100, 65)

        assert outcome["points_earned"] == 10
        assert service.points.get_account(student.id).total_points == 25
