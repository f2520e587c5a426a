"""
Achievement unlock rules.

Every catalog entry maps to exactly one RuleKind. Entries stored without a
rule kind (admin-added custom achievements) fall back to TOTAL_POINTS with
the entry's points_required as the threshold.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from app.core.gamification.schemas import UserStats


class RuleKind(str, Enum):
    COMPLETED_ACTIVITIES = "completed_activities"
    UNIQUE_GAMES = "unique_games"
    SUBJECT_TOPICS = "subject_topics"
    STREAK = "streak"
    HIGH_SCORES = "high_scores"
    TOTAL_POINTS = "total_points"


@dataclass(frozen=True)
class AchievementRule:
    kind: RuleKind
    threshold: int
    subject: Optional[str] = None

    @classmethod
    def for_achievement(cls, achievement: Any) -> "AchievementRule":
        if not achievement.rule_kind:
            return cls(RuleKind.TOTAL_POINTS, int(achievement.points_required or 0))
        threshold = achievement.rule_threshold
        if threshold is None:
            threshold = achievement.points_required or 0
        return cls(RuleKind(achievement.rule_kind), int(threshold), achievement.rule_subject)

    def is_satisfied(self, stats: UserStats) -> bool:
        kind = self.kind
        if kind is RuleKind.COMPLETED_ACTIVITIES:
            return stats.completed_activities >= self.threshold
        elif kind is RuleKind.UNIQUE_GAMES:
            return stats.unique_games_played >= self.threshold
        elif kind is RuleKind.SUBJECT_TOPICS:
            return stats.subject_completed_topics.get(self.subject or "", 0) >= self.threshold
        elif kind is RuleKind.STREAK:
            return stats.daily_streak >= self.threshold
        elif kind is RuleKind.HIGH_SCORES:
            return stats.high_score_count >= self.threshold
        elif kind is RuleKind.TOTAL_POINTS:
            return stats.total_points >= self.threshold
        raise ValueError(f"Unhandled rule kind: {kind}")


DEFAULT_ACHIEVEMENTS: List[Dict[str, Any]] = [
    {"name": "First Steps", "description": "Complete your first lesson", "badge_icon": "🎯",
     "points_required": 10, "category": "progress",
     "rule_kind": RuleKind.COMPLETED_ACTIVITIES, "rule_threshold": 1},
    {"name": "Game Master", "description": "Complete 5 different games", "badge_icon": "🎮",
     "points_required": 100, "category": "gaming",
     "rule_kind": RuleKind.UNIQUE_GAMES, "rule_threshold": 5},
    {"name": "Physics Explorer", "description": "Complete all physics lessons", "badge_icon": "⚛️",
     "points_required": 500, "category": "physics",
     "rule_kind": RuleKind.SUBJECT_TOPICS, "rule_threshold": 10, "rule_subject": "physics"},
    {"name": "Chemistry Wizard", "description": "Complete all chemistry experiments", "badge_icon": "🧪",
     "points_required": 500, "category": "chemistry",
     "rule_kind": RuleKind.SUBJECT_TOPICS, "rule_threshold": 10, "rule_subject": "chemistry"},
    {"name": "Math Genius", "description": "Solve 100 math problems", "badge_icon": "🔢",
     "points_required": 300, "category": "math",
     "rule_kind": RuleKind.SUBJECT_TOPICS, "rule_threshold": 20, "rule_subject": "math"},
    {"name": "Biology Expert", "description": "Complete all biology modules", "badge_icon": "🧬",
     "points_required": 500, "category": "biology",
     "rule_kind": RuleKind.SUBJECT_TOPICS, "rule_threshold": 10, "rule_subject": "biology"},
    {"name": "Daily Learner", "description": "Login for 7 consecutive days", "badge_icon": "📅",
     "points_required": 50, "category": "streak",
     "rule_kind": RuleKind.STREAK, "rule_threshold": 7},
    {"name": "High Achiever", "description": "Score 90% or higher in 10 activities", "badge_icon": "⭐",
     "points_required": 200, "category": "performance",
     "rule_kind": RuleKind.HIGH_SCORES, "rule_threshold": 10},
]
