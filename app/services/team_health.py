"""
Team Health Calculator

Composite team figures used by executive dashboards and passed as context to
the AI summary service:
- Team Health Score: readiness (40%) + check-in compliance (30%) + streak consistency (30%)
- Team Grade: readiness (60%) + compliance (40%) on an A+ .. F letter scale
- Score trend against the previous period (up / down / stable)
- Member risk level (low, medium, high)
- Top reasons: how often each metric crossed its problem threshold
"""
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from app import config
from app.models.team_stats import MetricIssueCount, TeamGrade, TeamHealthReport
from app.services.readiness_scorer import round_half_up

logger = logging.getLogger(__name__)

# A 10-day average streak is full consistency
STREAK_FOR_FULL_CONSISTENCY = 10

# (min score, letter, label, color), highest first
GRADE_SCALE = [
    (97, "A+", "Outstanding", "GREEN"),
    (93, "A", "Excellent", "GREEN"),
    (90, "A-", "Excellent", "GREEN"),
    (87, "B+", "Very Good", "GREEN"),
    (83, "B", "Good", "YELLOW"),
    (80, "B-", "Good", "YELLOW"),
    (77, "C+", "Satisfactory", "YELLOW"),
    (73, "C", "Satisfactory", "ORANGE"),
    (70, "C-", "Needs Improvement", "ORANGE"),
    (67, "D+", "Poor", "ORANGE"),
    (63, "D", "Poor", "RED"),
    (60, "D-", "At Risk", "RED"),
]
FAILING_GRADE = ("F", "Critical", "RED")

# A check-in metric is a problem when it crosses these values
METRIC_THRESHOLDS = {
    "STRESS_HIGH": 6,    # stress > 6
    "SLEEP_LOW": 5,      # sleep < 5
    "MOOD_LOW": 5,       # mood < 5
    "PHYSICAL_LOW": 5,   # physical_health < 5
}

METRIC_ISSUE_LABELS = {
    "HIGH_STRESS": "High Stress",
    "POOR_SLEEP": "Poor Sleep",
    "LOW_MOOD": "Low Mood",
    "LOW_PHYSICAL": "Low Physical Health",
}


def compliance_rate(checked_in: int, expected: int) -> int:
    """
    Check-in compliance percentage.

    Nobody expected (whole team on leave) counts as full compliance.
    """
    if expected <= 0:
        return 100
    return round_half_up(checked_in / expected * 100)


def get_grade(score: int) -> TeamGrade:
    """Letter grade for a 0-100 team score"""
    for minimum, letter, label, color in GRADE_SCALE:
        if score >= minimum:
            return TeamGrade(score=score, letter=letter, label=label, color=color)
    letter, label, color = FAILING_GRADE
    return TeamGrade(score=score, letter=letter, label=label, color=color)


def score_trend(current: float, previous: float, threshold: int = config.TREND_THRESHOLD) -> str:
    """Return "up", "down" or "stable" comparing two period scores"""
    delta = current - previous
    if delta >= threshold:
        return "up"
    elif delta <= -threshold:
        return "down"
    return "stable"


class TeamHealthCalculator:
    """Calculate composite team health figures"""

    def __init__(self):
        """Initialize team health calculator"""
        self.health_weights = {
            "readiness": 0.40,
            "compliance": 0.30,
            "consistency": 0.30
        }
        self.grade_weights = {
            "readiness": 0.60,
            "compliance": 0.40
        }

    def _raw_consistency(self, streaks: Sequence[int]) -> float:
        if len(streaks) == 0:
            return 0.0
        avg_streak = sum(streaks) / len(streaks)
        return min(100.0, avg_streak * 100 / STREAK_FOR_FULL_CONSISTENCY)

    def consistency_score(self, streaks: Sequence[int]) -> int:
        """
        Consistency from members' current check-in streaks, 0-100.

        Formula:
            min(100, mean(streaks) * 10)
        """
        return round_half_up(self._raw_consistency(streaks))

    def team_health_score(self, avg_readiness: float, checkin_rate: float, streaks: Sequence[int]) -> int:
        """
        Team Health Score, 0-100.

        Formula:
            round(0.4*avg_readiness + 0.3*checkin_rate + 0.3*consistency)

        Consistency enters unrounded; only the final score is rounded.
        """
        consistency = self._raw_consistency(streaks)
        return round_half_up(
            self.health_weights["readiness"] * avg_readiness +
            self.health_weights["compliance"] * checkin_rate +
            self.health_weights["consistency"] * consistency
        )

    def team_grade(self, avg_readiness: float, compliance: float) -> TeamGrade:
        """
        Team Grade from average readiness and period compliance.

        Formula:
            score = round(0.6*avg_readiness + 0.4*compliance)
        """
        score = round_half_up(
            self.grade_weights["readiness"] * avg_readiness +
            self.grade_weights["compliance"] * compliance
        )
        return get_grade(score)

    def member_risk_level(
        self,
        red_count: int,
        yellow_count: int,
        checkin_count: int,
        missed_work_days: int = 0
    ) -> str:
        """
        Determine a member's risk level: "low", "medium", "high".

        Logic:
            - High: >=3 RED, more than 40% RED, or >=4 missed work days
            - Medium: >=3 YELLOW, >=2 RED, or >=2 missed work days
            - Low: otherwise
        """
        risk = "low"
        if red_count >= 3 or (checkin_count > 0 and red_count / checkin_count > 0.4):
            risk = "high"
        elif yellow_count >= 3 or red_count >= 2:
            risk = "medium"

        if missed_work_days >= 4:
            risk = "high"
        elif missed_work_days >= 2 and risk == "low":
            risk = "medium"

        return risk

    def top_reasons(self, checkins: Iterable[Mapping]) -> List[MetricIssueCount]:
        """
        Count metric problems across check-ins, most frequent first.

        Args:
            checkins: Dicts with mood, stress, sleep and physical_health

        Returns:
            list: MetricIssueCount with zero counts omitted
        """
        issues: Dict[str, int] = {reason: 0 for reason in METRIC_ISSUE_LABELS}

        for checkin in checkins:
            if checkin["stress"] > METRIC_THRESHOLDS["STRESS_HIGH"]:
                issues["HIGH_STRESS"] += 1
            if checkin["sleep"] < METRIC_THRESHOLDS["SLEEP_LOW"]:
                issues["POOR_SLEEP"] += 1
            if checkin["mood"] < METRIC_THRESHOLDS["MOOD_LOW"]:
                issues["LOW_MOOD"] += 1
            if checkin["physical_health"] < METRIC_THRESHOLDS["PHYSICAL_LOW"]:
                issues["LOW_PHYSICAL"] += 1

        reasons = [
            MetricIssueCount(reason=reason, label=METRIC_ISSUE_LABELS[reason], count=count)
            for reason, count in issues.items()
            if count > 0
        ]
        reasons.sort(key=lambda r: r.count, reverse=True)
        return reasons

    def build_report(
        self,
        avg_readiness: float,
        checkin_rate: float,
        streaks: Sequence[int],
        previous_grade_score: Optional[float] = None,
        period_compliance: Optional[float] = None,
        checkins: Iterable[Mapping] = ()
    ) -> TeamHealthReport:
        """
        Assemble the full team health report.

        Args:
            avg_readiness: Team average readiness for the period (0-100)
            checkin_rate: Team check-in rate for the period (0-100)
            streaks: Current streak of each member
            previous_grade_score: Team Grade score of the previous period, for the trend
            period_compliance: Compliance for the grade; defaults to checkin_rate
            checkins: Period check-ins with raw metrics, for top reasons

        Returns:
            TeamHealthReport
        """
        health_score = self.team_health_score(avg_readiness, checkin_rate, streaks)
        compliance = checkin_rate if period_compliance is None else period_compliance
        grade = self.team_grade(avg_readiness, compliance)

        # Trend follows the grade score, not the health score
        if previous_grade_score is None:
            trend, delta = "stable", 0.0
        else:
            trend = score_trend(grade.score, previous_grade_score)
            delta = round(grade.score - previous_grade_score, 1)

        report = TeamHealthReport(
            health_score=health_score,
            avg_readiness=round_half_up(avg_readiness),
            checkin_rate=round_half_up(checkin_rate),
            consistency_score=self.consistency_score(streaks),
            grade=grade,
            trend=trend,
            score_delta=delta,
            top_reasons=self.top_reasons(checkins)
        )

        if grade.letter in ("D-", "F"):
            logger.warning(f"Team grade {grade.letter}: score {grade.score}, health score {health_score}")

        return report


# Singleton instance
_team_health_instance: Optional[TeamHealthCalculator] = None


def get_team_health_calculator() -> TeamHealthCalculator:
    """Get singleton instance of TeamHealthCalculator"""
    global _team_health_instance
    if _team_health_instance is None:
        _team_health_instance = TeamHealthCalculator()
    return _team_health_instance
