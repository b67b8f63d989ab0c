"""
Readiness Score Calculator

Calculates a worker's readiness score (0-100) from a daily check-in:
- Mood (25% weight)
- Stress, inverted (25% weight)
- Sleep (25% weight)
- Physical health (25% weight)

Maps the score to a GREEN / YELLOW / RED status band. The score is computed
once at submission time and stored by the caller; nothing here recomputes
stored scores.
"""
import logging
import math
from typing import Optional

from app.models.checkin import (
    CheckinMetrics,
    ReadinessComponents,
    ReadinessResult,
    ReadinessStatus,
)

logger = logging.getLogger(__name__)

METRIC_MIN = 0
METRIC_MAX = 10

# Status cut points; stored check-ins depend on these, do not tune
GREEN_THRESHOLD = 70
YELLOW_THRESHOLD = 40


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves going toward positive infinity.

    Python's round() uses banker's rounding (72.5 -> 72); stored readiness
    scores were produced with half-up rounding (72.5 -> 73, -10.5 -> -10).
    """
    return int(math.floor(value + 0.5))


def normalize_metric(value: int, invert: bool = False) -> int:
    """
    Convert a raw 0-10 metric into a 0-100 sub-score.

    Args:
        value: Metric value, already validated to be an integer 0-10
        invert: True for metrics where higher is worse (stress)

    Returns:
        int: 0-100
    """
    if invert:
        return round_half_up((METRIC_MAX - value) / METRIC_MAX * 100)
    return round_half_up(value / METRIC_MAX * 100)


def determine_status(score: int) -> ReadinessStatus:
    """Map a readiness score to its band (lower bounds are inclusive)"""
    if score >= GREEN_THRESHOLD:
        return ReadinessStatus.GREEN
    elif score >= YELLOW_THRESHOLD:
        return ReadinessStatus.YELLOW
    else:
        return ReadinessStatus.RED


class ReadinessScorer:
    """Calculate readiness scores and status bands for check-ins"""

    def __init__(self):
        """Initialize readiness scorer"""
        self.formula_weights = {
            "mood": 0.25,
            "stress_inverse": 0.25,
            "sleep": 0.25,
            "physical_health": 0.25
        }

    def calculate_components(
        self,
        mood: int,
        stress: int,
        sleep: int,
        physical_health: int
    ) -> ReadinessComponents:
        """
        Normalize the four metrics to 0-100 sub-scores.

        Stress is inverted: 0 stress is a 100 sub-score.
        """
        return ReadinessComponents(
            mood=normalize_metric(mood),
            stress=normalize_metric(stress, invert=True),
            sleep=normalize_metric(sleep),
            physical_health=normalize_metric(physical_health)
        )

    def score(
        self,
        mood: int,
        stress: int,
        sleep: int,
        physical_health: int
    ) -> ReadinessResult:
        """
        Calculate readiness score and status for one check-in.

        Formula:
            score = round(0.25*mood% + 0.25*(100-stress%) + 0.25*sleep% + 0.25*physical%)

        Args:
            mood, stress, sleep, physical_health: integers 0-10, validated by the caller

        Returns:
            ReadinessResult: value 0-100, status and component breakdown
        """
        components = self.calculate_components(mood, stress, sleep, physical_health)

        weighted = (
            self.formula_weights["mood"] * components.mood +
            self.formula_weights["stress_inverse"] * components.stress +
            self.formula_weights["sleep"] * components.sleep +
            self.formula_weights["physical_health"] * components.physical_health
        )
        value = round_half_up(weighted)

        return ReadinessResult(
            value=value,
            status=determine_status(value),
            components=components
        )

    def score_checkin(self, metrics: CheckinMetrics) -> ReadinessResult:
        """Score a validated check-in submission"""
        result = self.score(
            mood=metrics.mood,
            stress=metrics.stress,
            sleep=metrics.sleep,
            physical_health=metrics.physical_health
        )

        if result.status == ReadinessStatus.RED:
            logger.warning(
                f"RED check-in scored: score {result.value} "
                f"(mood {metrics.mood}, stress {metrics.stress}, "
                f"sleep {metrics.sleep}, physical {metrics.physical_health})"
            )

        return result


# Singleton instance
_readiness_scorer_instance: Optional[ReadinessScorer] = None


def get_readiness_scorer() -> ReadinessScorer:
    """Get singleton instance of ReadinessScorer"""
    global _readiness_scorer_instance
    if _readiness_scorer_instance is None:
        _readiness_scorer_instance = ReadinessScorer()
    return _readiness_scorer_instance
