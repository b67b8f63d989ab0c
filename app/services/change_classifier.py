"""
Sudden Change Classifier

Compares a worker's score today against their trailing average and classifies
declines into severity tiers (MINOR, NOTABLE, SIGNIFICANT, CRITICAL).

Only declines of at least the minimum drop count as a sudden change.
Improvements never do. Cut points come from app.config so they can be tuned
without touching the classification logic.
"""
import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from app import config
from app.models.checkin import ReadinessStatus
from app.models.sudden_change import (
    SEVERITY_ORDER,
    ChangeClassification,
    ChangeSeverity,
    SuddenChange,
)
from app.services.readiness_scorer import round_half_up

logger = logging.getLogger(__name__)


def trailing_average(scores: Sequence[float], min_samples: int = config.MIN_HISTORY_CHECKINS) -> Optional[float]:
    """
    Mean of prior readiness scores, or None without enough history.

    Args:
        scores: Prior scores for one worker (today excluded)
        min_samples: Minimum number of scores required

    Returns:
        float or None
    """
    if len(scores) == 0 or len(scores) < min_samples:
        return None
    return sum(scores) / len(scores)


def history_window(reference_date: date, days: int = config.TRAILING_WINDOW_DAYS) -> Tuple[date, date]:
    """
    Half-open date range [start, end) used for the trailing average.

    The reference date itself is excluded so today's check-in never
    contributes to its own baseline.
    """
    return reference_date - timedelta(days=days), reference_date


class ChangeClassifier:
    """
    Classifies score changes against a trailing average.

    Severity bands are expressed as drop magnitudes (positive integers); a
    change qualifies for a band when change <= -drop.
    """

    def __init__(
        self,
        min_drop: int = config.SUDDEN_CHANGE_MIN_DROP,
        critical_drop: int = config.SEVERITY_CRITICAL_DROP,
        significant_drop: int = config.SEVERITY_SIGNIFICANT_DROP,
        notable_drop: int = config.SEVERITY_NOTABLE_DROP,
        window_days: int = config.TRAILING_WINDOW_DAYS,
        min_history: int = config.MIN_HISTORY_CHECKINS
    ):
        """
        Initialize classifier.

        Raises:
            ValueError: If drops are not positive or bands are misordered
        """
        if min(min_drop, critical_drop, significant_drop, notable_drop) <= 0:
            raise ValueError("Severity drops must be positive integers")
        if not critical_drop > significant_drop > notable_drop:
            raise ValueError(
                f"Severity bands must be strictly ordered: critical ({critical_drop}) > "
                f"significant ({significant_drop}) > notable ({notable_drop})"
            )
        if window_days <= 0 or min_history <= 0:
            raise ValueError("Trailing window and minimum history must be positive")

        self.min_drop = min_drop
        self.window_days = window_days
        self.min_history = min_history

        # Checked in order, largest drop first
        self.severity_bands: List[Tuple[int, ChangeSeverity]] = [
            (critical_drop, ChangeSeverity.CRITICAL),
            (significant_drop, ChangeSeverity.SIGNIFICANT),
            (notable_drop, ChangeSeverity.NOTABLE),
        ]

    def _severity_for(self, change: float) -> ChangeSeverity:
        for drop, severity in self.severity_bands:
            if change <= -drop:
                return severity
        return ChangeSeverity.MINOR

    def classify(self, today_score: float, trailing_avg: float) -> ChangeClassification:
        """
        Classify today's score against the trailing average.

        The severity is decided on the unrounded difference; the reported
        change is rounded half-up.

        Args:
            today_score: Readiness score today (0-100)
            trailing_avg: Mean of prior scores (0-100)

        Returns:
            ChangeClassification: severity is None unless the decline reaches min_drop
        """
        change = today_score - trailing_avg

        severity = None
        if change <= -self.min_drop:
            severity = self._severity_for(change)

        return ChangeClassification(
            change_from_average=round_half_up(change),
            severity=severity
        )

    def build_user_averages(
        self,
        history: Iterable[Dict],
        reference_date: date
    ) -> Dict[str, float]:
        """
        Trailing average per user from historical check-ins.

        Args:
            history: Dicts with user_id, score and checkin_date (date)
            reference_date: The day being monitored (excluded from the window)

        Returns:
            dict: user_id -> average, only for users with enough history
        """
        start, end = history_window(reference_date, self.window_days)

        scores_by_user: Dict[str, List[float]] = defaultdict(list)
        for entry in history:
            checkin_date = entry["checkin_date"]
            if start <= checkin_date < end:
                scores_by_user[entry["user_id"]].append(entry["score"])

        averages = {}
        for user_id, scores in scores_by_user.items():
            average = trailing_average(scores, self.min_history)
            if average is not None:
                averages[user_id] = average

        return averages

    def detect_sudden_changes(
        self,
        today_checkins: Iterable[Dict],
        history: Iterable[Dict],
        reference_date: date
    ) -> List[SuddenChange]:
        """
        List today's sudden declines, most severe first.

        Args:
            today_checkins: Dicts with user_id, score, status and optional checkin_id
            history: Prior check-ins (see build_user_averages)
            reference_date: The day being monitored

        Returns:
            list: SuddenChange entries sorted CRITICAL -> MINOR
        """
        averages = self.build_user_averages(history, reference_date)

        changes: List[SuddenChange] = []
        for checkin in today_checkins:
            average = averages.get(checkin["user_id"])
            if average is None:
                continue

            classification = self.classify(checkin["score"], average)
            if not classification.is_sudden:
                continue

            changes.append(SuddenChange(
                user_id=checkin["user_id"],
                checkin_id=checkin.get("checkin_id"),
                today_score=round_half_up(checkin["score"]),
                today_status=ReadinessStatus(checkin["status"]),
                average_score=round_half_up(average),
                change=classification.change_from_average,
                severity=classification.severity
            ))

        changes.sort(key=lambda c: SEVERITY_ORDER[c.severity])

        critical = sum(1 for c in changes if c.severity == ChangeSeverity.CRITICAL)
        if critical:
            logger.warning(f"Sudden change CRITICAL: {critical} worker(s) on {reference_date.isoformat()}")

        return changes


# Singleton instance
_change_classifier_instance: Optional[ChangeClassifier] = None


def get_change_classifier() -> ChangeClassifier:
    """Get singleton instance of ChangeClassifier"""
    global _change_classifier_instance
    if _change_classifier_instance is None:
        _change_classifier_instance = ChangeClassifier()
    return _change_classifier_instance
