"""
Team Daily Aggregator

Folds a team's check-ins for one day into dashboard statistics:
status counts, check-in rate and average readiness score.

The caller decides which check-ins belong to the day (timezone, query
boundaries); the aggregator only counts what it is given.
"""
import logging
from typing import Iterable, Mapping, Optional, Sequence, Set, Union

from app.models.checkin import ReadinessStatus, ScoredCheckin
from app.models.sudden_change import ChangeSeverity, SuddenChange
from app.models.team_stats import MonitoringStats, TeamDailyStats
from app.services.readiness_scorer import round_half_up

logger = logging.getLogger(__name__)

CheckinLike = Union[ScoredCheckin, Mapping]


def _status_of(checkin: CheckinLike) -> ReadinessStatus:
    if isinstance(checkin, ScoredCheckin):
        return checkin.status
    return ReadinessStatus(checkin["status"])


def _score_of(checkin: CheckinLike) -> float:
    if isinstance(checkin, ScoredCheckin):
        return checkin.score
    return checkin["score"]


def _user_of(checkin: CheckinLike) -> Optional[str]:
    if isinstance(checkin, ScoredCheckin):
        return checkin.user_id
    return checkin.get("user_id")


class TeamAggregator:
    """Aggregate team check-ins into daily statistics"""

    def aggregate(self, checkins: Sequence[CheckinLike], team_size: int) -> TeamDailyStats:
        """
        Build TeamDailyStats for one team-day.

        Formula:
            checkin_rate = round(checked_in / team_size * 100)
            average_score = round(mean(scores))

        Args:
            checkins: Check-ins with status and score
            team_size: Members expected on the roster

        Returns:
            TeamDailyStats

        Edge cases:
            - team_size == 0: checkin_rate = 0
            - No check-ins: average_score = 0
        """
        counts = {status: 0 for status in ReadinessStatus}
        total_score = 0.0

        for checkin in checkins:
            counts[_status_of(checkin)] += 1
            total_score += _score_of(checkin)

        checked_in_count = len(checkins)

        checkin_rate = 0
        if team_size > 0:
            checkin_rate = round_half_up(checked_in_count / team_size * 100)

        average_score = 0
        if checked_in_count > 0:
            average_score = round_half_up(total_score / checked_in_count)

        return TeamDailyStats(
            green_count=counts[ReadinessStatus.GREEN],
            yellow_count=counts[ReadinessStatus.YELLOW],
            red_count=counts[ReadinessStatus.RED],
            team_size=team_size,
            checked_in_count=checked_in_count,
            checkin_rate=checkin_rate,
            average_score=average_score
        )

    def build_monitoring_stats(
        self,
        member_ids: Iterable[str],
        today_checkins: Sequence[CheckinLike],
        on_leave_ids: Iterable[str] = (),
        sudden_changes: Sequence[SuddenChange] = ()
    ) -> MonitoringStats:
        """
        Daily monitoring counters for a team leader.

        Members on approved leave are excluded from the not-checked-in count.
        Checked-in counts distinct users, status counts count check-ins.

        Args:
            member_ids: Active team members
            today_checkins: Check-ins submitted today (with user_id)
            on_leave_ids: Members with an exemption covering today
            sudden_changes: Output of the change classifier for today

        Returns:
            MonitoringStats
        """
        members: Set[str] = set(member_ids)
        on_leave = set(on_leave_ids) & members
        checked_in = {_user_of(c) for c in today_checkins if _user_of(c) is not None}

        not_checked_in = len([m for m in members if m not in checked_in and m not in on_leave])

        statuses = [_status_of(c) for c in today_checkins]

        stats = MonitoringStats(
            total_members=len(members),
            active_members=len(members) - len(on_leave),
            on_leave=len(on_leave),
            checked_in=len(checked_in),
            not_checked_in=not_checked_in,
            green_count=statuses.count(ReadinessStatus.GREEN),
            yellow_count=statuses.count(ReadinessStatus.YELLOW),
            red_count=statuses.count(ReadinessStatus.RED),
            sudden_changes=len(sudden_changes),
            critical_changes=len([c for c in sudden_changes if c.severity == ChangeSeverity.CRITICAL])
        )

        logger.info(
            f"Monitoring stats: {stats.checked_in}/{stats.active_members} active members checked in, "
            f"{stats.red_count} RED, {stats.sudden_changes} sudden changes"
        )

        return stats


# Singleton instance
_team_aggregator_instance: Optional[TeamAggregator] = None


def get_team_aggregator() -> TeamAggregator:
    """Get singleton instance of TeamAggregator"""
    global _team_aggregator_instance
    if _team_aggregator_instance is None:
        _team_aggregator_instance = TeamAggregator()
    return _team_aggregator_instance
