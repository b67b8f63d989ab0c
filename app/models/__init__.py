"""Domain models for check-ins, sudden changes and team statistics"""
from app.models.checkin import (
    CheckinMetrics,
    ReadinessComponents,
    ReadinessResult,
    ReadinessStatus,
    ScoredCheckin,
)
from app.models.sudden_change import (
    SEVERITY_ORDER,
    ChangeClassification,
    ChangeSeverity,
    SuddenChange,
)
from app.models.team_stats import (
    MetricIssueCount,
    MonitoringStats,
    TeamDailyStats,
    TeamGrade,
    TeamHealthReport,
)

__all__ = [
    "CheckinMetrics",
    "ReadinessComponents",
    "ReadinessResult",
    "ReadinessStatus",
    "ScoredCheckin",
    "SEVERITY_ORDER",
    "ChangeClassification",
    "ChangeSeverity",
    "SuddenChange",
    "MetricIssueCount",
    "MonitoringStats",
    "TeamDailyStats",
    "TeamGrade",
    "TeamHealthReport",
]
