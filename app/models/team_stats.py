"""Team statistics models - Daily aggregates and team health figures"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class TeamDailyStats(BaseModel):
    """Status counts, check-in rate and average score for one team-day"""

    model_config = ConfigDict(frozen=True)

    green_count: int = Field(..., ge=0)
    yellow_count: int = Field(..., ge=0)
    red_count: int = Field(..., ge=0)
    team_size: int = Field(..., ge=0)
    checked_in_count: int = Field(..., ge=0)
    checkin_rate: int = Field(..., ge=0)
    average_score: int = Field(..., ge=0, le=100)


class MonitoringStats(BaseModel):
    """Team leader's daily monitoring counters"""

    model_config = ConfigDict(frozen=True)

    total_members: int = Field(..., ge=0)
    active_members: int = Field(..., ge=0)
    on_leave: int = Field(..., ge=0)
    checked_in: int = Field(..., ge=0)
    not_checked_in: int = Field(..., ge=0)
    green_count: int = Field(..., ge=0)
    yellow_count: int = Field(..., ge=0)
    red_count: int = Field(..., ge=0)
    sudden_changes: int = Field(..., ge=0)
    critical_changes: int = Field(..., ge=0)


class TeamGrade(BaseModel):
    """Letter grade for a team score"""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0)
    letter: str
    label: str
    color: str


class MetricIssueCount(BaseModel):
    """How often a metric crossed its problem threshold"""

    model_config = ConfigDict(frozen=True)

    reason: str
    label: str
    count: int = Field(..., ge=0)


class TeamHealthReport(BaseModel):
    """Composite team figures handed to dashboards and the AI summary service"""

    model_config = ConfigDict(frozen=True)

    health_score: int = Field(..., ge=0)
    avg_readiness: int = Field(..., ge=0)
    checkin_rate: int = Field(..., ge=0)
    consistency_score: int = Field(..., ge=0)
    grade: Optional[TeamGrade] = None
    trend: str = Field(..., pattern="^(up|down|stable)$")
    score_delta: float
    top_reasons: List[MetricIssueCount] = Field(default_factory=list)
