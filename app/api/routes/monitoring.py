"""
Daily Monitoring API Endpoints

Team leader's daily view: team statistics, sudden changes compared with each
worker's 7-day average, and leave-aware check-in counts.

Check-ins and history are supplied by the caller; nothing is fetched here.
"""
import logging
import time
from datetime import date
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from app.models.checkin import ReadinessStatus, ScoredCheckin
from app.models.sudden_change import ChangeSeverity, SuddenChange
from app.models.team_stats import MonitoringStats, TeamDailyStats
from app.services.change_classifier import get_change_classifier
from app.services.team_aggregator import get_team_aggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/monitoring", tags=["monitoring"])


# Pydantic models for request/response validation


class TodayCheckin(BaseModel):
    """A check-in submitted on the monitored day"""
    user_id: str
    checkin_id: Optional[str] = None
    score: int = Field(..., ge=0, le=100)
    status: ReadinessStatus


class HistoricalCheckin(BaseModel):
    """A prior check-in used for the trailing average"""
    user_id: str
    score: float = Field(..., ge=0, le=100)
    checkin_date: date


class DailyStatsRequest(BaseModel):
    """Check-ins for one team-day and the roster size"""
    checkins: List[ScoredCheckin]
    team_size: int = Field(..., ge=0)


class DailyStatsData(BaseModel):
    """Wrapper for daily stats"""
    data: TeamDailyStats


class SuddenChangesRequest(BaseModel):
    """Today's check-ins with the team's recent history"""
    date: date
    today_checkins: List[TodayCheckin]
    history: List[HistoricalCheckin] = Field(default_factory=list)


class SuddenChangesResponse(BaseModel):
    """Sudden changes sorted by severity"""
    changes: List[SuddenChange]
    total: int
    critical_count: int
    significant_count: int


class SuddenChangesData(BaseModel):
    """Wrapper for sudden changes"""
    data: SuddenChangesResponse
    metadata: Dict[str, Any]


class MonitoringOverviewRequest(BaseModel):
    """Everything needed for the team leader's daily overview"""
    date: date
    member_ids: List[str]
    on_leave_ids: List[str] = Field(default_factory=list)
    today_checkins: List[TodayCheckin]
    history: List[HistoricalCheckin] = Field(default_factory=list)


class MonitoringOverviewResponse(BaseModel):
    """Monitoring counters plus the sudden change list"""
    stats: MonitoringStats
    daily_stats: TeamDailyStats
    sudden_changes: List[SuddenChange]


class MonitoringOverviewData(BaseModel):
    """Wrapper for monitoring overview"""
    data: MonitoringOverviewResponse
    metadata: Dict[str, Any]


def _detect(request_date: date, today_checkins: List[TodayCheckin], history: List[HistoricalCheckin]) -> List[SuddenChange]:
    classifier = get_change_classifier()
    return classifier.detect_sudden_changes(
        today_checkins=[c.model_dump() for c in today_checkins],
        history=[h.model_dump() for h in history],
        reference_date=request_date
    )


# API Endpoints


@router.post("/daily-stats", response_model=DailyStatsData)
async def get_daily_stats(request: DailyStatsRequest) -> Dict[str, Any]:
    """
    Aggregate one team-day of check-ins (status counts, check-in rate, average score).

    An empty roster or an empty day returns zeros rather than failing.
    """
    try:
        aggregator = get_team_aggregator()
        stats = aggregator.aggregate(request.checkins, request.team_size)
        return {"data": stats}

    except Exception as e:
        logger.error(f"Error aggregating daily stats: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to aggregate daily stats: {str(e)}"
        )


@router.post("/sudden-changes", response_model=SuddenChangesData)
async def get_sudden_changes(request: SuddenChangesRequest) -> Dict[str, Any]:
    """
    Detect sudden readiness declines for the requested day.

    Workers need at least 3 check-ins in the 7 days before the date to have
    a baseline. Results are sorted CRITICAL, SIGNIFICANT, NOTABLE, MINOR.
    """
    try:
        start_time = time.time()

        changes = _detect(request.date, request.today_checkins, request.history)

        calculation_time_ms = (time.time() - start_time) * 1000

        return {
            "data": {
                "changes": changes,
                "total": len(changes),
                "critical_count": len([c for c in changes if c.severity == ChangeSeverity.CRITICAL]),
                "significant_count": len([c for c in changes if c.severity == ChangeSeverity.SIGNIFICANT])
            },
            "metadata": {
                "date": request.date.isoformat(),
                "calculation_time_ms": round(calculation_time_ms, 2)
            }
        }

    except Exception as e:
        logger.error(f"Error detecting sudden changes: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to detect sudden changes: {str(e)}"
        )


@router.post("/overview", response_model=MonitoringOverviewData)
async def get_monitoring_overview(request: MonitoringOverviewRequest) -> Dict[str, Any]:
    """
    Team leader's daily monitoring overview.

    Returns:
        - stats: member, leave and check-in counters
        - daily_stats: status counts and rates against the full roster
        - sudden_changes: declines sorted by severity
    """
    try:
        aggregator = get_team_aggregator()

        changes = _detect(request.date, request.today_checkins, request.history)
        checkins = [c.model_dump() for c in request.today_checkins]

        stats = aggregator.build_monitoring_stats(
            member_ids=request.member_ids,
            today_checkins=checkins,
            on_leave_ids=request.on_leave_ids,
            sudden_changes=changes
        )
        daily_stats = aggregator.aggregate(checkins, len(set(request.member_ids)))

        return {
            "data": {
                "stats": stats,
                "daily_stats": daily_stats,
                "sudden_changes": changes
            },
            "metadata": {
                "date": request.date.isoformat()
            }
        }

    except Exception as e:
        logger.error(f"Error building monitoring overview: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to build monitoring overview: {str(e)}"
        )
