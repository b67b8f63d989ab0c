"""
Team Health API Endpoints

Team Health Score, Team Grade and member risk levels for executive
dashboards and for the AI summary service's context.
"""
import logging
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, model_validator

from app.models.team_stats import TeamHealthReport
from app.services.team_health import compliance_rate, get_team_health_calculator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/teams", tags=["teams"])


# Pydantic models for request/response validation


class MemberPeriodSummary(BaseModel):
    """One member's check-in record over the reporting period"""
    user_id: str
    current_streak: int = Field(0, ge=0)
    checkin_count: int = Field(0, ge=0)
    green_count: int = Field(0, ge=0)
    yellow_count: int = Field(0, ge=0)
    red_count: int = Field(0, ge=0)
    missed_work_days: int = Field(0, ge=0)


class PeriodCheckinMetrics(BaseModel):
    """Raw metrics of a check-in within the period"""
    mood: int = Field(..., ge=0, le=10)
    stress: int = Field(..., ge=0, le=10)
    sleep: int = Field(..., ge=0, le=10)
    physical_health: int = Field(..., ge=0, le=10)


class TeamHealthRequest(BaseModel):
    """Team inputs for the health report"""
    avg_readiness: float = Field(..., ge=0, le=100)
    checked_in: int = Field(..., ge=0)
    expected: int = Field(..., ge=0)
    members: List[MemberPeriodSummary] = Field(default_factory=list)
    previous_grade_score: Optional[float] = Field(None, ge=0, le=100)
    checkins: List[PeriodCheckinMetrics] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_counts(self):
        """Reject more check-ins than expected members"""
        if self.expected > 0 and self.checked_in > self.expected:
            raise ValueError(f"checked_in ({self.checked_in}) cannot exceed expected ({self.expected})")
        return self


class MemberRisk(BaseModel):
    """Risk level for one member"""
    user_id: str
    risk_level: str = Field(..., pattern="^(low|medium|high)$")


class TeamHealthResponse(BaseModel):
    """Team health report with member risk breakdown"""
    report: TeamHealthReport
    member_risks: List[MemberRisk]
    high_risk_count: int = Field(..., ge=0)


class TeamHealthData(BaseModel):
    """Wrapper for team health data"""
    data: TeamHealthResponse


# API Endpoints


@router.post("/health", response_model=TeamHealthData)
async def get_team_health(request: TeamHealthRequest) -> Dict[str, Any]:
    """
    Build the Team Health report.

    Returns:
        - report: health score (readiness 40% + compliance 30% + consistency 30%),
          grade (readiness 60% + compliance 40%), trend and top reasons
        - member_risks: low / medium / high per member
        - high_risk_count: members at high risk

    Raises:
        422: checked_in exceeds expected, or an input is out of range
    """
    try:
        calculator = get_team_health_calculator()

        rate = compliance_rate(request.checked_in, request.expected)

        report = calculator.build_report(
            avg_readiness=request.avg_readiness,
            checkin_rate=rate,
            streaks=[m.current_streak for m in request.members],
            previous_grade_score=request.previous_grade_score,
            checkins=[c.model_dump() for c in request.checkins]
        )

        member_risks = [
            {
                "user_id": m.user_id,
                "risk_level": calculator.member_risk_level(
                    red_count=m.red_count,
                    yellow_count=m.yellow_count,
                    checkin_count=m.checkin_count,
                    missed_work_days=m.missed_work_days
                )
            }
            for m in request.members
        ]

        return {
            "data": {
                "report": report,
                "member_risks": member_risks,
                "high_risk_count": len([r for r in member_risks if r["risk_level"] == "high"])
            }
        }

    except Exception as e:
        logger.error(f"Error building team health report: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to build team health report: {str(e)}"
        )
