"""Check-in models - Daily wellness survey metrics and readiness results"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ReadinessStatus(str, Enum):
    """Tri-state banding of a readiness score"""

    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"


class CheckinMetrics(BaseModel):
    """Self-reported wellness metrics, each an integer 0-10"""

    model_config = ConfigDict(frozen=True, strict=True)

    mood: int = Field(..., ge=0, le=10)
    stress: int = Field(..., ge=0, le=10)
    sleep: int = Field(..., ge=0, le=10)
    physical_health: int = Field(..., ge=0, le=10)


class ReadinessComponents(BaseModel):
    """Normalized 0-100 sub-scores (stress already inverted)"""

    model_config = ConfigDict(frozen=True)

    mood: int = Field(..., ge=0, le=100)
    stress: int = Field(..., ge=0, le=100)
    sleep: int = Field(..., ge=0, le=100)
    physical_health: int = Field(..., ge=0, le=100)


class ReadinessResult(BaseModel):
    """Readiness score with its status band"""

    model_config = ConfigDict(frozen=True)

    value: int = Field(..., ge=0, le=100)
    status: ReadinessStatus
    components: Optional[ReadinessComponents] = None


class ScoredCheckin(BaseModel):
    """A persisted check-in as supplied by the dashboard collaborator"""

    model_config = ConfigDict(frozen=True)

    status: ReadinessStatus
    score: int = Field(..., ge=0, le=100)
    user_id: Optional[str] = None
    checkin_id: Optional[str] = None
