"""SuddenChange models - Declines against a worker's trailing average"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict

from app.models.checkin import ReadinessStatus


class ChangeSeverity(str, Enum):
    """Severity tier of a score decline, mildest first"""

    MINOR = "MINOR"
    NOTABLE = "NOTABLE"
    SIGNIFICANT = "SIGNIFICANT"
    CRITICAL = "CRITICAL"


# Listing order for dashboards (CRITICAL first)
SEVERITY_ORDER = {
    ChangeSeverity.CRITICAL: 0,
    ChangeSeverity.SIGNIFICANT: 1,
    ChangeSeverity.NOTABLE: 2,
    ChangeSeverity.MINOR: 3,
}


class ChangeClassification(BaseModel):
    """Signed change from the trailing average and its severity (None if not sudden)"""

    model_config = ConfigDict(frozen=True)

    change_from_average: int
    severity: Optional[ChangeSeverity] = None

    @property
    def is_sudden(self) -> bool:
        return self.severity is not None


class SuddenChange(BaseModel):
    """A worker whose check-in today dropped sharply below their average"""

    model_config = ConfigDict(frozen=True)

    user_id: str
    checkin_id: Optional[str] = None
    today_score: int
    today_status: ReadinessStatus
    average_score: int
    change: int
    severity: ChangeSeverity

    def __repr__(self):
        return f"<SuddenChange(user={self.user_id}, change={self.change}, severity={self.severity.value})>"
