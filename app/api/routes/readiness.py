"""
Readiness API Endpoints

Scores check-in submissions and classifies score changes for the
check-in and dashboard collaborators.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from app.models.checkin import CheckinMetrics, ReadinessComponents, ReadinessStatus
from app.models.sudden_change import ChangeSeverity
from app.services.change_classifier import get_change_classifier
from app.services.readiness_scorer import get_readiness_scorer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/readiness", tags=["readiness"])


# Pydantic models for request/response validation


class ReadinessScoreResponse(BaseModel):
    """Readiness score for a check-in submission"""
    score: int = Field(..., ge=0, le=100)
    status: ReadinessStatus
    components: ReadinessComponents


class ReadinessScoreData(BaseModel):
    """Wrapper for readiness score data"""
    data: ReadinessScoreResponse
    metadata: Dict[str, Any]


class ClassifyRequest(BaseModel):
    """Today's score and the worker's trailing average"""
    today_score: int = Field(..., ge=0, le=100)
    trailing_average: float = Field(..., ge=0, le=100)


class ClassifyResponse(BaseModel):
    """Change classification (severity null when not a sudden change)"""
    change_from_average: int
    severity: Optional[ChangeSeverity] = None
    is_sudden_change: bool


class ClassifyData(BaseModel):
    """Wrapper for classification data"""
    data: ClassifyResponse


# API Endpoints


@router.post("/score", response_model=ReadinessScoreData)
async def score_checkin(metrics: CheckinMetrics) -> Dict[str, Any]:
    """
    Calculate readiness score and status for a check-in.

    Body:
        mood, stress, sleep, physical_health: integers 0-10

    Returns:
        - score: 0-100
        - status: GREEN (>=70), YELLOW (40-69) or RED (<40)
        - components: normalized sub-scores (stress inverted)

    Raises:
        422: A metric is missing, not an integer, or outside 0-10
    """
    try:
        scorer = get_readiness_scorer()
        result = scorer.score_checkin(metrics)

        return {
            "data": {
                "score": result.value,
                "status": result.status,
                "components": result.components
            },
            "metadata": {
                "timestamp": datetime.utcnow().isoformat()
            }
        }

    except Exception as e:
        logger.error(f"Error scoring check-in: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to calculate readiness score: {str(e)}"
        )


@router.post("/classify", response_model=ClassifyData)
async def classify_change(request: ClassifyRequest) -> Dict[str, Any]:
    """
    Classify today's score against the worker's trailing average.

    Only declines of at least the configured minimum drop get a severity;
    improvements and small dips return severity null.
    """
    try:
        classifier = get_change_classifier()
        classification = classifier.classify(request.today_score, request.trailing_average)

        return {
            "data": {
                "change_from_average": classification.change_from_average,
                "severity": classification.severity,
                "is_sudden_change": classification.is_sudden
            }
        }

    except Exception as e:
        logger.error(f"Error classifying score change: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to classify score change: {str(e)}"
        )
