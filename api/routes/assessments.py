"""
Estimation and impact calculation endpoints
"""

from fastapi import APIRouter, Depends, Request, Response, status
from api.dependencies import get_estimator, get_aggregator, get_insight_generator
from impact_engine.estimator import ImpactEstimator
from impact_engine.aggregator import ImpactAggregator
from impact_engine.insights import InsightGenerator
from schemas.engine import EstimationReport, ImpactComputation, InsightReport, SummaryResult
from schemas.api import ErrorResponse
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/assessments", tags=["Assessments"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "/{assessment_id}/estimate",
    response_model=EstimationReport,
    responses=ERROR_RESPONSES
)
async def estimate_missing(
    assessment_id: str,
    request: Request,
    estimator: ImpactEstimator = Depends(get_estimator)
):
    """
    Fill missing processing measurements from metal benchmarks.
    
    Records that already hold a value are left untouched. A record whose
    write fails is listed under `failures`; the other records are still
    updated and the status is `partial_success`.
    """
    request_id = getattr(request.state, "request_id", None)
    logger.info(f"[{request_id}] POST /assessments/{assessment_id}/estimate")
    
    return await estimator.estimate_missing(assessment_id)


@router.post(
    "/{assessment_id}/calculate",
    response_model=ImpactComputation,
    status_code=status.HTTP_201_CREATED,
    responses={**ERROR_RESPONSES, 422: {"model": ErrorResponse}}
)
async def calculate_impacts(
    assessment_id: str,
    request: Request,
    response: Response,
    aggregator: ImpactAggregator = Depends(get_aggregator)
):
    """
    Compute environmental totals and upsert the assessment's impact summary.
    
    Returns 201 when the summary is created and 200 when it replaces an
    existing one.
    """
    request_id = getattr(request.state, "request_id", None)
    logger.info(f"[{request_id}] POST /assessments/{assessment_id}/calculate")
    
    computation = await aggregator.compute_impacts(assessment_id)
    
    if computation.result == SummaryResult.REPLACED.value:
        response.status_code = status.HTTP_200_OK
    
    return computation


@router.get(
    "/{assessment_id}/insights",
    response_model=InsightReport,
    responses=ERROR_RESPONSES
)
async def get_insights(
    assessment_id: str,
    request: Request,
    generator: InsightGenerator = Depends(get_insight_generator)
):
    """
    Grade the assessment's impact summary against industry averages.
    
    Run `calculate` first; without a summary the report is empty.
    """
    request_id = getattr(request.state, "request_id", None)
    logger.info(f"[{request_id}] GET /assessments/{assessment_id}/insights")
    
    return await generator.generate_insights(assessment_id)
