"""
Pydantic schemas for data validation and serialization.

Schemas:
    records: Read models for assessments and activity records
    engine: Estimation, aggregation and insight results
    api: API-only response models (health, errors)

Usage:
    from schemas.records import ProcessingRecordRead
    from schemas.engine import EstimationReport, ImpactComputation
"""

__all__ = [
    "AssessmentRead",
    "MaterialRecordRead",
    "ProcessingRecordRead",
    "TransportRecordRead",
    "ImpactSummaryRead",
    "EstimationReport",
    "RecordFailure",
    "ImpactComputation",
    "Co2Breakdown",
    "InsightReport",
    "Insight",
    "PriorityAction",
    "HealthCheckResponse",
    "ErrorResponse",
]
