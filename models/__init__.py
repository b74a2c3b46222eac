"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class and shared enums (AssessmentStatus, ExtractionMethod)
    assessment: LCA projects
    records: Material, processing and transportation activity records
    impact_summary: Aggregated environmental impacts (one per assessment)

Usage:
    from models import Assessment, ProcessingRecord, ImpactSummary
    from models.base import AssessmentStatus

Relationships:
    - Assessment → MaterialRecord / ProcessingRecord / TransportRecord (one-to-many)
    - Assessment → ImpactSummary (one-to-one, enforced by unique index)
"""

from models.base import Base, AssessmentStatus, ExtractionMethod
from models.assessment import Assessment
from models.records import MaterialRecord, ProcessingRecord, TransportRecord
from models.impact_summary import ImpactSummary

__all__ = [
    "Base",
    "AssessmentStatus",
    "ExtractionMethod",
    "Assessment",
    "MaterialRecord",
    "ProcessingRecord",
    "TransportRecord",
    "ImpactSummary",
]
