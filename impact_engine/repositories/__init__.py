from impact_engine.repositories.base import AssessmentRepository
from impact_engine.repositories.memory import InMemoryAssessmentRepository
from impact_engine.repositories.postgres import PostgresAssessmentRepository

__all__ = [
    "AssessmentRepository",
    "InMemoryAssessmentRepository",
    "PostgresAssessmentRepository",
]
