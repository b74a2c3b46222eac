"""
Pytest configuration and fixtures
"""

import random
import pytest
from unittest.mock import AsyncMock, MagicMock
from models.base import AssessmentStatus
from impact_engine.repositories.memory import InMemoryAssessmentRepository


@pytest.fixture
def repository():
    """Empty in-memory repository"""
    return InMemoryAssessmentRepository()


@pytest.fixture
def rng():
    """Seeded random source for equipment-efficiency estimates"""
    return random.Random(1234)


@pytest.fixture
def steel_assessment(repository):
    """Steel assessment with one processing record missing every measurement"""
    assessment = repository.add_assessment(
        project_name="Blast furnace line 2",
        metal_type="steel",
        status=AssessmentStatus.IN_PROGRESS
    )
    repository.add_processing(assessment.id, process_type="smelting")
    return assessment


@pytest.fixture
def aluminium_assessment(repository):
    """Aluminium assessment with low-grade recycled feedstock"""
    assessment = repository.add_assessment(
        project_name="Secondary smelter",
        metal_type="aluminium",
        status=AssessmentStatus.DRAFT
    )
    repository.add_material(
        assessment.id,
        ore_type="bauxite",
        ore_grade_pct=0.8,
        extraction_method="recycled",
        quantity_tons=100.0
    )
    repository.add_processing(assessment.id, process_type="smelting")
    return assessment


@pytest.fixture
def complete_steel_assessment(repository):
    """Steel assessment with material, processing and transport data"""
    assessment = repository.add_assessment(
        project_name="Rolling mill",
        metal_type="steel",
        status=AssessmentStatus.IN_PROGRESS
    )
    repository.add_material(
        assessment.id,
        ore_grade_pct=3.0,
        extraction_method="open_pit",
        quantity_tons=100.0
    )
    repository.add_processing(
        assessment.id,
        energy_consumption_kwh=2040.0,
        water_usage_m3=21.0,
        waste_generation_tons=0.42,
        equipment_efficiency_pct=78.0
    )
    repository.add_transport(assessment.id, distance_km=100.0, mode="truck", load_capacity_tons=20.0)
    return assessment


@pytest.fixture
def mock_session():
    """AsyncSession double for repository tests"""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def make_result():
    """Factory for SQLAlchemy Result doubles"""
    def _make_result(scalar=None, scalars=None):
        result = MagicMock()
        result.scalar_one_or_none.return_value = scalar
        result.scalar_one.return_value = scalar
        result.scalars.return_value.all.return_value = scalars or []
        return result
    return _make_result
