"""
Unit tests for the aggregator
"""

import pytest
from unittest.mock import AsyncMock
from impact_engine.aggregator import ImpactAggregator
from models.base import AssessmentStatus
from schemas.engine import SummaryResult
from core.exceptions import (
    AssessmentNotFoundError,
    InsufficientDataError,
    InternalFailureError,
    InvalidIdentifierError,
)


class TestComputeImpacts:

    @pytest.mark.asyncio
    async def test_totals(self, repository, complete_steel_assessment):
        aggregator = ImpactAggregator(repository)

        computation = await aggregator.compute_impacts(complete_steel_assessment.id)

        assert computation.total_energy_kwh == pytest.approx(2040.0)
        assert computation.total_water_m3 == pytest.approx(21.0)
        assert computation.total_waste_tons == pytest.approx(0.42)
        # (100 t * 2 kWh/kg * 0.5 + 2040 kWh * 0.5) / 1000 + 0.178
        assert computation.co2_emissions_tons == pytest.approx(1.298)
        assert computation.result == SummaryResult.CREATED
        assert computation.assessment_id == complete_steel_assessment.id

        breakdown = computation.co2_breakdown
        assert breakdown.material_extraction_co2_kg == pytest.approx(100.0)
        assert breakdown.processing_co2_kg == pytest.approx(1020.0)
        assert breakdown.transportation_co2_tons == pytest.approx(0.178)

    @pytest.mark.asyncio
    async def test_single_truck_leg(self, repository):
        assessment = repository.add_assessment(metal_type="copper")
        repository.add_material(assessment.id, quantity_tons=0)
        repository.add_processing(assessment.id, energy_consumption_kwh=0)
        repository.add_transport(assessment.id, distance_km=100, mode="truck", load_capacity_tons=20)

        computation = await ImpactAggregator(repository).compute_impacts(assessment.id)

        assert computation.co2_emissions_tons == pytest.approx(0.178)

    @pytest.mark.asyncio
    async def test_transport_modes_are_additive(self, repository):
        assessment = repository.add_assessment(metal_type="copper")
        repository.add_material(assessment.id)
        repository.add_processing(assessment.id)
        repository.add_transport(assessment.id, distance_km=1000, mode="rail", load_capacity_tons=10)
        repository.add_transport(assessment.id, distance_km=1000, mode="ship", load_capacity_tons=10)
        repository.add_transport(assessment.id, distance_km=1000, mode="barge", load_capacity_tons=10)

        computation = await ImpactAggregator(repository).compute_impacts(assessment.id)

        # 0.22 + 0.15 + 0.89 (unknown mode uses the truck factor)
        assert computation.co2_emissions_tons == pytest.approx(1.26)

    @pytest.mark.asyncio
    async def test_nulls_count_as_zero(self, repository):
        assessment = repository.add_assessment(metal_type="aluminium")
        repository.add_material(assessment.id, quantity_tons=None)
        repository.add_material(assessment.id, quantity_tons=2.0)
        repository.add_processing(assessment.id, energy_consumption_kwh=None, water_usage_m3=5.5)
        repository.add_processing(assessment.id, energy_consumption_kwh=100.0, waste_generation_tons=None)
        repository.add_transport(assessment.id, distance_km=None, mode="truck", load_capacity_tons=10)

        computation = await ImpactAggregator(repository).compute_impacts(assessment.id)

        assert computation.total_energy_kwh == pytest.approx(100.0)
        assert computation.total_water_m3 == pytest.approx(5.5)
        assert computation.total_waste_tons == 0
        # (2 t * 17.5 * 0.5 + 100 * 0.5) / 1000
        assert computation.co2_emissions_tons == pytest.approx(0.0675)

    @pytest.mark.asyncio
    async def test_unknown_metal_uses_default_energy_intensity(self, repository):
        assessment = repository.add_assessment(metal_type="titanium")
        repository.add_material(assessment.id, quantity_tons=1000.0)
        repository.add_processing(assessment.id)

        computation = await ImpactAggregator(repository).compute_impacts(assessment.id)

        # 1000 t * 2 kWh/kg * 0.5 / 1000
        assert computation.co2_emissions_tons == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_rounding(self, repository):
        assessment = repository.add_assessment(metal_type="steel")
        repository.add_material(assessment.id)
        repository.add_processing(
            assessment.id,
            energy_consumption_kwh=10.125,
            water_usage_m3=0.375,
            waste_generation_tons=0.1234567
        )

        computation = await ImpactAggregator(repository).compute_impacts(assessment.id)

        assert computation.total_energy_kwh == 10.13
        assert computation.total_water_m3 == 0.38
        assert computation.total_waste_tons == pytest.approx(0.123457)
        assert computation.co2_emissions_tons == pytest.approx(0.0050625, abs=1e-6)

    @pytest.mark.asyncio
    async def test_marks_assessment_completed(self, repository, complete_steel_assessment):
        await ImpactAggregator(repository).compute_impacts(complete_steel_assessment.id)

        assessment = await repository.get_assessment(complete_steel_assessment.id)
        assert assessment.status == AssessmentStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_completed_assessment_is_not_updated(self, repository):
        assessment = repository.add_assessment(metal_type="steel", status=AssessmentStatus.COMPLETED)
        repository.add_material(assessment.id, quantity_tons=1.0)
        repository.add_processing(assessment.id, energy_consumption_kwh=1.0)
        repository.update_assessment_status = AsyncMock()

        await ImpactAggregator(repository).compute_impacts(assessment.id)

        repository.update_assessment_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_recomputation_is_idempotent(self, repository, complete_steel_assessment):
        aggregator = ImpactAggregator(repository)

        first = await aggregator.compute_impacts(complete_steel_assessment.id)
        second = await aggregator.compute_impacts(complete_steel_assessment.id)

        assert first.result == SummaryResult.CREATED
        assert second.result == SummaryResult.REPLACED
        assert second.id == first.id
        for field in ("co2_emissions_tons", "total_energy_kwh", "total_water_m3", "total_waste_tons"):
            assert getattr(second, field) == getattr(first, field)
        assert len(repository.summaries) == 1

    @pytest.mark.asyncio
    async def test_accepts_string_identifier(self, repository, complete_steel_assessment):
        computation = await ImpactAggregator(repository).compute_impacts(str(complete_steel_assessment.id))

        assert computation.assessment_id == complete_steel_assessment.id


class TestAggregatorErrors:

    @pytest.mark.asyncio
    async def test_no_materials_is_insufficient_data(self, repository):
        assessment = repository.add_assessment(metal_type="steel", status=AssessmentStatus.IN_PROGRESS)
        repository.add_processing(assessment.id, energy_consumption_kwh=100.0)

        with pytest.raises(InsufficientDataError) as exc_info:
            await ImpactAggregator(repository).compute_impacts(assessment.id)

        assert exc_info.value.code == "INSUFFICIENT_DATA"
        assert exc_info.value.status_code == 422
        assert exc_info.value.context["material_records"] == 0
        assert repository.summaries == {}
        assert (await repository.get_assessment(assessment.id)).status == AssessmentStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_no_processing_is_insufficient_data(self, repository):
        assessment = repository.add_assessment(metal_type="steel")
        repository.add_material(assessment.id, quantity_tons=10.0)

        with pytest.raises(InsufficientDataError):
            await ImpactAggregator(repository).compute_impacts(assessment.id)

    @pytest.mark.asyncio
    async def test_insufficient_data_is_not_not_found(self, repository):
        assessment = repository.add_assessment(metal_type="steel")

        with pytest.raises(InsufficientDataError) as exc_info:
            await ImpactAggregator(repository).compute_impacts(assessment.id)

        assert not isinstance(exc_info.value, AssessmentNotFoundError)

    @pytest.mark.asyncio
    async def test_assessment_not_found(self, repository):
        with pytest.raises(AssessmentNotFoundError):
            await ImpactAggregator(repository).compute_impacts(404)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_id", ["twelve", "²", "①"])
    async def test_invalid_identifier(self, repository, raw_id):
        with pytest.raises(InvalidIdentifierError):
            await ImpactAggregator(repository).compute_impacts(raw_id)

    @pytest.mark.asyncio
    async def test_write_failure_is_internal_failure(self, repository, complete_steel_assessment):
        repository.upsert_summary = AsyncMock(side_effect=RuntimeError("connection dropped"))

        with pytest.raises(InternalFailureError):
            await ImpactAggregator(repository).compute_impacts(complete_steel_assessment.id)
