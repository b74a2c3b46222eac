"""
Aggregator - turns the activity records of an assessment into its impact summary.

Totals:
- energy, water, waste: sums over processing records (nulls count as 0)
- CO2 (tons): (material extraction kg + processing kg) / 1000 + transport tons

Rounding is half-up: CO2 and waste to 6 decimals, energy and water to 2.
Re-running with unchanged records replaces the summary with the same values.
"""

import asyncio
from datetime import datetime
from typing import Any, List
import logging

from core.exceptions import (
    ImpactEngineError,
    InternalFailureError,
    AssessmentNotFoundError,
    InsufficientDataError,
)
from impact_engine.benchmarks import FactorTables, DEFAULT_FACTOR_TABLES
from impact_engine.helpers import parse_assessment_id, round_half_up
from impact_engine.repositories.base import AssessmentRepository
from models.base import AssessmentStatus
from schemas.engine import Co2Breakdown, ImpactComputation, SummaryResult
from schemas.records import MaterialRecordRead, ProcessingRecordRead, TransportRecordRead

logger = logging.getLogger(__name__)

CO2_PLACES = 6
WASTE_PLACES = 6
ENERGY_PLACES = 2
WATER_PLACES = 2


class ImpactAggregator:
    """Computes and upserts the single impact summary of an assessment"""

    def __init__(
        self,
        repository: AssessmentRepository,
        factor_tables: FactorTables = DEFAULT_FACTOR_TABLES
    ):
        self.repository = repository
        self.tables = factor_tables

    async def compute_impacts(self, assessment_id: Any) -> ImpactComputation:
        """
        Compute environmental totals and write the impact summary.

        Raises:
            InvalidIdentifierError: Identifier missing or non-numeric
            AssessmentNotFoundError: No such assessment
            InsufficientDataError: No material or no processing records
            InternalFailureError: A read or write failed
        """
        assessment_id = parse_assessment_id(assessment_id)

        try:
            assessment = await self.repository.get_assessment(assessment_id)
            if assessment is None:
                raise AssessmentNotFoundError(
                    "Assessment not found",
                    context={"assessment_id": assessment_id}
                )

            materials, processing, transports = await asyncio.gather(
                self.repository.list_materials(assessment_id),
                self.repository.list_processing(assessment_id),
                self.repository.list_transports(assessment_id),
            )
        except ImpactEngineError:
            raise
        except Exception as e:
            raise InternalFailureError(
                "Unexpected error while reading assessment records",
                context={"assessment_id": assessment_id},
                original_exception=e
            )

        if not materials or not processing:
            raise InsufficientDataError(
                "Insufficient data for calculations. Assessment must have material and processing data.",
                context={
                    "assessment_id": assessment_id,
                    "material_records": len(materials),
                    "processing_records": len(processing)
                }
            )

        totals = self.calculate(assessment.metal_type, materials, processing, transports)
        calculated_at = datetime.utcnow()

        summary_fields = {
            "co2_emissions_tons": totals["co2_emissions_tons"],
            "total_energy_kwh": totals["total_energy_kwh"],
            "total_water_m3": totals["total_water_m3"],
            "total_waste_tons": totals["total_waste_tons"],
            "calculated_at": calculated_at,
        }

        try:
            summary, created = await self.repository.upsert_summary(assessment_id, summary_fields)

            if assessment.status != AssessmentStatus.COMPLETED:
                await self.repository.update_assessment_status(assessment_id, AssessmentStatus.COMPLETED)
                logger.info(f"Assessment {assessment_id} marked as completed")
        except ImpactEngineError:
            raise
        except Exception as e:
            raise InternalFailureError(
                "Unexpected error while writing impact summary",
                context={"assessment_id": assessment_id},
                original_exception=e
            )

        result = SummaryResult.CREATED if created else SummaryResult.REPLACED
        logger.info(
            f"Impact summary {result.value} for assessment {assessment_id}: "
            f"CO2={summary.co2_emissions_tons}t, energy={summary.total_energy_kwh}kWh, "
            f"water={summary.total_water_m3}m3, waste={summary.total_waste_tons}t"
        )

        return ImpactComputation(
            id=summary.id,
            assessment_id=assessment_id,
            co2_emissions_tons=summary.co2_emissions_tons,
            total_energy_kwh=summary.total_energy_kwh,
            total_water_m3=summary.total_water_m3,
            total_waste_tons=summary.total_waste_tons,
            calculated_at=summary.calculated_at,
            result=result,
            co2_breakdown=totals["co2_breakdown"]
        )

    def calculate(
        self,
        metal_type: str,
        materials: List[MaterialRecordRead],
        processing: List[ProcessingRecordRead],
        transports: List[TransportRecordRead]
    ) -> dict:
        """Rounded totals plus the unrounded CO2 breakdown"""
        grid_factor = self.tables.grid_co2_kg_per_kwh

        total_energy_kwh = sum(r.energy_consumption_kwh or 0 for r in processing)
        total_water_m3 = sum(r.water_usage_m3 or 0 for r in processing)
        total_waste_tons = sum(r.waste_generation_tons or 0 for r in processing)

        total_quantity_tons = sum(m.quantity_tons or 0 for m in materials)
        material_co2_kg = total_quantity_tons * self.tables.energy_intensity_for(metal_type) * grid_factor
        processing_co2_kg = total_energy_kwh * grid_factor

        transport_co2_tons = sum(
            (t.distance_km or 0) * (t.load_capacity_tons or 0) * self.tables.transport_factor(t.mode) / 1000
            for t in transports
        )

        co2_tons = (material_co2_kg + processing_co2_kg) / 1000 + transport_co2_tons

        return {
            "co2_emissions_tons": round_half_up(co2_tons, CO2_PLACES),
            "total_energy_kwh": round_half_up(total_energy_kwh, ENERGY_PLACES),
            "total_water_m3": round_half_up(total_water_m3, WATER_PLACES),
            "total_waste_tons": round_half_up(total_waste_tons, WASTE_PLACES),
            "co2_breakdown": Co2Breakdown(
                material_extraction_co2_kg=material_co2_kg,
                processing_co2_kg=processing_co2_kg,
                transportation_co2_tons=transport_co2_tons
            ),
        }
