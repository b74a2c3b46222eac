"""
Estimator - fills missing processing measurements for an assessment.

For every processing record of the assessment, each null measurement is
replaced by a benchmark-based estimate:

- energy / water: 60th percentile of the metal's range × correction factor
- waste: same baseline × correction × material tonnage (1 t if unknown)
- equipment efficiency: base by extraction method ± 5 points (random)

Populated fields are never overwritten. Each record update is committed on
its own; a failed write is reported in the result instead of aborting the
remaining records.
"""

import asyncio
import random
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from core.exceptions import ImpactEngineError, InternalFailureError, AssessmentNotFoundError
from impact_engine.benchmarks import FactorTables, MetalBenchmark, DEFAULT_FACTOR_TABLES
from impact_engine.corrections import CorrectionFactors, correction_factors, base_equipment_efficiency
from impact_engine.helpers import parse_assessment_id, round_half_up
from impact_engine.repositories.base import AssessmentRepository
from schemas.engine import EstimationReport, RecordFailure, RunStatus
from schemas.records import MaterialRecordRead, ProcessingRecordRead

logger = logging.getLogger(__name__)

EFFICIENCY_SPREAD_PCT = 5.0

# Processing measurement -> MetalBenchmark range it is estimated from
BENCHMARK_RANGES = {
    "energy_consumption_kwh": "energy_consumption",
    "water_usage_m3": "water_usage",
    "waste_generation_tons": "waste_generation",
}

MAX_CONFIDENCE = 0.90
MIN_CONFIDENCE = 0.70


class ImpactEstimator:
    """
    Responsibilities:
    - Validate the assessment and resolve its benchmark
    - Estimate every null measurement on its processing records
    - Persist estimates record by record, collecting failures
    - Score how much the run relied on assumptions
    """

    def __init__(
        self,
        repository: AssessmentRepository,
        factor_tables: FactorTables = DEFAULT_FACTOR_TABLES,
        rng: Optional[random.Random] = None
    ):
        self.repository = repository
        self.tables = factor_tables
        self.rng = rng or random.Random()

    async def estimate_missing(self, assessment_id: Any) -> EstimationReport:
        """
        Estimate missing measurements for one assessment.

        Args:
            assessment_id: Positive integer (or digit string)

        Returns:
            EstimationReport with counts, touched field names and confidence

        Raises:
            InvalidIdentifierError: Identifier missing or non-numeric
            AssessmentNotFoundError: No such assessment
            UnsupportedMetalTypeError: Metal has no benchmark (nothing written)
            InternalFailureError: A read failed
        """
        assessment_id = parse_assessment_id(assessment_id)

        try:
            assessment = await self.repository.get_assessment(assessment_id)
            if assessment is None:
                raise AssessmentNotFoundError(
                    "Assessment not found",
                    context={"assessment_id": assessment_id}
                )

            materials, processing = await asyncio.gather(
                self.repository.list_materials(assessment_id),
                self.repository.list_processing(assessment_id),
            )
        except ImpactEngineError:
            raise
        except Exception as e:
            raise InternalFailureError(
                "Unexpected error while reading assessment records",
                context={"assessment_id": assessment_id},
                original_exception=e
            )

        try:
            benchmark = self.tables.benchmark_for(assessment.metal_type)
        except ImpactEngineError as e:
            e.context["assessment_id"] = assessment_id
            raise

        logger.info(
            f"Estimating assessment {assessment_id} ({assessment.metal_type}): "
            f"{len(processing)} processing records, {len(materials)} material records"
        )

        # The first material record stands in for every processing record
        material = materials[0] if materials else None
        factors = correction_factors(material)

        estimated_count = 0
        estimated_fields = set()
        failures: List[RecordFailure] = []

        for record in processing:
            updates = self.estimate_record(record, benchmark, factors, material)
            if not updates:
                continue

            fields = sorted(updates)
            updates["ai_estimated"] = True
            updates["updated_at"] = datetime.utcnow()

            try:
                await self.repository.update_processing_record(record.id, updates)
            except Exception as e:
                code = e.code if isinstance(e, ImpactEngineError) else InternalFailureError.code
                failure = RecordFailure(
                    record_id=record.id,
                    code=code,
                    message=str(e),
                    fields=fields
                )
                failures.append(failure)
                logger.error(
                    f"Failed to write estimates for processing record {record.id}: {str(e)}",
                    extra={"error_context": failure.model_dump()}
                )
                continue

            estimated_count += 1
            estimated_fields.update(fields)

        confidence = self.confidence_score(materials, processing, failed_records=len(failures))

        report = EstimationReport(
            assessment_id=assessment_id,
            status=RunStatus.PARTIAL_SUCCESS if failures else RunStatus.SUCCESS,
            estimated_count=estimated_count,
            estimated_fields=sorted(estimated_fields),
            confidence_score=confidence,
            records_failed=len(failures),
            failures=failures
        )

        logger.info(
            f"Estimation for assessment {assessment_id} finished: {report.status} - "
            f"Updated: {estimated_count}, Failed: {len(failures)}, Confidence: {confidence}"
        )
        return report

    def estimate_record(
        self,
        record: ProcessingRecordRead,
        benchmark: MetalBenchmark,
        factors: CorrectionFactors,
        material: Optional[MaterialRecordRead]
    ) -> Dict[str, float]:
        """Estimates for the null measurements of one record"""
        updates: Dict[str, float] = {}
        correction = factors.combined

        for field in record.missing_fields():
            if field == "equipment_efficiency_pct":
                base = base_equipment_efficiency(material)
                offset = self.rng.uniform(-EFFICIENCY_SPREAD_PCT, EFFICIENCY_SPREAD_PCT)
                updates[field] = round_half_up(base + offset, 2)
                continue

            baseline = self.tables.baseline(getattr(benchmark, BENCHMARK_RANGES[field]))
            if field == "waste_generation_tons":
                # Waste benchmarks are per ton of material
                quantity_tons = (material.quantity_tons if material else None) or 1.0
                updates[field] = round_half_up(baseline * correction * quantity_tons, 2)
            else:
                updates[field] = round_half_up(baseline * correction, 2)

        return updates

    @staticmethod
    def confidence_score(
        materials: List[MaterialRecordRead],
        processing: List[ProcessingRecordRead],
        failed_records: int = 0
    ) -> float:
        """
        Assessment-level confidence in [0.70, 0.90].

        Records whose write failed are the only ones still holding nulls
        after a run.
        """
        score = MAX_CONFIDENCE

        if not materials:
            score -= 0.10
        if any(not m.ore_grade_pct for m in materials):
            score -= 0.05
        if any(not m.extraction_method for m in materials):
            score -= 0.05
        if failed_records > len(processing) * 0.5:
            score -= 0.10

        score = max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, score))
        return round_half_up(score, 2)
