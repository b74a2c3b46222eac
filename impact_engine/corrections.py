"""
Correction factors derived from the material context of an assessment
"""

from typing import NamedTuple, Optional
from models.base import ExtractionMethod
from schemas.records import MaterialRecordRead

EXTRACTION_FACTORS = {
    ExtractionMethod.RECYCLED.value: 0.30,
    ExtractionMethod.UNDERGROUND.value: 1.20,
    ExtractionMethod.OPEN_PIT.value: 1.00,
}

BASE_EQUIPMENT_EFFICIENCY = {
    ExtractionMethod.RECYCLED.value: 85.0,
    ExtractionMethod.UNDERGROUND.value: 70.0,
}
DEFAULT_EQUIPMENT_EFFICIENCY = 75.0


class CorrectionFactors(NamedTuple):
    ore: float = 1.0
    extraction: float = 1.0
    efficiency: float = 1.0

    @property
    def combined(self) -> float:
        return self.ore * self.extraction * self.efficiency


def ore_grade_factor(ore_grade_pct: Optional[float]) -> float:
    """Lower grades need more energy per ton of metal. Missing or zero grade is neutral."""
    if not ore_grade_pct:
        return 1.0
    if ore_grade_pct < 1.0:
        return 1.30
    if ore_grade_pct < 2.0:
        return 1.15
    if ore_grade_pct > 5.0:
        return 0.85
    return 1.0


def extraction_factor(extraction_method: Optional[str]) -> float:
    return EXTRACTION_FACTORS.get((extraction_method or "").strip().lower(), 1.0)


def correction_factors(material: Optional[MaterialRecordRead]) -> CorrectionFactors:
    """Factors for a material record; no material gives neutral factors"""
    if material is None:
        return CorrectionFactors()
    
    return CorrectionFactors(
        ore=ore_grade_factor(material.ore_grade_pct),
        extraction=extraction_factor(material.extraction_method),
        efficiency=1.0,
    )


def base_equipment_efficiency(material: Optional[MaterialRecordRead]) -> float:
    """Centre of the equipment-efficiency estimate, in percent"""
    if material is None:
        return DEFAULT_EQUIPMENT_EFFICIENCY
    method = (material.extraction_method or "").strip().lower()
    return BASE_EQUIPMENT_EFFICIENCY.get(method, DEFAULT_EQUIPMENT_EFFICIENCY)
