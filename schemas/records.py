"""
Pydantic read models for the records the engine consumes.

Repositories return these instead of ORM objects so the engine never holds
a live session-bound instance.
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from models.base import AssessmentStatus


# Imputation targets on a processing record, in estimation order
MEASUREMENT_FIELDS = (
    "energy_consumption_kwh",
    "water_usage_m3",
    "waste_generation_tons",
    "equipment_efficiency_pct",
)

class AssessmentRead(BaseModel):
    id: int
    project_name: str
    metal_type: str
    status: AssessmentStatus = AssessmentStatus.DRAFT
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True


class MaterialRecordRead(BaseModel):
    id: int
    assessment_id: int
    ore_type: Optional[str] = None
    ore_grade_pct: Optional[float] = None
    moisture_pct: Optional[float] = None
    quantity_tons: Optional[float] = None
    extraction_method: Optional[str] = None
    recycled_content_pct: Optional[float] = None
    virgin_material_pct: Optional[float] = None
    
    class Config:
        from_attributes = True


class ProcessingRecordRead(BaseModel):
    id: int
    assessment_id: int
    energy_source: Optional[str] = None
    process_type: Optional[str] = None
    energy_consumption_kwh: Optional[float] = None
    water_usage_m3: Optional[float] = None
    waste_generation_tons: Optional[float] = None
    equipment_efficiency_pct: Optional[float] = None
    ai_estimated: bool = False
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True
    
    def missing_fields(self):
        """Names of measurement fields that are still null, in estimation order"""
        return [name for name in MEASUREMENT_FIELDS if getattr(self, name) is None]


class TransportRecordRead(BaseModel):
    id: int
    assessment_id: int
    distance_km: Optional[float] = None
    mode: Optional[str] = None
    fuel_type: Optional[str] = None
    load_capacity_tons: Optional[float] = None
    
    class Config:
        from_attributes = True


class ImpactSummaryRead(BaseModel):
    id: int
    assessment_id: int
    co2_emissions_tons: float
    total_energy_kwh: float
    total_water_m3: float
    total_waste_tons: float
    calculated_at: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True
