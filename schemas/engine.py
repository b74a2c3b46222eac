"""
Result schemas returned by the estimator and the aggregator
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
import enum


class RunStatus(str, enum.Enum):
    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"


class SummaryResult(str, enum.Enum):
    """Whether the aggregator inserted or replaced the impact summary"""
    CREATED = "created"
    REPLACED = "replaced"


# ============================================================================
# Estimation
# ============================================================================

class RecordFailure(BaseModel):
    """A processing record whose estimated values could not be written"""
    record_id: int
    code: str
    message: str
    fields: List[str] = Field(default_factory=list)


class EstimationReport(BaseModel):
    """Outcome of one estimation run"""
    assessment_id: int
    status: RunStatus = RunStatus.SUCCESS
    estimated_count: int = Field(0, ge=0, description="Records updated with at least one estimate")
    estimated_fields: List[str] = Field(default_factory=list, description="Field names filled across all records")
    confidence_score: float = Field(..., ge=0.7, le=0.9)
    records_failed: int = 0
    failures: List[RecordFailure] = Field(default_factory=list)
    
    class Config:
        use_enum_values = True
        json_schema_extra = {
            "example": {
                "assessment_id": 1,
                "status": "success",
                "estimated_count": 2,
                "estimated_fields": ["energy_consumption_kwh", "water_usage_m3"],
                "confidence_score": 0.85,
                "records_failed": 0,
                "failures": []
            }
        }


# ============================================================================
# Aggregation
# ============================================================================

class Co2Breakdown(BaseModel):
    """CO2 contributions before rounding; not persisted"""
    material_extraction_co2_kg: float
    processing_co2_kg: float
    transportation_co2_tons: float


class ImpactComputation(BaseModel):
    """Impact summary as written by the aggregator"""
    id: Optional[int] = None
    assessment_id: int
    co2_emissions_tons: float
    total_energy_kwh: float
    total_water_m3: float
    total_waste_tons: float
    calculated_at: datetime
    result: SummaryResult
    co2_breakdown: Optional[Co2Breakdown] = None
    
    class Config:
        use_enum_values = True


# ============================================================================
# Insights
# ============================================================================

class InsightSeverity(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Insight(BaseModel):
    """One finding from comparing a summary against industry averages"""
    category: str
    severity: InsightSeverity
    title: str
    description: str
    recommendation: str
    potential_savings: str
    impact: str
    confidence: float = Field(..., ge=0, le=1)

    class Config:
        use_enum_values = True


class PriorityAction(BaseModel):
    action: str
    description: str
    expected_impact: str
    timeline: str
    complexity: str


class InsightPredictions(BaseModel):
    next_quarter_co2_tons: int = 0
    energy_savings_potential_kwh: int = 0
    cost_savings_estimate: int = 0


class InsightReport(BaseModel):
    """Benchmark comparison of an assessment's impact summary"""
    assessment_id: int
    insights: List[Insight] = Field(default_factory=list)
    overall_score: int = Field(0, ge=0, le=100)
    score_grade: Optional[str] = None
    priority_actions: List[PriorityAction] = Field(default_factory=list)
    predictions: InsightPredictions = Field(default_factory=InsightPredictions)
    generated_at: datetime
