"""
Benchmark ranges and emission factor tables.

A FactorTables instance is built once and injected into the estimator and
the aggregator. The built-in values are DEFAULT_FACTOR_TABLES; an alternate
set can be loaded from a JSON file with the same shape.
"""

from pathlib import Path
from typing import Dict, Optional
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator, model_validator
from core.exceptions import UnsupportedMetalTypeError, FactorTableError
import logging

logger = logging.getLogger(__name__)


def normalize_key(value: Optional[str]) -> str:
    """Lookup key for metal types and transport modes"""
    return (value or "").strip().lower()


class BenchmarkRange(BaseModel):
    """[min, max] envelope for one measurement, per ton of metal"""
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    
    class Config:
        frozen = True
    
    @model_validator(mode="after")
    def check_order(self):
        if self.max < self.min:
            raise ValueError(f"benchmark max {self.max} is below min {self.min}")
        return self
    
    def percentile(self, fraction: float) -> float:
        return self.min + (self.max - self.min) * fraction


class MetalBenchmark(BaseModel):
    energy_consumption: BenchmarkRange  # kWh/ton
    water_usage: BenchmarkRange  # m3/ton
    waste_generation: BenchmarkRange  # tons/ton
    
    class Config:
        frozen = True


class IndustryBenchmark(BaseModel):
    """Industry-average performance of a metal, used to grade an impact summary"""
    co2_tons_per_ton: float = Field(..., gt=0)
    energy_kwh_per_ton: float = Field(..., gt=0)
    recycling_target_pct: float = Field(..., ge=0, le=100)

    class Config:
        frozen = True


class FactorTables(BaseModel):
    """
    Read-only configuration shared by the engine components.
    
    Attributes:
        benchmarks: metal type -> measurement ranges (estimator)
        transport_emission_factors: mode -> kg CO2 per ton-km (aggregator)
        energy_intensity: metal type -> kWh per kg of material (aggregator)
        grid_co2_kg_per_kwh: grid-average emission factor
        baseline_percentile: position inside a benchmark range used as baseline
        fallback_transport_mode: mode whose factor applies to unknown modes
        default_energy_intensity: intensity for metals missing from energy_intensity
        industry_benchmarks: metal type -> industry averages (insights)
    """
    benchmarks: Dict[str, MetalBenchmark]
    transport_emission_factors: Dict[str, float]
    energy_intensity: Dict[str, float]
    industry_benchmarks: Dict[str, IndustryBenchmark] = Field(default_factory=dict)
    grid_co2_kg_per_kwh: float = 0.5
    baseline_percentile: float = Field(0.6, ge=0, le=1)
    fallback_transport_mode: str = "truck"
    default_energy_intensity: float = 2.0
    
    class Config:
        frozen = True
    
    @field_validator(
        "benchmarks", "transport_emission_factors", "energy_intensity", "industry_benchmarks",
        mode="before"
    )
    @classmethod
    def normalize_keys(cls, v):
        if isinstance(v, dict):
            return {normalize_key(k): value for k, value in v.items()}
        return v
    
    @model_validator(mode="after")
    def check_fallback_mode(self):
        if normalize_key(self.fallback_transport_mode) not in self.transport_emission_factors:
            raise ValueError(
                f"fallback transport mode '{self.fallback_transport_mode}' has no emission factor"
            )
        return self
    
    @property
    def supported_metals(self):
        return sorted(self.benchmarks)
    
    def benchmark_for(self, metal_type: str) -> MetalBenchmark:
        """Benchmark ranges for a metal; unknown metals are an error"""
        benchmark = self.benchmarks.get(normalize_key(metal_type))
        if benchmark is None:
            raise UnsupportedMetalTypeError(
                f"Unsupported metal type: {metal_type}",
                context={"metal_type": metal_type, "supported": self.supported_metals}
            )
        return benchmark
    
    def baseline(self, benchmark_range: BenchmarkRange) -> float:
        return benchmark_range.percentile(self.baseline_percentile)
    
    def transport_factor(self, mode: Optional[str]) -> float:
        """kg CO2 per ton-km; unknown or missing modes use the fallback mode"""
        factor = self.transport_emission_factors.get(normalize_key(mode))
        if factor is None:
            return self.transport_emission_factors[normalize_key(self.fallback_transport_mode)]
        return factor
    
    def energy_intensity_for(self, metal_type: str) -> float:
        """kWh per kg; unknown metals silently use default_energy_intensity"""
        return self.energy_intensity.get(normalize_key(metal_type), self.default_energy_intensity)

    def industry_benchmark_for(self, metal_type: str) -> Optional[IndustryBenchmark]:
        """Industry averages for a metal, or None when there are none"""
        return self.industry_benchmarks.get(normalize_key(metal_type))


DEFAULT_FACTOR_TABLES = FactorTables(
    benchmarks={
        "aluminium": MetalBenchmark(
            energy_consumption=BenchmarkRange(min=15000, max=18000),
            water_usage=BenchmarkRange(min=300, max=500),
            waste_generation=BenchmarkRange(min=0.1, max=0.2),
        ),
        "copper": MetalBenchmark(
            energy_consumption=BenchmarkRange(min=3000, max=4500),
            water_usage=BenchmarkRange(min=200, max=400),
            waste_generation=BenchmarkRange(min=0.8, max=1.2),
        ),
        "steel": MetalBenchmark(
            energy_consumption=BenchmarkRange(min=1800, max=2200),
            water_usage=BenchmarkRange(min=15, max=25),
            waste_generation=BenchmarkRange(min=0.3, max=0.5),
        ),
    },
    transport_emission_factors={
        "truck": 0.089,
        "rail": 0.022,
        "ship": 0.015,
    },
    energy_intensity={
        "aluminium": 17.5,  # 15-20 kWh/kg
        "copper": 4.0,  # 3-5 kWh/kg
        "steel": 2.0,  # 1.5-2.5 kWh/kg
    },
    industry_benchmarks={
        "aluminium": IndustryBenchmark(co2_tons_per_ton=11.5, energy_kwh_per_ton=15500, recycling_target_pct=65),
        "copper": IndustryBenchmark(co2_tons_per_ton=4.2, energy_kwh_per_ton=3800, recycling_target_pct=55),
        "steel": IndustryBenchmark(co2_tons_per_ton=2.3, energy_kwh_per_ton=2000, recycling_target_pct=70),
    },
)


def load_factor_tables(path: Optional[str] = None) -> FactorTables:
    """
    Load factor tables from a JSON file, or return the built-in tables.
    
    Raises:
        FactorTableError: If the file is unreadable or does not match the schema
    """
    if not path:
        return DEFAULT_FACTOR_TABLES
    
    file_path = Path(path)
    try:
        tables = FactorTables.model_validate_json(file_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise FactorTableError(
            "Failed to read factor tables file",
            context={"path": str(file_path)},
            original_exception=e
        )
    except PydanticValidationError as e:
        raise FactorTableError(
            "Factor tables file does not match the expected schema",
            context={"path": str(file_path), "errors": e.error_count()},
            original_exception=e
        )
    
    logger.info(f"Loaded factor tables from {file_path} (metals: {', '.join(tables.supported_metals)})")
    return tables
