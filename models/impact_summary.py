from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from models.base import Base


class ImpactSummary(Base):
    """
    Aggregated environmental footprint of an assessment.
    
    Design:
    - At most one row per assessment (unique index on assessment_id)
    - Written only by the aggregator, always as a whole row
    - Re-computation replaces the row in place
    """
    __tablename__ = "environmental_impacts"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    assessment_id = Column(Integer, ForeignKey("assessments.id"), nullable=False)
    
    co2_emissions_tons = Column(Float, nullable=True)
    total_energy_kwh = Column(Float, nullable=True)
    total_water_m3 = Column(Float, nullable=True)
    total_waste_tons = Column(Float, nullable=True)
    
    calculated_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    assessment = relationship("Assessment", back_populates="impact_summary")
    
    __table_args__ = (
        Index("idx_impact_assessment", "assessment_id", unique=True),
    )
