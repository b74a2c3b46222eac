from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from models.base import Base


class MaterialRecord(Base):
    """
    Raw material input for an assessment.
    
    Every measurement is nullable; data entry is often partial.
    """
    __tablename__ = "material_data"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    assessment_id = Column(Integer, ForeignKey("assessments.id"), nullable=False, index=True)
    
    ore_type = Column(String(100), nullable=True)
    ore_grade_pct = Column(Float, nullable=True)
    moisture_pct = Column(Float, nullable=True)
    quantity_tons = Column(Float, nullable=True)
    extraction_method = Column(String(50), nullable=True)  # "open_pit", "underground", "recycled"
    recycled_content_pct = Column(Float, nullable=True)
    virgin_material_pct = Column(Float, nullable=True)
    
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    assessment = relationship("Assessment", back_populates="materials")


class ProcessingRecord(Base):
    """
    Energy and process information for an assessment.
    
    The four measurement columns are the estimator's imputation targets;
    ai_estimated marks records touched by the latest estimation run.
    """
    __tablename__ = "processing_data"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    assessment_id = Column(Integer, ForeignKey("assessments.id"), nullable=False, index=True)
    
    energy_source = Column(String(100), nullable=True)
    process_type = Column(String(50), nullable=True)  # "crushing", "grinding", "smelting", "refining"
    
    # Measurements
    energy_consumption_kwh = Column(Float, nullable=True)
    water_usage_m3 = Column(Float, nullable=True)
    waste_generation_tons = Column(Float, nullable=True)
    equipment_efficiency_pct = Column(Float, nullable=True)
    
    ai_estimated = Column(Boolean, nullable=False, default=False)
    
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    assessment = relationship("Assessment", back_populates="processing")


class TransportRecord(Base):
    """Logistics leg for an assessment"""
    __tablename__ = "transportation_data"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    assessment_id = Column(Integer, ForeignKey("assessments.id"), nullable=False, index=True)
    
    distance_km = Column(Float, nullable=True)
    mode = Column(String(20), nullable=True)  # "truck", "rail", "ship"
    fuel_type = Column(String(50), nullable=True)
    load_capacity_tons = Column(Float, nullable=True)
    
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    assessment = relationship("Assessment", back_populates="transports")
