from sqlalchemy import Column, Integer, String, Enum, DateTime, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from models.base import Base, AssessmentStatus


class Assessment(Base):
    """
    One LCA project for a single metal.

    metal_type is free text on purpose: assessments for metals without
    benchmark data must be storable so the estimator can reject them.
    """
    __tablename__ = "assessments"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    project_name = Column(String(255), nullable=False)
    metal_type = Column(String(50), nullable=False, index=True)
    status = Column(
        Enum(AssessmentStatus, values_callable=lambda e: [m.value for m in e]),
        default=AssessmentStatus.DRAFT,
        nullable=False
    )
    
    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    materials = relationship("MaterialRecord", back_populates="assessment")
    processing = relationship("ProcessingRecord", back_populates="assessment")
    transports = relationship("TransportRecord", back_populates="assessment")
    impact_summary = relationship("ImpactSummary", back_populates="assessment", uselist=False)
    
    __table_args__ = (
        Index("idx_assessment_status", "status", "updated_at"),
    )
