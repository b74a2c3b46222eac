"""
Persistence collaborator used by the estimator and the aggregator
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple
from models.base import AssessmentStatus
from schemas.records import (
    AssessmentRead,
    MaterialRecordRead,
    ProcessingRecordRead,
    TransportRecordRead,
    ImpactSummaryRead,
)


class AssessmentRepository(ABC):
    """
    Record store keyed by assessment id.
    
    Implementations must:
    - Return records of an assessment ordered by id
    - Commit each update_processing_record call independently
    - Keep at most one impact summary per assessment
    - Never move an assessment's status backwards
    """
    
    @abstractmethod
    async def get_assessment(self, assessment_id: int) -> Optional[AssessmentRead]:
        pass
    
    @abstractmethod
    async def list_materials(self, assessment_id: int) -> List[MaterialRecordRead]:
        pass
    
    @abstractmethod
    async def list_processing(self, assessment_id: int) -> List[ProcessingRecordRead]:
        pass
    
    @abstractmethod
    async def list_transports(self, assessment_id: int) -> List[TransportRecordRead]:
        pass
    
    @abstractmethod
    async def get_summary(self, assessment_id: int) -> Optional[ImpactSummaryRead]:
        pass

    @abstractmethod
    async def update_processing_record(
        self,
        record_id: int,
        fields: Dict[str, Any]
    ) -> ProcessingRecordRead:
        pass
    
    @abstractmethod
    async def upsert_summary(
        self,
        assessment_id: int,
        fields: Dict[str, Any]
    ) -> Tuple[ImpactSummaryRead, bool]:
        """
        Insert or replace the impact summary of an assessment.
        
        Returns:
            (summary, created) where created is False when a row was replaced
        """
        pass
    
    @abstractmethod
    async def update_assessment_status(
        self,
        assessment_id: int,
        status: AssessmentStatus
    ) -> None:
        pass
