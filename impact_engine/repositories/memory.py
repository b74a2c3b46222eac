"""
In-process repository for scripting and tests
"""

import asyncio
from datetime import datetime
from itertools import count
from typing import Any, Dict, List, Optional, Tuple
from models.base import AssessmentStatus
from schemas.records import (
    AssessmentRead,
    MaterialRecordRead,
    ProcessingRecordRead,
    TransportRecordRead,
    ImpactSummaryRead,
)
from impact_engine.repositories.base import AssessmentRepository
from core.exceptions import PersistenceError


class InMemoryAssessmentRepository(AssessmentRepository):
    """Dictionary-backed store with the same contract as the PostgreSQL repository"""
    
    def __init__(self):
        self.assessments: Dict[int, AssessmentRead] = {}
        self.materials: Dict[int, MaterialRecordRead] = {}
        self.processing: Dict[int, ProcessingRecordRead] = {}
        self.transports: Dict[int, TransportRecordRead] = {}
        self.summaries: Dict[int, ImpactSummaryRead] = {}
        self._ids = count(1)
        self._summary_lock = asyncio.Lock()
    
    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------
    
    def add_assessment(self, **fields) -> AssessmentRead:
        fields.setdefault("id", next(self._ids))
        fields.setdefault("project_name", f"Assessment {fields['id']}")
        assessment = AssessmentRead(**fields)
        self.assessments[assessment.id] = assessment
        return assessment
    
    def add_material(self, assessment_id: int, **fields) -> MaterialRecordRead:
        record = MaterialRecordRead(id=next(self._ids), assessment_id=assessment_id, **fields)
        self.materials[record.id] = record
        return record
    
    def add_processing(self, assessment_id: int, **fields) -> ProcessingRecordRead:
        record = ProcessingRecordRead(id=next(self._ids), assessment_id=assessment_id, **fields)
        self.processing[record.id] = record
        return record
    
    def add_transport(self, assessment_id: int, **fields) -> TransportRecordRead:
        record = TransportRecordRead(id=next(self._ids), assessment_id=assessment_id, **fields)
        self.transports[record.id] = record
        return record
    
    # ------------------------------------------------------------------
    # AssessmentRepository
    # ------------------------------------------------------------------
    
    @staticmethod
    def _owned_by(records: Dict[int, Any], assessment_id: int) -> list:
        return [records[key] for key in sorted(records) if records[key].assessment_id == assessment_id]
    
    async def get_assessment(self, assessment_id: int) -> Optional[AssessmentRead]:
        return self.assessments.get(assessment_id)
    
    async def list_materials(self, assessment_id: int) -> List[MaterialRecordRead]:
        return self._owned_by(self.materials, assessment_id)
    
    async def list_processing(self, assessment_id: int) -> List[ProcessingRecordRead]:
        return self._owned_by(self.processing, assessment_id)
    
    async def list_transports(self, assessment_id: int) -> List[TransportRecordRead]:
        return self._owned_by(self.transports, assessment_id)

    async def get_summary(self, assessment_id: int) -> Optional[ImpactSummaryRead]:
        return self.summaries.get(assessment_id)

    async def update_processing_record(
        self,
        record_id: int,
        fields: Dict[str, Any]
    ) -> ProcessingRecordRead:
        record = self.processing.get(record_id)
        if record is None:
            raise PersistenceError(
                "Processing record does not exist",
                context={"operation": "UPDATE", "table_name": "processing_data", "record_id": record_id}
            )
        updated = record.model_copy(update=fields)
        self.processing[record_id] = updated
        return updated
    
    async def upsert_summary(
        self,
        assessment_id: int,
        fields: Dict[str, Any]
    ) -> Tuple[ImpactSummaryRead, bool]:
        async with self._summary_lock:
            now = datetime.utcnow()
            existing = self.summaries.get(assessment_id)
            summary = ImpactSummaryRead(
                id=existing.id if existing else next(self._ids),
                assessment_id=assessment_id,
                created_at=existing.created_at if existing else now,
                updated_at=now,
                **fields
            )
            self.summaries[assessment_id] = summary
        return summary, existing is None
    
    async def update_assessment_status(
        self,
        assessment_id: int,
        status: AssessmentStatus
    ) -> None:
        assessment = self.assessments.get(assessment_id)
        if assessment is None or not AssessmentStatus(assessment.status).can_advance_to(status):
            return
        self.assessments[assessment_id] = assessment.model_copy(
            update={"status": status, "updated_at": datetime.utcnow()}
        )
