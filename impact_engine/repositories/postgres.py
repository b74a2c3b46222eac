"""
PostgreSQL repository with SQLAlchemy async sessions
"""

import asyncio
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from models.assessment import Assessment
from models.base import AssessmentStatus
from models.records import MaterialRecord, ProcessingRecord, TransportRecord
from models.impact_summary import ImpactSummary
from schemas.records import (
    AssessmentRead,
    MaterialRecordRead,
    ProcessingRecordRead,
    TransportRecordRead,
    ImpactSummaryRead,
)
from impact_engine.repositories.base import AssessmentRepository
from core.exceptions import PersistenceError
import logging

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = (
    "co2_emissions_tons",
    "total_energy_kwh",
    "total_water_m3",
    "total_waste_tons",
    "calculated_at",
)


class PostgresAssessmentRepository(AssessmentRepository):
    """
    Repository over a single AsyncSession.
    
    Ensures:
    - Concurrent callers never use the session at the same time
    - Each write is committed on its own
    - Failed statements roll back and surface as PersistenceError
    """
    
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self._lock = asyncio.Lock()
    
    async def _list(self, model, schema, assessment_id: int) -> list:
        async with self._lock:
            try:
                result = await self.db.execute(
                    select(model)
                    .where(model.assessment_id == assessment_id)
                    .order_by(model.id)
                )
                rows = result.scalars().all()
            except SQLAlchemyError as e:
                raise PersistenceError(
                    f"Failed to read {model.__tablename__}",
                    context={
                        "operation": "SELECT",
                        "table_name": model.__tablename__,
                        "assessment_id": assessment_id
                    },
                    original_exception=e
                )
        return [schema.model_validate(row) for row in rows]
    
    async def get_assessment(self, assessment_id: int) -> Optional[AssessmentRead]:
        async with self._lock:
            try:
                result = await self.db.execute(
                    select(Assessment).where(Assessment.id == assessment_id)
                )
                assessment = result.scalar_one_or_none()
            except SQLAlchemyError as e:
                raise PersistenceError(
                    "Failed to read assessment",
                    context={
                        "operation": "SELECT",
                        "table_name": Assessment.__tablename__,
                        "assessment_id": assessment_id
                    },
                    original_exception=e
                )
        return AssessmentRead.model_validate(assessment) if assessment else None
    
    async def list_materials(self, assessment_id: int) -> List[MaterialRecordRead]:
        return await self._list(MaterialRecord, MaterialRecordRead, assessment_id)
    
    async def list_processing(self, assessment_id: int) -> List[ProcessingRecordRead]:
        return await self._list(ProcessingRecord, ProcessingRecordRead, assessment_id)
    
    async def list_transports(self, assessment_id: int) -> List[TransportRecordRead]:
        return await self._list(TransportRecord, TransportRecordRead, assessment_id)

    async def get_summary(self, assessment_id: int) -> Optional[ImpactSummaryRead]:
        async with self._lock:
            try:
                result = await self.db.execute(
                    select(ImpactSummary).where(ImpactSummary.assessment_id == assessment_id)
                )
                summary = result.scalar_one_or_none()
            except SQLAlchemyError as e:
                raise PersistenceError(
                    "Failed to read impact summary",
                    context={
                        "operation": "SELECT",
                        "table_name": ImpactSummary.__tablename__,
                        "assessment_id": assessment_id
                    },
                    original_exception=e
                )
        return ImpactSummaryRead.model_validate(summary) if summary else None

    async def update_processing_record(
        self,
        record_id: int,
        fields: Dict[str, Any]
    ) -> ProcessingRecordRead:
        async with self._lock:
            try:
                result = await self.db.execute(
                    update(ProcessingRecord)
                    .where(ProcessingRecord.id == record_id)
                    .values(**fields)
                    .returning(ProcessingRecord)
                    .execution_options(synchronize_session=False)
                )
                record = result.scalar_one()
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                raise PersistenceError(
                    "Failed to update processing record",
                    context={
                        "operation": "UPDATE",
                        "table_name": ProcessingRecord.__tablename__,
                        "record_id": record_id
                    },
                    original_exception=e
                )
        return ProcessingRecordRead.model_validate(record)
    
    async def upsert_summary(
        self,
        assessment_id: int,
        fields: Dict[str, Any]
    ) -> Tuple[ImpactSummaryRead, bool]:
        """
        INSERT ... ON CONFLICT (assessment_id) DO UPDATE.
        
        The unique index on assessment_id makes concurrent calls converge on
        one row; the preceding SELECT only decides created vs replaced.
        """
        now = datetime.utcnow()
        values = {key: fields[key] for key in SUMMARY_FIELDS}
        
        async with self._lock:
            try:
                existing = await self.db.execute(
                    select(ImpactSummary.id).where(ImpactSummary.assessment_id == assessment_id)
                )
                created = existing.scalar_one_or_none() is None
                
                stmt = insert(ImpactSummary).values(
                    assessment_id=assessment_id,
                    created_at=now,
                    updated_at=now,
                    **values
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["assessment_id"],
                    set_={
                        "co2_emissions_tons": stmt.excluded.co2_emissions_tons,
                        "total_energy_kwh": stmt.excluded.total_energy_kwh,
                        "total_water_m3": stmt.excluded.total_water_m3,
                        "total_waste_tons": stmt.excluded.total_waste_tons,
                        "calculated_at": stmt.excluded.calculated_at,
                        "updated_at": stmt.excluded.updated_at,
                    }
                ).returning(ImpactSummary)
                
                result = await self.db.execute(
                    stmt,
                    execution_options={"populate_existing": True}
                )
                summary = result.scalar_one()
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                raise PersistenceError(
                    "Failed to upsert impact summary",
                    context={
                        "operation": "UPSERT",
                        "table_name": ImpactSummary.__tablename__,
                        "assessment_id": assessment_id
                    },
                    original_exception=e
                )
        
        logger.info(
            f"{'Inserted' if created else 'Replaced'} impact summary for assessment {assessment_id}"
        )
        return ImpactSummaryRead.model_validate(summary), created
    
    async def update_assessment_status(
        self,
        assessment_id: int,
        status: AssessmentStatus
    ) -> None:
        # Only statuses strictly before the target are moved
        earlier = [s for s in AssessmentStatus if s.can_advance_to(status)]
        if not earlier:
            return
        
        async with self._lock:
            try:
                await self.db.execute(
                    update(Assessment)
                    .where(
                        Assessment.id == assessment_id,
                        Assessment.status.in_(earlier)
                    )
                    .values(status=status, updated_at=datetime.utcnow())
                    .execution_options(synchronize_session=False)
                )
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                raise PersistenceError(
                    "Failed to update assessment status",
                    context={
                        "operation": "UPDATE",
                        "table_name": Assessment.__tablename__,
                        "assessment_id": assessment_id,
                        "status": status.value
                    },
                    original_exception=e
                )
