"""
Health check endpoint with database status
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from api.dependencies import get_db, get_factor_tables
from impact_engine.benchmarks import FactorTables
from schemas.api import HealthCheckResponse
from datetime import datetime
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    db: AsyncSession = Depends(get_db),
    tables: FactorTables = Depends(get_factor_tables)
):
    """
    Health check endpoint.
    
    Returns:
    - Database connectivity status
    - Metals the estimator has benchmarks for
    """
    db_connected = False
    
    try:
        await db.execute(text("SELECT 1"))
        db_connected = True
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")
    
    return HealthCheckResponse(
        status="healthy",  # validator derives the real value
        timestamp=datetime.utcnow(),
        database_connected=db_connected,
        supported_metals=tables.supported_metals
    )
