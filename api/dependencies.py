"""
FastAPI dependencies wiring the engine to the database session
"""

import random
from functools import lru_cache
from typing import AsyncGenerator
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from core.config import settings
from core.database import get_session
from impact_engine.benchmarks import FactorTables, load_factor_tables
from impact_engine.estimator import ImpactEstimator
from impact_engine.aggregator import ImpactAggregator
from impact_engine.insights import InsightGenerator
from impact_engine.repositories.base import AssessmentRepository
from impact_engine.repositories.postgres import PostgresAssessmentRepository


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


@lru_cache
def get_factor_tables() -> FactorTables:
    return load_factor_tables(settings.FACTOR_TABLES_PATH)


def get_repository(db: AsyncSession = Depends(get_db)) -> AssessmentRepository:
    return PostgresAssessmentRepository(db)


def get_estimator(
    repository: AssessmentRepository = Depends(get_repository),
    tables: FactorTables = Depends(get_factor_tables)
) -> ImpactEstimator:
    return ImpactEstimator(repository, tables, rng=random.Random(settings.ESTIMATION_RANDOM_SEED))


def get_aggregator(
    repository: AssessmentRepository = Depends(get_repository),
    tables: FactorTables = Depends(get_factor_tables)
) -> ImpactAggregator:
    return ImpactAggregator(repository, tables)


def get_insight_generator(
    repository: AssessmentRepository = Depends(get_repository),
    tables: FactorTables = Depends(get_factor_tables)
) -> InsightGenerator:
    return InsightGenerator(repository, tables)
