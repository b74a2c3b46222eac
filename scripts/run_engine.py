"""
Run an engine operation for one assessment from the command line.

    python scripts/run_engine.py estimate 12
    python scripts/run_engine.py calculate 12
    python scripts/run_engine.py insights 12
"""

import argparse
import asyncio
import json
import random
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from core.config import settings
from core.exceptions import ImpactEngineError
from core.logging import setup_logging
from impact_engine.benchmarks import load_factor_tables
from impact_engine.estimator import ImpactEstimator
from impact_engine.aggregator import ImpactAggregator
from impact_engine.insights import InsightGenerator
from impact_engine.repositories.base import AssessmentRepository
from impact_engine.repositories.postgres import PostgresAssessmentRepository

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Metal LCA impact engine")
    parser.add_argument("command", choices=["estimate", "calculate", "insights"])
    parser.add_argument("assessment_id")
    parser.add_argument(
        "--factor-tables",
        default=settings.FACTOR_TABLES_PATH,
        help="JSON file with alternate benchmark and emission factor tables"
    )
    parser.add_argument("--seed", type=int, default=settings.ESTIMATION_RANDOM_SEED)
    return parser


async def run_command(
    command: str,
    assessment_id: str,
    repository: AssessmentRepository,
    factor_tables_path=None,
    seed=None
) -> dict:
    """Run one engine operation and return its JSON-serializable result"""
    tables = load_factor_tables(factor_tables_path)
    
    if command == "estimate":
        estimator = ImpactEstimator(repository, tables, rng=random.Random(seed))
        result = await estimator.estimate_missing(assessment_id)
    elif command == "insights":
        result = await InsightGenerator(repository, tables).generate_insights(assessment_id)
    else:
        aggregator = ImpactAggregator(repository, tables)
        result = await aggregator.compute_impacts(assessment_id)
    
    return result.model_dump(mode="json")


async def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    AsyncSessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    
    try:
        async with AsyncSessionLocal() as session:
            repository = PostgresAssessmentRepository(session)
            output = await run_command(
                args.command,
                args.assessment_id,
                repository,
                factor_tables_path=args.factor_tables,
                seed=args.seed
            )
        print(json.dumps(output, indent=2))
        return 0
    
    except ImpactEngineError as e:
        logger.error(f"{args.command} failed: {e}")
        print(json.dumps(e.to_dict(), indent=2, default=str), file=sys.stderr)
        return 1
    finally:
        await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    sys.exit(asyncio.run(main()))
