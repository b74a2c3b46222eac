"""
Impact estimation and aggregation engine for metal LCA assessments.

Components:
    benchmarks: Benchmark ranges and emission factor tables (FactorTables)
    corrections: Ore-grade / extraction-method correction factors
    estimator: ImpactEstimator - fills missing processing measurements
    aggregator: ImpactAggregator - computes and upserts the impact summary
    insights: InsightGenerator - grades the summary against industry averages
    repositories: Persistence collaborator (PostgreSQL and in-memory)

Usage:
    from impact_engine import ImpactEstimator, ImpactAggregator
    from impact_engine.repositories import PostgresAssessmentRepository

    repository = PostgresAssessmentRepository(session)
    report = await ImpactEstimator(repository).estimate_missing(assessment_id)
    summary = await ImpactAggregator(repository).compute_impacts(assessment_id)
"""

from impact_engine.benchmarks import FactorTables, DEFAULT_FACTOR_TABLES, load_factor_tables
from impact_engine.estimator import ImpactEstimator
from impact_engine.aggregator import ImpactAggregator
from impact_engine.insights import InsightGenerator

__all__ = [
    "FactorTables",
    "DEFAULT_FACTOR_TABLES",
    "load_factor_tables",
    "ImpactEstimator",
    "ImpactAggregator",
    "InsightGenerator",
]
