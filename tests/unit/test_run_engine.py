"""
Unit tests for the command-line runner
"""

import json
import pytest
from scripts.run_engine import build_parser, run_command
from core.exceptions import AssessmentNotFoundError


def test_parser():
    args = build_parser().parse_args(["calculate", "12", "--seed", "3"])
    
    assert args.command == "calculate"
    assert args.assessment_id == "12"
    assert args.seed == 3


def test_parser_rejects_unknown_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["simulate", "12"])


@pytest.mark.asyncio
async def test_estimate_command(repository, steel_assessment):
    output = await run_command("estimate", str(steel_assessment.id), repository, seed=1)
    
    assert output["estimated_count"] == 1
    json.dumps(output)


@pytest.mark.asyncio
async def test_calculate_command(repository, complete_steel_assessment):
    output = await run_command("calculate", str(complete_steel_assessment.id), repository)
    
    assert output["result"] == "created"
    assert isinstance(output["calculated_at"], str)


@pytest.mark.asyncio
async def test_calculate_with_factor_tables_file(repository, complete_steel_assessment, tmp_path):
    path = tmp_path / "tables.json"
    path.write_text(json.dumps({
        "benchmarks": {},
        "transport_emission_factors": {"truck": 0.0},
        "energy_intensity": {"steel": 0.0},
        "grid_co2_kg_per_kwh": 0.0
    }))
    
    output = await run_command("calculate", str(complete_steel_assessment.id), repository, factor_tables_path=str(path))
    
    assert output["co2_emissions_tons"] == 0.0


@pytest.mark.asyncio
async def test_engine_errors_propagate(repository):
    with pytest.raises(AssessmentNotFoundError):
        await run_command("calculate", "77", repository)


@pytest.mark.asyncio
async def test_insights_command(repository, complete_steel_assessment):
    await run_command("calculate", str(complete_steel_assessment.id), repository)
    
    output = await run_command("insights", str(complete_steel_assessment.id), repository)
    
    assert output["overall_score"] == 73
    assert isinstance(output["generated_at"], str)
