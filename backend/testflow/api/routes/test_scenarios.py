from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.session import get_db
from ...models import Requirement, TestScenario
from ...schemas import (
    GenerateTestCasesRequest,
    TestScenarioCreate,
    TestScenarioRead,
    TestScenarioUpdate,
)
from ...services.converters import test_scenario_to_read
from ...services.generation import generate_test_cases
from ...services.llm import CompletionFn, get_completion
from ...services.store import apply_changes, get_or_404, list_all

router = APIRouter()


@router.get("/test-scenarios", response_model=List[TestScenarioRead])
async def list_test_scenarios(session: AsyncSession = Depends(get_db)):
    return [test_scenario_to_read(item) for item in await list_all(session, TestScenario)]


@router.get("/test-scenarios/{scenario_id}", response_model=TestScenarioRead)
async def get_test_scenario(scenario_id: int, session: AsyncSession = Depends(get_db)):
    return test_scenario_to_read(await get_or_404(session, TestScenario, scenario_id, "Test scenario"))


@router.post(
    "/test-scenarios", response_model=TestScenarioRead, status_code=status.HTTP_201_CREATED
)
async def create_test_scenario(
    payload: TestScenarioCreate, session: AsyncSession = Depends(get_db)
):
    if payload.requirement_id is not None:
        await get_or_404(session, Requirement, payload.requirement_id, "Requirement")
    scenario = TestScenario()
    apply_changes(scenario, payload.model_dump())
    session.add(scenario)
    await session.commit()
    await session.refresh(scenario)
    return test_scenario_to_read(scenario)


@router.put("/test-scenarios/{scenario_id}", response_model=TestScenarioRead)
async def update_test_scenario(
    scenario_id: int, payload: TestScenarioUpdate, session: AsyncSession = Depends(get_db)
):
    scenario = await get_or_404(session, TestScenario, scenario_id, "Test scenario")
    apply_changes(scenario, payload.model_dump(exclude_none=True))
    await session.commit()
    await session.refresh(scenario)
    return test_scenario_to_read(scenario)


@router.delete("/test-scenarios/{scenario_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_test_scenario(scenario_id: int, session: AsyncSession = Depends(get_db)):
    scenario = await get_or_404(session, TestScenario, scenario_id, "Test scenario")
    await session.delete(scenario)
    await session.commit()


@router.post("/test-scenarios/{scenario_id}/generate-test-cases")
async def generate_scenario_test_cases(
    scenario_id: int,
    payload: Optional[GenerateTestCasesRequest] = Body(default=None),
    session: AsyncSession = Depends(get_db),
    complete: CompletionFn = Depends(get_completion),
):
    test_run_id = payload.test_run_id if payload is not None else None
    outcome = await generate_test_cases(session, scenario_id, complete, test_run_id=test_run_id)
    return JSONResponse(status_code=outcome.status_code, content=jsonable_encoder(outcome.body))
