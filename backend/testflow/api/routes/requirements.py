from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.session import get_db
from ...models import Requirement
from ...schemas import RequirementCreate, RequirementRead, RequirementUpdate
from ...services.converters import requirement_to_read
from ...services.generation import generate_scenarios
from ...services.llm import CompletionFn, get_completion
from ...services.store import apply_changes, get_or_404, list_all

router = APIRouter()


@router.get("/requirements", response_model=List[RequirementRead])
async def list_requirements(session: AsyncSession = Depends(get_db)):
    return [requirement_to_read(item) for item in await list_all(session, Requirement)]


@router.get("/requirements/{requirement_id}", response_model=RequirementRead)
async def get_requirement(requirement_id: int, session: AsyncSession = Depends(get_db)):
    return requirement_to_read(await get_or_404(session, Requirement, requirement_id, "Requirement"))


@router.post("/requirements", response_model=RequirementRead, status_code=status.HTTP_201_CREATED)
async def create_requirement(payload: RequirementCreate, session: AsyncSession = Depends(get_db)):
    requirement = Requirement()
    apply_changes(requirement, payload.model_dump())
    session.add(requirement)
    await session.commit()
    await session.refresh(requirement)
    return requirement_to_read(requirement)


@router.put("/requirements/{requirement_id}", response_model=RequirementRead)
async def update_requirement(
    requirement_id: int, payload: RequirementUpdate, session: AsyncSession = Depends(get_db)
):
    requirement = await get_or_404(session, Requirement, requirement_id, "Requirement")
    apply_changes(requirement, payload.model_dump(exclude_none=True))
    await session.commit()
    await session.refresh(requirement)
    return requirement_to_read(requirement)


@router.delete("/requirements/{requirement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_requirement(requirement_id: int, session: AsyncSession = Depends(get_db)):
    requirement = await get_or_404(session, Requirement, requirement_id, "Requirement")
    await session.delete(requirement)
    await session.commit()


@router.post("/requirements/{requirement_id}/generate-scenarios")
async def generate_requirement_scenarios(
    requirement_id: int,
    session: AsyncSession = Depends(get_db),
    complete: CompletionFn = Depends(get_completion),
):
    outcome = await generate_scenarios(session, requirement_id, complete)
    return JSONResponse(status_code=outcome.status_code, content=jsonable_encoder(outcome.body))
