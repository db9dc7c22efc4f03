from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.session import get_db
from ...models import Defect
from ...schemas import DefectCreate, DefectRead, DefectUpdate
from ...services.converters import defect_to_read
from ...services.store import apply_changes, create_defect, get_or_404, list_all

router = APIRouter()


@router.get("/defects", response_model=List[DefectRead])
async def list_defects(session: AsyncSession = Depends(get_db)):
    return [defect_to_read(defect) for defect in await list_all(session, Defect)]


@router.get("/defects/{defect_id}", response_model=DefectRead)
async def get_defect(defect_id: int, session: AsyncSession = Depends(get_db)):
    return defect_to_read(await get_or_404(session, Defect, defect_id, "Defect"))


@router.post("/defects", response_model=DefectRead, status_code=status.HTTP_201_CREATED)
async def create_defect_route(payload: DefectCreate, session: AsyncSession = Depends(get_db)):
    return defect_to_read(await create_defect(session, payload.model_dump()))


@router.put("/defects/{defect_id}", response_model=DefectRead)
async def update_defect(
    defect_id: int, payload: DefectUpdate, session: AsyncSession = Depends(get_db)
):
    defect = await get_or_404(session, Defect, defect_id, "Defect")
    apply_changes(defect, payload.model_dump(exclude_none=True))
    await session.commit()
    await session.refresh(defect)
    return defect_to_read(defect)


@router.delete("/defects/{defect_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_defect(defect_id: int, session: AsyncSession = Depends(get_db)):
    defect = await get_or_404(session, Defect, defect_id, "Defect")
    await session.delete(defect)
    await session.commit()
