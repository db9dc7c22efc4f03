from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.session import get_db
from ...schemas import ActivityEntry, DashboardStats
from ...services.aggregation import dashboard_stats, recent_activity

router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStats)
async def get_dashboard_stats(session: AsyncSession = Depends(get_db)):
    return await dashboard_stats(session)


@router.get("/dashboard/activity", response_model=List[ActivityEntry])
async def get_recent_activity(session: AsyncSession = Depends(get_db)):
    return await recent_activity(session)
