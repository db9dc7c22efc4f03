from __future__ import annotations

from fastapi import APIRouter

from ...services.llm import check_ai_endpoint

router = APIRouter()


@router.get("/health")
async def health_check():
    return {"status": "ok"}


@router.get("/api/ai/status")
async def get_ai_status():
    return await check_ai_endpoint()
