from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.session import get_db
from ...models import TestSuite
from ...schemas import (
    TestCaseRead,
    TestSuiteCreate,
    TestSuiteRead,
    TestSuiteUpdate,
    TestSuiteWithStats,
)
from ...services.aggregation import suite_stats, suites_with_stats
from ...services.converters import test_case_to_read, test_suite_to_read
from ...services.store import apply_changes, get_or_404, list_all, list_cases_for_suite

router = APIRouter()


@router.get("/test-suites", response_model=List[TestSuiteRead])
async def list_test_suites(session: AsyncSession = Depends(get_db)):
    return [test_suite_to_read(suite) for suite in await list_all(session, TestSuite)]


@router.get("/test-suites/with-stats", response_model=List[TestSuiteWithStats])
async def list_test_suites_with_stats(session: AsyncSession = Depends(get_db)):
    return await suites_with_stats(session)


@router.post("/test-suites", response_model=TestSuiteRead, status_code=status.HTTP_201_CREATED)
async def create_test_suite(payload: TestSuiteCreate, session: AsyncSession = Depends(get_db)):
    suite = TestSuite(
        name=payload.name,
        description=payload.description,
        status=payload.status.value,
    )
    session.add(suite)
    await session.commit()
    await session.refresh(suite)
    return test_suite_to_read(suite)


@router.get("/test-suites/{suite_id}", response_model=TestSuiteRead)
async def get_test_suite(suite_id: int, session: AsyncSession = Depends(get_db)):
    return test_suite_to_read(await get_or_404(session, TestSuite, suite_id, "Test suite"))


@router.get("/test-suites/{suite_id}/stats", response_model=TestSuiteWithStats)
async def get_test_suite_stats(suite_id: int, session: AsyncSession = Depends(get_db)):
    suite = await get_or_404(session, TestSuite, suite_id, "Test suite")
    return await suite_stats(session, suite)


@router.get("/test-suites/{suite_id}/test-cases", response_model=List[TestCaseRead])
async def list_suite_test_cases(suite_id: int, session: AsyncSession = Depends(get_db)):
    suite = await get_or_404(session, TestSuite, suite_id, "Test suite")
    cases = await list_cases_for_suite(session, suite.id)
    return [test_case_to_read(case, suite.name) for case in cases]


@router.put("/test-suites/{suite_id}", response_model=TestSuiteRead)
async def update_test_suite(
    suite_id: int, payload: TestSuiteUpdate, session: AsyncSession = Depends(get_db)
):
    suite = await get_or_404(session, TestSuite, suite_id, "Test suite")
    apply_changes(suite, payload.model_dump(exclude_none=True))
    await session.commit()
    await session.refresh(suite)
    return test_suite_to_read(suite)


@router.delete("/test-suites/{suite_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_test_suite(suite_id: int, session: AsyncSession = Depends(get_db)):
    suite = await get_or_404(session, TestSuite, suite_id, "Test suite")
    await session.delete(suite)
    await session.commit()
