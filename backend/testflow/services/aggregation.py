from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import TestCase, TestRun, TestSuite
from ..schemas import ActivityEntry, DashboardStats, TestSuiteWithStats
from .converters import test_suite_to_read
from .statuses import CaseStatus, RunResult, RunStatus

ACTIVITY_LIMIT = 20


def pass_rate(passed: int, total: int) -> int:
    if total <= 0:
        return 0
    # Integer half-up rounding: 1 of 8 passed reads as 13%, not 12%.
    return (200 * passed + total) // (2 * total)


def compute_dashboard_stats(cases: Iterable[TestCase]) -> DashboardStats:
    cases = list(cases)
    return DashboardStats(
        total_tests=len(cases),
        passed_tests=sum(1 for case in cases if case.status == CaseStatus.PASSED.value),
        failed_tests=sum(1 for case in cases if case.status == CaseStatus.FAILED.value),
        running_tests=sum(1 for case in cases if case.status == CaseStatus.RUNNING.value),
        pending_tests=sum(1 for case in cases if case.status == CaseStatus.PENDING.value),
    )


def compute_suite_stats(suite: TestSuite, cases: Iterable[TestCase]) -> TestSuiteWithStats:
    members = [case for case in cases if case.suite_id == suite.id]
    total = len(members)
    passed = sum(1 for case in members if case.status == CaseStatus.PASSED.value)
    failed = sum(1 for case in members if case.status == CaseStatus.FAILED.value)
    running = sum(1 for case in members if case.status == CaseStatus.RUNNING.value)
    return TestSuiteWithStats(
        **test_suite_to_read(suite).model_dump(),
        total_tests=total,
        passed_tests=passed,
        failed_tests=failed,
        running_tests=running,
        pass_rate=pass_rate(passed, total),
    )


def classify_run(run: TestRun) -> str:
    if run.status == RunStatus.COMPLETED.value:
        if run.result == RunResult.PASS.value:
            return "test_passed"
        if run.result == RunResult.FAIL.value:
            return "test_failed"
    return "test_started"


_ACTIVITY_MESSAGES = {
    "test_passed": "{name} passed",
    "test_failed": "{name} failed",
    "test_started": "{name} started",
}


def activity_message(run: TestRun, kind: str, name: str) -> str:
    if run.status == RunStatus.IN_PROGRESS.value:
        return f"{name} running"
    return _ACTIVITY_MESSAGES[kind].format(name=name)


def build_recent_activity(
    runs: Sequence[TestRun],
    cases: Sequence[TestCase],
    suites: Sequence[TestSuite],
    *,
    created: Optional[Sequence[TestCase]] = None,
    limit: int = ACTIVITY_LIMIT,
) -> List[ActivityEntry]:
    """Rebuild the activity feed from run history and case creation times.

    ``cases`` names the runs; ``created`` (all of ``cases`` by default) are the
    cases that contribute a "test_created" entry.
    """
    cases_by_id: Dict[int, TestCase] = {case.id: case for case in cases}
    suite_names: Dict[int, str] = {suite.id: suite.name for suite in suites}

    def suite_name_for(case: Optional[TestCase]) -> Optional[str]:
        if case is None or case.suite_id is None:
            return None
        return suite_names.get(case.suite_id)

    recent_runs = sorted(runs, key=lambda run: (run.start_time, run.id), reverse=True)[:limit]
    entries: List[ActivityEntry] = []
    for run in recent_runs:
        case = cases_by_id.get(run.test_case_id) if run.test_case_id is not None else None
        name = case.title if case is not None else "Unknown test case"
        kind = classify_run(run)
        entries.append(
            ActivityEntry(
                id=f"run-{run.id}",
                type=kind,
                test_case_name=name,
                suite_name=suite_name_for(case),
                timestamp=run.start_time,
                message=activity_message(run, kind, name),
            )
        )

    for case in cases if created is None else created:
        entries.append(
            ActivityEntry(
                id=f"case-{case.id}",
                type="test_created",
                test_case_name=case.title,
                suite_name=suite_name_for(case),
                timestamp=case.created_at,
                message=f'New test case created: "{case.title}"',
            )
        )

    entries.sort(key=lambda entry: entry.timestamp, reverse=True)
    return entries[:limit]


async def _all(session: AsyncSession, model) -> list:
    result = await session.execute(select(model))
    return list(result.scalars().all())


async def dashboard_stats(session: AsyncSession) -> DashboardStats:
    return compute_dashboard_stats(await _all(session, TestCase))


async def suites_with_stats(session: AsyncSession) -> List[TestSuiteWithStats]:
    result = await session.execute(
        select(TestSuite).order_by(TestSuite.created_at.desc(), TestSuite.id.desc())
    )
    suites = result.scalars().all()
    cases = await _all(session, TestCase)
    return [compute_suite_stats(suite, cases) for suite in suites]


async def suite_stats(session: AsyncSession, suite: TestSuite) -> TestSuiteWithStats:
    result = await session.execute(select(TestCase).where(TestCase.suite_id == suite.id))
    return compute_suite_stats(suite, result.scalars().all())


async def recent_activity(session: AsyncSession, limit: int = ACTIVITY_LIMIT) -> List[ActivityEntry]:
    runs_result = await session.execute(
        select(TestRun).order_by(TestRun.start_time.desc(), TestRun.id.desc()).limit(limit)
    )
    cases_result = await session.execute(
        select(TestCase).order_by(TestCase.created_at.desc(), TestCase.id.desc()).limit(limit)
    )
    runs = list(runs_result.scalars().all())
    recent_cases = list(cases_result.scalars().all())

    # Runs may point at older cases than the newest ``limit`` ones.
    known = {case.id for case in recent_cases}
    missing = {run.test_case_id for run in runs if run.test_case_id is not None} - known
    linked_cases: List[TestCase] = []
    if missing:
        linked_result = await session.execute(select(TestCase).where(TestCase.id.in_(missing)))
        linked_cases = list(linked_result.scalars().all())

    suites = await _all(session, TestSuite)
    return build_recent_activity(
        runs, recent_cases + linked_cases, suites, created=recent_cases, limit=limit
    )
