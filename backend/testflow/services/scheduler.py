from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import TestCase, TestRun
from ..utils.time import duration_ms, utcnow
from .propagation import (
    FALLBACK_FAILURE_MESSAGE,
    SIMULATED_FAILURE_MESSAGE,
    CaseChange,
    case_change_for_run,
)
from .statuses import CaseStatus, RunResult, RunStatus
from .store import (
    find_active_runs,
    finish_run_if_in_progress,
    get_or_404,
    update_test_case,
    update_test_case_if_settled,
)

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncSession]


class ExecutionScheduler:
    """Simulates test-case executions on cancellable timers.

    A run is created ``in_progress`` and completes after a random delay with
    a random pass/fail outcome. Timers are keyed by run id. Completion always
    re-checks the stored run status before writing, so a run that was stopped
    (or finished by hand) while its timer was firing is left alone.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        min_delay_ms: float = 2000,
        max_delay_ms: float = 10000,
        pass_probability: float = 0.8,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if min_delay_ms < 0 or max_delay_ms < min_delay_ms:
            raise ValueError("Execution delay range must satisfy 0 <= min <= max.")
        self._session_factory = session_factory
        self._min_delay_ms = min_delay_ms
        self._max_delay_ms = max_delay_ms
        self._pass_probability = pass_probability
        self._rng = rng or random.Random()
        self._clock = clock
        self._timers: Dict[int, asyncio.Task[None]] = {}
        self._inflight: Set[asyncio.Task[None]] = set()

    @property
    def pending_run_ids(self) -> List[int]:
        return sorted(self._timers)

    async def start_execution(self, test_case_id: int) -> TestRun:
        async with self._session_factory() as session:
            case = await get_or_404(session, TestCase, test_case_id, "Test case")
            now = self._clock()

            # One run in flight per case: supersede whatever is still running.
            for active in await find_active_runs(session, case.id):
                await self._abort_run(session, active, now)
                logger.info("Aborted test run %s superseded by a new run of case %s", active.id, case.id)

            delay_ms = self._rng.uniform(self._min_delay_ms, self._max_delay_ms)
            run = TestRun(
                test_case_id=case.id,
                status=RunStatus.IN_PROGRESS.value,
                start_time=now,
                deadline_at=now + timedelta(milliseconds=delay_ms),
            )
            session.add(run)
            update_test_case(case, {"status": CaseStatus.RUNNING}, now=now)
            await session.commit()
            await session.refresh(run)

        self._arm(run.id, delay_ms / 1000)
        logger.info("Started test run %s for case %s (%.0f ms)", run.id, test_case_id, delay_ms)
        return run

    async def stop_execution(self, test_case_id: int) -> Optional[TestRun]:
        """Abort the in-flight run of a case, if any, and reset the case to pending.

        The reset happens even when nothing was running.
        """
        aborted: Optional[TestRun] = None
        async with self._session_factory() as session:
            case = await get_or_404(session, TestCase, test_case_id, "Test case")
            now = self._clock()
            for active in await find_active_runs(session, case.id):
                if await self._abort_run(session, active, now):
                    aborted = active
            # A run started concurrently keeps the case running.
            await update_test_case_if_settled(session, case.id, {"status": CaseStatus.PENDING}, now=now)
            if aborted is not None:
                await session.refresh(aborted)

        if aborted is not None:
            logger.info("Stopped test run %s for case %s", aborted.id, test_case_id)
        return aborted

    async def reconcile_orphaned_runs(self) -> int:
        """Re-arm timers for simulated runs left in progress by a previous process."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(TestRun).where(
                    TestRun.status == RunStatus.IN_PROGRESS.value,
                    TestRun.deadline_at.is_not(None),
                )
            )
            runs = list(result.scalars().all())

        now = self._clock()
        rearmed = 0
        for run in runs:
            if run.id in self._timers:
                continue
            remaining = max(0.0, (run.deadline_at - now).total_seconds())
            self._arm(run.id, remaining)
            rearmed += 1
        if rearmed:
            logger.info("Re-armed %s orphaned test run(s)", rearmed)
        return rearmed

    async def drain(self) -> None:
        """Wait until every armed timer has fired or been cancelled."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    async def shutdown(self) -> None:
        for run_id in list(self._timers):
            self._cancel_timer(run_id)
        await self.drain()

    def _arm(self, run_id: int, delay_seconds: float) -> None:
        task = asyncio.create_task(self._fire_after(run_id, delay_seconds))
        self._timers[run_id] = task
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    def _cancel_timer(self, run_id: int) -> None:
        task = self._timers.pop(run_id, None)
        if task is not None and not task.done():
            task.cancel()

    async def _fire_after(self, run_id: int, delay_seconds: float) -> None:
        await asyncio.sleep(delay_seconds)
        # Past this point the timer is no longer cancellable.
        if self._timers.get(run_id) is asyncio.current_task():
            del self._timers[run_id]
        await self._complete_run(run_id)

    async def _abort_run(self, session: AsyncSession, run: TestRun, now: datetime) -> bool:
        self._cancel_timer(run.id)
        return await finish_run_if_in_progress(
            session,
            run.id,
            status=RunStatus.ABORTED,
            result=None,
            end_time=now,
            duration=duration_ms(run.start_time, now),
        )

    async def _complete_run(self, run_id: int) -> None:
        try:
            async with self._session_factory() as session:
                run = await session.get(TestRun, run_id)
                if run is None or run.status != RunStatus.IN_PROGRESS.value:
                    logger.debug("Ignoring stale timer for test run %s", run_id)
                    return

                passed = self._rng.random() < self._pass_probability
                result = RunResult.PASS if passed else RunResult.FAIL
                end_time = self._clock()
                duration = duration_ms(run.start_time, end_time)
                finished = await finish_run_if_in_progress(
                    session,
                    run_id,
                    status=RunStatus.COMPLETED,
                    result=result.value,
                    end_time=end_time,
                    duration=duration,
                    error_message=None if passed else SIMULATED_FAILURE_MESSAGE,
                )
                if not finished:
                    logger.debug("Test run %s finished elsewhere before completion", run_id)
                    return

                change = case_change_for_run(RunStatus.COMPLETED, result, duration)
                await self._apply_case_change(session, run, change, end_time)
                logger.info("Test run %s completed: %s (%s ms)", run_id, result.value, duration)
        except Exception:
            logger.exception("Failed to complete test run %s; forcing a failed result", run_id)
            await self._fail_run(run_id)

    async def _fail_run(self, run_id: int) -> None:
        try:
            async with self._session_factory() as session:
                run = await session.get(TestRun, run_id)
                if run is None or run.status != RunStatus.IN_PROGRESS.value:
                    return
                end_time = self._clock()
                duration = duration_ms(run.start_time, end_time)
                finished = await finish_run_if_in_progress(
                    session,
                    run_id,
                    status=RunStatus.COMPLETED,
                    result=RunResult.FAIL.value,
                    end_time=end_time,
                    duration=duration,
                    error_message=FALLBACK_FAILURE_MESSAGE,
                )
                if finished:
                    change = CaseChange(status=CaseStatus.FAILED, duration=duration)
                    await self._apply_case_change(session, run, change, end_time)
        except Exception:
            logger.exception("Fallback completion for test run %s failed", run_id)

    async def _apply_case_change(
        self, session: AsyncSession, run: TestRun, change: CaseChange, now: datetime
    ) -> None:
        if run.test_case_id is None:
            return
        applied = await update_test_case_if_settled(
            session, run.test_case_id, change.as_changes(), after_run_id=run.id, now=now
        )
        if not applied:
            logger.info(
                "Test run %s finished but case %s has moved on; leaving the case alone",
                run.id,
                run.test_case_id,
            )
