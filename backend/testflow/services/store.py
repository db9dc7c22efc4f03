from __future__ import annotations

from datetime import datetime
from typing import Any, Collection, Dict, List, Optional, Type, TypeVar

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError
from ..models import Defect, TestCase, TestRun
from ..utils.json import dump_list
from ..utils.time import utcnow
from .statuses import (
    LAST_RUN_CASE_STATUSES,
    CaseStatus,
    ExecutionStatus,
    RunStatus,
    case_status_for_execution,
)

ModelT = TypeVar("ModelT")


async def get_or_404(session: AsyncSession, model: Type[ModelT], entity_id: int, label: str) -> ModelT:
    instance = await session.get(model, entity_id)
    if instance is None:
        raise NotFoundError(label)
    return instance


async def list_all(session: AsyncSession, model: Type[ModelT], *, newest_first: bool = True) -> List[ModelT]:
    order = model.created_at.desc() if newest_first else model.created_at.asc()
    result = await session.execute(select(model).order_by(order, model.id.desc()))
    return list(result.scalars().all())


async def list_runs_for_case(session: AsyncSession, test_case_id: int) -> List[TestRun]:
    result = await session.execute(
        select(TestRun)
        .where(TestRun.test_case_id == test_case_id)
        .order_by(TestRun.created_at.desc(), TestRun.id.desc())
    )
    return list(result.scalars().all())


async def list_cases_for_suite(session: AsyncSession, suite_id: int) -> List[TestCase]:
    result = await session.execute(
        select(TestCase)
        .where(TestCase.suite_id == suite_id)
        .order_by(TestCase.created_at.desc(), TestCase.id.desc())
    )
    return list(result.scalars().all())


async def find_active_runs(session: AsyncSession, test_case_id: int) -> List[TestRun]:
    result = await session.execute(
        select(TestRun)
        .where(
            TestRun.test_case_id == test_case_id,
            TestRun.status == RunStatus.IN_PROGRESS.value,
        )
        .order_by(TestRun.start_time.desc(), TestRun.id.desc())
    )
    return list(result.scalars().all())


def apply_changes(instance: Any, changes: Dict[str, Any]) -> None:
    for field, value in changes.items():
        if field == "steps" and isinstance(value, list):
            value = dump_list(value)
        setattr(instance, field, getattr(value, "value", value))


def _case_values(changes: Dict[str, Any], now: Optional[datetime]) -> Dict[str, Any]:
    now = now or utcnow()
    changes = dict(changes)
    execution_status = changes.pop("execution_status", None)
    if execution_status is not None and "status" not in changes:
        execution_status = ExecutionStatus(getattr(execution_status, "value", execution_status))
        if execution_status is ExecutionStatus.NOT_EXECUTED:
            changes["status"] = CaseStatus.PENDING
        elif case_status_for_execution(execution_status) is not None:
            changes["status"] = case_status_for_execution(execution_status)

    status = changes.get("status")
    exercised = status is not None and CaseStatus(getattr(status, "value", status)) in LAST_RUN_CASE_STATUSES
    if exercised or execution_status is not None:
        changes["last_run"] = now
    changes["updated_at"] = now
    return changes


def update_test_case(case: TestCase, changes: Dict[str, Any], *, now: Optional[datetime] = None) -> TestCase:
    """Apply ``changes`` to ``case``; the caller commits.

    ``execution_status`` is accepted as a view onto ``status`` (an explicit
    ``status`` wins). Moving the case into an exercised status, or touching
    ``execution_status`` at all, stamps ``last_run``.
    """
    apply_changes(case, _case_values(changes, now))
    return case


async def update_test_case_if_settled(
    session: AsyncSession,
    test_case_id: int,
    changes: Dict[str, Any],
    *,
    after_run_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> bool:
    """Conditional UPDATE of a case on behalf of a finished run.

    Skipped while any run of the case is in progress, or once a run newer
    than ``after_run_id`` exists. Returns False when skipped. Commits.
    """
    superseding = TestRun.status == RunStatus.IN_PROGRESS.value
    if after_run_id is not None:
        superseding = or_(superseding, TestRun.id > after_run_id)
    blocking = select(TestRun.id).where(TestRun.test_case_id == test_case_id, superseding)

    values = _case_values(changes, now)
    outcome = await session.execute(
        update(TestCase)
        .where(TestCase.id == test_case_id, ~blocking.exists())
        .values(**{key: getattr(value, "value", value) for key, value in values.items()})
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    return outcome.rowcount == 1


async def update_run_if_status(
    session: AsyncSession,
    run_id: int,
    expected: Collection[RunStatus],
    values: Dict[str, Any],
) -> bool:
    """Conditional UPDATE: write ``values`` only while the run is in ``expected``.

    Returns False when another writer moved the run first. Commits.
    """
    outcome = await session.execute(
        update(TestRun)
        .where(TestRun.id == run_id, TestRun.status.in_([item.value for item in expected]))
        .values(**{key: getattr(value, "value", value) for key, value in values.items()})
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    return outcome.rowcount == 1


async def finish_run_if_in_progress(
    session: AsyncSession,
    run_id: int,
    *,
    status: RunStatus,
    result: Optional[str],
    end_time: datetime,
    duration: Optional[int],
    error_message: Optional[str] = None,
) -> bool:
    return await update_run_if_status(
        session,
        run_id,
        (RunStatus.IN_PROGRESS,),
        {
            "status": status,
            "result": result,
            "end_time": end_time,
            "duration": duration,
            "error_message": error_message,
        },
    )


async def create_defect(session: AsyncSession, fields: Dict[str, Any]) -> Defect:
    defect = Defect(**{key: getattr(value, "value", value) for key, value in fields.items()})
    session.add(defect)
    await session.commit()
    await session.refresh(defect)
    return defect
