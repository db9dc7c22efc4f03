from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Defect, TestCase, TestExecution, TestScenario
from ..schemas import TestExecutionRecord
from ..utils.time import utcnow
from .propagation import build_defect_fields, case_change_for_execution, should_raise_defect
from .store import create_defect, get_or_404, update_test_case

logger = logging.getLogger(__name__)


async def resolve_requirement_id(session: AsyncSession, case: Optional[TestCase]) -> Optional[int]:
    if case is None:
        return None
    if case.requirement_id is not None:
        return case.requirement_id
    if case.scenario_id is not None:
        scenario = await session.get(TestScenario, case.scenario_id)
        if scenario is not None:
            return scenario.requirement_id
    return None


async def record_execution(
    session: AsyncSession, execution_id: int, payload: TestExecutionRecord
) -> Tuple[TestExecution, Optional[Defect]]:
    """Store a manually recorded outcome and propagate it.

    The execution update is committed first and stands on its own. The case
    update follows; a failure to raise the defect is logged and reported as
    ``None`` rather than undoing the recorded outcome.
    """
    execution = await get_or_404(session, TestExecution, execution_id, "Test execution")
    now = utcnow()

    execution.actual_result = payload.actual_result
    execution.execution_status = payload.execution_status.value
    execution.evidence_url = payload.evidence_url
    execution.executed_at = now
    execution.updated_at = now
    await session.commit()

    case = await session.get(TestCase, execution.test_case_id)
    change = case_change_for_execution(payload.execution_status)
    if case is not None and change is not None:
        update_test_case(case, change.as_changes(), now=now)
        await session.commit()

    if not should_raise_defect(payload.execution_status):
        return execution, None

    try:
        requirement_id = await resolve_requirement_id(session, case)
        defect = await create_defect(
            session, build_defect_fields(case, execution, requirement_id=requirement_id)
        )
    except SQLAlchemyError:
        logger.exception(
            "Recorded failed execution %s but could not raise a defect for it", execution_id
        )
        await session.rollback()
        await session.refresh(execution)
        return execution, None

    logger.info("Raised defect %s for failed execution %s", defect.id, execution_id)
    return execution, defect
