"""Decision logic that turns a finished run or a recorded outcome into writes.

Nothing in this module touches the database. Callers fetch the entities,
ask what should change, and persist the answer themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..models import TestCase, TestExecution
from ..utils.json import format_steps
from .statuses import (
    CaseStatus,
    DefectStatus,
    ExecutionStatus,
    Priority,
    RunResult,
    RunStatus,
    Severity,
    case_status_for_execution,
    case_status_for_run,
)

SYSTEM_REPORTER = "system"
DEFAULT_DEFECT_TITLE = "Untitled test case"
DEFAULT_DEFECT_DESCRIPTION = "Test execution failed without a recorded actual result."
SIMULATED_FAILURE_MESSAGE = "Test execution failed due to assertion error"
FALLBACK_FAILURE_MESSAGE = "Test execution timed out or failed to complete"


@dataclass(frozen=True)
class CaseChange:
    status: CaseStatus
    duration: Optional[int] = None

    def as_changes(self) -> Dict[str, Any]:
        changes: Dict[str, Any] = {"status": self.status}
        if self.duration is not None:
            changes["duration"] = self.duration
        return changes


def case_change_for_run(
    status: RunStatus, result: Optional[RunResult], duration: Optional[int]
) -> CaseChange:
    """What a run in ``status`` means for its test case.

    Aborted and planned runs reset the case to pending; an abort is not a failure.
    """
    return CaseChange(status=case_status_for_run(status, result), duration=duration)


def case_change_for_execution(status: ExecutionStatus) -> Optional[CaseChange]:
    case_status = case_status_for_execution(status)
    if case_status is None:
        return None
    return CaseChange(status=case_status)


def should_raise_defect(status: ExecutionStatus) -> bool:
    return status is ExecutionStatus.FAIL


def build_defect_fields(
    case: Optional[TestCase],
    execution: TestExecution,
    *,
    requirement_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Fields for the defect raised by a failed execution."""
    case_title = case.title if case is not None and case.title else DEFAULT_DEFECT_TITLE
    actual = (execution.actual_result or "").strip()

    priority = Priority.MEDIUM
    if case is not None and case.priority:
        try:
            priority = Priority(case.priority)
        except ValueError:
            priority = Priority.MEDIUM

    return {
        "title": f"Test failure: {case_title}",
        "description": actual or DEFAULT_DEFECT_DESCRIPTION,
        "steps_to_reproduce": format_steps(case.steps) if case is not None else "",
        "expected_result": case.expected_result if case is not None else None,
        "actual_result": actual or None,
        "severity": Severity.MEDIUM,
        "priority": priority,
        "status": DefectStatus.NEW,
        "test_case_id": execution.test_case_id,
        "requirement_id": requirement_id,
        "test_execution_id": execution.id,
        "reported_by": SYSTEM_REPORTER,
    }
