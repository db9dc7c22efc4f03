"""Status vocabularies and the translations between them.

Each entity stores exactly one status enum. The older "simple" vocabulary
(pending/running/passed/failed on both cases and runs) is still accepted at
the HTTP boundary and mapped onto the stored values here.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple


class CaseStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    BLOCKED = "blocked"


class RunStatus(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABORTED = "aborted"


class RunResult(str, Enum):
    PASS = "pass"
    FAIL = "fail"


class ExecutionStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    BLOCKED = "blocked"
    NOT_EXECUTED = "not_executed"
    SKIP = "skip"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DefectStatus(str, Enum):
    NEW = "new"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"
    REOPENED = "reopened"


class SuiteStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


TERMINAL_RUN_STATUSES = frozenset({RunStatus.COMPLETED, RunStatus.ABORTED})

# Statuses that count as "the case was exercised" and stamp last_run.
LAST_RUN_CASE_STATUSES = frozenset(
    {CaseStatus.RUNNING, CaseStatus.PASSED, CaseStatus.FAILED, CaseStatus.BLOCKED}
)

_LEGACY_RUN_STATUSES = {
    "running": (RunStatus.IN_PROGRESS, None),
    "passed": (RunStatus.COMPLETED, RunResult.PASS),
    "failed": (RunStatus.COMPLETED, RunResult.FAIL),
    "aborted": (RunStatus.ABORTED, None),
}

_CASE_TO_EXECUTION = {
    CaseStatus.PENDING: ExecutionStatus.NOT_EXECUTED,
    CaseStatus.RUNNING: ExecutionStatus.NOT_EXECUTED,
    CaseStatus.PASSED: ExecutionStatus.PASS,
    CaseStatus.FAILED: ExecutionStatus.FAIL,
    CaseStatus.BLOCKED: ExecutionStatus.BLOCKED,
}

_EXECUTION_TO_CASE = {
    ExecutionStatus.PASS: CaseStatus.PASSED,
    ExecutionStatus.FAIL: CaseStatus.FAILED,
    ExecutionStatus.BLOCKED: CaseStatus.BLOCKED,
}

RECOGNISED_RUN_STATUS_VALUES = tuple(
    sorted(set(_LEGACY_RUN_STATUSES) | {status.value for status in RunStatus})
)


def parse_run_status(
    value: str, result: Optional[str] = None
) -> Tuple[RunStatus, Optional[RunResult]]:
    """Translate a caller-supplied run status (legacy or current) to stored values.

    Raises ``ValueError`` for unknown values, for ``completed`` without a
    result, and for a result that contradicts a legacy status.
    """
    normalised = (value or "").strip().lower()
    parsed_result = RunResult(result) if result is not None else None

    if normalised in _LEGACY_RUN_STATUSES:
        status, implied = _LEGACY_RUN_STATUSES[normalised]
        if parsed_result is not None and implied is not None and parsed_result is not implied:
            raise ValueError(f"Result '{parsed_result.value}' contradicts status '{normalised}'.")
        if status is RunStatus.COMPLETED:
            return status, implied
        return status, None

    try:
        status = RunStatus(normalised)
    except ValueError:
        allowed = ", ".join(RECOGNISED_RUN_STATUS_VALUES)
        raise ValueError(f"Unknown test run status '{value}'. Expected one of: {allowed}.") from None

    if status is RunStatus.COMPLETED:
        if parsed_result is None:
            raise ValueError("A completed test run needs a result of 'pass' or 'fail'.")
        return status, parsed_result
    return status, None


def legacy_run_status(status: str, result: Optional[str]) -> str:
    if status == RunStatus.IN_PROGRESS.value:
        return "running"
    if status == RunStatus.COMPLETED.value:
        return "passed" if result == RunResult.PASS.value else "failed"
    if status == RunStatus.ABORTED.value:
        return "aborted"
    return "pending"


def case_execution_status(status: str) -> ExecutionStatus:
    try:
        return _CASE_TO_EXECUTION[CaseStatus(status)]
    except ValueError:
        return ExecutionStatus.NOT_EXECUTED


def case_status_for_execution(status: ExecutionStatus) -> Optional[CaseStatus]:
    """Case status implied by a recorded outcome; ``None`` leaves the case alone."""
    return _EXECUTION_TO_CASE.get(status)


def case_status_for_run(status: RunStatus, result: Optional[RunResult]) -> CaseStatus:
    if status is RunStatus.IN_PROGRESS:
        return CaseStatus.RUNNING
    if status is RunStatus.COMPLETED:
        if result is None:
            raise ValueError("A completed run must carry a pass/fail result.")
        return CaseStatus.PASSED if result is RunResult.PASS else CaseStatus.FAILED
    return CaseStatus.PENDING


def is_terminal_run(status: str) -> bool:
    return status in {item.value for item in TERMINAL_RUN_STATUSES}
