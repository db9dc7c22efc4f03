from __future__ import annotations

from . import (
    dashboard,
    defects,
    health,
    requirements,
    test_cases,
    test_executions,
    test_runs,
    test_scenarios,
    test_suites,
)

__all__ = [
    "dashboard",
    "defects",
    "health",
    "requirements",
    "test_cases",
    "test_executions",
    "test_runs",
    "test_scenarios",
    "test_suites",
]
