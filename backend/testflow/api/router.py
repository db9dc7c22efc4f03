from __future__ import annotations

from fastapi import FastAPI

from .routes import (
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

API_PREFIX = "/api"


def register_routes(app: FastAPI) -> None:
    app.include_router(dashboard.router, prefix=API_PREFIX)
    app.include_router(test_suites.router, prefix=API_PREFIX)
    app.include_router(test_cases.router, prefix=API_PREFIX)
    app.include_router(test_runs.router, prefix=API_PREFIX)
    app.include_router(test_executions.router, prefix=API_PREFIX)
    app.include_router(defects.router, prefix=API_PREFIX)
    app.include_router(requirements.router, prefix=API_PREFIX)
    app.include_router(test_scenarios.router, prefix=API_PREFIX)
    app.include_router(health.router)
