from __future__ import annotations

from fastapi import Request

from ..services.scheduler import ExecutionScheduler


def get_scheduler(request: Request) -> ExecutionScheduler:
    return request.app.state.scheduler
