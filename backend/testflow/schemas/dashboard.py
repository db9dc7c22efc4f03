from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

ActivityType = Literal["test_passed", "test_failed", "test_started", "test_created"]


class DashboardStats(BaseModel):
    total_tests: int
    passed_tests: int
    failed_tests: int
    running_tests: int
    pending_tests: int


class ActivityEntry(BaseModel):
    id: str
    type: ActivityType
    test_case_name: str
    suite_name: Optional[str] = None
    timestamp: datetime
    message: str
