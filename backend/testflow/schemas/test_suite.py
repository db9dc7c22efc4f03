from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..services.statuses import SuiteStatus


class TestSuiteBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: SuiteStatus = SuiteStatus.ACTIVE


class TestSuiteCreate(TestSuiteBase):
    pass


class TestSuiteUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[SuiteStatus] = None


class TestSuiteRead(TestSuiteBase):
    id: int
    created_at: datetime
    updated_at: datetime


class TestSuiteWithStats(TestSuiteRead):
    total_tests: int
    passed_tests: int
    failed_tests: int
    running_tests: int
    pass_rate: int
