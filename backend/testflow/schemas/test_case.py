from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..services.statuses import CaseStatus, ExecutionStatus, Priority


class TestCaseBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    suite_id: Optional[int] = None
    scenario_id: Optional[int] = None
    requirement_id: Optional[int] = None
    priority: Priority = Priority.MEDIUM
    status: CaseStatus = CaseStatus.PENDING
    preconditions: Optional[str] = None
    steps: List[str] = Field(default_factory=list)
    test_data: Optional[str] = None
    expected_result: Optional[str] = None


class TestCaseCreate(TestCaseBase):
    pass


class TestCaseUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    suite_id: Optional[int] = None
    scenario_id: Optional[int] = None
    requirement_id: Optional[int] = None
    priority: Optional[Priority] = None
    status: Optional[CaseStatus] = None
    execution_status: Optional[ExecutionStatus] = None
    preconditions: Optional[str] = None
    steps: Optional[List[str]] = None
    test_data: Optional[str] = None
    expected_result: Optional[str] = None


class TestCaseRead(TestCaseBase):
    id: int
    execution_status: ExecutionStatus
    suite_name: Optional[str] = None
    last_run: Optional[datetime]
    duration: Optional[int]
    created_at: datetime
    updated_at: datetime
