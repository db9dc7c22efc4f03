from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..services.statuses import DefectStatus, Priority, Severity


class DefectBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    steps_to_reproduce: Optional[str] = None
    expected_result: Optional[str] = None
    actual_result: Optional[str] = None
    severity: Severity = Severity.MEDIUM
    priority: Priority = Priority.MEDIUM
    status: DefectStatus = DefectStatus.NEW
    test_case_id: Optional[int] = None
    requirement_id: Optional[int] = None
    test_execution_id: Optional[int] = None
    reported_by: str = Field(default="user", max_length=150)
    assigned_to: Optional[str] = Field(default=None, max_length=150)


class DefectCreate(DefectBase):
    pass


class DefectUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    steps_to_reproduce: Optional[str] = None
    expected_result: Optional[str] = None
    actual_result: Optional[str] = None
    severity: Optional[Severity] = None
    priority: Optional[Priority] = None
    status: Optional[DefectStatus] = None
    test_case_id: Optional[int] = None
    requirement_id: Optional[int] = None
    assigned_to: Optional[str] = Field(default=None, max_length=150)


class DefectRead(DefectBase):
    id: int
    created_at: datetime
    updated_at: datetime
