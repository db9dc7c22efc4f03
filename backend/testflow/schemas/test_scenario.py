from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..services.statuses import Priority


class TestScenarioBase(BaseModel):
    scenario_key: Optional[str] = Field(default=None, max_length=50)
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    requirement_id: Optional[int] = None
    module: Optional[str] = Field(default=None, max_length=100)
    test_type: str = Field(default="functional", max_length=50)
    priority: Priority = Priority.MEDIUM
    status: str = Field(default="draft", max_length=50)
    author: Optional[str] = Field(default=None, max_length=150)


class TestScenarioCreate(TestScenarioBase):
    pass


class TestScenarioUpdate(BaseModel):
    scenario_key: Optional[str] = Field(default=None, max_length=50)
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    requirement_id: Optional[int] = None
    module: Optional[str] = Field(default=None, max_length=100)
    test_type: Optional[str] = Field(default=None, max_length=50)
    priority: Optional[Priority] = None
    status: Optional[str] = Field(default=None, max_length=50)
    author: Optional[str] = Field(default=None, max_length=150)


class TestScenarioRead(TestScenarioBase):
    id: int
    created_at: datetime
    updated_at: datetime
