from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..services.statuses import Priority


class RequirementBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    module: Optional[str] = Field(default=None, max_length=100)
    priority: Priority = Priority.MEDIUM
    status: str = Field(default="draft", max_length=50)
    author: Optional[str] = Field(default=None, max_length=150)


class RequirementCreate(RequirementBase):
    pass


class RequirementUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    module: Optional[str] = Field(default=None, max_length=100)
    priority: Optional[Priority] = None
    status: Optional[str] = Field(default=None, max_length=50)
    author: Optional[str] = Field(default=None, max_length=150)


class RequirementRead(RequirementBase):
    id: int
    created_at: datetime
    updated_at: datetime
