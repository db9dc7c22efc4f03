from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

TestType = Literal[
    "Functional",
    "Integration",
    "Regression",
    "Security",
    "Performance",
    "Usability",
    "API",
    "UI",
    "Database",
]


class GeneratedScenario(BaseModel):
    scenario_id: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=10)
    test_type: TestType
    priority: Literal["High", "Medium", "Low"]


class GeneratedScenarioBatch(BaseModel):
    scenarios: List[GeneratedScenario] = Field(..., min_length=1, max_length=10)


class GeneratedTestCase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    preconditions: Optional[str] = None
    steps: List[str] = Field(..., min_length=1)
    test_data: Optional[str] = None
    expected_result: str = Field(..., min_length=1)


class GeneratedTestCaseBatch(BaseModel):
    test_cases: List[GeneratedTestCase] = Field(..., min_length=1, max_length=20)


class GenerateTestCasesRequest(BaseModel):
    test_run_id: Optional[int] = None


class GenerationItemResult(BaseModel):
    key: str
    title: str
    status: Literal["created", "failed"]
    id: Optional[int] = None
    error: Optional[str] = None


class GenerationSummary(BaseModel):
    total: int
    created: int
    failed: int
