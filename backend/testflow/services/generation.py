from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from fastapi import status
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import AIServiceError
from ..models import Requirement, TestCase, TestExecution, TestRun, TestScenario
from ..schemas import (
    GeneratedScenario,
    GeneratedScenarioBatch,
    GeneratedTestCase,
    GeneratedTestCaseBatch,
    GenerationItemResult,
    GenerationSummary,
)
from ..utils.json import dump_list, extract_json_object
from .converters import test_case_to_read, test_scenario_to_read
from .llm import CompletionFn
from .prompts import build_scenario_prompt, build_test_case_prompt
from .statuses import CaseStatus, ExecutionStatus
from .store import get_or_404

logger = logging.getLogger(__name__)

BatchT = TypeVar("BatchT", bound=BaseModel)
ItemT = TypeVar("ItemT", bound=BaseModel)

DEFAULT_SCENARIO_MODULE = "General"


@dataclass
class GenerationOutcome:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


def parse_generated(text: str, batch_type: Type[BatchT]) -> BatchT:
    """Turn raw model output into a validated batch or raise ``AIServiceError``."""
    try:
        parsed = extract_json_object(text)
    except json.JSONDecodeError as exc:
        logger.warning("AI output was not valid JSON: %s", exc)
        raise AIServiceError(
            500,
            "AI service returned invalid JSON format",
            "The AI response could not be parsed as valid JSON. Please try again.",
        ) from exc

    try:
        return batch_type.model_validate(parsed)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        logger.warning("AI output failed validation: %s", problems)
        raise AIServiceError(
            500,
            "AI service returned invalid response format",
            f"Validation errors: {problems}",
        ) from exc


async def _persist_each(
    session: AsyncSession,
    items: Sequence[ItemT],
    build: Callable[[ItemT], Any],
    describe: Callable[[ItemT, int], GenerationItemResult],
    present: Callable[[Any], BaseModel],
    after: Optional[Callable[[Any], None]] = None,
) -> Tuple[List[BaseModel], List[GenerationItemResult]]:
    """Save every generated item in its own transaction.

    ``after`` runs once the new row has an id, inside the same transaction.
    Saved rows are converted with ``present`` straight away because a later
    rollback expires them.
    """
    created: List[BaseModel] = []
    results: List[GenerationItemResult] = []
    for index, item in enumerate(items, start=1):
        result = describe(item, index)
        try:
            primary = build(item)
            session.add(primary)
            if after is not None:
                await session.flush()
                after(primary)
            await session.commit()
            await session.refresh(primary)
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.exception("Failed to save generated item %s", result.key)
            results.append(result.model_copy(update={"status": "failed", "error": str(exc)}))
            continue
        created.append(present(primary))
        results.append(result.model_copy(update={"status": "created", "id": primary.id}))
    return created, results


def _summary(results: Sequence[GenerationItemResult]) -> GenerationSummary:
    created = sum(1 for result in results if result.status == "created")
    return GenerationSummary(total=len(results), created=created, failed=len(results) - created)


def _status_for(summary: GenerationSummary) -> int:
    if summary.created == 0:
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    if summary.failed:
        return status.HTTP_207_MULTI_STATUS
    return status.HTTP_201_CREATED


async def generate_scenarios(
    session: AsyncSession, requirement_id: int, complete: CompletionFn
) -> GenerationOutcome:
    requirement = await get_or_404(session, Requirement, requirement_id, "Requirement")
    logger.info("Generating scenarios for requirement %s", requirement.id)
    text = await complete(build_scenario_prompt(requirement))
    batch = parse_generated(text, GeneratedScenarioBatch)

    # A failed item rolls back and expires every loaded row, so read what we need now.
    owner = {"id": requirement.id, "title": requirement.title}
    module = requirement.module or DEFAULT_SCENARIO_MODULE
    author = requirement.author

    def build(item: GeneratedScenario) -> TestScenario:
        return TestScenario(
            scenario_key=item.scenario_id,
            title=item.title,
            description=item.description,
            requirement_id=owner["id"],
            module=module,
            test_type=item.test_type.lower(),
            priority=item.priority.lower(),
            status="draft",
            author=author,
        )

    def describe(item: GeneratedScenario, _: int) -> GenerationItemResult:
        return GenerationItemResult(key=item.scenario_id, title=item.title, status="failed")

    scenarios, results = await _persist_each(
        session, batch.scenarios, build, describe, test_scenario_to_read
    )
    summary = _summary(results)
    code = _status_for(summary)
    logger.info(
        "Scenario generation for requirement %s: %s created, %s failed",
        owner["id"],
        summary.created,
        summary.failed,
    )
    return GenerationOutcome(
        status_code=code,
        body={
            "message": _message(code, "scenarios"),
            "requirement": owner,
            "scenarios": scenarios,
            "results": results,
            "summary": summary,
        },
    )


async def generate_test_cases(
    session: AsyncSession,
    scenario_id: int,
    complete: CompletionFn,
    *,
    test_run_id: Optional[int] = None,
) -> GenerationOutcome:
    scenario = await get_or_404(session, TestScenario, scenario_id, "Test scenario")
    if test_run_id is not None:
        await get_or_404(session, TestRun, test_run_id, "Test run")

    logger.info("Generating test cases for scenario %s", scenario.id)
    text = await complete(build_test_case_prompt(scenario))
    batch = parse_generated(text, GeneratedTestCaseBatch)

    owner = {"id": scenario.id, "title": scenario.title}
    inherited = {
        "description": scenario.description,
        "scenario_id": scenario.id,
        "requirement_id": scenario.requirement_id,
        "priority": scenario.priority,
    }

    def enroll(case: TestCase) -> None:
        session.add(
            TestExecution(
                test_run_id=test_run_id,
                test_case_id=case.id,
                execution_status=ExecutionStatus.NOT_EXECUTED.value,
            )
        )

    def build(item: GeneratedTestCase) -> TestCase:
        return TestCase(
            title=item.title,
            **inherited,
            status=CaseStatus.PENDING.value,
            preconditions=item.preconditions,
            steps=dump_list(item.steps),
            test_data=item.test_data,
            expected_result=item.expected_result,
        )

    def describe(item: GeneratedTestCase, index: int) -> GenerationItemResult:
        return GenerationItemResult(key=f"TC_{index:02d}", title=item.title, status="failed")

    cases, results = await _persist_each(
        session,
        batch.test_cases,
        build,
        describe,
        test_case_to_read,
        after=enroll if test_run_id is not None else None,
    )
    summary = _summary(results)
    code = _status_for(summary)
    logger.info(
        "Test case generation for scenario %s: %s created, %s failed",
        owner["id"],
        summary.created,
        summary.failed,
    )
    return GenerationOutcome(
        status_code=code,
        body={
            "message": _message(code, "test cases"),
            "scenario": owner,
            "test_run_id": test_run_id,
            "test_cases": cases,
            "results": results,
            "summary": summary,
        },
    )


def _message(code: int, noun: str) -> str:
    if code == status.HTTP_201_CREATED:
        return f"Generated {noun} saved successfully"
    if code == status.HTTP_207_MULTI_STATUS:
        return f"Some generated {noun} could not be saved"
    return f"Failed to save any {noun} to database"
