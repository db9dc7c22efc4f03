from __future__ import annotations

from typing import Optional

from ..models import Defect, Requirement, TestCase, TestExecution, TestRun, TestScenario, TestSuite
from ..schemas import (
    DefectRead,
    DefectSummary,
    RequirementRead,
    TestCaseRead,
    TestExecutionRead,
    TestRunRead,
    TestScenarioRead,
    TestSuiteRead,
)
from ..utils.json import load_string_list
from .statuses import case_execution_status, legacy_run_status


def test_suite_to_read(suite: TestSuite) -> TestSuiteRead:
    return TestSuiteRead(
        id=suite.id,
        name=suite.name,
        description=suite.description,
        status=suite.status,
        created_at=suite.created_at,
        updated_at=suite.updated_at,
    )


def requirement_to_read(requirement: Requirement) -> RequirementRead:
    return RequirementRead(
        id=requirement.id,
        title=requirement.title,
        description=requirement.description,
        module=requirement.module,
        priority=requirement.priority,
        status=requirement.status,
        author=requirement.author,
        created_at=requirement.created_at,
        updated_at=requirement.updated_at,
    )


def test_scenario_to_read(scenario: TestScenario) -> TestScenarioRead:
    return TestScenarioRead(
        id=scenario.id,
        scenario_key=scenario.scenario_key,
        title=scenario.title,
        description=scenario.description,
        requirement_id=scenario.requirement_id,
        module=scenario.module,
        test_type=scenario.test_type,
        priority=scenario.priority,
        status=scenario.status,
        author=scenario.author,
        created_at=scenario.created_at,
        updated_at=scenario.updated_at,
    )


def test_case_to_read(case: TestCase, suite_name: Optional[str] = None) -> TestCaseRead:
    return TestCaseRead(
        id=case.id,
        title=case.title,
        description=case.description,
        suite_id=case.suite_id,
        suite_name=suite_name,
        scenario_id=case.scenario_id,
        requirement_id=case.requirement_id,
        priority=case.priority,
        status=case.status,
        execution_status=case_execution_status(case.status),
        preconditions=case.preconditions,
        steps=load_string_list(case.steps),
        test_data=case.test_data,
        expected_result=case.expected_result,
        last_run=case.last_run,
        duration=case.duration,
        created_at=case.created_at,
        updated_at=case.updated_at,
    )


def test_run_to_read(run: TestRun) -> TestRunRead:
    return TestRunRead(
        id=run.id,
        test_case_id=run.test_case_id,
        status=run.status,
        result=run.result,
        legacy_status=legacy_run_status(run.status, run.result),
        start_time=run.start_time,
        end_time=run.end_time,
        duration=run.duration,
        error_message=run.error_message,
        created_at=run.created_at,
    )


def test_execution_to_read(execution: TestExecution) -> TestExecutionRead:
    return TestExecutionRead(
        id=execution.id,
        test_run_id=execution.test_run_id,
        test_case_id=execution.test_case_id,
        execution_status=execution.execution_status,
        actual_result=execution.actual_result,
        evidence_url=execution.evidence_url,
        executed_at=execution.executed_at,
        created_at=execution.created_at,
        updated_at=execution.updated_at,
    )


def defect_to_read(defect: Defect) -> DefectRead:
    return DefectRead(
        id=defect.id,
        title=defect.title,
        description=defect.description,
        steps_to_reproduce=defect.steps_to_reproduce,
        expected_result=defect.expected_result,
        actual_result=defect.actual_result,
        severity=defect.severity,
        priority=defect.priority,
        status=defect.status,
        test_case_id=defect.test_case_id,
        requirement_id=defect.requirement_id,
        test_execution_id=defect.test_execution_id,
        reported_by=defect.reported_by,
        assigned_to=defect.assigned_to,
        created_at=defect.created_at,
        updated_at=defect.updated_at,
    )


def defect_to_summary(defect: Defect) -> DefectSummary:
    return DefectSummary(id=defect.id, title=defect.title, status=defect.status)
