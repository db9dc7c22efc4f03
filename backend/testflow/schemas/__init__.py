from .dashboard import ActivityEntry, DashboardStats
from .defect import DefectCreate, DefectRead, DefectUpdate
from .generation import (
    GenerateTestCasesRequest,
    GeneratedScenario,
    GeneratedScenarioBatch,
    GeneratedTestCase,
    GeneratedTestCaseBatch,
    GenerationItemResult,
    GenerationSummary,
)
from .requirement import RequirementCreate, RequirementRead, RequirementUpdate
from .test_case import TestCaseCreate, TestCaseRead, TestCaseUpdate
from .test_execution import (
    DefectSummary,
    TestExecutionCreate,
    TestExecutionRead,
    TestExecutionRecord,
    TestExecutionRecordResponse,
)
from .test_run import (
    RunStartResponse,
    RunStopResponse,
    TestRunCreate,
    TestRunRead,
    TestRunUpdate,
)
from .test_scenario import TestScenarioCreate, TestScenarioRead, TestScenarioUpdate
from .test_suite import TestSuiteCreate, TestSuiteRead, TestSuiteUpdate, TestSuiteWithStats

__all__ = [
    "ActivityEntry",
    "DashboardStats",
    "DefectCreate",
    "DefectRead",
    "DefectSummary",
    "DefectUpdate",
    "GenerateTestCasesRequest",
    "GeneratedScenario",
    "GeneratedScenarioBatch",
    "GeneratedTestCase",
    "GeneratedTestCaseBatch",
    "GenerationItemResult",
    "GenerationSummary",
    "RequirementCreate",
    "RequirementRead",
    "RequirementUpdate",
    "RunStartResponse",
    "RunStopResponse",
    "TestCaseCreate",
    "TestCaseRead",
    "TestCaseUpdate",
    "TestExecutionCreate",
    "TestExecutionRead",
    "TestExecutionRecord",
    "TestExecutionRecordResponse",
    "TestRunCreate",
    "TestRunRead",
    "TestRunUpdate",
    "TestScenarioCreate",
    "TestScenarioRead",
    "TestScenarioUpdate",
    "TestSuiteCreate",
    "TestSuiteRead",
    "TestSuiteUpdate",
    "TestSuiteWithStats",
]
