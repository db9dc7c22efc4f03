from .defect import Defect
from .requirement import Requirement
from .test_case import TestCase
from .test_execution import TestExecution
from .test_run import TestRun
from .test_scenario import TestScenario
from .test_suite import TestSuite

__all__ = [
    "Defect",
    "Requirement",
    "TestCase",
    "TestExecution",
    "TestRun",
    "TestScenario",
    "TestSuite",
]
