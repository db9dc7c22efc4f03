from __future__ import annotations

import re

from ..models import Requirement, TestScenario

_OUTPUT_RULES = (
    "CRITICAL OUTPUT REQUIREMENTS:\n"
    "- Return ONLY valid JSON, with no code fences, comments or surrounding text\n"
    "- Output a single JSON object with exactly the structure shown below\n"
    "- Do not include any extra keys beyond those specified"
)

SCENARIO_PROMPT_TEMPLATE = """You are a senior QA analyst with 10+ years of experience in functional, integration, regression and boundary testing.

TASK: Analyse the requirement below and generate between 3 and 5 test scenarios that cover it from different testing perspectives.

REQUIREMENT DETAILS:
- Requirement ID: {identifier}
- Title: {title}
- Description: {description}

INSTRUCTIONS:
1. Each scenario must test a specific behaviour or edge case
2. Include positive and negative scenarios where applicable
3. Consider functional, boundary, error handling and integration aspects
4. Scenario IDs follow the pattern SC_{identifier}_01, SC_{identifier}_02, ...

{output_rules}

REQUIRED OUTPUT FORMAT:
{{
  "scenarios": [
    {{
      "scenario_id": "SC_{identifier}_01",
      "title": "Clear, specific scenario title",
      "description": "What the scenario tests, including preconditions, actions and expected outcomes",
      "test_type": "Functional|Integration|Regression|Security|Performance|Usability|API|UI|Database",
      "priority": "High|Medium|Low"
    }}
  ]
}}

Generate the test scenarios now:"""

TEST_CASE_PROMPT_TEMPLATE = """TASK: Analyse the test scenario below and generate detailed, executable test cases that cover it.

SCENARIO DETAILS:
- Scenario ID: {identifier}
- Title: {title}
- Description: {description}
- Test Type: {test_type}
- Priority: {priority}

INSTRUCTIONS:
1. Every test case must be executable by a QA tester following numbered, atomic steps
2. Cover the positive flow and edge or negative cases where applicable
3. Consider boundary conditions, error handling and user experience
4. Provide concrete test data values rather than placeholders

{output_rules}

REQUIRED JSON FORMAT:
{{
  "test_cases": [
    {{
      "title": "Specific test case title (max 100 characters)",
      "preconditions": "System state, permissions and data set-up required",
      "steps": ["1. First action", "2. Second action", "3. Verification"],
      "test_data": "Concrete inputs needed by the steps",
      "expected_result": "Observable outcome and success criteria"
    }}
  ]
}}

Generate the detailed test cases now:"""


def normalise_identifier(value: str) -> str:
    normalised = re.sub(r"[^A-Z0-9]", "", str(value).upper())
    if not normalised:
        raise ValueError("Identifier must contain at least one alphanumeric character.")
    return normalised


def build_scenario_prompt(requirement: Requirement) -> str:
    return SCENARIO_PROMPT_TEMPLATE.format(
        identifier=normalise_identifier(f"REQ{requirement.id}"),
        title=requirement.title,
        description=requirement.description or "No detailed description provided",
        output_rules=_OUTPUT_RULES,
    )


def build_test_case_prompt(scenario: TestScenario) -> str:
    return TEST_CASE_PROMPT_TEMPLATE.format(
        identifier=scenario.scenario_key or f"SC_{scenario.id}",
        title=scenario.title,
        description=scenario.description or "No detailed description provided",
        test_type=(scenario.test_type or "functional").capitalize(),
        priority=(scenario.priority or "medium").capitalize(),
        output_rules=_OUTPUT_RULES,
    )
