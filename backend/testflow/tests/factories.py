from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from .. import models
from ..utils.json import dump_list


class FixedRandom:
    """Deterministic random source: ``uniform`` returns its lower bound, ``random`` a fixed draw."""

    def __init__(self, draw: float = 0.1) -> None:
        self.draw = draw

    def uniform(self, a: float, b: float) -> float:
        return a

    def random(self) -> float:
        return self.draw


async def _save(session: AsyncSession, instance: Any) -> Any:
    session.add(instance)
    await session.commit()
    await session.refresh(instance)
    return instance


async def create_suite(session: AsyncSession, name: str = "Checkout", **fields: Any):
    return await _save(session, models.TestSuite(name=name, **fields))


async def create_requirement(session: AsyncSession, title: str = "Users can log in", **fields: Any):
    fields.setdefault("description", "Registered users sign in with email and password.")
    return await _save(session, models.Requirement(title=title, **fields))


async def create_scenario(session: AsyncSession, title: str = "Valid login", **fields: Any):
    fields.setdefault("scenario_key", "SC_REQ1_01")
    fields.setdefault("description", "Sign in with valid credentials and land on the dashboard.")
    return await _save(session, models.TestScenario(title=title, **fields))


async def create_case(session: AsyncSession, title: str = "Pay with card", **fields: Any):
    steps = fields.pop("steps", ["Open cart", "Pay with a valid card"])
    fields.setdefault("expected_result", "Order confirmed")
    return await _save(session, models.TestCase(title=title, steps=dump_list(steps), **fields))


async def create_run(session: AsyncSession, test_case_id: int, **fields: Any):
    fields.setdefault("status", "in_progress")
    return await _save(session, models.TestRun(test_case_id=test_case_id, **fields))


async def create_execution(session: AsyncSession, test_run_id: int, test_case_id: int, **fields: Any):
    return await _save(
        session, models.TestExecution(test_run_id=test_run_id, test_case_id=test_case_id, **fields)
    )
