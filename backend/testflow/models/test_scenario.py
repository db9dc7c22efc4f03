from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from ..db.base import Base


class TestScenario(Base):
    __tablename__ = "test_scenarios"

    id = Column(Integer, primary_key=True, index=True)
    scenario_key = Column(String(50), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    requirement_id = Column(Integer, ForeignKey("requirements.id"), nullable=True)
    module = Column(String(100), nullable=True)
    test_type = Column(String(50), nullable=False, default="functional")
    priority = Column(String(50), nullable=False, default="medium")
    status = Column(String(50), nullable=False, default="draft")
    author = Column(String(150), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
