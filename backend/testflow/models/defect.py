from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from ..db.base import Base


class Defect(Base):
    __tablename__ = "defects"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    steps_to_reproduce = Column(Text, nullable=True)
    expected_result = Column(Text, nullable=True)
    actual_result = Column(Text, nullable=True)
    severity = Column(String(50), nullable=False, default="medium")
    priority = Column(String(50), nullable=False, default="medium")
    status = Column(String(50), nullable=False, default="new")
    test_case_id = Column(Integer, ForeignKey("test_cases.id"), nullable=True, index=True)
    requirement_id = Column(Integer, ForeignKey("requirements.id"), nullable=True)
    test_execution_id = Column(Integer, ForeignKey("test_executions.id"), nullable=True)
    reported_by = Column(String(150), nullable=False, default="system")
    assigned_to = Column(String(150), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
