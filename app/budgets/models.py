from datetime import datetime

from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.database import Base, CategoryType


class Budget(Base):
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, index=True)
    # at most one budget per category
    category = Column(CategoryType, unique=True, nullable=False)
    total_amount = Column(Float, nullable=False)
    spent_amount = Column(Float, nullable=False, default=0.0)
    period = Column(String(100), nullable=False)   # e.g. "Q1 2024", "FY 2024"

    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    created_by = relationship("User")

    @property
    def remaining_amount(self) -> float:
        # Not clamped: overspent budgets go negative
        return (self.total_amount or 0.0) - (self.spent_amount or 0.0)
