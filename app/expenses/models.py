from datetime import datetime

from sqlalchemy import Column, Integer, Float, String, DateTime, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship

from app.database import Base, CategoryType
from app.constants import ExpenseStatus, enum_values


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)

    employee_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Float, nullable=False)
    category = Column(CategoryType, nullable=False)
    description = Column(String(500), nullable=False)
    date = Column(DateTime, nullable=False, default=datetime.utcnow)

    status = Column(
        Enum(ExpenseStatus, values_callable=enum_values, name="expense_status"),
        nullable=False,
        default=ExpenseStatus.PENDING,
    )
    receipt_url = Column(String, nullable=True)

    # Review metadata, written once by the approving / rejecting admin
    reviewed_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    review_notes = Column(String(500), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = relationship(
        "User",
        back_populates="expenses",
        foreign_keys=[employee_id],
    )
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])

    __table_args__ = (
        Index("ix_expenses_employee_status", "employee_id", "status"),
        Index("ix_expenses_status", "status"),
    )
