from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship

from app.database import Base
from app.constants import Role, enum_values


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    # stored lower-cased, so the unique index is case-insensitive in practice
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(
        Enum(Role, values_callable=enum_values, name="user_role"),
        nullable=False,
        default=Role.EMPLOYEE,
    )
    created_at = Column(DateTime, default=datetime.utcnow)

    expenses = relationship(
        "Expense",
        back_populates="employee",
        foreign_keys="Expense.employee_id",
    )
