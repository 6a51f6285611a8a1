from pydantic import Field, field_validator
from typing import List, Optional
from datetime import datetime

from app.constants import Category
from app.schemas import CamelModel
from app.users.schemas import UserBrief


def _clean_period(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Please add budget period")
    return v


# ================= CREATE =================
class BudgetCreate(CamelModel):
    category: Category
    total_amount: float = Field(..., ge=0, allow_inf_nan=False)
    period: str = Field(..., max_length=100)

    @field_validator("period")
    @classmethod
    def valid_period(cls, v: str) -> str:
        return _clean_period(v)


# ================= UPDATE =================
class BudgetUpdate(CamelModel):
    category: Optional[Category] = None
    total_amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    spent_amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    period: Optional[str] = Field(None, max_length=100)

    @field_validator("category", "total_amount", "spent_amount", "period")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("period")
    @classmethod
    def valid_period(cls, v: str) -> str:
        return _clean_period(v)


# ================= RESPONSE =================
class BudgetOut(CamelModel):
    id: int
    category: Category
    total_amount: float
    spent_amount: float
    remaining_amount: float
    period: str
    created_by: Optional[UserBrief] = None
    created_at: datetime
    updated_at: datetime


class BudgetResponse(CamelModel):
    success: bool = True
    budget: BudgetOut


class BudgetListResponse(CamelModel):
    success: bool = True
    count: int
    budgets: List[BudgetOut]
